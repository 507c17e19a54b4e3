"""Enrichment pipeline: a second, flag-driven strategy pass over a file map.

The structure mirrors ``procgen.engine.registry``: strategies are ordered by
``priority`` (ties keep registration order) and applied one at a time to a
single map owned by the run.  The differences are the ``(stack, flags)``
predicate, the introspection view handed to ``apply``, and the rule that a
strategy may only delete the paths it declares in ``removes``.
"""

from __future__ import annotations

import abc
from typing import Any, Iterable, Mapping, Optional

from pydantic import BaseModel, Field

from procgen.engine.errors import StrategyFailure
from procgen.engine.registry import FileMap, check_written_paths
from procgen.engine.rng import SeededRNG
from procgen.enrichment.introspector import ProjectIntrospector
from procgen.matrices import DEFAULT_MATRIX, CompatibilityMatrix
from procgen.models import EnrichmentFlags, Stack
from procgen.templates import TemplateRenderer
from procgen.utils import dump_json, python_identifier, sanitize_name


# ---------------------------------------------------------------------------
# Context
# ---------------------------------------------------------------------------


class EnrichmentContext:
    """State handed to each enrichment strategy's ``apply``.

    Attributes:
        stack: The resolved stack.
        flags: Active enrichment flags.
        files: The live file map for this run (a copy of the caller's map).
        introspect: Read-only view over ``files``.
        rng: Generator forked from the run seed.
        project_name: Name the base map was generated under.
        renderer: In-memory Jinja2 renderer.
        matrix: Compatibility tables (images, default ports).
    """

    def __init__(
        self,
        stack: Stack,
        flags: EnrichmentFlags,
        files: FileMap,
        rng: SeededRNG,
        project_name: str,
        renderer: Optional[TemplateRenderer] = None,
        matrix: CompatibilityMatrix = DEFAULT_MATRIX,
    ) -> None:
        self.stack = stack
        self.flags = flags
        self.files = files
        self.rng = rng
        self.project_name = project_name
        self.renderer = renderer or TemplateRenderer()
        self.matrix = matrix
        self.introspect = ProjectIntrospector(files, stack, project_name)

    @property
    def slug(self) -> str:
        return sanitize_name(self.project_name)

    @property
    def identifier(self) -> str:
        return python_identifier(self.project_name)

    @property
    def full(self) -> bool:
        return self.flags.depth.value == "full"

    # -- File helpers --------------------------------------------------------

    def write(self, path: str, content: str) -> None:
        self.files[path] = content

    def write_if_absent(self, path: str, content: str) -> bool:
        """Write *path* only if it does not exist yet; return whether it was written."""
        if path in self.files:
            return False
        self.files[path] = content
        return True

    def append_once(self, path: str, content: str) -> bool:
        """Append *content* to *path* unless it is already present.

        Returns:
            ``True`` if the file changed.
        """
        existing = self.files.get(path, "")
        if content in existing:
            return False
        if existing and not existing.endswith("\n"):
            existing += "\n"
        self.files[path] = existing + content
        return True

    def ensure_json_entries(self, path: str, section: str, entries: Mapping[str, Any]) -> bool:
        """Add missing keys to a top-level object in a JSON file.

        Existing keys are left untouched, so a second call is a no-op.  A
        missing or unparsable file, or a *section* that is not an object, is
        left alone.

        Returns:
            ``True`` if the file changed.
        """
        data = self.introspect.parse_json(path)
        if not isinstance(data, dict):
            return False
        target = data.setdefault(section, {})
        if not isinstance(target, dict):
            return False
        missing = {key: value for key, value in entries.items() if key not in target}
        if not missing:
            return False
        target.update(missing)
        self.files[path] = dump_json(data)
        return True

    def remove(self, path: str) -> None:
        """Delete *path*; only allowed for paths the strategy declares in ``removes``."""
        self.files.pop(path, None)

    def render(self, template: str, **extra: Any) -> str:
        stack = self.stack
        context: dict[str, Any] = {
            "project_name": self.project_name,
            "slug": self.slug,
            "ident": self.identifier,
            "language": stack.language.value,
            "framework": stack.framework.value,
            "database": stack.database.value,
            "archetype": stack.archetype.value,
            "testing": stack.testing.value,
            "ts": stack.language.value == "typescript",
            "full": self.full,
        }
        context.update(extra)
        return self.renderer.render_string(template, context)


# ---------------------------------------------------------------------------
# Strategy base
# ---------------------------------------------------------------------------


class EnrichmentStrategy(abc.ABC):
    """A flag-gated upgrade applied to a generated file map.

    ``apply`` must converge: running it on its own output changes nothing.
    Appends therefore check for existing content first, and generated files
    are fully overwritten rather than patched.
    """

    id: str = ""
    name: str = ""
    priority: int = 50
    removes: tuple[str, ...] = ()

    def matches(self, stack: Stack, flags: EnrichmentFlags) -> bool:
        return True

    @abc.abstractmethod
    async def apply(self, ctx: EnrichmentContext) -> None:
        ...

    def __repr__(self) -> str:
        return f"<{type(self).__name__} id={self.id!r} priority={self.priority}>"


class EnrichmentResult(BaseModel):
    """Outcome of an enrichment run."""
    files: dict[str, str]
    applied: list[str] = Field(default_factory=list)
    files_added: list[str] = Field(default_factory=list)
    files_modified: list[str] = Field(default_factory=list)
    files_removed: list[str] = Field(default_factory=list)
    introspection_misses: list[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Registry / pipeline
# ---------------------------------------------------------------------------


class EnrichmentSet:
    """Ordered, explicit collection of enrichment strategies."""

    def __init__(
        self,
        strategies: Iterable[EnrichmentStrategy] = (),
        *,
        renderer: Optional[TemplateRenderer] = None,
        matrix: CompatibilityMatrix = DEFAULT_MATRIX,
    ) -> None:
        self._strategies: list[EnrichmentStrategy] = []
        self.renderer = renderer or TemplateRenderer()
        self.matrix = matrix
        self.register(*strategies)

    def register(self, *strategies: EnrichmentStrategy) -> "EnrichmentSet":
        for strategy in strategies:
            if not strategy.id:
                raise ValueError(f"Strategy {strategy!r} has no id")
            self._strategies.append(strategy)
        return self

    def ordered(self) -> list[EnrichmentStrategy]:
        return sorted(self._strategies, key=lambda s: s.priority)

    def matching(self, stack: Stack, flags: EnrichmentFlags) -> list[EnrichmentStrategy]:
        return [s for s in self.ordered() if s.matches(stack, flags)]

    def get(self, strategy_id: str) -> EnrichmentStrategy:
        for strategy in self._strategies:
            if strategy.id == strategy_id:
                return strategy
        raise KeyError(strategy_id)

    def __len__(self) -> int:
        return len(self._strategies)

    def __iter__(self):
        return iter(self.ordered())

    async def run(
        self,
        stack: Stack,
        flags: EnrichmentFlags,
        files: Mapping[str, str],
        *,
        seed: int,
        project_name: str,
    ) -> EnrichmentResult:
        """Apply every matching strategy to a copy of *files*.

        Args:
            stack: Stack the map was generated from.
            flags: Toggles selecting strategies; with the master switch off,
                or no toggle on, the copy is returned unchanged.
            files: Base file map.  Never mutated.
            seed: Seed of the base project; strategies draw from a fork of it.
            project_name: Name the base map was generated under.

        Raises:
            StrategyFailure: a strategy raised, wrote an invalid path, or
                deleted a path it did not declare in ``removes``.
        """
        original = dict(files)
        working: FileMap = dict(files)
        if not flags.any_active():
            return EnrichmentResult(files=working)

        ctx = EnrichmentContext(
            stack,
            flags,
            working,
            SeededRNG(seed).fork(),
            project_name,
            renderer=self.renderer,
            matrix=self.matrix,
        )
        applied: list[str] = []
        for strategy in self.matching(stack, flags):
            before = dict(working)
            try:
                await strategy.apply(ctx)
            except StrategyFailure:
                raise
            except Exception as exc:
                raise StrategyFailure(strategy.id, exc) from exc
            check_written_paths(strategy.id, before, working)
            _check_removals(strategy, before, working)
            applied.append(strategy.id)

        return EnrichmentResult(
            files=working,
            applied=applied,
            files_added=sorted(path for path in working if path not in original),
            files_modified=sorted(
                path for path in working if path in original and working[path] != original[path]
            ),
            files_removed=sorted(path for path in original if path not in working),
            introspection_misses=list(ctx.introspect.misses),
        )


def _check_removals(strategy: EnrichmentStrategy, before: FileMap, after: FileMap) -> None:
    undeclared = sorted(path for path in before if path not in after and path not in strategy.removes)
    if undeclared:
        raise StrategyFailure(
            strategy.id,
            KeyError(f"deleted undeclared paths: {', '.join(undeclared)}"),
        )

