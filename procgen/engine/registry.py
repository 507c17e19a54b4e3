"""Strategy registry and the ordered generation pipeline.

A ``StrategySet`` is an explicit, per-pipeline collection of generation
strategies.  ``run`` executes every strategy whose predicate matches the
stack, strictly one after another in ascending ``priority`` (ties keep
registration order), against a single file map owned by that run.
"""

from __future__ import annotations

import abc
from typing import Any, Iterable, Optional

from procgen.engine.errors import StrategyFailure
from procgen.engine.rng import SeededRNG
from procgen.matrices import DEFAULT_MATRIX, CompatibilityMatrix
from procgen.models import Stack
from procgen.templates import TemplateRenderer
from procgen.utils import python_identifier, sanitize_name, validate_relative_path

FileMap = dict[str, str]


# ---------------------------------------------------------------------------
# Context
# ---------------------------------------------------------------------------


class GenerationContext:
    """Mutable state handed to each strategy's ``apply``.

    Attributes:
        stack: The resolved stack (immutable).
        files: The shared file map; strategies write into it directly or via
            ``write``/``append``.
        project_name: Human project name (e.g. ``nimble-api-x3k9``).
        rng: Generator reserved for strategies.
        renderer: In-memory Jinja2 renderer.
        matrix: Compatibility tables the stack was resolved against.
        options: Free-form values from the configuration (license holder,
            license year, version).
    """

    def __init__(
        self,
        stack: Stack,
        project_name: str,
        rng: SeededRNG,
        *,
        files: Optional[FileMap] = None,
        renderer: Optional[TemplateRenderer] = None,
        matrix: CompatibilityMatrix = DEFAULT_MATRIX,
        options: Optional[dict[str, Any]] = None,
    ) -> None:
        self.stack = stack
        self.project_name = project_name
        self.rng = rng
        self.files: FileMap = files if files is not None else {}
        self.renderer = renderer or TemplateRenderer()
        self.matrix = matrix
        self.options: dict[str, Any] = dict(options or {})

    # -- Derived names -------------------------------------------------------

    @property
    def slug(self) -> str:
        return sanitize_name(self.project_name)

    @property
    def identifier(self) -> str:
        return python_identifier(self.project_name)

    @property
    def port(self) -> int:
        return self.matrix.port_for(self.stack.framework, self.stack.language)

    # -- File helpers --------------------------------------------------------

    def write(self, path: str, content: str) -> None:
        """Write (or overwrite) *path*."""
        self.files[path] = content

    def append(self, path: str, content: str) -> None:
        """Append *content* to *path* unless it is already present."""
        existing = self.files.get(path, "")
        if content in existing:
            return
        if existing and not existing.endswith("\n"):
            existing += "\n"
        self.files[path] = existing + content

    def template_context(self, **extra: Any) -> dict[str, Any]:
        """Common template variables merged with *extra*."""
        stack = self.stack
        context: dict[str, Any] = {
            "project_name": self.project_name,
            "slug": self.slug,
            "ident": self.identifier,
            "stack": stack,
            "language": stack.language.value,
            "framework": stack.framework.value,
            "database": stack.database.value,
            "orm": stack.orm.value,
            "archetype": stack.archetype.value,
            "testing": stack.testing.value,
            "port": self.port,
            "ts": stack.language.value == "typescript",
        }
        context.update(self.options)
        context.update(extra)
        return context

    def render(self, template: str, **extra: Any) -> str:
        """Render an inline template with the common context."""
        return self.renderer.render_string(template, self.template_context(**extra))


# ---------------------------------------------------------------------------
# Strategy base
# ---------------------------------------------------------------------------


class GenerationStrategy(abc.ABC):
    """A named, prioritised unit of file generation.

    Subclasses set ``id``, ``name`` and ``priority`` and implement
    ``matches`` (pure) and ``apply`` (writes into ``ctx.files``).  ``apply``
    may be a coroutine doing deferred work; the pipeline awaits it before
    starting the next strategy.
    """

    id: str = ""
    name: str = ""
    priority: int = 50

    def matches(self, stack: Stack) -> bool:
        return True

    @abc.abstractmethod
    async def apply(self, ctx: GenerationContext) -> None:
        ...

    def __repr__(self) -> str:
        return f"<{type(self).__name__} id={self.id!r} priority={self.priority}>"


# ---------------------------------------------------------------------------
# Registry / pipeline
# ---------------------------------------------------------------------------


def check_written_paths(strategy_id: str, before: FileMap, after: FileMap) -> None:
    """Validate every path a strategy added or changed.

    Raises:
        StrategyFailure: attributed to *strategy_id* for an unsafe path or a
            non-string value.
    """
    for path, content in after.items():
        if before.get(path) is content:
            continue
        try:
            validate_relative_path(path)
            if not isinstance(content, str):
                raise TypeError(
                    f"content for {path!r} must be str, got {type(content).__name__}"
                )
        except Exception as exc:
            raise StrategyFailure(strategy_id, exc) from exc


class StrategySet:
    """Ordered, explicit collection of generation strategies."""

    def __init__(
        self,
        strategies: Iterable[GenerationStrategy] = (),
        *,
        renderer: Optional[TemplateRenderer] = None,
        matrix: CompatibilityMatrix = DEFAULT_MATRIX,
        options: Optional[dict[str, Any]] = None,
    ) -> None:
        self._strategies: list[GenerationStrategy] = []
        self.renderer = renderer or TemplateRenderer()
        self.matrix = matrix
        self.options: dict[str, Any] = dict(options or {})
        self.register(*strategies)

    def register(self, *strategies: GenerationStrategy) -> "StrategySet":
        """Append strategies; later registrations run after earlier ones on ties."""
        for strategy in strategies:
            if not strategy.id:
                raise ValueError(f"Strategy {strategy!r} has no id")
            self._strategies.append(strategy)
        return self

    def ordered(self) -> list[GenerationStrategy]:
        """Strategies sorted by priority; ``sorted`` is stable, so ties keep registration order."""
        return sorted(self._strategies, key=lambda s: s.priority)

    def matching(self, stack: Stack) -> list[GenerationStrategy]:
        return [s for s in self.ordered() if s.matches(stack)]

    def get(self, strategy_id: str) -> GenerationStrategy:
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
        project_name: str,
        rng: SeededRNG,
        *,
        applied: Optional[list[str]] = None,
    ) -> FileMap:
        """Run every matching strategy and return the finished file map.

        Args:
            stack: Resolved stack.
            project_name: Name substituted into generated files.
            rng: Generator handed to strategies through the context.
            applied: Optional list that receives the ids of strategies run.

        Raises:
            StrategyFailure: a strategy raised or wrote an invalid path; no
                file map is returned.
        """
        ctx = GenerationContext(
            stack,
            project_name,
            rng,
            renderer=self.renderer,
            matrix=self.matrix,
            options=self.options,
        )
        for strategy in self.matching(stack):
            before = dict(ctx.files)
            try:
                await strategy.apply(ctx)
            except StrategyFailure:
                raise
            except Exception as exc:
                raise StrategyFailure(strategy.id, exc) from exc
            check_written_paths(strategy.id, before, ctx.files)
            if applied is not None:
                applied.append(strategy.id)
        return ctx.files
