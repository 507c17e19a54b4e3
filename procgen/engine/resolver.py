"""Constrained stack resolution.

Turns a seed plus a partial ``Constraints`` record into one fully-populated,
internally valid ``Stack``.  Fields are fixed in ``FIELD_ORDER``; a forced
field is adopted verbatim, any other field is drawn by weighted pick from the
values still compatible with everything fixed so far (forced fields count as
fixed from the start).

Forced fields are never changed silently.  A conflict between forced fields
raises ``UnsatisfiableConstraints`` unless the resolver was built with
``override_forced_conflicts=True``, in which case the later non-primary field
of each conflicting pair is replaced by its matrix default and reported in
``Resolution.fallbacks``.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Mapping, Optional, Union

from procgen.engine.constraints import suggest, validate_stack
from procgen.engine.errors import UnsatisfiableConstraints
from procgen.engine.rng import SeededRNG
from procgen.matrices import DEFAULT_MATRIX, PRIMARY_FIELDS, CompatibilityMatrix
from procgen.models import (
    ORM,
    Archetype,
    CICD,
    Constraints,
    Database,
    FIELD_DOMAINS,
    FIELD_ORDER,
    Framework,
    Language,
    Packaging,
    Resolution,
    Runtime,
    Stack,
    Styling,
    Transport,
)

# ---------------------------------------------------------------------------
# Weight tables
# ---------------------------------------------------------------------------

ARCHETYPE_WEIGHTS: dict[Enum, float] = {
    Archetype.BACKEND: 30,
    Archetype.WEB: 25,
    Archetype.CLI: 20,
    Archetype.LIBRARY: 15,
    Archetype.DESKTOP: 5,
    Archetype.MOBILE: 4,
    Archetype.GAME: 1,
}

BACKEND_DATABASE_WEIGHTS: dict[Enum, float] = {
    Database.POSTGRES: 40,
    Database.SQLITE: 25,
    Database.MYSQL: 15,
    Database.MONGODB: 10,
    Database.NONE: 10,
}

DEFAULT_DATABASE_WEIGHTS: dict[Enum, float] = {
    Database.NONE: 60,
    Database.SQLITE: 30,
    Database.POSTGRES: 10,
}

RUNTIME_WEIGHTS: dict[Enum, float] = {
    Runtime.NODE: 70,
    Runtime.BUN: 20,
    Runtime.DENO: 10,
}

TRANSPORT_WEIGHTS: dict[Enum, float] = {
    Transport.REST: 50,
    Transport.GRAPHQL: 20,
    Transport.GRPC: 15,
    Transport.TRPC: 10,
    Transport.WEBSOCKET: 5,
}

PACKAGING_WEIGHTS: dict[Enum, float] = {
    Packaging.DOCKER: 60,
    Packaging.NONE: 35,
    Packaging.PODMAN: 4,
    Packaging.NIX: 1,
}

CICD_WEIGHTS: dict[Enum, float] = {
    CICD.GITHUB_ACTIONS: 70,
    CICD.NONE: 20,
    CICD.GITLAB_CI: 8,
    CICD.CIRCLECI: 2,
}

STYLING_WEIGHTS: dict[Enum, float] = {
    Styling.TAILWIND: 50,
    Styling.CSS_MODULES: 20,
    Styling.STYLED_COMPONENTS: 15,
    Styling.SCSS: 10,
    Styling.VANILLA: 5,
}

# Share of the language draw reserved for TypeScript when it is a candidate.
TYPESCRIPT_SHARE = 40.0
# Relative weight of a framework's own default build tool / test runner.
FRAMEWORK_DEFAULT_WEIGHT = 8.0

_STATIC_WEIGHTS: dict[str, dict[Enum, float]] = {
    "archetype": ARCHETYPE_WEIGHTS,
    "runtime": RUNTIME_WEIGHTS,
    "transport": TRANSPORT_WEIGHTS,
    "packaging": PACKAGING_WEIGHTS,
    "cicd": CICD_WEIGHTS,
    "styling": STYLING_WEIGHTS,
}

# Fields whose choice can strand a later forced field; these get a
# feasibility look-ahead before being drawn.
_LOOKAHEAD_FIELDS = ("archetype", "language", "framework")
# Fields that, once archetype, language and framework are fixed, constrain
# nothing else.
_INDEPENDENT_FIELDS = tuple(
    f for f in FIELD_ORDER
    if f not in ("archetype", "language", "framework", "database", "orm")
)

ADJECTIVES = ("swift", "quick", "rapid", "nimble", "agile", "bright", "clever", "sharp")
NOUNS = ("api", "app", "service", "hub", "core", "base", "kit", "lab")

ConstraintInput = Union[Constraints, Mapping[str, Any], None]


# ---------------------------------------------------------------------------
# Resolver
# ---------------------------------------------------------------------------


class StackResolver:
    """Resolves seeds and constraints into valid stacks.

    Args:
        matrix: Compatibility tables to resolve against.
        override_forced_conflicts: Replace the later of two conflicting forced
            non-primary fields with its matrix default instead of raising.
    """

    def __init__(
        self,
        matrix: CompatibilityMatrix = DEFAULT_MATRIX,
        *,
        override_forced_conflicts: bool = False,
    ) -> None:
        self.matrix = matrix
        self.override_forced_conflicts = override_forced_conflicts

    # -- Public API ----------------------------------------------------------

    def resolve(self, seed: int, constraints: ConstraintInput = None) -> Stack:
        """Resolve *seed* and *constraints* into a ``Stack``."""
        return self.resolve_with_report(seed, constraints).stack

    def resolve_with_report(
        self, seed: int, constraints: ConstraintInput = None
    ) -> Resolution:
        """Resolve and report which fields were forced or fell back to defaults.

        Raises:
            InvalidSeed: *seed* is negative or not an integer.
            UnsatisfiableConstraints: the forced fields have no valid completion.
        """
        rng = SeededRNG(seed)
        forced = dict(_coerce_constraints(constraints).forced())
        fallbacks: list[str] = []

        self._check_forced_pairs(forced, fallbacks)
        self._check_completable(forced, fallbacks)

        released = set(fallbacks)
        values: dict[str, Enum] = {}
        for field in FIELD_ORDER:
            if field in forced:
                values[field] = forced[field]
                continue
            fixed = {**forced, **values}
            if field in released:
                default = self.matrix.default_for(field, fixed)
                if self.matrix.compatible(field, default, fixed):
                    values[field] = default
                    continue
            candidates = self._candidates(field, fixed)
            if not candidates:
                values[field] = self.matrix.default_for(field, fixed)
                fallbacks.append(field)
                continue
            values[field] = rng.pick_weighted(self._weights(field, candidates, fixed))

        violations = validate_stack(values, self.matrix)
        if violations:
            fields = [f for v in violations for f in v.fields]
            raise UnsatisfiableConstraints(fields, "; ".join(str(v) for v in violations))

        return Resolution(
            stack=Stack(**values),
            forced=list(forced),
            fallbacks=fallbacks,
        )

    # -- Forced-field checks -------------------------------------------------

    def _check_forced_pairs(self, forced: dict[str, Enum], fallbacks: list[str]) -> None:
        violations = validate_stack(forced, self.matrix)
        for violation in violations:
            left, right = violation.fields
            if left not in forced or right not in forced:
                continue  # already released by an earlier violation
            overridable = right not in PRIMARY_FIELDS
            if not (self.override_forced_conflicts and overridable):
                allowed = ", ".join(suggest(right, {left: forced[left]}, self.matrix))
                raise UnsatisfiableConstraints(
                    violation.fields,
                    f"{violation}; compatible {right} values: {allowed or 'none'}",
                )
            del forced[right]
            fallbacks.append(right)

    def _check_completable(self, forced: dict[str, Enum], fallbacks: list[str]) -> None:
        if self._completable(forced):
            return
        if self.override_forced_conflicts:
            for field in reversed(FIELD_ORDER):
                if field in forced and field not in PRIMARY_FIELDS:
                    del forced[field]
                    fallbacks.append(field)
                    if self._completable(forced):
                        return

        culprits = [
            field
            for field in forced
            if self._completable({k: v for k, v in forced.items() if k != field})
        ]
        raise UnsatisfiableConstraints(
            culprits or list(forced),
            "no stack satisfies "
            + ", ".join(f"{k}={v.value}" for k, v in forced.items()),
        )

    def _completable(self, fixed: Mapping[str, Enum]) -> bool:
        """Return ``True`` if *fixed* extends to at least one valid stack.

        Every other field relates only to archetype, language and framework
        or, for database/orm, to each other, so fixing those three splits the
        rest into independent sub-problems.
        """
        for archetype in self._options("archetype", fixed):
            with_arch = {**fixed, "archetype": archetype}
            for language in self._options("language", with_arch):
                with_lang = {**with_arch, "language": language}
                for framework in self._options("framework", with_lang):
                    base = {**with_lang, "framework": framework}
                    if self._has_database_orm(base) and all(
                        self._has_option(field, base) for field in _INDEPENDENT_FIELDS
                    ):
                        return True
        return False

    def _has_database_orm(self, fixed: Mapping[str, Enum]) -> bool:
        return any(
            self._has_option("orm", {**fixed, "database": database})
            for database in self._options("database", fixed)
        )

    def _has_option(self, field: str, fixed: Mapping[str, Enum]) -> bool:
        if field in fixed:
            return bool(self._options(field, fixed))
        return any(
            self.matrix.compatible(field, value, fixed) for value in FIELD_DOMAINS[field]
        )

    def _options(self, field: str, fixed: Mapping[str, Enum]) -> list[Enum]:
        if field in fixed:
            value = fixed[field]
            others = {k: v for k, v in fixed.items() if k != field}
            return [value] if self.matrix.compatible(field, value, others) else []
        return [
            value
            for value in FIELD_DOMAINS[field]
            if self.matrix.compatible(field, value, fixed)
        ]

    # -- Drawing ---------------------------------------------------------------

    def _candidates(self, field: str, fixed: Mapping[str, Enum]) -> list[Enum]:
        candidates = self._options(field, fixed)
        if field in _LOOKAHEAD_FIELDS:
            candidates = [
                value for value in candidates
                if self._completable({**fixed, field: value})
            ]
        return candidates

    def _weights(
        self, field: str, candidates: list[Enum], fixed: Mapping[str, Enum]
    ) -> list[tuple[Enum, float]]:
        """Return ``(value, weight)`` pairs in enum declaration order.

        Zero-weight candidates are dropped; if that leaves nothing, every
        candidate gets equal weight so forced combinations still resolve.
        """
        table = self._weight_table(field, candidates, fixed)
        weighted = [(value, table.get(value, 0.0)) for value in candidates]
        positive = [(value, weight) for value, weight in weighted if weight > 0]
        return positive or [(value, 1.0) for value in candidates]

    def _weight_table(
        self, field: str, candidates: list[Enum], fixed: Mapping[str, Enum]
    ) -> dict[Enum, float]:
        if field in _STATIC_WEIGHTS:
            return _STATIC_WEIGHTS[field]

        if field == "language":
            if Language.TYPESCRIPT in candidates and len(candidates) > 1:
                share = (100.0 - TYPESCRIPT_SHARE) / (len(candidates) - 1)
                return {
                    value: TYPESCRIPT_SHARE if value is Language.TYPESCRIPT else share
                    for value in candidates
                }
            return {value: 1.0 for value in candidates}

        if field == "framework":
            if fixed.get("archetype") is Archetype.LIBRARY:
                return {Framework.NONE: 1.0}
            return {value: 0.0 if value is Framework.NONE else 1.0 for value in candidates}

        if field == "database":
            archetype = fixed.get("archetype")
            if archetype is Archetype.WEB:
                return {Database.NONE: 1.0}
            if archetype is Archetype.BACKEND:
                return BACKEND_DATABASE_WEIGHTS
            return DEFAULT_DATABASE_WEIGHTS

        if field == "orm":
            return {value: 0.0 if value is ORM.NONE else 1.0 for value in candidates}

        if field in ("build_tool", "testing"):
            preferred = self.matrix.default_for(field, fixed)
            return {
                value: FRAMEWORK_DEFAULT_WEIGHT if value == preferred else 1.0
                for value in candidates
            }

        return {value: 1.0 for value in candidates}


# ---------------------------------------------------------------------------
# Module-level helpers
# ---------------------------------------------------------------------------


def resolve(
    seed: int,
    constraints: ConstraintInput = None,
    matrix: CompatibilityMatrix = DEFAULT_MATRIX,
) -> Stack:
    """Resolve with a default ``StackResolver``."""
    return StackResolver(matrix).resolve(seed, constraints)


def generate_project_name(rng: SeededRNG) -> str:
    """Return a name such as ``nimble-api-x3k9``."""
    adjective = rng.pick(ADJECTIVES)
    noun = rng.pick(NOUNS)
    return f"{adjective}-{noun}-{rng.string(4)}"


def project_id(stack: Stack, seed: int) -> str:
    """Return the stable project identifier ``{language}-{framework}-{seed}``."""
    return f"{stack.language.value}-{stack.framework.value}-{seed}"


def _coerce_constraints(constraints: ConstraintInput) -> Constraints:
    if constraints is None:
        return Constraints()
    if isinstance(constraints, Constraints):
        return constraints
    return Constraints.model_validate(dict(constraints))


def describe_stack(stack: Stack, matrix: Optional[CompatibilityMatrix] = None) -> str:
    """One-line human description, e.g. ``Backend API in Python (FastAPI)``."""
    matrix = matrix or DEFAULT_MATRIX
    archetype = matrix.archetypes[stack.archetype].name
    language = matrix.languages[stack.language].name
    if stack.framework is Framework.NONE:
        return f"{archetype} in {language}"
    return f"{archetype} in {language} ({matrix.frameworks[stack.framework].name})"
