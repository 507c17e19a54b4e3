"""Error taxonomy for the procedural engine.

Every error raised by the resolver or the pipelines derives from
``ProcgenError`` so callers can catch the whole family in one place.  None of
these are retried internally: resolution and generation are pure functions of
their inputs, so retrying with the same arguments never changes the outcome.
"""

from __future__ import annotations

from typing import Any, Iterable


class ProcgenError(Exception):
    """Base class for all engine errors."""


class InvalidSeed(ProcgenError):
    """Raised when a seed is negative or not an integer."""

    def __init__(self, seed: Any) -> None:
        self.seed = seed
        super().__init__(f"Seed must be a non-negative integer, got {seed!r}")


class UnsatisfiableConstraints(ProcgenError):
    """Raised when caller-forced fields have no valid joint completion.

    Attributes:
        fields: Every stack field taking part in the conflict, in resolution
            order.
    """

    def __init__(self, fields: Iterable[str], message: str) -> None:
        self.fields: list[str] = list(dict.fromkeys(fields))
        self.detail = message
        super().__init__(
            f"Unsatisfiable constraints on {', '.join(self.fields)}: {message}"
        )


class StrategyFailure(ProcgenError):
    """Raised when a strategy's apply step fails; the whole run is aborted."""

    def __init__(self, strategy_id: str, cause: BaseException) -> None:
        self.strategy_id = strategy_id
        self.cause = cause
        super().__init__(
            f"Strategy '{strategy_id}' failed: {type(cause).__name__}: {cause}"
        )


class IntrospectionMiss(ProcgenError):
    """Raised by introspection queries for data the base scaffold never produced.

    Enrichment strategies are expected to catch this and fall back to a
    documented default instead of failing.
    """

    def __init__(self, query: str) -> None:
        self.query = query
        super().__init__(f"Introspection found nothing for '{query}'")


class InvalidPath(ProcgenError):
    """Raised when a strategy writes a path that is empty, absolute or escapes the root."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        super().__init__(f"Invalid output path {path!r}: {reason}")
