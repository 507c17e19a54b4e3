"""Procedural assembly engine: seeded RNG, stack resolver, strategy pipeline.

Quick usage::

    from procgen.engine import SeededRNG, StackResolver, StrategySet

    stack = StackResolver().resolve(42, {"language": "python"})
    files = await strategies.run(stack, "nimble-api-x3k9", SeededRNG(42))
"""

from procgen.engine.errors import (
    IntrospectionMiss,
    InvalidPath,
    InvalidSeed,
    ProcgenError,
    StrategyFailure,
    UnsatisfiableConstraints,
)
from procgen.engine.registry import (
    FileMap,
    GenerationContext,
    GenerationStrategy,
    StrategySet,
)
from procgen.engine.resolver import (
    StackResolver,
    generate_project_name,
    project_id,
    resolve,
)
from procgen.engine.rng import SeededRNG

__all__ = [
    "FileMap",
    "GenerationContext",
    "GenerationStrategy",
    "IntrospectionMiss",
    "InvalidPath",
    "InvalidSeed",
    "ProcgenError",
    "SeededRNG",
    "StackResolver",
    "StrategyFailure",
    "StrategySet",
    "UnsatisfiableConstraints",
    "generate_project_name",
    "project_id",
    "resolve",
]
