"""Shared pytest fixtures for the procgen test suite.

Provides reusable fixtures for:
- Fixed stacks covering the main archetype/language pairs
- Generation and enrichment strategy sets
- Base file maps produced by the real generation strategies
- A pipeline with a fixed project name
"""

from __future__ import annotations

from typing import Any, Awaitable, Callable

import pytest

from procgen.config import Config
from procgen.engine.registry import FileMap
from procgen.engine.resolver import StackResolver
from procgen.engine.rng import SeededRNG
from procgen.enrichment import build_enrichment_strategies
from procgen.enrichment.enricher import EnrichmentSet
from procgen.matrices import DEFAULT_MATRIX, CompatibilityMatrix
from procgen.models import Stack
from procgen.pipeline import Pipeline
from procgen.strategies import build_generation_strategies
from procgen.engine.registry import StrategySet

PROJECT_NAME = "demo-app"


# ---------------------------------------------------------------------------
# Stacks
# ---------------------------------------------------------------------------

FASTAPI_STACK: dict[str, str] = {
    "archetype": "backend",
    "language": "python",
    "framework": "fastapi",
    "database": "postgres",
    "orm": "sqlalchemy",
    "transport": "rest",
    "packaging": "docker",
    "cicd": "github-actions",
    "testing": "pytest",
}

EXPRESS_STACK: dict[str, str] = {
    "archetype": "backend",
    "language": "typescript",
    "framework": "express",
    "database": "none",
    "orm": "none",
    "runtime": "node",
    "transport": "rest",
    "packaging": "docker",
    "cicd": "github-actions",
    "build_tool": "tsup",
    "testing": "vitest",
}

REACT_STACK: dict[str, str] = {
    "archetype": "web",
    "language": "typescript",
    "framework": "react",
    "database": "none",
    "orm": "none",
    "runtime": "node",
    "transport": "rest",
    "packaging": "none",
    "cicd": "github-actions",
    "build_tool": "vite",
    "styling": "tailwind",
    "testing": "vitest",
}

GO_CLI_STACK: dict[str, str] = {
    "archetype": "cli",
    "language": "go",
    "framework": "cobra",
    "database": "none",
    "orm": "none",
    "transport": "rest",
    "packaging": "none",
    "cicd": "gitlab-ci",
}


@pytest.fixture
def matrix() -> CompatibilityMatrix:
    return DEFAULT_MATRIX


@pytest.fixture
def make_stack() -> Callable[..., Stack]:
    """Factory resolving a stack with the given forced fields (seed 7 fills the rest)."""

    def _make(fields: dict[str, Any] | None = None, seed: int = 7, **overrides: Any) -> Stack:
        constraints = {**(fields or {}), **overrides}
        return StackResolver().resolve(seed, constraints)

    return _make


@pytest.fixture
def fastapi_stack(make_stack) -> Stack:
    return make_stack(FASTAPI_STACK)


@pytest.fixture
def express_stack(make_stack) -> Stack:
    return make_stack(EXPRESS_STACK)


@pytest.fixture
def react_stack(make_stack) -> Stack:
    return make_stack(REACT_STACK)


@pytest.fixture
def go_cli_stack(make_stack) -> Stack:
    return make_stack(GO_CLI_STACK)


# ---------------------------------------------------------------------------
# Strategy sets & generated maps
# ---------------------------------------------------------------------------

@pytest.fixture
def strategies() -> StrategySet:
    return build_generation_strategies(Config())


@pytest.fixture
def enrichment() -> EnrichmentSet:
    return build_enrichment_strategies()


@pytest.fixture
def generate(strategies: StrategySet) -> Callable[[Stack], Awaitable[FileMap]]:
    """Run the standard generation strategies for a stack under ``demo-app``."""

    async def _generate(stack: Stack, seed: int = 1) -> FileMap:
        return await strategies.run(stack, PROJECT_NAME, SeededRNG(seed))

    return _generate


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------

@pytest.fixture
def config() -> Config:
    return Config(project_name=PROJECT_NAME)


@pytest.fixture
def pipeline(config: Config) -> Pipeline:
    return Pipeline(config)
