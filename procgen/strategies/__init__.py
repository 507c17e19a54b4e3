"""Generation strategies and the registry builder.

``build_generation_strategies`` constructs a fresh ``StrategySet`` per
pipeline; nothing here registers itself at import time.
"""

from __future__ import annotations

from typing import Optional

from procgen.config import Config
from procgen.engine.registry import StrategySet
from procgen.matrices import DEFAULT_MATRIX, CompatibilityMatrix
from procgen.strategies.ci import CIStrategy
from procgen.strategies.common import (
    EditorconfigStrategy,
    GitignoreStrategy,
    LicenseStrategy,
    ReadmeStrategy,
)
from procgen.strategies.database import DatabaseStrategy
from procgen.strategies.docker import DockerStrategy, NixStrategy
from procgen.strategies.languages import (
    LANGUAGE_SCAFFOLDS,
    UnhandledLanguageScaffold,
    build_language_scaffolds,
)
from procgen.strategies.transport import TransportStrategy
from procgen.templates import TemplateRenderer


def build_generation_strategies(
    config: Optional[Config] = None,
    *,
    renderer: Optional[TemplateRenderer] = None,
    matrix: CompatibilityMatrix = DEFAULT_MATRIX,
) -> StrategySet:
    """Return the standard strategy set for *config*.

    Args:
        config: Supplies license holder/year and engine version to the
            strategies; defaults to ``Config()``.
        renderer: Shared template renderer; a new one is created if omitted.
        matrix: Compatibility tables strategies read ports and images from.

    Returns:
        A new ``StrategySet``; callers may ``register`` further strategies.
    """
    config = config or Config()
    scaffolds = build_language_scaffolds()
    # JVM languages share one scaffold instance; register each once
    unique_scaffolds = list({id(s): s for s in scaffolds.values()}.values())
    strategy_set = StrategySet(
        renderer=renderer,
        matrix=matrix,
        options=config.strategy_options(),
    )
    strategy_set.register(
        LicenseStrategy(),
        GitignoreStrategy(),
        EditorconfigStrategy(),
        *unique_scaffolds,
        UnhandledLanguageScaffold(frozenset(scaffolds)),
        DatabaseStrategy(),
        TransportStrategy(),
        DockerStrategy(),
        NixStrategy(),
        CIStrategy(),
        ReadmeStrategy(),
    )
    return strategy_set


__all__ = [
    "CIStrategy",
    "DatabaseStrategy",
    "DockerStrategy",
    "EditorconfigStrategy",
    "GitignoreStrategy",
    "LANGUAGE_SCAFFOLDS",
    "LicenseStrategy",
    "NixStrategy",
    "ReadmeStrategy",
    "TransportStrategy",
    "UnhandledLanguageScaffold",
    "build_generation_strategies",
]
