"""Enrichment pass, introspection, reverse inference and manifest export.

Quick usage::

    from procgen.enrichment import build_enrichment_strategies

    enrichment = build_enrichment_strategies()
    result = await enrichment.run(stack, flags, files, seed=42, project_name=name)
"""

from typing import Optional

from procgen.enrichment.enricher import (
    EnrichmentContext,
    EnrichmentResult,
    EnrichmentSet,
    EnrichmentStrategy,
)
from procgen.enrichment.exporter import ExportedManifest, export_manifest
from procgen.enrichment.inference import InferredStack, infer_stack
from procgen.enrichment.introspector import ManifestType, ParsedManifest, ProjectIntrospector
from procgen.enrichment.strategies import ENRICHMENT_STRATEGY_CLASSES
from procgen.matrices import DEFAULT_MATRIX, CompatibilityMatrix
from procgen.templates import TemplateRenderer


def build_enrichment_strategies(
    *,
    renderer: Optional[TemplateRenderer] = None,
    matrix: CompatibilityMatrix = DEFAULT_MATRIX,
) -> EnrichmentSet:
    """Return a new ``EnrichmentSet`` holding every built-in strategy."""
    return EnrichmentSet(
        (cls() for cls in ENRICHMENT_STRATEGY_CLASSES),
        renderer=renderer,
        matrix=matrix,
    )


__all__ = [
    "EnrichmentContext",
    "EnrichmentResult",
    "EnrichmentSet",
    "EnrichmentStrategy",
    "ExportedManifest",
    "InferredStack",
    "ManifestType",
    "ParsedManifest",
    "ProjectIntrospector",
    "build_enrichment_strategies",
    "export_manifest",
    "infer_stack",
]
