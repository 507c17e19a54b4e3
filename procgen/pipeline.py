"""procgen pipeline orchestrator.

Runs the three stages that turn a seed into a project:

Stage 1: RESOLVE  -- seed + constraints -> a valid stack.
Stage 2: GENERATE -- the stack's strategies write the base file map.
Stage 3: ENRICH   -- optional pass that layers production detail on top.

Usage::

    from procgen.pipeline import Pipeline

    pipeline = Pipeline(Config(verbose=True))
    project = await pipeline.generate(42, {"language": "python"})
    projects = await pipeline.generate_batch(range(10))
    enriched = await pipeline.generate(42, enrich=True)  # config.default_depth
"""

from __future__ import annotations

import asyncio
import time
from typing import Iterable, Optional

from procgen.config import Config
from procgen.engine.registry import StrategySet
from procgen.engine.resolver import (
    ConstraintInput,
    StackResolver,
    describe_stack,
    generate_project_name,
    project_id,
)
from procgen.engine.rng import SeededRNG
from procgen.enrichment import build_enrichment_strategies
from procgen.enrichment.enricher import EnrichmentSet
from procgen.matrices import DEFAULT_MATRIX, CompatibilityMatrix
from procgen.models import EnrichmentFlags, GeneratedProject, ProjectMetadata
from procgen.strategies import build_generation_strategies
from procgen.templates import TemplateRenderer
from procgen.utils import (
    console,
    format_duration,
    print_file_tree,
    print_stage_header,
    print_success,
    print_summary_table,
    print_warning,
)


class Pipeline:
    """Deterministic project generator.

    The same seed, constraints and flags always yield the same file map;
    only ``metadata.duration_ms`` varies between runs.

    Attributes:
        config: Global configuration.
        matrix: Compatibility tables shared by the resolver and strategies.
        resolver: Stack resolver honouring ``config.override_forced_conflicts``.
        strategies: Generation strategies run for every project.
        enrichment: Enrichment strategies run when flags are active.
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        strategies: Optional[StrategySet] = None,
        enrichment: Optional[EnrichmentSet] = None,
        matrix: Optional[CompatibilityMatrix] = None,
    ) -> None:
        self.config = config or Config()
        self.matrix = matrix or DEFAULT_MATRIX
        renderer = TemplateRenderer()
        self.resolver = StackResolver(
            self.matrix,
            override_forced_conflicts=self.config.override_forced_conflicts,
        )
        if strategies is None:
            strategies = build_generation_strategies(self.config, renderer=renderer, matrix=self.matrix)
        if enrichment is None:
            enrichment = build_enrichment_strategies(renderer=renderer, matrix=self.matrix)
        self.strategies = strategies
        self.enrichment = enrichment

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------

    def default_flags(self) -> EnrichmentFlags:
        """Enrichment flags for ``config.default_depth``."""
        return EnrichmentFlags.for_depth(self.config.default_depth)

    async def generate(
        self,
        seed: int,
        constraints: ConstraintInput = None,
        flags: Optional[EnrichmentFlags] = None,
        *,
        enrich: bool = False,
    ) -> GeneratedProject:
        """Generate one project.

        Args:
            seed: Non-negative integer seed.
            constraints: Forced stack fields, as ``Constraints`` or a mapping.
            flags: Enrichment toggles; ``None`` or inactive flags skip the pass.
            enrich: When *flags* is ``None``, enrich with the
                ``config.default_depth`` preset instead of skipping the pass.

        Returns:
            The generated project with its metadata.

        Raises:
            InvalidSeed: *seed* is negative or not an integer.
            UnsatisfiableConstraints: *constraints* admit no valid stack.
            StrategyFailure: a generation or enrichment strategy failed.
        """
        started = time.perf_counter()
        rng = SeededRNG(seed)
        if flags is None and enrich:
            flags = self.default_flags()
        verbose = self.config.verbose

        # -- Stage 1: resolve ------------------------------------------------
        if verbose:
            print_stage_header("resolve", f"seed {seed}")
        resolution = self.resolver.resolve_with_report(seed, constraints)
        stack = resolution.stack
        # Both forks are drawn unconditionally so a configured name does not
        # shift the generation stream.
        name_rng, generation_rng = rng.fork(), rng.fork()
        name = self.config.project_name or generate_project_name(name_rng)
        if verbose:
            console.print(f"  {describe_stack(stack, self.matrix)}")
            for field in resolution.fallbacks:
                print_warning(f"  {field} fell back to its matrix default")

        # -- Stage 2: generate -----------------------------------------------
        if verbose:
            print_stage_header("generate", name)
        applied: list[str] = []
        files = await self.strategies.run(stack, name, generation_rng, applied=applied)
        metadata = ProjectMetadata(
            engine_version=self.config.engine_version,
            strategies_applied=applied,
            fallbacks=list(resolution.fallbacks),
        )
        if verbose:
            console.print(f"  {len(applied)} strategies, {len(files)} files")

        # -- Stage 3: enrich -------------------------------------------------
        if flags is not None and flags.any_active():
            if verbose:
                print_stage_header("enrich", flags.depth.value)
            result = await self.enrichment.run(stack, flags, files, seed=seed, project_name=name)
            files = result.files
            metadata.enrichment_applied = result.applied
            metadata.files_added = result.files_added
            metadata.files_modified = result.files_modified
            metadata.introspection_misses = result.introspection_misses
            if verbose:
                console.print(
                    f"  {len(result.applied)} strategies, "
                    f"+{len(result.files_added)} files, ~{len(result.files_modified)} modified"
                )
                for query in result.introspection_misses:
                    print_warning(f"  introspection miss: {query} (default used)")

        metadata.duration_ms = (time.perf_counter() - started) * 1000
        project = GeneratedProject(
            id=project_id(stack, seed),
            seed=seed,
            name=name,
            stack=stack,
            files=files,
            enrichment=flags,
            metadata=metadata,
        )
        if verbose:
            print_success(
                f"Generated {project.id} ({len(files)} files) "
                f"in {format_duration(metadata.duration_ms / 1000)}"
            )
        return project

    async def generate_batch(
        self,
        seeds: Iterable[int],
        constraints: ConstraintInput = None,
        flags: Optional[EnrichmentFlags] = None,
        *,
        enrich: bool = False,
    ) -> list[GeneratedProject]:
        """Generate one project per seed, at most ``config.batch.max_parallel`` at a time.

        Results are returned in seed order.  Each project owns its RNG and
        file map, so concurrent runs never observe one another.  The first
        failure propagates.
        """
        semaphore = asyncio.Semaphore(self.config.batch.max_parallel)

        async def _generate_one(seed: int) -> GeneratedProject:
            async with semaphore:
                return await self.generate(seed, constraints, flags, enrich=enrich)

        return list(await asyncio.gather(*(_generate_one(seed) for seed in seeds)))

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    def print_report(self, project: GeneratedProject) -> None:
        """Print a summary table and file tree for *project*."""
        metadata = project.metadata
        summary = {
            "Project": project.name,
            "ID": project.id,
            "Stack": describe_stack(project.stack, self.matrix),
            "Tags": ", ".join(project.stack.tags()),
            "Files": len(project.files),
            "Strategies": ", ".join(metadata.strategies_applied) or "-",
            "Enrichment": ", ".join(metadata.enrichment_applied) or "-",
            "Fallbacks": ", ".join(metadata.fallbacks) or "-",
            "Introspection misses": ", ".join(metadata.introspection_misses) or "-",
            "Duration": format_duration(metadata.duration_ms / 1000),
        }
        print_summary_table(summary, title=f"procgen {metadata.engine_version}")
        print_file_tree(project.paths, title=project.name)
