"""Unit tests for the pipeline orchestrator (procgen.pipeline).

Tests cover:
- Pipeline.generate: naming, ids, metadata, determinism
- Enrichment stage activation and metadata
- Error propagation (invalid seed, unsatisfiable constraints, strategy failure)
- Pipeline.generate_batch ordering and isolation
- Verbose progress output and print_report
"""

from __future__ import annotations

import re

import pytest

from procgen.config import BatchConfig, Config
from procgen.engine.errors import InvalidSeed, StrategyFailure, UnsatisfiableConstraints
from procgen.engine.registry import GenerationContext, GenerationStrategy, StrategySet
from procgen.models import EnrichmentDepth, EnrichmentFlags, Framework, Language
from procgen.pipeline import Pipeline
from procgen.utils import console


class _Boom(GenerationStrategy):
    id = "boom"

    async def apply(self, ctx: GenerationContext) -> None:
        raise RuntimeError("disk on fire")


def _stable(project):
    """Project dump without the wall-clock duration."""
    return project.model_dump(exclude={"metadata": {"duration_ms"}})


# ---------------------------------------------------------------------------
# Single project
# ---------------------------------------------------------------------------


class TestGenerate:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_forced_stack(self, pipeline, fastapi_stack):
        project = await pipeline.generate(1, fastapi_stack.as_dict())
        assert project.name == "demo-app"
        assert project.seed == 1
        assert project.id == "python-fastapi-1"
        assert project.stack.language is Language.PYTHON
        assert project.stack.framework is Framework.FASTAPI
        assert project.enrichment is None
        assert project.paths == sorted(project.files)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_metadata(self, pipeline, fastapi_stack):
        metadata = (await pipeline.generate(1, fastapi_stack.as_dict())).metadata
        assert metadata.engine_version == "1.0.0"
        assert metadata.strategies_applied[:3] == ["license", "gitignore", "editorconfig"]
        assert "scaffold-python" in metadata.strategies_applied
        assert metadata.strategies_applied[-1] == "readme"
        assert metadata.enrichment_applied == []
        assert metadata.fallbacks == []
        assert metadata.duration_ms >= 0

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_deterministic(self, config):
        first = await Pipeline(config).generate(42)
        second = await Pipeline(config).generate(42)
        assert _stable(first) == _stable(second)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_derived_name(self):
        pipeline = Pipeline(Config())
        project = await pipeline.generate(5)
        assert re.fullmatch(r"[a-z]+-[a-z]+-\w{4}", project.name)
        assert (await pipeline.generate(5)).name == project.name

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_configured_name_keeps_stack(self, pipeline):
        named = await pipeline.generate(11)
        derived = await Pipeline(Config()).generate(11)
        assert named.stack == derived.stack
        assert named.id == derived.id

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_license_options_reach_files(self, fastapi_stack):
        config = Config(project_name="demo-app", license={"holder": "Ada Lovelace", "year": 2030})
        project = await Pipeline(config).generate(1, fastapi_stack.as_dict())
        assert "2030 Ada Lovelace" in project.files["LICENSE"]


# ---------------------------------------------------------------------------
# Enrichment stage
# ---------------------------------------------------------------------------


class TestEnrichmentStage:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_flags_apply_enrichment(self, pipeline, express_stack):
        flags = EnrichmentFlags.for_depth(EnrichmentDepth.STANDARD)
        plain = await pipeline.generate(1, express_stack.as_dict())
        enriched = await pipeline.generate(1, express_stack.as_dict(), flags)
        assert enriched.enrichment == flags
        assert enriched.metadata.enrichment_applied
        assert ".env.example" in enriched.metadata.files_added
        assert set(plain.files) < set(enriched.files)
        assert enriched.metadata.strategies_applied == plain.metadata.strategies_applied

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_inactive_flags_skip_stage(self, pipeline, express_stack):
        plain = await pipeline.generate(1, express_stack.as_dict())
        skipped = await pipeline.generate(1, express_stack.as_dict(), EnrichmentFlags())
        assert skipped.files == plain.files
        assert skipped.metadata.enrichment_applied == []
        assert skipped.metadata.files_added == []

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_enrich_uses_configured_depth(self, express_stack):
        pipeline = Pipeline(Config(project_name="demo-app", default_depth=EnrichmentDepth.FULL))
        assert pipeline.default_flags() == EnrichmentFlags.for_depth(EnrichmentDepth.FULL)
        project = await pipeline.generate(1, express_stack.as_dict(), enrich=True)
        explicit = await pipeline.generate(
            1, express_stack.as_dict(), EnrichmentFlags.for_depth(EnrichmentDepth.FULL)
        )
        assert project.enrichment == pipeline.default_flags()
        assert project.files == explicit.files

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_explicit_flags_win_over_depth(self, express_stack):
        pipeline = Pipeline(Config(project_name="demo-app", default_depth=EnrichmentDepth.FULL))
        flags = EnrichmentFlags.for_depth(EnrichmentDepth.MINIMAL)
        project = await pipeline.generate(1, express_stack.as_dict(), flags, enrich=True)
        assert project.enrichment == flags

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_batch_enrich_uses_configured_depth(self, config):
        pipeline = Pipeline(config.model_copy(update={"default_depth": EnrichmentDepth.MINIMAL}))
        projects = await pipeline.generate_batch([1, 2], enrich=True)
        assert all(p.enrichment == pipeline.default_flags() for p in projects)
        assert all(p.metadata.enrichment_applied for p in projects)


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class TestErrors:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_negative_seed(self, pipeline):
        with pytest.raises(InvalidSeed):
            await pipeline.generate(-1)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_unsatisfiable(self, pipeline):
        with pytest.raises(UnsatisfiableConstraints):
            await pipeline.generate(1, {"language": "python", "framework": "express"})

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_override_mode_reports_fallback(self):
        pipeline = Pipeline(Config(project_name="demo-app", override_forced_conflicts=True))
        project = await pipeline.generate(1, {"language": "python", "orm": "prisma"})
        assert "orm" in project.metadata.fallbacks

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_strategy_failure_propagates(self, config):
        pipeline = Pipeline(config, strategies=StrategySet([_Boom()]))
        with pytest.raises(StrategyFailure) as exc_info:
            await pipeline.generate(1)
        assert exc_info.value.strategy_id == "boom"
        assert isinstance(exc_info.value.cause, RuntimeError)


# ---------------------------------------------------------------------------
# Batch
# ---------------------------------------------------------------------------


class TestGenerateBatch:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_results_in_seed_order(self, pipeline):
        projects = await pipeline.generate_batch([3, 1, 2])
        assert [p.seed for p in projects] == [3, 1, 2]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_batch_matches_single_runs(self, config):
        batch_config = config.model_copy(update={"batch": BatchConfig(max_parallel=2)})
        pipeline = Pipeline(batch_config)
        flags = EnrichmentFlags.for_depth("minimal")
        projects = await pipeline.generate_batch(range(5), flags=flags)
        for seed, project in enumerate(projects):
            single = await pipeline.generate(seed, flags=flags)
            assert _stable(project) == _stable(single)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_empty_batch(self, pipeline):
        assert await pipeline.generate_batch([]) == []

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_first_failure_propagates(self, pipeline):
        with pytest.raises(InvalidSeed):
            await pipeline.generate_batch([1, -2, 3])


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------


class TestReporting:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_verbose_stages(self, fastapi_stack):
        pipeline = Pipeline(Config(project_name="demo-app", verbose=True))
        with console.capture() as capture:
            await pipeline.generate(1, fastapi_stack.as_dict(), EnrichmentFlags(linting=True))
        output = capture.get()
        assert "RESOLVE" in output
        assert "GENERATE" in output
        assert "ENRICH" in output
        assert "python-fastapi-1" in output

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_quiet_by_default(self, pipeline, fastapi_stack):
        with console.capture() as capture:
            await pipeline.generate(1, fastapi_stack.as_dict())
        assert capture.get() == ""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_print_report(self, pipeline, fastapi_stack):
        project = await pipeline.generate(1, fastapi_stack.as_dict())
        with console.capture() as capture:
            pipeline.print_report(project)
        output = capture.get()
        assert "python-fastapi-1" in output
        assert "pyproject.toml" in output
        assert "procgen 1.0.0" in output
