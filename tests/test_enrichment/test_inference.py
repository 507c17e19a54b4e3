"""Unit tests for reverse stack inference (procgen.enrichment.inference).

Tests cover:
- Recovering the stack behind generated file maps
- Confidence scores and evidence signals
- Fallbacks for sparse or contradictory maps
- Manifests whose fields have unexpected types
"""

from __future__ import annotations

import json

import pytest

from procgen.engine.constraints import validate_stack
from procgen.enrichment import infer_stack
from procgen.models import (
    CICD,
    FIELD_ORDER,
    ORM,
    Archetype,
    Database,
    EnrichmentFlags,
    Framework,
    Language,
    Packaging,
    Styling,
)


class TestGeneratedMaps:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_express_round_trip(self, express_stack, generate):
        inferred = infer_stack(await generate(express_stack))
        assert inferred.stack == express_stack
        assert inferred.confidence["language"] == 0.9
        assert inferred.confidence["framework"] == 0.8
        assert "framework: dependency express" in inferred.signals

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_fastapi_core_fields(self, fastapi_stack, generate):
        stack = infer_stack(await generate(fastapi_stack)).stack
        assert stack.language is Language.PYTHON
        assert stack.framework is Framework.FASTAPI
        assert stack.archetype is Archetype.BACKEND
        assert stack.database is Database.POSTGRES
        assert stack.orm is ORM.SQLALCHEMY
        assert stack.packaging is Packaging.DOCKER
        assert stack.cicd is CICD.GITHUB_ACTIONS

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_react_styling(self, react_stack, generate):
        stack = infer_stack(await generate(react_stack)).stack
        assert stack.archetype is Archetype.WEB
        assert stack.framework is Framework.REACT
        assert stack.styling is Styling.TAILWIND

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_go_cli(self, go_cli_stack, generate):
        stack = infer_stack(await generate(go_cli_stack)).stack
        assert stack.language is Language.GO
        assert stack.framework is Framework.COBRA
        assert stack.archetype is Archetype.CLI
        assert stack.cicd is CICD.GITLAB_CI

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_enriched_map_still_recognised(self, express_stack, generate, enrichment):
        files = await generate(express_stack)
        result = await enrichment.run(
            express_stack, EnrichmentFlags.for_depth("full"), files, seed=1, project_name="demo-app"
        )
        stack = infer_stack(result.files).stack
        assert stack.framework is Framework.EXPRESS
        assert stack.language is Language.TYPESCRIPT


class TestSparseMaps:
    @pytest.mark.unit
    def test_empty_map_is_valid_stack(self, matrix):
        inferred = infer_stack({})
        assert validate_stack(inferred.stack.as_dict(), matrix) == []
        assert inferred.confidence["language"] == 0.1
        assert list(inferred.confidence) == list(FIELD_ORDER)
        assert 0.0 < inferred.score < 0.5

    @pytest.mark.unit
    def test_extension_only_detection(self):
        inferred = infer_stack({"src/main.rs": "fn main() {}\n"})
        assert inferred.stack.language is Language.RUST
        assert inferred.confidence["language"] == 0.6

    @pytest.mark.unit
    def test_javascript_without_typescript(self):
        files = {"package.json": json.dumps({"name": "x", "dependencies": {"fastify": "^4.0.0"}})}
        stack = infer_stack(files).stack
        assert stack.language is Language.JAVASCRIPT
        assert stack.framework is Framework.FASTIFY
        assert stack.archetype is Archetype.BACKEND

    @pytest.mark.unit
    def test_conflicting_detection_defaulted(self, matrix):
        # A web project with a database driver: web archetypes admit no database.
        manifest = {"name": "x", "dependencies": {"react": "^18.3.0", "pg": "^8.11.0"}}
        inferred = infer_stack({"package.json": json.dumps(manifest), "tsconfig.json": "{}"})
        assert inferred.stack.archetype is Archetype.WEB
        assert inferred.stack.database is Database.NONE
        assert inferred.confidence["database"] <= 0.3
        assert any(signal.startswith("database: postgres conflicts") for signal in inferred.signals)
        assert validate_stack(inferred.stack.as_dict(), matrix) == []

    @pytest.mark.unit
    def test_kotlin_sources_beat_pom(self):
        files = {"pom.xml": "<project></project>", "src/main/kotlin/App.kt": "fun main() {}\n"}
        assert infer_stack(files).stack.language is Language.KOTLIN


class TestMalformedManifests:
    """Valid manifests whose fields have unexpected types."""

    @pytest.mark.unit
    def test_null_package_name(self, matrix):
        manifest = {"name": None, "dependencies": {"express": "^4.19.0"}}
        inferred = infer_stack({"package.json": json.dumps(manifest)})
        assert inferred.stack.language is Language.JAVASCRIPT
        assert inferred.stack.framework is Framework.EXPRESS
        assert validate_stack(inferred.stack.as_dict(), matrix) == []

    @pytest.mark.unit
    def test_cargo_package_not_a_table(self, matrix):
        inferred = infer_stack({"Cargo.toml": 'package = "x"\n\n[dependencies]\nclap = "4"\n'})
        assert inferred.stack.language is Language.RUST
        assert validate_stack(inferred.stack.as_dict(), matrix) == []

    @pytest.mark.unit
    def test_scripts_as_list(self, matrix):
        manifest = {"name": "x", "scripts": ["build"], "dependencies": {"fastify": "^4.0.0"}}
        inferred = infer_stack({"package.json": json.dumps(manifest)})
        assert inferred.stack.framework is Framework.FASTIFY
        assert validate_stack(inferred.stack.as_dict(), matrix) == []

    @pytest.mark.unit
    def test_styled_components_outside_react_defaulted(self, matrix):
        manifest = {"name": "x", "dependencies": {"vue": "^3.4.0", "styled-components": "^6.1.0"}}
        inferred = infer_stack({"package.json": json.dumps(manifest), "tsconfig.json": "{}"})
        assert inferred.stack.framework is Framework.VUE
        assert inferred.stack.styling is not Styling.STYLED_COMPONENTS
        assert validate_stack(inferred.stack.as_dict(), matrix) == []
