"""Unit tests for manifest export (procgen.enrichment.exporter)."""

from __future__ import annotations

import pytest

from procgen.enrichment import export_manifest
from procgen.enrichment.exporter import API_VERSION, ManifestEnrichment
from procgen.models import EnrichmentFlags


class TestExportManifest:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_wire_form(self, fastapi_stack, generate):
        data = export_manifest(await generate(fastapi_stack), name="demo-app").to_dict()
        assert data["apiVersion"] == API_VERSION == "procgen/v1"
        assert data["metadata"] == {
            "name": "demo-app",
            "version": "1.0.0",
            "description": "Generated backend project using python + fastapi",
            "tags": ["backend", "python", "fastapi", "postgres"],
        }
        assert data["prompts"] == [
            {"id": "project_name", "type": "string", "message": "Project name", "default": "demo-app"}
        ]
        assert data["actions"] == [
            {"type": "generate", "src": "template/", "dest": "{{ project_name }}"}
        ]
        assert "enrichment" not in data

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_tags_skip_none(self, go_cli_stack, generate):
        metadata = export_manifest(await generate(go_cli_stack)).metadata
        assert metadata.name == "exported-project"
        assert metadata.tags == ["cli", "go", "cobra"]

    @pytest.mark.unit
    def test_description_without_framework(self):
        metadata = export_manifest({"src/main.rs": "fn main() {}\n"}, version="2.0.0").metadata
        assert metadata.version == "2.0.0"
        assert "+" not in metadata.description

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_enrichment_aliases(self, fastapi_stack, generate):
        flags = EnrichmentFlags.for_depth("minimal")
        data = export_manifest(await generate(fastapi_stack), flags=flags).to_dict()
        assert data["enrichment"] == {
            "enabled": True,
            "depth": "minimal",
            "cicd": True,
            "release": False,
            "fillLogic": False,
            "tests": False,
            "dockerProd": False,
            "linting": True,
            "envFiles": True,
            "docs": True,
        }

    @pytest.mark.unit
    def test_enrichment_from_flags(self):
        enrichment = ManifestEnrichment.from_flags(EnrichmentFlags(docker_prod=True))
        assert enrichment.docker_prod
        assert not enrichment.fill_logic
