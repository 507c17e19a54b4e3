"""Unit tests for the per-language scaffolds (procgen.strategies.languages).

Tests cover:
- Every language (and every archetype it supports) yields an anchor manifest
- Node package.json / tsconfig.json shape
- Python backend layout
- The unhandled-language fallback
"""

from __future__ import annotations

import json

import pytest

from procgen.engine.registry import StrategySet
from procgen.engine.rng import SeededRNG
from procgen.matrices import ARCHETYPES
from procgen.models import Language
from procgen.strategies.languages import (
    LANGUAGE_SCAFFOLDS,
    UnhandledLanguageScaffold,
    build_language_scaffolds,
)

ANCHOR_FILES = frozenset({
    "package.json",
    "pyproject.toml",
    "go.mod",
    "Cargo.toml",
    "build.gradle",
    "build.gradle.kts",
    "pom.xml",
    "Gemfile",
    "composer.json",
    "CMakeLists.txt",
    "Package.swift",
})


def _has_anchor(files: dict[str, str]) -> bool:
    return any(path in ANCHOR_FILES or path.endswith(".csproj") for path in files)


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------


class TestDispatch:
    @pytest.mark.unit
    def test_every_language_has_a_scaffold(self):
        assert set(LANGUAGE_SCAFFOLDS) == set(Language)

    @pytest.mark.unit
    def test_jvm_languages_share_a_scaffold(self):
        scaffolds = build_language_scaffolds()
        assert scaffolds[Language.JAVA] is scaffolds[Language.KOTLIN]

    @pytest.mark.unit
    def test_builder_returns_fresh_instances(self):
        assert build_language_scaffolds()[Language.GO] is not build_language_scaffolds()[Language.GO]

    @pytest.mark.unit
    def test_scaffolds_match_only_their_languages(self, fastapi_stack):
        matching = [s.id for s in set(LANGUAGE_SCAFFOLDS.values()) if s.matches(fastapi_stack)]
        assert matching == ["scaffold-python"]


# ---------------------------------------------------------------------------
# Anchors
# ---------------------------------------------------------------------------


_LANGUAGE_ARCHETYPES = [
    (archetype.value, language.value)
    for archetype, entry in ARCHETYPES.items()
    for language in entry.languages
]


class TestAnchors:
    @pytest.mark.unit
    @pytest.mark.asyncio
    @pytest.mark.parametrize("archetype, language", _LANGUAGE_ARCHETYPES)
    async def test_anchor_manifest_written(self, make_stack, generate, archetype, language):
        for seed in (1, 2):
            stack = make_stack({"archetype": archetype, "language": language}, seed=seed)
            files = await generate(stack)
            assert _has_anchor(files), (stack, sorted(files))


# ---------------------------------------------------------------------------
# Node
# ---------------------------------------------------------------------------


class TestNodeScaffold:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_express_package_json(self, express_stack, generate):
        files = await generate(express_stack)
        manifest = json.loads(files["package.json"])
        assert manifest["name"] == "demo-app"
        assert manifest["scripts"]["test"] == "vitest run"
        assert manifest["scripts"]["build"] == "tsup src/index.ts --format esm --dts"
        assert "express" in manifest["dependencies"]
        assert "typescript" in manifest["devDependencies"]
        assert list(manifest["devDependencies"]) == sorted(manifest["devDependencies"])

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_express_entry_uses_port(self, express_stack, generate):
        files = await generate(express_stack)
        assert "process.env.PORT ?? 3000" in files["src/index.ts"]
        assert "tsconfig.json" in files
        assert "tests/health.test.ts" in files

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_javascript_has_no_tsconfig(self, make_stack, generate):
        stack = make_stack({"archetype": "backend", "language": "javascript", "framework": "express"})
        files = await generate(stack)
        assert "src/index.js" in files
        assert "tsconfig.json" not in files
        assert "typescript" not in json.loads(files["package.json"])["devDependencies"]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_react_web_layout(self, react_stack, generate):
        files = await generate(react_stack)
        assert {"index.html", "src/main.tsx", "src/App.tsx", "tailwind.config.js"} <= set(files)
        manifest = json.loads(files["package.json"])
        assert "react" in manifest["dependencies"]
        assert "tailwindcss" in manifest["dependencies"]
        tsconfig = json.loads(files["tsconfig.json"])
        assert tsconfig["compilerOptions"]["jsx"] == "react-jsx"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_cli_declares_bin(self, make_stack, generate):
        stack = make_stack({"archetype": "cli", "language": "typescript", "framework": "commander"})
        files = await generate(stack)
        assert json.loads(files["package.json"])["bin"] == {"demo-app": "dist/index.js"}
        assert "src/commands/hello.ts" in files


# ---------------------------------------------------------------------------
# Python
# ---------------------------------------------------------------------------


class TestPythonScaffold:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_fastapi_layout(self, fastapi_stack, generate):
        files = await generate(fastapi_stack)
        assert 'FastAPI(title="demo-app")' in files["src/demo_app/main.py"]
        assert 'name = "demo-app"' in files["pyproject.toml"]
        assert "tests/test_health.py" in files
        assert "src/demo_app/__init__.py" in files

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_requirements_follow_stack(self, fastapi_stack, generate):
        requirements = (await generate(fastapi_stack))["requirements.txt"].splitlines()
        assert "fastapi>=0.110" in requirements
        assert "sqlalchemy>=2.0" in requirements
        assert "psycopg[binary]>=3.1" in requirements

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_click_cli_script(self, make_stack, generate):
        stack = make_stack({"archetype": "cli", "language": "python", "framework": "click"})
        files = await generate(stack)
        assert 'demo-app = "demo_app.cli:main"' in files["pyproject.toml"]
        assert "import click" in files["src/demo_app/cli.py"]


# ---------------------------------------------------------------------------
# Fallback
# ---------------------------------------------------------------------------


class TestUnhandledLanguage:
    @pytest.mark.unit
    def test_matches_only_unclaimed_languages(self, fastapi_stack, go_cli_stack):
        fallback = UnhandledLanguageScaffold(frozenset({Language.PYTHON}))
        assert not fallback.matches(fastapi_stack)
        assert fallback.matches(go_cli_stack)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_writes_minimal_layout(self, go_cli_stack):
        strategies = StrategySet([UnhandledLanguageScaffold(frozenset())])
        files = await strategies.run(go_cli_stack, "demo-app", SeededRNG(1))
        assert set(files) == {"Makefile", "src/.gitkeep"}
        assert "No build configured for go" in files["Makefile"]

    @pytest.mark.unit
    def test_standard_set_never_needs_fallback(self, strategies, make_stack):
        fallback = strategies.get("unhandled-language")
        for language in Language:
            assert not fallback.matches(make_stack(language=language.value))
