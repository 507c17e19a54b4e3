"""Unit tests for the file-map introspector (procgen.enrichment.introspector).

Tests cover:
- Manifest detection order and per-format parsing
- Dependency lookups and toolchain default scripts
- Dockerfile port detection and the recorded-miss fallback
- Glob search and entry point discovery
"""

from __future__ import annotations

import json

import pytest

from procgen.engine.errors import IntrospectionMiss
from procgen.enrichment.introspector import ManifestType, ProjectIntrospector

PACKAGE_JSON = json.dumps(
    {
        "name": "demo-app",
        "scripts": {"test": "vitest run", "build": "tsup src/index.ts"},
        "dependencies": {"express": "^4.19.0"},
        "devDependencies": {"vitest": "^1.6.0"},
    }
)

GO_MOD = """\
module github.com/example/demo-app

go 1.22

require (
\tgithub.com/spf13/cobra v1.8.0
\t// indirect comment
)

require golang.org/x/text v0.14.0
"""

CARGO_TOML = """\
[package]
name = "demo-app"
version = "0.1.0"

[dependencies]
clap = { version = "4", features = ["derive"] }

[dev-dependencies]
assert_cmd = "2"
"""


# ---------------------------------------------------------------------------
# Manifests
# ---------------------------------------------------------------------------


class TestManifest:
    @pytest.mark.unit
    def test_npm_manifest(self):
        manifest = ProjectIntrospector({"package.json": PACKAGE_JSON}).get_manifest()
        assert manifest.type is ManifestType.NPM
        assert manifest.path == "package.json"
        assert manifest.name == "demo-app"
        assert manifest.dependencies == ["express"]
        assert manifest.dev_dependencies == ["vitest"]
        assert manifest.scripts["test"] == "vitest run"

    @pytest.mark.unit
    def test_detection_order_prefers_package_json(self):
        files = {"Cargo.toml": CARGO_TOML, "package.json": PACKAGE_JSON}
        assert ProjectIntrospector(files).get_manifest().type is ManifestType.NPM

    @pytest.mark.unit
    def test_cargo_gets_toolchain_scripts(self):
        manifest = ProjectIntrospector({"Cargo.toml": CARGO_TOML}).get_manifest()
        assert manifest.name == "demo-app"
        assert manifest.dependencies == ["clap"]
        assert manifest.dev_dependencies == ["assert_cmd"]
        assert manifest.scripts["test"] == "cargo test"

    @pytest.mark.unit
    def test_go_mod_block_and_single_requires(self):
        manifest = ProjectIntrospector({"go.mod": GO_MOD}).get_manifest()
        assert manifest.name == "github.com/example/demo-app"
        assert manifest.dependencies == ["github.com/spf13/cobra", "golang.org/x/text"]
        assert manifest.scripts["test"] == "go test ./..."

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_generated_pyproject(self, fastapi_stack, generate):
        introspect = ProjectIntrospector(await generate(fastapi_stack), fastapi_stack, "demo-app")
        manifest = introspect.get_manifest()
        assert manifest.type is ManifestType.PYPROJECT
        assert manifest.name == "demo-app"
        assert "fastapi" in manifest.dependencies
        assert "psycopg" in manifest.dependencies
        assert "pytest" in manifest.dev_dependencies
        assert introspect.get_test_command() == "pytest"

    @pytest.mark.unit
    def test_gemfile_and_composer(self):
        gemfile = 'source "https://rubygems.org"\n\ngem "rails", "~> 7.1"\ngem "pg"\n'
        assert ProjectIntrospector({"Gemfile": gemfile}).get_manifest().dependencies == ["rails", "pg"]
        composer = json.dumps({"require": {"php": ">=8.2"}, "scripts": {"test": ["phpunit"]}})
        manifest = ProjectIntrospector({"composer.json": composer}).get_manifest()
        assert manifest.type is ManifestType.COMPOSER
        assert manifest.scripts == {"test": "phpunit"}

    @pytest.mark.unit
    def test_csproj_fallback(self):
        csproj = '<Project><ItemGroup><PackageReference Include="Serilog" Version="3" /></ItemGroup></Project>'
        manifest = ProjectIntrospector({"src/Demo/Demo.csproj": csproj}).get_manifest()
        assert manifest.path == "src/Demo/Demo.csproj"
        assert manifest.dependencies == ["Serilog"]
        assert manifest.scripts["test"] == "dotnet test"

    @pytest.mark.unit
    def test_missing_or_malformed_manifest(self):
        assert ProjectIntrospector({}).get_manifest().type is ManifestType.UNKNOWN
        broken = ProjectIntrospector({"package.json": "{not json"}).get_manifest()
        assert broken.type is ManifestType.NPM
        assert broken.dependencies == []

    @pytest.mark.unit
    def test_wrongly_typed_fields_read_as_absent(self):
        npm = json.dumps({"name": None, "scripts": ["build"], "dependencies": ["react"]})
        manifest = ProjectIntrospector({"package.json": npm}).get_manifest()
        assert manifest.name == ""
        assert manifest.scripts == {}
        assert manifest.dependencies == []
        cargo = ProjectIntrospector({"Cargo.toml": 'package = "x"\n'}).get_manifest()
        assert cargo.name == ""
        assert cargo.scripts["test"] == "cargo test"
        pyproject = '[project]\nname = 3\ndependencies = "fastapi"\n'
        manifest = ProjectIntrospector({"pyproject.toml": pyproject}).get_manifest()
        assert manifest.name == ""
        assert manifest.dependencies == []

    @pytest.mark.unit
    def test_all_manifests(self):
        files = {"package.json": PACKAGE_JSON, "go.mod": GO_MOD}
        paths = [m.path for m in ProjectIntrospector(files).get_all_manifests()]
        assert paths == ["package.json", "go.mod"]


class TestDependencies:
    @pytest.mark.unit
    def test_has_dependency(self):
        introspect = ProjectIntrospector({"package.json": PACKAGE_JSON})
        assert introspect.has_dependency("express")
        assert introspect.has_dependency("vitest")
        assert not introspect.has_dependency("vitest", dev=False)
        assert not introspect.has_dependency("react")

    @pytest.mark.unit
    def test_sees_later_writes(self):
        files: dict[str, str] = {}
        introspect = ProjectIntrospector(files)
        assert not introspect.has_dependency("express")
        files["package.json"] = PACKAGE_JSON
        assert introspect.has_dependency("express")
        assert introspect.get_build_command() == "tsup src/index.ts"


# ---------------------------------------------------------------------------
# Ports
# ---------------------------------------------------------------------------


class TestPorts:
    @pytest.mark.unit
    def test_exposed_ports_in_order(self):
        dockerfile = "FROM node:20\nEXPOSE 3000\n  EXPOSE 9229\n# EXPOSE 1\n"
        introspect = ProjectIntrospector({"Dockerfile": dockerfile})
        assert introspect.get_exposed_ports() == [3000, 9229]
        assert introspect.primary_port() == 3000

    @pytest.mark.unit
    def test_primary_port_miss(self):
        with pytest.raises(IntrospectionMiss) as exc_info:
            ProjectIntrospector({"Dockerfile": "FROM scratch\n"}).primary_port()
        assert exc_info.value.query == "exposed port"

    @pytest.mark.unit
    def test_port_or_default_records_miss_once(self):
        introspect = ProjectIntrospector({})
        assert introspect.port_or_default() == 3000
        assert introspect.port_or_default(8080) == 8080
        assert introspect.misses == ["exposed port"]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_generated_dockerfile_port(self, fastapi_stack, generate):
        introspect = ProjectIntrospector(await generate(fastapi_stack))
        assert introspect.port_or_default() == 8000
        assert introspect.misses == []


# ---------------------------------------------------------------------------
# Files and entry points
# ---------------------------------------------------------------------------


class TestFiles:
    @pytest.mark.unit
    def test_find_files_glob(self):
        files = {"src/a.ts": "", "src/nested/b.ts": "", "src/c.js": "", "d.ts": ""}
        introspect = ProjectIntrospector(files)
        assert introspect.find_files("src/*.ts") == ["src/a.ts"]
        assert introspect.find_files("src/**/*.ts") == ["src/a.ts", "src/nested/b.ts"]
        assert introspect.find_files("**/*.ts") == ["d.ts", "src/a.ts", "src/nested/b.ts"]

    @pytest.mark.unit
    def test_find_files_segment_rules(self):
        files = {
            ".github/workflows/ci.yml": "",
            "src/a/b/c/x.proto": "",
            "src/x.proto": "",
            "vite.config.ts": "",
            "pkg/vite.config.ts": "",
            "src/app.module.css": "",
        }
        introspect = ProjectIntrospector(files)
        assert introspect.find_files(".github/workflows/*") == [".github/workflows/ci.yml"]
        assert introspect.find_files("vite.config.*") == ["vite.config.ts"]
        assert introspect.find_files("src/**/c/*.proto") == ["src/a/b/c/x.proto"]
        assert introspect.find_files("src/**") == [
            "src/a/b/c/x.proto",
            "src/app.module.css",
            "src/x.proto",
        ]
        assert introspect.find_files("*.proto") == []
        assert introspect.find_files("src/?.proto") == ["src/x.proto"]
        assert introspect.find_files("SRC/*.proto") == []

    @pytest.mark.unit
    def test_parse_json(self):
        introspect = ProjectIntrospector({"a.json": '{"x": 1}', "b.json": "nope", "c.json": ""})
        assert introspect.parse_json("a.json") == {"x": 1}
        assert introspect.parse_json("b.json") is None
        assert introspect.parse_json("c.json") is None
        assert introspect.parse_json("missing.json") is None

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_entry_points(self, fastapi_stack, express_stack, generate):
        python = ProjectIntrospector(await generate(fastapi_stack), fastapi_stack, "demo-app")
        node = ProjectIntrospector(await generate(express_stack), express_stack, "demo-app")
        assert python.get_entry_point() == "src/demo_app/main.py"
        assert node.get_entry_point() == "src/index.ts"

    @pytest.mark.unit
    def test_entry_point_needs_stack(self):
        assert ProjectIntrospector({"src/index.ts": ""}).get_entry_point() is None

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_entry_point_from_manifest_name(self, fastapi_stack, generate):
        introspect = ProjectIntrospector(await generate(fastapi_stack), fastapi_stack)
        assert introspect.get_entry_point() == "src/demo_app/main.py"
