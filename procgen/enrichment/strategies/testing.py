"""Test enrichment: runner configuration, extra unit tests and HTTP integration tests."""

from __future__ import annotations

import re

from procgen.enrichment.enricher import EnrichmentContext, EnrichmentStrategy
from procgen.models import Archetype, EnrichmentFlags, Language, Stack, TestingFramework

NODE_LANGUAGES = (Language.TYPESCRIPT, Language.JAVASCRIPT)

# ---------------------------------------------------------------------------
# Runner configuration
# ---------------------------------------------------------------------------

VITEST_CONFIG = """\
import { defineConfig } from "vitest/config";

export default defineConfig({
  test: {
    include: ["tests/**/*.test.{{ ext }}", "src/**/*.test.{{ ext }}"],
    coverage: {
      provider: "v8",
      reporter: ["text", "lcov"],
    },
  },
});
"""

JEST_CONFIG = """\
{% if ts %}
import type { Config } from "jest";

const config: Config = {
  preset: "ts-jest",
{% else %}
/** @type {import('jest').Config} */
const config = {
{% endif %}
  testEnvironment: "node",
  testMatch: ["**/tests/**/*.test.{{ ext }}"],
  collectCoverageFrom: ["src/**/*.{{ ext }}"],
};

export default config;
"""

MOCHARC = """\
{
  "spec": "tests/**/*.test.{{ ext }}",
  "recursive": true{% if ts %},
  "require": "tsx"{% endif %}

}
"""

PYTEST_INI = """\
[pytest]
testpaths = tests
addopts = -ra
markers =
    integration: tests that need a running server
"""


class RunnerConfigEnrichStrategy(EnrichmentStrategy):
    """Adds the test runner's configuration file when the scaffold has none."""

    id = "enrich-test-config"
    name = "Test runner configuration"
    priority = 28

    def matches(self, stack: Stack, flags: EnrichmentFlags) -> bool:
        return flags.tests

    async def apply(self, ctx: EnrichmentContext) -> None:
        testing = ctx.stack.testing
        introspect = ctx.introspect
        ext = "ts" if ctx.stack.language is Language.TYPESCRIPT else "js"
        if testing is TestingFramework.VITEST:
            if not introspect.find_files("vitest.config.*") and not introspect.find_files("vite.config.*"):
                ctx.write(f"vitest.config.{ext}", ctx.render(VITEST_CONFIG, ext=ext))
            ctx.ensure_json_entries("package.json", "scripts", {"test:coverage": "vitest run --coverage"})
            ctx.ensure_json_entries("package.json", "devDependencies", {"@vitest/coverage-v8": "^1.6.0"})
        elif testing is TestingFramework.JEST:
            if not introspect.find_files("jest.config.*"):
                ctx.write(f"jest.config.{ext}", ctx.render(JEST_CONFIG, ext=ext))
            ctx.ensure_json_entries("package.json", "scripts", {"test:coverage": "jest --coverage"})
        elif testing is TestingFramework.MOCHA:
            if not introspect.find_files(".mocharc*"):
                ctx.write(".mocharc.json", ctx.render(MOCHARC, ext=ext))
        elif testing is TestingFramework.PYTEST:
            pyproject = introspect.get_content("pyproject.toml") or ""
            if "[tool.pytest" not in pyproject:
                ctx.write_if_absent("pytest.ini", PYTEST_INI)


# ---------------------------------------------------------------------------
# Unit tests
# ---------------------------------------------------------------------------

NODE_IMPORTS = """\
{% if testing == "vitest" %}
import { describe, expect, it } from "vitest";
{% elif testing == "mocha" %}
import { expect } from "chai";
{% endif %}
"""

NODE_MANIFEST_TEST = NODE_IMPORTS + """\
import { readFileSync } from "node:fs";

const manifest = JSON.parse(readFileSync(new URL("../package.json", import.meta.url), "utf8"));

describe("package manifest", () => {
  it("is named {{ slug }}", () => {
    expect(manifest.name).{{ eq }}("{{ slug }}");
  });

  it("declares a test script", () => {
    expect(typeof manifest.scripts.test).{{ eq }}("string");
  });
});
"""

PYTHON_PACKAGE_TEST = """\
import re

import {{ ident }}


def test_version_is_semver():
    assert re.fullmatch(r"\\d+\\.\\d+\\.\\d+", {{ ident }}.__version__)


def test_greet_includes_name():
    assert "{{ slug }}" in {{ ident }}.greet("{{ slug }}")
"""

GO_UNIT_TEST = """\
package {{ package }}

import "testing"

func TestPackageBuilds(t *testing.T) {
	t.Parallel()
	if testing.Short() {
		t.Skip("short mode")
	}
}
"""

RUST_UNIT_TEST = """\
{% if library %}
use {{ ident }}::greet;

#[test]
fn greet_includes_name() {
    assert!(greet("{{ slug }}").contains("{{ slug }}"));
}
{% else %}
#[test]
fn crate_manifest_names_package() {
    let manifest = include_str!("../Cargo.toml");
    assert!(manifest.contains("name = \\"{{ slug }}\\""));
}
{% endif %}
"""

_GO_PACKAGE_RE = re.compile(r"^package\s+(\w+)", re.MULTILINE)


def _go_package(ctx: EnrichmentContext) -> str:
    for path in ctx.introspect.find_files("*.go"):
        if path.endswith("_test.go"):
            continue
        match = _GO_PACKAGE_RE.search(ctx.files[path])
        if match:
            return match.group(1)
    return "main"


class UnitTestsEnrichStrategy(EnrichmentStrategy):
    """Adds unit tests next to the scaffold's own; existing tests are kept."""

    id = "enrich-unit-tests"
    name = "Unit tests"
    priority = 30

    def matches(self, stack: Stack, flags: EnrichmentFlags) -> bool:
        return flags.tests

    async def apply(self, ctx: EnrichmentContext) -> None:
        stack = ctx.stack
        language = stack.language
        if language in NODE_LANGUAGES and ctx.introspect.has_file("package.json"):
            ext = "ts" if language is Language.TYPESCRIPT else "js"
            eq = "to.equal" if stack.testing is TestingFramework.MOCHA else "toBe"
            ctx.write(f"tests/manifest.test.{ext}", ctx.render(NODE_MANIFEST_TEST, eq=eq))
        elif language is Language.PYTHON:
            ctx.write("tests/test_package.py", ctx.render(PYTHON_PACKAGE_TEST))
        elif language is Language.GO:
            ctx.write("package_test.go", ctx.render(GO_UNIT_TEST, package=_go_package(ctx)))
        elif language is Language.RUST:
            library = ctx.introspect.has_file("src/lib.rs")
            ctx.write("tests/unit_test.rs", ctx.render(RUST_UNIT_TEST, library=library))


# ---------------------------------------------------------------------------
# Integration tests
# ---------------------------------------------------------------------------

NODE_INTEGRATION_TEST = NODE_IMPORTS + """\

const baseUrl = process.env.BASE_URL ?? "http://localhost:{{ port }}";

describe("{{ slug }} HTTP API", () => {
  it("answers the health check", async () => {
    const response = await fetch(`${baseUrl}/health`);
    expect(response.status).{{ eq }}(200);
  });
});
"""

PYTHON_INTEGRATION_TEST = """\
import json
import os
import urllib.request

import pytest

BASE_URL = os.environ.get("BASE_URL", "http://localhost:{{ port }}")

pytestmark = pytest.mark.integration


def test_health_endpoint():
    with urllib.request.urlopen(f"{BASE_URL}/health", timeout=5) as response:
        assert response.status == 200
        assert json.loads(response.read())["status"] == "ok"
"""

GO_INTEGRATION_TEST = """\
//go:build integration

package {{ package }}

import (
	"net/http"
	"os"
	"testing"
)

func TestHealthEndpoint(t *testing.T) {
	baseURL := os.Getenv("BASE_URL")
	if baseURL == "" {
		baseURL = "http://localhost:{{ port }}"
	}
	resp, err := http.Get(baseURL + "/health")
	if err != nil {
		t.Fatalf("request failed: %v", err)
	}
	defer resp.Body.Close()
	if resp.StatusCode != http.StatusOK {
		t.Fatalf("expected 200, got %d", resp.StatusCode)
	}
}
"""


class IntegrationTestsEnrichStrategy(EnrichmentStrategy):
    """HTTP tests against a running server on the detected port (3000 when none is exposed)."""

    id = "enrich-integration-tests"
    name = "Integration tests"
    priority = 32

    def matches(self, stack: Stack, flags: EnrichmentFlags) -> bool:
        return flags.tests and stack.archetype is Archetype.BACKEND

    async def apply(self, ctx: EnrichmentContext) -> None:
        stack = ctx.stack
        language = stack.language
        if language in NODE_LANGUAGES:
            port = ctx.introspect.port_or_default()
            ext = "ts" if language is Language.TYPESCRIPT else "js"
            eq = "to.equal" if stack.testing is TestingFramework.MOCHA else "toBe"
            ctx.write(
                f"tests/integration/api.test.{ext}",
                ctx.render(NODE_INTEGRATION_TEST, port=port, eq=eq),
            )
        elif language is Language.PYTHON:
            port = ctx.introspect.port_or_default()
            ctx.write("tests/integration/test_api.py", ctx.render(PYTHON_INTEGRATION_TEST, port=port))
        elif language is Language.GO:
            port = ctx.introspect.port_or_default()
            ctx.write(
                "integration_test.go",
                ctx.render(GO_INTEGRATION_TEST, port=port, package=_go_package(ctx)),
            )
