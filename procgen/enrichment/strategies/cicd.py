"""CI/CD upgrades: cached, concurrent GitHub Actions and GitLab pipelines, release workflow."""

from __future__ import annotations

from typing import NamedTuple, Optional

from procgen.enrichment.enricher import EnrichmentContext, EnrichmentStrategy
from procgen.models import CICD, EnrichmentFlags, Language, Stack
from procgen.strategies.ci import ci_commands


def gh_expr(expression: str) -> str:
    """Render a GitHub Actions ``${{ ... }}`` expression."""
    return "${{ " + expression + " }}"


class Toolchain(NamedTuple):
    action: str
    version_key: str
    version: str
    matrix: tuple[str, ...]
    cache: str = ""


TOOLCHAINS: dict[Language, Toolchain] = {
    Language.TYPESCRIPT: Toolchain("actions/setup-node@v4", "node-version", "20", ("18", "20", "22"), "npm"),
    Language.JAVASCRIPT: Toolchain("actions/setup-node@v4", "node-version", "20", ("18", "20", "22"), "npm"),
    Language.PYTHON: Toolchain("actions/setup-python@v5", "python-version", "3.12", ("3.11", "3.12", "3.13"), "pip"),
    Language.GO: Toolchain("actions/setup-go@v5", "go-version", "1.22", ("1.21", "1.22")),
    Language.JAVA: Toolchain("actions/setup-java@v4", "java-version", "17", ("17", "21"), "gradle"),
    Language.KOTLIN: Toolchain("actions/setup-java@v4", "java-version", "17", ("17", "21"), "gradle"),
    Language.CSHARP: Toolchain("actions/setup-dotnet@v4", "dotnet-version", "8.0.x", ("6.0.x", "8.0.x")),
    Language.PHP: Toolchain("shivammathur/setup-php@v2", "php-version", "8.3", ("8.2", "8.3")),
    Language.RUBY: Toolchain("ruby/setup-ruby@v1", "ruby-version", "3.3", ("3.2", "3.3")),
    Language.SWIFT: Toolchain("swift-actions/setup-swift@v2", "swift-version", "5.10", ("5.9", "5.10")),
}

# Linters runnable without extra project configuration.
LINT_COMMANDS: dict[Language, str] = {
    Language.PYTHON: "pip install ruff && ruff check .",
    Language.GO: "go vet ./...",
    Language.RUST: "cargo clippy -- -D warnings",
    Language.CSHARP: "dotnet format --verify-no-changes",
    Language.RUBY: "bundle exec rubocop",
}


def lint_command(ctx: EnrichmentContext) -> Optional[str]:
    """The manifest's ``lint`` script, else the language's stock linter."""
    manifest = ctx.introspect.get_manifest()
    if manifest.type.value in ("npm", "composer"):
        if "lint" not in manifest.scripts:
            return None
        return "npm run lint" if manifest.type.value == "npm" else "composer lint"
    return LINT_COMMANDS.get(ctx.stack.language)


def build_command(ctx: EnrichmentContext) -> Optional[str]:
    manifest = ctx.introspect.get_manifest()
    if manifest.type.value == "npm":
        return "npm run build" if "build" in manifest.scripts else None
    return ctx.introspect.get_build_command()


# ---------------------------------------------------------------------------
# GitHub Actions
# ---------------------------------------------------------------------------

GITHUB_WORKFLOW = """\
name: CI

on:
  push:
    branches: [main, master]
  pull_request:
    branches: [main, master]

concurrency:
  group: {{ expr("github.workflow") }}-{{ expr("github.ref") }}
  cancel-in-progress: true

permissions:
  contents: read

jobs:
  build:
    runs-on: ubuntu-latest
{% if toolchain and full %}
    strategy:
      fail-fast: false
      matrix:
        version: [{{ toolchain.matrix | map("tojson") | join(", ") }}]
{% endif %}
    steps:
      - uses: actions/checkout@v4
{% if toolchain %}

      - name: Set up toolchain
        uses: {{ toolchain.action }}
        with:
{% if toolchain.action == "actions/setup-java@v4" %}
          distribution: temurin
{% endif %}
          {{ toolchain.version_key }}: {{ version }}
{% if toolchain.cache %}
          cache: {{ toolchain.cache }}
{% endif %}
{% if toolchain.action == "ruby/setup-ruby@v1" %}
          bundler-cache: true
{% endif %}
{% elif language == "rust" %}

      - uses: dtolnay/rust-toolchain@stable
        with:
          components: clippy

      - uses: Swatinem/rust-cache@v2
{% endif %}
{% if language == "go" %}

      - name: Cache Go modules
        uses: actions/cache@v4
        with:
          path: ~/go/pkg/mod
          key: {{ expr("runner.os") }}-go-{{ expr("hashFiles('**/go.sum')") }}
{% endif %}

      - name: Install dependencies
        run: {{ install }}
{% if lint %}

      - name: Lint
        run: {{ lint }}
{% endif %}

      - name: Test
        run: {{ test }}
{% if build %}

      - name: Build
        run: {{ build }}
{% endif %}
{% if docker %}

  docker:
    runs-on: ubuntu-latest
    needs: build
    steps:
      - uses: actions/checkout@v4

      - name: Set up Docker Buildx
        uses: docker/setup-buildx-action@v3

      - name: Build image
        uses: docker/build-push-action@v5
        with:
          context: .
          push: false
          tags: {{ expr("github.repository") }}:test
          cache-from: type=gha
          cache-to: type=gha,mode=max

      - name: Smoke test image
        run: |
          docker run -d -p {{ port }}:{{ port }} --name smoke {{ expr("github.repository") }}:test
          sleep 5
          curl -f http://localhost:{{ port }}/health || echo "health endpoint not available"
          docker stop smoke
{% endif %}
"""


class GitHubActionsEnrichStrategy(EnrichmentStrategy):
    """Rewrites ``ci.yml`` with caching, concurrency, lint/build steps and, at
    full depth, a version matrix and a Docker smoke-test job."""

    id = "enrich-github-actions"
    name = "GitHub Actions enhancement"
    priority = 10

    def matches(self, stack: Stack, flags: EnrichmentFlags) -> bool:
        return flags.cicd and stack.cicd is CICD.GITHUB_ACTIONS

    async def apply(self, ctx: EnrichmentContext) -> None:
        stack = ctx.stack
        install, test = ci_commands(stack, ctx.files)
        toolchain = TOOLCHAINS.get(stack.language)
        version = ""
        if toolchain:
            version = gh_expr("matrix.version") if ctx.full else f'"{toolchain.version}"'
        docker = ctx.full and ctx.introspect.has_file("Dockerfile")
        ctx.write(
            ".github/workflows/ci.yml",
            ctx.render(
                GITHUB_WORKFLOW,
                expr=gh_expr,
                toolchain=toolchain,
                version=version,
                install=install,
                test=test,
                lint=lint_command(ctx),
                build=build_command(ctx),
                docker=docker,
                port=ctx.introspect.port_or_default() if docker else 0,
            ),
        )


# ---------------------------------------------------------------------------
# GitLab CI
# ---------------------------------------------------------------------------

GITLAB_CACHE: dict[Language, tuple[str, ...]] = {
    Language.TYPESCRIPT: ("node_modules/",),
    Language.JAVASCRIPT: ("node_modules/",),
    Language.PYTHON: (".cache/pip/",),
    Language.GO: (".go/pkg/mod/",),
    Language.RUST: ("target/", ".cargo/"),
    Language.JAVA: (".gradle/", ".m2/"),
    Language.KOTLIN: (".gradle/", ".m2/"),
    Language.PHP: ("vendor/",),
    Language.RUBY: ("vendor/bundle/",),
}

GITLAB_CI = """\
image: {{ image }}

stages:
{% if lint %}
  - lint
{% endif %}
  - test
{% if build %}
  - build
{% endif %}
{% if docker %}
  - package
{% endif %}
{% if cache_paths %}

cache:
  key: ${CI_COMMIT_REF_SLUG}
  paths:
{% for path in cache_paths %}
    - {{ path }}
{% endfor %}
{% endif %}
{% if language == "python" %}

variables:
  PIP_CACHE_DIR: "$CI_PROJECT_DIR/.cache/pip"
{% endif %}

default:
  before_script:
    - {{ install }}
{% if lint %}

lint:
  stage: lint
  script:
    - {{ lint }}
{% endif %}

test:
  stage: test
  script:
    - {{ test }}
{% if build %}

build:
  stage: build
  script:
    - {{ build }}
{% endif %}
{% if docker %}

docker:
  stage: package
  image: docker:24
  services:
    - docker:24-dind
  before_script: []
  script:
    - docker build -t $CI_REGISTRY_IMAGE:$CI_COMMIT_SHORT_SHA .
  rules:
    - if: $CI_COMMIT_BRANCH == $CI_DEFAULT_BRANCH
{% endif %}
"""


class GitLabCIEnrichStrategy(EnrichmentStrategy):
    id = "enrich-gitlab-ci"
    name = "GitLab CI enhancement"
    priority = 10

    def matches(self, stack: Stack, flags: EnrichmentFlags) -> bool:
        return flags.cicd and stack.cicd is CICD.GITLAB_CI

    async def apply(self, ctx: EnrichmentContext) -> None:
        stack = ctx.stack
        install, test = ci_commands(stack, ctx.files)
        ctx.write(
            ".gitlab-ci.yml",
            ctx.render(
                GITLAB_CI,
                image=ctx.matrix.languages[stack.language].ci_image,
                cache_paths=GITLAB_CACHE.get(stack.language, ()),
                install=install,
                test=test,
                lint=lint_command(ctx),
                build=build_command(ctx),
                docker=ctx.full and ctx.introspect.has_file("Dockerfile"),
            ),
        )


# ---------------------------------------------------------------------------
# Release workflow
# ---------------------------------------------------------------------------

RELEASE_STEPS: dict[Language, tuple[str, ...]] = {
    Language.TYPESCRIPT: ("npm ci", "npm run build --if-present", "npm pack"),
    Language.JAVASCRIPT: ("npm ci", "npm run build --if-present", "npm pack"),
    Language.PYTHON: ("pip install build", "python -m build"),
    Language.GO: (
        "GOOS=linux GOARCH=amd64 go build -o dist/{slug}-linux-amd64 .",
        "GOOS=darwin GOARCH=arm64 go build -o dist/{slug}-darwin-arm64 .",
        "GOOS=windows GOARCH=amd64 go build -o dist/{slug}-windows-amd64.exe .",
    ),
    Language.RUST: ("cargo build --release",),
    Language.JAVA: ("gradle build --no-daemon",),
    Language.KOTLIN: ("gradle build --no-daemon",),
    Language.CSHARP: ("dotnet publish -c Release -o dist",),
    Language.RUBY: ("gem build *.gemspec",),
}

RELEASE_ARTIFACTS: dict[Language, str] = {
    Language.TYPESCRIPT: "*.tgz",
    Language.JAVASCRIPT: "*.tgz",
    Language.PYTHON: "dist/*",
    Language.GO: "dist/*",
    Language.RUST: "target/release/{slug}",
    Language.CSHARP: "dist/**",
    Language.RUBY: "*.gem",
}

RELEASE_WORKFLOW = """\
name: Release

on:
  push:
    tags:
      - "v*"

permissions:
  contents: write
{% if docker %}
  packages: write
{% endif %}

jobs:
  release:
    runs-on: ubuntu-latest
    steps:
      - uses: actions/checkout@v4
{% if toolchain %}

      - name: Set up toolchain
        uses: {{ toolchain.action }}
        with:
{% if toolchain.action == "actions/setup-java@v4" %}
          distribution: temurin
{% endif %}
          {{ toolchain.version_key }}: "{{ toolchain.version }}"
{% elif language == "rust" %}

      - uses: dtolnay/rust-toolchain@stable
{% endif %}
{% for step in steps %}

      - run: {{ step }}
{% endfor %}

      - name: Publish GitHub release
        uses: softprops/action-gh-release@v2
        with:
          generate_release_notes: true
{% if artifacts %}
          files: {{ artifacts }}
{% endif %}
{% if docker %}

      - name: Log in to GHCR
        uses: docker/login-action@v3
        with:
          registry: ghcr.io
          username: {{ expr("github.actor") }}
          password: {{ expr("secrets.GITHUB_TOKEN") }}

      - name: Build and push image
        uses: docker/build-push-action@v5
        with:
          context: .
          push: true
          tags: ghcr.io/{{ expr("github.repository") }}:{{ expr("github.ref_name") }}
{% endif %}
"""


class ReleaseEnrichStrategy(EnrichmentStrategy):
    """Tag-triggered release workflow; pushes an image when a Dockerfile exists."""

    id = "enrich-release"
    name = "Release automation"
    priority = 15

    def matches(self, stack: Stack, flags: EnrichmentFlags) -> bool:
        return flags.release and stack.cicd is CICD.GITHUB_ACTIONS

    async def apply(self, ctx: EnrichmentContext) -> None:
        language = ctx.stack.language
        steps = [step.format(slug=ctx.slug) for step in RELEASE_STEPS.get(language, ("make build",))]
        ctx.write(
            ".github/workflows/release.yml",
            ctx.render(
                RELEASE_WORKFLOW,
                expr=gh_expr,
                toolchain=TOOLCHAINS.get(language),
                steps=steps,
                artifacts=RELEASE_ARTIFACTS.get(language, "").format(slug=ctx.slug),
                docker=ctx.introspect.has_file("Dockerfile"),
            ),
        )
