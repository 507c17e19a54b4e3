"""Continuous integration pipelines (GitHub Actions, GitLab CI, CircleCI)."""

from __future__ import annotations

from procgen.engine.registry import GenerationContext, GenerationStrategy
from procgen.models import CICD, BuildTool, Language, Stack

# GitHub Actions toolchain setup: (action, {input: value})
GITHUB_SETUP: dict[Language, tuple[str, dict[str, str]]] = {
    Language.TYPESCRIPT: ("actions/setup-node@v4", {"node-version": "20"}),
    Language.JAVASCRIPT: ("actions/setup-node@v4", {"node-version": "20"}),
    Language.PYTHON: ("actions/setup-python@v5", {"python-version": '"3.12"'}),
    Language.GO: ("actions/setup-go@v5", {"go-version": '"1.22"'}),
    Language.RUST: ("dtolnay/rust-toolchain@stable", {}),
    Language.JAVA: ("actions/setup-java@v4", {"distribution": "temurin", "java-version": '"17"'}),
    Language.KOTLIN: ("actions/setup-java@v4", {"distribution": "temurin", "java-version": '"17"'}),
    Language.CSHARP: ("actions/setup-dotnet@v4", {"dotnet-version": "8.0.x"}),
    Language.SWIFT: ("swift-actions/setup-swift@v2", {"swift-version": '"5.10"'}),
    Language.PHP: ("shivammathur/setup-php@v2", {"php-version": '"8.3"'}),
    Language.RUBY: ("ruby/setup-ruby@v1", {"ruby-version": '"3.3"', "bundler-cache": "true"}),
}

GITHUB_WORKFLOW = """\
name: CI

on:
  push:
    branches: [main]
  pull_request:

jobs:
  test:
    runs-on: ubuntu-latest
    steps:
      - uses: actions/checkout@v4
{% if setup_action %}
      - uses: {{ setup_action }}
{% if setup_inputs %}
        with:
{% for key, value in setup_inputs %}
          {{ key }}: {{ value }}
{% endfor %}
{% endif %}
{% endif %}
      - name: Install
        run: {{ install }}
      - name: Test
        run: {{ test }}
"""

GITLAB_CI = """\
image: {{ image }}

stages:
  - test

test:
  stage: test
  script:
    - {{ install }}
    - {{ test }}
"""

CIRCLECI = """\
version: 2.1

jobs:
  test:
    docker:
      - image: {{ image }}
    steps:
      - checkout
      - run:
          name: Install
          command: {{ install }}
      - run:
          name: Test
          command: {{ test }}

workflows:
  ci:
    jobs:
      - test
"""


def ci_commands(stack: Stack, files: dict[str, str]) -> tuple[str, str]:
    """Return ``(install, test)`` shell commands for the stack's toolchain."""
    language = stack.language
    if language in (Language.TYPESCRIPT, Language.JAVASCRIPT):
        return "npm install", "npm test"
    if language is Language.PYTHON:
        return 'pip install -e ".[dev]"', "pytest"
    if language is Language.GO:
        return "go mod tidy", "go test ./..."
    if language is Language.RUST:
        return "cargo build --locked || cargo build", "cargo test"
    if language in (Language.JAVA, Language.KOTLIN):
        if stack.build_tool is BuildTool.MAVEN and "pom.xml" in files:
            return "mvn -B -q dependency:resolve", "mvn -B verify"
        return "gradle assemble --no-daemon", "gradle test --no-daemon"
    if language is Language.CSHARP:
        return "dotnet restore", "dotnet test"
    if language is Language.CPP:
        return "cmake -S . -B build", "cmake --build build && ctest --test-dir build"
    if language is Language.SWIFT:
        return "swift package resolve", "swift test"
    if language is Language.PHP:
        return "composer install --no-interaction", "composer test"
    if language is Language.RUBY:
        return "bundle install", "bundle exec rspec"
    return "make", "make test"


class CIStrategy(GenerationStrategy):
    """Writes the pipeline for the selected CI provider."""

    id = "ci"
    name = "CI pipeline"
    priority = 95

    def matches(self, stack: Stack) -> bool:
        return stack.cicd is not CICD.NONE

    async def apply(self, ctx: GenerationContext) -> None:
        stack = ctx.stack
        install, test = ci_commands(stack, ctx.files)
        image = ctx.matrix.languages[stack.language].ci_image
        if stack.cicd is CICD.GITHUB_ACTIONS:
            action, inputs = GITHUB_SETUP.get(stack.language, ("", {}))
            ctx.write(
                ".github/workflows/ci.yml",
                ctx.render(
                    GITHUB_WORKFLOW,
                    setup_action=action,
                    setup_inputs=list(inputs.items()),
                    install=install,
                    test=test,
                ),
            )
        elif stack.cicd is CICD.GITLAB_CI:
            ctx.write(".gitlab-ci.yml", ctx.render(GITLAB_CI, image=image, install=install, test=test))
        else:
            ctx.write(
                ".circleci/config.yml",
                ctx.render(CIRCLECI, image=image, install=install, test=test),
            )
