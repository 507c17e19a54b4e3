"""README expansion."""

from __future__ import annotations

from procgen.enrichment.enricher import EnrichmentContext, EnrichmentStrategy
from procgen.models import CICD, EnrichmentDepth, EnrichmentFlags, Stack
from procgen.strategies.common import SETUP_COMMANDS

README = """\
# {{ project_name }}

{% if ci_badge %}
![CI](https://github.com/OWNER/{{ slug }}/actions/workflows/ci.yml/badge.svg)

{% endif %}
{{ description }}

## Stack

| Component | Choice |
|-----------|--------|
{% for field, value in stack_rows %}
| {{ field }} | {{ value }} |
{% endfor %}

## Getting Started

```bash
{{ install }}
{{ run }}
```
{% if detailed %}

## Project Structure

```
{% for entry in structure %}
{{ entry }}
{% endfor %}
```
{% if env_vars %}

## Configuration

Copy `.env.example` to `.env` and adjust the values:

| Variable | Default |
|----------|---------|
{% for name, value in env_vars %}
| `{{ name }}` | `{{ value }}` |
{% endfor %}
{% endif %}
{% if endpoints %}

## API

| Method | Path |
|--------|------|
{% for method, path in endpoints %}
| {{ method }} | `{{ path }}` |
{% endfor %}
{% endif %}
{% endif %}

## Testing

```bash
{{ test }}
```
{% if docker %}

## Docker

```bash
docker build -t {{ slug }} .
{% if port %}
docker run -p {{ port }}:{{ port }} {{ slug }}
{% else %}
docker run --rm {{ slug }}
{% endif %}
```
{% if compose %}

Start the application together with its database:

```bash
docker compose up --build
```
{% endif %}
{% endif %}
{% if detailed %}

## Contributing

1. Create a feature branch.
2. Run the tests and linters before pushing.
3. Open a pull request describing the change.
{% endif %}

## License

MIT
"""


def _structure(ctx: EnrichmentContext) -> list[str]:
    """Top-level directories (with a trailing slash) followed by top-level files."""
    dirs: set[str] = set()
    top_files: list[str] = []
    for path in ctx.introspect.get_all_paths():
        head, sep, _rest = path.partition("/")
        if sep:
            dirs.add(f"{head}/")
        else:
            top_files.append(head)
    return sorted(dirs) + sorted(top_files)


def _env_vars(ctx: EnrichmentContext) -> list[tuple[str, str]]:
    content = ctx.introspect.get_content(".env.example") or ""
    pairs = []
    for line in content.splitlines():
        if not line or line.startswith("#") or "=" not in line:
            continue
        name, _, value = line.partition("=")
        pairs.append((name.strip(), value.strip()))
    return pairs


def _endpoints(ctx: EnrichmentContext) -> list[tuple[str, str]]:
    if ctx.stack.archetype.value != "backend":
        return []
    endpoints = [("GET", "/health")]
    for path in ctx.introspect.get_all_paths():
        parts = path.rsplit("/", 2)
        if len(parts) < 2 or parts[-2] not in ("routes", "handlers", "views"):
            continue
        resource = parts[-1].split(".", 1)[0]
        if resource in ("__init__", "mod", "index"):
            continue
        endpoints.extend(
            [("GET", f"/{resource}"), ("POST", f"/{resource}"), ("GET", f"/{resource}/:id")]
        )
    return endpoints


class ReadmeEnrichStrategy(EnrichmentStrategy):
    """Rewrites README.md from what the file map actually contains.

    Beyond minimal depth it also documents the project layout, the
    variables in ``.env.example`` and the detected HTTP endpoints.
    """

    id = "enrich-readme"
    name = "README expansion"
    priority = 90

    def matches(self, stack: Stack, flags: EnrichmentFlags) -> bool:
        return flags.docs

    async def apply(self, ctx: EnrichmentContext) -> None:
        stack = ctx.stack
        matrix = ctx.matrix
        install, run, test = SETUP_COMMANDS.get(stack.language, ("make", "make run", "make test"))
        manifest_test = ctx.introspect.get_test_command()
        if manifest_test and ctx.introspect.get_manifest().type.value != "npm":
            test = manifest_test

        framework = matrix.frameworks[stack.framework].name
        description = (
            f"A {matrix.archetypes[stack.archetype].name.lower()} written in "
            f"{matrix.languages[stack.language].name}"
            + (f" using {framework}." if stack.framework.value != "none" else ".")
        )
        docker = ctx.introspect.has_file("Dockerfile")
        exposed = ctx.introspect.get_exposed_ports()
        ctx.write(
            "README.md",
            ctx.render(
                README,
                description=description,
                ci_badge=stack.cicd is CICD.GITHUB_ACTIONS,
                stack_rows=[
                    (field.replace("_", " ").title(), value.value)
                    for field, value in stack.as_dict().items()
                    if value.value != "none"
                ],
                install=install,
                run=run,
                test=test,
                detailed=ctx.flags.depth is not EnrichmentDepth.MINIMAL,
                structure=_structure(ctx),
                env_vars=_env_vars(ctx),
                endpoints=_endpoints(ctx),
                docker=docker,
                port=exposed[0] if exposed else 0,
                compose=ctx.introspect.has_file("docker-compose.yml"),
            ),
        )
