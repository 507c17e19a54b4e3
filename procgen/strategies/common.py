"""Language-agnostic strategies: LICENSE, .gitignore, .editorconfig, README."""

from __future__ import annotations

from procgen.engine.registry import GenerationContext, GenerationStrategy
from procgen.models import Language

MIT_LICENSE = """\
MIT License

Copyright (c) {{ license_year }} {{ license_holder }}

Permission is hereby granted, free of charge, to any person obtaining a copy
of this software and associated documentation files (the "Software"), to deal
in the Software without restriction, including without limitation the rights
to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
copies of the Software, and to permit persons to whom the Software is
furnished to do so, subject to the following conditions:

The above copyright notice and this permission notice shall be included in all
copies or substantial portions of the Software.

THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
SOFTWARE.
"""

COMMON_IGNORES = (
    ".DS_Store",
    "Thumbs.db",
    ".idea/",
    ".vscode/",
    "*.log",
    ".env",
    ".env.local",
)

LANGUAGE_IGNORES: dict[Language, tuple[str, ...]] = {
    Language.TYPESCRIPT: ("node_modules/", "dist/", "coverage/", "*.tsbuildinfo"),
    Language.JAVASCRIPT: ("node_modules/", "dist/", "coverage/"),
    Language.PYTHON: ("__pycache__/", "*.py[cod]", ".venv/", "dist/", "*.egg-info/", ".pytest_cache/"),
    Language.GO: ("bin/", "*.test", "coverage.out"),
    Language.RUST: ("target/",),
    Language.JAVA: ("build/", "target/", ".gradle/", "*.class"),
    Language.KOTLIN: ("build/", "target/", ".gradle/", "*.class"),
    Language.CSHARP: ("bin/", "obj/", "*.user"),
    Language.CPP: ("build/", "cmake-build-*/", "*.o"),
    Language.SWIFT: (".build/", "*.xcodeproj/xcuserdata/", "DerivedData/"),
    Language.PHP: ("vendor/", ".phpunit.result.cache"),
    Language.RUBY: ("vendor/bundle/", ".bundle/", "log/", "tmp/"),
}

EDITORCONFIG = """\
root = true

[*]
charset = utf-8
end_of_line = lf
insert_final_newline = true
trim_trailing_whitespace = true
indent_style = {{ indent_style }}
indent_size = {{ indent }}

[*.{json,yml,yaml}]
indent_style = space
indent_size = 2

[Makefile]
indent_style = tab

[*.md]
trim_trailing_whitespace = false
"""

# (install, run, test) per language
SETUP_COMMANDS: dict[Language, tuple[str, str, str]] = {
    Language.TYPESCRIPT: ("npm install", "npm run dev", "npm test"),
    Language.JAVASCRIPT: ("npm install", "npm run dev", "npm test"),
    Language.PYTHON: ("pip install -e \".[dev]\"", "make dev", "pytest"),
    Language.GO: ("go mod download", "go run .", "go test ./..."),
    Language.RUST: ("cargo build", "cargo run", "cargo test"),
    Language.JAVA: ("gradle build", "gradle bootRun", "gradle test"),
    Language.KOTLIN: ("gradle build", "gradle run", "gradle test"),
    Language.CSHARP: ("dotnet restore", "dotnet run --project src", "dotnet test"),
    Language.CPP: ("cmake -S . -B build", "cmake --build build", "ctest --test-dir build"),
    Language.SWIFT: ("swift package resolve", "swift run", "swift test"),
    Language.PHP: ("composer install", "php artisan serve", "composer test"),
    Language.RUBY: ("bundle install", "bin/rails server", "bundle exec rspec"),
}

README = """\
# {{ project_name }}

A {{ archetype_name }} built with {{ language_name }}{% if framework != "none" %} and {{ framework_name }}{% endif %}.

## Stack

| Component | Choice |
|-----------|--------|
{% for field, value in stack_rows %}
| {{ field }} | {{ value }} |
{% endfor %}

## Getting Started

```bash
# install dependencies
{{ install }}

# run
{{ run }}

# test
{{ test }}
```
{% if database != "none" %}

## Database

Set `DATABASE_URL` in `.env` before starting the {{ database_name }} connection.
{% endif %}
{% if docker %}

## Docker

```bash
docker build -t {{ slug }} .
docker run -p {{ port }}:{{ port }} {{ slug }}
```
{% endif %}

## License

MIT
"""


class LicenseStrategy(GenerationStrategy):
    id = "license"
    name = "MIT license"
    priority = 0

    async def apply(self, ctx: GenerationContext) -> None:
        ctx.write(
            "LICENSE",
            ctx.render(
                MIT_LICENSE,
                license_holder=ctx.options.get("license_holder", ctx.project_name),
                license_year=ctx.options.get("license_year", 2025),
            ),
        )


class GitignoreStrategy(GenerationStrategy):
    id = "gitignore"
    name = "Git ignore rules"
    priority = 0

    async def apply(self, ctx: GenerationContext) -> None:
        patterns = LANGUAGE_IGNORES.get(ctx.stack.language, ()) + COMMON_IGNORES
        ctx.write(".gitignore", "".join(f"{pattern}\n" for pattern in patterns))


class EditorconfigStrategy(GenerationStrategy):
    id = "editorconfig"
    name = "Editor configuration"
    priority = 1

    async def apply(self, ctx: GenerationContext) -> None:
        indent = ctx.matrix.languages[ctx.stack.language].indent
        # Go source is gofmt'd with tabs
        indent_style = "tab" if ctx.stack.language is Language.GO else "space"
        ctx.write(
            ".editorconfig",
            ctx.render(EDITORCONFIG, indent=indent, indent_style=indent_style),
        )


class ReadmeStrategy(GenerationStrategy):
    """README with the stack table and per-language setup commands."""

    id = "readme"
    name = "README"
    priority = 100

    async def apply(self, ctx: GenerationContext) -> None:
        stack = ctx.stack
        matrix = ctx.matrix
        install, run, test = SETUP_COMMANDS.get(stack.language, ("make", "make run", "make test"))
        rows = [
            (field.replace("_", " ").title(), value.value)
            for field, value in stack.as_dict().items()
            if value.value != "none"
        ]
        ctx.write(
            "README.md",
            ctx.render(
                README,
                archetype_name=matrix.archetypes[stack.archetype].name.lower(),
                language_name=matrix.languages[stack.language].name,
                framework_name=matrix.frameworks[stack.framework].name,
                database_name=matrix.databases[stack.database].name,
                stack_rows=rows,
                install=install,
                run=run,
                test=test,
                docker="Dockerfile" in ctx.files,
            ),
        )
