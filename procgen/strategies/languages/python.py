"""Python scaffolds: FastAPI, Flask, Django, Click/argparse CLIs and libraries."""

from __future__ import annotations

from procgen.engine.registry import GenerationContext
from procgen.models import Archetype, Framework, Language, ORM
from procgen.strategies.database import database_url
from procgen.strategies.languages.base import LanguageScaffold

PYPROJECT = """\
[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "{{ slug }}"
version = "0.1.0"
description = "{{ project_name }}"
readme = "README.md"
requires-python = ">=3.10"
dependencies = [
{% for dep in dependencies %}
    "{{ dep }}",
{% endfor %}
]

[project.optional-dependencies]
dev = [
{% for dep in dev_dependencies %}
    "{{ dep }}",
{% endfor %}
]
{% if script %}

[project.scripts]
{{ slug }} = "{{ script }}"
{% endif %}

[tool.hatch.build.targets.wheel]
packages = ["src/{{ ident }}"]

[tool.pytest.ini_options]
testpaths = ["tests"]
pythonpath = ["src"]
"""

FASTAPI_MAIN = """\
from fastapi import FastAPI

app = FastAPI(title="{{ project_name }}")


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "service": "{{ slug }}"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("{{ ident }}.main:app", host="0.0.0.0", port={{ port }}, reload=True)
"""

FASTAPI_TEST = """\
from fastapi.testclient import TestClient

from {{ ident }}.main import app

client = TestClient(app)


def test_health() -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"
"""

FLASK_MAIN = """\
from flask import Flask, jsonify


def create_app() -> Flask:
    app = Flask(__name__)

    @app.get("/health")
    def health():
        return jsonify(status="ok", service="{{ slug }}")

    return app


app = create_app()

if __name__ == "__main__":
    app.run(host="0.0.0.0", port={{ port }}, debug=True)
"""

FLASK_TEST = """\
from {{ ident }}.main import create_app


def test_health() -> None:
    client = create_app().test_client()
    response = client.get("/health")
    assert response.status_code == 200
    assert response.get_json()["status"] == "ok"
"""

DJANGO_MANAGE = """\
#!/usr/bin/env python
import os
import sys


def main() -> None:
    os.environ.setdefault("DJANGO_SETTINGS_MODULE", "{{ ident }}.settings")
    from django.core.management import execute_from_command_line

    execute_from_command_line(sys.argv)


if __name__ == "__main__":
    main()
"""

DJANGO_SETTINGS = """\
import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = os.environ.get("DJANGO_SECRET_KEY", "change-me")
DEBUG = os.environ.get("DJANGO_DEBUG", "1") == "1"
ALLOWED_HOSTS = ["*"]

INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "django.contrib.auth",
]

MIDDLEWARE = [
    "django.middleware.common.CommonMiddleware",
]

ROOT_URLCONF = "{{ ident }}.urls"

DATABASES = {
    "default": {
{% if database == "postgres" %}
        "ENGINE": "django.db.backends.postgresql",
        "NAME": os.environ.get("POSTGRES_DB", "{{ ident }}"),
        "USER": os.environ.get("POSTGRES_USER", "postgres"),
        "PASSWORD": os.environ.get("POSTGRES_PASSWORD", "postgres"),
        "HOST": os.environ.get("POSTGRES_HOST", "localhost"),
        "PORT": "5432",
{% elif database == "mysql" %}
        "ENGINE": "django.db.backends.mysql",
        "NAME": os.environ.get("MYSQL_DATABASE", "{{ ident }}"),
        "USER": os.environ.get("MYSQL_USER", "root"),
        "PASSWORD": os.environ.get("MYSQL_PASSWORD", ""),
        "HOST": os.environ.get("MYSQL_HOST", "localhost"),
        "PORT": "3306",
{% else %}
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": BASE_DIR / "db.sqlite3",
{% endif %}
    }
}
"""

DJANGO_URLS = """\
from django.http import JsonResponse
from django.urls import path


def health(request):
    return JsonResponse({"status": "ok", "service": "{{ slug }}"})


urlpatterns = [
    path("health", health),
]
"""

DJANGO_TEST = """\
import os

import django
from django.test import Client

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "{{ ident }}.settings")
django.setup()


def test_health() -> None:
    response = Client().get("/health")
    assert response.status_code == 200
"""

CLICK_CLI = """\
import click


@click.group()
@click.version_option("0.1.0")
def cli() -> None:
    \"\"\"{{ project_name }} command-line tool.\"\"\"


@cli.command()
@click.argument("name", default="world")
def hello(name: str) -> None:
    \"\"\"Print a greeting.\"\"\"
    click.echo(f"Hello, {name}!")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
"""

ARGPARSE_CLI = """\
import argparse


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="{{ slug }}", description="{{ project_name }}")
    sub = parser.add_subparsers(dest="command", required=True)
    hello = sub.add_parser("hello", help="print a greeting")
    hello.add_argument("name", nargs="?", default="world")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    if args.command == "hello":
        print(f"Hello, {args.name}!")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
"""

CLICK_TEST = """\
from click.testing import CliRunner

from {{ ident }}.cli import cli


def test_hello() -> None:
    result = CliRunner().invoke(cli, ["hello", "tester"])
    assert result.exit_code == 0
    assert "Hello, tester!" in result.output
"""

ARGPARSE_TEST = """\
from {{ ident }}.cli import main


def test_hello(capsys) -> None:
    assert main(["hello", "tester"]) == 0
    assert "Hello, tester!" in capsys.readouterr().out
"""

LIBRARY_INIT = """\
\"\"\"{{ project_name }}.\"\"\"

__version__ = "0.1.0"


def greet(name: str) -> str:
    return f"Hello, {name}!"
"""

LIBRARY_TEST = """\
from {{ ident }} import greet


def test_greet() -> None:
    assert greet("world") == "Hello, world!"
"""

SQLALCHEMY_DB = """\
import os

from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

DATABASE_URL = os.environ.get("DATABASE_URL", "{{ database_url }}")

engine = create_engine(DATABASE_URL)
SessionLocal = sessionmaker(bind=engine, autoflush=False)


class Base(DeclarativeBase):
    pass


def get_session():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
"""

MAKEFILE = """\
.PHONY: install dev test

install:
\tpip install -e ".[dev]"

dev:
\t{{ dev_command }}

test:
\tpytest
"""

_FRAMEWORK_DEPS: dict[Framework, list[str]] = {
    Framework.FASTAPI: ["fastapi>=0.110", "uvicorn[standard]>=0.29"],
    Framework.FLASK: ["flask>=3.0"],
    Framework.DJANGO: ["django>=5.0"],
    Framework.CLICK: ["click>=8.1"],
}

_DB_DRIVERS: dict[str, str] = {
    "postgres": "psycopg[binary]>=3.1",
    "mysql": "pymysql>=1.1",
    "mongodb": "pymongo>=4.6",
    "redis": "redis>=5.0",
    "cassandra": "cassandra-driver>=3.29",
    "neo4j": "neo4j>=5.19",
}


def _project(ctx: GenerationContext, *, script: str = "", dev_command: str = "") -> None:
    stack = ctx.stack
    deps = list(_FRAMEWORK_DEPS.get(stack.framework, []))
    if stack.orm is ORM.SQLALCHEMY:
        deps.append("sqlalchemy>=2.0")
    driver = _DB_DRIVERS.get(stack.database.value)
    if driver:
        deps.append(driver)
    dev_deps = ["pytest>=8.0"]
    if stack.framework is Framework.FASTAPI:
        dev_deps.append("httpx>=0.27")

    ctx.write(
        "pyproject.toml",
        ctx.render(PYPROJECT, dependencies=deps, dev_dependencies=dev_deps, script=script),
    )
    ctx.write("requirements.txt", "".join(f"{dep}\n" for dep in deps))
    ctx.write("requirements-dev.txt", "-r requirements.txt\n" + "".join(f"{d}\n" for d in dev_deps))
    ctx.write(
        "Makefile",
        ctx.render(MAKEFILE, dev_command=dev_command or f"python -m {ctx.identifier}"),
    )
    ctx.write(f"src/{ctx.identifier}/__init__.py", ctx.render(LIBRARY_INIT))
    if stack.orm is ORM.SQLALCHEMY:
        ctx.write(
            f"src/{ctx.identifier}/db.py",
            ctx.render(SQLALCHEMY_DB, database_url=database_url(stack.database.value, ctx.identifier)),
        )


def backend(ctx: GenerationContext) -> None:
    pkg = f"src/{ctx.identifier}"
    framework = ctx.stack.framework
    if framework is Framework.DJANGO:
        ctx.write("manage.py", ctx.render(DJANGO_MANAGE))
        ctx.write(f"{pkg}/settings.py", ctx.render(DJANGO_SETTINGS))
        ctx.write(f"{pkg}/urls.py", ctx.render(DJANGO_URLS))
        ctx.write("tests/test_health.py", ctx.render(DJANGO_TEST))
        _project(ctx, dev_command=f"python manage.py runserver 0.0.0.0:{ctx.port}")
        return
    if framework is Framework.FLASK:
        ctx.write(f"{pkg}/main.py", ctx.render(FLASK_MAIN))
        ctx.write("tests/test_health.py", ctx.render(FLASK_TEST))
        _project(ctx, dev_command=f"flask --app {ctx.identifier}.main run --port {ctx.port}")
        return
    ctx.write(f"{pkg}/main.py", ctx.render(FASTAPI_MAIN))
    ctx.write("tests/test_health.py", ctx.render(FASTAPI_TEST))
    _project(ctx, dev_command=f"uvicorn {ctx.identifier}.main:app --reload --port {ctx.port}")


def cli(ctx: GenerationContext) -> None:
    pkg = f"src/{ctx.identifier}"
    if ctx.stack.framework is Framework.CLICK:
        ctx.write(f"{pkg}/cli.py", ctx.render(CLICK_CLI))
        ctx.write("tests/test_cli.py", ctx.render(CLICK_TEST))
    else:
        ctx.write(f"{pkg}/cli.py", ctx.render(ARGPARSE_CLI))
        ctx.write("tests/test_cli.py", ctx.render(ARGPARSE_TEST))
    ctx.write(f"{pkg}/__main__.py", "from .cli import main\n\nmain()\n")
    _project(ctx, script=f"{ctx.identifier}.cli:main")


def library(ctx: GenerationContext) -> None:
    ctx.write("tests/test_basic.py", ctx.render(LIBRARY_TEST))
    _project(ctx)


class PythonScaffold(LanguageScaffold):
    id = "scaffold-python"
    name = "Python project"
    languages = (Language.PYTHON,)
    handlers = {
        Archetype.BACKEND: backend,
        Archetype.CLI: cli,
        Archetype.LIBRARY: library,
    }
    fallback = library
