"""Reverse inference: reconstruct the most likely stack behind a file map.

Heuristic, not seeded.  Each field is detected independently from
manifests, declared dependencies and characteristic paths, then the
detections are reconciled against the compatibility matrix so the result
is always a valid ``Stack``.  Fields nothing pointed at take the matrix
default with a low confidence.
"""

from __future__ import annotations

import re
from enum import Enum
from statistics import fmean
from typing import Mapping, Optional

from pydantic import BaseModel, Field

from procgen.enrichment.introspector import ProjectIntrospector
from procgen.matrices import DEFAULT_MATRIX, CompatibilityMatrix
from procgen.models import (
    CICD,
    FIELD_DOMAINS,
    FIELD_ORDER,
    ORM,
    Archetype,
    BuildTool,
    Database,
    Framework,
    Language,
    Packaging,
    Runtime,
    Stack,
    Styling,
    TestingFramework,
    Transport,
)

# Reconciliation order: language and framework decide what the rest may be.
_RECONCILE_ORDER = ("language", "framework", "archetype") + tuple(
    f for f in FIELD_ORDER if f not in ("language", "framework", "archetype")
)

_NODE = (Language.TYPESCRIPT, Language.JAVASCRIPT)
_PACKAGE_REFERENCE_RE = re.compile(r'PackageReference Include="([^"]+)"')


class InferredStack(BaseModel):
    """A best-effort stack with per-field confidence in ``[0, 1]``."""

    stack: Stack
    confidence: dict[str, float] = Field(default_factory=dict)
    signals: list[str] = Field(
        default_factory=list, description="Human-readable evidence, one entry per detected field"
    )

    @property
    def score(self) -> float:
        """Overall confidence: the mean of the per-field scores."""
        return fmean(self.confidence.values()) if self.confidence else 0.0


# ---------------------------------------------------------------------------
# Signal tables
# ---------------------------------------------------------------------------

# Checked in order, so meta-frameworks come before the libraries they bundle.
FRAMEWORK_DEPENDENCIES: tuple[tuple[Framework, tuple[str, ...]], ...] = (
    (Framework.NEXTJS, ("next",)),
    (Framework.NUXT, ("nuxt",)),
    (Framework.SVELTEKIT, ("@sveltejs/kit",)),
    (Framework.REACT_NATIVE, ("react-native",)),
    (Framework.QWIK, ("@builder.io/qwik",)),
    (Framework.ANGULAR, ("@angular/core",)),
    (Framework.NESTJS, ("@nestjs/core",)),
    (Framework.ELECTRON, ("electron",)),
    (Framework.PHASER, ("phaser",)),
    (Framework.REACT, ("react", "react-dom")),
    (Framework.VUE, ("vue",)),
    (Framework.SVELTE, ("svelte",)),
    (Framework.SOLID, ("solid-js",)),
    (Framework.EXPRESS, ("express",)),
    (Framework.FASTIFY, ("fastify",)),
    (Framework.COMMANDER, ("commander",)),
    (Framework.YARGS, ("yargs",)),
    (Framework.FASTAPI, ("fastapi",)),
    (Framework.FLASK, ("flask",)),
    (Framework.DJANGO, ("django",)),
    (Framework.CLICK, ("click",)),
    (Framework.TAURI, ("tauri",)),
    (Framework.BEVY, ("bevy",)),
    (Framework.AXUM, ("axum",)),
    (Framework.ACTIX, ("actix-web",)),
    (Framework.CLAP, ("clap",)),
    (Framework.GIN, ("github.com/gin-gonic/gin",)),
    (Framework.ECHO, ("github.com/labstack/echo",)),
    (Framework.COBRA, ("github.com/spf13/cobra",)),
    (Framework.JETPACK_COMPOSE, ("activity-compose",)),
    (Framework.SPRING_BOOT, ("spring-boot-starter-web", "spring-boot-starter")),
    (Framework.MONOGAME, ("monogame.framework.desktopgl",)),
    (Framework.RAILS, ("rails",)),
    (Framework.LARAVEL, ("laravel/framework",)),
)

# (framework, glob, needle) for frameworks that leave no manifest dependency.
FRAMEWORK_CONTENT: tuple[tuple[Framework, str, str], ...] = (
    (Framework.ASPNET_CORE, "**/*.csproj", "Microsoft.NET.Sdk.Web"),
    (Framework.QT, "CMakeLists.txt", "Qt6"),
    (Framework.SDL2, "CMakeLists.txt", "SDL2"),
    (Framework.SWIFTUI, "**/*.swift", "import SwiftUI"),
    (Framework.ARGPARSE, "**/*.py", "import argparse"),
)

DATABASE_DEPENDENCIES: tuple[tuple[Database, tuple[str, ...]], ...] = (
    (Database.POSTGRES, ("pg", "postgres", "psycopg", "psycopg2", "gorm.io/driver/postgres",
                         "npgsql.entityframeworkcore.postgresql", "postgresql")),
    (Database.MYSQL, ("mysql2", "mysql", "pymysql", "gorm.io/driver/mysql",
                      "pomelo.entityframeworkcore.mysql", "mysql-connector-j")),
    (Database.SQLITE, ("better-sqlite3", "sqlite3", "gorm.io/driver/sqlite",
                       "microsoft.entityframeworkcore.sqlite", "rusqlite")),
    (Database.MONGODB, ("mongodb", "mongoose", "pymongo", "go.mongodb.org/mongo-driver")),
    (Database.REDIS, ("redis", "ioredis", "github.com/redis/go-redis")),
    (Database.CASSANDRA, ("cassandra-driver", "github.com/gocql/gocql")),
    (Database.NEO4J, ("neo4j", "neo4j-driver", "github.com/neo4j/neo4j-go-driver")),
)

# URL schemes seen in .env.example / docker-compose.yml.
DATABASE_SCHEMES: dict[str, Database] = {
    "postgresql://": Database.POSTGRES,
    "postgres://": Database.POSTGRES,
    "mysql://": Database.MYSQL,
    "mongodb://": Database.MONGODB,
    "redis://": Database.REDIS,
    "cassandra://": Database.CASSANDRA,
    "bolt://": Database.NEO4J,
    "file:./": Database.SQLITE,
}

ORM_DEPENDENCIES: tuple[tuple[ORM, tuple[str, ...]], ...] = (
    (ORM.PRISMA, ("prisma", "@prisma/client")),
    (ORM.DRIZZLE, ("drizzle-orm",)),
    (ORM.TYPEORM, ("typeorm",)),
    (ORM.SEQUELIZE, ("sequelize",)),
    (ORM.SQLALCHEMY, ("sqlalchemy",)),
    (ORM.GORM, ("gorm.io/gorm",)),
    (ORM.DIESEL, ("diesel",)),
    (ORM.ENTITY_FRAMEWORK, ("microsoft.entityframeworkcore",)),
)

TRANSPORT_DEPENDENCIES: tuple[tuple[Transport, tuple[str, ...]], ...] = (
    (Transport.TRPC, ("@trpc/server",)),
    (Transport.GRAPHQL, ("graphql", "@apollo/server", "strawberry-graphql", "async-graphql",
                         "github.com/99designs/gqlgen", "graphql-ruby", "spring-boot-starter-graphql")),
    (Transport.GRPC, ("@grpc/grpc-js", "grpcio", "google.golang.org/grpc", "tonic",
                      "grpc.aspnetcore")),
    (Transport.WEBSOCKET, ("ws", "socket.io", "websockets", "github.com/gorilla/websocket",
                           "tokio-tungstenite")),
)

BUILD_TOOL_DEPENDENCIES: tuple[tuple[BuildTool, str], ...] = (
    (BuildTool.VITE, "vite"),
    (BuildTool.WEBPACK, "webpack"),
    (BuildTool.ESBUILD, "esbuild"),
    (BuildTool.TSUP, "tsup"),
)

# (path, build tool); the first present file wins.
BUILD_TOOL_FILES: tuple[tuple[str, BuildTool], ...] = (
    ("Cargo.toml", BuildTool.CARGO),
    ("go.mod", BuildTool.GO),
    ("pom.xml", BuildTool.MAVEN),
    ("build.gradle.kts", BuildTool.GRADLE),
    ("build.gradle", BuildTool.GRADLE),
    ("app/build.gradle.kts", BuildTool.GRADLE),
    ("CMakeLists.txt", BuildTool.CMAKE),
    ("Package.swift", BuildTool.SWIFTPM),
    ("Gemfile", BuildTool.BUNDLER),
    ("composer.json", BuildTool.COMPOSER),
    ("Makefile", BuildTool.MAKE),
)

TESTING_DEPENDENCIES: tuple[tuple[TestingFramework, tuple[str, ...]], ...] = (
    (TestingFramework.VITEST, ("vitest",)),
    (TestingFramework.JEST, ("jest",)),
    (TestingFramework.MOCHA, ("mocha",)),
    (TestingFramework.PYTEST, ("pytest",)),
    (TestingFramework.JUNIT, ("junit-jupiter", "spring-boot-starter-test", "junit")),
    (TestingFramework.XUNIT, ("xunit",)),
    (TestingFramework.NUNIT, ("nunit",)),
    (TestingFramework.RSPEC, ("rspec", "rspec-rails")),
    (TestingFramework.PHPUNIT, ("phpunit/phpunit",)),
)

# Languages whose test runner is fixed by the toolchain.
TOOLCHAIN_TESTING: dict[Language, TestingFramework] = {
    Language.GO: TestingFramework.GO_TEST,
    Language.RUST: TestingFramework.RUST_TEST,
    Language.SWIFT: TestingFramework.XCTEST,
}

# Extension-only language detection, used when no manifest is present.
LANGUAGE_EXTENSIONS: tuple[tuple[Language, tuple[str, ...]], ...] = (
    (Language.CSHARP, (".csproj", ".sln", ".cs")),
    (Language.SWIFT, (".swift",)),
    (Language.KOTLIN, (".kt", ".kts")),
    (Language.JAVA, (".java",)),
    (Language.CPP, (".cpp", ".cc", ".hpp")),
    (Language.PYTHON, (".py",)),
    (Language.RUBY, (".rb",)),
    (Language.PHP, (".php",)),
    (Language.GO, (".go",)),
    (Language.RUST, (".rs",)),
    (Language.TYPESCRIPT, (".ts", ".tsx")),
    (Language.JAVASCRIPT, (".js", ".jsx", ".mjs")),
)

# Path prefixes suggesting an archetype when no framework was detected.
ARCHETYPE_PATHS: tuple[tuple[Archetype, tuple[str, ...]], ...] = (
    (Archetype.BACKEND, ("src/routes/", "src/api/", "internal/handlers/", "app/controllers/")),
    (Archetype.WEB, ("src/components/", "src/pages/", "index.html")),
    (Archetype.CLI, ("src/commands/", "cmd/", "bin/")),
)


# ---------------------------------------------------------------------------
# Inference
# ---------------------------------------------------------------------------

class _Detection:
    """A detected value with its confidence and evidence."""

    __slots__ = ("value", "confidence", "signal")

    def __init__(self, value: Optional[Enum], confidence: float, signal: str = "") -> None:
        self.value = value
        self.confidence = confidence
        self.signal = signal


class StackInferrer:
    """Runs every field detector over one file map.

    Args:
        files: The file map to inspect; it is never modified.
        matrix: Compatibility tables used to reconcile the detections.
    """

    def __init__(
        self,
        files: Mapping[str, str],
        matrix: CompatibilityMatrix = DEFAULT_MATRIX,
    ) -> None:
        self.files = files
        self.matrix = matrix
        self.introspect = ProjectIntrospector(files)
        self.paths = self.introspect.get_all_paths()
        self.dependencies = self._collect_dependencies()

    def infer(self) -> InferredStack:
        language = self._language()
        detections: dict[str, _Detection] = {"language": language}
        lang: Language = language.value  # type: ignore[assignment]
        detections["framework"] = self._framework(lang)
        detections["archetype"] = self._archetype(detections["framework"].value)
        detections["database"] = self._database()
        detections["orm"] = self._orm()
        detections["runtime"] = self._runtime(lang)
        detections["transport"] = self._transport()
        detections["packaging"] = self._packaging()
        detections["cicd"] = self._cicd()
        detections["build_tool"] = self._build_tool(lang)
        detections["styling"] = self._styling()
        detections["testing"] = self._testing(lang)
        return self._reconcile(detections)

    # -- Helpers -------------------------------------------------------------

    def _collect_dependencies(self) -> set[str]:
        names: set[str] = set()
        for manifest in self.introspect.get_all_manifests():
            names.update(manifest.dependencies)
            names.update(manifest.dev_dependencies)
        for path in self.introspect.find_files("**/*.csproj"):
            names.update(_PACKAGE_REFERENCE_RE.findall(self.files[path]))
        return {name.lower() for name in names}

    def _depends_on(self, *names: str) -> Optional[str]:
        """Return the first of *names* that is declared, matching Go module prefixes."""
        for name in names:
            for dependency in self.dependencies:
                if dependency == name or dependency.startswith(name + "/"):
                    return name
        return None

    def _contains(self, pattern: str, needle: str) -> bool:
        return any(needle in self.files[path] for path in self.introspect.find_files(pattern))

    # -- Detectors -----------------------------------------------------------

    def _language(self) -> _Detection:
        introspect = self.introspect
        if introspect.has_file("package.json"):
            ts = self._depends_on("typescript") or introspect.has_file("tsconfig.json")
            if ts:
                return _Detection(Language.TYPESCRIPT, 0.9, "package.json with TypeScript")
            return _Detection(Language.JAVASCRIPT, 0.9, "package.json without TypeScript")
        manifests = (
            ("Cargo.toml", Language.RUST),
            ("go.mod", Language.GO),
            ("pyproject.toml", Language.PYTHON),
            ("requirements.txt", Language.PYTHON),
            ("setup.py", Language.PYTHON),
            ("build.gradle.kts", Language.KOTLIN),
            ("app/build.gradle.kts", Language.KOTLIN),
            ("pom.xml", Language.JAVA),
            ("build.gradle", Language.JAVA),
            ("Package.swift", Language.SWIFT),
            ("Gemfile", Language.RUBY),
            ("composer.json", Language.PHP),
        )
        for path, language in manifests:
            if introspect.has_file(path):
                if language is Language.JAVA and introspect.find_files("**/*.kt"):
                    language = Language.KOTLIN
                return _Detection(language, 0.9, f"manifest {path}")
        for language, extensions in LANGUAGE_EXTENSIONS:
            if any(path.endswith(extensions) for path in self.paths):
                return _Detection(language, 0.6, f"{extensions[0]} sources")
        return _Detection(Language.TYPESCRIPT, 0.1)

    def _framework(self, language: Language) -> _Detection:
        for framework, names in FRAMEWORK_DEPENDENCIES:
            if not self.matrix.language_framework(language, framework):
                continue
            found = self._depends_on(*names)
            if found:
                return _Detection(framework, 0.8, f"dependency {found}")
        for framework, pattern, needle in FRAMEWORK_CONTENT:
            if self.matrix.language_framework(language, framework) and self._contains(pattern, needle):
                return _Detection(framework, 0.7, f"{needle} in {pattern}")
        return _Detection(Framework.NONE, 0.2)

    def _archetype(self, framework: Optional[Enum]) -> _Detection:
        if framework is not None and framework is not Framework.NONE:
            archetype = self.matrix.frameworks[framework].archetype  # type: ignore[index]
            return _Detection(archetype, 0.8, f"implied by {framework.value}")
        for archetype, prefixes in ARCHETYPE_PATHS:
            for path in self.paths:
                if path.startswith(prefixes):
                    return _Detection(archetype, 0.5, f"path {path}")
        if self.introspect.has_file("src/lib.rs") or self.introspect.find_files("*.gemspec"):
            return _Detection(Archetype.LIBRARY, 0.5, "library layout")
        return _Detection(None, 0.3)

    def _database(self) -> _Detection:
        for database, names in DATABASE_DEPENDENCIES:
            found = self._depends_on(*names)
            if found:
                return _Detection(database, 0.7, f"dependency {found}")
        for path in (".env.example", "docker-compose.yml"):
            content = self.files.get(path, "")
            for scheme, database in DATABASE_SCHEMES.items():
                if scheme in content:
                    return _Detection(database, 0.6, f"{scheme} URL in {path}")
        return _Detection(Database.NONE, 0.3)

    def _orm(self) -> _Detection:
        for orm, names in ORM_DEPENDENCIES:
            found = self._depends_on(*names)
            if found:
                return _Detection(orm, 0.8, f"dependency {found}")
        if self._depends_on("rails"):
            return _Detection(ORM.ACTIVERECORD, 0.6, "implied by rails")
        if self._depends_on("laravel/framework"):
            return _Detection(ORM.ELOQUENT, 0.6, "implied by laravel")
        return _Detection(ORM.NONE, 0.2)

    def _runtime(self, language: Language) -> _Detection:
        if language in _NODE:
            if self.introspect.has_file("deno.json") or self.introspect.has_file("deno.jsonc"):
                return _Detection(Runtime.DENO, 0.8, "deno.json")
            if self.introspect.has_file("bun.lockb") or self.introspect.has_file("bunfig.toml"):
                return _Detection(Runtime.BUN, 0.8, "bun lockfile")
        runtimes = self.matrix.languages[language].runtimes
        if len(runtimes) == 1:
            return _Detection(runtimes[0], 0.8, f"only runtime for {language.value}")
        return _Detection(runtimes[0], 0.5)

    def _transport(self) -> _Detection:
        for transport, names in TRANSPORT_DEPENDENCIES:
            found = self._depends_on(*names)
            if found:
                return _Detection(transport, 0.7, f"dependency {found}")
        proto = self.introspect.find_files("**/*.proto")
        if proto:
            return _Detection(Transport.GRPC, 0.7, f"path {proto[0]}")
        return _Detection(Transport.REST, 0.5)

    def _packaging(self) -> _Detection:
        if self.introspect.has_file("Containerfile"):
            return _Detection(Packaging.PODMAN, 0.9, "Containerfile")
        if self.introspect.has_file("Dockerfile"):
            return _Detection(Packaging.DOCKER, 0.9, "Dockerfile")
        if self.introspect.has_file("flake.nix") or self.introspect.has_file("default.nix"):
            return _Detection(Packaging.NIX, 0.9, "nix expression")
        return _Detection(Packaging.NONE, 0.3)

    def _cicd(self) -> _Detection:
        if self.introspect.find_files(".github/workflows/*"):
            return _Detection(CICD.GITHUB_ACTIONS, 0.9, ".github/workflows")
        if self.introspect.has_file(".gitlab-ci.yml"):
            return _Detection(CICD.GITLAB_CI, 0.9, ".gitlab-ci.yml")
        if self.introspect.has_file(".circleci/config.yml"):
            return _Detection(CICD.CIRCLECI, 0.9, ".circleci/config.yml")
        return _Detection(CICD.NONE, 0.3)

    def _build_tool(self, language: Language) -> _Detection:
        if language in _NODE:
            for build_tool, name in BUILD_TOOL_DEPENDENCIES:
                if self._depends_on(name):
                    return _Detection(build_tool, 0.8, f"dependency {name}")
            return _Detection(None, 0.3)
        for path, build_tool in BUILD_TOOL_FILES:
            if self.introspect.has_file(path) and self.matrix.language_build_tool(language, build_tool):
                return _Detection(build_tool, 0.8, f"file {path}")
        if self.introspect.find_files("**/*.csproj"):
            return _Detection(BuildTool.MSBUILD, 0.8, "csproj")
        return _Detection(None, 0.3)

    def _styling(self) -> _Detection:
        introspect = self.introspect
        if self._depends_on("tailwindcss") or introspect.find_files("tailwind.config.*"):
            return _Detection(Styling.TAILWIND, 0.7, "tailwind")
        if self._depends_on("styled-components"):
            return _Detection(Styling.STYLED_COMPONENTS, 0.7, "dependency styled-components")
        if self._depends_on("sass") or introspect.find_files("**/*.scss"):
            return _Detection(Styling.SCSS, 0.7, "scss sources")
        if introspect.find_files("**/*.module.css"):
            return _Detection(Styling.CSS_MODULES, 0.7, "css modules")
        if introspect.find_files("**/*.css"):
            return _Detection(Styling.VANILLA, 0.6, "plain css")
        return _Detection(None, 0.2)

    def _testing(self, language: Language) -> _Detection:
        fixed = TOOLCHAIN_TESTING.get(language)
        if fixed is not None:
            return _Detection(fixed, 0.8, f"{language.value} toolchain")
        for testing, names in TESTING_DEPENDENCIES:
            if not self.matrix.language_testing(language, testing):
                continue
            found = self._depends_on(*names)
            if found:
                return _Detection(testing, 0.8, f"dependency {found}")
        if language is Language.CPP:
            if self._contains("CMakeLists.txt", "GTest"):
                return _Detection(TestingFramework.GTEST, 0.7, "GTest in CMakeLists.txt")
            if self._contains("CMakeLists.txt", "Catch2"):
                return _Detection(TestingFramework.CATCH2, 0.7, "Catch2 in CMakeLists.txt")
        return _Detection(None, 0.3)

    # -- Reconciliation ------------------------------------------------------

    def _reconcile(self, detections: dict[str, _Detection]) -> InferredStack:
        """Keep detections compatible with what is already fixed; default the rest."""
        values: dict[str, Enum] = {}
        confidence: dict[str, float] = {}
        signals: list[str] = []
        for field in _RECONCILE_ORDER:
            detection = detections[field]
            value = detection.value
            score = detection.confidence
            if value is not None and self.matrix.compatible(field, value, values):
                if detection.signal:
                    signals.append(f"{field}: {detection.signal}")
            else:
                if value is not None:
                    signals.append(f"{field}: {value.value} conflicts with the stack; using default")
                    score = min(score, 0.3)
                value = self._fallback(field, values)
            values[field] = value
            confidence[field] = round(score, 2)
        return InferredStack(
            stack=Stack(**values),
            confidence={field: confidence[field] for field in FIELD_ORDER},
            signals=signals,
        )

    def _fallback(self, field: str, fixed: Mapping[str, Enum]) -> Enum:
        default = self.matrix.default_for(field, fixed)
        if self.matrix.compatible(field, default, fixed):
            return default
        for value in FIELD_DOMAINS[field]:
            if self.matrix.compatible(field, value, fixed):
                return value
        return default


def infer_stack(
    files: Mapping[str, str],
    matrix: CompatibilityMatrix = DEFAULT_MATRIX,
) -> InferredStack:
    """Infer the stack that most likely produced *files*.

    Args:
        files: A generated (and possibly hand-edited) file map.
        matrix: Compatibility tables used to keep the result valid.

    Returns:
        The reconstructed stack, a confidence per field and the evidence
        behind each detection.
    """
    return StackInferrer(files, matrix).infer()
