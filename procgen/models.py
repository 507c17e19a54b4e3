"""Pydantic v2 records for the procedural engine.

Defines the closed enumerated domains every stack field is drawn from, the
immutable ``Stack`` record, the partial ``Constraints`` record supplied by
callers, the enrichment flags, and the result models returned by the
pipelines.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class Archetype(str, Enum):
    """Shape of the generated project."""
    WEB = "web"
    BACKEND = "backend"
    CLI = "cli"
    MOBILE = "mobile"
    DESKTOP = "desktop"
    LIBRARY = "library"
    GAME = "game"


class Language(str, Enum):
    TYPESCRIPT = "typescript"
    JAVASCRIPT = "javascript"
    PYTHON = "python"
    GO = "go"
    RUST = "rust"
    JAVA = "java"
    KOTLIN = "kotlin"
    CSHARP = "csharp"
    CPP = "cpp"
    SWIFT = "swift"
    PHP = "php"
    RUBY = "ruby"


class Runtime(str, Enum):
    NODE = "node"
    DENO = "deno"
    BUN = "bun"
    BROWSER = "browser"
    JVM = "jvm"
    DOTNET = "dotnet"
    NATIVE = "native"


class Framework(str, Enum):
    """Application frameworks, grouped by archetype."""
    # web
    REACT = "react"
    VUE = "vue"
    SVELTE = "svelte"
    SOLID = "solid"
    ANGULAR = "angular"
    QWIK = "qwik"
    NEXTJS = "nextjs"
    NUXT = "nuxt"
    SVELTEKIT = "sveltekit"
    # backend
    EXPRESS = "express"
    FASTIFY = "fastify"
    NESTJS = "nestjs"
    FASTAPI = "fastapi"
    FLASK = "flask"
    DJANGO = "django"
    GIN = "gin"
    ECHO = "echo"
    AXUM = "axum"
    ACTIX = "actix"
    SPRING_BOOT = "spring-boot"
    ASPNET_CORE = "aspnet-core"
    RAILS = "rails"
    LARAVEL = "laravel"
    # cli
    COMMANDER = "commander"
    YARGS = "yargs"
    CLAP = "clap"
    COBRA = "cobra"
    CLICK = "click"
    ARGPARSE = "argparse"
    # desktop
    TAURI = "tauri"
    ELECTRON = "electron"
    QT = "qt"
    # mobile
    REACT_NATIVE = "react-native"
    SWIFTUI = "swiftui"
    JETPACK_COMPOSE = "jetpack-compose"
    # game
    PHASER = "phaser"
    BEVY = "bevy"
    SDL2 = "sdl2"
    MONOGAME = "monogame"
    NONE = "none"


class Database(str, Enum):
    POSTGRES = "postgres"
    MYSQL = "mysql"
    SQLITE = "sqlite"
    MONGODB = "mongodb"
    REDIS = "redis"
    CASSANDRA = "cassandra"
    NEO4J = "neo4j"
    NONE = "none"


class ORM(str, Enum):
    PRISMA = "prisma"
    DRIZZLE = "drizzle"
    TYPEORM = "typeorm"
    SEQUELIZE = "sequelize"
    SQLALCHEMY = "sqlalchemy"
    GORM = "gorm"
    DIESEL = "diesel"
    ENTITY_FRAMEWORK = "entity-framework"
    ACTIVERECORD = "activerecord"
    ELOQUENT = "eloquent"
    NONE = "none"


class Transport(str, Enum):
    REST = "rest"
    GRAPHQL = "graphql"
    GRPC = "grpc"
    TRPC = "trpc"
    WEBSOCKET = "websocket"


class Packaging(str, Enum):
    DOCKER = "docker"
    PODMAN = "podman"
    NIX = "nix"
    NONE = "none"


class CICD(str, Enum):
    GITHUB_ACTIONS = "github-actions"
    GITLAB_CI = "gitlab-ci"
    CIRCLECI = "circleci"
    NONE = "none"


class BuildTool(str, Enum):
    VITE = "vite"
    WEBPACK = "webpack"
    ESBUILD = "esbuild"
    TSUP = "tsup"
    CARGO = "cargo"
    GO = "go"
    MAVEN = "maven"
    GRADLE = "gradle"
    MSBUILD = "msbuild"
    CMAKE = "cmake"
    MAKE = "make"
    XCODEBUILD = "xcodebuild"
    SWIFTPM = "swiftpm"
    HATCH = "hatch"
    BUNDLER = "bundler"
    COMPOSER = "composer"


class Styling(str, Enum):
    TAILWIND = "tailwind"
    CSS_MODULES = "css-modules"
    STYLED_COMPONENTS = "styled-components"
    SCSS = "scss"
    VANILLA = "vanilla"
    NONE = "none"


class TestingFramework(str, Enum):
    VITEST = "vitest"
    JEST = "jest"
    MOCHA = "mocha"
    PYTEST = "pytest"
    GO_TEST = "go-test"
    RUST_TEST = "rust-test"
    JUNIT = "junit"
    XUNIT = "xunit"
    NUNIT = "nunit"
    RSPEC = "rspec"
    PHPUNIT = "phpunit"
    XCTEST = "xctest"
    GTEST = "gtest"
    CATCH2 = "catch2"


class EnrichmentDepth(str, Enum):
    """How much production detail the enrichment pass adds."""
    MINIMAL = "minimal"
    STANDARD = "standard"
    FULL = "full"


# ---------------------------------------------------------------------------
# Field ordering
# ---------------------------------------------------------------------------

FIELD_ORDER: tuple[str, ...] = (
    "archetype",
    "language",
    "framework",
    "database",
    "orm",
    "runtime",
    "transport",
    "packaging",
    "cicd",
    "build_tool",
    "styling",
    "testing",
)

FIELD_DOMAINS: dict[str, type[Enum]] = {
    "archetype": Archetype,
    "language": Language,
    "framework": Framework,
    "database": Database,
    "orm": ORM,
    "runtime": Runtime,
    "transport": Transport,
    "packaging": Packaging,
    "cicd": CICD,
    "build_tool": BuildTool,
    "styling": Styling,
    "testing": TestingFramework,
}


# ---------------------------------------------------------------------------
# Stack & constraints
# ---------------------------------------------------------------------------

class Stack(BaseModel):
    """A fully-populated, immutable technology stack."""

    model_config = ConfigDict(frozen=True)

    archetype: Archetype
    language: Language
    framework: Framework
    database: Database
    orm: ORM
    runtime: Runtime
    transport: Transport
    packaging: Packaging
    cicd: CICD
    build_tool: BuildTool
    styling: Styling
    testing: TestingFramework

    def as_dict(self) -> dict[str, Enum]:
        """Return ``{field: enum value}`` in resolution order."""
        return {name: getattr(self, name) for name in FIELD_ORDER}

    def tags(self) -> list[str]:
        """Return the manifest tag set (``none`` values omitted)."""
        return [
            getattr(self, name).value
            for name in FIELD_ORDER
            if getattr(self, name).value != "none"
        ]

    @property
    def has_database(self) -> bool:
        return self.database is not Database.NONE


class Constraints(BaseModel):
    """Caller-supplied partial stack; unset fields are resolved by the engine."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    archetype: Optional[Archetype] = None
    language: Optional[Language] = None
    framework: Optional[Framework] = None
    database: Optional[Database] = None
    orm: Optional[ORM] = None
    runtime: Optional[Runtime] = None
    transport: Optional[Transport] = None
    packaging: Optional[Packaging] = None
    cicd: Optional[CICD] = None
    build_tool: Optional[BuildTool] = None
    styling: Optional[Styling] = None
    testing: Optional[TestingFramework] = None

    def forced(self) -> dict[str, Enum]:
        """Return the fields the caller set, in resolution order."""
        return {
            name: getattr(self, name)
            for name in FIELD_ORDER
            if getattr(self, name) is not None
        }


# ---------------------------------------------------------------------------
# Enrichment flags
# ---------------------------------------------------------------------------

_DEPTH_PRESETS: dict[EnrichmentDepth, dict[str, bool]] = {
    EnrichmentDepth.MINIMAL: {
        "cicd": True,
        "release": False,
        "fill_logic": False,
        "tests": False,
        "docker_prod": False,
        "linting": True,
        "env_files": True,
        "docs": True,
    },
    EnrichmentDepth.STANDARD: {
        "cicd": True,
        "release": True,
        "fill_logic": True,
        "tests": True,
        "docker_prod": True,
        "linting": True,
        "env_files": True,
        "docs": True,
    },
    EnrichmentDepth.FULL: {
        "cicd": True,
        "release": True,
        "fill_logic": True,
        "tests": True,
        "docker_prod": True,
        "linting": True,
        "env_files": True,
        "docs": True,
    },
}


class EnrichmentFlags(BaseModel):
    """Independent toggles selecting which enrichment strategies activate."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = Field(default=True, description="Master switch for the enrichment pass")
    depth: EnrichmentDepth = Field(default=EnrichmentDepth.STANDARD)
    cicd: bool = Field(default=False, description="Upgrade CI workflows")
    release: bool = Field(default=False, description="Add release automation")
    fill_logic: bool = Field(default=False, description="Fill in routes, commands, components")
    tests: bool = Field(default=False, description="Add test configuration and tests")
    docker_prod: bool = Field(default=False, description="Harden the Dockerfile for production")
    linting: bool = Field(default=False, description="Add linter and formatter config")
    env_files: bool = Field(default=False, description="Add environment templates")
    docs: bool = Field(default=False, description="Expand the README")

    @classmethod
    def for_depth(cls, depth: EnrichmentDepth | str, **overrides: Any) -> "EnrichmentFlags":
        """Build flags from a depth preset, then apply explicit overrides."""
        depth = EnrichmentDepth(depth)
        values: dict[str, Any] = {"enabled": True, "depth": depth, **_DEPTH_PRESETS[depth]}
        values.update(overrides)
        return cls(**values)

    def any_active(self) -> bool:
        """Return ``True`` if the pass is enabled and at least one toggle is on."""
        return self.enabled and any(
            getattr(self, name) for name in _DEPTH_PRESETS[EnrichmentDepth.FULL]
        )


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

class Resolution(BaseModel):
    """Outcome of a resolver call."""
    stack: Stack
    forced: list[str] = Field(default_factory=list, description="Fields adopted from constraints")
    fallbacks: list[str] = Field(
        default_factory=list,
        description="Fields set to a matrix default because no weighted candidate fitted",
    )


class ProjectMetadata(BaseModel):
    """Bookkeeping attached to a generated project."""
    engine_version: str
    strategies_applied: list[str] = Field(default_factory=list)
    enrichment_applied: list[str] = Field(default_factory=list)
    files_added: list[str] = Field(default_factory=list)
    files_modified: list[str] = Field(default_factory=list)
    fallbacks: list[str] = Field(default_factory=list)
    introspection_misses: list[str] = Field(default_factory=list)
    duration_ms: float = 0.0


class GeneratedProject(BaseModel):
    """A resolved stack together with its generated file map."""
    id: str
    seed: int
    name: str
    stack: Stack
    files: dict[str, str]
    enrichment: Optional[EnrichmentFlags] = None
    metadata: ProjectMetadata

    @property
    def paths(self) -> list[str]:
        return sorted(self.files)
