"""Read-only queries over an already-generated file map.

Enrichment strategies ask the introspector what the base pipeline produced
(manifests, declared dependencies, exposed ports, entry points) instead of
re-deriving it from the stack.  The view wraps the *live* map owned by the
enrichment run, so a strategy sees every write made by the strategies that
ran before it.
"""

from __future__ import annotations

import json
import re
import tomllib
from enum import Enum
from fnmatch import fnmatchcase
from typing import Any, Mapping, Optional

from pydantic import BaseModel, Field

from procgen.engine.errors import IntrospectionMiss
from procgen.models import Language, Stack
from procgen.utils import python_identifier

DEFAULT_PORT = 3000


class ManifestType(str, Enum):
    NPM = "npm"
    CARGO = "cargo"
    PYPROJECT = "pyproject"
    GOMOD = "gomod"
    MAVEN = "maven"
    GRADLE = "gradle"
    GEMFILE = "gemfile"
    COMPOSER = "composer"
    UNKNOWN = "unknown"


class ParsedManifest(BaseModel):
    """The project's primary manifest reduced to the fields enrichment needs."""

    type: ManifestType = ManifestType.UNKNOWN
    path: str = ""
    name: str = ""
    dependencies: list[str] = Field(default_factory=list)
    dev_dependencies: list[str] = Field(default_factory=list)
    scripts: dict[str, str] = Field(default_factory=dict)


# Manifest files in detection order.
MANIFEST_FILES: tuple[tuple[str, ManifestType], ...] = (
    ("package.json", ManifestType.NPM),
    ("Cargo.toml", ManifestType.CARGO),
    ("pyproject.toml", ManifestType.PYPROJECT),
    ("go.mod", ManifestType.GOMOD),
    ("pom.xml", ManifestType.MAVEN),
    ("build.gradle.kts", ManifestType.GRADLE),
    ("build.gradle", ManifestType.GRADLE),
    ("app/build.gradle.kts", ManifestType.GRADLE),
    ("Gemfile", ManifestType.GEMFILE),
    ("composer.json", ManifestType.COMPOSER),
)

ENTRY_POINTS: dict[Language, tuple[str, ...]] = {
    Language.TYPESCRIPT: ("src/index.ts", "src/main.ts", "src/server.ts", "src/app.ts", "src/main.tsx", "index.ts"),
    Language.JAVASCRIPT: ("src/index.js", "src/main.js", "src/server.js", "src/app.js", "src/main.jsx", "index.js"),
    Language.PYTHON: ("src/{ident}/main.py", "src/{ident}/__main__.py", "manage.py", "src/{ident}/__init__.py"),
    Language.GO: ("main.go", "cmd/main.go", "cmd/server/main.go"),
    Language.RUST: ("src/main.rs", "src/lib.rs"),
    Language.CPP: ("src/main.cpp", "main.cpp"),
    Language.PHP: ("public/index.php", "index.php"),
    Language.RUBY: ("config.ru", "lib/{ident}.rb"),
}

# Fixed toolchain commands for manifests without a scripts table.
TOOLCHAIN_SCRIPTS: dict[ManifestType, dict[str, str]] = {
    ManifestType.CARGO: {"build": "cargo build", "test": "cargo test", "lint": "cargo clippy"},
    ManifestType.PYPROJECT: {"test": "pytest", "lint": "ruff check ."},
    ManifestType.GOMOD: {"build": "go build ./...", "test": "go test ./...", "lint": "golangci-lint run"},
    ManifestType.MAVEN: {"build": "mvn package", "test": "mvn test"},
    ManifestType.GRADLE: {"build": "gradle build", "test": "gradle test"},
    ManifestType.GEMFILE: {"test": "bundle exec rspec", "lint": "bundle exec rubocop"},
}

_EXPOSE_RE = re.compile(r"^\s*EXPOSE\s+(\d+)", re.MULTILINE)
_REQUIREMENT_NAME_RE = re.compile(r"^\s*([A-Za-z0-9][A-Za-z0-9._-]*)")
_GO_MODULE_RE = re.compile(r"^module\s+(\S+)", re.MULTILINE)
_GO_REQUIRE_BLOCK_RE = re.compile(r"require\s*\(([^)]*)\)", re.DOTALL)
_GO_REQUIRE_LINE_RE = re.compile(r"^require\s+([^\s(]\S*)\s", re.MULTILINE)
_MAVEN_DEP_RE = re.compile(
    r"<dependency>.*?<artifactId>([^<]+)</artifactId>(.*?)</dependency>", re.DOTALL
)
_GRADLE_DEP_RE = re.compile(
    r"^\s*(implementation|api|runtimeOnly|testImplementation|testRuntimeOnly|androidTestImplementation)"
    r"""\s*\(?\s*(?:platform\()?["']([^"':]+):([^"':]+)""",
    re.MULTILINE,
)
_GEM_RE = re.compile(r"""^\s*gem\s+["']([^"']+)["']""", re.MULTILINE)


def _match_segments(parts: list[str], pattern: list[str]) -> bool:
    """Match path segments against glob segments; ``**`` spans zero or more."""
    if not pattern:
        return not parts
    head, rest = pattern[0], pattern[1:]
    if head == "**":
        return any(_match_segments(parts[i:], rest) for i in range(len(parts) + 1))
    return bool(parts) and fnmatchcase(parts[0], head) and _match_segments(parts[1:], rest)


def _requirement_name(requirement: str) -> str:
    match = _REQUIREMENT_NAME_RE.match(requirement)
    return match.group(1) if match else ""


# A manifest field of the wrong type reads as absent.
def _text(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    return value if isinstance(value, str) else ""


def _table(data: Mapping[str, Any], key: str) -> dict[str, Any]:
    value = data.get(key)
    return value if isinstance(value, dict) else {}


def _strings(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]


class ProjectIntrospector:
    """Introspection view over a file map.

    Args:
        files: The file map to query.  It is read, never written.
        stack: The stack the map was generated from; used to pick entry
            point candidates.  ``None`` when the stack is unknown, as
            during reverse inference.
        project_name: Name the map was generated under; entry points
            such as ``{ident}/main.py`` are derived from it.  When empty
            the manifest name is used.
    """

    def __init__(
        self,
        files: Mapping[str, str],
        stack: Optional[Stack] = None,
        project_name: str = "",
    ) -> None:
        self._files = files
        self.stack = stack
        self.project_name = project_name
        self.misses: list[str] = []

    # ------------------------------------------------------------------
    # Files
    # ------------------------------------------------------------------

    def has_file(self, path: str) -> bool:
        return path in self._files

    def get_content(self, path: str) -> Optional[str]:
        return self._files.get(path)

    def find_files(self, pattern: str) -> list[str]:
        """Return the sorted paths matching a glob such as ``src/**/*.ts``."""
        segments = pattern.split("/")
        return sorted(
            path for path in self._files if _match_segments(path.split("/"), segments)
        )

    def parse_json(self, path: str) -> Optional[Any]:
        """Parse *path* as JSON; ``None`` when it is missing or malformed."""
        content = self._files.get(path)
        if not content:
            return None
        try:
            return json.loads(content)
        except json.JSONDecodeError:
            return None

    def get_all_paths(self) -> list[str]:
        return sorted(self._files)

    # ------------------------------------------------------------------
    # Manifest
    # ------------------------------------------------------------------

    def get_manifest(self) -> ParsedManifest:
        """Parse the first manifest found, in ``MANIFEST_FILES`` order.

        Parsed fresh on every call: the map changes as strategies run.
        """
        for path, manifest_type in MANIFEST_FILES:
            if path in self._files:
                parser = getattr(self, f"_parse_{manifest_type.value}")
                manifest: ParsedManifest = parser(path)
                manifest.path = path
                if not manifest.scripts:
                    manifest.scripts = dict(TOOLCHAIN_SCRIPTS.get(manifest_type, {}))
                return manifest
        csproj = self.find_files("**/*.csproj")
        if csproj:
            return ParsedManifest(
                path=csproj[0],
                dependencies=re.findall(r'PackageReference Include="([^"]+)"', self._files[csproj[0]]),
                scripts={"build": "dotnet build", "test": "dotnet test"},
            )
        return ParsedManifest()

    def get_all_manifests(self) -> list[ParsedManifest]:
        """Every manifest present, in ``MANIFEST_FILES`` order, without toolchain defaults."""
        manifests = []
        for path, manifest_type in MANIFEST_FILES:
            if path in self._files:
                manifest = getattr(self, f"_parse_{manifest_type.value}")(path)
                manifest.path = path
                manifests.append(manifest)
        return manifests

    def has_dependency(self, name: str, *, dev: bool = True) -> bool:
        """Whether *name* is a declared dependency (dev dependencies included by default)."""
        manifest = self.get_manifest()
        if name in manifest.dependencies:
            return True
        return dev and name in manifest.dev_dependencies

    def _parse_npm(self, path: str) -> ParsedManifest:
        data = self.parse_json(path)
        if not isinstance(data, dict):
            return ParsedManifest(type=ManifestType.NPM)
        return ParsedManifest(
            type=ManifestType.NPM,
            name=_text(data, "name"),
            dependencies=list(_table(data, "dependencies")),
            dev_dependencies=list(_table(data, "devDependencies")),
            scripts={k: v for k, v in _table(data, "scripts").items() if isinstance(v, str)},
        )

    def _parse_composer(self, path: str) -> ParsedManifest:
        data = self.parse_json(path)
        if not isinstance(data, dict):
            return ParsedManifest(type=ManifestType.COMPOSER)
        scripts: dict[str, str] = {}
        for key, value in _table(data, "scripts").items():
            if isinstance(value, str):
                scripts[key] = value
            elif _strings(value):
                scripts[key] = " && ".join(_strings(value))
        return ParsedManifest(
            type=ManifestType.COMPOSER,
            name=_text(data, "name"),
            dependencies=list(_table(data, "require")),
            dev_dependencies=list(_table(data, "require-dev")),
            scripts=scripts,
        )

    def _load_toml(self, path: str) -> dict[str, Any]:
        try:
            return tomllib.loads(self._files[path])
        except tomllib.TOMLDecodeError:
            return {}

    def _parse_cargo(self, path: str) -> ParsedManifest:
        data = self._load_toml(path)
        return ParsedManifest(
            type=ManifestType.CARGO,
            name=_text(_table(data, "package"), "name"),
            dependencies=list(_table(data, "dependencies")),
            dev_dependencies=list(_table(data, "dev-dependencies")),
        )

    def _parse_pyproject(self, path: str) -> ParsedManifest:
        data = self._load_toml(path)
        project = _table(data, "project")
        dev: list[str] = []
        for group in _table(project, "optional-dependencies").values():
            dev.extend(_strings(group))
        return ParsedManifest(
            type=ManifestType.PYPROJECT,
            name=_text(project, "name"),
            dependencies=[_requirement_name(r) for r in _strings(project.get("dependencies"))],
            dev_dependencies=[_requirement_name(r) for r in dev],
        )

    def _parse_gomod(self, path: str) -> ParsedManifest:
        content = self._files[path]
        module = _GO_MODULE_RE.search(content)
        deps: list[str] = []
        for block in _GO_REQUIRE_BLOCK_RE.findall(content):
            for line in block.splitlines():
                fields = line.split()
                if fields and not fields[0].startswith("//"):
                    deps.append(fields[0])
        deps.extend(_GO_REQUIRE_LINE_RE.findall(content))
        return ParsedManifest(
            type=ManifestType.GOMOD,
            name=module.group(1) if module else "",
            dependencies=deps,
        )

    def _parse_maven(self, path: str) -> ParsedManifest:
        deps: list[str] = []
        dev: list[str] = []
        for artifact, rest in _MAVEN_DEP_RE.findall(self._files[path]):
            (dev if "<scope>test</scope>" in rest else deps).append(artifact.strip())
        return ParsedManifest(type=ManifestType.MAVEN, dependencies=deps, dev_dependencies=dev)

    def _parse_gradle(self, path: str) -> ParsedManifest:
        deps: list[str] = []
        dev: list[str] = []
        for configuration, _group, artifact in _GRADLE_DEP_RE.findall(self._files[path]):
            target = dev if configuration.startswith(("test", "androidTest")) else deps
            target.append(artifact)
        return ParsedManifest(type=ManifestType.GRADLE, dependencies=deps, dev_dependencies=dev)

    def _parse_gemfile(self, path: str) -> ParsedManifest:
        return ParsedManifest(
            type=ManifestType.GEMFILE,
            dependencies=_GEM_RE.findall(self._files[path]),
        )

    # ------------------------------------------------------------------
    # Derived facts
    # ------------------------------------------------------------------

    def get_entry_point(self) -> Optional[str]:
        """First existing entry point candidate for the stack's language."""
        if self.stack is None:
            return None
        ident = self._identifier()
        for candidate in ENTRY_POINTS.get(self.stack.language, ()):
            path = candidate.format(ident=ident)
            if path in self._files:
                return path
        return None

    def get_test_command(self) -> Optional[str]:
        return self.get_manifest().scripts.get("test")

    def get_build_command(self) -> Optional[str]:
        return self.get_manifest().scripts.get("build")

    def get_exposed_ports(self) -> list[int]:
        """Ports named by ``EXPOSE`` instructions in the Dockerfile, in order."""
        dockerfile = self._files.get("Dockerfile")
        if not dockerfile:
            return []
        return [int(port) for port in _EXPOSE_RE.findall(dockerfile)]

    def primary_port(self) -> int:
        """The first exposed port.

        Raises:
            IntrospectionMiss: the base scaffold exposes no port.
        """
        ports = self.get_exposed_ports()
        if not ports:
            raise IntrospectionMiss("exposed port")
        return ports[0]

    def port_or_default(self, default: int = DEFAULT_PORT) -> int:
        """``primary_port`` degraded to *default*; the miss is recorded."""
        try:
            return self.primary_port()
        except IntrospectionMiss as exc:
            self.record_miss(exc.query)
            return default

    def record_miss(self, query: str) -> None:
        if query not in self.misses:
            self.misses.append(query)

    def _identifier(self) -> str:
        name = self.project_name or self.get_manifest().name.rsplit("/", 1)[-1]
        return python_identifier(name) if name else ""
