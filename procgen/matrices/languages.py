"""Language matrix: runtimes, tooling and container images per language."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from procgen.models import BuildTool, Language, Runtime, TestingFramework


class LanguageEntry(BaseModel):
    """Static descriptor for one language.

    The first element of ``runtimes``, ``build_tools`` and ``testing`` is the
    language default used when nothing more specific applies.
    """

    model_config = ConfigDict(frozen=True)

    id: Language
    name: str
    runtimes: tuple[Runtime, ...]
    package_managers: tuple[str, ...]
    build_tools: tuple[BuildTool, ...]
    testing: tuple[TestingFramework, ...]
    extensions: tuple[str, ...]
    default_port: int
    ci_image: str
    docker_image: str
    indent: int = 4


_NODE_RUNTIMES = (Runtime.NODE, Runtime.BUN, Runtime.DENO)
_NODE_BUILD = (BuildTool.VITE, BuildTool.WEBPACK, BuildTool.ESBUILD, BuildTool.TSUP)
_NODE_TESTING = (TestingFramework.VITEST, TestingFramework.JEST, TestingFramework.MOCHA)

LANGUAGES: dict[Language, LanguageEntry] = {
    entry.id: entry
    for entry in (
        LanguageEntry(
            id=Language.TYPESCRIPT,
            name="TypeScript",
            runtimes=_NODE_RUNTIMES,
            package_managers=("npm", "pnpm", "yarn", "bun"),
            build_tools=_NODE_BUILD,
            testing=_NODE_TESTING,
            extensions=(".ts", ".tsx"),
            default_port=3000,
            ci_image="node:20",
            docker_image="node:20-alpine",
            indent=2,
        ),
        LanguageEntry(
            id=Language.JAVASCRIPT,
            name="JavaScript",
            runtimes=_NODE_RUNTIMES,
            package_managers=("npm", "pnpm", "yarn", "bun"),
            build_tools=_NODE_BUILD,
            testing=_NODE_TESTING,
            extensions=(".js", ".jsx", ".mjs"),
            default_port=3000,
            ci_image="node:20",
            docker_image="node:20-alpine",
            indent=2,
        ),
        LanguageEntry(
            id=Language.PYTHON,
            name="Python",
            runtimes=(Runtime.NATIVE,),
            package_managers=("pip", "uv", "poetry"),
            build_tools=(BuildTool.HATCH, BuildTool.MAKE),
            testing=(TestingFramework.PYTEST,),
            extensions=(".py",),
            default_port=8000,
            ci_image="python:3.12",
            docker_image="python:3.12-slim",
        ),
        LanguageEntry(
            id=Language.GO,
            name="Go",
            runtimes=(Runtime.NATIVE,),
            package_managers=("go",),
            build_tools=(BuildTool.GO, BuildTool.MAKE),
            testing=(TestingFramework.GO_TEST,),
            extensions=(".go",),
            default_port=8080,
            ci_image="golang:1.22",
            docker_image="golang:1.22-alpine",
            indent=8,
        ),
        LanguageEntry(
            id=Language.RUST,
            name="Rust",
            runtimes=(Runtime.NATIVE,),
            package_managers=("cargo",),
            build_tools=(BuildTool.CARGO,),
            testing=(TestingFramework.RUST_TEST,),
            extensions=(".rs",),
            default_port=8080,
            ci_image="rust:1.75",
            docker_image="rust:1.75-slim",
        ),
        LanguageEntry(
            id=Language.JAVA,
            name="Java",
            runtimes=(Runtime.JVM,),
            package_managers=("gradle", "maven"),
            build_tools=(BuildTool.GRADLE, BuildTool.MAVEN),
            testing=(TestingFramework.JUNIT,),
            extensions=(".java",),
            default_port=8080,
            ci_image="eclipse-temurin:17",
            docker_image="eclipse-temurin:17-jdk",
        ),
        LanguageEntry(
            id=Language.KOTLIN,
            name="Kotlin",
            runtimes=(Runtime.JVM, Runtime.NATIVE),
            package_managers=("gradle", "maven"),
            build_tools=(BuildTool.GRADLE, BuildTool.MAVEN),
            testing=(TestingFramework.JUNIT,),
            extensions=(".kt", ".kts"),
            default_port=8080,
            ci_image="eclipse-temurin:17",
            docker_image="eclipse-temurin:17-jdk",
        ),
        LanguageEntry(
            id=Language.CSHARP,
            name="C#",
            runtimes=(Runtime.DOTNET,),
            package_managers=("nuget",),
            build_tools=(BuildTool.MSBUILD,),
            testing=(TestingFramework.XUNIT, TestingFramework.NUNIT),
            extensions=(".cs",),
            default_port=8080,
            ci_image="mcr.microsoft.com/dotnet/sdk:8.0",
            docker_image="mcr.microsoft.com/dotnet/sdk:8.0",
        ),
        LanguageEntry(
            id=Language.CPP,
            name="C++",
            runtimes=(Runtime.NATIVE,),
            package_managers=("vcpkg", "conan"),
            build_tools=(BuildTool.CMAKE, BuildTool.MAKE),
            testing=(TestingFramework.GTEST, TestingFramework.CATCH2),
            extensions=(".cpp", ".hpp", ".h"),
            default_port=8080,
            ci_image="gcc:13",
            docker_image="gcc:13",
        ),
        LanguageEntry(
            id=Language.SWIFT,
            name="Swift",
            runtimes=(Runtime.NATIVE,),
            package_managers=("swiftpm",),
            build_tools=(BuildTool.SWIFTPM, BuildTool.XCODEBUILD),
            testing=(TestingFramework.XCTEST,),
            extensions=(".swift",),
            default_port=8080,
            ci_image="swift:5.10",
            docker_image="swift:5.10",
        ),
        LanguageEntry(
            id=Language.PHP,
            name="PHP",
            runtimes=(Runtime.NATIVE,),
            package_managers=("composer",),
            build_tools=(BuildTool.COMPOSER,),
            testing=(TestingFramework.PHPUNIT,),
            extensions=(".php",),
            default_port=8000,
            ci_image="php:8.3",
            docker_image="php:8.3-cli",
        ),
        LanguageEntry(
            id=Language.RUBY,
            name="Ruby",
            runtimes=(Runtime.NATIVE,),
            package_managers=("bundler",),
            build_tools=(BuildTool.BUNDLER,),
            testing=(TestingFramework.RSPEC,),
            extensions=(".rb",),
            default_port=3000,
            ci_image="ruby:3.3",
            docker_image="ruby:3.3-slim",
            indent=2,
        ),
    )
}

NODE_LANGUAGES = frozenset({Language.TYPESCRIPT, Language.JAVASCRIPT})
JVM_LANGUAGES = frozenset({Language.JAVA, Language.KOTLIN})
