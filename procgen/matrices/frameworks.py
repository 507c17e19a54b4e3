"""Framework matrix: archetype, languages and default tooling per framework."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict

from procgen.models import (
    ORM,
    Archetype,
    BuildTool,
    Framework,
    Language,
    Styling,
    TestingFramework,
)

_NODE = (Language.TYPESCRIPT, Language.JAVASCRIPT)
_TS = (Language.TYPESCRIPT,)

# styled-components only pairs with React renderers.
REACT_STYLING = tuple(Styling)
DEFAULT_STYLING = tuple(s for s in Styling if s is not Styling.STYLED_COMPONENTS)


class FrameworkEntry(BaseModel):
    """Static descriptor for one framework.

    ``archetype`` is ``None`` only for ``Framework.NONE``, which pairs with
    every archetype and language.  ``orms`` of ``None`` accepts any ORM the
    language allows; frameworks with a built-in data layer list only
    ``ORM.NONE``.
    """

    model_config = ConfigDict(frozen=True)

    id: Framework
    name: str
    archetype: Optional[Archetype]
    languages: tuple[Language, ...]
    build_tool: Optional[BuildTool] = None
    testing: Optional[TestingFramework] = None
    port: Optional[int] = None
    orms: Optional[tuple[ORM, ...]] = None
    stylings: tuple[Styling, ...] = DEFAULT_STYLING


def _fw(
    id: Framework,
    name: str,
    archetype: Archetype,
    languages: tuple[Language, ...],
    build_tool: BuildTool,
    testing: TestingFramework,
    port: Optional[int] = None,
    *,
    orms: Optional[tuple[ORM, ...]] = None,
    stylings: tuple[Styling, ...] = DEFAULT_STYLING,
) -> FrameworkEntry:
    return FrameworkEntry(
        id=id,
        name=name,
        archetype=archetype,
        languages=languages,
        build_tool=build_tool,
        testing=testing,
        port=port,
        orms=orms,
        stylings=stylings,
    )


_W, _B, _C = Archetype.WEB, Archetype.BACKEND, Archetype.CLI
_D, _M, _G = Archetype.DESKTOP, Archetype.MOBILE, Archetype.GAME
_T = TestingFramework

FRAMEWORKS: dict[Framework, FrameworkEntry] = {
    entry.id: entry
    for entry in (
        # web
        _fw(
            Framework.REACT, "React", _W, _NODE, BuildTool.VITE, _T.VITEST, 5173,
            stylings=REACT_STYLING,
        ),
        _fw(Framework.VUE, "Vue", _W, _NODE, BuildTool.VITE, _T.VITEST, 5173),
        _fw(Framework.SVELTE, "Svelte", _W, _NODE, BuildTool.VITE, _T.VITEST, 5173),
        _fw(Framework.SOLID, "SolidJS", _W, _NODE, BuildTool.VITE, _T.VITEST, 5173),
        _fw(Framework.ANGULAR, "Angular", _W, _TS, BuildTool.WEBPACK, _T.JEST, 4200),
        _fw(Framework.QWIK, "Qwik", _W, _TS, BuildTool.VITE, _T.VITEST, 5173),
        _fw(
            Framework.NEXTJS, "Next.js", _W, _NODE, BuildTool.WEBPACK, _T.JEST, 3000,
            stylings=REACT_STYLING,
        ),
        _fw(Framework.NUXT, "Nuxt", _W, _NODE, BuildTool.VITE, _T.VITEST, 3000),
        _fw(Framework.SVELTEKIT, "SvelteKit", _W, _NODE, BuildTool.VITE, _T.VITEST, 5173),
        # backend
        _fw(Framework.EXPRESS, "Express", _B, _NODE, BuildTool.TSUP, _T.VITEST, 3000),
        _fw(Framework.FASTIFY, "Fastify", _B, _NODE, BuildTool.TSUP, _T.VITEST, 3000),
        _fw(Framework.NESTJS, "NestJS", _B, _TS, BuildTool.WEBPACK, _T.JEST, 3000),
        _fw(Framework.FASTAPI, "FastAPI", _B, (Language.PYTHON,), BuildTool.HATCH, _T.PYTEST, 8000),
        _fw(Framework.FLASK, "Flask", _B, (Language.PYTHON,), BuildTool.HATCH, _T.PYTEST, 5000),
        _fw(
            Framework.DJANGO, "Django", _B, (Language.PYTHON,), BuildTool.HATCH, _T.PYTEST, 8000,
            orms=(ORM.NONE,),
        ),
        _fw(Framework.GIN, "Gin", _B, (Language.GO,), BuildTool.GO, _T.GO_TEST, 8080),
        _fw(Framework.ECHO, "Echo", _B, (Language.GO,), BuildTool.GO, _T.GO_TEST, 8080),
        _fw(Framework.AXUM, "Axum", _B, (Language.RUST,), BuildTool.CARGO, _T.RUST_TEST, 8080),
        _fw(Framework.ACTIX, "Actix Web", _B, (Language.RUST,), BuildTool.CARGO, _T.RUST_TEST, 8080),
        _fw(
            Framework.SPRING_BOOT, "Spring Boot", _B,
            (Language.JAVA, Language.KOTLIN), BuildTool.GRADLE, _T.JUNIT, 8080,
        ),
        _fw(
            Framework.ASPNET_CORE, "ASP.NET Core", _B,
            (Language.CSHARP,), BuildTool.MSBUILD, _T.XUNIT, 8080,
        ),
        _fw(Framework.RAILS, "Ruby on Rails", _B, (Language.RUBY,), BuildTool.BUNDLER, _T.RSPEC, 3000),
        _fw(Framework.LARAVEL, "Laravel", _B, (Language.PHP,), BuildTool.COMPOSER, _T.PHPUNIT, 8000),
        # cli
        _fw(Framework.COMMANDER, "Commander.js", _C, _NODE, BuildTool.TSUP, _T.VITEST),
        _fw(Framework.YARGS, "Yargs", _C, _NODE, BuildTool.TSUP, _T.VITEST),
        _fw(Framework.CLAP, "Clap", _C, (Language.RUST,), BuildTool.CARGO, _T.RUST_TEST),
        _fw(Framework.COBRA, "Cobra", _C, (Language.GO,), BuildTool.GO, _T.GO_TEST),
        _fw(Framework.CLICK, "Click", _C, (Language.PYTHON,), BuildTool.HATCH, _T.PYTEST),
        _fw(Framework.ARGPARSE, "argparse", _C, (Language.PYTHON,), BuildTool.HATCH, _T.PYTEST),
        # desktop
        _fw(Framework.TAURI, "Tauri", _D, (Language.RUST,), BuildTool.CARGO, _T.RUST_TEST),
        _fw(Framework.ELECTRON, "Electron", _D, _TS, BuildTool.VITE, _T.VITEST),
        _fw(Framework.QT, "Qt", _D, (Language.CPP,), BuildTool.CMAKE, _T.GTEST),
        # mobile
        _fw(Framework.REACT_NATIVE, "React Native", _M, _TS, BuildTool.WEBPACK, _T.JEST),
        _fw(Framework.SWIFTUI, "SwiftUI", _M, (Language.SWIFT,), BuildTool.XCODEBUILD, _T.XCTEST),
        _fw(
            Framework.JETPACK_COMPOSE, "Jetpack Compose", _M,
            (Language.KOTLIN,), BuildTool.GRADLE, _T.JUNIT,
        ),
        # game
        _fw(Framework.PHASER, "Phaser", _G, _TS, BuildTool.VITE, _T.VITEST),
        _fw(Framework.BEVY, "Bevy", _G, (Language.RUST,), BuildTool.CARGO, _T.RUST_TEST),
        _fw(Framework.SDL2, "SDL2", _G, (Language.CPP,), BuildTool.CMAKE, _T.CATCH2),
        _fw(Framework.MONOGAME, "MonoGame", _G, (Language.CSHARP,), BuildTool.MSBUILD, _T.NUNIT),
        FrameworkEntry(
            id=Framework.NONE,
            name="None",
            archetype=None,
            languages=tuple(Language),
            stylings=tuple(Styling),
        ),
    )
}
