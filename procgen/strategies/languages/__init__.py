"""Per-language scaffolds, dispatched by ``Language``."""

from procgen.models import Language
from procgen.strategies.languages.base import LanguageScaffold, UnhandledLanguageScaffold
from procgen.strategies.languages.cpp import CppScaffold
from procgen.strategies.languages.dotnet import DotnetScaffold
from procgen.strategies.languages.go import GoScaffold
from procgen.strategies.languages.jvm import JvmScaffold
from procgen.strategies.languages.node import NodeScaffold
from procgen.strategies.languages.php import PhpScaffold
from procgen.strategies.languages.python import PythonScaffold
from procgen.strategies.languages.ruby import RubyScaffold
from procgen.strategies.languages.rust import RustScaffold
from procgen.strategies.languages.swift import SwiftScaffold

SCAFFOLD_CLASSES: tuple[type[LanguageScaffold], ...] = (
    NodeScaffold,
    PythonScaffold,
    GoScaffold,
    RustScaffold,
    JvmScaffold,
    DotnetScaffold,
    CppScaffold,
    SwiftScaffold,
    PhpScaffold,
    RubyScaffold,
)


def build_language_scaffolds() -> dict[Language, LanguageScaffold]:
    """Return a fresh ``{language: scaffold}`` table; JVM languages share one instance."""
    table: dict[Language, LanguageScaffold] = {}
    for cls in SCAFFOLD_CLASSES:
        scaffold = cls()
        for language in cls.languages:
            table[language] = scaffold
    return table


LANGUAGE_SCAFFOLDS = build_language_scaffolds()

__all__ = [
    "LANGUAGE_SCAFFOLDS",
    "SCAFFOLD_CLASSES",
    "LanguageScaffold",
    "UnhandledLanguageScaffold",
    "build_language_scaffolds",
]
