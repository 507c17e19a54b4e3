"""Shared base for per-language scaffold strategies."""

from __future__ import annotations

from typing import Callable, ClassVar, Mapping

from procgen.engine.registry import GenerationContext, GenerationStrategy
from procgen.models import Archetype, Language, Stack

Handler = Callable[[GenerationContext], None]


class LanguageScaffold(GenerationStrategy):
    """Writes the language-specific project skeleton.

    ``handlers`` maps each archetype the language supports to a function
    that writes its files; archetypes without a handler get ``fallback``
    (a library layout), so every stack in the language yields an anchor
    manifest.
    """

    priority = 10
    languages: ClassVar[tuple[Language, ...]] = ()
    handlers: ClassVar[Mapping[Archetype, Handler]] = {}
    fallback: ClassVar[Handler]

    def matches(self, stack: Stack) -> bool:
        return stack.language in self.languages

    async def apply(self, ctx: GenerationContext) -> None:
        handler = self.handlers.get(ctx.stack.archetype, type(self).fallback)
        handler(ctx)


UNHANDLED_MAKEFILE = """\
.PHONY: build test

build:
\t@echo "No build configured for {{ language }}"

test:
\t@echo "No tests configured for {{ language }}"
"""


class UnhandledLanguageScaffold(GenerationStrategy):
    """Minimal layout for languages no scaffold claims.

    Keeps the run from producing an empty map when a language is added to
    the matrices before its scaffold exists.
    """

    id = "unhandled-language"
    name = "Unhandled language fallback"
    priority = 10

    def __init__(self, handled: frozenset[Language]) -> None:
        self.handled = handled

    def matches(self, stack: Stack) -> bool:
        return stack.language not in self.handled

    async def apply(self, ctx: GenerationContext) -> None:
        ctx.write("Makefile", ctx.render(UNHANDLED_MAKEFILE))
        ctx.write("src/.gitkeep", "")
