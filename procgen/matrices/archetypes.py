"""Archetype matrix: which languages, databases and transports each project shape admits."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from procgen.models import Archetype, Database, Language, Transport


class ArchetypeEntry(BaseModel):
    """Static descriptor for one archetype."""

    model_config = ConfigDict(frozen=True)

    id: Archetype
    name: str
    description: str = ""
    languages: tuple[Language, ...]
    databases: tuple[Database, ...] = (Database.NONE,)
    transports: tuple[Transport, ...] = (Transport.REST,)
    styled: bool = Field(default=False, description="Whether a styling solution applies")


_ALL_DATABASES = tuple(Database)
_EMBEDDED_ONLY = (Database.NONE, Database.SQLITE)

ARCHETYPES: dict[Archetype, ArchetypeEntry] = {
    entry.id: entry
    for entry in (
        ArchetypeEntry(
            id=Archetype.WEB,
            name="Web Application",
            description="Browser single-page or server-rendered frontend",
            languages=(Language.TYPESCRIPT, Language.JAVASCRIPT),
            styled=True,
        ),
        ArchetypeEntry(
            id=Archetype.BACKEND,
            name="Backend API",
            description="HTTP/RPC service exposing an API",
            languages=(
                Language.TYPESCRIPT,
                Language.JAVASCRIPT,
                Language.PYTHON,
                Language.GO,
                Language.RUST,
                Language.JAVA,
                Language.KOTLIN,
                Language.CSHARP,
                Language.RUBY,
                Language.PHP,
            ),
            databases=_ALL_DATABASES,
            transports=tuple(Transport),
        ),
        ArchetypeEntry(
            id=Archetype.CLI,
            name="CLI Tool",
            description="Command-line application",
            languages=(
                Language.TYPESCRIPT,
                Language.JAVASCRIPT,
                Language.PYTHON,
                Language.GO,
                Language.RUST,
            ),
            databases=tuple(
                db for db in Database if db not in (Database.CASSANDRA, Database.NEO4J)
            ),
        ),
        ArchetypeEntry(
            id=Archetype.MOBILE,
            name="Mobile App",
            languages=(Language.TYPESCRIPT, Language.KOTLIN, Language.SWIFT),
            databases=_EMBEDDED_ONLY,
        ),
        ArchetypeEntry(
            id=Archetype.DESKTOP,
            name="Desktop App",
            languages=(Language.TYPESCRIPT, Language.RUST, Language.CPP),
            databases=_EMBEDDED_ONLY,
        ),
        ArchetypeEntry(
            id=Archetype.LIBRARY,
            name="Library/Package",
            description="Reusable package published to a registry",
            languages=tuple(lang for lang in Language if lang is not Language.SWIFT),
        ),
        ArchetypeEntry(
            id=Archetype.GAME,
            name="Game",
            languages=(Language.TYPESCRIPT, Language.CSHARP, Language.CPP, Language.RUST),
            databases=_EMBEDDED_ONLY,
        ),
    )
}
