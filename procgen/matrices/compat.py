"""Compatibility checks expressed as total functions over the matrix tables.

``CompatibilityMatrix`` bundles the static tables with one predicate per
pairwise relation and a default lookup per stack field.  Instances are
read-only after construction and may be shared by any number of concurrent
resolutions.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Mapping, NamedTuple, Optional

from procgen.matrices.archetypes import ARCHETYPES, ArchetypeEntry
from procgen.matrices.databases import DATABASES, ORM_LANGUAGES, DatabaseEntry
from procgen.matrices.frameworks import FRAMEWORKS, FrameworkEntry
from procgen.matrices.languages import LANGUAGES, NODE_LANGUAGES, LanguageEntry
from procgen.models import (
    ORM,
    Archetype,
    BuildTool,
    CICD,
    Database,
    Framework,
    Language,
    Packaging,
    Runtime,
    Styling,
    TestingFramework,
    Transport,
)


class Relation(NamedTuple):
    """A pairwise compatibility rule between two stack fields."""

    left: str
    right: str
    check: str


# Every pairwise rule the resolver re-validates.  Order matters only for the
# order violations are reported in.
RELATIONS: tuple[Relation, ...] = (
    Relation("archetype", "language", "archetype_language"),
    Relation("archetype", "framework", "archetype_framework"),
    Relation("language", "framework", "language_framework"),
    Relation("archetype", "database", "archetype_database"),
    Relation("database", "orm", "database_orm"),
    Relation("language", "orm", "language_orm"),
    Relation("language", "runtime", "language_runtime"),
    Relation("archetype", "transport", "archetype_transport"),
    Relation("language", "transport", "language_transport"),
    Relation("language", "build_tool", "language_build_tool"),
    Relation("archetype", "styling", "archetype_styling"),
    Relation("framework", "orm", "framework_orm"),
    Relation("framework", "styling", "framework_styling"),
    Relation("language", "testing", "language_testing"),
)

PRIMARY_FIELDS = frozenset({"archetype", "language", "framework"})


class CompatibilityMatrix:
    """Read-only view over the archetype/language/framework/database tables."""

    def __init__(
        self,
        archetypes: Mapping[Archetype, ArchetypeEntry] = ARCHETYPES,
        languages: Mapping[Language, LanguageEntry] = LANGUAGES,
        frameworks: Mapping[Framework, FrameworkEntry] = FRAMEWORKS,
        databases: Mapping[Database, DatabaseEntry] = DATABASES,
        orm_languages: Mapping[ORM, tuple[Language, ...]] = ORM_LANGUAGES,
    ) -> None:
        self.archetypes = archetypes
        self.languages = languages
        self.frameworks = frameworks
        self.databases = databases
        self.orm_languages = orm_languages

    # ------------------------------------------------------------------
    # Pairwise relations
    # ------------------------------------------------------------------

    def archetype_language(self, archetype: Archetype, language: Language) -> bool:
        return language in self.archetypes[archetype].languages

    def archetype_framework(self, archetype: Archetype, framework: Framework) -> bool:
        entry = self.frameworks[framework]
        return entry.archetype is None or entry.archetype is archetype

    def language_framework(self, language: Language, framework: Framework) -> bool:
        return language in self.frameworks[framework].languages

    def archetype_database(self, archetype: Archetype, database: Database) -> bool:
        return database in self.archetypes[archetype].databases

    def database_orm(self, database: Database, orm: ORM) -> bool:
        return orm in self.databases[database].orms

    def language_orm(self, language: Language, orm: ORM) -> bool:
        return language in self.orm_languages.get(orm, ())

    def language_runtime(self, language: Language, runtime: Runtime) -> bool:
        return runtime in self.languages[language].runtimes

    def archetype_transport(self, archetype: Archetype, transport: Transport) -> bool:
        return transport in self.archetypes[archetype].transports

    def language_transport(self, language: Language, transport: Transport) -> bool:
        if transport is Transport.TRPC:
            return language in NODE_LANGUAGES
        return True

    def language_build_tool(self, language: Language, build_tool: BuildTool) -> bool:
        return build_tool in self.languages[language].build_tools

    def archetype_styling(self, archetype: Archetype, styling: Styling) -> bool:
        if self.archetypes[archetype].styled:
            return styling is not Styling.NONE
        return styling is Styling.NONE

    def framework_orm(self, framework: Framework, orm: ORM) -> bool:
        allowed = self.frameworks[framework].orms
        return allowed is None or orm in allowed

    def framework_styling(self, framework: Framework, styling: Styling) -> bool:
        return styling in self.frameworks[framework].stylings

    def language_testing(self, language: Language, testing: TestingFramework) -> bool:
        return testing in self.languages[language].testing

    def check(self, relation: Relation, left: Enum, right: Enum) -> bool:
        """Evaluate one relation for a pair of field values."""
        predicate: Callable[[Any, Any], bool] = getattr(self, relation.check)
        return predicate(left, right)

    def compatible(self, field: str, value: Enum, fixed: Mapping[str, Enum]) -> bool:
        """Return ``True`` if *value* for *field* agrees with every fixed field."""
        for relation in RELATIONS:
            if relation.left == field and relation.right in fixed:
                if not self.check(relation, value, fixed[relation.right]):
                    return False
            elif relation.right == field and relation.left in fixed:
                if not self.check(relation, fixed[relation.left], value):
                    return False
        return True

    # ------------------------------------------------------------------
    # Defaults
    # ------------------------------------------------------------------

    def default_for(self, field: str, fixed: Mapping[str, Enum]) -> Enum:
        """Return the matrix-declared default for *field* given the fixed fields.

        The result is always compatible with ``archetype``, ``language`` and
        ``framework`` when those are fixed; other relations are re-checked by
        the caller.
        """
        archetype: Optional[Archetype] = fixed.get("archetype")  # type: ignore[assignment]
        language: Optional[Language] = fixed.get("language")  # type: ignore[assignment]
        framework: Optional[Framework] = fixed.get("framework")  # type: ignore[assignment]

        if field == "archetype":
            if language is not None:
                for entry in self.archetypes.values():
                    if language in entry.languages:
                        return entry.id
            return Archetype.LIBRARY
        if field == "language":
            if framework is not None and framework is not Framework.NONE:
                return self.frameworks[framework].languages[0]
            if archetype is not None:
                return self.archetypes[archetype].languages[0]
            return Language.TYPESCRIPT
        if field == "framework":
            return Framework.NONE
        if field == "database":
            return Database.NONE
        if field == "orm":
            return ORM.NONE
        if field == "runtime":
            return self.languages[language or Language.TYPESCRIPT].runtimes[0]
        if field == "transport":
            return Transport.REST
        if field == "packaging":
            return Packaging.NONE
        if field == "cicd":
            return CICD.NONE
        if field == "build_tool":
            entry = self.frameworks.get(framework) if framework is not None else None
            lang = self.languages[language or Language.TYPESCRIPT]
            if entry is not None and entry.build_tool in lang.build_tools:
                return entry.build_tool  # type: ignore[return-value]
            return lang.build_tools[0]
        if field == "styling":
            if archetype is not None and self.archetypes[archetype].styled:
                return Styling.VANILLA
            return Styling.NONE
        if field == "testing":
            entry = self.frameworks.get(framework) if framework is not None else None
            lang = self.languages[language or Language.TYPESCRIPT]
            if entry is not None and entry.testing in lang.testing:
                return entry.testing  # type: ignore[return-value]
            return lang.testing[0]
        raise KeyError(f"Unknown stack field: {field}")

    # ------------------------------------------------------------------
    # Convenience lookups
    # ------------------------------------------------------------------

    def frameworks_for(self, archetype: Archetype, language: Language) -> list[Framework]:
        """Return concrete frameworks (``none`` excluded) for an archetype/language pair."""
        return [
            entry.id
            for entry in self.frameworks.values()
            if entry.archetype is archetype and language in entry.languages
        ]

    def orms_for(self, database: Database, language: Language) -> list[ORM]:
        return [
            orm
            for orm in self.databases[database].orms
            if orm is not ORM.NONE and language in self.orm_languages.get(orm, ())
        ]

    def port_for(self, framework: Framework, language: Language) -> int:
        """Default listening port for a framework, falling back to the language default."""
        entry = self.frameworks.get(framework)
        if entry is not None and entry.port:
            return entry.port
        return self.languages[language].default_port


DEFAULT_MATRIX = CompatibilityMatrix()
