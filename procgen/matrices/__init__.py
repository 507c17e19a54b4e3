"""Static compatibility matrices.

Pure data plus lookup functions; nothing here is mutated after import, so a
single ``DEFAULT_MATRIX`` is shared by every resolver and pipeline::

    from procgen.matrices import DEFAULT_MATRIX

    DEFAULT_MATRIX.frameworks_for(Archetype.CLI, Language.GO)  # [Framework.COBRA]
"""

from procgen.matrices.archetypes import ARCHETYPES, ArchetypeEntry
from procgen.matrices.compat import (
    DEFAULT_MATRIX,
    PRIMARY_FIELDS,
    RELATIONS,
    CompatibilityMatrix,
    Relation,
)
from procgen.matrices.databases import DATABASES, ORM_LANGUAGES, DatabaseEntry
from procgen.matrices.frameworks import FRAMEWORKS, FrameworkEntry
from procgen.matrices.languages import (
    JVM_LANGUAGES,
    LANGUAGES,
    NODE_LANGUAGES,
    LanguageEntry,
)

__all__ = [
    "ARCHETYPES",
    "ArchetypeEntry",
    "CompatibilityMatrix",
    "DATABASES",
    "DEFAULT_MATRIX",
    "DatabaseEntry",
    "FRAMEWORKS",
    "FrameworkEntry",
    "JVM_LANGUAGES",
    "LANGUAGES",
    "LanguageEntry",
    "NODE_LANGUAGES",
    "ORM_LANGUAGES",
    "PRIMARY_FIELDS",
    "RELATIONS",
    "Relation",
]
