"""Database and ORM matrix."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from procgen.models import Database, Language, ORM


class DatabaseEntry(BaseModel):
    """Static descriptor for one database engine."""

    model_config = ConfigDict(frozen=True)

    id: Database
    name: str
    kind: str
    port: int
    orms: tuple[ORM, ...]
    image: str = ""


_SQL_ORMS = tuple(ORM)

DATABASES: dict[Database, DatabaseEntry] = {
    entry.id: entry
    for entry in (
        DatabaseEntry(
            id=Database.POSTGRES, name="PostgreSQL", kind="sql", port=5432,
            orms=_SQL_ORMS, image="postgres:16-alpine",
        ),
        DatabaseEntry(
            id=Database.MYSQL, name="MySQL", kind="sql", port=3306,
            orms=_SQL_ORMS, image="mysql:8",
        ),
        DatabaseEntry(id=Database.SQLITE, name="SQLite", kind="sql", port=0, orms=_SQL_ORMS),
        DatabaseEntry(
            id=Database.MONGODB, name="MongoDB", kind="document", port=27017,
            orms=(ORM.PRISMA, ORM.TYPEORM, ORM.NONE), image="mongo:7",
        ),
        DatabaseEntry(
            id=Database.REDIS, name="Redis", kind="key-value", port=6379,
            orms=(ORM.NONE,), image="redis:7-alpine",
        ),
        DatabaseEntry(
            id=Database.CASSANDRA, name="Cassandra", kind="wide-column", port=9042,
            orms=(ORM.NONE,), image="cassandra:4",
        ),
        DatabaseEntry(
            id=Database.NEO4J, name="Neo4j", kind="graph", port=7687,
            orms=(ORM.NONE,), image="neo4j:5",
        ),
        DatabaseEntry(id=Database.NONE, name="None", kind="none", port=0, orms=(ORM.NONE,)),
    )
}

_NODE = (Language.TYPESCRIPT, Language.JAVASCRIPT)

ORM_LANGUAGES: dict[ORM, tuple[Language, ...]] = {
    ORM.PRISMA: _NODE,
    ORM.DRIZZLE: _NODE,
    ORM.SEQUELIZE: _NODE,
    ORM.TYPEORM: (Language.TYPESCRIPT,),
    ORM.SQLALCHEMY: (Language.PYTHON,),
    ORM.GORM: (Language.GO,),
    ORM.DIESEL: (Language.RUST,),
    ORM.ENTITY_FRAMEWORK: (Language.CSHARP,),
    ORM.ACTIVERECORD: (Language.RUBY,),
    ORM.ELOQUENT: (Language.PHP,),
    ORM.NONE: tuple(Language),
}
