"""Production container hardening: multi-stage Dockerfile and a healthchecked compose file."""

from __future__ import annotations

from typing import NamedTuple

from procgen.engine.registry import GenerationContext
from procgen.enrichment.enricher import EnrichmentContext, EnrichmentStrategy
from procgen.models import EnrichmentFlags, Language, Packaging, Stack
from procgen.strategies.docker import (
    DB_ENVIRONMENT,
    DOCKERIGNORE_COMMON,
    DOCKERIGNORE_LANGUAGE,
    SERVED_ARCHETYPES,
    SERVICE_URLS,
    build_steps,
)


class ProdBuild(NamedTuple):
    """How a language's image is split into builder and runtime stages.

    ``builder`` replaces the generation-time build steps when set;
    ``artifacts`` are the ``COPY --from=builder`` lines of the runtime
    stage.  Without a ``runtime_image`` the image stays single-stage.
    """

    runtime_image: str = ""
    builder: tuple[str, ...] = ()
    artifacts: tuple[str, ...] = ()
    cmd: str = ""
    env: tuple[str, ...] = ()
    alpine: bool = False


PROD_BUILDS: dict[Language, ProdBuild] = {
    Language.TYPESCRIPT: ProdBuild(
        runtime_image="node:20-alpine",
        builder=(
            "COPY package*.json ./",
            "RUN npm install",
            "COPY . .",
            "RUN npm run build --if-present && npm prune --omit=dev",
        ),
        artifacts=("COPY --from=builder /app /app",),
        env=("NODE_ENV=production",),
        alpine=True,
    ),
    Language.PYTHON: ProdBuild(
        runtime_image="python:3.12-slim",
        builder=("COPY . .", "RUN pip install --no-cache-dir --prefix=/install ."),
        artifacts=("COPY --from=builder /install /usr/local", "COPY --from=builder /app /app"),
        env=("PYTHONDONTWRITEBYTECODE=1", "PYTHONUNBUFFERED=1"),
    ),
    Language.GO: ProdBuild(
        runtime_image="alpine:3.20",
        builder=(
            "COPY go.mod ./",
            "COPY . .",
            "RUN go mod tidy && CGO_ENABLED=0 go build -ldflags=\"-s -w\" -o /app/server .",
        ),
        artifacts=("COPY --from=builder /app/server /app/server",),
        alpine=True,
    ),
    Language.RUST: ProdBuild(
        runtime_image="debian:bookworm-slim",
        artifacts=("COPY --from=builder /app/target/release/{slug} /app/{slug}",),
        cmd='["/app/{slug}"]',
    ),
    Language.JAVA: ProdBuild(
        runtime_image="eclipse-temurin:17-jre",
        artifacts=("COPY --from=builder /app/{jar_dir}/ /app/libs/",),
        cmd='["sh", "-c", "java -jar /app/libs/*.jar"]',
    ),
    Language.CSHARP: ProdBuild(
        runtime_image="mcr.microsoft.com/dotnet/aspnet:8.0",
        artifacts=("COPY --from=builder /app/out /app/out",),
        env=("ASPNETCORE_ENVIRONMENT=Production",),
    ),
}
PROD_BUILDS[Language.JAVASCRIPT] = PROD_BUILDS[Language.TYPESCRIPT]
PROD_BUILDS[Language.KOTLIN] = PROD_BUILDS[Language.JAVA]

ALPINE_USER = "RUN addgroup -S app && adduser -S app -G app"
DEBIAN_USER = "RUN groupadd --system app && useradd --system --gid app --no-create-home app"
DEBIAN_CURL = (
    "RUN apt-get update && apt-get install -y --no-install-recommends curl "
    "&& rm -rf /var/lib/apt/lists/*"
)

DOCKERFILE_PROD = """\
# syntax=docker/dockerfile:1
{% if runtime_image %}

# ---- build ----
FROM {{ build_image }} AS builder
WORKDIR /app
{% for line in builder %}
{{ line }}
{% endfor %}

# ---- runtime ----
FROM {{ runtime_image }} AS runtime
WORKDIR /app
{% else %}

FROM {{ build_image }}
WORKDIR /app
{% endif %}
{% if healthcheck and not alpine %}
{{ curl_install }}
{% endif %}
{{ user_setup }}
{% for line in artifacts %}
{{ line }}
{% endfor %}
{% for line in env %}
ENV {{ line }}
{% endfor %}
{% if served %}
ENV PORT={{ port }}
{% endif %}
RUN chown -R app:app /app
USER app
{% if served %}

EXPOSE {{ port }}
{% endif %}
{% if healthcheck %}

HEALTHCHECK --interval=30s --timeout=5s --start-period=15s --retries=3 \\
  CMD {{ probe }} http://localhost:{{ port }}/health || exit 1
{% endif %}

CMD {{ cmd }}
"""


def _jar_dir(ctx: EnrichmentContext) -> str:
    return "target" if ctx.introspect.has_file("pom.xml") else "build/libs"


class DockerProdStrategy(EnrichmentStrategy):
    """Replaces the development Dockerfile with a hardened production image.

    The image runs as a non-root ``app`` user and, for served archetypes,
    exposes the port detected in the existing Dockerfile (3000 when none is
    found) behind a ``HEALTHCHECK`` on ``/health``.
    """

    id = "enrich-docker-prod"
    name = "Production Dockerfile"
    priority = 40

    def matches(self, stack: Stack, flags: EnrichmentFlags) -> bool:
        return flags.docker_prod and stack.packaging is Packaging.DOCKER

    async def apply(self, ctx: EnrichmentContext) -> None:
        stack = ctx.stack
        served = stack.archetype in SERVED_ARCHETYPES
        port = ctx.introspect.port_or_default() if served else 0
        base_steps, base_cmd = build_steps(_generation_view(ctx))
        prod = PROD_BUILDS.get(stack.language, ProdBuild())
        names = {"slug": ctx.slug, "jar_dir": _jar_dir(ctx)}
        multi_stage = bool(prod.runtime_image)

        ctx.write(
            "Dockerfile",
            ctx.render(
                DOCKERFILE_PROD,
                build_image=ctx.matrix.languages[stack.language].docker_image,
                runtime_image=prod.runtime_image,
                builder=list(prod.builder or base_steps),
                artifacts=[line.format(**names) for line in prod.artifacts] if multi_stage else base_steps,
                env=list(prod.env),
                cmd=prod.cmd.format(**names) if prod.cmd else base_cmd,
                alpine=prod.alpine,
                user_setup=ALPINE_USER if prod.alpine else DEBIAN_USER,
                curl_install=DEBIAN_CURL,
                served=served,
                port=port,
                healthcheck=served,
                probe="wget -qO-" if prod.alpine else "curl -fsS",
            ),
        )
        ignores = DOCKERIGNORE_LANGUAGE.get(stack.language, ()) + DOCKERIGNORE_COMMON
        ctx.write_if_absent(".dockerignore", "".join(f"{entry}\n" for entry in ignores))


def _generation_view(ctx: EnrichmentContext) -> GenerationContext:
    """A generation context over the live map, for reusing generation helpers."""
    return GenerationContext(
        ctx.stack,
        ctx.project_name,
        ctx.rng,
        files=ctx.files,
        renderer=ctx.renderer,
        matrix=ctx.matrix,
    )


# ---------------------------------------------------------------------------
# docker-compose
# ---------------------------------------------------------------------------

DB_HEALTHCHECKS: dict[str, str] = {
    "postgres": '["CMD-SHELL", "pg_isready -U postgres"]',
    "mysql": '["CMD", "mysqladmin", "ping", "-h", "localhost"]',
    "mongodb": '["CMD", "mongosh", "--quiet", "--eval", "db.adminCommand(\'ping\')"]',
    "redis": '["CMD", "redis-cli", "ping"]',
    "cassandra": '["CMD-SHELL", "cqlsh -e \'describe keyspaces\'"]',
    "neo4j": '["CMD-SHELL", "wget -qO- http://localhost:7474 || exit 1"]',
}

DB_DATA_DIRS: dict[str, str] = {
    "postgres": "/var/lib/postgresql/data",
    "mysql": "/var/lib/mysql",
    "mongodb": "/data/db",
    "redis": "/data",
    "cassandra": "/var/lib/cassandra",
    "neo4j": "/data",
}

COMPOSE_PROD = """\
services:
  app:
{% if target %}
    build:
      context: .
      target: {{ target }}
{% else %}
    build: .
{% endif %}
    restart: unless-stopped
{% if served %}
    ports:
      - "{{ port }}:{{ port }}"
{% endif %}
{% if env_file %}
    env_file:
      - .env
{% endif %}
    environment:
      DATABASE_URL: {{ service_url }}
{% if served %}
      PORT: "{{ port }}"
{% endif %}
    depends_on:
      {{ database }}:
        condition: service_healthy

  {{ database }}:
    image: {{ image }}
    restart: unless-stopped
{% if db_env %}
    environment:
{% for key, value in db_env %}
      {{ key }}: {{ value }}
{% endfor %}
{% endif %}
    healthcheck:
      test: {{ healthcheck }}
      interval: 10s
      timeout: 5s
      retries: 5
    volumes:
      - {{ database }}-data:{{ data_dir }}

volumes:
  {{ database }}-data:
"""


class DockerComposeEnrichStrategy(EnrichmentStrategy):
    id = "enrich-docker-compose"
    name = "Production docker-compose"
    priority = 42

    def matches(self, stack: Stack, flags: EnrichmentFlags) -> bool:
        return flags.docker_prod and stack.packaging is Packaging.DOCKER and stack.has_database

    async def apply(self, ctx: EnrichmentContext) -> None:
        stack = ctx.stack
        entry = ctx.matrix.databases[stack.database]
        if not entry.image:
            return
        database = stack.database.value
        served = stack.archetype in SERVED_ARCHETYPES
        ctx.write(
            "docker-compose.yml",
            ctx.render(
                COMPOSE_PROD,
                target="runtime" if stack.language in PROD_BUILDS else "",
                served=served,
                port=ctx.introspect.port_or_default() if served else 0,
                env_file=ctx.introspect.has_file(".env"),
                service_url=SERVICE_URLS[database].format(ident=ctx.identifier),
                image=entry.image,
                db_env=DB_ENVIRONMENT.get(database, ()),
                healthcheck=DB_HEALTHCHECKS[database],
                data_dir=DB_DATA_DIRS[database],
            ),
        )
