"""Manifest export: turn a finished file map into a reusable template manifest.

The stack is recovered with :func:`infer_stack`; the manifest describes it
with tags and a single ``generate`` action, plus the enrichment flags when
the caller knows which were used.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from procgen.enrichment.inference import infer_stack
from procgen.models import EnrichmentFlags, Stack

API_VERSION = "procgen/v1"
DEFAULT_NAME = "exported-project"


class ManifestMetadata(BaseModel):
    name: str
    version: str
    description: str
    tags: list[str] = Field(default_factory=list)


class ManifestPrompt(BaseModel):
    id: str
    type: str = "string"
    message: str
    default: str


class ManifestAction(BaseModel):
    type: str
    src: str
    dest: str


class ManifestEnrichment(BaseModel):
    """Enrichment flags in the manifest's camelCase wire form."""

    model_config = ConfigDict(populate_by_name=True)

    enabled: bool
    depth: str
    cicd: bool
    release: bool
    fill_logic: bool = Field(alias="fillLogic")
    tests: bool
    docker_prod: bool = Field(alias="dockerProd")
    linting: bool
    env_files: bool = Field(alias="envFiles")
    docs: bool

    @classmethod
    def from_flags(cls, flags: EnrichmentFlags) -> "ManifestEnrichment":
        return cls(**flags.model_dump(mode="json"))


class ExportedManifest(BaseModel):
    """A manifest that reproduces the exported project when generated."""

    model_config = ConfigDict(populate_by_name=True)

    api_version: str = Field(default=API_VERSION, alias="apiVersion")
    metadata: ManifestMetadata
    prompts: list[ManifestPrompt] = Field(default_factory=list)
    actions: list[ManifestAction] = Field(default_factory=list)
    enrichment: Optional[ManifestEnrichment] = None

    def to_dict(self) -> dict[str, Any]:
        """Serialise with wire aliases; an absent enrichment block is omitted."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def _tags(stack: Stack) -> list[str]:
    tags = [stack.archetype.value, stack.language.value]
    if stack.framework.value != "none":
        tags.append(stack.framework.value)
    if stack.has_database:
        tags.append(stack.database.value)
    return tags


def _description(stack: Stack) -> str:
    description = f"Generated {stack.archetype.value} project using {stack.language.value}"
    if stack.framework.value != "none":
        description += f" + {stack.framework.value}"
    return description


def export_manifest(
    files: Mapping[str, str],
    name: Optional[str] = None,
    version: str = "1.0.0",
    flags: Optional[EnrichmentFlags] = None,
) -> ExportedManifest:
    """Build a manifest for *files*.

    Args:
        files: The project's file map.
        name: Project name; ``exported-project`` when not given.
        version: Manifest version.
        flags: Enrichment flags the project was generated with, if known.

    Returns:
        The manifest; call ``to_dict()`` for the wire form.
    """
    stack = infer_stack(files).stack
    name = name or DEFAULT_NAME
    return ExportedManifest(
        metadata=ManifestMetadata(
            name=name,
            version=version,
            description=_description(stack),
            tags=_tags(stack),
        ),
        prompts=[ManifestPrompt(id="project_name", message="Project name", default=name)],
        actions=[ManifestAction(type="generate", src="template/", dest="{{ project_name }}")],
        enrichment=ManifestEnrichment.from_flags(flags) if flags is not None else None,
    )
