"""procgen configuration.

Typed configuration for the generation pipeline. Settings are Pydantic v2
models, so they are validated at construction time and serialise to and
from JSON or environment variables. The engine itself never reads the
environment; only ``Config.from_env`` does.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from procgen.models import EnrichmentDepth

ENGINE_VERSION = "1.0.0"


class LicenseConfig(BaseModel):
    """Values substituted into the generated LICENSE file.

    The year is fixed configuration rather than the current date so that
    output stays a pure function of the seed.
    """

    holder: str = Field(default="procgen contributors")
    year: int = Field(default=2025, ge=1970, le=9999)


class BatchConfig(BaseModel):
    """Tuning knobs for batch generation."""

    max_parallel: int = Field(
        default=4, ge=1, description="Maximum projects generated concurrently"
    )


class Config(BaseModel):
    """Global procgen configuration.

    Instances are created once by the caller and handed to ``Pipeline``,
    which passes the relevant values on to the resolver and strategies.
    """

    project_name: str = Field(
        default="", description="Fixed project name; empty means derive one from the seed"
    )
    engine_version: str = Field(default=ENGINE_VERSION)
    override_forced_conflicts: bool = Field(
        default=False,
        description="Replace the later of two conflicting forced secondary fields "
        "with its matrix default instead of raising",
    )
    verbose: bool = Field(default=False, description="Print progress through the rich console")
    default_depth: EnrichmentDepth = Field(default=EnrichmentDepth.STANDARD)
    license: LicenseConfig = Field(default_factory=LicenseConfig)
    batch: BatchConfig = Field(default_factory=BatchConfig)

    def strategy_options(self) -> dict[str, Any]:
        """Values exposed to strategies through ``GenerationContext.options``."""
        return {
            "license_holder": self.license.holder,
            "license_year": self.license.year,
            "engine_version": self.engine_version,
        }

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the configuration to a JSON file.

        Args:
            path: Destination file; parent directories are created.

        Returns:
            The path that was written.
        """
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "Config":
        """Load a previously-saved configuration from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            PROCGEN_PROJECT_NAME, PROCGEN_VERBOSE, PROCGEN_OVERRIDE_FORCED,
            PROCGEN_DEPTH, PROCGEN_LICENSE_HOLDER, PROCGEN_LICENSE_YEAR,
            PROCGEN_MAX_PARALLEL.
        """
        license_kwargs: dict[str, Any] = {}
        if os.environ.get("PROCGEN_LICENSE_HOLDER"):
            license_kwargs["holder"] = os.environ["PROCGEN_LICENSE_HOLDER"]
        if os.environ.get("PROCGEN_LICENSE_YEAR"):
            license_kwargs["year"] = int(os.environ["PROCGEN_LICENSE_YEAR"])

        batch_kwargs: dict[str, Any] = {}
        if os.environ.get("PROCGEN_MAX_PARALLEL"):
            batch_kwargs["max_parallel"] = int(os.environ["PROCGEN_MAX_PARALLEL"])

        return cls(
            project_name=os.environ.get("PROCGEN_PROJECT_NAME", ""),
            verbose=_env_flag("PROCGEN_VERBOSE"),
            override_forced_conflicts=_env_flag("PROCGEN_OVERRIDE_FORCED"),
            default_depth=EnrichmentDepth(os.environ.get("PROCGEN_DEPTH", "standard")),
            license=LicenseConfig(**license_kwargs),
            batch=BatchConfig(**batch_kwargs),
        )


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in ("1", "true", "yes", "on")
