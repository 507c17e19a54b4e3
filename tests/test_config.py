"""Unit tests for Config and related Pydantic models (procgen.config).

Tests cover:
- LicenseConfig / BatchConfig defaults and validation
- Config defaults and strategy_options
- Config save/load round trip
- Config.from_env
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from procgen.config import ENGINE_VERSION, BatchConfig, Config, LicenseConfig
from procgen.models import EnrichmentDepth

ENV_VARS = (
    "PROCGEN_PROJECT_NAME",
    "PROCGEN_VERBOSE",
    "PROCGEN_OVERRIDE_FORCED",
    "PROCGEN_DEPTH",
    "PROCGEN_LICENSE_HOLDER",
    "PROCGEN_LICENSE_YEAR",
    "PROCGEN_MAX_PARALLEL",
)


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


# ---------------------------------------------------------------------------
# Nested models
# ---------------------------------------------------------------------------


class TestLicenseConfig:
    @pytest.mark.unit
    def test_defaults(self):
        license = LicenseConfig()
        assert license.holder == "procgen contributors"
        assert license.year == 2025

    @pytest.mark.unit
    @pytest.mark.parametrize("year", [1969, 10000])
    def test_year_bounds(self, year):
        with pytest.raises(ValidationError):
            LicenseConfig(year=year)


class TestBatchConfig:
    @pytest.mark.unit
    def test_default_parallelism(self):
        assert BatchConfig().max_parallel == 4

    @pytest.mark.unit
    def test_rejects_zero(self):
        with pytest.raises(ValidationError):
            BatchConfig(max_parallel=0)


# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------


class TestConfigDefaults:
    @pytest.mark.unit
    def test_defaults(self):
        config = Config()
        assert config.project_name == ""
        assert config.engine_version == ENGINE_VERSION == "1.0.0"
        assert config.override_forced_conflicts is False
        assert config.verbose is False
        assert config.default_depth is EnrichmentDepth.STANDARD

    @pytest.mark.unit
    def test_strategy_options(self):
        config = Config(license=LicenseConfig(holder="Ada", year=2030))
        assert config.strategy_options() == {
            "license_holder": "Ada",
            "license_year": 2030,
            "engine_version": "1.0.0",
        }

    @pytest.mark.unit
    def test_depth_from_string(self):
        assert Config(default_depth="full").default_depth is EnrichmentDepth.FULL


class TestConfigPersistence:
    @pytest.mark.unit
    def test_save_and_load(self, tmp_path: Path):
        config = Config(project_name="demo-app", verbose=True, batch=BatchConfig(max_parallel=2))
        path = config.save(tmp_path / "nested" / "procgen.json")
        assert path.exists()
        assert json.loads(path.read_text())["project_name"] == "demo-app"
        assert Config.load(path) == config

    @pytest.mark.unit
    def test_load_rejects_invalid(self, tmp_path: Path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"batch": {"max_parallel": 0}}))
        with pytest.raises(ValidationError):
            Config.load(path)


class TestConfigFromEnv:
    @pytest.mark.unit
    def test_empty_env_gives_defaults(self, clean_env):
        assert Config.from_env() == Config()

    @pytest.mark.unit
    def test_reads_all_variables(self, clean_env):
        clean_env.setenv("PROCGEN_PROJECT_NAME", "env-app")
        clean_env.setenv("PROCGEN_VERBOSE", "yes")
        clean_env.setenv("PROCGEN_OVERRIDE_FORCED", "1")
        clean_env.setenv("PROCGEN_DEPTH", "minimal")
        clean_env.setenv("PROCGEN_LICENSE_HOLDER", "Env Corp")
        clean_env.setenv("PROCGEN_LICENSE_YEAR", "2031")
        clean_env.setenv("PROCGEN_MAX_PARALLEL", "8")
        config = Config.from_env()
        assert config.project_name == "env-app"
        assert config.verbose is True
        assert config.override_forced_conflicts is True
        assert config.default_depth is EnrichmentDepth.MINIMAL
        assert config.license == LicenseConfig(holder="Env Corp", year=2031)
        assert config.batch.max_parallel == 8

    @pytest.mark.unit
    @pytest.mark.parametrize("value", ["0", "false", "off", ""])
    def test_falsy_flags(self, clean_env, value):
        clean_env.setenv("PROCGEN_VERBOSE", value)
        assert Config.from_env().verbose is False
