"""Unit tests for partial-stack validation (procgen.engine.constraints)."""

from __future__ import annotations

import pytest

from procgen.engine.constraints import suggest, validate_stack
from procgen.models import ORM, Archetype, Database, Framework, Language


class TestValidateStack:
    @pytest.mark.unit
    def test_empty_is_valid(self):
        assert validate_stack({}) == []

    @pytest.mark.unit
    def test_single_field_is_valid(self):
        assert validate_stack({"framework": Framework.REACT}) == []

    @pytest.mark.unit
    def test_reports_violation_in_field_order(self):
        violations = validate_stack({"framework": Framework.REACT, "archetype": Archetype.CLI})
        assert len(violations) == 1
        violation = violations[0]
        assert violation.fields == ("archetype", "framework")
        assert violation.relation == "archetype_framework"
        assert str(violation) == "archetype=cli is incompatible with framework=react"

    @pytest.mark.unit
    def test_reports_every_violation(self):
        violations = validate_stack(
            {
                "archetype": Archetype.WEB,
                "language": Language.PYTHON,
                "database": Database.REDIS,
                "orm": ORM.PRISMA,
            }
        )
        pairs = {v.fields for v in violations}
        assert ("archetype", "language") in pairs
        assert ("archetype", "database") in pairs
        assert ("database", "orm") in pairs
        assert ("language", "orm") in pairs

    @pytest.mark.unit
    def test_valid_partial_stack(self):
        assert validate_stack(
            {
                "archetype": Archetype.BACKEND,
                "language": Language.PYTHON,
                "framework": Framework.FASTAPI,
                "database": Database.POSTGRES,
                "orm": ORM.SQLALCHEMY,
            }
        ) == []


class TestSuggest:
    @pytest.mark.unit
    def test_cli_go_frameworks(self):
        fixed = {"archetype": Archetype.CLI, "language": Language.GO}
        assert suggest("framework", fixed) == ["cobra", "none"]

    @pytest.mark.unit
    def test_ignores_own_field(self):
        fixed = {"language": Language.RUST, "orm": ORM.PRISMA}
        assert suggest("orm", fixed) == ["diesel", "none"]

    @pytest.mark.unit
    def test_web_databases(self):
        assert suggest("database", {"archetype": Archetype.WEB}) == ["none"]
