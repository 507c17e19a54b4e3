"""Validation of (partial) stacks against the compatibility matrices."""

from __future__ import annotations

from enum import Enum
from typing import Mapping

from pydantic import BaseModel, Field

from procgen.matrices import DEFAULT_MATRIX, RELATIONS, CompatibilityMatrix
from procgen.models import FIELD_DOMAINS, FIELD_ORDER


class Violation(BaseModel):
    """One broken pairwise relation."""
    left: str = Field(..., description="Earlier field in resolution order")
    right: str = Field(..., description="Later field in resolution order")
    left_value: str
    right_value: str
    relation: str

    @property
    def fields(self) -> tuple[str, str]:
        return (self.left, self.right)

    def __str__(self) -> str:
        return (
            f"{self.left}={self.left_value} is incompatible with "
            f"{self.right}={self.right_value}"
        )


def validate_stack(
    values: Mapping[str, Enum],
    matrix: CompatibilityMatrix = DEFAULT_MATRIX,
) -> list[Violation]:
    """Return every relation violated by *values*.

    Relations whose fields are not both present are skipped, so this works on
    partial stacks (e.g. the caller's forced fields) as well as complete ones.
    """
    violations: list[Violation] = []
    for relation in RELATIONS:
        if relation.left not in values or relation.right not in values:
            continue
        left, right = values[relation.left], values[relation.right]
        if not matrix.check(relation, left, right):
            a, b = sorted(
                (relation.left, relation.right), key=FIELD_ORDER.index
            )
            violations.append(
                Violation(
                    left=a,
                    right=b,
                    left_value=values[a].value,
                    right_value=values[b].value,
                    relation=relation.check,
                )
            )
    return violations


def suggest(
    field: str,
    fixed: Mapping[str, Enum],
    matrix: CompatibilityMatrix = DEFAULT_MATRIX,
) -> list[str]:
    """List the values of *field* compatible with every fixed field."""
    others = {k: v for k, v in fixed.items() if k != field}
    return [
        value.value
        for value in FIELD_DOMAINS[field]
        if matrix.compatible(field, value, others)
    ]
