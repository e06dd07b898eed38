"""
Models for schema compatibility analysis.

``CompatibilityResult`` and ``BreakingChange`` are the analyzer's public
output (Pydantic v2, ``extra="forbid"``).  ``TypeDescriptor`` and
``FieldDescriptor`` are the analyzer's internal per-field view and are
plain frozen dataclasses.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from contentschema.types import BreakingChangeType, ChangeLevel, TypeKind


# ---------------------------------------------------------------------------
# Result models
# ---------------------------------------------------------------------------


class BreakingChange(BaseModel):
    """A schema delta that can invalidate previously valid payloads."""

    model_config = ConfigDict(extra="forbid")

    type: BreakingChangeType
    field: str = Field(..., description="Dotted field path")
    description: str = ""


class CompatibilityResult(BaseModel):
    """Outcome of comparing an old schema revision with a new one."""

    model_config = ConfigDict(extra="forbid")

    compatible: bool = True
    change_level: ChangeLevel = ChangeLevel.NONE
    breaking_changes: list[BreakingChange] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_consistency(self) -> "CompatibilityResult":
        """Incompatible iff there are breaking changes, which always means MAJOR."""
        if self.compatible == bool(self.breaking_changes):
            raise ValueError(
                "compatible must be False exactly when breaking_changes is non-empty"
            )
        if self.breaking_changes and self.change_level != ChangeLevel.MAJOR:
            raise ValueError("breaking changes require change_level MAJOR")
        return self

    def breaking_fields(self) -> list[str]:
        return [change.field for change in self.breaking_changes]


class SchemaUpdatePlan(BaseModel):
    """A gated schema update: the tree to persist and its bumped version."""

    model_config = ConfigDict(extra="forbid")

    slug: str = Field(..., min_length=1)
    schema_tree: dict[str, Any]
    version: str = Field(..., min_length=1)
    previous_version: Optional[str] = None
    change_level: ChangeLevel = ChangeLevel.NONE
    compatibility: CompatibilityResult = Field(default_factory=CompatibilityResult)

    @property
    def version_changed(self) -> bool:
        return self.version != self.previous_version


# ---------------------------------------------------------------------------
# Internal descriptors
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TypeDescriptor:
    """Coarse type of a field.

    ``signature`` is an opaque fingerprint for ``unknown`` composite shapes
    (mixed type lists, ``oneOf`` / ``allOf``) that are not compared
    structurally.
    """

    kind: TypeKind
    scalar_types: frozenset[str] = field(default_factory=frozenset)
    array_item: Optional["TypeDescriptor"] = None
    signature: str = ""

    def describe(self) -> str:
        if self.kind == TypeKind.SCALAR:
            return "|".join(sorted(self.scalar_types)) or "scalar"
        if self.kind == TypeKind.ARRAY:
            item = self.array_item.describe() if self.array_item else "any"
            return f"array<{item}>"
        if self.kind == TypeKind.UNKNOWN and self.signature:
            return f"unknown({self.signature})"
        return self.kind.value


@dataclass(frozen=True)
class FieldDescriptor:
    type: TypeDescriptor
    required: bool = False
