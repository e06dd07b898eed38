"""Tests for compatibility result models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from contentschema.compat.models import (
    BreakingChange,
    CompatibilityResult,
    SchemaUpdatePlan,
)
from contentschema.types import BreakingChangeType, ChangeLevel


def _make_change(**kwargs) -> BreakingChange:
    defaults = {"type": BreakingChangeType.FIELD_REMOVED, "field": "title"}
    defaults.update(kwargs)
    return BreakingChange(**defaults)


class TestBreakingChange:
    def test_type_from_string(self):
        change = BreakingChange(type="required_added", field="slug")
        assert change.type is BreakingChangeType.REQUIRED_ADDED

    def test_unknown_type_rejected(self):
        with pytest.raises(ValidationError):
            BreakingChange(type="renamed", field="a")

    def test_extra_forbidden(self):
        with pytest.raises(ValidationError):
            BreakingChange(type="field_removed", field="a", severity="high")


class TestCompatibilityResult:
    def test_defaults(self):
        result = CompatibilityResult()
        assert result.compatible is True
        assert result.change_level == ChangeLevel.NONE
        assert result.breaking_changes == []
        assert result.warnings == []

    def test_breaking_result(self):
        result = CompatibilityResult(
            compatible=False,
            change_level=ChangeLevel.MAJOR,
            breaking_changes=[_make_change()],
        )
        assert result.breaking_fields() == ["title"]

    def test_incompatible_without_changes_rejected(self):
        with pytest.raises(ValidationError):
            CompatibilityResult(compatible=False, change_level=ChangeLevel.MAJOR)

    def test_compatible_with_changes_rejected(self):
        with pytest.raises(ValidationError):
            CompatibilityResult(
                compatible=True,
                change_level=ChangeLevel.MAJOR,
                breaking_changes=[_make_change()],
            )

    def test_breaking_requires_major(self):
        with pytest.raises(ValidationError):
            CompatibilityResult(
                compatible=False,
                change_level=ChangeLevel.MINOR,
                breaking_changes=[_make_change()],
            )


class TestSchemaUpdatePlan:
    def test_version_changed(self):
        plan = SchemaUpdatePlan(
            slug="article",
            schema_tree={},
            version="article@v1.1.0",
            previous_version="article@v1.0.0",
            change_level=ChangeLevel.MINOR,
        )
        assert plan.version_changed is True

    def test_slug_required(self):
        with pytest.raises(ValidationError):
            SchemaUpdatePlan(slug="", schema_tree={}, version="v1.0.0")
