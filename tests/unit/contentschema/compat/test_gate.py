"""Tests for the schema update gate."""

from __future__ import annotations

import copy

import pytest

from contentschema.compat.gate import SchemaUpdateGate
from contentschema.config import get_config
from contentschema.errors import InvalidSchemaVersionError, SchemaCompatibilityBreakingError
from contentschema.types import ChangeLevel


@pytest.fixture
def gate() -> SchemaUpdateGate:
    return SchemaUpdateGate()


class TestNewSchema:
    def test_first_revision_gets_initial_version(self, gate):
        plan = gate.plan("article", {"type": "object", "properties": {}})
        assert plan.version == "article@v1.0.0"
        assert plan.previous_version is None
        assert plan.change_level == ChangeLevel.NONE
        assert plan.schema_tree["metadata"] == {
            "slug": "article",
            "schema_version": "article@v1.0.0",
        }

    def test_first_revision_keeps_declared_version(self, gate):
        plan = gate.plan(
            "article", {"type": "object", "metadata": {"schema_version": "article@2.1.0"}}
        )
        assert plan.version == "article@v2.1.0"

    def test_candidate_for_other_slug_rejected(self, gate):
        with pytest.raises(InvalidSchemaVersionError):
            gate.plan("article", {"metadata": {"schema_version": "page@v1.0.0"}})


class TestUpdates:
    def test_minor_bump(self, gate, article_schema):
        candidate = copy.deepcopy(article_schema)
        candidate["properties"]["subtitle"] = {"type": "string"}
        plan = gate.plan("article", candidate, previous_schema=article_schema)
        assert plan.previous_version == "article@v1.0.0"
        assert plan.version == "article@v1.1.0"
        assert plan.change_level == ChangeLevel.MINOR
        assert plan.schema_tree["metadata"]["schema_version"] == "article@v1.1.0"
        assert "schema_version" in candidate["metadata"]
        assert candidate["metadata"]["schema_version"] == "article@v1.0.0"

    def test_patch_bump(self, gate, article_schema):
        candidate = copy.deepcopy(article_schema)
        candidate["properties"]["body"]["description"] = "Main text"
        plan = gate.plan("article", candidate, previous_schema=article_schema)
        assert plan.version == "article@v1.0.1"

    def test_unchanged_keeps_version(self, gate, article_schema):
        plan = gate.plan("article", copy.deepcopy(article_schema), previous_schema=article_schema)
        assert plan.version == "article@v1.0.0"
        assert plan.version_changed is False

    def test_stored_version_takes_precedence(self, gate, article_schema):
        candidate = copy.deepcopy(article_schema)
        candidate["properties"]["subtitle"] = {"type": "string"}
        plan = gate.plan(
            "article",
            candidate,
            previous_schema=article_schema,
            previous_version="legacy@1.4.2",
        )
        assert plan.previous_version == "article@v1.4.2"
        assert plan.version == "article@v1.5.0"

    def test_previous_schema_without_version_uses_default(self, gate):
        previous = {"type": "object", "properties": {"a": {"type": "string"}}}
        candidate = {"type": "object", "properties": {"a": {"type": "string"}, "b": {}}}
        plan = gate.plan("article", candidate, previous_schema=previous)
        assert plan.previous_version == "article@v1.0.0"
        assert plan.version == "article@v1.1.0"

    def test_legacy_candidate(self, gate, legacy_article_schema):
        previous = {"fields": [{"name": "title", "type": "string", "required": True}]}
        plan = gate.plan("article", legacy_article_schema, previous_schema=previous)
        assert plan.change_level == ChangeLevel.MINOR
        assert plan.schema_tree["fields"] == legacy_article_schema["fields"]


class TestBreakingChanges:
    def _breaking_candidate(self, article_schema) -> dict:
        candidate = copy.deepcopy(article_schema)
        del candidate["properties"]["body"]
        candidate["properties"]["rating"]["type"] = "string"
        return candidate

    def test_rejected(self, gate, article_schema):
        with pytest.raises(SchemaCompatibilityBreakingError) as excinfo:
            gate.plan(
                "article",
                self._breaking_candidate(article_schema),
                previous_schema=article_schema,
            )
        error = excinfo.value
        assert str(error) == (
            "schema compatibility breaking: field_removed:body, type_changed:rating"
        )
        assert error.result.change_level == ChangeLevel.MAJOR

    def test_override_bumps_major(self, article_schema):
        plan = SchemaUpdateGate(allow_breaking_changes=True).plan(
            "article",
            self._breaking_candidate(article_schema),
            previous_schema=article_schema,
        )
        assert plan.version == "article@v2.0.0"
        assert plan.compatibility.compatible is False

    def test_override_from_config(self, article_schema):
        get_config(allow_breaking_changes=True)
        gate = SchemaUpdateGate()
        assert gate.allow_breaking_changes is True
        plan = gate.plan(
            "article",
            self._breaking_candidate(article_schema),
            previous_schema=article_schema,
        )
        assert plan.change_level == ChangeLevel.MAJOR

    def test_not_enforced(self, gate, article_schema):
        plan = gate.plan(
            "article",
            self._breaking_candidate(article_schema),
            previous_schema=article_schema,
            enforce=False,
        )
        assert plan.version == "article@v2.0.0"


def test_emits_update_planned_event(mock_otel, gate, article_schema):
    gate.plan("article", copy.deepcopy(article_schema), previous_schema=article_schema)
    names = [call.kwargs["name"] for call in mock_otel.add_event.call_args_list]
    assert names[-1] == "schema.update.planned"
    attrs = mock_otel.add_event.call_args_list[-1].kwargs["attributes"]
    assert attrs["schema.slug"] == "article"
    assert attrs["schema.version"] == "article@v1.0.0"
    assert attrs["schema.change_level"] == "none"
