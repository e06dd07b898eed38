"""Tests for the version-aware migration registry."""

from __future__ import annotations

import pytest

from contentschema.config import get_config
from contentschema.errors import (
    InvalidSchemaVersionError,
    MigrationRegistrationError,
    MigrationStepMissingError,
)
from contentschema.migrations import MigrationRegistry, Migrator


def _upgrade(payload: dict) -> dict:
    payload["title"] = payload.pop("headline", "")
    return payload


@pytest.fixture
def registry() -> MigrationRegistry:
    reg = MigrationRegistry()
    reg.register("article", "article@1.0.0", "article@v2.0.0", _upgrade)
    return reg


class TestRegister:
    def test_stores_canonical_versions(self, registry):
        steps = registry.migrator.steps("article")
        assert [(s.from_version, s.to_version) for s in steps] == [
            ("article@v1.0.0", "article@v2.0.0")
        ]

    def test_slug_derived_from_versions(self):
        reg = MigrationRegistry()
        reg.register(None, "page@v1.0.0", "page@v1.1.0", _upgrade)
        assert reg.migrator.steps("page")

    def test_slug_mismatch_rejected(self):
        with pytest.raises(InvalidSchemaVersionError):
            MigrationRegistry().register(
                "article", "article@v1.0.0", "other@v2.0.0", _upgrade
            )

    def test_malformed_version_rejected(self):
        with pytest.raises(InvalidSchemaVersionError):
            MigrationRegistry().register("article", "v1", "article@v2.0.0", _upgrade)

    def test_transform_must_be_callable(self):
        with pytest.raises(MigrationRegistrationError):
            MigrationRegistry().register(
                "article", "article@v1.0.0", "article@v2.0.0", None
            )

    def test_wraps_given_migrator(self):
        migrator = Migrator()
        reg = MigrationRegistry(migrator=migrator)
        reg.register("article", "article@v1.0.0", "article@v2.0.0", _upgrade)
        assert reg.migrator is migrator
        assert migrator.steps("article")


class TestMigrate:
    def test_canonicalizes_versions(self, registry):
        out = registry.migrate("article", "article@1.0.0", "article@2.0.0", {"headline": "Hi"})
        assert out == {"title": "Hi"}

    def test_has_path(self, registry):
        assert registry.has_path("article", "article@1.0.0", "article@v2.0.0")
        assert not registry.has_path("article", "article@v2.0.0", "article@v3.0.0")


class TestMigratePayload:
    def test_strips_and_restamps_version(self, registry):
        seen: list[dict] = []

        def spy(payload):
            seen.append(dict(payload))
            return _upgrade(payload)

        reg = MigrationRegistry()
        reg.register("article", "article@v1.0.0", "article@v2.0.0", spy)
        stored = {"_schema": "article@v1.0.0", "headline": "Hi"}

        out = reg.migrate_payload("article", stored, "article@2.0.0")

        assert seen == [{"headline": "Hi"}]
        assert out == {"title": "Hi", "_schema": "article@v2.0.0"}
        assert stored == {"_schema": "article@v1.0.0", "headline": "Hi"}

    def test_payload_at_target_is_only_restamped(self, registry):
        out = registry.migrate_payload(
            "article", {"_schema": "article@2.0.0", "title": "Hi"}, "article@v2.0.0"
        )
        assert out == {"_schema": "article@v2.0.0", "title": "Hi"}

    def test_unversioned_payload_is_stamped(self, registry):
        out = registry.migrate_payload("article", {"headline": "Hi"}, "article@v2.0.0")
        assert out == {"headline": "Hi", "_schema": "article@v2.0.0"}

    def test_missing_step(self, registry):
        with pytest.raises(MigrationStepMissingError):
            registry.migrate_payload(
                "article", {"_schema": "article@v0.9.0"}, "article@v2.0.0"
            )

    def test_custom_version_key(self):
        reg = MigrationRegistry(version_key="$v")
        reg.register("article", "article@v1.0.0", "article@v2.0.0", _upgrade)
        out = reg.migrate_payload(
            "article", {"$v": "article@v1.0.0", "headline": "Hi"}, "article@v2.0.0"
        )
        assert out == {"title": "Hi", "$v": "article@v2.0.0"}

    def test_version_key_from_config(self):
        get_config(payload_version_key="__version")
        reg = MigrationRegistry()
        reg.register("article", "article@v1.0.0", "article@v2.0.0", _upgrade)
        out = reg.migrate_payload(
            "article", {"__version": "article@v1.0.0", "headline": "Hi"}, "article@v2.0.0"
        )
        assert out["__version"] == "article@v2.0.0"
