"""
Version-aware migration registry for content payloads.

Wraps a ``Migrator`` so callers can register and run migrations using
``slug@vX.Y.Z`` strings in any accepted spelling: versions are parsed,
checked against the owning slug and stored in canonical form, so
``article@1.0.0`` and ``article@v1.0.0`` name the same step.

Usage::

    from contentschema.migrations import MigrationRegistry

    registry = MigrationRegistry()
    registry.register("article", "article@v1.0.0", "article@v2.0.0", upgrade)

    stored = {"_schema": "article@v1.0.0", "headline": "Hi"}
    current = registry.migrate_payload("article", stored, "article@v2.0.0")
    current["_schema"]   # "article@v2.0.0"
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Optional

from contentschema.errors import InvalidSchemaVersionError
from contentschema.migrations.migrator import MigrationStep, Migrator, Payload, Transform
from contentschema.migrations.payload import (
    payload_version,
    stamp_payload_version,
    strip_payload_version,
)
from contentschema.versioning import parse_version

logger = logging.getLogger(__name__)


class MigrationRegistry:
    """Registers content schema migrations and runs them on payloads.

    Args:
        migrator: Underlying runner; a fresh ``Migrator`` by default.
        version_key: Payload key holding the embedded version; defaults to
            ``config.payload_version_key``.
    """

    def __init__(
        self,
        migrator: Optional[Migrator] = None,
        version_key: Optional[str] = None,
    ) -> None:
        self._migrator = migrator if migrator is not None else Migrator()
        self._version_key = version_key

    @property
    def migrator(self) -> Migrator:
        return self._migrator

    def register(
        self,
        slug: Optional[str],
        from_version: str,
        to_version: str,
        transform: Transform,
    ) -> MigrationStep:
        """Register a migration between two versions of ``slug``.

        ``slug`` may be omitted, in which case it is taken from the versions.

        Raises:
            InvalidSchemaVersionError: A version is malformed or belongs to
                a different slug.
            MigrationRegistrationError: ``transform`` is not callable.
        """
        source = parse_version(from_version)
        target = parse_version(to_version)
        owner = (slug or "").strip() or source.slug or target.slug
        if not owner:
            raise InvalidSchemaVersionError("slug required")
        for version, raw in ((source, from_version), (target, to_version)):
            if version.slug and version.slug != owner:
                raise InvalidSchemaVersionError(
                    f"slug mismatch (expected {owner!r})", raw
                )
        return self._migrator.register(owner, str(source), str(target), transform)

    def migrate(
        self,
        slug: str,
        from_version: str,
        to_version: str,
        payload: Payload,
    ) -> Payload:
        """Run the registered chain between two versions of ``slug``."""
        source = str(parse_version(from_version))
        target = str(parse_version(to_version))
        return self._migrator.migrate(slug.strip(), source, target, payload)

    def migrate_payload(
        self,
        slug: str,
        payload: Mapping[str, Any],
        target_version: str,
    ) -> Payload:
        """Upgrade a stored payload to ``target_version``.

        The payload's embedded version is removed before the transforms run
        and the target version is stamped on the result.  A payload without
        an embedded version is assumed to be at the target already.
        """
        target = str(parse_version(target_version))
        current = payload_version(payload, self._version_key)
        body = strip_payload_version(payload, self._version_key)
        if current:
            source = str(parse_version(current))
            if source != target:
                body = self._migrator.migrate(slug.strip(), source, target, body)
        else:
            logger.debug("Payload for %s has no embedded version; stamping %s", slug, target)
        return stamp_payload_version(body, target, self._version_key)

    def has_path(self, slug: str, from_version: str, to_version: str) -> bool:
        return self._migrator.has_path(
            slug.strip(),
            str(parse_version(from_version)),
            str(parse_version(to_version)),
        )
