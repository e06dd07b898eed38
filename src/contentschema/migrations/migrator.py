"""
Per-slug payload migration runner.

A ``Migrator`` holds a table ``slug -> from_version -> MigrationStep`` and
upgrades a payload by following the single registered step for each
version until the target is reached.  There is no route search: each
version has at most one outgoing step per slug, and re-registering the
same ``(slug, from_version)`` replaces the previous step.

Thread safety: the step table is an immutable snapshot replaced under a
lock on each registration.  ``migrate`` reads one snapshot, so concurrent
migrations never observe a partially applied registration.

Usage::

    from contentschema.migrations.migrator import Migrator

    migrator = Migrator()
    migrator.register("article", "article@v1.0.0", "article@v2.0.0", upgrade_v1)
    upgraded = migrator.migrate("article", "article@v1.0.0", "article@v2.0.0", payload)
"""

from __future__ import annotations

import copy
import logging
import threading
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from contentschema.errors import (
    MigrationCycleError,
    MigrationRegistrationError,
    MigrationStepFailedError,
    MigrationStepMissingError,
)
from contentschema.migrations.otel import emit_migration_applied

logger = logging.getLogger(__name__)

Payload = dict[str, Any]
Transform = Callable[[Payload], Payload]


@dataclass(frozen=True)
class MigrationStep:
    """One migration hop: ``from_version -> to_version`` via ``apply``."""

    from_version: str
    to_version: str
    apply: Transform


_StepTable = Mapping[str, Mapping[str, MigrationStep]]


class Migrator:
    """Registry and runner of per-slug migration steps."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._steps: _StepTable = MappingProxyType({})

    def register(
        self,
        slug: str,
        from_version: str,
        to_version: str,
        transform: Transform,
    ) -> MigrationStep:
        """Register the step upgrading ``slug`` payloads from one version to the next.

        Raises:
            MigrationRegistrationError: A blank argument or a non-callable
                transform.
        """
        for name, value in (
            ("slug", slug),
            ("from_version", from_version),
            ("to_version", to_version),
        ):
            if not isinstance(value, str) or not value.strip():
                raise MigrationRegistrationError(f"migration {name} required")
        if not callable(transform):
            raise MigrationRegistrationError("migration transform must be callable")

        step = MigrationStep(
            from_version=from_version, to_version=to_version, apply=transform
        )
        with self._lock:
            table = {key: dict(value) for key, value in self._steps.items()}
            table.setdefault(slug, {})[from_version] = step
            self._steps = MappingProxyType(
                {key: MappingProxyType(value) for key, value in table.items()}
            )
        logger.debug(
            "Registered migration for %s: %s -> %s", slug, from_version, to_version
        )
        return step

    def steps(self, slug: str) -> list[MigrationStep]:
        """Registered steps for ``slug``, ordered by ``from_version``."""
        by_version = self._steps.get(slug, {})
        return [by_version[key] for key in sorted(by_version)]

    def has_path(self, slug: str, from_version: str, to_version: str) -> bool:
        """Whether a step chain leads from ``from_version`` to ``to_version``.

        Transforms are not run.
        """
        if from_version == to_version:
            return True
        by_version = self._steps.get(slug, {})
        seen: set[str] = set()
        current = from_version
        while current != to_version:
            if current in seen or current not in by_version:
                return False
            seen.add(current)
            current = by_version[current].to_version
        return True

    def migrate(
        self,
        slug: str,
        from_version: str,
        to_version: str,
        payload: Payload,
    ) -> Payload:
        """Upgrade ``payload`` from ``from_version`` to ``to_version``.

        The caller's payload is never mutated.  When the versions are equal
        the payload is returned as is.

        Raises:
            MigrationCycleError: The chain revisits a version.
            MigrationStepMissingError: No step is registered for a version
                on the way.
            MigrationStepFailedError: A transform raised; the original
                exception is chained.
        """
        if from_version == to_version:
            return payload

        by_version = self._steps.get(slug, {})
        visited: list[str] = []
        current = from_version
        out = copy.deepcopy(payload)
        while current != to_version:
            if current in visited:
                raise MigrationCycleError(slug, current, visited)
            visited.append(current)
            step = by_version.get(current)
            if step is None:
                raise MigrationStepMissingError(slug, current, to_version)
            try:
                result = step.apply(out)
            except Exception as exc:
                raise MigrationStepFailedError(
                    slug, step.from_version, step.to_version
                ) from exc
            out = copy.deepcopy(result)
            current = step.to_version

        logger.debug(
            "Migrated %s payload %s -> %s in %d steps",
            slug,
            from_version,
            to_version,
            len(visited),
        )
        emit_migration_applied(slug, from_version, to_version, len(visited))
        return out
