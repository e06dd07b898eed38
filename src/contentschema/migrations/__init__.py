"""
Payload migrations between schema versions.

Public API::

    from contentschema.migrations import (
        Migrator,
        MigrationStep,
        MigrationRegistry,
        payload_version,
        stamp_payload_version,
        strip_payload_version,
    )
"""

from contentschema.migrations.migrator import MigrationStep, Migrator
from contentschema.migrations.payload import (
    payload_version,
    stamp_payload_version,
    strip_payload_version,
)
from contentschema.migrations.registry import MigrationRegistry

__all__ = [
    "MigrationRegistry",
    "MigrationStep",
    "Migrator",
    "payload_version",
    "stamp_payload_version",
    "strip_payload_version",
]
