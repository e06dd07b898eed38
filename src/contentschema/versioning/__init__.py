"""
Schema version model.

Public API::

    from contentschema.versioning import (
        Version,
        parse_version,
        format_version,
        default_version,
        bump_version,
        ensure_schema_version,
    )
"""

from contentschema.versioning.ensure import ensure_schema_version
from contentschema.versioning.semver import (
    INITIAL_SEMVER,
    Version,
    bump_version,
    default_version,
    format_version,
    parse_version,
)

__all__ = [
    "INITIAL_SEMVER",
    "Version",
    "bump_version",
    "default_version",
    "ensure_schema_version",
    "format_version",
    "parse_version",
]
