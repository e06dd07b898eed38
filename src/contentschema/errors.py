"""
Exception types raised by the schema engine.

Every failure is surfaced to the caller as one of these types; the engine
does not retry or swallow errors.  Callers decide recoverability (for
example, an operator may explicitly override a breaking schema update,
while a missing migration step on read should block serving the record).

Hierarchy::

    SchemaError
    ├── InvalidSchemaVersionError      (also ValueError)
    ├── UnsupportedKeywordError        (also ValueError)
    ├── SchemaCompatibilityBreakingError
    └── MigrationError
        ├── MigrationRegistrationError (also ValueError)
        ├── MigrationStepMissingError
        ├── MigrationCycleError
        └── MigrationStepFailedError
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from contentschema.compat.models import CompatibilityResult


class SchemaError(Exception):
    """Base class for all schema engine errors."""


class InvalidSchemaVersionError(SchemaError, ValueError):
    """Malformed ``slug@vX.Y.Z`` string, slug mismatch, or unbumpable version."""

    def __init__(self, detail: str = "", value: Optional[str] = None) -> None:
        self.detail = detail
        self.value = value
        message = "invalid schema version"
        if detail:
            message = f"{message}: {detail}"
        if value is not None:
            message = f"{message} ({value!r})"
        super().__init__(message)


class UnsupportedKeywordError(SchemaError, ValueError):
    """A schema uses a keyword outside the supported subset.

    Attributes:
        keyword: The offending keyword.
        path: Dotted path of the node holding the keyword (empty for root).
        reason: Optional extra detail (e.g. why a supported keyword's value
            was rejected).
    """

    def __init__(self, keyword: str, path: str = "", reason: str = "") -> None:
        self.keyword = keyword
        self.path = path
        self.reason = reason
        location = path or "<root>"
        message = f"unsupported schema keyword '{keyword}' at {location}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class SchemaCompatibilityBreakingError(SchemaError):
    """Raised by the update gate when a schema change is breaking.

    The message lists every breaking change as ``type:field``.
    """

    def __init__(self, result: "CompatibilityResult") -> None:
        self.result = result
        parts = []
        for change in result.breaking_changes:
            field = change.field.strip()
            if field:
                parts.append(f"{change.type.value}:{field}")
            else:
                parts.append(change.type.value)
        message = "schema compatibility breaking"
        if parts:
            message = f"{message}: {', '.join(parts)}"
        super().__init__(message)


# ---------------------------------------------------------------------------
# Migrations
# ---------------------------------------------------------------------------


class MigrationError(SchemaError):
    """Base class for migration failures.

    A failed migration never leaves a partially migrated payload behind:
    each hop works on a copy of the previous hop's output.
    """


class MigrationRegistrationError(MigrationError, ValueError):
    """A migration step was registered with missing or invalid arguments."""


class MigrationStepMissingError(MigrationError):
    """No step is registered for the payload's current version."""

    def __init__(self, slug: str, version: str, target: str) -> None:
        self.slug = slug
        self.version = version
        self.target = target
        super().__init__(
            f"migration step missing for '{slug}' at {version} "
            f"(target {target})"
        )


class MigrationCycleError(MigrationError):
    """The registered steps loop back to an already visited version."""

    def __init__(self, slug: str, version: str, visited: list[str]) -> None:
        self.slug = slug
        self.version = version
        self.visited = list(visited)
        chain = " -> ".join(self.visited + [version])
        super().__init__(f"migration cycle detected for '{slug}': {chain}")


class MigrationStepFailedError(MigrationError):
    """A registered transform raised while migrating a payload."""

    def __init__(self, slug: str, from_version: str, to_version: str) -> None:
        self.slug = slug
        self.from_version = from_version
        self.to_version = to_version
        super().__init__(
            f"migration step {from_version} -> {to_version} failed for '{slug}'"
        )
