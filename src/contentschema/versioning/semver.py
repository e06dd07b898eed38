"""
Schema version identifiers.

A schema revision is identified as ``<slug>@v<major>.<minor>.<patch>``,
e.g. ``article@v1.2.0``.  A version without a slug formats as the bare
semver (``v1.2.0``).

Usage::

    from contentschema.types import ChangeLevel
    from contentschema.versioning import bump_version, parse_version

    version = parse_version("article@1.2.0")      # leading "v" is optional
    str(bump_version(version, ChangeLevel.MINOR))  # "article@v1.3.0"
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from contentschema.errors import InvalidSchemaVersionError
from contentschema.types import ChangeLevel

_SEMVER_RE = re.compile(r"^v([0-9]+)\.([0-9]+)\.([0-9]+)$")

INITIAL_SEMVER = "v1.0.0"


@dataclass(frozen=True)
class Version:
    """Immutable schema version: owning slug plus canonical ``vX.Y.Z`` semver."""

    slug: str = ""
    semver: str = ""

    @classmethod
    def from_parts(cls, slug: str, major: int, minor: int, patch: int) -> "Version":
        if min(major, minor, patch) < 0:
            raise InvalidSchemaVersionError(
                "version components must be non-negative",
                f"{major}.{minor}.{patch}",
            )
        return cls(slug=slug.strip(), semver=f"v{major}.{minor}.{patch}")

    @property
    def parts(self) -> tuple[int, int, int]:
        """``(major, minor, patch)``; raises if the semver is malformed."""
        match = _SEMVER_RE.match(self.semver.strip())
        if match is None:
            raise InvalidSchemaVersionError("malformed semver", self.semver)
        major, minor, patch = (int(group) for group in match.groups())
        return major, minor, patch

    @property
    def major(self) -> int:
        return self.parts[0]

    @property
    def minor(self) -> int:
        return self.parts[1]

    @property
    def patch(self) -> int:
        return self.parts[2]

    def __str__(self) -> str:
        return format_version(self)


def parse_version(value: str) -> Version:
    """Parse a ``slug@vMAJOR.MINOR.PATCH`` string.

    Both halves must be non-empty; a missing leading ``v`` on the semver is
    tolerated and added.

    Raises:
        InvalidSchemaVersionError: For any other shape.
    """
    if not isinstance(value, str) or not value.strip():
        raise InvalidSchemaVersionError("empty", value if isinstance(value, str) else None)
    parts = value.strip().split("@")
    if len(parts) != 2:
        raise InvalidSchemaVersionError("expected slug@vX.Y.Z", value)
    slug, semver = parts[0].strip(), parts[1].strip()
    if not slug or not semver:
        raise InvalidSchemaVersionError("expected slug@vX.Y.Z", value)
    if not semver.startswith("v"):
        semver = "v" + semver
    if _SEMVER_RE.match(semver) is None:
        raise InvalidSchemaVersionError("malformed semver", value)
    return Version(slug=slug, semver=semver)


def format_version(version: Version) -> str:
    """Canonical ``slug@vX.Y.Z``, or the bare semver when there is no slug."""
    slug = version.slug.strip()
    semver = version.semver.strip()
    if not slug:
        return semver
    return f"{slug}@{semver}"


def default_version(slug: str) -> Version:
    """Initial version for a slug: ``slug@v1.0.0``."""
    return Version(slug=slug.strip(), semver=INITIAL_SEMVER)


def bump_version(base: Version, level: ChangeLevel) -> Version:
    """Increment ``base`` according to ``level``.

    ``MAJOR`` resets minor and patch, ``MINOR`` resets patch, ``NONE``
    returns ``base`` unchanged.

    Raises:
        InvalidSchemaVersionError: If ``base`` has no valid semver.
    """
    if not base.semver.strip():
        raise InvalidSchemaVersionError("missing semver", str(base))
    major, minor, patch = base.parts
    if level == ChangeLevel.MAJOR:
        return Version.from_parts(base.slug, major + 1, 0, 0)
    if level == ChangeLevel.MINOR:
        return Version.from_parts(base.slug, major, minor + 1, 0)
    if level == ChangeLevel.PATCH:
        return Version.from_parts(base.slug, major, minor, patch + 1)
    return base
