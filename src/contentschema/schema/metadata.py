"""
Codec for the ``metadata`` block embedded in a schema tree.

A schema carries its own ownership and version information under the
reserved ``metadata`` key, so the version travels with the document
rather than living in a side table::

    {
        "type": "object",
        "properties": {...},
        "metadata": {
            "slug": "article",
            "schema_version": "article@v1.2.0",
            "ui_overlays": ["overlays/article.json"],
            "block_availability": {"allow": ["hero"], "deny": ["legacy"]},
        },
    }

Reading is lenient (unknown shapes are ignored); writing only ever adds or
replaces non-empty fields and never deletes existing keys.

Usage::

    from contentschema.schema.metadata import apply_metadata, extract_metadata

    meta = extract_metadata(schema)
    meta.slug = "article"
    schema = apply_metadata(schema, meta)
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from contentschema._tree import as_mapping, clone_tree

METADATA_KEY = "metadata"
SLUG_KEY = "slug"
SCHEMA_VERSION_KEY = "schema_version"
UI_OVERLAYS_KEY = "ui_overlays"
BLOCK_AVAILABILITY_KEY = "block_availability"
MIGRATION_STATUS_KEY = "migration_status"

# Vendor blocks that may carry an explicit migration status besides metadata
_STATUS_CARRIERS = (METADATA_KEY, "x-cms", "x-admin")


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------


class BlockAvailability(BaseModel):
    """Allow/deny rules for the block types a schema may embed.

    An empty ``allow`` list means every block type not denied is allowed.
    """

    model_config = ConfigDict(extra="forbid")

    allow: list[str] = Field(default_factory=list)
    deny: list[str] = Field(default_factory=list)

    def is_empty(self) -> bool:
        return not self.allow and not self.deny

    def allows(self, value: str) -> bool:
        """Whether the block type ``value`` may be embedded."""
        candidate = _normalize_token(value)
        if not candidate:
            return False
        if any(_normalize_token(entry) == candidate for entry in self.deny):
            return False
        if not self.allow:
            return True
        return any(_normalize_token(entry) == candidate for entry in self.allow)


class Metadata(BaseModel):
    """Schema-level metadata persisted alongside the schema document."""

    model_config = ConfigDict(extra="forbid")

    slug: str = ""
    schema_version: str = ""
    ui_overlays: list[str] = Field(default_factory=list)
    block_availability: BlockAvailability = Field(default_factory=BlockAvailability)


# ---------------------------------------------------------------------------
# Codec
# ---------------------------------------------------------------------------


def extract_metadata(schema: Optional[Mapping[str, Any]]) -> Metadata:
    """Read the schema's metadata block; absent or malformed yields empty metadata."""
    meta = Metadata()
    if not schema:
        return meta
    raw = as_mapping(schema.get(METADATA_KEY))
    if raw is None:
        return meta
    slug = raw.get(SLUG_KEY)
    if isinstance(slug, str):
        meta.slug = slug.strip()
    version = raw.get(SCHEMA_VERSION_KEY)
    if isinstance(version, str):
        meta.schema_version = version.strip()
    meta.ui_overlays = _read_string_list(raw.get(UI_OVERLAYS_KEY))
    meta.block_availability = _read_block_availability(raw.get(BLOCK_AVAILABILITY_KEY))
    return meta


def apply_metadata(schema: Optional[Mapping[str, Any]], meta: Metadata) -> Optional[dict[str, Any]]:
    """Return a copy of ``schema`` with the non-empty fields of ``meta`` merged in."""
    if schema is None:
        return None
    out = clone_tree(dict(schema))
    target = as_mapping(out.get(METADATA_KEY))
    target = dict(target) if target is not None else {}

    if meta.slug.strip():
        target[SLUG_KEY] = meta.slug.strip()
    if meta.schema_version.strip():
        target[SCHEMA_VERSION_KEY] = meta.schema_version.strip()
    if meta.ui_overlays:
        target[UI_OVERLAYS_KEY] = list(meta.ui_overlays)
    availability = meta.block_availability
    if not availability.is_empty():
        encoded: dict[str, list[str]] = {}
        if availability.allow:
            encoded["allow"] = list(availability.allow)
        if availability.deny:
            encoded["deny"] = list(availability.deny)
        target[BLOCK_AVAILABILITY_KEY] = encoded

    out[METADATA_KEY] = target
    return out


def strip_version_metadata(schema: Optional[Mapping[str, Any]]) -> Optional[dict[str, Any]]:
    """Copy of ``schema`` without ``metadata.slug`` / ``metadata.schema_version``.

    The ``metadata`` key itself is dropped when nothing else remains in it.
    """
    if schema is None:
        return None
    clean = clone_tree(dict(schema))
    meta = as_mapping(clean.get(METADATA_KEY))
    if meta is None:
        return clean
    remaining = {
        key: value
        for key, value in meta.items()
        if key not in (SLUG_KEY, SCHEMA_VERSION_KEY)
    }
    if remaining:
        clean[METADATA_KEY] = remaining
    else:
        del clean[METADATA_KEY]
    return clean


def resolve_migration_status(
    schema: Optional[Mapping[str, Any]],
    schema_version: Optional[str],
) -> str:
    """Determine the migration status of a stored schema.

    An explicit ``migration_status`` recorded under ``metadata``, ``x-cms``
    or ``x-admin`` wins.  Otherwise:

    - ``"unversioned"`` when ``schema_version`` is blank
    - ``"mismatch"`` when the schema embeds a different version
    - ``"current"`` otherwise
    """
    explicit = _explicit_migration_status(schema)
    if explicit:
        return explicit
    expected = (schema_version or "").strip()
    if not expected:
        return "unversioned"
    embedded = _embedded_schema_version(schema)
    if embedded and embedded != expected:
        return "mismatch"
    return "current"


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _normalize_token(value: str) -> str:
    return value.strip().lower() if isinstance(value, str) else ""


def _read_string_list(value: Any) -> list[str]:
    """Flatten a list of strings and ``{ref|path: str}`` mappings."""
    if not isinstance(value, (list, tuple)):
        return []
    out: list[str] = []
    for entry in value:
        if isinstance(entry, str):
            if entry.strip():
                out.append(entry.strip())
            continue
        item = as_mapping(entry)
        if item is None:
            continue
        for key in ("ref", "path"):
            ref = item.get(key)
            if isinstance(ref, str) and ref.strip():
                out.append(ref.strip())
    return out


def _normalize_availability_list(values: list[str]) -> list[str]:
    seen: set[str] = set()
    out: list[str] = []
    for value in values:
        trimmed = value.strip()
        key = trimmed.lower()
        if not trimmed or key in seen:
            continue
        seen.add(key)
        out.append(trimmed)
    return out


def _read_block_availability(value: Any) -> BlockAvailability:
    if value is None:
        return BlockAvailability()
    as_list = _read_string_list(value)
    if as_list:
        return BlockAvailability(allow=_normalize_availability_list(as_list))
    raw = as_mapping(value)
    if raw is None:
        return BlockAvailability()
    allow = _read_string_list(raw.get("allow")) or _read_string_list(raw.get("allowed"))
    deny = _read_string_list(raw.get("deny")) or _read_string_list(raw.get("denied"))
    return BlockAvailability(
        allow=_normalize_availability_list(allow),
        deny=_normalize_availability_list(deny),
    )


def _explicit_migration_status(schema: Optional[Mapping[str, Any]]) -> str:
    if not schema:
        return ""
    for carrier in _STATUS_CARRIERS:
        block = as_mapping(schema.get(carrier))
        if block is None:
            continue
        status = block.get(MIGRATION_STATUS_KEY)
        if isinstance(status, str) and status.strip():
            return status.strip()
    return ""


def _embedded_schema_version(schema: Optional[Mapping[str, Any]]) -> str:
    if not schema:
        return ""
    meta = as_mapping(schema.get(METADATA_KEY))
    if meta is not None:
        version = meta.get(SCHEMA_VERSION_KEY)
        if isinstance(version, str):
            return version.strip()
    version = schema.get(SCHEMA_VERSION_KEY)
    if isinstance(version, str):
        return version.strip()
    return ""
