"""
Guarantee that a schema document carries a valid ``metadata.schema_version``.

Usage::

    from contentschema.versioning import ensure_schema_version

    schema, version = ensure_schema_version({}, "article")
    schema["metadata"]["schema_version"]   # "article@v1.0.0"
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Optional

from contentschema.errors import InvalidSchemaVersionError
from contentschema.schema.metadata import apply_metadata, extract_metadata
from contentschema.versioning.semver import Version, default_version, parse_version

logger = logging.getLogger(__name__)


def ensure_schema_version(
    schema: Optional[Mapping[str, Any]],
    slug: Optional[str] = None,
) -> tuple[dict[str, Any], Version]:
    """Return a copy of ``schema`` whose metadata holds a canonical version.

    - An existing ``schema_version`` is parsed and rewritten in canonical
      form; it must belong to ``slug`` when one is given.
    - Otherwise the default ``slug@v1.0.0`` is assigned.
    - A missing ``metadata.slug`` is filled in from ``slug``.

    Args:
        schema: Schema tree (not mutated).
        slug: Owning content-type / block slug.

    Returns:
        ``(schema_with_metadata, version)``

    Raises:
        InvalidSchemaVersionError: ``schema`` is ``None``, the embedded
            version is malformed, belongs to another slug, or no slug is
            known at all.
    """
    if schema is None:
        raise InvalidSchemaVersionError("schema required")
    meta = extract_metadata(schema)
    normalized_slug = (slug or "").strip()
    if not meta.slug and normalized_slug:
        meta.slug = normalized_slug

    if meta.schema_version:
        version = parse_version(meta.schema_version)
        if normalized_slug and version.slug != normalized_slug:
            raise InvalidSchemaVersionError(
                f"slug mismatch (expected {normalized_slug!r})", meta.schema_version
            )
        meta.schema_version = str(version)
        return apply_metadata(schema, meta), version

    if not normalized_slug:
        raise InvalidSchemaVersionError("slug required")
    version = default_version(normalized_slug)
    meta.schema_version = str(version)
    logger.debug("Assigned initial schema version %s", version)
    return apply_metadata(schema, meta), version
