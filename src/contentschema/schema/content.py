"""
Content schema normalization pipeline.

Prepares a schema accepted from an external source for storage and
delivery:

1. normalize the dialect (legacy field list or native tree)
2. ensure ``metadata.schema_version`` (defaulting to ``slug@v1.0.0``)
3. optionally reject keywords outside the supported subset
4. fold inline ``ui`` hints into ``x-formgen``

UI overlay documents referenced from ``metadata.ui_overlays`` are left for
downstream consumers to fetch and merge.

Usage::

    from contentschema.schema.content import normalize_content_schema

    normalized = normalize_content_schema(raw_schema, slug="article")
    normalized.version              # "article@v1.0.0"
    normalized.schema_tree["metadata"]
    normalized.metadata.ui_overlays
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from contentschema.config import get_config
from contentschema.schema.metadata import Metadata, extract_metadata
from contentschema.schema.normalizer import normalize_schema, normalize_ui_metadata
from contentschema.schema.subset import validate_schema_subset
from contentschema.versioning.ensure import ensure_schema_version

logger = logging.getLogger(__name__)


class NormalizedSchema(BaseModel):
    """A normalized schema bundled with its metadata and canonical version."""

    model_config = ConfigDict(extra="forbid")

    schema_tree: dict[str, Any]
    metadata: Metadata = Field(default_factory=Metadata)
    version: str = Field(..., min_length=1)


def normalize_content_schema(
    schema: Optional[Mapping[str, Any]],
    slug: Optional[str] = None,
    fail_on_unsupported: Optional[bool] = None,
) -> NormalizedSchema:
    """Normalize a content-type or block schema for storage and delivery.

    Args:
        schema: Raw schema in either dialect (not mutated).
        slug: Owning slug, used when the schema metadata carries none.
        fail_on_unsupported: Run the subset validator; defaults to
            ``config.fail_on_unsupported``.

    Returns:
        ``NormalizedSchema`` with the prepared tree, its metadata and version.

    Raises:
        ValueError: ``schema`` is ``None``.
        InvalidSchemaVersionError: The schema version cannot be established.
        UnsupportedKeywordError: A keyword outside the subset is used.
    """
    if schema is None:
        raise ValueError("content schema required")
    if fail_on_unsupported is None:
        fail_on_unsupported = get_config().fail_on_unsupported

    working = normalize_schema(schema)
    meta = extract_metadata(working)
    effective_slug = meta.slug or (slug or "").strip()

    working, version = ensure_schema_version(working, effective_slug)

    if fail_on_unsupported:
        validate_schema_subset(working)

    working = normalize_ui_metadata(working) or {}
    logger.debug("Normalized content schema %s", version)

    return NormalizedSchema(
        schema_tree=working,
        metadata=extract_metadata(working),
        version=str(version),
    )
