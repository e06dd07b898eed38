"""
Schema document handling: dialect normalization, metadata codec, subset
validation and the tagged-union node view used for type classification.

Public API::

    from contentschema.schema import (
        # Normalizer
        normalize_schema,
        normalize_ui_metadata,
        is_schema_tree,
        # Metadata
        Metadata,
        BlockAvailability,
        extract_metadata,
        apply_metadata,
        strip_version_metadata,
        resolve_migration_status,
        # Subset validator
        validate_schema_subset,
        ALLOWED_KEYWORDS,
        # Nodes
        parse_node,
    )

The content pipeline lives in ``contentschema.schema.content`` and is not
re-exported here.
"""

from contentschema.schema.metadata import (
    BlockAvailability,
    Metadata,
    apply_metadata,
    extract_metadata,
    resolve_migration_status,
    strip_version_metadata,
)
from contentschema.schema.nodes import SchemaNode, parse_node
from contentschema.schema.normalizer import (
    is_schema_tree,
    normalize_schema,
    normalize_ui_metadata,
)
from contentschema.schema.subset import (
    ALLOF_KEYWORDS,
    ALLOWED_KEYWORDS,
    validate_schema_subset,
)

__all__ = [
    # Normalizer
    "is_schema_tree",
    "normalize_schema",
    "normalize_ui_metadata",
    # Metadata
    "BlockAvailability",
    "Metadata",
    "apply_metadata",
    "extract_metadata",
    "resolve_migration_status",
    "strip_version_metadata",
    # Subset
    "ALLOF_KEYWORDS",
    "ALLOWED_KEYWORDS",
    "validate_schema_subset",
    # Nodes
    "SchemaNode",
    "parse_node",
]
