"""
contentschema - Schema versioning and evolution for content types and blocks.

Every schema revision carries its own ``slug@vX.Y.Z`` version inside its
``metadata`` block.  When a schema is updated the engine compares the old
and new revisions, classifies the change (none / patch / minor / major),
rejects breaking changes unless overridden, bumps the version accordingly,
and upgrades stored payloads through registered per-slug migration steps.

Key Features:
- Two schema dialects (native schema tree and legacy field list)
- Field-level compatibility analysis with deterministic breaking-change lists
- Keyword subset validation for externally supplied schemas
- Copy-on-write migration registry, safe for concurrent readers

Example usage:
    from contentschema import SchemaUpdateGate, MigrationRegistry

    plan = SchemaUpdateGate().plan("article", new_schema, previous_schema=old_schema)
    plan.version                  # e.g. "article@v1.3.0"

    registry = MigrationRegistry()
    registry.register("article", "article@v1.0.0", "article@v2.0.0", upgrade)
    registry.migrate_payload("article", stored_payload, plan.version)
"""

__version__ = "0.1.0"
__all__ = [
    "ChangeLevel",
    "CompatibilityAnalyzer",
    "CompatibilityResult",
    "MigrationRegistry",
    "Migrator",
    "SchemaUpdateGate",
    "Version",
    "bump_version",
    "check_schema_compatibility",
    "ensure_schema_version",
    "normalize_content_schema",
    "normalize_schema",
    "parse_version",
    "validate_schema_subset",
    "__version__",
]

_LAZY_EXPORTS = {
    "ChangeLevel": "contentschema.types",
    "CompatibilityAnalyzer": "contentschema.compat",
    "CompatibilityResult": "contentschema.compat",
    "MigrationRegistry": "contentschema.migrations",
    "Migrator": "contentschema.migrations",
    "SchemaUpdateGate": "contentschema.compat",
    "Version": "contentschema.versioning",
    "bump_version": "contentschema.versioning",
    "check_schema_compatibility": "contentschema.compat",
    "ensure_schema_version": "contentschema.versioning",
    "normalize_content_schema": "contentschema.schema.content",
    "normalize_schema": "contentschema.schema",
    "parse_version": "contentschema.versioning",
    "validate_schema_subset": "contentschema.schema",
}


# Lazy imports keep ``import contentschema`` (and the CLI's version lookup) cheap
def __getattr__(name: str):
    module_name = _LAZY_EXPORTS.get(name)
    if module_name is None:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    import importlib

    return getattr(importlib.import_module(module_name), name)
