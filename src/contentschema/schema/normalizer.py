"""
Schema dialect normalization.

Two input dialects are accepted and turned into one schema-tree shape so
the compatibility analyzer compares them identically:

1. **Native schema tree** - anything carrying ``type``, ``properties``,
   ``oneOf``, ``anyOf``, ``allOf`` or ``$schema``; passed through as a copy.
2. **Legacy field list** - ``{"fields": [{name, type?, schema?, required?}, ...]}``,
   converted into an ``object`` schema with ``additionalProperties: false``.

Usage::

    from contentschema.schema.normalizer import normalize_schema

    normalize_schema({"fields": [{"name": "title", "type": "string", "required": True}]})
    # {"type": "object", "properties": {"title": {"type": "string"}},
    #  "additionalProperties": False, "required": ["title"]}
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional

from contentschema._tree import as_mapping, clone_tree, merge_tree
from contentschema.schema.metadata import METADATA_KEY

SCHEMA_TREE_MARKERS = ("type", "properties", "oneOf", "anyOf", "allOf", "$schema")

JSON_TYPES = frozenset(
    {"string", "number", "integer", "boolean", "object", "array", "null"}
)

UI_KEY = "ui"
FORMGEN_KEY = "x-formgen"


def is_schema_tree(schema: Mapping[str, Any]) -> bool:
    """Whether ``schema`` is already in the native schema-tree dialect."""
    return any(marker in schema for marker in SCHEMA_TREE_MARKERS)


def normalize_schema(schema: Optional[Mapping[str, Any]]) -> dict[str, Any]:
    """Return a schema tree for either input dialect.

    The input is never mutated.  ``None`` normalizes to an empty schema.
    Normalizing twice yields the same result as normalizing once.
    """
    if schema is None:
        return {}
    if is_schema_tree(schema) or "fields" not in schema:
        return clone_tree(dict(schema))

    properties, required = _normalize_fields(schema.get("fields"))
    normalized: dict[str, Any] = {
        "type": "object",
        "properties": properties,
        "additionalProperties": False,
    }
    if required:
        normalized["required"] = required
    override = schema.get("additionalProperties")
    if isinstance(override, bool):
        normalized["additionalProperties"] = override
    if METADATA_KEY in schema:
        normalized[METADATA_KEY] = clone_tree(schema[METADATA_KEY])
    return normalized


def normalize_ui_metadata(schema: Optional[Mapping[str, Any]]) -> Optional[dict[str, Any]]:
    """Fold inline ``ui`` hints into ``x-formgen`` on every schema node.

    Keys already present in ``x-formgen`` win over ``ui``; nested mappings
    are merged.  Returns a new tree.
    """
    if schema is None:
        return None
    out = clone_tree(dict(schema))
    _normalize_ui_node(out)
    return out


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _normalize_fields(fields: Any) -> tuple[dict[str, Any], list[str]]:
    properties: dict[str, Any] = {}
    required: list[str] = []
    if not isinstance(fields, (list, tuple)):
        return properties, required
    for entry in fields:
        if isinstance(entry, str):
            entry = {"name": entry}
        field = as_mapping(entry)
        if field is None:
            continue
        _add_field(properties, required, field)
    return properties, required


def _add_field(
    properties: dict[str, Any],
    required: list[str],
    field: Mapping[str, Any],
) -> None:
    name = field.get("name")
    if not isinstance(name, str) or not name.strip():
        return
    name = name.strip()

    explicit = as_mapping(field.get("schema"))
    field_type = field.get("type")
    if explicit is not None:
        properties[name] = clone_tree(dict(explicit))
    elif isinstance(field_type, str) and field_type.strip().lower() in JSON_TYPES:
        properties[name] = {"type": field_type.strip().lower()}
    else:
        properties[name] = {}

    if field.get("required") is True:
        required.append(name)


def _normalize_ui_node(node: dict[str, Any]) -> None:
    ui = as_mapping(node.get(UI_KEY))
    if ui is not None:
        node[FORMGEN_KEY] = merge_tree(as_mapping(node.get(FORMGEN_KEY)), ui)
        del node[UI_KEY]

    for child in _child_nodes(node):
        _normalize_ui_node(child)


def _child_nodes(node: dict[str, Any]) -> list[dict[str, Any]]:
    children: list[dict[str, Any]] = []
    for key in ("properties", "$defs"):
        container = as_mapping(node.get(key))
        if container is not None:
            children.extend(v for v in container.values() if isinstance(v, dict))
    items = node.get("items")
    if isinstance(items, dict):
        children.append(items)
    for key in ("oneOf", "allOf"):
        entries = node.get(key)
        if isinstance(entries, list):
            children.extend(v for v in entries if isinstance(v, dict))
    return children
