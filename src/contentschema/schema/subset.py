"""
Schema subset validator.

Schemas accepted from external sources must stay within a small keyword
vocabulary so every renderer consuming them understands the same shapes.
Keys prefixed ``x-`` are vendor extensions and are always accepted without
further inspection.

``allOf`` is deliberately narrow: each branch is a "bag of extra object
constraints" and may only use ``properties``, ``required``,
``additionalProperties``, ``title``, ``description`` (plus ``x-`` keys and a
``type`` equal to ``"object"``).

Usage::

    from contentschema.schema.subset import validate_schema_subset

    validate_schema_subset(schema)   # raises UnsupportedKeywordError
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional

from contentschema.errors import UnsupportedKeywordError

EXTENSION_PREFIX = "x-"

ALLOWED_KEYWORDS = frozenset(
    {
        "$schema",
        "$id",
        "$ref",
        "$defs",
        "$anchor",
        "metadata",
        "ui",
        "type",
        "properties",
        "required",
        "items",
        "oneOf",
        "allOf",
        "const",
        "enum",
        "default",
        "title",
        "description",
        "format",
        "additionalProperties",
    }
)

ALLOF_KEYWORDS = frozenset(
    {"properties", "required", "additionalProperties", "title", "description"}
)

# Keywords whose contents are opaque to the validator
_OPAQUE_KEYWORDS = frozenset({"metadata", "ui"})


def validate_schema_subset(schema: Optional[Mapping[str, Any]]) -> None:
    """Reject schemas using keywords outside the supported subset.

    Args:
        schema: A normalized schema tree.  ``None`` is accepted.

    Raises:
        UnsupportedKeywordError: On the first offending keyword, naming
            the keyword and its dotted path.
    """
    if schema is None:
        return
    _validate_node(schema, "")


def is_extension_key(key: Any) -> bool:
    return isinstance(key, str) and key.startswith(EXTENSION_PREFIX)


def _join(*parts: str) -> str:
    return ".".join(part for part in parts if part)


def _validate_node(node: Mapping[str, Any], path: str) -> None:
    for key in sorted(node, key=str):
        if is_extension_key(key):
            continue
        if key not in ALLOWED_KEYWORDS:
            raise UnsupportedKeywordError(key, path)
        if key in _OPAQUE_KEYWORDS:
            continue

        value = node[key]
        if key == "properties":
            _validate_schema_map(value, key, path)
        elif key == "$defs":
            _validate_schema_map(value, key, path)
        elif key == "items":
            if not isinstance(value, Mapping):
                raise UnsupportedKeywordError(
                    key, path, "items must be a single schema object"
                )
            _validate_node(value, _join(path, "items"))
        elif key == "oneOf":
            for index, entry in _schema_list(value, key, path):
                _validate_node(entry, _join(path, "oneOf", str(index)))
        elif key == "allOf":
            for index, entry in _schema_list(value, key, path):
                _validate_allof_entry(entry, _join(path, "allOf", str(index)))
        elif key == "additionalProperties" and isinstance(value, Mapping):
            _validate_node(value, _join(path, "additionalProperties"))


def _validate_schema_map(value: Any, keyword: str, path: str) -> None:
    if not isinstance(value, Mapping):
        raise UnsupportedKeywordError(keyword, path, f"{keyword} must be an object")
    for name in sorted(value, key=str):
        child = value[name]
        child_path = _join(path, keyword, str(name))
        if not isinstance(child, Mapping):
            raise UnsupportedKeywordError(
                keyword, child_path, "entry must be a schema object"
            )
        _validate_node(child, child_path)


def _schema_list(value: Any, keyword: str, path: str) -> list[tuple[int, Mapping[str, Any]]]:
    if not isinstance(value, (list, tuple)):
        raise UnsupportedKeywordError(keyword, path, f"{keyword} must be an array")
    entries: list[tuple[int, Mapping[str, Any]]] = []
    for index, entry in enumerate(value):
        if not isinstance(entry, Mapping):
            raise UnsupportedKeywordError(
                keyword, _join(path, keyword, str(index)), "entry must be a schema object"
            )
        entries.append((index, entry))
    return entries


def _validate_allof_entry(entry: Mapping[str, Any], path: str) -> None:
    for key in sorted(entry, key=str):
        if is_extension_key(key) or key in ALLOF_KEYWORDS:
            continue
        if key == "type":
            if entry[key] != "object":
                raise UnsupportedKeywordError(
                    key, path, "allOf branches may only constrain objects"
                )
            continue
        raise UnsupportedKeywordError(key, path, "not supported inside allOf")
    _validate_node(entry, path)
