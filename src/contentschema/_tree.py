"""
Helpers for the JSON-compatible trees (mappings, lists, scalars) the engine
operates on.  Caller trees are never mutated.
"""

from __future__ import annotations

import copy
import json
from collections.abc import Mapping
from typing import Any, Optional


def clone_tree(value: Any) -> Any:
    """Deep copy a schema or payload tree."""
    return copy.deepcopy(value)


def as_mapping(value: Any) -> Optional[dict[str, Any]]:
    """Return ``value`` if it is a mapping node, else ``None``."""
    if isinstance(value, Mapping):
        return value  # type: ignore[return-value]
    return None


def merge_tree(
    dest: Optional[Mapping[str, Any]],
    overlay: Optional[Mapping[str, Any]],
    override: bool = False,
) -> dict[str, Any]:
    """Merge ``overlay`` into a copy of ``dest``.

    Nested mappings are merged recursively.  When ``override`` is false,
    keys already present in ``dest`` keep their value.
    """
    out: dict[str, Any] = clone_tree(dict(dest)) if dest else {}
    if not overlay:
        return out
    for key, value in overlay.items():
        if key in out and not override:
            existing = out[key]
            if isinstance(existing, Mapping) and isinstance(value, Mapping):
                out[key] = merge_tree(existing, value, override)
            continue
        out[key] = clone_tree(value)
    return out


def json_kind(value: Any) -> str:
    """Return the JSON kind of a literal, or ``""`` when not classifiable.

    Blank strings are not classifiable.  ``bool`` is checked before numbers
    since it is an ``int`` subclass.
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string" if value.strip() else ""
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, Mapping):
        return "object"
    return ""


def trees_equal(left: Any, right: Any) -> bool:
    """Structural equality that keeps booleans apart from numbers.

    ``True == 1`` holds in Python but not in JSON, so a boolean leaf only
    equals another boolean.
    """
    if isinstance(left, bool) or isinstance(right, bool):
        return type(left) is type(right) and left == right
    if isinstance(left, Mapping) and isinstance(right, Mapping):
        if left.keys() != right.keys():
            return False
        return all(trees_equal(left[key], right[key]) for key in left)
    if isinstance(left, (list, tuple)) and isinstance(right, (list, tuple)):
        if len(left) != len(right):
            return False
        return all(trees_equal(a, b) for a, b in zip(left, right))
    return left == right


def stringify_keys(value: Any) -> Any:
    """Return a copy of ``value`` with every mapping key converted to ``str``.

    YAML reads keys such as ``2024:`` or ``true:`` as scalars; JSON object
    keys are always strings. Scalars are spelled the way JSON writes them.
    """
    if isinstance(value, Mapping):
        return {_key_text(key): stringify_keys(child) for key, child in value.items()}
    if isinstance(value, (list, tuple)):
        return [stringify_keys(child) for child in value]
    return value


def _key_text(key: Any) -> str:
    if isinstance(key, str):
        return key
    if key is None or isinstance(key, (bool, int, float)):
        return json.dumps(key)
    return str(key)
