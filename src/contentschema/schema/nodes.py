"""
Tagged-union view of a schema node.

``parse_node`` reads one raw schema mapping and returns exactly one variant,
chosen by a fixed precedence:

1. ``type`` (``MixedTypeNode`` / ``ArrayNode`` / ``ObjectNode`` / ``ScalarNode``)
2. ``const``  -> ``ConstNode``
3. ``enum``   -> ``EnumNode``
4. non-empty ``properties`` -> ``ObjectNode``
5. ``items``  -> ``ArrayNode``
6. ``oneOf``  -> ``OneOfNode``
7. non-empty ``allOf`` -> ``AllOfNode``
8. anything else -> ``UnknownNode``

Only the shape needed for type classification is captured; nested field
detail is handled by the analyzer's path walk over the raw tree.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Optional, Union

from contentschema._tree import as_mapping, json_kind


@dataclass(frozen=True)
class ObjectNode:
    properties: tuple[str, ...] = ()


@dataclass(frozen=True)
class ArrayNode:
    items: Optional["SchemaNode"] = None


@dataclass(frozen=True)
class ScalarNode:
    types: frozenset[str]


@dataclass(frozen=True)
class MixedTypeNode:
    """A ``type`` list mixing ``object``/``array`` with other types."""

    types: tuple[str, ...]


@dataclass(frozen=True)
class ConstNode:
    kind: str


@dataclass(frozen=True)
class EnumNode:
    kinds: frozenset[str]


@dataclass(frozen=True)
class OneOfNode:
    branches: tuple["SchemaNode", ...]


@dataclass(frozen=True)
class AllOfNode:
    branches: tuple["SchemaNode", ...]


@dataclass(frozen=True)
class UnknownNode:
    pass


SchemaNode = Union[
    ObjectNode,
    ArrayNode,
    ScalarNode,
    MixedTypeNode,
    ConstNode,
    EnumNode,
    OneOfNode,
    AllOfNode,
    UnknownNode,
]


def read_type_list(value: Any) -> list[str]:
    """Read a ``type`` keyword as a trimmed, lowercased, sorted list."""
    if isinstance(value, str):
        trimmed = value.strip().lower()
        return [trimmed] if trimmed else []
    if isinstance(value, (list, tuple)):
        return sorted(
            entry.strip().lower()
            for entry in value
            if isinstance(entry, str) and entry.strip()
        )
    return []


def parse_node(raw: Optional[Mapping[str, Any]]) -> SchemaNode:
    """Classify a raw schema mapping into one ``SchemaNode`` variant."""
    if raw is None:
        return UnknownNode()

    types = read_type_list(raw.get("type"))
    if types:
        return _node_from_types(raw, types)

    if "const" in raw:
        kind = json_kind(raw["const"])
        if kind:
            return ConstNode(kind=kind)

    enum = raw.get("enum")
    if isinstance(enum, (list, tuple)):
        kinds = frozenset(k for k in (json_kind(v) for v in enum) if k)
        if kinds:
            return EnumNode(kinds=kinds)

    properties = as_mapping(raw.get("properties"))
    if properties:
        return ObjectNode(properties=tuple(sorted(str(name) for name in properties)))

    items = as_mapping(raw.get("items"))
    if items is not None:
        return ArrayNode(items=parse_node(items))

    one_of = raw.get("oneOf")
    if isinstance(one_of, (list, tuple)):
        return OneOfNode(branches=_parse_branches(one_of))

    all_of = raw.get("allOf")
    if isinstance(all_of, (list, tuple)) and all_of:
        return AllOfNode(branches=_parse_branches(all_of))

    return UnknownNode()


def _node_from_types(raw: Mapping[str, Any], types: list[str]) -> SchemaNode:
    composite = "object" in types or "array" in types
    if not composite:
        return ScalarNode(types=frozenset(types))
    if len(types) > 1:
        return MixedTypeNode(types=tuple(types))
    if types[0] == "array":
        items = as_mapping(raw.get("items"))
        return ArrayNode(items=parse_node(items) if items is not None else None)
    properties = as_mapping(raw.get("properties")) or {}
    return ObjectNode(properties=tuple(sorted(str(name) for name in properties)))


def _parse_branches(entries: Any) -> tuple[SchemaNode, ...]:
    return tuple(
        parse_node(entry) for entry in entries if isinstance(entry, Mapping)
    )
