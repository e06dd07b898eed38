"""
Coarse type classification of schema nodes.

``classify_type`` maps a raw schema node onto a ``TypeDescriptor`` via the
``SchemaNode`` tagged union; ``compare_types`` decides how a change between
two descriptors affects existing payloads.

``integer`` and ``number`` are distinct scalar tokens: widening
``integer`` to ``[integer, number]`` is minor, swapping one for the other
is breaking.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional

from contentschema.compat.models import TypeDescriptor
from contentschema.schema.nodes import (
    AllOfNode,
    ArrayNode,
    ConstNode,
    EnumNode,
    MixedTypeNode,
    ObjectNode,
    OneOfNode,
    ScalarNode,
    SchemaNode,
    parse_node,
)
from contentschema.types import TypeChange, TypeKind

ONE_OF_SIGNATURE = "oneOf"
ALL_OF_SIGNATURE = "allOf"

UNKNOWN = TypeDescriptor(kind=TypeKind.UNKNOWN)


def classify_type(raw: Optional[Mapping[str, Any]]) -> TypeDescriptor:
    """Classify a raw schema node."""
    return describe_node(parse_node(raw))


def describe_node(node: SchemaNode) -> TypeDescriptor:
    if isinstance(node, ScalarNode):
        return _scalar(node.types)
    if isinstance(node, MixedTypeNode):
        return TypeDescriptor(
            kind=TypeKind.UNKNOWN, signature="type:" + "|".join(node.types)
        )
    if isinstance(node, ArrayNode):
        item = describe_node(node.items) if node.items is not None else None
        return TypeDescriptor(kind=TypeKind.ARRAY, array_item=item)
    if isinstance(node, ObjectNode):
        return TypeDescriptor(kind=TypeKind.OBJECT)
    if isinstance(node, ConstNode):
        return _scalar({node.kind})
    if isinstance(node, EnumNode):
        return _scalar(node.kinds)
    if isinstance(node, OneOfNode):
        return _describe_one_of(node)
    if isinstance(node, AllOfNode):
        return TypeDescriptor(kind=TypeKind.UNKNOWN, signature=ALL_OF_SIGNATURE)
    return UNKNOWN


def _scalar(types) -> TypeDescriptor:
    return TypeDescriptor(kind=TypeKind.SCALAR, scalar_types=frozenset(types))


def _describe_one_of(node: OneOfNode) -> TypeDescriptor:
    union: set[str] = set()
    for branch in node.branches:
        described = describe_node(branch)
        if described.kind != TypeKind.SCALAR:
            return TypeDescriptor(kind=TypeKind.UNKNOWN, signature=ONE_OF_SIGNATURE)
        union.update(described.scalar_types)
    if not union:
        return TypeDescriptor(kind=TypeKind.UNKNOWN, signature=ONE_OF_SIGNATURE)
    return _scalar(union)


# ---------------------------------------------------------------------------
# Comparison
# ---------------------------------------------------------------------------


def compare_types(old: TypeDescriptor, new: TypeDescriptor) -> TypeChange:
    """Classify the effect of changing a field's type from ``old`` to ``new``.

    Returns:
        ``TypeChange.NONE`` when every old payload still validates and the
        accepted set is unchanged, ``MINOR`` when the new type strictly
        widens the old one, ``BREAKING`` otherwise.
    """
    if old.kind != new.kind:
        return TypeChange.BREAKING

    if old.kind == TypeKind.SCALAR:
        return compare_scalar_sets(old.scalar_types, new.scalar_types)

    if old.kind == TypeKind.ARRAY:
        if old.array_item is None and new.array_item is None:
            return TypeChange.NONE
        if old.array_item is None:
            return TypeChange.BREAKING
        if new.array_item is None:
            return TypeChange.MINOR
        return compare_types(old.array_item, new.array_item)

    if old.kind == TypeKind.OBJECT:
        # Nested properties are compared by their own paths.
        return TypeChange.NONE

    if old.signature == new.signature:
        return TypeChange.NONE
    return TypeChange.BREAKING


def compare_scalar_sets(old: frozenset[str], new: frozenset[str]) -> TypeChange:
    if not old and not new:
        return TypeChange.NONE
    if not old or not new:
        return TypeChange.BREAKING
    if new >= old:
        return TypeChange.NONE if len(new) == len(old) else TypeChange.MINOR
    return TypeChange.BREAKING
