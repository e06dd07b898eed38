"""Tests for type classification and comparison."""

from __future__ import annotations

import pytest

from contentschema.compat.classify import (
    classify_type,
    compare_scalar_sets,
    compare_types,
)
from contentschema.compat.models import TypeDescriptor
from contentschema.types import TypeChange, TypeKind


def _scalar(*types: str) -> TypeDescriptor:
    return TypeDescriptor(kind=TypeKind.SCALAR, scalar_types=frozenset(types))


def _array(item: TypeDescriptor | None = None) -> TypeDescriptor:
    return TypeDescriptor(kind=TypeKind.ARRAY, array_item=item)


def _unknown(signature: str = "") -> TypeDescriptor:
    return TypeDescriptor(kind=TypeKind.UNKNOWN, signature=signature)


OBJECT = TypeDescriptor(kind=TypeKind.OBJECT)


class TestClassifyType:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ({"type": "string"}, _scalar("string")),
            ({"type": [" Integer", "null"]}, _scalar("integer", "null")),
            ({"type": ["array", "null"]}, _unknown("type:array|null")),
            ({"type": "array"}, _array()),
            ({"type": "array", "items": {"type": "string"}}, _array(_scalar("string"))),
            ({"type": "object"}, OBJECT),
            ({"const": "news"}, _scalar("string")),
            ({"const": 3.5}, _scalar("number")),
            ({"const": None}, _scalar("null")),
            ({"const": [1]}, _scalar("array")),
            ({"const": {"a": 1}}, _scalar("object")),
            ({"enum": ["a", 1, True, None]}, _scalar("string", "number", "boolean", "null")),
            ({"properties": {"a": {}}}, OBJECT),
            ({"items": {"type": "string"}}, _array(_scalar("string"))),
            ({"oneOf": [{"type": "string"}, {"const": 1}]}, _scalar("string", "number")),
            ({"oneOf": [{"type": "string"}, {"type": "object"}]}, _unknown("oneOf")),
            ({"oneOf": []}, _unknown("oneOf")),
            ({"allOf": [{"properties": {}}]}, _unknown("allOf")),
            ({}, _unknown()),
            (None, _unknown()),
        ],
    )
    def test_classification(self, raw, expected):
        assert classify_type(raw) == expected


class TestCompareScalarSets:
    @pytest.mark.parametrize(
        "old, new, expected",
        [
            (set(), set(), TypeChange.NONE),
            ({"string"}, set(), TypeChange.BREAKING),
            (set(), {"string"}, TypeChange.BREAKING),
            ({"string"}, {"string"}, TypeChange.NONE),
            ({"string"}, {"string", "null"}, TypeChange.MINOR),
            ({"string", "null"}, {"string"}, TypeChange.BREAKING),
            ({"integer"}, {"number"}, TypeChange.BREAKING),
        ],
    )
    def test_rules(self, old, new, expected):
        assert compare_scalar_sets(frozenset(old), frozenset(new)) == expected


class TestCompareTypes:
    def test_kind_mismatch_is_breaking(self):
        assert compare_types(_scalar("string"), OBJECT) == TypeChange.BREAKING
        assert compare_types(_array(), _scalar("string")) == TypeChange.BREAKING
        assert compare_types(_unknown(), _scalar("string")) == TypeChange.BREAKING

    def test_objects_equal(self):
        assert compare_types(OBJECT, OBJECT) == TypeChange.NONE

    @pytest.mark.parametrize(
        "old, new, expected",
        [
            (_array(), _array(), TypeChange.NONE),
            (_array(), _array(_scalar("string")), TypeChange.BREAKING),
            (_array(_scalar("string")), _array(), TypeChange.MINOR),
            (_array(_scalar("string")), _array(_scalar("string", "null")), TypeChange.MINOR),
            (_array(_array(_scalar("a"))), _array(_array(_scalar("b"))), TypeChange.BREAKING),
        ],
    )
    def test_arrays(self, old, new, expected):
        assert compare_types(old, new) == expected

    @pytest.mark.parametrize(
        "old, new, expected",
        [
            (_unknown(), _unknown(), TypeChange.NONE),
            (_unknown("oneOf"), _unknown("oneOf"), TypeChange.NONE),
            (_unknown("oneOf"), _unknown("allOf"), TypeChange.BREAKING),
            (_unknown(), _unknown("allOf"), TypeChange.BREAKING),
            (_unknown("type:array|null"), _unknown(), TypeChange.BREAKING),
        ],
    )
    def test_unknown_signatures(self, old, new, expected):
        assert compare_types(old, new) == expected


def test_describe():
    assert _scalar("string", "null").describe() == "null|string"
    assert _array(_scalar("string")).describe() == "array<string>"
    assert _array().describe() == "array<any>"
    assert _unknown("oneOf").describe() == "unknown(oneOf)"
    assert _unknown().describe() == "unknown"
    assert OBJECT.describe() == "object"
