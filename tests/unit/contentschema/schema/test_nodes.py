"""Tests for the tagged-union schema node parser."""

from __future__ import annotations

import pytest

from contentschema.schema.nodes import (
    AllOfNode,
    ArrayNode,
    ConstNode,
    EnumNode,
    MixedTypeNode,
    ObjectNode,
    OneOfNode,
    ScalarNode,
    UnknownNode,
    parse_node,
    read_type_list,
)


class TestReadTypeList:
    def test_string(self):
        assert read_type_list(" String ") == ["string"]

    def test_list_sorted_and_filtered(self):
        assert read_type_list(["Null", " string", "", 3]) == ["null", "string"]

    @pytest.mark.parametrize("value", [None, "", "  ", 5, {}])
    def test_empty(self, value):
        assert read_type_list(value) == []


class TestParseNode:
    def test_none(self):
        assert parse_node(None) == UnknownNode()

    def test_scalar(self):
        assert parse_node({"type": ["integer", "null"]}) == ScalarNode(
            types=frozenset({"integer", "null"})
        )

    def test_mixed_type(self):
        assert parse_node({"type": ["string", "object"]}) == MixedTypeNode(
            types=("object", "string")
        )

    def test_array_with_items(self):
        node = parse_node({"type": "array", "items": {"type": "string"}})
        assert node == ArrayNode(items=ScalarNode(types=frozenset({"string"})))

    def test_array_without_items(self):
        assert parse_node({"type": "array"}) == ArrayNode(items=None)

    def test_object(self):
        node = parse_node({"type": "object", "properties": {"b": {}, "a": {}}})
        assert node == ObjectNode(properties=("a", "b"))

    def test_type_takes_precedence_over_const(self):
        assert isinstance(parse_node({"type": "string", "const": 1}), ScalarNode)

    def test_const(self):
        assert parse_node({"const": True}) == ConstNode(kind="boolean")

    def test_blank_const_falls_through_to_enum(self):
        node = parse_node({"const": "  ", "enum": [1, "a"]})
        assert node == EnumNode(kinds=frozenset({"number", "string"}))

    def test_enum_without_classifiable_values(self):
        assert parse_node({"enum": ["", " "]}) == UnknownNode()

    def test_properties_without_type(self):
        assert parse_node({"properties": {"a": {}}}) == ObjectNode(properties=("a",))

    def test_non_string_property_names(self):
        node = parse_node({"type": "object", "properties": {2024: {}, "b": {}}})
        assert node == ObjectNode(properties=("2024", "b"))

    def test_empty_properties_is_not_object(self):
        assert parse_node({"properties": {}}) == UnknownNode()

    def test_items_without_type(self):
        assert parse_node({"items": {}}) == ArrayNode(items=UnknownNode())

    def test_one_of(self):
        node = parse_node({"oneOf": [{"type": "string"}, "junk", {"const": 1}]})
        assert node == OneOfNode(
            branches=(ScalarNode(types=frozenset({"string"})), ConstNode(kind="number"))
        )

    def test_all_of(self):
        assert parse_node({"allOf": [{"properties": {}}]}) == AllOfNode(
            branches=(UnknownNode(),)
        )

    def test_empty_all_of_is_unknown(self):
        assert parse_node({"allOf": []}) == UnknownNode()

    def test_unconstrained(self):
        assert parse_node({"title": "Anything"}) == UnknownNode()
