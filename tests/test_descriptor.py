"""Tests for the field descriptor parser."""

import pytest
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from jay.descriptor import (
    ArrayType,
    BaseType,
    ObjectType,
    parse_field_descriptor,
)
from jay.errors import InvalidDescriptor


class TestFieldDescriptors:
    @pytest.mark.parametrize("descriptor,java_name", [
        ("B", "byte"),
        ("C", "char"),
        ("D", "double"),
        ("F", "float"),
        ("I", "int"),
        ("J", "long"),
        ("S", "short"),
        ("Z", "boolean"),
        ("Ljava/lang/String;", "java.lang.String"),
        ("LOuter$Inner;", "Outer$Inner"),
        ("[I", "int[]"),
        ("[[Ljava/lang/Object;", "java.lang.Object[][]"),
    ])
    def test_java_name(self, descriptor, java_name):
        assert parse_field_descriptor(descriptor).java_name() == java_name

    def test_structure(self):
        result = parse_field_descriptor("[[Ljava/util/List;")
        assert result == ArrayType(ArrayType(ObjectType("java/util/List")))
        assert result.dimensions == 2

    def test_base_type(self):
        assert parse_field_descriptor("J") == BaseType("J")

    @pytest.mark.parametrize("descriptor", ["I", "[Z", "Ljava/lang/String;", "[[[LFoo;"])
    def test_descriptor_is_preserved(self, descriptor):
        assert parse_field_descriptor(descriptor).descriptor() == descriptor

    @pytest.mark.parametrize("descriptor", [
        "",
        "V",
        "Q",
        "II",
        "[",
        "L;",
        "Ljava/lang/String",
        "Ljava.lang.String;",
        "LFoo;I",
        "()V",
    ])
    def test_invalid(self, descriptor):
        with pytest.raises(InvalidDescriptor):
            parse_field_descriptor(descriptor)

    def test_too_many_dimensions(self):
        with pytest.raises(InvalidDescriptor):
            parse_field_descriptor("[" * 256 + "I")

    def test_invalid_descriptor_is_value_error(self):
        with pytest.raises(ValueError):
            parse_field_descriptor("X")
