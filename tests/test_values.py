import pytest
from dataclasses import dataclass
from enum import Enum
from typing import Any, Literal, Optional, Union

from extensible import (
    DEFAULT_CONFIG,
    EncodingError,
    ExtensibleRecord,
    FieldTypeMismatchError,
    SchemaDefinitionError,
)
from extensible.values import decode_value, encode_value


class Color(Enum):
    RED = "red"
    BLUE = "blue"


@dataclass
class Point:
    x: int
    y: int = 0


@dataclass
class Labelled:
    label: str
    point: Point


class Serializable:
    def __json__(self) -> dict:
        return {"serialized": True}


def decode(value, annotation):
    return decode_value(value, annotation, DEFAULT_CONFIG, "$.field")


class TestDecodeScalars:
    def test_any_passes_through(self):
        value = {"nested": [1, 2]}
        assert decode(value, Any) is value
        assert decode(value, object) is value

    def test_str(self):
        assert decode("hello", str) == "hello"
        with pytest.raises(FieldTypeMismatchError):
            decode(1, str)

    def test_bool_is_not_int(self):
        assert decode(True, bool) is True
        with pytest.raises(FieldTypeMismatchError):
            decode(1, bool)
        with pytest.raises(FieldTypeMismatchError):
            decode(True, int)

    def test_int(self):
        assert decode(5, int) == 5
        with pytest.raises(FieldTypeMismatchError):
            decode(5.5, int)
        with pytest.raises(FieldTypeMismatchError):
            decode("5", int)

    def test_float_widens_int(self):
        value = decode(2, float)
        assert value == 2.0
        assert isinstance(value, float)
        with pytest.raises(FieldTypeMismatchError):
            decode("2.0", float)

    def test_none(self):
        assert decode(None, type(None)) is None
        with pytest.raises(FieldTypeMismatchError):
            decode(0, type(None))


class TestDecodeCompound:
    def test_optional(self):
        assert decode(None, Optional[int]) is None
        assert decode(None, int | None) is None
        assert decode(3, int | None) == 3
        with pytest.raises(FieldTypeMismatchError):
            decode("3", int | None)

    def test_union_picks_first_match(self):
        assert decode("a", Union[int, str]) == "a"
        assert decode(1, Union[int, str]) == 1
        with pytest.raises(FieldTypeMismatchError):
            decode([], Union[int, str])

    def test_literal(self):
        assert decode("a", Literal["a", "b"]) == "a"
        with pytest.raises(FieldTypeMismatchError):
            decode("c", Literal["a", "b"])
        with pytest.raises(FieldTypeMismatchError):
            decode(True, Literal[1])

    def test_enum_by_value(self):
        assert decode("red", Color) is Color.RED
        assert decode(Color.BLUE, Color) is Color.BLUE
        with pytest.raises(FieldTypeMismatchError):
            decode("green", Color)

    def test_list(self):
        assert decode([1, 2], list[int]) == [1, 2]
        assert decode([1, "a"], list) == [1, "a"]
        with pytest.raises(FieldTypeMismatchError) as exc_info:
            decode([1, "a"], list[int])
        assert exc_info.value.path == "$.field[1]"
        with pytest.raises(FieldTypeMismatchError):
            decode({"a": 1}, list[int])

    def test_tuple(self):
        assert decode([1, 2, 3], tuple[int, ...]) == (1, 2, 3)
        assert decode([1, "a"], tuple[int, str]) == (1, "a")
        with pytest.raises(FieldTypeMismatchError):
            decode([1], tuple[int, str])

    def test_dict(self):
        assert decode({"a": 1}, dict[str, int]) == {"a": 1}
        assert decode({"a": [1]}, dict) == {"a": [1]}
        with pytest.raises(FieldTypeMismatchError) as exc_info:
            decode({"a": "x"}, dict[str, int])
        assert exc_info.value.path == "$.field.a"

    def test_nested_dataclass_ignores_unknown_fields(self):
        value = decode({"label": "p", "point": {"x": 1, "z": 9}, "w": 0}, Labelled)
        assert value == Labelled(label="p", point=Point(x=1))

    def test_nested_dataclass_mismatch(self):
        with pytest.raises(FieldTypeMismatchError) as exc_info:
            decode({"label": "p", "point": {"x": "1"}}, Labelled)
        assert exc_info.value.path == "$.field.point.x"

    def test_nested_record(self):
        value = decode({"x": 1, "z": 9}, ExtensibleRecord[Point])
        assert value == ExtensibleRecord(Point(x=1), {"z": 9})

    def test_record_without_schema(self):
        with pytest.raises(SchemaDefinitionError):
            decode({"x": 1}, ExtensibleRecord)


class TestEncode:
    def test_scalars_pass_through(self):
        for value in ("a", 1, 1.5, True, None):
            assert encode_value(value, DEFAULT_CONFIG) == value

    def test_enum(self):
        assert encode_value(Color.RED, DEFAULT_CONFIG) == "red"

    def test_dataclass(self):
        value = Labelled(label="p", point=Point(x=1, y=2))
        assert encode_value(value, DEFAULT_CONFIG) == {
            "label": "p",
            "point": {"x": 1, "y": 2},
        }

    def test_json_method(self):
        assert encode_value([Serializable()], DEFAULT_CONFIG) == [{"serialized": True}]

    def test_record(self):
        record = ExtensibleRecord(Point(x=1), {"z": 2})
        assert encode_value({"p": record}, DEFAULT_CONFIG) == {
            "p": {"x": 1, "y": 0, "z": 2}
        }

    def test_tuple_becomes_list(self):
        assert encode_value((1, (2, 3)), DEFAULT_CONFIG) == [1, [2, 3]]

    def test_non_string_key(self):
        with pytest.raises(EncodingError):
            encode_value({1: "a"}, DEFAULT_CONFIG)

    def test_unsupported_value(self):
        with pytest.raises(EncodingError) as exc_info:
            encode_value({"a": [object()]}, DEFAULT_CONFIG)
        assert "$.a[0]" in str(exc_info.value)
