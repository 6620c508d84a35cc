import json

from dataclasses import dataclass

from extensible import (
    ExtensibleRecord,
    FieldDescriptor,
    MismatchPolicy,
    RecordConfig,
    aliased,
)
from extensible.report import (
    describe_fields,
    format_differences_json,
    format_record_table,
    roundtrip_differences,
)


@dataclass
class Header:
    operation_id: str = aliased("operationId")
    optional: str | None = None


@dataclass
class Counter:
    name: str
    count: int = 0


def test_describe_fields():
    record = ExtensibleRecord(
        Header(operation_id="op-1"),
        {"operationId": "stale", "hello": "world", "optional": "from-extra"},
    )

    rows = describe_fields(record)
    assert rows == [
        ("operationId", "static", "op-1"),
        ("hello", "extra", "world"),
        ("optional", "extra", "from-extra"),
        ("operationId", "shadowed", "stale"),
    ]


def test_format_record_table():
    record = ExtensibleRecord(Header("op-1"), {"operationId": "stale", "n": [1, 2]})

    table = format_record_table(record)
    assert "operationId" in table
    assert '"op-1"' in table
    assert '"stale"' in table
    assert "shadowed" in table
    assert "[1, 2]" in table
    assert table.endswith("\n")


def test_roundtrip_differences_lossless():
    flat = {"operationId": "op-1", "optional": "x", "hello": {"a": [1]}}
    assert roundtrip_differences(flat, Header) == {}


def test_roundtrip_differences_dropped_field():
    config = RecordConfig(mismatch_policy=MismatchPolicy.DROP)
    flat = {"operationId": "op-1", "optional": 5}

    differences = roundtrip_differences(flat, Header, config)
    assert differences == {
        "optional": {"status": "missing", "expected": 5, "actual": None}
    }


def test_roundtrip_differences_defaults_not_added():
    assert roundtrip_differences({"name": "a"}, Counter) == {}


def test_roundtrip_differences_added_value():
    class Zone:
        def __init__(self, kind: str = "dns#managedZone"):
            self.kind = kind

    # the descriptor does not know the constructor default
    config = RecordConfig(descriptors={Zone: (FieldDescriptor("kind", "kind", str),)})
    differences = roundtrip_differences({"ttl": 300}, Zone, config)
    assert differences == {
        "kind": {"status": "added", "expected": None, "actual": "dns#managedZone"}
    }


def test_roundtrip_differences_changed_value():
    @dataclass
    class Point:
        x: int
        y: int = 0

    @dataclass
    class Labelled:
        point: Point

    # unknown keys of a nested plain dataclass are not kept
    differences = roundtrip_differences({"point": {"x": 1, "z": 2}}, Labelled)
    assert differences == {
        "point": {
            "status": "changed",
            "expected": {"x": 1, "z": 2},
            "actual": {"x": 1, "y": 0},
        }
    }


def test_format_differences_json():
    differences = {"count": {"status": "added", "expected": None, "actual": 0}}
    assert json.loads(format_differences_json(differences)) == differences
