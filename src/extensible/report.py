"""
Diagnostics for splitting and merging records.

Shows where each field of a merged object comes from, and which keys change
over one split/merge cycle.
"""

import json
import logging
from collections.abc import Mapping
from typing import Any

from tabulate import tabulate
from termcolor import colored

from .config import DEFAULT_CONFIG
from .constants import JSON_INDENT_DEFAULT
from .record import ExtensibleRecord

logger = logging.getLogger(__name__)

ORIGIN_STATIC = "static"
ORIGIN_EXTRA = "extra"
ORIGIN_SHADOWED = "shadowed"

ORIGIN_COLORS = {
    ORIGIN_STATIC: "light_green",
    ORIGIN_EXTRA: "light_yellow",
    ORIGIN_SHADOWED: "light_red",
}


def describe_fields(
    record: ExtensibleRecord, config=None
) -> list[tuple[str, str, Any]]:
    """
    List every field of a record together with the component it comes from.

    Returns:
        Rows of (name, origin, value). Origin is 'static' for merged schema
        fields, 'extra' for merged extra fields and 'shadowed' for extra
        fields that a static field overrides.
    """
    config = config or DEFAULT_CONFIG
    merged = record.to_object(config)
    shadowed = record.shadowed_keys(config)

    rows = []
    for name, value in merged.items():
        if name in record.extra and name not in shadowed:
            origin = ORIGIN_EXTRA
        else:
            origin = ORIGIN_STATIC
        rows.append((name, origin, value))
    for name in sorted(shadowed):
        rows.append((name, ORIGIN_SHADOWED, record.extra[name]))
    return rows


def format_record_table(record: ExtensibleRecord, config=None) -> str:
    """
    Build a table showing the origin and value of each field of a record.
    """
    headers = [colored(h, "blue", attrs=["bold"]) for h in ("Field", "Origin", "Value")]
    table_data = [
        [
            colored(name, None, attrs=["bold"]),
            colored(origin, ORIGIN_COLORS[origin]),
            json.dumps(value, default=str),
        ]
        for name, origin, value in describe_fields(record, config)
    ]
    return tabulate(table_data, headers=headers, tablefmt="fancy_grid") + "\n"


def roundtrip_differences(
    flat: Mapping[str, Any], schema: type, config=None
) -> dict[str, dict[str, Any]]:
    """
    Split and merge a flat object once and report every key that does not survive.

    Args:
        flat: A decoded field-keyed object.
        schema: The static schema type to split against.
        config: The RecordConfig in effect.

    Returns:
        A mapping of key to {'status', 'expected', 'actual'}, where status is
        'missing', 'added' or 'changed'. Empty when the cycle is lossless.
    """
    record = ExtensibleRecord.from_object(flat, schema, config)
    merged = record.to_object(config)

    differences = {}
    for key in list(flat) + [k for k in merged if k not in flat]:
        if key not in merged:
            differences[key] = {
                "status": "missing",
                "expected": flat[key],
                "actual": None,
            }
        elif key not in flat:
            differences[key] = {
                "status": "added",
                "expected": None,
                "actual": merged[key],
            }
        elif merged[key] != flat[key]:
            differences[key] = {
                "status": "changed",
                "expected": flat[key],
                "actual": merged[key],
            }

    if differences:
        logger.info(
            "Round trip of %s changed %d key(s): %s",
            schema.__name__,
            len(differences),
            ", ".join(differences),
        )
    return differences


def format_differences_json(differences: dict[str, dict[str, Any]]) -> str:
    """
    Build a JSON string reporting round-trip differences.
    """
    return json.dumps(differences, indent=JSON_INDENT_DEFAULT, default=str)
