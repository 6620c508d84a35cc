import json
import logging
from typing import Any

from .exceptions import EncodingError, MalformedInputError
from .record import ExtensibleRecord

logger = logging.getLogger(__name__)


def json_default(obj: Any) -> Any:
    """
    Fallback for json.dumps that serializes records and objects exposing __json__.

    Example:
        json.dumps({"header": record}, default=json_default)
    """
    if isinstance(obj, ExtensibleRecord):
        return obj.to_object()
    if hasattr(obj, "__json__"):
        return obj.__json__()
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def dumps(record: ExtensibleRecord, config=None, **kwargs) -> str:
    """
    Serialize a record as a single flat JSON object.

    Args:
        record: The record to serialize.
        config: Naming configuration passed to to_object.
        **kwargs: Passed through to json.dumps.

    Raises:
        EncodingError: If the merged object cannot be written as JSON.
    """
    merged = record.to_object(config)
    try:
        return json.dumps(merged, **kwargs)
    except (TypeError, ValueError) as e:
        raise EncodingError(f"Cannot write record as JSON: {e}") from e


def loads(text: str | bytes, schema: type, config=None) -> ExtensibleRecord:
    """
    Parse a JSON object and split it into a record of the given schema.

    Raises:
        MalformedInputError: If the text is not valid JSON or not an object.
    """
    try:
        flat = json.loads(text)
    except ValueError as e:
        raise MalformedInputError(f"Invalid JSON: {e}") from e
    return ExtensibleRecord.from_object(flat, schema, config)
