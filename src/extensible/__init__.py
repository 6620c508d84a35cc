__version__ = "0.1.0"

from .config import (
    DEFAULT_CONFIG,
    RecordConfig,
    to_camel,
    to_kebab,
    to_pascal,
    to_snake,
)
from .exceptions import (
    DecodeError,
    EncodingError,
    ExtensibleRecordError,
    FieldTypeMismatchError,
    MalformedInputError,
    MissingFieldError,
    SchemaDefinitionError,
)
from .models import FieldDescriptor, MismatchPolicy, aliased, describe_schema
from .record import ExtensibleRecord
from .codec import dumps, json_default, loads

__all__ = [
    "DEFAULT_CONFIG",
    "DecodeError",
    "EncodingError",
    "ExtensibleRecord",
    "ExtensibleRecordError",
    "FieldDescriptor",
    "FieldTypeMismatchError",
    "MalformedInputError",
    "MismatchPolicy",
    "MissingFieldError",
    "RecordConfig",
    "SchemaDefinitionError",
    "aliased",
    "describe_schema",
    "dumps",
    "json_default",
    "loads",
    "to_camel",
    "to_kebab",
    "to_pascal",
    "to_snake",
]
