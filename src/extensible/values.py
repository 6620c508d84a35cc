"""
Conversion of individual field values between JSON-ready data and declared types.

Decoding never coerces beyond what a JSON codec produces: the only widening
performed is int to float. Encoding projects nested records, dataclasses and
enums back into plain JSON-ready values.
"""

import dataclasses
import logging
import types
from collections.abc import Mapping, Sequence
from enum import Enum
from typing import Any, Literal, Union, get_args, get_origin

from .exceptions import (
    EncodingError,
    FieldTypeMismatchError,
    MalformedInputError,
    MissingFieldError,
    SchemaDefinitionError,
)
from .models.descriptor import describe_schema
from .models.policies import MismatchPolicy

logger = logging.getLogger(__name__)

_NONE_TYPE = type(None)
_JSON_SCALARS = (str, bool, int, float)


def ensure_field_map(flat: Any, path: str) -> Mapping[str, Any]:
    """
    Check that a decoded value is a field-keyed object.

    Raises:
        MalformedInputError: If the value is not a mapping with string keys.
    """
    if not isinstance(flat, Mapping):
        raise MalformedInputError(
            f"Expected an object at '{path}', got {type(flat).__name__}"
        )
    for key in flat:
        if not isinstance(key, str):
            raise MalformedInputError(
                f"Object at '{path}' has a non-string key: {key!r}"
            )
    return flat


def populate_schema(
    flat: Mapping[str, Any], schema: type, config, path: str
) -> tuple[Any, set[str], dict[str, Any], set[str]]:
    """
    Build a schema instance from the recognized fields of a flat object.

    Args:
        flat: The flat field map.
        schema: The static schema type.
        config: The RecordConfig in effect.
        path: Dotted location of the object, for error messages.

    Returns:
        A tuple of (instance, recognized names, retained raw values, present
        names). Retained values are mismatched fields kept under the RETAIN
        policy. Present names are the fields whose input value was written
        into the instance; mismatched fields are not among them.

    Raises:
        FieldTypeMismatchError: If a field does not fit and the policy is FAIL.
        MissingFieldError: If a field without a default ends up unset.
    """
    kwargs: dict[str, Any] = {}
    recognized: set[str] = set()
    retained: dict[str, Any] = {}
    present: set[str] = set()

    for descriptor in describe_schema(schema, config):
        field_path = f"{path}.{descriptor.name}"
        if descriptor.name not in flat:
            if descriptor.required:
                raise MissingFieldError(field_path)
            continue

        recognized.add(descriptor.name)
        raw = flat[descriptor.name]
        try:
            value = decode_value(raw, descriptor.annotation, config, field_path)
        except FieldTypeMismatchError as e:
            if not config.mismatch_policy.tolerant:
                raise
            if descriptor.required:
                raise MissingFieldError(field_path) from e
            if config.mismatch_policy is MismatchPolicy.RETAIN:
                logger.warning("%s; keeping the raw value as an extra field", e)
                retained[descriptor.name] = raw
            else:
                logger.warning("%s; dropping the value", e)
            continue

        descriptor.write(kwargs, value)
        present.add(descriptor.name)

    try:
        instance = schema(**kwargs)
    except TypeError as e:
        raise SchemaDefinitionError(
            f"Cannot construct {schema.__name__} from its fields: {e}"
        ) from e

    return instance, recognized, retained, present


def project_schema(
    instance: Any,
    schema: type,
    config,
    path: str = "$",
    present: frozenset[str] | None = None,
) -> dict:
    """
    Project a schema instance into a flat map keyed by external field names.

    Args:
        instance: The schema instance.
        schema: The static schema type.
        config: The RecordConfig in effect.
        path: Dotted location of the object, for error messages.
        present: Names of the fields the instance was decoded from, or None
            when it was built directly.
    """
    projected = {}
    for descriptor in describe_schema(schema, config):
        value = descriptor.read(instance)
        if not emits_field(descriptor, value, config, present):
            continue
        projected[descriptor.name] = encode_value(
            value, config, f"{path}.{descriptor.name}"
        )
    return projected


def emits_field(
    descriptor, value: Any, config, present: frozenset[str] | None
) -> bool:
    """
    Decide whether a static field appears in the merged object.

    Without presence information, every field is emitted except None values
    under config.omit_none. A decoded instance emits the fields it was decoded
    from, including nulls, and any other field the caller has since changed
    away from its default.
    """
    if present is None:
        return not (value is None and config.omit_none)
    if descriptor.name in present:
        return True
    default = descriptor.default_value()
    if default is dataclasses.MISSING:
        return value is not None
    return value != default


def encode_value(value: Any, config, path: str = "$") -> Any:
    """
    Convert a value into plain JSON-ready data.

    Raises:
        EncodingError: If the value has no JSON representation.
    """
    if value is None or isinstance(value, _JSON_SCALARS):
        return value
    if getattr(value, "__extensible_record__", False):
        return value.to_object(config)
    if isinstance(value, Enum):
        return encode_value(value.value, config, path)
    if hasattr(value, "__json__"):
        return value.__json__()
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return project_schema(value, type(value), config, path)
    if isinstance(value, Mapping):
        encoded = {}
        for key, item in value.items():
            if not isinstance(key, str):
                raise EncodingError(f"Non-string key {key!r} at '{path}'")
            encoded[key] = encode_value(item, config, f"{path}.{key}")
        return encoded
    if isinstance(value, (list, tuple)):
        return [
            encode_value(item, config, f"{path}[{index}]")
            for index, item in enumerate(value)
        ]
    raise EncodingError(
        f"Value at '{path}' of type {type(value).__name__} cannot be encoded"
    )


def decode_value(value: Any, annotation: Any, config, path: str) -> Any:
    """
    Check a raw value against a declared type and build the typed value.

    Raises:
        FieldTypeMismatchError: If the value does not fit the annotation.
    """
    if annotation is Any or annotation is object:
        return value
    if annotation is None or annotation is _NONE_TYPE:
        if value is None:
            return None
        raise FieldTypeMismatchError(path, value, annotation)

    origin = get_origin(annotation)
    args = get_args(annotation)

    if origin is Union or origin is types.UnionType:
        return _decode_union(value, annotation, args, config, path)
    if origin is Literal:
        for allowed in args:
            if value == allowed and type(value) is type(allowed):
                return value
        raise FieldTypeMismatchError(path, value, annotation)

    target = origin or annotation
    if getattr(target, "__extensible_record__", False):
        return _decode_record(value, annotation, target, args, config, path)

    if origin is None and isinstance(annotation, type) and issubclass(annotation, Enum):
        if isinstance(value, annotation):
            return value
        try:
            return annotation(value)
        except ValueError:
            raise FieldTypeMismatchError(path, value, annotation) from None

    if annotation is bool:
        if isinstance(value, bool):
            return value
        raise FieldTypeMismatchError(path, value, annotation)
    if annotation is int:
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        raise FieldTypeMismatchError(path, value, annotation)
    if annotation is float:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return float(value)
        raise FieldTypeMismatchError(path, value, annotation)
    if annotation is str:
        if isinstance(value, str):
            return value
        raise FieldTypeMismatchError(path, value, annotation)

    if target in (list, Sequence):
        if not isinstance(value, (list, tuple)):
            raise FieldTypeMismatchError(path, value, annotation)
        item_type = args[0] if args else Any
        return [
            decode_value(item, item_type, config, f"{path}[{index}]")
            for index, item in enumerate(value)
        ]
    if target is tuple:
        return _decode_tuple(value, annotation, args, config, path)
    if target in (dict, Mapping):
        if not isinstance(value, Mapping) or not all(isinstance(k, str) for k in value):
            raise FieldTypeMismatchError(path, value, annotation)
        item_type = args[1] if len(args) == 2 else Any
        return {
            key: decode_value(item, item_type, config, f"{path}.{key}")
            for key, item in value.items()
        }

    if origin is None and dataclasses.is_dataclass(annotation):
        if not isinstance(value, Mapping):
            raise FieldTypeMismatchError(path, value, annotation)
        instance, recognized, _, _ = populate_schema(value, annotation, config, path)
        ignored = [key for key in value if key not in recognized]
        if ignored:
            logger.debug(
                "Ignoring unknown fields of %s at '%s': %s",
                annotation.__name__,
                path,
                ", ".join(ignored),
            )
        return instance

    if origin is None and isinstance(annotation, type):
        if isinstance(value, annotation):
            return value
        raise FieldTypeMismatchError(path, value, annotation)

    raise SchemaDefinitionError(f"Unsupported field type {annotation!r} at '{path}'")


def _decode_union(value, annotation, members, config, path):
    # None first so Optional fields never try to decode null into the inner type
    if value is None and _NONE_TYPE in members:
        return None
    for member in members:
        if member is _NONE_TYPE:
            continue
        try:
            return decode_value(value, member, config, path)
        except (FieldTypeMismatchError, MissingFieldError):
            continue
    raise FieldTypeMismatchError(path, value, annotation)


def _decode_record(value, annotation, record_type, args, config, path):
    if not args:
        raise SchemaDefinitionError(
            f"Record field at '{path}' must name its schema, "
            f"e.g. {record_type.__name__}[Schema]"
        )
    if not isinstance(value, Mapping):
        raise FieldTypeMismatchError(path, value, annotation)
    try:
        return record_type.from_object(value, args[0], config, path=path)
    except MalformedInputError as e:
        raise FieldTypeMismatchError(path, value, annotation) from e


def _decode_tuple(value, annotation, args, config, path):
    if not isinstance(value, (list, tuple)):
        raise FieldTypeMismatchError(path, value, annotation)
    if not args:
        return tuple(value)
    if len(args) == 2 and args[1] is Ellipsis:
        return tuple(
            decode_value(item, args[0], config, f"{path}[{index}]")
            for index, item in enumerate(value)
        )
    if len(args) != len(value):
        raise FieldTypeMismatchError(path, value, annotation)
    return tuple(
        decode_value(item, item_type, config, f"{path}[{index}]")
        for index, (item, item_type) in enumerate(zip(value, args))
    )
