import dataclasses
import logging
from dataclasses import dataclass
from typing import Any, get_type_hints

from ..constants import FIELD_ALIAS_METADATA_KEY
from ..exceptions import SchemaDefinitionError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FieldDescriptor:
    """
    A single named field of a static schema.

    Attributes:
        attribute: Python attribute (and constructor keyword) holding the value.
        name: External name of the field in the flat object.
        annotation: Declared type the raw value is decoded against.
        required: Whether the schema constructor needs this field.
        default: Value the constructor uses when the field is not passed,
            or dataclasses.MISSING when unknown.
        default_factory: Zero-argument callable producing that value, or
            dataclasses.MISSING.
    """

    attribute: str
    name: str
    annotation: Any = Any
    required: bool = False
    default: Any = dataclasses.field(default_factory=lambda: dataclasses.MISSING)
    default_factory: Any = dataclasses.field(
        default_factory=lambda: dataclasses.MISSING
    )

    def read(self, instance: Any) -> Any:
        """Return this field's value from a schema instance."""
        return getattr(instance, self.attribute)

    def write(self, kwargs: dict[str, Any], value: Any) -> None:
        """Store a decoded value into the schema constructor's keyword arguments."""
        kwargs[self.attribute] = value

    def default_value(self) -> Any:
        """Return the constructor default, or dataclasses.MISSING when unknown."""
        if self.default_factory is not dataclasses.MISSING:
            return self.default_factory()
        return self.default


def aliased(name: str, **kwargs) -> Any:
    """
    Declare a dataclass field with an explicit external name.

    Accepts the same keyword arguments as dataclasses.field.

    Example:
        operation_id: str = aliased("operationId")
    """
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[FIELD_ALIAS_METADATA_KEY] = name
    return dataclasses.field(metadata=metadata, **kwargs)


def describe_schema(schema: type, config) -> tuple[FieldDescriptor, ...]:
    """
    List the named fields of a schema type.

    Descriptors declared in the config take precedence over dataclass
    introspection.

    Args:
        schema: The static schema type.
        config: The RecordConfig in effect.

    Returns:
        The schema's field descriptors, in declaration order.

    Raises:
        SchemaDefinitionError: If the schema is neither configured nor a dataclass,
            its annotations cannot be resolved, or two fields share a name.
    """
    if schema in config.descriptors:
        descriptors = tuple(config.descriptors[schema])
    elif isinstance(schema, type) and dataclasses.is_dataclass(schema):
        descriptors = _describe_dataclass(schema, config)
    else:
        raise SchemaDefinitionError(
            f"Cannot derive fields for {schema!r}: "
            "use a dataclass or declare descriptors in the config"
        )

    seen: dict[str, str] = {}
    for descriptor in descriptors:
        if not descriptor.name:
            raise SchemaDefinitionError(
                f"Field '{descriptor.attribute}' of {schema.__name__} "
                "has no external name"
            )
        if descriptor.name in seen:
            raise SchemaDefinitionError(
                f"Fields '{seen[descriptor.name]}' and '{descriptor.attribute}' of "
                f"{schema.__name__} both map to '{descriptor.name}'"
            )
        seen[descriptor.name] = descriptor.attribute

    return descriptors


def _describe_dataclass(schema: type, config) -> tuple[FieldDescriptor, ...]:
    try:
        hints = get_type_hints(schema)
    except NameError as e:
        raise SchemaDefinitionError(
            f"Cannot resolve annotations of {schema.__name__}: {e}"
        ) from e

    descriptors = []
    for f in dataclasses.fields(schema):
        # fields outside __init__ cannot be populated from input
        if not f.init:
            logger.debug("Skipping non-init field %s.%s", schema.__name__, f.name)
            continue
        descriptors.append(
            FieldDescriptor(
                attribute=f.name,
                name=config.external_name(
                    schema, f.name, f.metadata.get(FIELD_ALIAS_METADATA_KEY)
                ),
                annotation=hints.get(f.name, Any),
                required=(
                    f.default is dataclasses.MISSING
                    and f.default_factory is dataclasses.MISSING
                ),
                default=f.default,
                default_factory=f.default_factory,
            )
        )
    return tuple(descriptors)
