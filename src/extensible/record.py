import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, ClassVar, Generic, TypeVar

from .config import DEFAULT_CONFIG, RecordConfig
from .constants import ROOT_PATH
from .models.descriptor import describe_schema
from .values import (
    emits_field,
    encode_value,
    ensure_field_map,
    populate_schema,
    project_schema,
)

logger = logging.getLogger(__name__)

S = TypeVar("S")


@dataclass
class ExtensibleRecord(Generic[S]):
    """
    A typed schema value combined with an open bag of fields the schema does not model.

    Merging with to_object produces one flat object holding both; splitting with
    from_object fills the schema from the fields it recognizes and keeps every
    other field in extra.

    Attributes:
        static: Instance of the static schema type.
        extra: Fields that are not part of the schema, keyed by external name.
        present: External names of the static fields the record was split
            from. None for records built directly, which emit every field.
    """

    static: S
    extra: dict[str, Any] | None = field(default_factory=dict)
    present: frozenset[str] | None = field(default=None, compare=False, repr=False)

    __extensible_record__: ClassVar[bool] = True

    def __post_init__(self) -> None:
        if self.extra is None:
            self.extra = {}

    def recognized_names(self, config: RecordConfig | None = None) -> set[str]:
        """
        Return the external names of the schema's fields.

        Args:
            config: Naming configuration. Defaults to DEFAULT_CONFIG.
        """
        config = config or DEFAULT_CONFIG
        return {d.name for d in describe_schema(type(self.static), config)}

    def shadowed_keys(self, config: RecordConfig | None = None) -> set[str]:
        """
        Return the extra keys that a static field overrides when merging.

        Only static fields that appear in the merged object shadow extra keys.
        """
        config = config or DEFAULT_CONFIG
        shadowed = set()
        for descriptor in describe_schema(type(self.static), config):
            if descriptor.name not in self.extra:
                continue
            value = descriptor.read(self.static)
            if not emits_field(descriptor, value, config, self.present):
                continue
            shadowed.add(descriptor.name)
        return shadowed

    def to_object(self, config: RecordConfig | None = None) -> dict[str, Any]:
        """
        Merge the static and extra fields into one flat, JSON-ready object.

        Static fields take precedence over extra fields with the same name.

        Args:
            config: Naming configuration. Defaults to DEFAULT_CONFIG.

        Returns:
            A new dictionary; neither component is modified.

        Raises:
            EncodingError: If a static or extra value has no JSON representation.
            SchemaDefinitionError: If the schema's fields cannot be described.
        """
        config = config or DEFAULT_CONFIG
        merged = project_schema(
            self.static, type(self.static), config, present=self.present
        )

        for key, value in self.extra.items():
            if key in merged:
                logger.debug("Static field '%s' overrides the extra value", key)
                continue
            merged[key] = encode_value(value, config, f"{ROOT_PATH}.{key}")

        return merged

    def __json__(self) -> dict:
        """
        Convert to a JSON-serializable dictionary.

        Returns:
            The merged flat object, using the default configuration.
        """
        return self.to_object()

    @classmethod
    def from_object(
        cls,
        flat: Mapping[str, Any],
        schema: type[S],
        config: RecordConfig | None = None,
        path: str = ROOT_PATH,
    ) -> "ExtensibleRecord[S]":
        """
        Split a flat object into a schema instance and the residual extra fields.

        Args:
            flat: A decoded field-keyed object.
            schema: The static schema type to populate.
            config: Naming and mismatch configuration. Defaults to DEFAULT_CONFIG.
            path: Location of the object, for error messages.

        Returns:
            A new ExtensibleRecord whose extra holds exactly the keys the schema
            does not recognize (plus mismatched values under the RETAIN policy).

        Raises:
            MalformedInputError: If flat is not a string-keyed mapping.
            FieldTypeMismatchError: If a field does not fit and the policy is FAIL.
            MissingFieldError: If a field without a default is not set.
        """
        config = config or DEFAULT_CONFIG
        flat = ensure_field_map(flat, path)

        static, recognized, retained, present = populate_schema(
            flat, schema, config, path
        )
        extra = {key: value for key, value in flat.items() if key not in recognized}
        extra.update(retained)

        logger.debug(
            "Split %s at '%s': %d static, %d extra",
            schema.__name__,
            path,
            len(present),
            len(extra),
        )
        return cls(static=static, extra=extra, present=frozenset(present))

    @classmethod
    def from_dict(cls, data: dict, schema: type[S]) -> "ExtensibleRecord[S]":
        """
        Construct an ExtensibleRecord from a dictionary using the default configuration.

        Args:
            data: A flat field-keyed dictionary.
            schema: The static schema type to populate.

        Returns:
            An ExtensibleRecord instance.
        """
        return cls.from_object(data, schema)
