class ExtensibleRecordError(Exception):
    """Base exception for all extensible record errors."""

    pass


class SchemaDefinitionError(ExtensibleRecordError):
    """Raised when a schema type or its configuration cannot be described as fields."""

    pass


class DecodeError(ExtensibleRecordError):
    """Base exception for errors raised while splitting a flat object."""

    pass


class MalformedInputError(DecodeError):
    """Raised when the input is not a field-keyed object at all."""

    pass


class FieldTypeMismatchError(DecodeError):
    """Raised when a recognized field's value does not fit its declared type."""

    def __init__(self, path: str, value, expected) -> None:
        self.path = path
        self.value = value
        self.expected = expected
        super().__init__(
            f"Field '{path}' expected {_type_label(expected)}, "
            f"got {type(value).__name__}: {value!r}"
        )


class MissingFieldError(DecodeError):
    """Raised when a field without a default is absent from the input."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Field '{path}' is required but was not provided")


class EncodingError(ExtensibleRecordError):
    """Raised when a value cannot be projected into a JSON-ready object."""

    pass


def _type_label(annotation) -> str:
    return getattr(annotation, "__name__", None) or str(annotation)
