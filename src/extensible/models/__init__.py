from .descriptor import FieldDescriptor, aliased, describe_schema
from .policies import MismatchPolicy

__all__ = [
    "FieldDescriptor",
    "MismatchPolicy",
    "aliased",
    "describe_schema",
]
