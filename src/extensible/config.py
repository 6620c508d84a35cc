import re
from dataclasses import dataclass, field
from typing import Any, Callable

from .constants import MISMATCH_POLICY_DEFAULT, NAMING_DEFAULT, OMIT_NONE_DEFAULT
from .exceptions import SchemaDefinitionError
from .models.policies import MismatchPolicy

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def to_camel(attribute: str) -> str:
    """operation_id -> operationId"""
    head, *rest = attribute.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def to_pascal(attribute: str) -> str:
    """operation_id -> OperationId"""
    return "".join(part[:1].upper() + part[1:] for part in attribute.split("_"))


def to_kebab(attribute: str) -> str:
    """operation_id -> operation-id"""
    return attribute.replace("_", "-")


def to_snake(attribute: str) -> str:
    """operationId -> operation_id"""
    return _CAMEL_BOUNDARY.sub("_", attribute).lower()


NAMING_CONVENTIONS: dict[str, Callable[[str], str] | None] = {
    "identity": None,
    "camel": to_camel,
    "pascal": to_pascal,
    "kebab": to_kebab,
    "snake": to_snake,
}


@dataclass(frozen=True)
class RecordConfig:
    """
    Per-call configuration shared by splitting and merging.

    The same config must be used for both directions so that field names agree.

    Attributes:
        naming: Convention applied to attribute names that have no alias.
        aliases: Per-schema mapping of attribute name to external name.
        descriptors: Per-schema explicit field descriptors, used instead of
            dataclass introspection.
        mismatch_policy: Handling of recognized fields whose value has the wrong type.
        omit_none: Leave static fields holding None out of the merged object of a
            directly built record. Split records emit the fields they were
            decoded from, nulls included.
    """

    naming: Callable[[str], str] | None = None
    aliases: dict[type, dict[str, str]] = field(default_factory=dict)
    descriptors: dict[type, tuple] = field(default_factory=dict)
    mismatch_policy: MismatchPolicy = MismatchPolicy(MISMATCH_POLICY_DEFAULT)
    omit_none: bool = OMIT_NONE_DEFAULT

    def external_name(self, schema: type, attribute: str, alias: str | None) -> str:
        """
        Resolve the external name of a field.

        Explicit config aliases win over field metadata aliases, which win over
        the naming convention.
        """
        configured = self.aliases.get(schema, {}).get(attribute)
        if configured:
            return configured
        if alias:
            return alias
        if self.naming is not None:
            return self.naming(attribute)
        return attribute

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RecordConfig":
        """
        Construct a RecordConfig from plain data.

        Args:
            data: A dictionary with optional 'naming', 'mismatch_policy',
                'omit_none', 'aliases' and 'descriptors' keys. 'naming' and
                'mismatch_policy' are given by name.

        Returns:
            A RecordConfig instance.

        Raises:
            SchemaDefinitionError: If a naming convention or policy name is unknown.
        """
        naming_name = str(data.get("naming") or NAMING_DEFAULT).lower()
        if naming_name not in NAMING_CONVENTIONS:
            raise SchemaDefinitionError(
                f"Unknown naming convention '{naming_name}'. "
                f"Must be one of: {', '.join(sorted(NAMING_CONVENTIONS))}"
            )

        policy_value = data.get("mismatch_policy", MISMATCH_POLICY_DEFAULT)
        if isinstance(policy_value, MismatchPolicy):
            policy = policy_value
        else:
            policy = MismatchPolicy.from_string(str(policy_value))
            if policy is None:
                raise SchemaDefinitionError(
                    f"Unknown mismatch policy '{policy_value}'. "
                    f"Must be one of: {', '.join(p.value for p in MismatchPolicy)}"
                )

        return cls(
            naming=NAMING_CONVENTIONS[naming_name],
            aliases=dict(data.get("aliases", {})),
            descriptors=dict(data.get("descriptors", {})),
            mismatch_policy=policy,
            omit_none=bool(data.get("omit_none", OMIT_NONE_DEFAULT)),
        )


DEFAULT_CONFIG = RecordConfig()
