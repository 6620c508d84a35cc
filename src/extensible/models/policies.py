from enum import Enum


class MismatchPolicy(Enum):
    """
    What to do when a recognized field's value does not fit its declared type.

    - FAIL: abort the whole decode with FieldTypeMismatchError
    - RETAIN: leave the field at its default and keep the raw value in extra,
      where the merge writes it back
    - DROP: leave the field at its default and discard the raw value
    """

    FAIL = "fail"
    RETAIN = "retain"
    DROP = "drop"

    def __str__(self) -> str:
        """Returns the string representation of the policy."""
        return self.value

    def __repr__(self) -> str:
        """Returns the official enum member representation."""
        return f"{self.__class__.__name__}.{self.name}"

    @classmethod
    def from_string(cls, policy_str: str) -> "MismatchPolicy | None":
        """
        Convert a string to the corresponding policy.

        Args:
            policy_str: A lowercase or uppercase string matching a policy.

        Returns:
            A MismatchPolicy member or None if invalid.
        """
        policy_str = policy_str.lower()
        for policy in cls:
            if policy.value == policy_str:
                return policy
        return None

    @property
    def tolerant(self) -> bool:
        return self is not MismatchPolicy.FAIL
