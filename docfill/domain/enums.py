"""Domain enumerations (business concepts, no infrastructure)."""

from enum import Enum


class DataType(str, Enum):
    """Declared data type of a field or attribute definition."""

    TEXT = "text"
    NUMBER = "number"
    DATE = "date"
    CURRENCY = "currency"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]

    @property
    def is_numeric(self) -> bool:
        """True for types whose values must parse as numbers."""
        return self in (DataType.NUMBER, DataType.CURRENCY)


class ActorRole(str, Enum):
    """Operator role. ADMIN is the elevated privilege for all mutations."""

    ADMIN = "ADMIN"
    USER = "USER"
