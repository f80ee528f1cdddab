"""Domain value objects for docfill.

Value objects are immutable types that represent domain concepts with
self-validation. They have no identity, only value.
"""

import re
from dataclasses import dataclass
from typing import Any, ClassVar

from docfill.domain.enums import ActorRole

# Machine keys for attributes and fields: lowercase letters, digits, underscore.
_KEY_RE = re.compile(r"^[a-z0-9_]+$")


def is_valid_key(value: str) -> bool:
    """Return True if value is a valid attribute/field machine key."""
    return bool(value) and bool(_KEY_RE.fullmatch(value))


@dataclass(frozen=True)
class Actor:
    """The operator performing an operation. Passed explicitly to every call.

    Authorization is a pure function of (actor, operation): mutations
    require is_elevated.
    """

    id: str
    role: ActorRole = ActorRole.USER

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("Actor id must be a non-empty string")

    @property
    def is_elevated(self) -> bool:
        """True when the actor holds the elevated (ADMIN) privilege."""
        return self.role == ActorRole.ADMIN


@dataclass(frozen=True)
class FormatRule:
    """Display formatting options for one field (decoded FieldDefinition.options_json).

    Attribute names are snake_case; the persisted JSON uses camelCase keys
    (dateFormat, currencySymbol, ...) via JSON_KEYS.
    """

    date_format: str | None = None
    decimals: int | None = None
    currency_symbol: str | None = None
    transform: str | None = None
    prefix: str = ""
    suffix: str = ""

    JSON_KEYS: ClassVar[dict[str, str]] = {
        "dateFormat": "date_format",
        "decimals": "decimals",
        "currencySymbol": "currency_symbol",
        "transform": "transform",
        "prefix": "prefix",
        "suffix": "suffix",
    }

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> "FormatRule":
        """Build from a decoded JSON object (camelCase keys). Unknown keys are ignored."""
        kwargs = {
            attr: data[json_key]
            for json_key, attr in cls.JSON_KEYS.items()
            if data.get(json_key) is not None
        }
        return cls(**kwargs)

    def to_mapping(self) -> dict[str, Any]:
        """Return the camelCase JSON object form, omitting unset options."""
        out: dict[str, Any] = {}
        for json_key, attr in self.JSON_KEYS.items():
            value = getattr(self, attr)
            if value is None or value == "":
                continue
            out[json_key] = value
        return out
