"""Application services (pure helpers shared by use cases)."""

from docfill.application.services.authorization_service import (
    can_manage_document,
    require_elevated,
)
from docfill.application.services.field_formatter import (
    decode_format_rule,
    format_field_value,
    parse_format_rule,
)

__all__ = [
    "can_manage_document",
    "decode_format_rule",
    "format_field_value",
    "parse_format_rule",
    "require_elevated",
]
