"""Shared enumerations for docfill.

Cross-cutting enums used by application and infrastructure (e.g. activity
logging). Domain-specific enums (e.g. DataType) live in docfill.domain.enums.
"""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]


class ActivityAction(_ValuesMixin, str, Enum):
    """Activity log action types (what the operator did)."""

    REPORT_GENERATE = "REPORT_GENERATE"
    BULK_REPORT_GENERATE = "BULK_REPORT_GENERATE"
    REPORT_DELETE = "REPORT_DELETE"
    FORM_CREATE = "FORM_CREATE"
    FORM_UPDATE = "FORM_UPDATE"
    FORM_DELETE_SOFT = "FORM_DELETE_SOFT"
    FORM_DELETE_HARD = "FORM_DELETE_HARD"


class ActivityEntityType(_ValuesMixin, str, Enum):
    """Entity type recorded on activity log rows."""

    REPORT = "REPORT"
    FORM = "FORM"
