"""SQLAlchemy mixins for common model patterns (DRY).

Provides: CuidMixin, TimestampMixin, CreatedAtMixin, SoftDeleteMixin and the
combined TimestampedModel.
"""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, String
from sqlalchemy.orm import Mapped, declared_attr, mapped_column

from docfill.shared.utils.datetime import utc_now
from docfill.shared.utils.ids import new_record_id


class CuidMixin:
    """Mixin for models using CUID as primary key. Provides id with default new_record_id."""

    @declared_attr
    def id(cls) -> Mapped[str]:
        return mapped_column(String, primary_key=True, default=new_record_id)


class CreatedAtMixin:
    """Mixin for created_at (application default, microsecond precision, UTC)."""

    @declared_attr
    def created_at(cls) -> Mapped[datetime]:
        return mapped_column(DateTime(timezone=True), default=utc_now, nullable=False)


class TimestampMixin(CreatedAtMixin):
    """Mixin for created_at and updated_at (application defaults, timezone-aware)."""

    @declared_attr
    def updated_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True),
            default=utc_now,
            onupdate=utc_now,
            nullable=False,
        )


class SoftDeleteMixin:
    """Mixin for soft delete (is_deleted flag). Soft-deleted rows are excluded from read paths."""

    @declared_attr
    def is_deleted(cls) -> Mapped[bool]:
        return mapped_column(Boolean, nullable=False, default=False, index=True)


class TimestampedModel(CuidMixin, TimestampMixin):
    """Combined mixin: CUID + created_at/updated_at."""

    __abstract__ = True
