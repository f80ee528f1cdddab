"""ActivityLog ORM model. Append-only operator activity trail."""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from docfill.infrastructure.persistence.database import Base
from docfill.infrastructure.persistence.models.mixins import CreatedAtMixin, CuidMixin


class ActivityLog(CuidMixin, CreatedAtMixin, Base):
    """Activity log entry. Table: activity_log."""

    __tablename__ = "activity_log"

    actor_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    action_type: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    entity_type: Mapped[str] = mapped_column(String(50), nullable=False)
    entity_id: Mapped[str | None] = mapped_column(String, nullable=True)
    metadata_json: Mapped[str | None] = mapped_column(Text, nullable=True)
