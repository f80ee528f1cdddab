"""GeneratedDocument ORM model (shown to operators as a report). Owns its output file on disk."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from docfill.infrastructure.persistence.database import Base
from docfill.infrastructure.persistence.models.mixins import CuidMixin
from docfill.shared.utils.datetime import utc_now


class GeneratedDocument(CuidMixin, Base):
    """Record of one completed generation. Table: generated_document.

    input_values holds the JSON object of field_key -> resolved pre-format value.
    """

    __tablename__ = "generated_document"

    document_type_id: Mapped[str] = mapped_column(
        String, ForeignKey("document_type.id"), nullable=False, index=True
    )
    generated_by: Mapped[str] = mapped_column(String, nullable=False, index=True)
    entity_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("entity.id", ondelete="SET NULL"), nullable=True, index=True
    )
    file_path: Mapped[str] = mapped_column(String(1024), nullable=False)
    generated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False, index=True
    )
    input_values: Mapped[str] = mapped_column(Text, nullable=False, default="{}")
