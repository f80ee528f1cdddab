"""DocumentType and FieldDefinition ORM models (shown to operators as forms and form fields)."""

from sqlalchemy import Boolean, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from docfill.infrastructure.persistence.database import Base
from docfill.infrastructure.persistence.models.mixins import (
    CuidMixin,
    SoftDeleteMixin,
    TimestampedModel,
)


class DocumentType(TimestampedModel, SoftDeleteMixin, Base):
    """Reusable generation recipe bound to one template. Table: document_type."""

    __tablename__ = "document_type"

    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    template_id: Mapped[str] = mapped_column(
        String, ForeignKey("template.id"), nullable=False, index=True
    )
    category_id: Mapped[str | None] = mapped_column(String, nullable=True)

    fields: Mapped[list["FieldDefinition"]] = relationship(
        back_populates="document_type",
        cascade="all, delete-orphan",
        order_by="FieldDefinition.position",
        lazy="selectin",
    )


class FieldDefinition(CuidMixin, Base):
    """One input field of a document type. Table: field_definition.

    Unique (document_type_id, placeholder_mapping); NULL mappings are unconstrained.
    """

    __tablename__ = "field_definition"

    document_type_id: Mapped[str] = mapped_column(
        String, ForeignKey("document_type.id", ondelete="CASCADE"), nullable=False, index=True
    )
    label: Mapped[str] = mapped_column(String(255), nullable=False)
    field_key: Mapped[str] = mapped_column(String(100), nullable=False)
    data_type: Mapped[str] = mapped_column(String(20), nullable=False)
    required: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    placeholder_mapping: Mapped[str | None] = mapped_column(String(255), nullable=True)
    options_json: Mapped[str | None] = mapped_column(Text, nullable=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    document_type: Mapped[DocumentType] = relationship(back_populates="fields")

    __table_args__ = (
        UniqueConstraint(
            "document_type_id",
            "placeholder_mapping",
            name="uq_field_definition_type_placeholder",
        ),
    )
