"""Entity and AttributeValue ORM models (shown to operators as clients and their field values)."""

from sqlalchemy import ForeignKey, Index, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from docfill.infrastructure.persistence.database import Base
from docfill.infrastructure.persistence.models.mixins import (
    CuidMixin,
    SoftDeleteMixin,
    TimestampedModel,
)


class Entity(TimestampedModel, SoftDeleteMixin, Base):
    """Record whose attributes live in attribute_value rows. Table: entity."""

    __tablename__ = "entity"

    name: Mapped[str] = mapped_column(String(500), nullable=False, index=True)
    entity_type_schema_id: Mapped[str] = mapped_column(
        String, ForeignKey("entity_type_schema.id"), nullable=False, index=True
    )
    category_id: Mapped[str | None] = mapped_column(String, nullable=True)


class AttributeValue(CuidMixin, Base):
    """One stored attribute value. Table: attribute_value. Unique (entity_id, attribute_definition_id).

    References the definition weakly: definitions may be soft-deleted while values persist.
    """

    __tablename__ = "attribute_value"

    entity_id: Mapped[str] = mapped_column(
        String, ForeignKey("entity.id"), nullable=False, index=True
    )
    attribute_definition_id: Mapped[str] = mapped_column(
        String, ForeignKey("attribute_definition.id"), nullable=False
    )
    value: Mapped[str] = mapped_column(Text, nullable=False)

    __table_args__ = (
        UniqueConstraint(
            "entity_id",
            "attribute_definition_id",
            name="uq_attribute_value_entity_definition",
        ),
        Index("ix_attribute_value_definition_value", "attribute_definition_id", "value"),
    )
