"""EntityTypeSchema and AttributeDefinition ORM models (shown to operators as client types and their fields)."""

from sqlalchemy import Boolean, ForeignKey, Index, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from docfill.infrastructure.persistence.database import Base
from docfill.infrastructure.persistence.models.mixins import (
    CreatedAtMixin,
    CuidMixin,
    SoftDeleteMixin,
    TimestampedModel,
)


class EntityTypeSchema(TimestampedModel, Base):
    """User-defined set of dynamic attributes. Table: entity_type_schema. Name unique case-insensitively."""

    __tablename__ = "entity_type_schema"

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    __table_args__ = (
        Index("uq_entity_type_schema_name_lower", func.lower(name), unique=True),
    )


class AttributeDefinition(CuidMixin, CreatedAtMixin, SoftDeleteMixin, Base):
    """Dynamic attribute of an entity type schema. Table: attribute_definition.

    Unique (entity_type_schema_id, attribute_key), including soft-deleted rows.
    """

    __tablename__ = "attribute_definition"

    entity_type_schema_id: Mapped[str] = mapped_column(
        String, ForeignKey("entity_type_schema.id"), nullable=False, index=True
    )
    label: Mapped[str] = mapped_column(String(255), nullable=False)
    attribute_key: Mapped[str] = mapped_column(String(100), nullable=False)
    data_type: Mapped[str] = mapped_column(String(20), nullable=False)
    required: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    __table_args__ = (
        UniqueConstraint(
            "entity_type_schema_id",
            "attribute_key",
            name="uq_attribute_definition_schema_key",
        ),
    )
