"""DTOs for entity type schemas, attribute definitions and entities (no dependency on ORM)."""

from dataclasses import dataclass, field
from datetime import datetime

from docfill.domain.enums import DataType


@dataclass(frozen=True)
class EntityTypeSchemaResult:
    """Entity type schema read-model."""

    id: str
    name: str
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class AttributeDefinitionCreate:
    """Input for add_attribute_definition. attribute_key is immutable once created."""

    label: str
    attribute_key: str
    data_type: DataType | str = DataType.TEXT
    required: bool = False


@dataclass(frozen=True)
class AttributeDefinitionResult:
    """Attribute definition read-model."""

    id: str
    entity_type_schema_id: str
    label: str
    attribute_key: str
    data_type: str
    required: bool
    is_deleted: bool
    created_at: datetime


@dataclass(frozen=True)
class EntityCreate:
    """Input for create_entity. attribute_values maps attribute_definition_id -> raw value."""

    name: str
    entity_type_schema_id: str
    category_id: str | None = None
    attribute_values: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class EntityUpdate:
    """Partial update for an entity.

    name and category_id are applied only when not None; clear_category sets
    category_id to NULL. attribute_values (definition id -> value) are upserted;
    a blank value removes the stored value.
    """

    name: str | None = None
    category_id: str | None = None
    clear_category: bool = False
    attribute_values: dict[str, str] | None = None


@dataclass(frozen=True)
class EntityResult:
    """Entity read-model with attributes joined as attribute_key -> value."""

    id: str
    name: str
    entity_type_schema_id: str
    category_id: str | None
    is_deleted: bool
    created_at: datetime
    updated_at: datetime
    attributes: dict[str, str] = field(default_factory=dict)
