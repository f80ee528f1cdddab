"""Entity type schema operations: schemas and their attribute definitions."""

from __future__ import annotations

from docfill.application.dtos.attribute import (
    AttributeDefinitionCreate,
    AttributeDefinitionResult,
    EntityTypeSchemaResult,
)
from docfill.application.interfaces.repositories import IEntityTypeRepository
from docfill.application.services.authorization_service import require_elevated
from docfill.domain.enums import DataType
from docfill.domain.exceptions import (
    DuplicateException,
    ResourceNotFoundException,
    ValidationException,
)
from docfill.domain.value_objects import Actor, is_valid_key


class EntityTypeSchemaService:
    """Create and evolve entity type schemas. Attribute keys are immutable once created."""

    def __init__(self, entity_type_repo: IEntityTypeRepository) -> None:
        self.entity_type_repo = entity_type_repo

    async def create_entity_type_schema(
        self, actor: Actor, name: str
    ) -> EntityTypeSchemaResult:
        """Create a schema. Names are unique case-insensitively."""
        require_elevated(actor, "create client types")
        clean = (name or "").strip()
        if not clean:
            raise ValidationException("Client type name is required", field="name")
        if await self.entity_type_repo.get_schema_by_name(clean):
            raise DuplicateException(
                f'A client type named "{clean}" already exists', field="name"
            )
        return await self.entity_type_repo.create_schema(clean)

    async def list_entity_type_schemas(self) -> list[EntityTypeSchemaResult]:
        return await self.entity_type_repo.list_schemas()

    async def add_attribute_definition(
        self, actor: Actor, schema_id: str, data: AttributeDefinitionCreate
    ) -> AttributeDefinitionResult:
        """Add an attribute to a schema.

        The key must match ^[a-z0-9_]+$ and must not be used by any definition
        of the schema, soft-deleted ones included.
        """
        require_elevated(actor, "manage client fields")
        label = (data.label or "").strip()
        if not label:
            raise ValidationException("Field label is required", field="label")
        key = (data.attribute_key or "").strip()
        if not is_valid_key(key):
            raise ValidationException(
                "Field key must contain only lowercase letters, numbers, and underscores",
                field="attribute_key",
            )
        try:
            data_type = DataType(data.data_type)
        except ValueError as e:
            raise ValidationException(
                f"Unknown data type: {data.data_type}", field="data_type"
            ) from e
        if not await self.entity_type_repo.get_schema_by_id(schema_id):
            raise ResourceNotFoundException("entity_type_schema", schema_id)
        if await self.entity_type_repo.get_definition_by_key(schema_id, key):
            raise DuplicateException(
                f'Field key "{key}" already exists for this client type',
                field="attribute_key",
            )
        return await self.entity_type_repo.create_definition(
            schema_id,
            AttributeDefinitionCreate(
                label=label,
                attribute_key=key,
                data_type=data_type,
                required=data.required,
            ),
        )

    async def list_active_attribute_definitions(
        self, schema_id: str
    ) -> list[AttributeDefinitionResult]:
        """Return non-deleted definitions in creation order."""
        return await self.entity_type_repo.list_definitions(schema_id)

    async def rename_attribute_label(
        self, actor: Actor, definition_id: str, new_label: str
    ) -> AttributeDefinitionResult:
        require_elevated(actor, "manage client fields")
        label = (new_label or "").strip()
        if not label:
            raise ValidationException("Field label is required", field="label")
        updated = await self.entity_type_repo.update_definition_label(definition_id, label)
        if updated is None:
            raise ResourceNotFoundException("attribute_definition", definition_id)
        return updated

    async def soft_delete_attribute_definition(
        self, actor: Actor, definition_id: str
    ) -> None:
        """Hide the definition from reads. Stored values are kept."""
        require_elevated(actor, "manage client fields")
        if not await self.entity_type_repo.soft_delete_definition(definition_id):
            raise ResourceNotFoundException("attribute_definition", definition_id)
