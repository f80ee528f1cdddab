"""EntityTypeSchema and AttributeDefinition repository. Returns application DTOs."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from docfill.application.dtos.attribute import (
    AttributeDefinitionCreate,
    AttributeDefinitionResult,
    EntityTypeSchemaResult,
)
from docfill.domain.enums import DataType
from docfill.infrastructure.persistence.models.entity_type import (
    AttributeDefinition,
    EntityTypeSchema,
)
from docfill.infrastructure.persistence.repositories.base import BaseRepository
from docfill.shared.utils.datetime import ensure_utc


def _schema_to_result(s: EntityTypeSchema) -> EntityTypeSchemaResult:
    """Map ORM EntityTypeSchema to EntityTypeSchemaResult."""
    return EntityTypeSchemaResult(
        id=s.id,
        name=s.name,
        created_at=ensure_utc(s.created_at),
        updated_at=ensure_utc(s.updated_at),
    )


def _definition_to_result(d: AttributeDefinition) -> AttributeDefinitionResult:
    """Map ORM AttributeDefinition to AttributeDefinitionResult."""
    return AttributeDefinitionResult(
        id=d.id,
        entity_type_schema_id=d.entity_type_schema_id,
        label=d.label,
        attribute_key=d.attribute_key,
        data_type=d.data_type,
        required=d.required,
        is_deleted=d.is_deleted,
        created_at=ensure_utc(d.created_at),
    )


class EntityTypeRepository(BaseRepository[EntityTypeSchema]):
    """Entity type schemas and their attribute definitions."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, EntityTypeSchema)

    async def get_schema_by_id(self, schema_id: str) -> EntityTypeSchemaResult | None:
        row = await self.get_orm_by_id(schema_id)
        return _schema_to_result(row) if row else None

    async def get_schema_by_name(self, name: str) -> EntityTypeSchemaResult | None:
        """Case-insensitive lookup. Compared in Python: SQLite lower() is ASCII-only."""
        wanted = name.casefold()
        result = await self.db.execute(select(EntityTypeSchema))
        for row in result.scalars():
            if row.name.casefold() == wanted:
                return _schema_to_result(row)
        return None

    async def list_schemas(self) -> list[EntityTypeSchemaResult]:
        result = await self.db.execute(
            select(EntityTypeSchema).order_by(EntityTypeSchema.name.asc())
        )
        return [_schema_to_result(s) for s in result.scalars().all()]

    async def create_schema(self, name: str) -> EntityTypeSchemaResult:
        row = await self.create(EntityTypeSchema(name=name))
        return _schema_to_result(row)

    async def _get_definition(self, definition_id: str) -> AttributeDefinition | None:
        result = await self.db.execute(
            select(AttributeDefinition).where(AttributeDefinition.id == definition_id)
        )
        return result.scalar_one_or_none()

    async def get_definition_by_id(
        self, definition_id: str
    ) -> AttributeDefinitionResult | None:
        row = await self._get_definition(definition_id)
        return _definition_to_result(row) if row else None

    async def get_definition_by_key(
        self, schema_id: str, attribute_key: str
    ) -> AttributeDefinitionResult | None:
        result = await self.db.execute(
            select(AttributeDefinition).where(
                AttributeDefinition.entity_type_schema_id == schema_id,
                AttributeDefinition.attribute_key == attribute_key,
            )
        )
        row = result.scalar_one_or_none()
        return _definition_to_result(row) if row else None

    async def list_definitions(
        self, schema_id: str, *, include_deleted: bool = False
    ) -> list[AttributeDefinitionResult]:
        stmt = select(AttributeDefinition).where(
            AttributeDefinition.entity_type_schema_id == schema_id
        )
        if not include_deleted:
            stmt = stmt.where(AttributeDefinition.is_deleted.is_(False))
        result = await self.db.execute(
            stmt.order_by(AttributeDefinition.created_at.asc(), AttributeDefinition.id.asc())
        )
        return [_definition_to_result(d) for d in result.scalars().all()]

    async def create_definition(
        self, schema_id: str, data: AttributeDefinitionCreate
    ) -> AttributeDefinitionResult:
        row = AttributeDefinition(
            entity_type_schema_id=schema_id,
            label=data.label,
            attribute_key=data.attribute_key,
            data_type=DataType(data.data_type).value,
            required=data.required,
            is_deleted=False,
        )
        self.db.add(row)
        await self.db.flush()
        await self.db.refresh(row)
        return _definition_to_result(row)

    async def update_definition_label(
        self, definition_id: str, label: str
    ) -> AttributeDefinitionResult | None:
        row = await self._get_definition(definition_id)
        if row is None:
            return None
        row.label = label
        await self.db.flush()
        await self.db.refresh(row)
        return _definition_to_result(row)

    async def soft_delete_definition(self, definition_id: str) -> bool:
        row = await self._get_definition(definition_id)
        if row is None:
            return False
        row.is_deleted = True
        await self.db.flush()
        return True
