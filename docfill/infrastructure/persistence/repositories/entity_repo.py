"""Entity repository (EAV values joined through attribute definitions). Returns application DTOs."""

from collections import defaultdict

from sqlalchemy import delete as sa_delete
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from docfill.application.dtos.attribute import EntityResult
from docfill.infrastructure.persistence.models.entity import AttributeValue, Entity
from docfill.infrastructure.persistence.models.entity_type import AttributeDefinition
from docfill.infrastructure.persistence.repositories.base import BaseRepository
from docfill.shared.utils.datetime import ensure_utc


def _to_result(e: Entity, attributes: dict[str, str]) -> EntityResult:
    """Map ORM Entity plus its key -> value attributes to EntityResult."""
    return EntityResult(
        id=e.id,
        name=e.name,
        entity_type_schema_id=e.entity_type_schema_id,
        category_id=e.category_id,
        is_deleted=e.is_deleted,
        created_at=ensure_utc(e.created_at),
        updated_at=ensure_utc(e.updated_at),
        attributes=attributes,
    )


class EntityRepository(BaseRepository[Entity]):
    """Entities and their attribute values. Values are never cascade-deleted."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Entity)

    async def _attributes_for(self, entity_ids: list[str]) -> dict[str, dict[str, str]]:
        """Return entity_id -> {attribute_key: value}, joining (possibly deleted) definitions."""
        if not entity_ids:
            return {}
        result = await self.db.execute(
            select(
                AttributeValue.entity_id,
                AttributeDefinition.attribute_key,
                AttributeValue.value,
            )
            .join(
                AttributeDefinition,
                AttributeDefinition.id == AttributeValue.attribute_definition_id,
            )
            .where(AttributeValue.entity_id.in_(entity_ids))
        )
        out: dict[str, dict[str, str]] = defaultdict(dict)
        for entity_id, key, value in result.all():
            out[entity_id][key] = value
        return out

    async def get_by_id(
        self, entity_id: str, *, include_deleted: bool = False
    ) -> EntityResult | None:
        row = await self.get_orm_by_id(entity_id)
        if row is None or (row.is_deleted and not include_deleted):
            return None
        attributes = await self._attributes_for([row.id])
        return _to_result(row, attributes.get(row.id, {}))

    async def get_names(self, entity_ids: list[str]) -> dict[str, str]:
        if not entity_ids:
            return {}
        result = await self.db.execute(
            select(Entity.id, Entity.name).where(Entity.id.in_(entity_ids))
        )
        return {entity_id: name for entity_id, name in result.all()}

    async def find_entity_with_value(
        self,
        schema_id: str,
        definition_id: str,
        value: str,
        *,
        exclude_entity_id: str | None = None,
    ) -> str | None:
        stmt = (
            select(Entity.id)
            .join(AttributeValue, AttributeValue.entity_id == Entity.id)
            .where(
                Entity.entity_type_schema_id == schema_id,
                Entity.is_deleted.is_(False),
                AttributeValue.attribute_definition_id == definition_id,
                AttributeValue.value == value,
            )
        )
        if exclude_entity_id is not None:
            stmt = stmt.where(Entity.id != exclude_entity_id)
        result = await self.db.execute(stmt.limit(1))
        return result.scalar_one_or_none()

    async def create_entity(
        self,
        name: str,
        schema_id: str,
        category_id: str | None,
        values: dict[str, str],
    ) -> EntityResult:
        row = await self.create(
            Entity(
                name=name,
                entity_type_schema_id=schema_id,
                category_id=category_id,
                is_deleted=False,
            )
        )
        for definition_id, value in values.items():
            self.db.add(
                AttributeValue(
                    entity_id=row.id,
                    attribute_definition_id=definition_id,
                    value=value,
                )
            )
        await self.db.flush()
        attributes = await self._attributes_for([row.id])
        return _to_result(row, attributes.get(row.id, {}))

    async def update_entity(
        self,
        entity_id: str,
        *,
        name: str | None = None,
        category_id: str | None = None,
        clear_category: bool = False,
    ) -> EntityResult | None:
        row = await self.get_orm_by_id(entity_id)
        if row is None:
            return None
        if name is not None:
            row.name = name
        if clear_category:
            row.category_id = None
        elif category_id is not None:
            row.category_id = category_id
        row = await self.save(row)
        attributes = await self._attributes_for([row.id])
        return _to_result(row, attributes.get(row.id, {}))

    async def set_value(self, entity_id: str, definition_id: str, value: str) -> None:
        result = await self.db.execute(
            select(AttributeValue).where(
                AttributeValue.entity_id == entity_id,
                AttributeValue.attribute_definition_id == definition_id,
            )
        )
        existing = result.scalar_one_or_none()
        if existing is not None:
            existing.value = value
        else:
            self.db.add(
                AttributeValue(
                    entity_id=entity_id,
                    attribute_definition_id=definition_id,
                    value=value,
                )
            )
        await self.db.flush()

    async def delete_value(self, entity_id: str, definition_id: str) -> None:
        await self.db.execute(
            sa_delete(AttributeValue).where(
                AttributeValue.entity_id == entity_id,
                AttributeValue.attribute_definition_id == definition_id,
            )
        )

    async def soft_delete(self, entity_id: str) -> bool:
        row = await self.get_orm_by_id(entity_id)
        if row is None:
            return False
        if not row.is_deleted:
            row.is_deleted = True
            await self.db.flush()
        return True

    async def search(self, query: str, limit: int) -> list[EntityResult]:
        needle = query.lower()
        matching_value = (
            select(AttributeValue.entity_id)
            .where(func.lower(AttributeValue.value).contains(needle, autoescape=True))
        )
        result = await self.db.execute(
            select(Entity)
            .where(
                Entity.is_deleted.is_(False),
                or_(
                    func.lower(Entity.name).contains(needle, autoescape=True),
                    Entity.id.in_(matching_value),
                ),
            )
            .order_by(Entity.name.asc())
            .limit(limit)
        )
        rows = list(result.scalars().all())
        attributes = await self._attributes_for([r.id for r in rows])
        return [_to_result(r, attributes.get(r.id, {})) for r in rows]
