"""Entity operations: create, update, soft delete, get and search entities (EAV)."""

from __future__ import annotations

from collections.abc import Iterable

from docfill.application.dtos.attribute import (
    AttributeDefinitionResult,
    EntityCreate,
    EntityResult,
    EntityUpdate,
)
from docfill.application.interfaces.repositories import (
    IEntityRepository,
    IEntityTypeRepository,
)
from docfill.application.services.authorization_service import require_elevated
from docfill.application.services.field_formatter import is_numeric_value
from docfill.core.config import get_settings
from docfill.core.constants import ENTITY_SEARCH_LIMIT
from docfill.domain.enums import DataType
from docfill.domain.exceptions import ResourceNotFoundException, ValidationException
from docfill.domain.value_objects import Actor
from docfill.shared.utils.dates import parse_calendar_date


def _check_type(definition: AttributeDefinitionResult, value: str) -> None:
    """Raise ValidationException if value does not parse as the definition's data type."""
    data_type = definition.data_type
    if data_type in (DataType.NUMBER.value, DataType.CURRENCY.value):
        valid = is_numeric_value(value)
    elif data_type == DataType.DATE.value:
        valid = parse_calendar_date(value) is not None
    else:
        valid = True
    if not valid:
        raise ValidationException(
            f'Field "{definition.attribute_key}" expects a {data_type} value',
            field=definition.attribute_key,
        )


class EntityService:
    """Entities with dynamic attribute values, validated against their schema.

    Values arrive as attribute_definition_id -> value. They are trimmed; blank
    values are never stored. Keys in the uniqueness set (PAN, GST, ...) must
    not repeat across non-deleted entities of the same schema.
    """

    def __init__(
        self,
        entity_type_repo: IEntityTypeRepository,
        entity_repo: IEntityRepository,
        unique_attribute_keys: Iterable[str] | None = None,
    ) -> None:
        self.entity_type_repo = entity_type_repo
        self.entity_repo = entity_repo
        keys = (
            unique_attribute_keys
            if unique_attribute_keys is not None
            else get_settings().unique_attribute_keys
        )
        self.unique_attribute_keys = frozenset(k.lower() for k in keys)

    async def _active_definitions(
        self, schema_id: str
    ) -> dict[str, AttributeDefinitionResult]:
        definitions = await self.entity_type_repo.list_definitions(schema_id)
        return {d.id: d for d in definitions}

    @staticmethod
    def _require_known(
        values: dict[str, str], definitions: dict[str, AttributeDefinitionResult]
    ) -> None:
        for definition_id in values:
            if definition_id not in definitions:
                raise ValidationException(
                    f"Unknown field for this client type: {definition_id}",
                    field=definition_id,
                )

    async def _check_unique(
        self,
        schema_id: str,
        definition: AttributeDefinitionResult,
        value: str,
        exclude_entity_id: str | None = None,
    ) -> None:
        key = definition.attribute_key
        if key.lower() not in self.unique_attribute_keys:
            return
        holder = await self.entity_repo.find_entity_with_value(
            schema_id, definition.id, value, exclude_entity_id=exclude_entity_id
        )
        if holder is not None:
            raise ValidationException(
                f"Duplicate value for {key.upper()}: {value}", field=key
            )

    async def create_entity(self, actor: Actor, data: EntityCreate) -> EntityResult:
        """Validate (required, type, uniqueness) and create the entity with its values."""
        require_elevated(actor, "create clients")
        name = (data.name or "").strip()
        if not name:
            raise ValidationException("Client name is required", field="name")
        schema_id = data.entity_type_schema_id
        if not await self.entity_type_repo.get_schema_by_id(schema_id):
            raise ResourceNotFoundException("entity_type_schema", schema_id)

        definitions = await self._active_definitions(schema_id)
        self._require_known(data.attribute_values, definitions)
        cleaned = {
            definition_id: str(value).strip()
            for definition_id, value in data.attribute_values.items()
            if value is not None and str(value).strip()
        }
        for definition in definitions.values():
            if definition.required and definition.id not in cleaned:
                raise ValidationException(
                    f'Required field "{definition.attribute_key}" is missing',
                    field=definition.attribute_key,
                )
        for definition_id, value in cleaned.items():
            _check_type(definitions[definition_id], value)
        for definition_id, value in cleaned.items():
            await self._check_unique(schema_id, definitions[definition_id], value)

        return await self.entity_repo.create_entity(
            name=name,
            schema_id=schema_id,
            category_id=data.category_id,
            values=cleaned,
        )

    async def update_entity(
        self, actor: Actor, entity_id: str, data: EntityUpdate
    ) -> EntityResult:
        """Partial update. Each supplied value is updated in place or inserted; blank removes it."""
        require_elevated(actor, "update clients")
        existing = await self.entity_repo.get_by_id(entity_id)
        if existing is None:
            raise ResourceNotFoundException("entity", entity_id)

        name = None
        if data.name is not None:
            name = data.name.strip()
            if not name:
                raise ValidationException("Client name is required", field="name")

        schema_id = existing.entity_type_schema_id
        to_set: dict[str, str] = {}
        to_clear: list[str] = []
        if data.attribute_values:
            definitions = await self._active_definitions(schema_id)
            self._require_known(data.attribute_values, definitions)
            for definition_id, raw in data.attribute_values.items():
                definition = definitions[definition_id]
                value = "" if raw is None else str(raw).strip()
                if not value:
                    if definition.required:
                        raise ValidationException(
                            f'Required field "{definition.attribute_key}" is missing',
                            field=definition.attribute_key,
                        )
                    to_clear.append(definition_id)
                    continue
                _check_type(definition, value)
                to_set[definition_id] = value
            for definition_id, value in to_set.items():
                await self._check_unique(
                    schema_id, definitions[definition_id], value, exclude_entity_id=entity_id
                )

        await self.entity_repo.update_entity(
            entity_id,
            name=name,
            category_id=data.category_id,
            clear_category=data.clear_category,
        )
        for definition_id, value in to_set.items():
            await self.entity_repo.set_value(entity_id, definition_id, value)
        for definition_id in to_clear:
            await self.entity_repo.delete_value(entity_id, definition_id)

        updated = await self.entity_repo.get_by_id(entity_id)
        if updated is None:
            raise ResourceNotFoundException("entity", entity_id)
        return updated

    async def soft_delete_entity(self, actor: Actor, entity_id: str) -> None:
        """Mark the entity deleted; values are kept. Deleting twice is a no-op."""
        require_elevated(actor, "delete clients")
        if not await self.entity_repo.soft_delete(entity_id):
            raise ResourceNotFoundException("entity", entity_id)

    async def get_entity_by_id(self, entity_id: str) -> EntityResult | None:
        """Return the entity with attribute_key -> value, or None if missing or deleted."""
        return await self.entity_repo.get_by_id(entity_id)

    async def search_entities(self, query: str) -> list[EntityResult]:
        """Case-insensitive match on name or any attribute value, by name, at most 50."""
        needle = (query or "").strip()
        if not needle:
            return []
        return await self.entity_repo.search(needle, ENTITY_SEARCH_LIMIT)
