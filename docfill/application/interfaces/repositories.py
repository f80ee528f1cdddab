"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference application DTOs only; no infrastructure imports.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from docfill.application.dtos.activity import ActivityEvent, ActivityLogResult
    from docfill.application.dtos.attribute import (
        AttributeDefinitionCreate,
        AttributeDefinitionResult,
        EntityResult,
        EntityTypeSchemaResult,
    )
    from docfill.application.dtos.document_type import (
        DocumentTypeResult,
        FieldDefinitionInput,
        FieldDefinitionResult,
        TemplateResult,
    )
    from docfill.application.dtos.generation import (
        GeneratedDocumentCreate,
        GeneratedDocumentResult,
    )


# Template repository interface
class ITemplateRepository(Protocol):
    """Protocol for template lookup (templates are managed elsewhere)."""

    async def get_by_id(self, template_id: str) -> TemplateResult | None:
        """Return template by id, or None."""

    async def create_template(self, name: str, file_path: str) -> TemplateResult:
        """Register a template file."""


# Document type repository interface
class IDocumentTypeRepository(Protocol):
    """Protocol for document types and their ordered field definitions."""

    async def get_by_id(
        self, document_type_id: str, *, include_deleted: bool = False
    ) -> DocumentTypeResult | None:
        """Return document type with fields; soft-deleted only when include_deleted."""

    async def list_active(self) -> list[DocumentTypeResult]:
        """Return non-deleted document types ordered by name."""

    async def get_fields(self, document_type_id: str) -> list[FieldDefinitionResult]:
        """Return field definitions ordered by position."""

    async def create_document_type(
        self,
        name: str,
        template_id: str,
        fields: list[FieldDefinitionInput],
        category_id: str | None = None,
    ) -> DocumentTypeResult:
        """Create a document type with its fields (positions follow list order)."""

    async def update_document_type(
        self,
        document_type_id: str,
        *,
        name: str | None = None,
        template_id: str | None = None,
        category_id: str | None = None,
        fields: list[FieldDefinitionInput] | None = None,
    ) -> DocumentTypeResult | None:
        """Apply a partial update; fields, when given, replace the previous list."""

    async def soft_delete(self, document_type_id: str) -> bool:
        """Mark deleted. Return False if not found."""

    async def hard_delete(self, document_type_id: str) -> bool:
        """Delete the row and its fields. Return False if not found."""


# Entity type schema repository interface
class IEntityTypeRepository(Protocol):
    """Protocol for entity type schemas and their attribute definitions."""

    async def get_schema_by_id(self, schema_id: str) -> EntityTypeSchemaResult | None:
        """Return schema by id, or None."""

    async def get_schema_by_name(self, name: str) -> EntityTypeSchemaResult | None:
        """Return schema whose name matches case-insensitively, or None."""

    async def list_schemas(self) -> list[EntityTypeSchemaResult]:
        """Return all schemas ordered by name."""

    async def create_schema(self, name: str) -> EntityTypeSchemaResult:
        """Create a schema."""

    async def get_definition_by_id(
        self, definition_id: str
    ) -> AttributeDefinitionResult | None:
        """Return definition by id (including soft-deleted), or None."""

    async def get_definition_by_key(
        self, schema_id: str, attribute_key: str
    ) -> AttributeDefinitionResult | None:
        """Return definition by key within schema (including soft-deleted), or None."""

    async def list_definitions(
        self, schema_id: str, *, include_deleted: bool = False
    ) -> list[AttributeDefinitionResult]:
        """Return definitions of the schema ordered by creation time."""

    async def create_definition(
        self, schema_id: str, data: AttributeDefinitionCreate
    ) -> AttributeDefinitionResult:
        """Create an attribute definition."""

    async def update_definition_label(
        self, definition_id: str, label: str
    ) -> AttributeDefinitionResult | None:
        """Change the label. Return None if not found."""

    async def soft_delete_definition(self, definition_id: str) -> bool:
        """Mark deleted. Return False if not found."""


# Entity repository interface
class IEntityRepository(Protocol):
    """Protocol for entities and their attribute values (EAV)."""

    async def get_by_id(
        self, entity_id: str, *, include_deleted: bool = False
    ) -> EntityResult | None:
        """Return entity with attributes (key -> value); soft-deleted only when include_deleted."""

    async def get_names(self, entity_ids: list[str]) -> dict[str, str]:
        """Return id -> name for the given ids (missing ids omitted)."""

    async def find_entity_with_value(
        self,
        schema_id: str,
        definition_id: str,
        value: str,
        *,
        exclude_entity_id: str | None = None,
    ) -> str | None:
        """Return id of a non-deleted entity of schema storing value for definition, or None."""

    async def create_entity(
        self,
        name: str,
        schema_id: str,
        category_id: str | None,
        values: dict[str, str],
    ) -> EntityResult:
        """Create entity and one value row per definition id in values."""

    async def update_entity(
        self,
        entity_id: str,
        *,
        name: str | None = None,
        category_id: str | None = None,
        clear_category: bool = False,
    ) -> EntityResult | None:
        """Apply name/category changes. Return None if not found."""

    async def set_value(self, entity_id: str, definition_id: str, value: str) -> None:
        """Update the stored value in place or insert it."""

    async def delete_value(self, entity_id: str, definition_id: str) -> None:
        """Remove the stored value, if any."""

    async def soft_delete(self, entity_id: str) -> bool:
        """Mark deleted (idempotent). Return False if the id does not exist."""

    async def search(self, query: str, limit: int) -> list[EntityResult]:
        """Return non-deleted entities whose name or any value contains query."""


# Generated document repository interface
class IGeneratedDocumentRepository(Protocol):
    """Protocol for generated document records."""

    async def create_document(
        self, data: GeneratedDocumentCreate
    ) -> GeneratedDocumentResult:
        """Create a generated document record."""

    async def get_by_id(self, document_id: str) -> GeneratedDocumentResult | None:
        """Return record by id, or None."""

    async def update_file_path(self, document_id: str, file_path: str) -> bool:
        """Point the record at a new file. Return False if not found."""

    async def list_all(
        self, skip: int = 0, limit: int = 50
    ) -> list[GeneratedDocumentResult]:
        """Return records newest first."""

    async def list_by_generator(
        self, generated_by: str, skip: int = 0, limit: int = 50
    ) -> list[GeneratedDocumentResult]:
        """Return records created by one actor, newest first."""

    async def list_by_document_type(
        self, document_type_id: str
    ) -> list[GeneratedDocumentResult]:
        """Return every record of one document type."""

    async def delete_document(self, document_id: str) -> bool:
        """Delete the record. Return False if not found."""

    async def delete_by_document_type(self, document_type_id: str) -> int:
        """Delete every record of one document type; return the count."""


# Activity log repository interface
class IActivityLogRepository(Protocol):
    """Protocol for the append-only activity log."""

    async def create_entry(self, event: ActivityEvent) -> ActivityLogResult:
        """Append one entry."""

    async def list_recent(self, limit: int = 100) -> list[ActivityLogResult]:
        """Return entries newest first."""


class IUnitOfWork(Protocol):
    """Repositories bound to one transaction."""

    templates: ITemplateRepository
    document_types: IDocumentTypeRepository
    entity_types: IEntityTypeRepository
    entities: IEntityRepository
    generated_documents: IGeneratedDocumentRepository
    activity_logs: IActivityLogRepository
