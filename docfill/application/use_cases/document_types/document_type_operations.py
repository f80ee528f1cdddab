"""Document type operations: create, update, list, delete and field suggestion."""

from __future__ import annotations

import re

from docfill.application.dtos.activity import ActivityEvent
from docfill.application.dtos.document_type import (
    DocumentTypeCreate,
    DocumentTypeResult,
    DocumentTypeUpdate,
    FieldDefinitionInput,
    FieldDefinitionResult,
)
from docfill.application.interfaces.repositories import (
    IDocumentTypeRepository,
    IGeneratedDocumentRepository,
    ITemplateRepository,
)
from docfill.application.interfaces.services import IActivityNotifier, IOutputStore
from docfill.application.services.authorization_service import require_elevated
from docfill.application.services.field_formatter import parse_format_rule
from docfill.domain.enums import DataType
from docfill.domain.exceptions import ResourceNotFoundException, ValidationException
from docfill.domain.value_objects import Actor, is_valid_key
from docfill.shared.enums import ActivityAction, ActivityEntityType
from docfill.shared.telemetry.logging import get_logger

logger = get_logger(__name__)

_LABEL_SPLIT_RE = re.compile(r"[_\s]+")
_INVALID_KEY_CHARS_RE = re.compile(r"[^a-z0-9_]")


def _suggest_type(key: str) -> DataType:
    k = key.lower()
    if "date" in k:
        return DataType.DATE
    if any(word in k for word in ("amount", "total", "price", "cost")):
        return DataType.CURRENCY
    if any(word in k for word in ("year", "count", "percentage", "rate")):
        return DataType.NUMBER
    return DataType.TEXT


def suggest_fields(placeholder_keys: list[str]) -> list[FieldDefinitionInput]:
    """Propose one required field per placeholder token.

    'client_name' -> label 'Client Name', key 'client_name', type text,
    placeholder mapping 'client_name'. Types are guessed from the key.
    """
    suggestions = []
    for key in placeholder_keys:
        label = " ".join(
            word[:1].upper() + word[1:].lower()
            for word in _LABEL_SPLIT_RE.split(key)
            if word
        )
        suggestions.append(
            FieldDefinitionInput(
                label=label,
                field_key=_INVALID_KEY_CHARS_RE.sub("_", key.lower()),
                data_type=_suggest_type(key),
                required=True,
                placeholder_mapping=key,
                options_json=None,
            )
        )
    return suggestions


def _validate_fields(fields: list[FieldDefinitionInput]) -> list[FieldDefinitionInput]:
    """Validate and normalize field inputs; return the cleaned list in the same order."""
    if not fields:
        raise ValidationException("At least one field is required", field="fields")
    cleaned: list[FieldDefinitionInput] = []
    keys: set[str] = set()
    mappings: set[str] = set()
    for f in fields:
        label = (f.label or "").strip()
        if not label:
            raise ValidationException("Field label is required", field="label")
        key = (f.field_key or "").strip()
        if not is_valid_key(key):
            raise ValidationException(
                f'Field key "{key}" must contain only lowercase letters, numbers, and underscores',
                field="field_key",
            )
        if key in keys:
            raise ValidationException(f'Duplicate field key "{key}"', field="field_key")
        keys.add(key)
        try:
            data_type = DataType(f.data_type)
        except ValueError as e:
            raise ValidationException(
                f"Unknown data type: {f.data_type}", field="data_type"
            ) from e
        mapping = (f.placeholder_mapping or "").strip() or None
        if mapping is not None:
            if mapping in mappings:
                raise ValidationException(
                    "Placeholder mappings must be unique across fields",
                    field="placeholder_mapping",
                )
            mappings.add(mapping)
        options_json = (f.options_json or "").strip() or None
        parse_format_rule(options_json)
        cleaned.append(
            FieldDefinitionInput(
                label=label,
                field_key=key,
                data_type=data_type,
                required=f.required,
                placeholder_mapping=mapping,
                options_json=options_json,
            )
        )
    return cleaned


class DocumentTypeService:
    """Document types (templates plus ordered field definitions)."""

    def __init__(
        self,
        document_type_repo: IDocumentTypeRepository,
        template_repo: ITemplateRepository,
        generated_document_repo: IGeneratedDocumentRepository,
        output_store: IOutputStore,
        notifier: IActivityNotifier,
    ) -> None:
        self.document_type_repo = document_type_repo
        self.template_repo = template_repo
        self.generated_document_repo = generated_document_repo
        self.output_store = output_store
        self.notifier = notifier

    async def _require_template(self, template_id: str) -> None:
        if not await self.template_repo.get_by_id(template_id):
            raise ResourceNotFoundException("template", template_id)

    async def create_document_type(
        self, actor: Actor, data: DocumentTypeCreate
    ) -> DocumentTypeResult:
        require_elevated(actor, "create forms")
        name = (data.name or "").strip()
        if not name:
            raise ValidationException("Form name is required", field="name")
        await self._require_template(data.template_id)
        fields = _validate_fields(data.fields)
        created = await self.document_type_repo.create_document_type(
            name=name,
            template_id=data.template_id,
            fields=fields,
            category_id=data.category_id,
        )
        self.notifier.notify(
            ActivityEvent(
                actor_id=actor.id,
                action_type=ActivityAction.FORM_CREATE,
                entity_type=ActivityEntityType.FORM,
                entity_id=created.id,
                metadata={"name": created.name, "field_count": len(created.fields)},
            )
        )
        return created

    async def update_document_type(
        self, actor: Actor, data: DocumentTypeUpdate
    ) -> DocumentTypeResult:
        """Partial update; fields, when given, replace the previous list."""
        require_elevated(actor, "update forms")
        existing = await self.document_type_repo.get_by_id(data.id)
        if existing is None:
            raise ResourceNotFoundException("document_type", data.id)
        name = None
        if data.name is not None:
            name = data.name.strip()
            if not name:
                raise ValidationException("Form name is required", field="name")
        if data.template_id is not None:
            await self._require_template(data.template_id)
        fields = _validate_fields(data.fields) if data.fields is not None else None
        updated = await self.document_type_repo.update_document_type(
            data.id,
            name=name,
            template_id=data.template_id,
            category_id=data.category_id,
            fields=fields,
        )
        if updated is None:
            raise ResourceNotFoundException("document_type", data.id)
        self.notifier.notify(
            ActivityEvent(
                actor_id=actor.id,
                action_type=ActivityAction.FORM_UPDATE,
                entity_type=ActivityEntityType.FORM,
                entity_id=updated.id,
                metadata={"name": updated.name},
            )
        )
        return updated

    async def delete_document_type(
        self, actor: Actor, document_type_id: str, *, delete_documents: bool = False
    ) -> None:
        """Soft delete, or with delete_documents remove its generated documents and hard delete.

        Generated files are removed best-effort; their records are always removed.
        """
        require_elevated(actor, "delete forms")
        existing = await self.document_type_repo.get_by_id(
            document_type_id, include_deleted=True
        )
        if existing is None:
            raise ResourceNotFoundException("document_type", document_type_id)

        if not delete_documents:
            await self.document_type_repo.soft_delete(document_type_id)
            action = ActivityAction.FORM_DELETE_SOFT
            metadata = {"name": existing.name}
        else:
            documents = await self.generated_document_repo.list_by_document_type(
                document_type_id
            )
            files_removed = 0
            for document in documents:
                if await self.output_store.delete(document.file_path):
                    files_removed += 1
            records_removed = await self.generated_document_repo.delete_by_document_type(
                document_type_id
            )
            await self.document_type_repo.hard_delete(document_type_id)
            action = ActivityAction.FORM_DELETE_HARD
            metadata = {
                "name": existing.name,
                "documents_deleted": records_removed,
                "files_deleted": files_removed,
            }
            logger.info(
                "Hard-deleted document type %s with %d generated documents",
                document_type_id,
                records_removed,
            )
        self.notifier.notify(
            ActivityEvent(
                actor_id=actor.id,
                action_type=action,
                entity_type=ActivityEntityType.FORM,
                entity_id=document_type_id,
                metadata=metadata,
            )
        )

    async def list_document_types(self) -> list[DocumentTypeResult]:
        return await self.document_type_repo.list_active()

    async def get_document_type(self, document_type_id: str) -> DocumentTypeResult | None:
        return await self.document_type_repo.get_by_id(document_type_id)

    async def get_fields(self, document_type_id: str) -> list[FieldDefinitionResult]:
        return await self.document_type_repo.get_fields(document_type_id)
