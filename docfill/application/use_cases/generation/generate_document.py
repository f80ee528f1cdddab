"""Single-item generation: resolve values, format, render, write and record one document."""

from __future__ import annotations

import asyncio
from typing import Any

from docfill.application.dtos.activity import ActivityEvent
from docfill.application.dtos.attribute import EntityResult
from docfill.application.dtos.document_type import FieldDefinitionResult
from docfill.application.dtos.generation import (
    GeneratedDocumentCreate,
    GeneratedOutput,
    GenerateRequest,
)
from docfill.application.interfaces.services import (
    IActivityNotifier,
    IOutputStore,
    ITemplateEngine,
    UnitOfWorkFactory,
)
from docfill.application.services.field_formatter import (
    decode_format_rule,
    format_field_value,
)
from docfill.domain.exceptions import ResourceNotFoundException, TemplateMissingException
from docfill.domain.value_objects import Actor
from docfill.shared.enums import ActivityAction, ActivityEntityType
from docfill.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


def _as_text(value: Any) -> str:
    """Stringify a raw input value (None -> '', booleans -> 'true'/'false')."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def resolve_field_values(
    fields: list[FieldDefinitionResult],
    manual_values: dict[str, Any],
    entity: EntityResult | None,
) -> dict[str, Any]:
    """Return field_key -> raw value for every field with a placeholder mapping.

    Per field: a non-empty manual value wins, else the entity's stored
    attribute with the same key, else ''.
    """
    resolved: dict[str, Any] = {}
    for field in fields:
        if not field.placeholder_mapping:
            continue
        manual = manual_values.get(field.field_key)
        if manual is not None and _as_text(manual) != "":
            resolved[field.field_key] = manual
        elif entity is not None and entity.attributes.get(field.field_key):
            resolved[field.field_key] = entity.attributes[field.field_key]
        else:
            resolved[field.field_key] = ""
    return resolved


def build_placeholder_values(
    fields: list[FieldDefinitionResult], resolved: dict[str, Any]
) -> dict[str, str]:
    """Return placeholder token -> formatted display string."""
    values: dict[str, str] = {}
    for field in fields:
        if not field.placeholder_mapping:
            continue
        rule = decode_format_rule(field.options_json)
        values[field.placeholder_mapping] = format_field_value(
            resolved.get(field.field_key, ""), field.data_type, rule
        )
    return values


class DocumentGenerator:
    """Generates one document for a document type, optionally prefilled from an entity.

    Datastore access is split into a resolve and a record unit of work so that
    rendering and file I/O never hold the datastore.
    """

    def __init__(
        self,
        unit_of_work: UnitOfWorkFactory,
        template_engine: ITemplateEngine,
        output_store: IOutputStore,
        notifier: IActivityNotifier,
    ) -> None:
        self.unit_of_work = unit_of_work
        self.template_engine = template_engine
        self.output_store = output_store
        self.notifier = notifier

    async def generate(self, actor: Actor, request: GenerateRequest) -> GeneratedOutput:
        """Generate, write and record one document.

        Raises:
            ResourceNotFoundException: document type missing or soft-deleted.
            TemplateMissingException: template record or file missing.
            RenderFailureException: the templating engine failed.
            IOFailureException: the output file could not be written.
        """
        async with self.unit_of_work() as uow:
            document_type = await uow.document_types.get_by_id(request.document_type_id)
            if document_type is None:
                raise ResourceNotFoundException(
                    "document_type", request.document_type_id
                )
            entity = None
            if request.entity_id:
                entity = await uow.entities.get_by_id(request.entity_id)
                if entity is None:
                    logger.warning(
                        "Entity %s not found or deleted; generating %s from manual values only",
                        request.entity_id,
                        document_type.id,
                    )
            template = await uow.templates.get_by_id(document_type.template_id)
        if template is None:
            raise TemplateMissingException(document_type.template_id)

        fields = document_type.fields
        resolved = resolve_field_values(fields, request.manual_values, entity)
        placeholder_values = build_placeholder_values(fields, resolved)

        template_bytes = await self.output_store.read_template(template.file_path)
        rendered = await asyncio.to_thread(
            self.template_engine.render, template_bytes, placeholder_values
        )
        draft = await self.output_store.write_draft(document_type.name, rendered)

        snapshot = {key: _as_text(value) for key, value in resolved.items()}
        try:
            async with self.unit_of_work() as uow:
                record = await uow.generated_documents.create_document(
                    GeneratedDocumentCreate(
                        document_type_id=document_type.id,
                        generated_by=actor.id,
                        entity_id=entity.id if entity else None,
                        file_path=str(draft.path),
                        input_values=snapshot,
                    )
                )
        except Exception:
            await self.output_store.delete(draft.path)
            raise

        logger.info("Generated %s for document type %s", draft.path, document_type.id)
        self.notifier.notify(
            ActivityEvent(
                actor_id=actor.id,
                action_type=ActivityAction.REPORT_GENERATE,
                entity_type=ActivityEntityType.REPORT,
                entity_id=record.id,
                metadata={
                    "document_type_id": document_type.id,
                    "document_type_name": document_type.name,
                    "entity_id": record.entity_id,
                    "file_path": record.file_path,
                },
            )
        )
        return GeneratedOutput(
            record_id=record.id,
            draft=draft,
            generated_at=record.generated_at,
            input_values=snapshot,
        )
