"""Generated document operations: list and delete generated documents."""

from __future__ import annotations

from docfill.application.dtos.activity import ActivityEvent
from docfill.application.dtos.generation import DeleteSummary, GeneratedDocumentResult
from docfill.application.interfaces.repositories import IGeneratedDocumentRepository
from docfill.application.interfaces.services import IActivityNotifier, IOutputStore
from docfill.application.services.authorization_service import can_manage_document
from docfill.domain.exceptions import (
    DocfillException,
    ResourceNotFoundException,
    UnauthorizedException,
)
from docfill.domain.value_objects import Actor
from docfill.shared.enums import ActivityAction, ActivityEntityType
from docfill.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


class GeneratedDocumentService:
    """Elevated actors see and delete every document; others only their own."""

    def __init__(
        self,
        generated_document_repo: IGeneratedDocumentRepository,
        output_store: IOutputStore,
        notifier: IActivityNotifier,
    ) -> None:
        self.generated_document_repo = generated_document_repo
        self.output_store = output_store
        self.notifier = notifier

    async def list_generated_documents(
        self, actor: Actor, skip: int = 0, limit: int = 50
    ) -> list[GeneratedDocumentResult]:
        """Return documents newest first: all for elevated actors, own otherwise."""
        if actor.is_elevated:
            return await self.generated_document_repo.list_all(skip=skip, limit=limit)
        return await self.generated_document_repo.list_by_generator(
            actor.id, skip=skip, limit=limit
        )

    async def delete_generated_document(self, actor: Actor, document_id: str) -> None:
        """Delete the record and (best-effort) its file."""
        document = await self.generated_document_repo.get_by_id(document_id)
        if document is None:
            raise ResourceNotFoundException("generated_document", document_id)
        if not can_manage_document(actor, document.generated_by):
            raise UnauthorizedException(
                message="You can only delete reports you generated"
            )
        if not await self.output_store.delete(document.file_path):
            logger.info("File for generated document %s was already gone", document_id)
        await self.generated_document_repo.delete_document(document_id)
        self.notifier.notify(
            ActivityEvent(
                actor_id=actor.id,
                action_type=ActivityAction.REPORT_DELETE,
                entity_type=ActivityEntityType.REPORT,
                entity_id=document_id,
                metadata={
                    "document_type_id": document.document_type_id,
                    "file_path": document.file_path,
                },
            )
        )

    async def delete_generated_documents(
        self, actor: Actor, document_ids: list[str]
    ) -> DeleteSummary:
        """Delete each id independently; failures are collected per id."""
        deleted = 0
        errors: dict[str, str] = {}
        for document_id in document_ids:
            try:
                await self.delete_generated_document(actor, document_id)
            except DocfillException as e:
                errors[document_id] = e.message
                continue
            deleted += 1
        return DeleteSummary(deleted_count=deleted, errors=errors)
