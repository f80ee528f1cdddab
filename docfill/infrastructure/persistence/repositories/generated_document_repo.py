"""GeneratedDocument repository. Returns application DTOs."""

import json

from sqlalchemy import delete as sa_delete
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from docfill.application.dtos.generation import (
    GeneratedDocumentCreate,
    GeneratedDocumentResult,
)
from docfill.infrastructure.persistence.models.generated_document import (
    GeneratedDocument,
)
from docfill.infrastructure.persistence.repositories.base import BaseRepository
from docfill.shared.telemetry.logging import get_logger
from docfill.shared.utils.datetime import ensure_utc

logger = get_logger(__name__)


def _decode_input_values(raw: str | None, document_id: str) -> dict[str, str]:
    if not raw:
        return {}
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("Generated document %s has unreadable input_values", document_id)
        return {}
    return data if isinstance(data, dict) else {}


def _to_result(d: GeneratedDocument) -> GeneratedDocumentResult:
    """Map ORM GeneratedDocument to GeneratedDocumentResult."""
    return GeneratedDocumentResult(
        id=d.id,
        document_type_id=d.document_type_id,
        generated_by=d.generated_by,
        entity_id=d.entity_id,
        file_path=d.file_path,
        generated_at=ensure_utc(d.generated_at),
        input_values=_decode_input_values(d.input_values, d.id),
    )


class GeneratedDocumentRepository(BaseRepository[GeneratedDocument]):
    """Generated document records (file paths and input snapshots)."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, GeneratedDocument)

    async def create_document(
        self, data: GeneratedDocumentCreate
    ) -> GeneratedDocumentResult:
        row = await self.create(
            GeneratedDocument(
                document_type_id=data.document_type_id,
                generated_by=data.generated_by,
                entity_id=data.entity_id,
                file_path=data.file_path,
                input_values=json.dumps(data.input_values, ensure_ascii=False),
            )
        )
        return _to_result(row)

    async def get_by_id(self, document_id: str) -> GeneratedDocumentResult | None:
        row = await self.get_orm_by_id(document_id)
        return _to_result(row) if row else None

    async def update_file_path(self, document_id: str, file_path: str) -> bool:
        row = await self.get_orm_by_id(document_id)
        if row is None:
            return False
        row.file_path = file_path
        await self.db.flush()
        return True

    async def list_all(
        self, skip: int = 0, limit: int = 50
    ) -> list[GeneratedDocumentResult]:
        result = await self.db.execute(
            select(GeneratedDocument)
            .order_by(GeneratedDocument.generated_at.desc())
            .offset(skip)
            .limit(limit)
        )
        return [_to_result(d) for d in result.scalars().all()]

    async def list_by_generator(
        self, generated_by: str, skip: int = 0, limit: int = 50
    ) -> list[GeneratedDocumentResult]:
        result = await self.db.execute(
            select(GeneratedDocument)
            .where(GeneratedDocument.generated_by == generated_by)
            .order_by(GeneratedDocument.generated_at.desc())
            .offset(skip)
            .limit(limit)
        )
        return [_to_result(d) for d in result.scalars().all()]

    async def list_by_document_type(
        self, document_type_id: str
    ) -> list[GeneratedDocumentResult]:
        result = await self.db.execute(
            select(GeneratedDocument).where(
                GeneratedDocument.document_type_id == document_type_id
            )
        )
        return [_to_result(d) for d in result.scalars().all()]

    async def delete_document(self, document_id: str) -> bool:
        row = await self.get_orm_by_id(document_id)
        if row is None:
            return False
        await super().delete(row)
        return True

    async def delete_by_document_type(self, document_type_id: str) -> int:
        result = await self.db.execute(
            sa_delete(GeneratedDocument).where(
                GeneratedDocument.document_type_id == document_type_id
            )
        )
        return result.rowcount or 0
