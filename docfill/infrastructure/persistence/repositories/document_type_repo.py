"""DocumentType repository (with ordered FieldDefinitions). Returns application DTOs."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from docfill.application.dtos.document_type import (
    DocumentTypeResult,
    FieldDefinitionInput,
    FieldDefinitionResult,
)
from docfill.domain.enums import DataType
from docfill.infrastructure.persistence.models.document_type import (
    DocumentType,
    FieldDefinition,
)
from docfill.infrastructure.persistence.repositories.base import BaseRepository
from docfill.shared.utils.datetime import ensure_utc


def _field_to_result(f: FieldDefinition) -> FieldDefinitionResult:
    """Map ORM FieldDefinition to FieldDefinitionResult."""
    return FieldDefinitionResult(
        id=f.id,
        document_type_id=f.document_type_id,
        label=f.label,
        field_key=f.field_key,
        data_type=f.data_type,
        required=f.required,
        placeholder_mapping=f.placeholder_mapping,
        options_json=f.options_json,
        position=f.position,
    )


def _to_result(d: DocumentType) -> DocumentTypeResult:
    """Map ORM DocumentType to DocumentTypeResult."""
    return DocumentTypeResult(
        id=d.id,
        name=d.name,
        template_id=d.template_id,
        category_id=d.category_id,
        is_deleted=d.is_deleted,
        created_at=ensure_utc(d.created_at),
        updated_at=ensure_utc(d.updated_at),
        fields=[_field_to_result(f) for f in sorted(d.fields, key=lambda f: f.position)],
    )


def _build_fields(fields: list[FieldDefinitionInput]) -> list[FieldDefinition]:
    return [
        FieldDefinition(
            label=f.label,
            field_key=f.field_key,
            data_type=DataType(f.data_type).value,
            required=f.required,
            placeholder_mapping=f.placeholder_mapping,
            options_json=f.options_json,
            position=position,
        )
        for position, f in enumerate(fields)
    ]


class DocumentTypeRepository(BaseRepository[DocumentType]):
    """Document type repository. Soft-deleted rows are hidden unless include_deleted."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, DocumentType)

    async def get_by_id(
        self, document_type_id: str, *, include_deleted: bool = False
    ) -> DocumentTypeResult | None:
        row = await self.get_orm_by_id(document_type_id)
        if row is None or (row.is_deleted and not include_deleted):
            return None
        return _to_result(row)

    async def list_active(self) -> list[DocumentTypeResult]:
        result = await self.db.execute(
            select(DocumentType)
            .where(DocumentType.is_deleted.is_(False))
            .order_by(DocumentType.name.asc())
        )
        return [_to_result(d) for d in result.scalars().all()]

    async def get_fields(self, document_type_id: str) -> list[FieldDefinitionResult]:
        result = await self.db.execute(
            select(FieldDefinition)
            .where(FieldDefinition.document_type_id == document_type_id)
            .order_by(FieldDefinition.position.asc())
        )
        return [_field_to_result(f) for f in result.scalars().all()]

    async def create_document_type(
        self,
        name: str,
        template_id: str,
        fields: list[FieldDefinitionInput],
        category_id: str | None = None,
    ) -> DocumentTypeResult:
        row = DocumentType(
            name=name,
            template_id=template_id,
            category_id=category_id,
            fields=_build_fields(fields),
        )
        row = await self.create(row)
        return _to_result(row)

    async def update_document_type(
        self,
        document_type_id: str,
        *,
        name: str | None = None,
        template_id: str | None = None,
        category_id: str | None = None,
        fields: list[FieldDefinitionInput] | None = None,
    ) -> DocumentTypeResult | None:
        row = await self.get_orm_by_id(document_type_id)
        if row is None or row.is_deleted:
            return None
        if name is not None:
            row.name = name
        if template_id is not None:
            row.template_id = template_id
        if category_id is not None:
            row.category_id = category_id
        if fields is not None:
            # Flush removals first so the (type, placeholder) constraint sees the new set only.
            row.fields.clear()
            await self.db.flush()
            row.fields.extend(_build_fields(fields))
        row = await self.save(row)
        return _to_result(row)

    async def soft_delete(self, document_type_id: str) -> bool:
        row = await self.get_orm_by_id(document_type_id)
        if row is None:
            return False
        row.is_deleted = True
        await self.save(row)
        return True

    async def hard_delete(self, document_type_id: str) -> bool:
        row = await self.get_orm_by_id(document_type_id)
        if row is None:
            return False
        # fields cascade (delete-orphan)
        await self.delete(row)
        return True
