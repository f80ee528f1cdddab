"""Template repository. Returns application DTOs."""

from sqlalchemy.ext.asyncio import AsyncSession

from docfill.application.dtos.document_type import TemplateResult
from docfill.infrastructure.persistence.models.template import Template
from docfill.infrastructure.persistence.repositories.base import BaseRepository
from docfill.shared.utils.datetime import ensure_utc


def _to_result(t: Template) -> TemplateResult:
    """Map ORM Template to TemplateResult."""
    return TemplateResult(
        id=t.id,
        name=t.name,
        file_path=t.file_path,
        created_at=ensure_utc(t.created_at),
    )


class TemplateRepository(BaseRepository[Template]):
    """Template lookup; templates are uploaded by an external collaborator."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Template)

    async def get_by_id(self, template_id: str) -> TemplateResult | None:
        row = await self.get_orm_by_id(template_id)
        return _to_result(row) if row else None

    async def create_template(self, name: str, file_path: str) -> TemplateResult:
        row = await self.create(Template(name=name, file_path=file_path))
        return _to_result(row)
