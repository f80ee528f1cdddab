"""Unit of work: the repository bundle bound to one transactional session."""

from sqlalchemy.ext.asyncio import AsyncSession

from docfill.infrastructure.persistence.repositories import (
    ActivityLogRepository,
    DocumentTypeRepository,
    EntityRepository,
    EntityTypeRepository,
    GeneratedDocumentRepository,
    TemplateRepository,
)


class SqlAlchemyUnitOfWork:
    """Repositories sharing one AsyncSession. Created by Database.unit_of_work()."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.templates = TemplateRepository(session)
        self.document_types = DocumentTypeRepository(session)
        self.entity_types = EntityTypeRepository(session)
        self.entities = EntityRepository(session)
        self.generated_documents = GeneratedDocumentRepository(session)
        self.activity_logs = ActivityLogRepository(session)
