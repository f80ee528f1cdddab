"""Repository implementations (SQLAlchemy). Each returns application DTOs."""

from docfill.infrastructure.persistence.repositories.activity_log_repo import (
    ActivityLogRepository,
)
from docfill.infrastructure.persistence.repositories.base import BaseRepository
from docfill.infrastructure.persistence.repositories.document_type_repo import (
    DocumentTypeRepository,
)
from docfill.infrastructure.persistence.repositories.entity_repo import EntityRepository
from docfill.infrastructure.persistence.repositories.entity_type_repo import (
    EntityTypeRepository,
)
from docfill.infrastructure.persistence.repositories.generated_document_repo import (
    GeneratedDocumentRepository,
)
from docfill.infrastructure.persistence.repositories.template_repo import (
    TemplateRepository,
)

__all__ = [
    "ActivityLogRepository",
    "BaseRepository",
    "DocumentTypeRepository",
    "EntityRepository",
    "EntityTypeRepository",
    "GeneratedDocumentRepository",
    "TemplateRepository",
]
