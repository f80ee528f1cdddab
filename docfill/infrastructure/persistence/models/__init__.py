"""ORM models. Importing this package registers every table on Base.metadata."""

from docfill.infrastructure.persistence.models.activity_log import ActivityLog
from docfill.infrastructure.persistence.models.document_type import (
    DocumentType,
    FieldDefinition,
)
from docfill.infrastructure.persistence.models.entity import AttributeValue, Entity
from docfill.infrastructure.persistence.models.entity_type import (
    AttributeDefinition,
    EntityTypeSchema,
)
from docfill.infrastructure.persistence.models.generated_document import (
    GeneratedDocument,
)
from docfill.infrastructure.persistence.models.template import Template

__all__ = [
    "ActivityLog",
    "AttributeDefinition",
    "AttributeValue",
    "DocumentType",
    "Entity",
    "EntityTypeSchema",
    "FieldDefinition",
    "GeneratedDocument",
    "Template",
]
