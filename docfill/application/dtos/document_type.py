"""DTOs for templates, document types and their field definitions (no dependency on ORM)."""

from dataclasses import dataclass, field
from datetime import datetime

from docfill.domain.enums import DataType


@dataclass(frozen=True)
class TemplateResult:
    """Template read-model. file_path points at the .docx skeleton on disk."""

    id: str
    name: str
    file_path: str
    created_at: datetime | None = None


@dataclass(frozen=True)
class FieldDefinitionInput:
    """One field of a document type as supplied on create/update (or suggested)."""

    label: str
    field_key: str
    data_type: DataType | str = DataType.TEXT
    required: bool = False
    placeholder_mapping: str | None = None
    options_json: str | None = None


@dataclass(frozen=True)
class FieldDefinitionResult:
    """Field definition read-model, ordered by position within its document type."""

    id: str
    document_type_id: str
    label: str
    field_key: str
    data_type: str
    required: bool
    placeholder_mapping: str | None
    options_json: str | None
    position: int


@dataclass(frozen=True)
class DocumentTypeCreate:
    """Input for create_document_type."""

    name: str
    template_id: str
    fields: list[FieldDefinitionInput]
    category_id: str | None = None


@dataclass(frozen=True)
class DocumentTypeUpdate:
    """Partial update for a document type. fields, when given, replace the previous list."""

    id: str
    name: str | None = None
    template_id: str | None = None
    category_id: str | None = None
    fields: list[FieldDefinitionInput] | None = None


@dataclass(frozen=True)
class DocumentTypeResult:
    """Document type read-model with its ordered field definitions."""

    id: str
    name: str
    template_id: str
    category_id: str | None
    is_deleted: bool
    created_at: datetime
    updated_at: datetime
    fields: list[FieldDefinitionResult] = field(default_factory=list)
