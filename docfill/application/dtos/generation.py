"""DTOs for single and bulk document generation (no dependency on ORM)."""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any


@dataclass(frozen=True)
class GenerateRequest:
    """Input for one generation. manual_values maps field_key -> value and wins per field."""

    document_type_id: str
    entity_id: str | None = None
    manual_values: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class DraftOutput:
    """Rendered file at the generator's default location."""

    path: Path


@dataclass(frozen=True)
class PublishedOutput:
    """Result of publishing a draft. path equals draft_path when the rename did not happen."""

    path: Path
    draft_path: Path

    @property
    def renamed(self) -> bool:
        return self.path != self.draft_path


@dataclass(frozen=True)
class GeneratedOutput:
    """Result of DocumentGenerator.generate."""

    record_id: str
    draft: DraftOutput
    generated_at: datetime
    input_values: dict[str, str]

    @property
    def output_path(self) -> Path:
        return self.draft.path


@dataclass(frozen=True)
class GeneratedDocumentCreate:
    """Input for creating a generated document record."""

    document_type_id: str
    generated_by: str
    file_path: str
    input_values: dict[str, str]
    entity_id: str | None = None


@dataclass(frozen=True)
class GeneratedDocumentResult:
    """Generated document read-model. input_values decoded from its JSON column."""

    id: str
    document_type_id: str
    generated_by: str
    entity_id: str | None
    file_path: str
    generated_at: datetime
    input_values: dict[str, str]


@dataclass(frozen=True)
class BatchRequest:
    """Input for a bulk run: every entity is paired with every document type."""

    entity_ids: list[str]
    document_type_ids: list[str]
    financial_year: str | None = None


@dataclass(frozen=True)
class BatchJob:
    """One (entity, document type) pair of a bulk run."""

    entity_id: str
    document_type_id: str


@dataclass(frozen=True)
class BatchItemResult:
    """Outcome of one bulk job."""

    entity_id: str
    entity_name: str
    document_type_id: str
    document_type_name: str
    success: bool
    file_path: str | None = None
    record_id: str | None = None
    error: str | None = None
    error_code: str | None = None


@dataclass(frozen=True)
class BatchProgress:
    """Progress snapshot passed to on_progress before each job and once at the end."""

    total: int
    completed: int
    successful: int
    failed: int
    current_entity_name: str | None = None
    current_document_type_name: str | None = None
    is_complete: bool = False


@dataclass(frozen=True)
class BatchSummary:
    """Aggregate result of a bulk run. reports is in completion order."""

    success: bool
    total: int
    successful: int
    failed: int
    reports: list[BatchItemResult] = field(default_factory=list)


@dataclass(frozen=True)
class DeleteSummary:
    """Result of deleting many generated documents. errors maps id -> message."""

    deleted_count: int
    errors: dict[str, str] = field(default_factory=dict)
