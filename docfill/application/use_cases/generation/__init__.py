"""Generation use cases: single document, bulk batch, generated document management."""

from docfill.application.use_cases.generation.bulk_generation import (
    BulkGenerationService,
)
from docfill.application.use_cases.generation.generate_document import (
    DocumentGenerator,
)
from docfill.application.use_cases.generation.generated_document_operations import (
    GeneratedDocumentService,
)

__all__ = ["BulkGenerationService", "DocumentGenerator", "GeneratedDocumentService"]
