"""Document type use cases."""

from docfill.application.use_cases.document_types.document_type_operations import (
    DocumentTypeService,
    suggest_fields,
)

__all__ = ["DocumentTypeService", "suggest_fields"]
