"""Core constants: shared literal values used across layers."""

# Output file extension for rendered Word documents.
DOCX_EXTENSION = ".docx"

# Folder used when a document type name sanitizes to nothing.
DEFAULT_OUTPUT_FOLDER = "report"

# Fallback display names used by bulk generation when a record cannot be resolved.
UNKNOWN_ENTITY_NAME = "Unknown Client"
UNKNOWN_DOCUMENT_TYPE_NAME = "Unknown Form"

# Maximum rows returned by entity search.
ENTITY_SEARCH_LIMIT = 50
