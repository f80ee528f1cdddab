"""File and folder naming for generated documents (pure string functions)."""

import re

from docfill.core.constants import DEFAULT_OUTPUT_FOLDER, DOCX_EXTENSION

_INVALID_FILE_CHARS_RE = re.compile(r'[<>:"/\\|?*]')
_WHITESPACE_RE = re.compile(r"\s+")
_INVALID_FOLDER_CHARS_RE = re.compile(r"[^a-zA-Z0-9_\- ]")


def sanitize_file_name(name: str | None) -> str:
    """Strip characters invalid in file names, trim, and join whitespace runs with '_'.

    Empty or None (before or after stripping) -> 'Unknown'.
    """
    if not name:
        return "Unknown"
    cleaned = _INVALID_FILE_CHARS_RE.sub("", name).strip()
    cleaned = _WHITESPACE_RE.sub("_", cleaned)
    return cleaned or "Unknown"


def sanitize_folder_name(name: str | None) -> str:
    """Keep letters, digits, '_', '-' and spaces; fall back to 'report'."""
    cleaned = _INVALID_FOLDER_CHARS_RE.sub("", name or "").strip()
    return cleaned or DEFAULT_OUTPUT_FOLDER


def build_bulk_file_name(
    entity_name: str,
    document_type_name: str,
    financial_year: str | None,
    timestamp: str,
    extension: str = DOCX_EXTENSION,
) -> str:
    """Return '<Entity>_<DocumentType>[_<FY>]_<timestamp><ext>' with each part sanitized."""
    parts = [sanitize_file_name(entity_name), sanitize_file_name(document_type_name)]
    if financial_year and financial_year.strip():
        parts.append(sanitize_file_name(financial_year))
    parts.append(timestamp)
    return "_".join(parts) + extension
