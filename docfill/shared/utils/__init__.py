"""Shared utilities: datetime, dates, file names, record ids."""

from docfill.shared.utils.dates import (
    DATE_LAYOUTS,
    DEFAULT_DATE_LAYOUT,
    format_calendar_date,
    parse_calendar_date,
)
from docfill.shared.utils.datetime import ensure_utc, file_timestamp, utc_now
from docfill.shared.utils.file_names import (
    build_bulk_file_name,
    sanitize_file_name,
    sanitize_folder_name,
)
from docfill.shared.utils.ids import new_record_id

__all__ = [
    "DATE_LAYOUTS",
    "DEFAULT_DATE_LAYOUT",
    "build_bulk_file_name",
    "ensure_utc",
    "file_timestamp",
    "format_calendar_date",
    "new_record_id",
    "parse_calendar_date",
    "sanitize_file_name",
    "sanitize_folder_name",
    "utc_now",
]
