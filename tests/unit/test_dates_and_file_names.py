"""Unit tests for calendar date parsing, file timestamps and file naming helpers."""

from datetime import UTC, date, datetime

import pytest

from docfill.shared.utils.dates import format_calendar_date, parse_calendar_date
from docfill.shared.utils.datetime import ensure_utc, file_timestamp
from docfill.shared.utils.file_names import (
    build_bulk_file_name,
    sanitize_file_name,
    sanitize_folder_name,
)


class TestParseCalendarDate:
    def test_iso_date(self) -> None:
        assert parse_calendar_date("2024-02-29") == date(2024, 2, 29)

    def test_preferred_layout_wins_for_ambiguous_input(self) -> None:
        assert parse_calendar_date("03-04-2024", "MM-DD-YYYY") == date(2024, 3, 4)
        assert parse_calendar_date("03-04-2024", "DD-MM-YYYY") == date(2024, 4, 3)

    def test_falls_back_to_other_layouts(self) -> None:
        assert parse_calendar_date("12-31-2024", "DD-MM-YYYY") == date(2024, 12, 31)

    @pytest.mark.parametrize("value", ["", "   ", "31-02-2024", "tomorrow", None, 42])
    def test_invalid(self, value: object) -> None:
        assert parse_calendar_date(value) is None

    def test_datetime_instance(self) -> None:
        assert parse_calendar_date(datetime(2024, 1, 2, 3, 4)) == date(2024, 1, 2)


def test_format_calendar_date_unknown_layout_uses_default() -> None:
    assert format_calendar_date(date(2024, 1, 9), "bogus") == "09-01-2024"


class TestFileTimestamp:
    def test_format(self) -> None:
        moment = datetime(2024, 3, 1, 10, 15, 30, 123456, tzinfo=UTC)
        assert file_timestamp(moment) == "2024-03-01T10-15-30-123Z"

    def test_naive_treated_as_utc(self) -> None:
        assert ensure_utc(datetime(2024, 1, 1)) == datetime(2024, 1, 1, tzinfo=UTC)

    def test_no_path_unsafe_characters(self) -> None:
        stamp = file_timestamp()
        assert ":" not in stamp and "." not in stamp


class TestSanitizeFileName:
    def test_invalid_characters_removed(self) -> None:
        assert sanitize_file_name('Acme <Corp>: "A/B"|?*') == "Acme_Corp_AB"

    def test_whitespace_runs_collapse(self) -> None:
        assert sanitize_file_name("  Acme   Pvt\tLtd ") == "Acme_Pvt_Ltd"

    @pytest.mark.parametrize("value", [None, "", "<>:?"])
    def test_empty_becomes_unknown(self, value: str | None) -> None:
        assert sanitize_file_name(value) == "Unknown"


class TestSanitizeFolderName:
    def test_keeps_allowed_characters(self) -> None:
        assert sanitize_folder_name(" GST Return - Q1 (2024) ") == "GST Return - Q1 2024"

    def test_fallback(self) -> None:
        assert sanitize_folder_name("###") == "report"
        assert sanitize_folder_name(None) == "report"


class TestBuildBulkFileName:
    def test_with_financial_year(self) -> None:
        name = build_bulk_file_name("Acme Corp", "Invoice", "2023-24", "T1")
        assert name == "Acme_Corp_Invoice_2023-24_T1.docx"

    def test_without_financial_year(self) -> None:
        assert build_bulk_file_name("Acme", "Form 16", None, "T1") == "Acme_Form_16_T1.docx"

    def test_blank_financial_year_omitted(self) -> None:
        assert build_bulk_file_name("Acme", "Invoice", "  ", "T1") == "Acme_Invoice_T1.docx"

    def test_custom_extension(self) -> None:
        assert build_bulk_file_name("A", "B", None, "T", ".pdf") == "A_B_T.pdf"
