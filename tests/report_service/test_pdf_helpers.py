"""
Unit tests for report bookkeeping helpers.

Tests filename sanitization, payload validation, scratch files and
PDF listing.
"""

import json
import os
import re
from datetime import datetime, timezone, timedelta
from unittest.mock import patch

import pytest

from report_service.exceptions import InvalidReportError
from report_service.pdf_helpers import (
    build_report_filename,
    format_timestamp,
    list_pdf_files,
    remove_scratch_file,
    sanitize_client_name,
    validate_report,
    write_scratch_file,
)


class TestSanitizeClientName:
    """Tests for sanitize_client_name function."""

    def test_replaces_special_chars_and_lowercases(self):
        assert sanitize_client_name("Acme Corp!") == "acme-corp"
        assert sanitize_client_name("Smith & Sons (NZ) Ltd.") == "smith-sons-nz-ltd"

    def test_preserves_alphanumeric(self):
        assert sanitize_client_name("Client42") == "client42"

    def test_collapses_existing_hyphens(self):
        assert sanitize_client_name("a--b") == "a-b"

    def test_missing_or_empty_defaults_to_report(self):
        assert sanitize_client_name(None) == "report"
        assert sanitize_client_name("") == "report"
        assert sanitize_client_name("!!!") == "report"

    def test_non_string_values(self):
        assert sanitize_client_name(12345) == "12345"

    def test_non_ascii_letters_are_replaced(self):
        assert sanitize_client_name("Café Zoë") == "caf-zo"

    @pytest.mark.parametrize("raw", [
        "Acme Corp!",
        "  leading and trailing  ",
        "ÜBER/../etc/passwd",
        "tab\tand\nnewline",
        "-already-clean-",
    ])
    def test_idempotent_and_filename_safe(self, raw):
        once = sanitize_client_name(raw)
        assert sanitize_client_name(once) == once
        assert re.fullmatch(r"[a-z0-9]+(-[a-z0-9]+)*", once)


class TestBuildReportFilename:
    """Tests for filename and timestamp formatting."""

    def test_timestamp_is_14_digits_utc(self):
        moment = datetime(2024, 3, 5, 7, 8, 9, 987654, tzinfo=timezone.utc)
        assert format_timestamp(moment) == "20240305070809"

    def test_timestamp_converts_to_utc(self):
        moment = datetime(2024, 3, 5, 9, 0, 0, tzinfo=timezone(timedelta(hours=2)))
        assert format_timestamp(moment) == "20240305070000"

    def test_filename_pattern(self):
        filename = build_report_filename("Acme Corp!")
        assert re.fullmatch(r"inspection-acme-corp-\d{14}\.pdf", filename)

    def test_filename_without_client(self):
        moment = datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert build_report_filename(None, moment) == "inspection-report-20240101000000.pdf"

    def test_unique_across_seconds(self):
        first = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
        second = first + timedelta(seconds=1)
        assert build_report_filename("Acme", first) != build_report_filename("Acme", second)


class TestValidateReport:
    """Tests for validate_report function."""

    def test_accepts_empty_rooms_list(self):
        report = {"rooms": []}
        assert validate_report(report) is report

    def test_accepts_rooms_object(self):
        assert validate_report({"rooms": {}})

    @pytest.mark.parametrize("payload", [
        None,
        {},
        [],
        "rooms",
        {"clientName": "Acme"},
        {"rooms": None},
        {"rooms": False},
        {"rooms": 0},
        {"rooms": ""},
    ])
    def test_rejects_missing_rooms(self, payload):
        with pytest.raises(InvalidReportError) as exc_info:
            validate_report(payload)
        assert exc_info.value.status_code == 400
        assert exc_info.value.error == "Invalid report data"


class TestScratchFiles:
    """Tests for scratch file lifecycle."""

    def test_write_creates_directory_and_json(self, tmp_path):
        scratch_dir = tmp_path / "nested" / "scratch"
        report = {"rooms": [{"name": "Kitchen"}], "clientName": "Zoë"}

        path = write_scratch_file(report, scratch_dir)

        assert path.parent == scratch_dir
        assert path.name.startswith("report-data-")
        assert json.loads(path.read_text(encoding="utf-8")) == report

    def test_each_request_gets_its_own_file(self, tmp_path):
        first = write_scratch_file({"rooms": []}, tmp_path)
        second = write_scratch_file({"rooms": []}, tmp_path)
        assert first != second

    def test_remove_deletes_file(self, tmp_path):
        path = write_scratch_file({"rooms": []}, tmp_path)
        remove_scratch_file(path)
        assert not path.exists()

    def test_remove_missing_file_is_noop(self, tmp_path):
        remove_scratch_file(tmp_path / "gone.json")
        remove_scratch_file(None)

    def test_remove_failure_is_logged_not_raised(self, tmp_path, caplog):
        path = write_scratch_file({"rooms": []}, tmp_path)
        with patch("pathlib.Path.unlink", side_effect=PermissionError("read-only")):
            remove_scratch_file(path)
        assert "Cleanup warning" in caplog.text


class TestListPdfFiles:
    """Tests for list_pdf_files function."""

    def test_missing_directory_returns_empty(self, tmp_path):
        assert list_pdf_files(tmp_path / "does-not-exist") == []

    def test_empty_directory_returns_empty(self, tmp_path):
        assert list_pdf_files(tmp_path) == []

    def test_lists_only_pdfs_sorted_newest_first(self, tmp_path):
        base = 1_700_000_000
        for offset, name in [(10, "b.pdf"), (30, "c.pdf"), (20, "a.pdf")]:
            path = tmp_path / name
            path.write_bytes(b"%PDF" * offset)
            os.utime(path, (base + offset, base + offset))
        (tmp_path / "notes.txt").write_text("ignored")
        (tmp_path / "dir.pdf").mkdir()

        entries = list_pdf_files(tmp_path)

        assert [e.name for e in entries] == ["c.pdf", "a.pdf", "b.pdf"]
        assert entries[0].path == "/pdfs/c.pdf"
        assert entries[0].size == 4 * 30
        assert entries[0].created == datetime.fromtimestamp(base + 30, tz=timezone.utc)

    def test_custom_prefix(self, tmp_path):
        (tmp_path / "x.pdf").write_bytes(b"%PDF")
        assert list_pdf_files(tmp_path, public_prefix="/files/")[0].path == "/files/x.pdf"
