# tests/contracts/test_documents.py
"""Tests for typed field access on raw documents."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone

import pytest
from bson import ObjectId

from logshark.contracts.documents import document_id, require_datetime, require_int, require_str
from logshark.contracts.errors import DocumentParseError, LogsharkError


class TestDocumentId:
    def test_returns_object_id(self) -> None:
        oid = ObjectId()

        assert document_id({"_id": oid}) == oid

    def test_missing_id_placeholder(self) -> None:
        assert document_id({}) == "<unknown>"


class TestRequireStr:
    """String field access."""

    def test_reads_string(self) -> None:
        assert require_str({"file": "filestore.log"}, "file") == "filestore.log"

    def test_missing_field_names_field_and_document(self) -> None:
        with pytest.raises(DocumentParseError) as exc_info:
            require_str({"_id": "doc-1"}, "file")

        assert exc_info.value.document_id == "doc-1"
        assert exc_info.value.defect == "missing required field 'file'"

    def test_none_counts_as_missing(self) -> None:
        with pytest.raises(DocumentParseError, match="missing required field 'file'"):
            require_str({"file": None}, "file")

    def test_wrong_type_rejected(self) -> None:
        with pytest.raises(DocumentParseError, match="must be a string, got int"):
            require_str({"file": 3}, "file")

    def test_empty_allowed_by_default(self) -> None:
        assert require_str({"message": ""}, "message") == ""

    def test_blank_rejected_when_not_allowed(self) -> None:
        with pytest.raises(DocumentParseError, match="must not be empty"):
            require_str({"file": "   "}, "file", allow_empty=False)


class TestRequireInt:
    """Integer field access."""

    def test_reads_int(self) -> None:
        assert require_int({"line": 12}, "line") == 12

    def test_bool_rejected(self) -> None:
        with pytest.raises(DocumentParseError, match="must be an integer, got bool"):
            require_int({"line": True}, "line")

    def test_float_rejected(self) -> None:
        with pytest.raises(DocumentParseError, match="must be an integer, got float"):
            require_int({"line": 1.5}, "line")

    def test_minimum_enforced(self) -> None:
        with pytest.raises(DocumentParseError, match="must be >= 1, got 0"):
            require_int({"line": 0}, "line", minimum=1)


class TestRequireDatetime:
    """Timestamp field access."""

    def test_naive_datetime_treated_as_utc(self) -> None:
        value = require_datetime({"ts": datetime(2024, 1, 15, 12, 0)}, "ts")

        assert value == datetime(2024, 1, 15, 12, 0, tzinfo=UTC)

    def test_aware_datetime_converted_to_utc(self) -> None:
        plus_two = timezone(timedelta(hours=2))

        value = require_datetime({"ts": datetime(2024, 1, 15, 14, 0, tzinfo=plus_two)}, "ts")

        assert value == datetime(2024, 1, 15, 12, 0, tzinfo=UTC)
        assert value.tzinfo is UTC

    def test_iso_string_parsed(self) -> None:
        value = require_datetime({"ts": "2024-01-15T12:00:03.120"}, "ts")

        assert value == datetime(2024, 1, 15, 12, 0, 3, 120000, tzinfo=UTC)

    def test_unparseable_string_rejected(self) -> None:
        with pytest.raises(DocumentParseError, match="not an ISO-8601 timestamp"):
            require_datetime({"ts": "yesterday"}, "ts")

    def test_number_rejected(self) -> None:
        with pytest.raises(DocumentParseError, match="must be a timestamp, got int"):
            require_datetime({"ts": 1705320000}, "ts")


class TestErrorTaxonomy:
    def test_document_parse_error_is_logshark_error(self) -> None:
        error = DocumentParseError("doc-1", "bad")

        assert isinstance(error, LogsharkError)
        assert str(error) == "bad"
