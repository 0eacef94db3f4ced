# tests/plugins/filestore/test_filestore_models.py
"""Tests for the FilestoreEvent mapper."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime

import pytest
from bson import ObjectId
from pydantic import ValidationError

from logshark.plugins.filestore.models import FilestoreEvent, compute_event_hash, map_filestore_event
from tests.fixtures.factories import RUN_ID, make_filestore_document, without


class TestMapFilestoreEvent:
    """Successful mapping."""

    def test_maps_all_fields(self) -> None:
        result = map_filestore_event(make_filestore_document(42), RUN_ID)

        assert result.is_success
        event = result.record
        assert event is not None
        assert event.logset_hash == RUN_ID
        assert event.timestamp == datetime(2024, 1, 15, 12, 0, 3, 120000, tzinfo=UTC)
        assert event.worker == 0
        assert event.file_name == "filestore.log"
        assert event.file_path == "worker0/filestore/logs/filestore.log"
        assert event.line_number == 42
        assert event.severity == "INFO"
        assert event.class_name == "com.tableausoftware.tdfs.filestore.app.Controller"
        assert event.message == "Reaped 42 folders"
        assert event.event_hash == compute_event_hash(RUN_ID, 0, "worker0/filestore/logs/filestore.log", 42)

    def test_same_document_same_run_same_record(self) -> None:
        document = make_filestore_document(7)

        assert map_filestore_event(document, RUN_ID).record == map_filestore_event(document, RUN_ID).record

    def test_different_run_different_hash(self) -> None:
        document = make_filestore_document(7)

        first = map_filestore_event(document, RUN_ID).record
        second = map_filestore_event(document, uuid.uuid4()).record

        assert first is not None and second is not None
        assert first.event_hash != second.event_hash

    @pytest.mark.parametrize(("raw", "expected"), [("warning", "WARN"), ("WARN", "WARN"), (" error ", "ERROR"), ("fatal", "FATAL")])
    def test_severity_normalized(self, raw: str, expected: str) -> None:
        record = map_filestore_event(make_filestore_document(sev=raw), RUN_ID).record

        assert record is not None
        assert record.severity == expected

    def test_empty_message_allowed(self) -> None:
        assert map_filestore_event(make_filestore_document(message=""), RUN_ID).is_success

    def test_record_is_frozen(self) -> None:
        record = map_filestore_event(make_filestore_document(), RUN_ID).record
        assert record is not None

        with pytest.raises(ValidationError):
            record.message = "changed"  # type: ignore[misc]


class TestMapFilestoreEventFailures:
    """Defective documents become failures naming the document."""

    @pytest.mark.parametrize("field", ["ts", "sev", "class", "message", "file", "file_path", "line", "worker"])
    def test_missing_required_field(self, field: str) -> None:
        oid = ObjectId()
        document = without(make_filestore_document(_id=oid), field)

        result = map_filestore_event(document, RUN_ID)

        assert not result.is_success
        assert result.error is not None
        assert result.error.document_id == oid
        assert result.error.defect == f"missing required field '{field}'"

    def test_unknown_severity(self) -> None:
        result = map_filestore_event(make_filestore_document(sev="LOUD"), RUN_ID)

        assert result.error is not None
        assert result.error.defect == "unknown severity 'LOUD'"

    def test_line_number_must_be_positive(self) -> None:
        result = map_filestore_event(make_filestore_document(line=0), RUN_ID)

        assert result.error is not None
        assert "'line' must be >= 1" in result.error.defect

    def test_negative_worker_rejected(self) -> None:
        result = map_filestore_event(make_filestore_document(worker=-1), RUN_ID)

        assert result.error is not None
        assert "'worker' must be >= 0" in result.error.defect

    def test_blank_file_rejected(self) -> None:
        result = map_filestore_event(make_filestore_document(file=""), RUN_ID)

        assert result.error is not None
        assert result.error.defect == "field 'file' must not be empty"

    def test_mapper_never_raises_for_bad_types(self) -> None:
        result = map_filestore_event(make_filestore_document(line="12", ts=3.5), RUN_ID)

        assert not result.is_success


class TestFilestoreEventModel:
    def test_table_name(self) -> None:
        assert FilestoreEvent.__tablename__ == "filestore_events"

    def test_extra_fields_rejected(self) -> None:
        record = map_filestore_event(make_filestore_document(), RUN_ID).record
        assert record is not None

        with pytest.raises(ValidationError):
            FilestoreEvent(**record.model_dump(), pid=4242)
