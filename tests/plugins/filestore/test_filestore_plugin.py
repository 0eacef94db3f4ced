# tests/plugins/filestore/test_filestore_plugin.py
"""Tests for the Filestore query and plugin metadata."""

from logshark.plugins.filestore import (
    FilestoreEvent,
    FilestorePlugin,
    build_filestore_query,
    filestore_by_file,
    ignore_unused_filestore_fields_projection,
)
from tests.fixtures.factories import RUN_ID, make_filestore_document


class TestFilestoreQuery:
    def test_filter_selects_filestore_files(self) -> None:
        assert filestore_by_file() == {"file": {"$regex": "^filestore"}}

    def test_projection_excludes_unused_fields(self) -> None:
        assert ignore_unused_filestore_fields_projection() == {
            "pid": 0,
            "tid": 0,
            "req": 0,
            "sess": 0,
            "site": 0,
            "user": 0,
        }

    def test_query_returns_fresh_dicts(self) -> None:
        first = build_filestore_query()
        first.filter["file"] = "mutated"

        assert build_filestore_query().filter == {"file": {"$regex": "^filestore"}}


class TestFilestorePlugin:
    """Plugin metadata the host reads before running."""

    def test_metadata(self) -> None:
        assert FilestorePlugin.name == "Filestore"
        assert FilestorePlugin.collection_name == "filestore"
        assert FilestorePlugin.collection_dependencies == frozenset({"filestore"})
        assert FilestorePlugin.workbook_names == ("Filestore.twb",)
        assert FilestorePlugin.record_type is FilestoreEvent

    def test_build_query(self) -> None:
        query = FilestorePlugin().build_query()

        assert query.filter == {"file": {"$regex": "^filestore"}}
        assert query.projection == ignore_unused_filestore_fields_projection()

    def test_map_document_delegates_to_mapper(self) -> None:
        result = FilestorePlugin().map_document(make_filestore_document(3), RUN_ID)

        assert result.record is not None
        assert result.record.line_number == 3
