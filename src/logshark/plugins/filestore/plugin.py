# src/logshark/plugins/filestore/plugin.py
"""Filestore plugin: filestore service log lines -> filestore_events table."""

from __future__ import annotations

import uuid

from logshark.contracts.documents import RawDocument
from logshark.contracts.results import MapResult
from logshark.contracts.stores import DocumentQuery
from logshark.plugins.base import BasePlugin
from logshark.plugins.filestore.models import FilestoreEvent, map_filestore_event
from logshark.plugins.filestore.queries import FILESTORE_COLLECTION, build_filestore_query


class FilestorePlugin(BasePlugin):
    """Extracts Filestore events for the Filestore workbook."""

    name = "Filestore"
    plugin_version = "1.0.0"
    collection_name = FILESTORE_COLLECTION
    collection_dependencies = frozenset({FILESTORE_COLLECTION})
    workbook_names = ("Filestore.twb",)
    record_type = FilestoreEvent
    record_label = "filestore events"

    def build_query(self) -> DocumentQuery:
        return build_filestore_query()

    def map_document(self, document: RawDocument, run_id: uuid.UUID) -> MapResult[FilestoreEvent]:
        return map_filestore_event(document, run_id)
