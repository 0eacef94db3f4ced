# src/logshark/plugins/filestore/__init__.py
"""Filestore service log plugin."""

from logshark.plugins.filestore.models import FilestoreEvent, compute_event_hash, map_filestore_event
from logshark.plugins.filestore.plugin import FilestorePlugin
from logshark.plugins.filestore.queries import (
    FILESTORE_COLLECTION,
    UNUSED_FILESTORE_FIELDS,
    build_filestore_query,
    filestore_by_file,
    ignore_unused_filestore_fields_projection,
)

__all__ = [
    "FILESTORE_COLLECTION",
    "UNUSED_FILESTORE_FIELDS",
    "FilestoreEvent",
    "FilestorePlugin",
    "build_filestore_query",
    "compute_event_hash",
    "filestore_by_file",
    "ignore_unused_filestore_fields_projection",
    "map_filestore_event",
]
