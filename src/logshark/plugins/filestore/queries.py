# src/logshark/plugins/filestore/queries.py
"""Server-side query for Filestore events.

The filestore collection holds every line parsed from the Tableau Server
filestore service logs. Events are selected "by file" so that only lines
parsed from filestore log files reach the mapper, and fields the mapper never
reads are projected away to cut transfer volume.
"""

from __future__ import annotations

from typing import Any

from logshark.contracts.stores import DocumentQuery

FILESTORE_COLLECTION = "filestore"

# Anchored so the server can use an index on "file"
FILESTORE_FILE_PATTERN = "^filestore"

# Fields present on every parsed log line that FilestoreEvent does not use
UNUSED_FILESTORE_FIELDS: tuple[str, ...] = ("pid", "tid", "req", "sess", "site", "user")


def filestore_by_file() -> dict[str, Any]:
    return {"file": {"$regex": FILESTORE_FILE_PATTERN}}


def ignore_unused_filestore_fields_projection() -> dict[str, Any]:
    return {field: 0 for field in UNUSED_FILESTORE_FIELDS}


def build_filestore_query() -> DocumentQuery:
    """Filter + projection for Filestore events. Returns fresh dicts on every call."""
    return DocumentQuery(filter=filestore_by_file(), projection=ignore_unused_filestore_fields_projection())
