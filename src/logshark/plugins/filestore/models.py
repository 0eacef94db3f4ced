# src/logshark/plugins/filestore/models.py
"""FilestoreEvent output record and the document mapper that builds it.

Raw filestore documents (one per parsed log line) look like:

    {
        "_id": ObjectId("..."),
        "ts": datetime(2024, 1, 15, 12, 0, 3, 120000),
        "sev": "INFO",
        "class": "com.tableausoftware.tdfs.filestore.app.Controller",
        "message": "Reaped 3 folders",
        "file": "filestore.log",
        "file_path": "worker0/filestore/logs/filestore.log",
        "line": 1042,
        "worker": 0,
        # projected away server-side: pid, tid, req, sess, site, user
    }
"""

from __future__ import annotations

import hashlib
import uuid
from datetime import datetime
from typing import ClassVar

from pydantic import BaseModel, ConfigDict

from logshark.contracts.documents import RawDocument, document_id, require_datetime, require_int, require_str
from logshark.contracts.errors import DocumentParseError
from logshark.contracts.results import MapResult

SEVERITIES = frozenset({"TRACE", "DEBUG", "INFO", "WARN", "ERROR", "FATAL"})
_SEVERITY_ALIASES = {"WARNING": "WARN"}


class FilestoreEvent(BaseModel):
    """One filestore log line, stamped with the run that produced it.

    Immutable once constructed. event_hash is derived from the run and the
    line's location, so re-mapping the same document in the same run yields
    an identical record.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    __tablename__: ClassVar[str] = "filestore_events"

    logset_hash: uuid.UUID
    event_hash: str
    timestamp: datetime
    worker: int
    file_name: str
    file_path: str
    line_number: int
    severity: str
    class_name: str
    message: str


def compute_event_hash(logset_hash: uuid.UUID, worker: int, file_path: str, line_number: int) -> str:
    """Stable SHA-256 identifying one log line within one run."""
    key = f"{logset_hash}|{worker}|{file_path}|{line_number}"
    return hashlib.sha256(key.encode("utf-8")).hexdigest()


def _normalize_severity(document: RawDocument) -> str:
    raw = require_str(document, "sev", allow_empty=False).strip().upper()
    severity = _SEVERITY_ALIASES.get(raw, raw)
    if severity not in SEVERITIES:
        raise DocumentParseError(document_id(document), f"unknown severity {raw!r}")
    return severity


def map_filestore_event(document: RawDocument, run_id: uuid.UUID) -> MapResult[FilestoreEvent]:
    """Map one raw filestore document to a FilestoreEvent.

    Returns:
        MapResult.success(event), or MapResult.failure(DocumentParseError)
        naming the document and the first defect found.
    """
    try:
        worker = require_int(document, "worker", minimum=0)
        file_path = require_str(document, "file_path", allow_empty=False)
        line_number = require_int(document, "line", minimum=1)
        event = FilestoreEvent(
            logset_hash=run_id,
            event_hash=compute_event_hash(run_id, worker, file_path, line_number),
            timestamp=require_datetime(document, "ts"),
            worker=worker,
            file_name=require_str(document, "file", allow_empty=False),
            file_path=file_path,
            line_number=line_number,
            severity=_normalize_severity(document),
            class_name=require_str(document, "class", allow_empty=False),
            message=require_str(document, "message"),
        )
    except DocumentParseError as e:
        return MapResult.failure(e)
    return MapResult.success(event)
