# tests/fixtures/factories.py
"""Factories for raw filestore documents."""

import uuid
from datetime import datetime
from typing import Any

RUN_ID = uuid.UUID("3f2a9c1e-8d4b-4e6f-9a1b-2c3d4e5f6a7b")


def make_filestore_document(line: int = 1, **overrides: Any) -> dict[str, Any]:
    """A well-formed raw filestore document; keyword overrides replace fields.

    Overriding a field with None makes it count as missing.
    """
    document: dict[str, Any] = {
        "_id": f"doc-{line}",
        "ts": datetime(2024, 1, 15, 12, 0, 3, 120000),
        "sev": "INFO",
        "class": "com.tableausoftware.tdfs.filestore.app.Controller",
        "message": f"Reaped {line} folders",
        "file": "filestore.log",
        "file_path": "worker0/filestore/logs/filestore.log",
        "line": line,
        "worker": 0,
        "pid": 4242,
        "tid": "1f",
        "req": "-",
        "sess": "-",
        "site": "Default",
        "user": "admin",
    }
    document.update(overrides)
    return document


def without(document: dict[str, Any], *fields: str) -> dict[str, Any]:
    """Copy of document with the given fields removed."""
    return {key: value for key, value in document.items() if key not in fields}
