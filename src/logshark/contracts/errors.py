# src/logshark/contracts/errors.py
"""Exception taxonomy for plugin runs.

Per-document failures are recoverable: the document is skipped and an entry
is appended to the RunResponse. Destination write failures are fatal and
propagate to the host instead of being folded into the response.

    LogsharkError
    ├── DocumentParseError        per document, recorded, run continues
    ├── PersisterShutdownError    enqueue rejected after shutdown began
    ├── DestinationWriteFailure   batch write failed, run aborts
    └── PluginConfigError         invalid settings or custom arguments
"""

from __future__ import annotations

from typing import Any


class LogsharkError(Exception):
    """Base class for all logshark errors."""


class DocumentParseError(LogsharkError):
    """A raw document could not be mapped to an output record.

    Attributes:
        document_id: Identifier of the offending document (its ``_id``)
        defect: What is wrong with the document, e.g. "missing required field 'ts'"
    """

    def __init__(self, document_id: Any, defect: str) -> None:
        super().__init__(defect)
        self.document_id = document_id
        self.defect = defect


class PersisterShutdownError(LogsharkError):
    """Raised by enqueue() once the persister has started shutting down."""


class DestinationWriteFailure(LogsharkError):
    """A batch write to the destination store failed.

    Fatal for the run. Always chained (``raise ... from``) to the exception
    raised by the destination store.

    Attributes:
        records_unwritten: Records accepted by the persister that never
            reached the destination
    """

    def __init__(self, message: str, *, records_unwritten: int = 0) -> None:
        super().__init__(message)
        self.records_unwritten = records_unwritten


class PluginConfigError(LogsharkError):
    """Raised when settings or custom plugin arguments are invalid."""
