"""Shared contracts for cross-boundary data types.

This package is a LEAF MODULE with no outbound dependencies to core/engine/plugins.

Import patterns:
    from logshark.contracts import RunRequest, RunResponse, MapResult
"""

from logshark.contracts.documents import (
    ID_FIELD,
    DocumentValue,
    RawDocument,
    document_id,
    require_datetime,
    require_int,
    require_str,
)
from logshark.contracts.errors import (
    DestinationWriteFailure,
    DocumentParseError,
    LogsharkError,
    PersisterShutdownError,
    PluginConfigError,
)
from logshark.contracts.results import (
    ERROR_MESSAGE_TEMPLATE,
    MapResult,
    RunRequest,
    RunResponse,
    parse_custom_args,
)
from logshark.contracts.stores import DestinationStore, DocumentQuery, DocumentStore

__all__ = [
    "ERROR_MESSAGE_TEMPLATE",
    "ID_FIELD",
    "DestinationStore",
    "DestinationWriteFailure",
    "DocumentParseError",
    "DocumentQuery",
    "DocumentStore",
    "DocumentValue",
    "LogsharkError",
    "MapResult",
    "PersisterShutdownError",
    "PluginConfigError",
    "RawDocument",
    "RunRequest",
    "RunResponse",
    "document_id",
    "parse_custom_args",
    "require_datetime",
    "require_int",
    "require_str",
]
