# src/logshark/contracts/documents.py
"""Schema-less documents and typed field access.

Documents arrive from the document store as plain mappings of field name to
a BSON-decoded value. Nothing about their shape is guaranteed, so mappers read
fields through the ``require_*`` helpers below, which raise DocumentParseError
naming the document and the defect instead of KeyError/TypeError.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from bson import ObjectId

from logshark.contracts.errors import DocumentParseError

type DocumentValue = (
    str | int | float | bool | datetime | ObjectId | None | list[DocumentValue] | dict[str, DocumentValue]
)
type RawDocument = Mapping[str, DocumentValue]

ID_FIELD = "_id"


def document_id(document: RawDocument) -> Any:
    """Return the document's ``_id``, or ``"<unknown>"`` if it has none."""
    return document.get(ID_FIELD, "<unknown>")


def _require(document: RawDocument, field: str) -> DocumentValue:
    if field not in document or document[field] is None:
        raise DocumentParseError(document_id(document), f"missing required field '{field}'")
    return document[field]


def require_str(document: RawDocument, field: str, *, allow_empty: bool = True) -> str:
    value = _require(document, field)
    if not isinstance(value, str):
        raise DocumentParseError(
            document_id(document),
            f"field '{field}' must be a string, got {type(value).__name__}",
        )
    if not allow_empty and not value.strip():
        raise DocumentParseError(document_id(document), f"field '{field}' must not be empty")
    return value


def require_int(document: RawDocument, field: str, *, minimum: int | None = None) -> int:
    """Read an integer field, optionally enforcing a lower bound.

    Booleans are rejected even though bool is an int subclass; a ``True``
    line number is a defect in the source data, not the value 1.
    """
    value = _require(document, field)
    if isinstance(value, bool) or not isinstance(value, int):
        raise DocumentParseError(
            document_id(document),
            f"field '{field}' must be an integer, got {type(value).__name__}",
        )
    if minimum is not None and value < minimum:
        raise DocumentParseError(
            document_id(document),
            f"field '{field}' must be >= {minimum}, got {value}",
        )
    return value


def require_datetime(document: RawDocument, field: str) -> datetime:
    """Read a timestamp field as an aware UTC datetime.

    Accepts BSON dates (decoded as naive UTC datetimes by default) and
    ISO-8601 strings.
    """
    value = _require(document, field)
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value)
        except ValueError:
            raise DocumentParseError(
                document_id(document),
                f"field '{field}' is not an ISO-8601 timestamp: {value!r}",
            ) from None
    else:
        raise DocumentParseError(
            document_id(document),
            f"field '{field}' must be a timestamp, got {type(value).__name__}",
        )

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)
