# src/logshark/contracts/stores.py
"""Protocols for the external stores a plugin reads from and writes to.

Connection bootstrapping lives outside the plugin; the orchestrator only sees
these interfaces.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel

from logshark.contracts.documents import RawDocument


@dataclass(frozen=True)
class DocumentQuery:
    """A filter predicate and field projection evaluated server-side."""

    filter: dict[str, Any]
    projection: dict[str, Any] | None = field(default=None)


@runtime_checkable
class DocumentStore(Protocol):
    """Read side: a schema-less document store."""

    def collection_names(self) -> set[str]:
        """Names of the collections present in the store."""
        ...

    def count(self, collection: str, predicate: dict[str, Any]) -> int:
        """Count documents matching the predicate."""
        ...

    def find(
        self,
        collection: str,
        predicate: dict[str, Any],
        projection: dict[str, Any] | None = None,
    ) -> Iterator[list[RawDocument]]:
        """Stream matching documents in batches.

        The iterator is lazy, finite and forward-only. Exhausting it is the
        only end-of-data signal.
        """
        ...


@runtime_checkable
class DestinationStore(Protocol):
    """Write side: a table-oriented destination for output records."""

    def create_or_migrate(self, record_type: type[BaseModel]) -> None:
        """Create the table for record_type, or add columns it is missing."""
        ...

    def write_batch(self, records: Sequence[BaseModel]) -> None:
        """Durably write a batch of records. Raises on failure."""
        ...
