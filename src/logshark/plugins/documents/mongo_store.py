# src/logshark/plugins/documents/mongo_store.py
"""MongoDB document store.

Filtering and projection run server-side; documents are pulled through a
single forward-only cursor and handed to the orchestrator in batches that
match the cursor's fetch size.
"""

from __future__ import annotations

import itertools
from collections.abc import Iterator
from typing import Any

import structlog
from pymongo import MongoClient
from pymongo.database import Database

from logshark.contracts.documents import RawDocument
from logshark.core.logging import get_logger

DEFAULT_FIND_BATCH_SIZE = 1000


class MongoDocumentStore:
    """DocumentStore over a pymongo Database.

    Example:
        >>> store = MongoDocumentStore.from_url("mongodb://localhost:27017", "logset_abc123")
        >>> total = store.count("filestore", {"file": {"$regex": "^filestore"}})
        >>> for batch in store.find("filestore", {"file": {"$regex": "^filestore"}}, {"pid": 0}):
        ...     process(batch)
    """

    def __init__(
        self,
        database: Database[dict[str, Any]],
        *,
        batch_size: int = DEFAULT_FIND_BATCH_SIZE,
        client: MongoClient[dict[str, Any]] | None = None,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        if batch_size < 1:
            raise ValueError(f"batch_size must be >= 1, got {batch_size}")
        self._database = database
        self._batch_size = batch_size
        self._client = client
        self._log = logger if logger is not None else get_logger(__name__)

    @classmethod
    def from_url(cls, url: str, database: str, *, batch_size: int = DEFAULT_FIND_BATCH_SIZE) -> MongoDocumentStore:
        """Connect to a MongoDB deployment. The store owns (and closes) the client."""
        client: MongoClient[dict[str, Any]] = MongoClient(url)
        return cls(client[database], batch_size=batch_size, client=client)

    @property
    def database_name(self) -> str:
        return self._database.name

    def collection_names(self) -> set[str]:
        return set(self._database.list_collection_names())

    def count(self, collection: str, predicate: dict[str, Any]) -> int:
        return self._database[collection].count_documents(predicate)

    def find(
        self,
        collection: str,
        predicate: dict[str, Any],
        projection: dict[str, Any] | None = None,
    ) -> Iterator[list[RawDocument]]:
        """Stream matching documents in batches of batch_size.

        The server cursor is closed when the iterator is exhausted, closed,
        or garbage collected part-way through.
        """
        cursor = self._database[collection].find(predicate, projection, batch_size=self._batch_size)
        self._log.debug("cursor_opened", collection=collection, batch_size=self._batch_size)
        try:
            for batch in itertools.batched(cursor, self._batch_size):
                yield list(batch)
        finally:
            cursor.close()

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
