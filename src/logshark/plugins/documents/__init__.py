# src/logshark/plugins/documents/__init__.py
"""Document store implementations."""

from logshark.plugins.documents.mongo_store import DEFAULT_FIND_BATCH_SIZE, MongoDocumentStore

__all__ = [
    "DEFAULT_FIND_BATCH_SIZE",
    "MongoDocumentStore",
]
