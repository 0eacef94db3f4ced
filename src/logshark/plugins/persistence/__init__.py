# src/logshark/plugins/persistence/__init__.py
"""Batching persistence of output records to the destination store."""

from logshark.plugins.persistence.batch_persister import ConcurrentBatchPersister
from logshark.plugins.persistence.config import PersisterConfig
from logshark.plugins.persistence.sql_store import SqlDestinationStore, columns_for, table_name_for

__all__ = [
    "ConcurrentBatchPersister",
    "PersisterConfig",
    "SqlDestinationStore",
    "columns_for",
    "table_name_for",
]
