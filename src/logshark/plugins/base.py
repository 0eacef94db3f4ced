# src/logshark/plugins/base.py
"""Base class for document-to-table plugins.

A plugin supplies three things: a query selecting the documents it cares
about, a mapper turning one document into one output record, and metadata the
host uses before and after the run (collection dependencies, workbook names).
The execution pipeline itself lives in PluginOrchestrator and is shared by
every plugin.

Usage:
    class ApacheRequests(BasePlugin):
        name = "Apache"
        collection_name = "httpd"
        collection_dependencies = frozenset({"httpd"})
        workbook_names = ("Apache.twb",)
        record_type = ApacheRequest
        record_label = "apache requests"

        def build_query(self) -> DocumentQuery:
            return DocumentQuery(filter={"request": {"$exists": True}})

        def map_document(self, document, run_id):
            return map_apache_request(document, run_id)
"""

from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, ClassVar

from pydantic import BaseModel

from logshark.contracts.documents import RawDocument
from logshark.contracts.results import MapResult, RunRequest, RunResponse
from logshark.contracts.stores import DocumentQuery

if TYPE_CHECKING:
    from logshark.plugins.context import PluginContext


class BasePlugin(ABC):
    """Base class for plugins that map one collection into one table.

    Subclasses set the class attributes and implement build_query() and
    map_document(). map_document() runs concurrently on pool worker threads,
    so it must not mutate plugin state.
    """

    name: ClassVar[str]
    plugin_version: ClassVar[str] = "1.0.0"
    collection_name: ClassVar[str]
    collection_dependencies: ClassVar[frozenset[str]] = frozenset()
    workbook_names: ClassVar[tuple[str, ...]] = ()
    record_type: ClassVar[type[BaseModel]]
    record_label: ClassVar[str] = "records"

    @abstractmethod
    def build_query(self) -> DocumentQuery:
        """Filter and projection selecting this plugin's documents."""
        ...

    @abstractmethod
    def map_document(self, document: RawDocument, run_id: uuid.UUID) -> MapResult[BaseModel]:
        """Map one raw document to one output record. Must not raise for bad data."""
        ...

    def execute(self, request: RunRequest, ctx: PluginContext) -> RunResponse:
        """Run the full count/stream/transform/persist pipeline for this plugin.

        Raises:
            DestinationWriteFailure: If the destination store rejects a batch.
        """
        from logshark.engine.orchestrator import PluginOrchestrator

        return PluginOrchestrator(self, ctx).execute(request)
