# src/logshark/engine/orchestrator.py
"""PluginOrchestrator: drives one plugin invocation end to end.

State machine:

    IDLE ──execute()──> COUNTING ──> STREAMING ──> DRAINING ──> COMPLETED
                            │            │             │
                            └────────────┴─────────────┴──> FAILED (exception propagates)

- COUNTING: build the plugin's query and count matching documents (sizes
  the progress reporter).
- STREAMING: prepare the destination table, then for every document the
  cursor yields submit one task to the bounded pool: map the document and
  enqueue the record, or record an error for it. The state only advances once
  the cursor is exhausted AND every task has finished.
- DRAINING: persister.shutdown() blocks until every accepted record has
  been written.
- COMPLETED: flag an empty result and return the finalized response.

Accounting: every document the cursor yields ends up either persisted or as
exactly one entry in RunResponse.errors. A destination write failure is not a
per-document outcome; it aborts the run and propagates to the caller.
"""

from __future__ import annotations

import uuid
from enum import StrEnum
from typing import TYPE_CHECKING

import structlog
from pydantic import BaseModel

from logshark.contracts.documents import RawDocument, document_id
from logshark.contracts.errors import DestinationWriteFailure, PersisterShutdownError
from logshark.contracts.results import MapResult, RunRequest, RunResponse
from logshark.core.logging import get_logger, get_run_logger
from logshark.engine.progress import PersisterStatusWriter
from logshark.plugins.persistence.batch_persister import ConcurrentBatchPersister
from logshark.plugins.pooling.executor import BoundedTaskPool

if TYPE_CHECKING:
    from logshark.plugins.base import BasePlugin
    from logshark.plugins.context import PluginContext


class OrchestratorState(StrEnum):
    IDLE = "idle"
    COUNTING = "counting"
    STREAMING = "streaming"
    DRAINING = "draining"
    COMPLETED = "completed"
    FAILED = "failed"


_ALLOWED_TRANSITIONS: dict[OrchestratorState, frozenset[OrchestratorState]] = {
    OrchestratorState.IDLE: frozenset({OrchestratorState.COUNTING}),
    OrchestratorState.COUNTING: frozenset({OrchestratorState.STREAMING, OrchestratorState.FAILED}),
    OrchestratorState.STREAMING: frozenset({OrchestratorState.DRAINING, OrchestratorState.FAILED}),
    OrchestratorState.DRAINING: frozenset({OrchestratorState.COMPLETED, OrchestratorState.FAILED}),
    OrchestratorState.COMPLETED: frozenset(),
    OrchestratorState.FAILED: frozenset(),
}


class PluginOrchestrator:
    """Executes one plugin against one document store and destination.

    One orchestrator per invocation; execute() may only be called once.

    Example:
        ctx = PluginContext(document_store=mongo, destination=sql)
        response = PluginOrchestrator(FilestorePlugin(), ctx).execute(RunRequest.create())
        if response.generated_no_data:
            ...
    """

    def __init__(self, plugin: BasePlugin, ctx: PluginContext) -> None:
        self._plugin = plugin
        self._ctx = ctx
        self._state = OrchestratorState.IDLE
        base_logger = ctx.logger if ctx.logger is not None else get_logger(__name__)
        self._log: structlog.stdlib.BoundLogger = base_logger.bind(plugin=plugin.name)
        self._total_expected = 0
        self._documents_seen = 0
        self._persisted = 0

    @property
    def state(self) -> OrchestratorState:
        return self._state

    @property
    def total_expected(self) -> int:
        """Matching documents counted before streaming began."""
        return self._total_expected

    @property
    def documents_seen(self) -> int:
        """Documents the cursor actually yielded."""
        return self._documents_seen

    @property
    def persisted_count(self) -> int:
        return self._persisted

    def _transition(self, new_state: OrchestratorState) -> None:
        if new_state not in _ALLOWED_TRANSITIONS[self._state]:
            raise RuntimeError(f"Illegal orchestrator transition {self._state} -> {new_state}")
        self._log.debug("orchestrator_state_changed", from_state=str(self._state), to_state=str(new_state))
        self._state = new_state

    def execute(self, request: RunRequest) -> RunResponse:
        """Run the pipeline for one request.

        Returns:
            Finalized RunResponse (possibly with errors and/or generated_no_data).

        Raises:
            DestinationWriteFailure: A batch write failed; the run is aborted.
            Exception: Anything the document store raises while counting or streaming.
        """
        self._transition(OrchestratorState.COUNTING)
        self._log = get_run_logger(self._plugin.name, request.run_id, self._ctx.logger)
        response = RunResponse(self._plugin.name)

        try:
            self._run(request, response)
        except BaseException:
            self._transition(OrchestratorState.FAILED)
            raise

        self._transition(OrchestratorState.COMPLETED)
        return response.finalize()

    def _run(self, request: RunRequest, response: RunResponse) -> None:
        plugin = self._plugin
        store = self._ctx.document_store
        query = plugin.build_query()

        plugin_args = request.plugin_args(plugin.name)
        if plugin_args:
            self._log.info("plugin_args_received", args=plugin_args)

        self._total_expected = store.count(plugin.collection_name, query.filter)
        self._log.info("documents_counted", collection=plugin.collection_name, total=self._total_expected)

        self._transition(OrchestratorState.STREAMING)
        self._ctx.destination.create_or_migrate(plugin.record_type)

        persister: ConcurrentBatchPersister[BaseModel] = ConcurrentBatchPersister(
            self._ctx.destination,
            self._ctx.persister,
            name=f"{plugin.name}-persister",
            clock=self._ctx.clock,
            logger=self._log,
        )
        try:
            with PersisterStatusWriter(
                persister,
                self._total_expected,
                interval_seconds=self._ctx.progress_interval_seconds,
                label=plugin.record_label,
                logger=self._log,
            ):
                self._log.info("queueing_documents", label=plugin.record_label)
                with BoundedTaskPool(self._ctx.pool, name=plugin.name, logger=self._log) as pool:
                    for batch in store.find(plugin.collection_name, query.filter, query.projection):
                        for document in batch:
                            self._documents_seen += 1
                            pool.submit(self._process_document, document, request.run_id, persister, response)
                    pool.join()

                self._transition(OrchestratorState.DRAINING)
                persister.shutdown()
        except BaseException:
            self._abandon(persister)
            raise
        finally:
            self._persisted = persister.persisted_count

        self._log.info(
            "finished_processing",
            label=plugin.record_label,
            persisted=self._persisted,
            errors=len(response.errors),
            documents_seen=self._documents_seen,
        )
        if self._persisted == 0:
            self._log.info("no_data_persisted", label=plugin.record_label)
            response.generated_no_data = True

    def _abandon(self, persister: ConcurrentBatchPersister[BaseModel]) -> None:
        """Stop the persister's writer on the failure path.

        The exception already propagating takes precedence; a write failure
        surfaced here is logged rather than raised over it.
        """
        if persister.is_shutdown:
            return
        try:
            persister.shutdown()
        except DestinationWriteFailure as e:
            self._log.error("persister_failed_during_abort", error=str(e), records_unwritten=e.records_unwritten)

    def _process_document(
        self,
        document: RawDocument,
        run_id: uuid.UUID,
        persister: ConcurrentBatchPersister[BaseModel],
        response: RunResponse,
    ) -> None:
        """Task body: map one document, then enqueue its record or record its error.

        Runs on a pool worker. Per-document failures, including a mapper that
        raises instead of returning a failure, are recorded here and never
        reach sibling tasks. DestinationWriteFailure is left to propagate: it
        is fatal for the whole run.
        """
        doc_id = document_id(document)
        try:
            result = self._plugin.map_document(document, run_id)
            if not isinstance(result, MapResult):
                raise TypeError(f"map_document returned {type(result).__name__}, expected MapResult")
        except Exception as e:
            self._record_error(response, doc_id, f"{type(e).__name__}: {e}")
            return

        record = result.record
        if record is None:
            self._record_error(response, doc_id, str(result.error))
            return

        try:
            persister.enqueue(record)
        except PersisterShutdownError as e:
            self._record_error(response, doc_id, str(e))

    def _record_error(self, response: RunResponse, doc_id: object, message: str) -> None:
        formatted = response.append_document_error(doc_id, message)
        self._log.error("document_failed", document_id=str(doc_id), error=formatted)
