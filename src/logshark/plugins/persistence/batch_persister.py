# src/logshark/plugins/persistence/batch_persister.py
"""Concurrent batching persister with a draining shutdown.

Decouples "a record is ready" from "a record is durably written":

    producers (pool workers) ──enqueue()──> [buffer] ──seal──> [sealed batches]
                                                                    │
                                                writer thread <─────┘
                                                    │
                                                    └──write_batch()──> DestinationStore

Thread Model:
    - Producer threads: call enqueue(), block only on backpressure
    - Writer thread: seals aged buffers, writes sealed batches one at a time
    - Orchestrator thread: calls shutdown() once every producer has finished
    - Progress reporter: reads persisted_count without taking the lock

Invariants:
    - pending_count == records buffered + records sealed + records being written
    - accepted_count == persisted_count + pending_count (while no write has failed)
    - persisted_count only ever increases
    - after shutdown() begins, enqueue() raises PersisterShutdownError; nothing
      accepted before that point is dropped
    - a failed write is fatal: the writer stops and shutdown() raises
      DestinationWriteFailure
"""

from __future__ import annotations

import threading
from collections import deque
from typing import Any

import structlog
from pydantic import BaseModel

from logshark.contracts.errors import DestinationWriteFailure, PersisterShutdownError
from logshark.contracts.stores import DestinationStore
from logshark.core.logging import get_logger
from logshark.engine.clock import DEFAULT_CLOCK, Clock
from logshark.plugins.persistence.config import PersisterConfig


class ConcurrentBatchPersister[R: BaseModel]:
    """Thread-safe sink that writes records to a destination in batches.

    Usage:
        persister = ConcurrentBatchPersister(destination, PersisterConfig(batch_size=500))

        # From any number of worker threads
        persister.enqueue(record)

        # From the orchestrator, after every producer has finished
        persister.shutdown()   # blocks until everything is written, raises on failure
        assert persister.pending_count == 0
    """

    def __init__(
        self,
        destination: DestinationStore,
        config: PersisterConfig | None = None,
        *,
        name: str = "persister",
        clock: Clock | None = None,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        config = config if config is not None else PersisterConfig()
        self._destination = destination
        self._batch_size = config.batch_size
        self._flush_interval = config.flush_interval_seconds
        self._max_pending = config.max_pending
        self._name = name
        self._clock = clock if clock is not None else DEFAULT_CLOCK
        self._log = logger if logger is not None else get_logger(__name__)

        self._lock = threading.Lock()
        self._cond = threading.Condition(self._lock)

        self._buffer: list[R] = []
        self._buffer_opened_at: float | None = None
        self._sealed: deque[list[R]] = deque()

        self._pending = 0
        self._accepted = 0
        self._persisted = 0
        self._batches_written = 0

        self._shutdown_requested = False
        self._failure_cause: BaseException | None = None

        self._writer = threading.Thread(
            target=self._write_loop,
            name=f"{name}-writer",
            daemon=False,  # Non-daemon: shutdown() must drain before the process exits
        )
        self._writer.start()

    # === Counters (lock-free snapshots) ===

    @property
    def persisted_count(self) -> int:
        """Records acknowledged by the destination. Monotonically increasing."""
        return self._persisted

    @property
    def accepted_count(self) -> int:
        """Records accepted by enqueue()."""
        return self._accepted

    @property
    def pending_count(self) -> int:
        """Records accepted but not yet acknowledged by the destination."""
        return self._pending

    @property
    def batches_written(self) -> int:
        return self._batches_written

    @property
    def is_shutdown(self) -> bool:
        return self._shutdown_requested

    @property
    def failed(self) -> bool:
        return self._failure_cause is not None

    # === Producer side ===

    def enqueue(self, record: R) -> None:
        """Accept one record for writing.

        Returns as soon as the record is buffered. Blocks only while
        max_pending records are buffered or being written.

        Raises:
            PersisterShutdownError: If shutdown() has begun.
            DestinationWriteFailure: If an earlier batch write failed.
        """
        with self._cond:
            while self._pending >= self._max_pending and not self._shutdown_requested and self._failure_cause is None:
                self._cond.wait()

            if self._failure_cause is not None:
                raise self._write_failure() from self._failure_cause
            if self._shutdown_requested:
                raise PersisterShutdownError(f"Persister '{self._name}' is shutting down; record rejected")

            opened = not self._buffer
            if opened:
                self._buffer_opened_at = self._clock.monotonic()
            self._buffer.append(record)
            self._pending += 1
            self._accepted += 1

            if len(self._buffer) >= self._batch_size or self._buffer_age_locked() >= self._flush_interval:
                self._seal_buffer_locked()
                self._cond.notify_all()
            elif opened:
                # Writer may be waiting with no timeout; start its age countdown
                self._cond.notify_all()

    # === Shutdown ===

    def shutdown(self, timeout: float | None = None) -> None:
        """Stop accepting records and block until everything is written.

        Idempotent. After it returns, all counters are final.

        Args:
            timeout: Max seconds to wait for the writer. None waits indefinitely.

        Raises:
            TimeoutError: If the writer is still draining when timeout expires.
            DestinationWriteFailure: If any batch write failed.
        """
        with self._cond:
            first_call = not self._shutdown_requested
            self._shutdown_requested = True
            self._cond.notify_all()

        if first_call:
            self._log.debug("persister_shutdown_requested", persister=self._name, pending=self._pending)

        self._writer.join(timeout=timeout)
        if self._writer.is_alive():
            raise TimeoutError(f"Persister '{self._name}' did not drain within {timeout}s ({self._pending} records pending)")

        if self._failure_cause is not None:
            raise self._write_failure() from self._failure_cause

        if first_call:
            self._log.info(
                "persister_drained",
                persister=self._name,
                persisted=self._persisted,
                batches=self._batches_written,
            )

    # === Writer side ===

    def _write_loop(self) -> None:
        while True:
            with self._cond:
                batch = self._next_batch_locked()
            if batch is None:
                return
            self._write_batch(batch)

    def _next_batch_locked(self) -> list[R] | None:
        """Block until a batch is ready to write, or return None to stop.

        Must be called while holding _cond.
        """
        while True:
            if self._failure_cause is not None:
                return None
            if self._sealed:
                return self._sealed.popleft()
            if self._buffer and (self._shutdown_requested or self._buffer_age_locked() >= self._flush_interval):
                self._seal_buffer_locked()
                continue
            if self._shutdown_requested:
                return None

            # Buffer open: wake when it ages out. Buffer empty: wait for a producer.
            timeout = self._flush_interval - self._buffer_age_locked() if self._buffer else None
            self._cond.wait(timeout=timeout)

    def _write_batch(self, batch: list[R]) -> None:
        try:
            self._destination.write_batch(batch)
        except Exception as e:
            with self._cond:
                self._failure_cause = e
                self._cond.notify_all()
            self._log.error(
                "batch_write_failed",
                persister=self._name,
                batch_size=len(batch),
                error_type=type(e).__name__,
                error=str(e),
            )
            return

        with self._cond:
            self._persisted += len(batch)
            self._pending -= len(batch)
            self._batches_written += 1
            self._cond.notify_all()
        self._log.debug("batch_written", persister=self._name, batch_size=len(batch), persisted=self._persisted)

    # === Helpers (call with _cond held) ===

    def _buffer_age_locked(self) -> float:
        if self._buffer_opened_at is None:
            return 0.0
        return self._clock.monotonic() - self._buffer_opened_at

    def _seal_buffer_locked(self) -> None:
        self._sealed.append(self._buffer)
        self._buffer = []
        self._buffer_opened_at = None

    def _write_failure(self) -> DestinationWriteFailure:
        return DestinationWriteFailure(
            f"Persister '{self._name}' failed to write a batch: {self._failure_cause}",
            records_unwritten=self._pending,
        )

    def get_stats(self) -> dict[str, Any]:
        with self._lock:
            return {
                "accepted": self._accepted,
                "persisted": self._persisted,
                "pending": self._pending,
                "batches_written": self._batches_written,
                "failed": self._failure_cause is not None,
            }

