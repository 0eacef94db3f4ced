# src/logshark/plugins/pooling/executor.py
"""Bounded task pool for per-document transformation.

The cursor consumer submits one task per document. Tasks run on a fixed
number of worker threads, and submission blocks once max_in_flight tasks are
queued or running, so a large collection never turns into an unbounded
backlog of pending work.

join() is the barrier the orchestrator waits on before draining the
persister: it returns only when every submitted task has finished.

Tasks are expected to handle their own per-document failures. Anything a
task lets escape is treated as fatal for the run: it is recorded, further
submissions are refused, and join() re-raises it.
"""

from __future__ import annotations

from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from threading import Condition, Lock, Semaphore
from types import TracebackType
from typing import Any, Self

import structlog

from logshark.core.logging import get_logger
from logshark.plugins.pooling.config import PoolConfig


class BoundedTaskPool:
    """Fixed-size worker pool with a bounded submission window.

    Usage:
        with BoundedTaskPool(PoolConfig(max_workers=4, max_in_flight=64)) as pool:
            for document in documents:
                pool.submit(process, document)   # blocks when 64 are in flight
            pool.join()                           # barrier, re-raises fatal errors

    Thread Safety:
        - submit(): called by one producer thread
        - task completion callbacks: called by worker threads
        - join(): called by the producer after its last submit()
    """

    def __init__(
        self,
        config: PoolConfig,
        *,
        name: str = "transform",
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        self._config = config
        self._name = name
        self._log = logger if logger is not None else get_logger(__name__)

        self._thread_pool = ThreadPoolExecutor(
            max_workers=config.max_workers,
            thread_name_prefix=f"{name}-worker",
        )

        # One permit per task allowed to be queued or running
        self._slots = Semaphore(config.max_in_flight)

        self._lock = Lock()
        self._idle = Condition(self._lock)
        self._in_flight = 0
        self._submitted = 0
        self._completed = 0
        self._max_in_flight_reached = 0
        self._fatal: BaseException | None = None
        self._shutdown = False

    @property
    def in_flight(self) -> int:
        """Tasks queued or running."""
        return self._in_flight

    @property
    def submitted(self) -> int:
        return self._submitted

    @property
    def completed(self) -> int:
        return self._completed

    def submit(self, fn: Callable[..., Any], *args: Any) -> None:
        """Submit one task, blocking while the submission window is full.

        Raises:
            RuntimeError: If the pool has been shut down.
            BaseException: The first fatal error a previous task raised.
        """
        if self._shutdown:
            raise RuntimeError(f"Task pool '{self._name}' is shut down")
        self._raise_if_fatal()

        self._slots.acquire()
        with self._lock:
            self._in_flight += 1
            self._submitted += 1
            if self._in_flight > self._max_in_flight_reached:
                self._max_in_flight_reached = self._in_flight

        try:
            future = self._thread_pool.submit(fn, *args)
        except BaseException:
            self._release_slot(None)
            raise
        future.add_done_callback(self._on_task_done)

    def _on_task_done(self, future: Future[Any]) -> None:
        error = None if future.cancelled() else future.exception()
        self._release_slot(error)

    def _release_slot(self, error: BaseException | None) -> None:
        with self._lock:
            if error is not None and self._fatal is None:
                self._fatal = error
                self._log.error(
                    "task_failed_fatally",
                    pool=self._name,
                    error_type=type(error).__name__,
                    error=str(error),
                )
            self._in_flight -= 1
            self._completed += 1
            if self._in_flight == 0:
                self._idle.notify_all()
        self._slots.release()

    def _raise_if_fatal(self) -> None:
        with self._lock:
            fatal = self._fatal
        if fatal is not None:
            raise fatal

    def join(self, timeout: float | None = None) -> None:
        """Wait until every submitted task has finished.

        Args:
            timeout: Max seconds to wait. None waits indefinitely.

        Raises:
            TimeoutError: If tasks are still running when timeout expires.
            BaseException: The first fatal error any task raised.
        """
        with self._idle:
            if not self._idle.wait_for(lambda: self._in_flight == 0, timeout=timeout):
                raise TimeoutError(f"Task pool '{self._name}' still has {self._in_flight} tasks in flight")
        self._raise_if_fatal()

    def shutdown(self, wait: bool = True) -> None:
        """Shutdown the pool.

        Args:
            wait: If True, wait for queued and running tasks to complete
        """
        self._shutdown = True
        self._thread_pool.shutdown(wait=wait)

    def get_stats(self) -> dict[str, Any]:
        with self._lock:
            return {
                "pool_config": {
                    "max_workers": self._config.max_workers,
                    "max_in_flight": self._config.max_in_flight,
                },
                "pool_stats": {
                    "submitted": self._submitted,
                    "completed": self._completed,
                    "in_flight": self._in_flight,
                    "max_in_flight_reached": self._max_in_flight_reached,
                },
            }

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.shutdown(wait=True)
