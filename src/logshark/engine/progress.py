# src/logshark/engine/progress.py
"""Periodic progress reporting for a running persister.

PersisterStatusWriter is a context manager: the ticker thread starts on
enter and is stopped and joined on exit, whether the body returned normally
or raised. It only reads the persister's counters and never suppresses
exceptions.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from types import TracebackType
from typing import Protocol, Self

import structlog

from logshark.core.logging import get_logger


class SupportsPersistedCount(Protocol):
    @property
    def persisted_count(self) -> int: ...


@dataclass(frozen=True)
class ProgressSnapshot:
    """Persisted records against the expected total at one instant.

    Attributes:
        persisted: Records acknowledged by the destination so far
        total: Records the run expects to handle (matching documents)
        percent: persisted / total as a percentage, 100.0 when total is 0
    """

    persisted: int
    total: int
    percent: float


class PersisterStatusWriter:
    """Logs persisted/total every interval while the persister is active.

    Usage:
        with PersisterStatusWriter(persister, total, interval_seconds=5.0, label="filestore events"):
            ...  # stream, transform, drain

    Exiting the block always stops the ticker and logs a final snapshot.
    """

    def __init__(
        self,
        persister: SupportsPersistedCount,
        total: int,
        *,
        interval_seconds: float = 5.0,
        label: str = "records",
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        if total < 0:
            raise ValueError(f"total must be >= 0, got {total}")
        if interval_seconds <= 0:
            raise ValueError(f"interval_seconds must be > 0, got {interval_seconds}")
        self._persister = persister
        self._total = total
        self._interval = interval_seconds
        self._label = label
        self._log = logger if logger is not None else get_logger(__name__)
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        self._reports = 0

    @property
    def active(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def reports(self) -> int:
        """Snapshots logged so far, including the final one."""
        return self._reports

    def snapshot(self) -> ProgressSnapshot:
        persisted = self._persister.persisted_count
        percent = 100.0 if self._total == 0 else round(persisted * 100.0 / self._total, 1)
        return ProgressSnapshot(persisted=persisted, total=self._total, percent=percent)

    def report(self, *, final: bool = False) -> ProgressSnapshot:
        snap = self.snapshot()
        self._reports += 1
        self._log.info(
            "persister_status",
            label=self._label,
            persisted=snap.persisted,
            total=snap.total,
            percent=snap.percent,
            final=final,
        )
        return snap

    def _run(self) -> None:
        while not self._stop.wait(self._interval):
            self.report()

    def __enter__(self) -> Self:
        if self._thread is not None:
            raise RuntimeError("PersisterStatusWriter cannot be entered twice")
        self._thread = threading.Thread(target=self._run, name=f"status-{self._label}", daemon=True)
        self._thread.start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join()
        self.report(final=True)
