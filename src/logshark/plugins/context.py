# src/logshark/plugins/context.py
"""Plugin execution context.

The PluginContext carries everything a plugin needs during execution: the two
stores, the tuning for the persister, pool and progress reporter, and the
logger to report through. The host builds one per run; plugins never open
connections themselves.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import structlog

from logshark.plugins.persistence.config import PersisterConfig
from logshark.plugins.pooling.config import PoolConfig

if TYPE_CHECKING:
    from logshark.contracts.stores import DestinationStore, DocumentStore
    from logshark.engine.clock import Clock


@dataclass
class PluginContext:
    """Collaborators and tuning for one plugin invocation.

    Attributes:
        document_store: Where raw documents are read from
        destination: Where output records are written
        persister: Batch size, flush interval and backpressure limit
        pool: Transformation worker pool sizing
        progress_interval_seconds: How often to log persisted/total
        logger: Logger the orchestrator binds run context onto (None: module logger)
        clock: Clock for the persister's flush interval (None: system clock)
    """

    document_store: DocumentStore
    destination: DestinationStore
    persister: PersisterConfig = field(default_factory=PersisterConfig)
    pool: PoolConfig = field(default_factory=PoolConfig)
    progress_interval_seconds: float = 5.0
    logger: structlog.stdlib.BoundLogger | None = None
    clock: Clock | None = None
