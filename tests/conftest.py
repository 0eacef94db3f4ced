# tests/conftest.py
"""Shared test fixtures and helpers.

Hypothesis Configuration:
- "ci" profile: Fast tests for CI (100 examples) - default
- "nightly" profile: Thorough tests (1000 examples)
- "debug" profile: Minimal tests with verbose output (10 examples)

Set profile via environment variable:
    HYPOTHESIS_PROFILE=nightly pytest tests/property/

Store fakes live in tests/fixtures/stores.py. Tests build PluginContext
directly around them instead of going through settings and the CLI.
"""

import os
import uuid
from collections.abc import Iterator
from typing import Any

import pytest
from hypothesis import Phase, Verbosity, settings
from structlog.testing import capture_logs

from logshark.engine.clock import MockClock
from logshark.plugins.context import PluginContext
from logshark.plugins.manager import PluginManager
from logshark.plugins.persistence.config import PersisterConfig
from logshark.plugins.pooling.config import PoolConfig
from tests.fixtures.factories import RUN_ID
from tests.fixtures.stores import InMemoryDocumentStore, RecordingDestinationStore

# =============================================================================
# Hypothesis Configuration
# =============================================================================

# CI profile: Fast tests for continuous integration
settings.register_profile(
    "ci",
    max_examples=100,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,  # Disable deadline for CI (timing varies)
)

# Nightly profile: Thorough testing for scheduled runs
settings.register_profile(
    "nightly",
    max_examples=1000,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

# Debug profile: Minimal examples with verbose output for debugging
settings.register_profile(
    "debug",
    max_examples=10,
    verbosity=Verbosity.verbose,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

# Load profile from environment, default to "ci"
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "ci"))


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def run_id() -> uuid.UUID:
    return RUN_ID


@pytest.fixture
def mock_clock() -> MockClock:
    return MockClock(start=0.0)


@pytest.fixture
def destination() -> RecordingDestinationStore:
    return RecordingDestinationStore()


@pytest.fixture
def document_store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore(batch_size=2)


@pytest.fixture
def plugin_context(document_store: InMemoryDocumentStore, destination: RecordingDestinationStore) -> PluginContext:
    """Context with small batches and a fast progress ticker."""
    return PluginContext(
        document_store=document_store,
        destination=destination,
        persister=PersisterConfig(batch_size=2, flush_interval_seconds=0.05, max_pending=16),
        pool=PoolConfig(max_workers=4, max_in_flight=8),
        progress_interval_seconds=0.05,
    )


@pytest.fixture
def plugin_manager() -> PluginManager:
    """Plugin manager with built-in plugins registered."""
    manager = PluginManager()
    manager.register_builtin_plugins()
    return manager


@pytest.fixture
def captured_logs() -> Iterator[list[dict[str, Any]]]:
    """Capture structlog events emitted during the test."""
    with capture_logs() as logs:
        yield logs
