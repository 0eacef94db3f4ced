# src/logshark/plugins/pooling/config.py
"""Pool configuration for per-document transformation."""

from __future__ import annotations

from typing import Self

from pydantic import BaseModel, Field, model_validator


class PoolConfig(BaseModel):
    """Worker pool configuration.

    Attributes:
        max_workers: Threads transforming documents concurrently (must be >= 1)
        max_in_flight: Tasks queued or running before submit() blocks the
            cursor consumer (must be >= max_workers)
    """

    model_config = {"extra": "forbid", "frozen": True}

    max_workers: int = Field(8, ge=1, description="Number of transformation worker threads")
    max_in_flight: int = Field(256, ge=1, description="Maximum tasks queued or running at once")

    @model_validator(mode="after")
    def _validate_in_flight_covers_workers(self) -> Self:
        """Validate max_in_flight >= max_workers."""
        if self.max_in_flight < self.max_workers:
            raise ValueError(
                f"max_in_flight ({self.max_in_flight}) cannot be less than max_workers ({self.max_workers}); "
                "workers would sit idle"
            )
        return self
