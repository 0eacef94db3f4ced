# src/logshark/plugins/persistence/config.py
"""Batch persister configuration."""

from __future__ import annotations

from typing import Self

from pydantic import BaseModel, Field, model_validator


class PersisterConfig(BaseModel):
    """When the persister seals a batch, and how much it may hold.

    A batch is sealed by whichever trigger fires first: batch_size records
    buffered, or the buffer being flush_interval_seconds old. Enqueue blocks
    (backpressure) while max_pending records are buffered or being written.
    """

    model_config = {"extra": "forbid", "frozen": True}

    batch_size: int = Field(500, ge=1, description="Records per destination write")
    flush_interval_seconds: float = Field(5.0, gt=0, description="Max age of a partially filled batch")
    max_pending: int = Field(10_000, ge=1, description="Records buffered or in flight before enqueue blocks")

    @model_validator(mode="after")
    def _validate_pending_holds_a_batch(self) -> Self:
        """Validate max_pending >= batch_size."""
        if self.max_pending < self.batch_size:
            raise ValueError(
                f"max_pending ({self.max_pending}) cannot be less than batch_size ({self.batch_size}); "
                "a full batch could never be sealed"
            )
        return self
