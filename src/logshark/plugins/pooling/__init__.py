# src/logshark/plugins/pooling/__init__.py
"""Bounded worker pool for per-document transformation."""

from logshark.plugins.pooling.config import PoolConfig
from logshark.plugins.pooling.executor import BoundedTaskPool

__all__ = [
    "BoundedTaskPool",
    "PoolConfig",
]
