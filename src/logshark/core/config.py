# src/logshark/core/config.py
"""
Configuration schema and loading for logshark runs.

Uses Pydantic for validation and Dynaconf for multi-source loading.
Settings are frozen (immutable) after construction.

Example settings.yaml:
    document_store:
      url: mongodb://localhost:27017
      database: logset_3f2a
      batch_size: 1000
    destination:
      url: postgresql://logshark@localhost/logshark
    persister:
      batch_size: 500
      flush_interval_seconds: 5
    pool:
      max_workers: 8
      max_in_flight: 256
    progress:
      interval_seconds: 10
"""

import os
import re
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from logshark.plugins.persistence.config import PersisterConfig
from logshark.plugins.pooling.config import PoolConfig


class DocumentStoreSettings(BaseModel):
    """Where parsed log documents are read from."""

    model_config = {"frozen": True, "extra": "forbid"}

    url: str = Field(default="mongodb://localhost:27017", description="MongoDB connection URL")
    database: str = Field(description="Database holding the parsed logset")
    batch_size: int = Field(default=1000, gt=0, description="Documents fetched per cursor batch")


class DestinationSettings(BaseModel):
    """Where output records are written."""

    model_config = {"frozen": True, "extra": "forbid"}

    url: str = Field(description="SQLAlchemy database URL")


class ProgressSettings(BaseModel):
    """Progress reporting cadence."""

    model_config = {"frozen": True, "extra": "forbid"}

    interval_seconds: float = Field(default=5.0, gt=0, description="Seconds between persisted/total log lines")


class LogsharkSettings(BaseModel):
    """Top-level settings for a run."""

    model_config = {"frozen": True, "extra": "forbid"}

    document_store: DocumentStoreSettings
    destination: DestinationSettings
    persister: PersisterConfig = Field(default_factory=PersisterConfig)
    pool: PoolConfig = Field(default_factory=PoolConfig)
    progress: ProgressSettings = Field(default_factory=ProgressSettings)


_ENV_VAR_PATTERN = re.compile(r"\$\{([A-Z_][A-Z0-9_]*)(?::-([^}]*))?\}")


def _expand_env_vars(config: dict[str, Any]) -> dict[str, Any]:
    """Recursively expand ${VAR} and ${VAR:-default} patterns in config values.

    A variable that is unset and has no default is left as-is.
    """

    def _expand_string(value: str) -> str:
        def replacer(match: re.Match[str]) -> str:
            env_value = os.environ.get(match.group(1))
            if env_value is not None:
                return env_value
            default = match.group(2)
            if default is not None:
                return default
            return match.group(0)

        return _ENV_VAR_PATTERN.sub(replacer, value)

    def _expand_value(value: Any) -> Any:
        if isinstance(value, str):
            return _expand_string(value)
        elif isinstance(value, dict):
            return {k: _expand_value(v) for k, v in value.items()}
        elif isinstance(value, list):
            return [_expand_value(item) for item in value]
        else:
            return value

    return {k: _expand_value(v) for k, v in config.items()}


def _lower_keys(value: Any) -> Any:
    if isinstance(value, dict):
        return {str(k).lower(): _lower_keys(v) for k, v in value.items()}
    return value


def load_settings(config_path: Path) -> LogsharkSettings:
    """Load settings from YAML file with environment variable overrides.

    Uses Dynaconf for multi-source loading with precedence:
    1. Environment variables (LOGSHARK_*) - highest priority
    2. Config file (settings.yaml)
    3. Defaults from Pydantic schema - lowest priority

    Environment variable format: LOGSHARK_DESTINATION__URL for nested keys.

    Raises:
        ValidationError: If configuration fails Pydantic validation
        FileNotFoundError: If config file doesn't exist
    """
    from dynaconf import Dynaconf

    # Explicit check for file existence (Dynaconf silently accepts missing files)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    dynaconf_settings = Dynaconf(
        envvar_prefix="LOGSHARK",
        settings_files=[str(config_path)],
        environments=False,
        load_dotenv=False,
        merge_enabled=True,
    )

    # Dynaconf returns uppercase keys; filter out its internal settings
    internal_keys = {"LOAD_DOTENV", "ENVIRONMENTS", "SETTINGS_FILES"}
    raw_config = {k.lower(): _lower_keys(v) for k, v in dynaconf_settings.as_dict().items() if k not in internal_keys}

    raw_config = _expand_env_vars(raw_config)

    return LogsharkSettings(**raw_config)
