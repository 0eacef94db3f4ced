# src/logshark/contracts/results.py
"""Request/response and mapper result contracts.

MapResult is how a mapper reports per-document outcome: a record on success,
a DocumentParseError on failure. The orchestrator converts failures into
RunResponse entries at the task boundary.

IMPORTANT: status uses Literal["success", "error"], NOT enum.
"""

from __future__ import annotations

import threading
import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Literal

from logshark.contracts.errors import DocumentParseError, PluginConfigError

ERROR_MESSAGE_TEMPLATE = "Encountered an exception on {document_id}: {message}"


@dataclass(frozen=True)
class MapResult[R]:
    """Result of mapping one raw document.

    Use the factory methods to create instances.
    """

    status: Literal["success", "error"]
    record: R | None = None
    error: DocumentParseError | None = None

    def __post_init__(self) -> None:
        if self.status == "success" and self.record is None:
            raise ValueError("MapResult with status='success' MUST carry a record.")
        if self.status == "error" and self.error is None:
            raise ValueError("MapResult with status='error' MUST carry a DocumentParseError.")

    @classmethod
    def success(cls, record: R) -> MapResult[R]:
        return cls(status="success", record=record)

    @classmethod
    def failure(cls, error: DocumentParseError) -> MapResult[R]:
        return cls(status="error", error=error)

    @property
    def is_success(self) -> bool:
        return self.status == "success"


def parse_custom_args(raw_args: list[str]) -> dict[str, str]:
    """Parse ``PluginName.ArgName:Value`` strings into a mapping.

    The key keeps its plugin prefix (``"Filestore.Limit"``); the value is
    everything after the first colon, so values may themselves contain colons.

    Raises:
        PluginConfigError: If an argument has no colon or no plugin prefix.
    """
    parsed: dict[str, str] = {}
    for raw in raw_args:
        key, sep, value = raw.partition(":")
        key = key.strip()
        if not sep or "." not in key or key.startswith(".") or key.endswith("."):
            raise PluginConfigError(
                f"Invalid custom argument {raw!r}: expected the form 'PluginName.ArgName:Value'"
            )
        parsed[key] = value
    return parsed


@dataclass(frozen=True)
class RunRequest:
    """What the host hands a plugin for one invocation.

    Attributes:
        run_id: Identifier stamped on every output record (the logset hash)
        custom_args: ``PluginName.ArgName`` -> value, read-only
    """

    run_id: uuid.UUID
    custom_args: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Frozen dataclass: copy into a read-only view so callers can't mutate it later
        object.__setattr__(self, "custom_args", MappingProxyType(dict(self.custom_args)))

    @classmethod
    def create(cls, run_id: uuid.UUID | str | None = None, custom_args: Mapping[str, str] | None = None) -> RunRequest:
        if run_id is None:
            resolved = uuid.uuid4()
        elif isinstance(run_id, uuid.UUID):
            resolved = run_id
        else:
            try:
                resolved = uuid.UUID(run_id)
            except ValueError as e:
                raise PluginConfigError(f"Invalid run id {run_id!r}: {e}") from e
        return cls(run_id=resolved, custom_args=custom_args or {})

    def plugin_args(self, plugin_name: str) -> dict[str, str]:
        """Return the custom args addressed to one plugin, prefix stripped."""
        prefix = f"{plugin_name}."
        return {key[len(prefix) :]: value for key, value in self.custom_args.items() if key.startswith(prefix)}


class RunResponse:
    """Accumulated outcome of one plugin invocation.

    Created by the orchestrator at the start of execution. Transformation
    tasks append errors concurrently, so appends are lock-guarded. After
    finalize() the response is read-only.
    """

    def __init__(self, plugin_name: str) -> None:
        self.plugin_name = plugin_name
        self._errors: list[str] = []
        self._generated_no_data = False
        self._finalized = False
        self._lock = threading.Lock()

    @property
    def errors(self) -> tuple[str, ...]:
        with self._lock:
            return tuple(self._errors)

    @property
    def generated_no_data(self) -> bool:
        return self._generated_no_data

    @generated_no_data.setter
    def generated_no_data(self, value: bool) -> None:
        self._check_mutable()
        self._generated_no_data = value

    @property
    def finalized(self) -> bool:
        return self._finalized

    def append_error(self, message: str) -> None:
        with self._lock:
            self._check_mutable()
            self._errors.append(message)

    def append_document_error(self, document_id: Any, message: str) -> str:
        """Append an error for one document in the standard format.

        Returns:
            The formatted error message.
        """
        formatted = ERROR_MESSAGE_TEMPLATE.format(document_id=document_id, message=message)
        self.append_error(formatted)
        return formatted

    def finalize(self) -> RunResponse:
        with self._lock:
            self._finalized = True
        return self

    def _check_mutable(self) -> None:
        if self._finalized:
            raise RuntimeError(f"RunResponse for plugin '{self.plugin_name}' is finalized and cannot be modified")

    def to_dict(self) -> dict[str, Any]:
        return {
            "plugin_name": self.plugin_name,
            "errors": list(self.errors),
            "generated_no_data": self.generated_no_data,
        }

    def __repr__(self) -> str:
        return (
            f"RunResponse(plugin_name={self.plugin_name!r}, errors={len(self.errors)}, "
            f"generated_no_data={self.generated_no_data})"
        )
