# src/logshark/core/logging.py
"""Structured logging configuration for logshark.

Uses structlog for structured, key/value logging.

Architecture:
    This module configures BOTH structlog and stdlib logging to emit
    consistent output (JSON or console). It uses ProcessorFormatter
    to route stdlib log records through structlog's processor chain,
    so pymongo and SQLAlchemy records come out in the same format as
    our own structlog events.

    Only the entry point (the CLI) calls configure_logging(). Library code
    receives a bound logger from its caller or falls back to get_logger().
"""

import logging
import sys
import uuid
from typing import Any

import structlog
from bson import ObjectId
from structlog.stdlib import ProcessorFormatter

# Third-party loggers that are excessively verbose at DEBUG level.
_NOISY_LOGGERS: tuple[str, ...] = (
    # pymongo - server selection, heartbeat and command monitoring
    "pymongo",
    "pymongo.command",
    "pymongo.connection",
    "pymongo.serverSelection",
    "pymongo.topology",
    # SQLAlchemy - per-statement echo and pool checkout chatter
    "sqlalchemy.engine",
    "sqlalchemy.pool",
)


def _remove_internal_fields(
    logger: logging.Logger | None,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Remove internal structlog fields from output.

    ProcessorFormatter ALWAYS adds _record and _from_structlog when processing
    log records. These are internal bookkeeping and should not appear in output.
    """
    del event_dict["_record"]
    del event_dict["_from_structlog"]
    return event_dict


def _stringify_identifiers(
    logger: logging.Logger | None,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Render run ids and Mongo document ids as plain strings.

    JSONRenderer would otherwise fall back to repr() and emit
    "UUID('...')" or "ObjectId('...')" for the identifiers every
    pipeline event carries.
    """
    for key, value in event_dict.items():
        if isinstance(value, uuid.UUID | ObjectId):
            event_dict[key] = str(value)
    return event_dict


def configure_logging(
    *,
    json_output: bool = False,
    level: str = "INFO",
) -> None:
    """Configure structlog and stdlib logging.

    Args:
        json_output: If True, output JSON. If False, human-readable.
        level: Log level (DEBUG, INFO, WARNING, ERROR).
    """
    log_level = getattr(logging, level.upper())

    # Shared processors applied to ALL log records (structlog and stdlib)
    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        _stringify_identifiers,
    ]

    if json_output:
        final_processors: list[Any] = [
            _remove_internal_fields,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        final_processors = [
            _remove_internal_fields,
            structlog.dev.ConsoleRenderer(colors=True),
        ]

    structlog.configure(
        processors=[*shared_processors, ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Disable caching to allow reconfiguration in tests
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        ProcessorFormatter(
            processors=final_processors,
            # foreign_pre_chain: processors for stdlib-only records
            foreign_pre_chain=shared_processors,
        )
    )

    root = logging.getLogger()
    root.handlers = []
    root.addHandler(handler)
    root.setLevel(log_level)

    # Never make noisy loggers less restrictive than the configured root level.
    noisy_level = max(log_level, logging.WARNING)
    for logger_name in _NOISY_LOGGERS:
        logging.getLogger(logger_name).setLevel(noisy_level)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a bound logger for a module.

    Args:
        name: Logger name (typically __name__).

    Returns:
        Bound structlog logger.
    """
    logger: structlog.stdlib.BoundLogger = structlog.get_logger(name)
    return logger


def get_run_logger(
    plugin_name: str,
    run_id: object,
    base: structlog.stdlib.BoundLogger | None = None,
) -> structlog.stdlib.BoundLogger:
    """Bind plugin and run context onto a logger for one plugin invocation.

    Args:
        plugin_name: Name of the plugin being executed.
        run_id: Run identifier stamped on every output record.
        base: Logger to bind onto. Defaults to the orchestrator's module logger.

    Returns:
        Logger carrying ``plugin`` and ``run_id`` on every event.
    """
    logger = base if base is not None else get_logger("logshark.engine.orchestrator")
    return logger.bind(plugin=plugin_name, run_id=str(run_id))
