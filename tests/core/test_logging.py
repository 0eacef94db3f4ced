# tests/core/test_logging.py
"""Tests for structured logging configuration."""

import json
import logging
import uuid

import pytest


class TestLoggingConfig:
    """Tests for logging configuration."""

    def test_get_logger_returns_logger(self) -> None:
        """get_logger returns a bound logger."""
        from logshark.core.logging import get_logger

        logger = get_logger("test")
        assert hasattr(logger, "info")
        assert hasattr(logger, "error")
        assert hasattr(logger, "bind")

    def test_logger_outputs_structured(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Logger outputs structured JSON."""
        from logshark.core.logging import configure_logging, get_logger

        configure_logging(json_output=True)
        logger = get_logger("test")

        logger.info("documents_counted", total=3)

        captured = capsys.readouterr()
        data = json.loads(captured.out.strip().split("\n")[-1])
        assert data["event"] == "documents_counted"
        assert data["total"] == 3
        assert data["level"] == "info"
        assert "_record" not in data
        assert "_from_structlog" not in data

    def test_logger_console_output(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Logger outputs human-readable in console mode."""
        from logshark.core.logging import configure_logging, get_logger

        configure_logging(json_output=False)
        logger = get_logger("test")

        logger.info("queueing_documents", label="filestore events")

        captured = capsys.readouterr()
        assert "queueing_documents" in captured.out

    def test_stdlib_records_share_format(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Records from stdlib loggers (pymongo, sqlalchemy) are rendered as JSON too."""
        from logshark.core.logging import configure_logging

        configure_logging(json_output=True)
        logging.getLogger("some.library").warning("plain %s", "record")

        captured = capsys.readouterr()
        data = json.loads(captured.out.strip().split("\n")[-1])
        assert data["event"] == "plain record"

    def test_level_filters_debug(self, capsys: pytest.CaptureFixture[str]) -> None:
        from logshark.core.logging import configure_logging, get_logger

        configure_logging(json_output=True, level="INFO")
        get_logger("test").debug("hidden")

        assert "hidden" not in capsys.readouterr().out

    def test_noisy_loggers_held_at_warning(self) -> None:
        """Driver loggers stay at WARNING even when DEBUG is requested."""
        from logshark.core.logging import configure_logging

        configure_logging(level="DEBUG")

        assert logging.getLogger("pymongo").level == logging.WARNING
        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING

    def test_run_logger_binds_plugin_and_run_id(self, capsys: pytest.CaptureFixture[str]) -> None:
        from logshark.core.logging import configure_logging, get_run_logger

        configure_logging(json_output=True)
        run_id = uuid.uuid4()

        get_run_logger("Filestore", run_id).info("finished_processing")

        data = json.loads(capsys.readouterr().out.strip().split("\n")[-1])
        assert data["plugin"] == "Filestore"
        assert data["run_id"] == str(run_id)

    def test_identifiers_rendered_as_strings(self, capsys: pytest.CaptureFixture[str]) -> None:
        """UUID and ObjectId values come out as their plain string forms."""
        from bson import ObjectId

        from logshark.core.logging import configure_logging, get_logger

        configure_logging(json_output=True)
        run_id = uuid.UUID(int=7)
        doc_id = ObjectId("65a5123456789abcdef01234")

        get_logger("test").error("document_failed", run_id=run_id, document_id=doc_id)

        data = json.loads(capsys.readouterr().out.strip().split("\n")[-1])
        assert data["run_id"] == "00000000-0000-0000-0000-000000000007"
        assert data["document_id"] == "65a5123456789abcdef01234"
