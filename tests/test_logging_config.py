"""
Tests for operation logging.
"""

import json
import logging
import sys

import pytest

from workspacefs.core.exceptions import NotFoundError
from workspacefs.logging_config import (
    OPERATIONS_LOGGER,
    ProviderOperationFormatter,
    configure_logging,
    get_operation_logger,
)
from workspacefs.providers import RemoteProvider


class TestProviderOperationFormatter:
    """Test the JSON formatter."""

    def test_includes_operation_fields(self):
        record = logging.LogRecord(
            OPERATIONS_LOGGER, logging.INFO, __file__, 1, "local.list_files /", None, None
        )
        record.backend = "local"
        record.operation = "list_files"
        record.path = "/"
        record.duration_ms = 1.5

        data = json.loads(ProviderOperationFormatter().format(record))

        assert data["level"] == "INFO"
        assert data["message"] == "local.list_files /"
        assert data["backend"] == "local"
        assert data["operation"] == "list_files"
        assert data["duration_ms"] == 1.5
        assert "kind" not in data

    def test_includes_exception(self):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = logging.LogRecord(
                OPERATIONS_LOGGER, logging.ERROR, __file__, 1, "failed", None, sys.exc_info()
            )

        data = json.loads(ProviderOperationFormatter().format(record))
        assert "RuntimeError: boom" in data["exception"]


class TestConfigureLogging:
    """Test configure_logging."""

    def test_file_handler(self, tmp_path):
        log_file = tmp_path / "operations.log"
        configure_logging(log_file=str(log_file), log_level="DEBUG", enable_console=False)

        get_operation_logger().info("hello", extra={"backend": "remote"})
        for handler in get_operation_logger().handlers:
            handler.flush()

        line = json.loads(log_file.read_text().strip().splitlines()[-1])
        assert line["message"] == "hello"
        assert line["backend"] == "remote"

    def test_reconfigure_replaces_handlers(self):
        configure_logging(enable_console=True)
        configure_logging(enable_console=True)

        assert len(get_operation_logger().handlers) == 1
        assert get_operation_logger().propagate is False

    def test_level(self):
        configure_logging(log_level="warning", enable_console=False)
        assert get_operation_logger().level == logging.WARNING


class TestOperationLogging:
    """Provider operations emit one record per call."""

    @pytest.mark.asyncio
    async def test_success_record(self, no_latency, caplog):
        provider = RemoteProvider(config=no_latency)

        with caplog.at_level(logging.INFO, logger=OPERATIONS_LOGGER):
            await provider.list_files("/data")

        records = [r for r in caplog.records if r.name == OPERATIONS_LOGGER]
        assert len(records) == 1
        assert records[0].backend == "remote"
        assert records[0].operation == "list_files"
        assert records[0].path == "/data"
        assert records[0].levelno == logging.INFO

    @pytest.mark.asyncio
    async def test_failure_record(self, no_latency, caplog):
        provider = RemoteProvider(config=no_latency)

        with caplog.at_level(logging.INFO, logger=OPERATIONS_LOGGER):
            with pytest.raises(NotFoundError):
                await provider.delete_item("/missing")

        record = [r for r in caplog.records if r.name == OPERATIONS_LOGGER][-1]
        assert record.levelno == logging.WARNING
        assert record.kind == "not_found"
        assert record.operation == "delete_item"
