"""Shared fixtures for the workspacefs test suite."""

import logging
from unittest.mock import AsyncMock, MagicMock

import pytest

from workspacefs.config import RemoteConfig, RemoteLatency
from workspacefs.logging_config import OPERATIONS_LOGGER


@pytest.fixture
def no_latency() -> RemoteConfig:
    """Remote configuration without artificial delays."""
    return RemoteConfig(
        latency=RemoteLatency(
            listing=0, read=0, create=0, delete=0, connect=0, disconnect=0
        )
    )


@pytest.fixture
def mock_invoker():
    """ProcessInvoker double; set ``run.side_effect`` per test."""
    invoker = MagicMock()
    invoker.run = AsyncMock()
    return invoker


@pytest.fixture(autouse=True)
def reset_operations_logger():
    """Undo configure_logging() so caplog keeps seeing operation records."""
    yield
    logger = logging.getLogger(OPERATIONS_LOGGER)
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
