from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from unittest.mock import Mock, patch

import httpx
import pytest

from steadyreq import Client
from steadyreq.core.config import with_http_transport

if TYPE_CHECKING:
    from collections.abc import Callable, Generator

    from steadyreq.core.config import TransportOption


@pytest.fixture
def mock_sleep() -> Generator[Mock, None, None]:
    """Patch time.sleep to make tests run faster."""
    with patch("time.sleep", return_value=None) as mock:
        yield mock


@pytest.fixture
def test_logger() -> logging.Logger:
    """Create a dedicated logger that lets every record through."""
    logger = logging.getLogger("tests.steadyreq")
    logger.setLevel(logging.DEBUG)
    return logger


@pytest.fixture
def make_client(
    test_logger: logging.Logger,
) -> Generator[Callable[..., Client], None, None]:
    """Create clients whose requests are answered by a handler function.

    The handler receives each ``httpx.Request`` and returns an
    ``httpx.Response`` (or raises an ``httpx`` exception), like the handler
    of ``httpx.MockTransport``.
    """
    clients: list[Client] = []

    def factory(
        handler: Callable[[httpx.Request], httpx.Response],
        *options: TransportOption,
        debug: bool = False,
    ) -> Client:
        client = Client(
            with_http_transport(httpx.MockTransport(handler)),
            *options,
            debug=debug,
            logger=test_logger,
        )
        clients.append(client)
        return client

    yield factory
    for client in clients:
        client.close()


@pytest.fixture
def mock_callback() -> Mock:
    """Create a mock attempt hook."""
    return Mock()


@pytest.fixture(autouse=True)
def _restore_client_logger() -> Generator[None, None, None]:
    """Restore the default client logger changed by debug clients."""
    logger = logging.getLogger("steadyreq.client")
    level, handlers, propagate = logger.level, list(logger.handlers), logger.propagate
    yield
    logger.setLevel(level)
    logger.handlers = handlers
    logger.propagate = propagate
