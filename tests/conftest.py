"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from collections.abc import Callable

import pytest
from starlette.requests import Request

from pubsub_webhook.context import ConnectionContext
from pubsub_webhook.events import EventType


@pytest.fixture(scope="module")
def anyio_backend():
    """Configure anyio to use asyncio backend."""
    return "asyncio"


@pytest.fixture
def make_request() -> Callable[..., Request]:
    """Build a bare starlette Request with the given method and headers."""

    def _make(method: str = "POST", headers: list[tuple[str, str]] | None = None) -> Request:
        scope = {
            "type": "http",
            "method": method,
            "path": "/api/webpubsub",
            "headers": [(k.lower().encode("latin-1"), v.encode("latin-1")) for k, v in headers or []],
        }
        return Request(scope)

    return _make


@pytest.fixture
def context() -> ConnectionContext:
    """Connection context for a connect event with no prior state."""
    return ConnectionContext(
        event_type=EventType.SYSTEM,
        event_name="connect",
        connection_id="conn-1",
        hub="chat",
    )
