"""Application handler contract.

An application plugs into the webhook with a single callable that
receives a WebhookRequest and returns the handler output described in
builder.py (or None). Both plain functions and coroutines are accepted.
"""

from __future__ import annotations

import importlib
import inspect
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Union

from starlette.concurrency import run_in_threadpool

from .context import ConnectionContext
from .data_types import DataType
from .events import RequestType

EventHandler = Callable[["WebhookRequest"], Union[Any, Awaitable[Any]]]


@dataclass
class WebhookRequest:
    """An inbound event as seen by the application handler."""

    context: ConnectionContext
    request_type: RequestType
    data: bytes = b""
    data_type: DataType = DataType.BINARY

    @property
    def text(self) -> str:
        return self.data.decode("utf-8")


def _is_async_handler(handler: EventHandler) -> bool:
    if inspect.iscoroutinefunction(handler):
        return True
    # Callable objects with an async __call__
    return inspect.iscoroutinefunction(getattr(handler, "__call__", None))


async def invoke_handler(handler: EventHandler, request: WebhookRequest) -> Any:
    """Call a handler without blocking the event loop.

    Coroutine handlers are awaited directly. Plain functions run in the
    threadpool so slow handlers do not hold up other requests.
    """
    if _is_async_handler(handler):
        return await handler(request)  # type: ignore[misc]

    result = await run_in_threadpool(handler, request)
    if inspect.isawaitable(result):
        result = await result
    return result


def load_handler(reference: str) -> EventHandler:
    """Import a handler from a ``module:function`` reference.

    Raises:
        ValueError: If the reference is not in module:function form
        ImportError: If the module cannot be imported
        AttributeError: If the module has no such attribute
        TypeError: If the attribute is not callable
    """
    module_name, sep, attr = reference.partition(":")
    if not sep or not module_name or not attr:
        raise ValueError(f"Handler reference must look like 'module:function', got {reference!r}")

    module = importlib.import_module(module_name)
    handler = getattr(module, attr)
    if not callable(handler):
        raise TypeError(f"Handler {reference} is not callable")
    return handler
