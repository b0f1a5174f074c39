"""Classification of inbound webhook events.

Every request from the service carries a CloudEvents type and an event
name. The type tells system (connection lifecycle) events apart from
user messages; the event name picks the lifecycle stage. Together they
select how the handler's output is turned into a response.
"""

from __future__ import annotations

import logging
from enum import Enum

from starlette.requests import Request

from .constants import (
    CONNECT_EVENT,
    CONNECTED_EVENT,
    DISCONNECTED_EVENT,
    SYSTEM_EVENT_TYPE_PREFIX,
    WEBHOOK_REQUEST_ORIGIN_HEADER,
)
from .errors import MissingHeaderError

logger = logging.getLogger(__name__)


class EventType(str, Enum):
    """Origin of an event."""

    SYSTEM = "system"
    USER = "user"


class RequestType(str, Enum):
    """Dispatch key used when building a response."""

    CONNECT = "connect"
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"
    USER = "user"
    IGNORED = "ignored"


_SYSTEM_EVENTS: dict[str, RequestType] = {
    CONNECT_EVENT: RequestType.CONNECT,
    CONNECTED_EVENT: RequestType.CONNECTED,
    DISCONNECTED_EVENT: RequestType.DISCONNECTED,
}

_VALIDATION_METHODS = frozenset({"OPTIONS", "GET"})


def event_type_of(ce_type: str) -> EventType:
    """Classify a CloudEvents type token as a system or user event."""
    if ce_type.lower().startswith(SYSTEM_EVENT_TYPE_PREFIX):
        return EventType.SYSTEM
    return EventType.USER


def request_type_of(event_type: EventType, event_name: str) -> RequestType:
    """Get the request type for an event.

    User events are always USER. System events are matched by name;
    unknown system events are IGNORED rather than rejected so that newer
    service versions can add events without breaking older handlers.
    """
    if event_type == EventType.USER:
        return RequestType.USER

    request_type = _SYSTEM_EVENTS.get(event_name.lower())
    if request_type is None:
        logger.debug(f"Ignoring unrecognized system event: {event_name}")
        return RequestType.IGNORED
    return request_type


def is_validation_request(request: Request) -> tuple[bool, list[str]]:
    """Check whether a request is an abuse-protection handshake.

    Args:
        request: Inbound HTTP request

    Returns:
        Tuple of (is_validation, origins). Origins are the values of the
        WebHook-Request-Origin header in the order they were sent.

    Raises:
        MissingHeaderError: If a handshake request carries no origin header
    """
    if request.method.upper() not in _VALIDATION_METHODS:
        return False, []

    values = request.headers.getlist(WEBHOOK_REQUEST_ORIGIN_HEADER)
    if not values:
        raise MissingHeaderError(WEBHOOK_REQUEST_ORIGIN_HEADER)

    origins = [origin.strip() for value in values for origin in value.split(",") if origin.strip()]
    return True, origins
