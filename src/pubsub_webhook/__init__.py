"""Webhook layer for a pub/sub messaging service.

The service delivers connection lifecycle events (connect, connected,
disconnected) and user messages over HTTP using CloudEvents headers.
This package classifies those events, calls an application handler,
and translates the handler's output into the reply the service expects:

- data_types: payload kind <-> content type negotiation
- events: system/user classification and handshake detection
- states / context: connection state extraction, merging and encoding
- builder: handler output -> HTTP response
- app / cli: Starlette application and command line entry point
"""

from .builder import BuildResult, build_error_response, build_valid_response, status_code_of
from .context import ConnectionContext
from .data_types import DataType, content_type_of, data_type_of, try_data_type_of
from .errors import MissingHeaderError, StateDecodeError, UnsupportedMediaTypeError, WebhookError
from .events import EventType, RequestType, event_type_of, is_validation_request, request_type_of
from .handler import EventHandler, WebhookRequest
from .responses import ConnectEventResponse, ErrorCode, EventErrorResponse, UserEventResponse
from .settings import WebhookSettings, load_settings
from .states import decode_states, encode_states, extract_state_update

__all__ = [
    # Builder
    "BuildResult",
    "build_error_response",
    "build_valid_response",
    "status_code_of",
    # Context
    "ConnectionContext",
    # Data types
    "DataType",
    "content_type_of",
    "data_type_of",
    "try_data_type_of",
    # Errors
    "MissingHeaderError",
    "StateDecodeError",
    "UnsupportedMediaTypeError",
    "WebhookError",
    # Events
    "EventType",
    "RequestType",
    "event_type_of",
    "is_validation_request",
    "request_type_of",
    # Handler
    "EventHandler",
    "WebhookRequest",
    # Responses
    "ConnectEventResponse",
    "ErrorCode",
    "EventErrorResponse",
    "UserEventResponse",
    # Settings
    "WebhookSettings",
    "load_settings",
    # States
    "decode_states",
    "encode_states",
    "extract_state_update",
]
