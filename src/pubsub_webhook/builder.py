"""Turn a handler's output into the response sent back to the service.

Handlers return either a typed response model or untyped JSON (a string,
bytes, or an already-decoded dict). The output is classified once into
one of four shapes:

- ErrorOutput: the handler reported a failure
- ConnectOutput / UserOutput: typed replies
- RawJsonOutput: a JSON object to interpret against the request type

Errors win over everything else. Otherwise the request type decides:
connect and user events get a body plus the merged connection state,
lifecycle notifications get nothing.

Building never raises. A malformed handler output produces no response
so the connection handshake and message delivery keep working; the
cause is logged and returned in BuildResult.error.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Union

from starlette.responses import Response

from .constants import CE_STATE_HEADER
from .context import ConnectionContext
from .data_types import DataType, content_type_of
from .events import RequestType
from .responses import (
    ConnectEventResponse,
    ErrorCode,
    EventErrorResponse,
    UserEventResponse,
    WebhookEventResponse,
)
from .states import encode_states, extract_state_update

logger = logging.getLogger(__name__)

_STATUS_CODES: dict[ErrorCode, int] = {
    ErrorCode.USER_ERROR: 400,
    ErrorCode.UNAUTHORIZED: 401,
    ErrorCode.SERVER_ERROR: 500,
}


# =============================================================================
# Handler output shapes
# =============================================================================


@dataclass(frozen=True)
class ErrorOutput:
    error: EventErrorResponse


@dataclass(frozen=True)
class ConnectOutput:
    response: ConnectEventResponse


@dataclass(frozen=True)
class UserOutput:
    response: UserEventResponse


@dataclass(frozen=True)
class RawJsonOutput:
    """Untyped JSON object with its original text."""

    text: str
    document: dict[str, Any]


HandlerOutput = Union[ErrorOutput, ConnectOutput, UserOutput, RawJsonOutput]


def classify_output(response: Any) -> HandlerOutput:
    """Classify a handler's output.

    Args:
        response: Typed response model, JSON text, JSON bytes, or a decoded
            JSON object

    Returns:
        The matching HandlerOutput shape

    Raises:
        ValueError: If untyped output is not valid JSON
        TypeError: If the output is neither a known model nor a JSON object
    """
    if isinstance(response, EventErrorResponse):
        return ErrorOutput(response)
    if isinstance(response, ConnectEventResponse):
        return ConnectOutput(response)
    if isinstance(response, UserEventResponse):
        return UserOutput(response)
    if isinstance(response, WebhookEventResponse):
        raise TypeError(f"Unsupported response model: {type(response).__name__}")

    if isinstance(response, (bytes, bytearray)):
        text = bytes(response).decode("utf-8")
        document = json.loads(text)
    elif isinstance(response, str):
        text = response
        document = json.loads(text)
    elif isinstance(response, dict):
        text = json.dumps(response)
        document = response
    else:
        raise TypeError(f"Unsupported response type: {type(response).__name__}")

    if not isinstance(document, dict):
        raise TypeError(f"Response JSON must be an object, got {type(document).__name__}")
    if "code" in document:
        return ErrorOutput(EventErrorResponse.model_validate(document))
    return RawJsonOutput(text=text, document=document)


# =============================================================================
# Response construction
# =============================================================================


@dataclass
class BuildResult:
    """Outcome of build_valid_response.

    ``response`` is None when nothing should override the default reply.
    ``error`` holds the cause when that happened because the handler
    output could not be used.
    """

    response: Response | None = None
    error: Exception | None = None

    @property
    def has_response(self) -> bool:
        return self.response is not None


def status_code_of(code: ErrorCode | str) -> int:
    """Get the HTTP status for an error code. Unknown codes map to 500."""
    if not isinstance(code, ErrorCode):
        try:
            code = ErrorCode(code)
        except ValueError:
            return 500
    return _STATUS_CODES.get(code, 500)


def build_error_response(error: EventErrorResponse) -> Response:
    """Build the reply for a handler-reported error.

    The message goes out as plain text. Error replies never carry
    connection state.
    """
    return Response(
        content=error.error_message or "",
        status_code=status_code_of(error.code),
        media_type=content_type_of(DataType.TEXT),
    )


def _state_headers(merged_states: dict[str, Any]) -> dict[str, str]:
    if not merged_states:
        return {}
    return {CE_STATE_HEADER: encode_states(merged_states)}


def build_connect_response(body: str, merged_states: dict[str, Any]) -> Response:
    """Build the reply to a connect event. Connect replies are always JSON."""
    return Response(
        content=body,
        media_type=content_type_of(DataType.JSON),
        headers=_state_headers(merged_states),
    )


def build_user_response(response: UserEventResponse, merged_states: dict[str, Any]) -> Response:
    """Build the reply to a user event."""
    return Response(
        content=response.data or b"",
        media_type=content_type_of(response.data_type),
        headers=_state_headers(merged_states),
    )


def _with_states(
    context: ConnectionContext,
    update: dict[str, Any],
    build: Callable[[dict[str, Any]], Response],
) -> Response:
    # The reply is built from a preview so a failed build leaves state untouched
    response = build(context.preview_states(update))
    context.update_states(update)
    return response


def _build(output: HandlerOutput, request_type: RequestType, context: ConnectionContext) -> Response | None:
    if isinstance(output, ErrorOutput):
        return build_error_response(output.error)

    if request_type == RequestType.CONNECT:
        if isinstance(output, RawJsonOutput):
            text = output.text
            return _with_states(
                context,
                extract_state_update(output.document),
                lambda merged: build_connect_response(text, merged),
            )
        if isinstance(output, ConnectOutput):
            body = output.response.to_body()
            return _with_states(
                context,
                output.response.states,
                lambda merged: build_connect_response(body, merged),
            )
        return None

    if request_type == RequestType.USER:
        if isinstance(output, RawJsonOutput):
            reply = UserEventResponse.model_validate(output.document)
            update = extract_state_update(output.document)
        elif isinstance(output, UserOutput):
            reply = output.response
            update = reply.states
        else:
            return None
        return _with_states(context, update, lambda merged: build_user_response(reply, merged))

    # Connected, disconnected and ignored events take no reply body
    return None


def build_valid_response(
    response: Any,
    request_type: RequestType,
    context: ConnectionContext,
) -> BuildResult:
    """Build the reply for a handler's output.

    Args:
        response: Handler output (typed model or untyped JSON); None means
            the handler has nothing to say
        request_type: Classified request type of the inbound event
        context: Connection the event belongs to; its state is merged with
            any update in the output

    Returns:
        BuildResult with the response to send, or with no response when the
        default reply should be used
    """
    if response is None:
        return BuildResult()

    try:
        output = classify_output(response)
        return BuildResult(response=_build(output, request_type, context))
    except Exception as e:
        logger.warning(
            f"Ignoring invalid handler response for {request_type.value} event "
            f"on connection {context.connection_id}: {e}"
        )
        return BuildResult(error=e)
