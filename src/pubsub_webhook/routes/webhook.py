"""Webhook endpoint receiving events from the service.

One route handles both the abuse protection handshake (GET/OPTIONS)
and event delivery (POST). Connect and user events may be answered with
a body built from the handler's output; everything else gets an empty
200.
"""

from __future__ import annotations

import logging

from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response
from starlette.routing import Route

from ..builder import build_valid_response
from ..context import ConnectionContext
from ..data_types import try_data_type_of
from ..errors import WebhookError
from ..events import RequestType, is_validation_request
from ..handler import EventHandler, WebhookRequest, invoke_handler
from ..settings import WebhookSettings
from ..validation import build_validation_response, validate_signature

logger = logging.getLogger(__name__)

_RESPONDING_REQUEST_TYPES = frozenset({RequestType.CONNECT, RequestType.USER})


def _media_type(request: Request) -> str | None:
    content_type = request.headers.get("content-type")
    if content_type is None:
        return None
    return content_type.split(";", 1)[0].strip()


def create_webhook_routes(handler: EventHandler, settings: WebhookSettings) -> list[Route]:
    """Create the webhook route bound to an application handler.

    Args:
        handler: Application handler called for every accepted event
        settings: Webhook settings

    Returns:
        Routes to mount on the application
    """

    async def webhook_endpoint(request: Request) -> Response:
        try:
            is_validation, origins = is_validation_request(request)
        except WebhookError as e:
            return PlainTextResponse(str(e), status_code=400)
        if is_validation:
            return build_validation_response(origins, settings)

        try:
            context = ConnectionContext.from_headers(request.headers)
        except WebhookError as e:
            logger.warning(f"Rejected malformed webhook request: {e}")
            return PlainTextResponse(str(e), status_code=400)

        if not settings.accepts_hub(context.hub):
            logger.warning(f"Rejected event for unexpected hub: {context.hub}")
            return PlainTextResponse(f"Unexpected hub: {context.hub}", status_code=400)

        if not validate_signature(context.connection_id, context.signature, settings.access_keys):
            logger.warning(f"Rejected event with invalid signature for connection {context.connection_id}")
            return PlainTextResponse("Invalid signature", status_code=401)

        request_type = context.request_type
        if request_type == RequestType.IGNORED:
            return Response(status_code=200)

        data_type, known = try_data_type_of(_media_type(request))
        if not known:
            logger.debug(f"Unknown content type on {context.event_name} event, treating as binary")

        webhook_request = WebhookRequest(
            context=context,
            request_type=request_type,
            data=await request.body(),
            data_type=data_type,
        )

        try:
            output = await invoke_handler(handler, webhook_request)
        except Exception:
            logger.exception(f"Handler failed for {context.event_name} event on connection {context.connection_id}")
            return PlainTextResponse("Handler failed", status_code=500)

        if request_type not in _RESPONDING_REQUEST_TYPES:
            return Response(status_code=200)

        result = build_valid_response(output, request_type, context)
        if result.response is None:
            return Response(status_code=200)
        return result.response

    return [
        Route(settings.path, webhook_endpoint, methods=["GET", "OPTIONS", "POST"]),
    ]
