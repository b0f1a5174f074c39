"""Abuse protection handshake and request signature checks."""

from __future__ import annotations

import hashlib
import hmac
import logging
from collections.abc import Iterable

from starlette.responses import Response

from .constants import WEBHOOK_ALLOWED_ORIGIN_HEADER
from .settings import WebhookSettings

logger = logging.getLogger(__name__)

SIGNATURE_PREFIX = "sha256="


def build_validation_response(origins: list[str], settings: WebhookSettings) -> Response:
    """Reply to an abuse protection handshake.

    The first requested origin that is allowed is echoed back in the
    WebHook-Allowed-Origin header. With a wildcard configuration the
    reply allows any origin.

    Args:
        origins: Origins from the WebHook-Request-Origin header, in order
        settings: Webhook settings holding the allowed origins

    Returns:
        200 with the allowed origin header, or 400 if no origin is allowed
    """
    if settings.allows_any_origin():
        return Response(status_code=200, headers={WEBHOOK_ALLOWED_ORIGIN_HEADER: "*"})

    for origin in origins:
        if settings.is_origin_allowed(origin):
            return Response(status_code=200, headers={WEBHOOK_ALLOWED_ORIGIN_HEADER: origin})

    logger.warning(f"Rejected webhook handshake from origins: {origins}")
    return Response(status_code=400)


def compute_signature(connection_id: str, access_key: str) -> str:
    """Compute the ce-signature value the service sends for a connection."""
    digest = hmac.new(access_key.encode("utf-8"), connection_id.encode("utf-8"), hashlib.sha256)
    return SIGNATURE_PREFIX + digest.hexdigest()


def validate_signature(
    connection_id: str,
    signature_header: str | None,
    access_keys: Iterable[str],
) -> bool:
    """Check a ce-signature header against the configured access keys.

    The header holds a comma-separated list of ``sha256=<hex>`` values,
    one per key the service signed with. A match on any key is enough.
    Without configured keys every request is accepted.
    """
    keys = list(access_keys)
    if not keys:
        return True
    if not signature_header:
        return False

    received = [value.strip().lower() for value in signature_header.split(",")]
    for key in keys:
        expected = compute_signature(connection_id, key)
        if any(hmac.compare_digest(expected, value) for value in received):
            return True
    return False
