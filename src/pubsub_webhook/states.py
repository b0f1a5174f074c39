"""Connection state extraction and header encoding.

Connection state is an application-defined JSON object attached to a
live connection. Handlers send updates in a top-level ``states`` field;
the merged result travels back to the service base64-encoded in the
``ce-connectionState`` header.
"""

from __future__ import annotations

import base64
import binascii
import json
from typing import Any

from .errors import StateDecodeError


def extract_state_update(document: Any) -> dict[str, Any]:
    """Get the state update carried by a handler payload.

    Only a JSON object under ``states`` counts as an update. Arrays,
    scalars and ``null`` are treated as "no update" so a client cannot
    wipe the connection state by sending ``"states": null``.

    Args:
        document: Parsed JSON payload

    Returns:
        The update map, empty if there is none
    """
    if not isinstance(document, dict):
        return {}
    states = document.get("states")
    if isinstance(states, dict):
        return dict(states)
    return {}


def encode_states(states: dict[str, Any]) -> str:
    """Encode a state map into a header-safe string."""
    payload = json.dumps(states, separators=(",", ":"), ensure_ascii=False)
    return base64.b64encode(payload.encode("utf-8")).decode("ascii")


def decode_states(value: str | None) -> dict[str, Any]:
    """Decode a state header value produced by encode_states.

    Args:
        value: Header value, may be None or empty

    Returns:
        The decoded state map (empty when there is no header)

    Raises:
        StateDecodeError: If the value is not base64-encoded JSON object
    """
    if not value:
        return {}
    try:
        decoded = json.loads(base64.b64decode(value, validate=True).decode("utf-8"))
    except (binascii.Error, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise StateDecodeError(f"Invalid connection state header: {e}") from e
    if not isinstance(decoded, dict):
        raise StateDecodeError("Connection state header must encode a JSON object")
    return decoded
