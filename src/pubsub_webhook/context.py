"""Per-connection context parsed from CloudEvents headers."""

from __future__ import annotations

import threading
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .constants import (
    CE_CONNECTION_ID_HEADER,
    CE_EVENT_NAME_HEADER,
    CE_HUB_HEADER,
    CE_SIGNATURE_HEADER,
    CE_STATE_HEADER,
    CE_TYPE_HEADER,
    CE_USER_ID_HEADER,
)
from .errors import MissingHeaderError
from .events import EventType, RequestType, event_type_of, request_type_of
from .states import decode_states


def _require(headers: Mapping[str, str], name: str) -> str:
    value = headers.get(name)
    if not value:
        raise MissingHeaderError(name)
    return value


@dataclass
class ConnectionContext:
    """Metadata and state of the connection an event belongs to.

    The context owns the connection's state map for the lifetime of one
    request. Updates go through update_states, which merges under a lock
    and returns the full resulting map.
    """

    event_type: EventType
    event_name: str
    connection_id: str
    hub: str | None = None
    user_id: str | None = None
    signature: str | None = None
    states: dict[str, Any] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False, compare=False)

    @property
    def request_type(self) -> RequestType:
        """Request type derived from the event type and name."""
        return request_type_of(self.event_type, self.event_name)

    def preview_states(self, update: Mapping[str, Any] | None) -> dict[str, Any]:
        """Get the map update_states would produce, without applying it."""
        with self._lock:
            merged = dict(self.states)
        if update:
            merged.update(update)
        return merged

    def update_states(self, update: Mapping[str, Any] | None) -> dict[str, Any]:
        """Merge a state update into the connection state.

        Keys in the update replace existing keys; all other keys are kept.

        Returns:
            A copy of the full merged state map
        """
        with self._lock:
            if update:
                self.states.update(update)
            return dict(self.states)

    @classmethod
    def from_headers(cls, headers: Mapping[str, str]) -> ConnectionContext:
        """Build a context from the CloudEvents headers of a request.

        Args:
            headers: Request headers (case-insensitive mapping)

        Raises:
            MissingHeaderError: If ce-type, ce-eventName or ce-connectionId is absent
            StateDecodeError: If ce-connectionState is malformed
        """
        return cls(
            event_type=event_type_of(_require(headers, CE_TYPE_HEADER)),
            event_name=_require(headers, CE_EVENT_NAME_HEADER),
            connection_id=_require(headers, CE_CONNECTION_ID_HEADER),
            hub=headers.get(CE_HUB_HEADER),
            user_id=headers.get(CE_USER_ID_HEADER),
            signature=headers.get(CE_SIGNATURE_HEADER),
            states=decode_states(headers.get(CE_STATE_HEADER)),
        )
