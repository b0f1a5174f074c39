"""Unit tests for ConnectionContext."""

from __future__ import annotations

import pytest
from starlette.datastructures import Headers

from pubsub_webhook.context import ConnectionContext
from pubsub_webhook.errors import MissingHeaderError, StateDecodeError
from pubsub_webhook.events import EventType, RequestType
from pubsub_webhook.states import encode_states


def _headers(**overrides: str | None) -> Headers:
    values = {
        "ce-type": "azure.webpubsub.sys.connect",
        "ce-eventName": "connect",
        "ce-connectionId": "conn-1",
        "ce-hub": "chat",
        "ce-userId": "alice",
        "ce-signature": "sha256=abc",
    }
    values.update(overrides)
    return Headers(headers={k: v for k, v in values.items() if v is not None})


class TestUpdateStates:
    """Tests for merging state updates."""

    def test_merge_into_empty(self, context: ConnectionContext) -> None:
        assert context.update_states({"room": "a"}) == {"room": "a"}
        assert context.states == {"room": "a"}

    def test_new_value_wins(self, context: ConnectionContext) -> None:
        context.states = {"room": "a", "role": "admin"}

        merged = context.update_states({"room": "b", "seat": 3})

        assert merged == {"room": "b", "role": "admin", "seat": 3}

    def test_empty_update_returns_existing_state(self, context: ConnectionContext) -> None:
        context.states = {"room": "a"}

        assert context.update_states({}) == {"room": "a"}
        assert context.update_states(None) == {"room": "a"}

    def test_returns_copy(self, context: ConnectionContext) -> None:
        merged = context.update_states({"room": "a"})
        merged["room"] = "changed"

        assert context.states == {"room": "a"}


class TestPreviewStates:
    """Tests for computing a merge without applying it."""

    def test_preview_does_not_mutate(self, context: ConnectionContext) -> None:
        context.states = {"room": "a", "role": "admin"}

        preview = context.preview_states({"room": "b"})

        assert preview == {"room": "b", "role": "admin"}
        assert context.states == {"room": "a", "role": "admin"}

    def test_preview_matches_update(self, context: ConnectionContext) -> None:
        context.states = {"room": "a"}

        preview = context.preview_states({"seat": 1})

        assert context.update_states({"seat": 1}) == preview


class TestFromHeaders:
    """Tests for parsing CloudEvents headers."""

    def test_parses_all_fields(self) -> None:
        context = ConnectionContext.from_headers(_headers())

        assert context.event_type == EventType.SYSTEM
        assert context.event_name == "connect"
        assert context.connection_id == "conn-1"
        assert context.hub == "chat"
        assert context.user_id == "alice"
        assert context.signature == "sha256=abc"
        assert context.states == {}
        assert context.request_type == RequestType.CONNECT

    def test_user_event(self) -> None:
        context = ConnectionContext.from_headers(_headers(**{"ce-type": "azure.webpubsub.user.message", "ce-eventName": "message"}))

        assert context.event_type == EventType.USER
        assert context.request_type == RequestType.USER

    def test_decodes_state_header(self) -> None:
        context = ConnectionContext.from_headers(_headers(**{"ce-connectionState": encode_states({"room": "a"})}))

        assert context.states == {"room": "a"}

    def test_invalid_state_header(self) -> None:
        with pytest.raises(StateDecodeError):
            ConnectionContext.from_headers(_headers(**{"ce-connectionState": "%%%"}))

    @pytest.mark.parametrize("header", ["ce-type", "ce-eventName", "ce-connectionId"])
    def test_missing_required_header(self, header: str) -> None:
        with pytest.raises(MissingHeaderError) as exc_info:
            ConnectionContext.from_headers(_headers(**{header: None}))

        assert exc_info.value.header == header

    def test_optional_headers_default_to_none(self) -> None:
        context = ConnectionContext.from_headers(_headers(**{"ce-hub": None, "ce-userId": None, "ce-signature": None}))

        assert context.hub is None
        assert context.user_id is None
        assert context.signature is None
