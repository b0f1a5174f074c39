"""Typed handler responses.

Handlers may return one of these models instead of raw JSON. Field
names serialize in camelCase to match what the service expects.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .data_types import DataType


class ErrorCode(str, Enum):
    """Error codes a handler can report back to the service."""

    USER_ERROR = "UserError"
    UNAUTHORIZED = "Unauthorized"
    SERVER_ERROR = "ServerError"


class WebhookEventResponse(BaseModel):
    """Base model for typed handler responses."""

    model_config = ConfigDict(populate_by_name=True)


class EventErrorResponse(WebhookEventResponse):
    """Explicit failure reported by a handler.

    Unknown codes are kept as plain strings and answered with 500.
    """

    code: ErrorCode | str = Field(union_mode="left_to_right")
    error_message: str | None = Field(default=None, alias="errorMessage")

    @field_validator("code", mode="before")
    @classmethod
    def _normalize_code(cls, value: Any) -> Any:
        if isinstance(value, ErrorCode):
            return value
        text = str(value)
        for code in ErrorCode:
            if code.value.lower() == text.lower():
                return code
        return text


class _StatefulResponse(WebhookEventResponse):
    states: dict[str, Any] = Field(default_factory=dict)

    @field_validator("states", mode="before")
    @classmethod
    def _normalize_states(cls, value: Any) -> Any:
        # Only an object is an update; null never clears state
        return value if isinstance(value, dict) else {}


class ConnectEventResponse(_StatefulResponse):
    """Reply to a connect event.

    States are not part of the body; they travel in the state header.
    """

    user_id: str | None = Field(default=None, alias="userId")
    groups: list[str] | None = None
    subprotocol: str | None = None
    roles: list[str] | None = None

    def to_body(self) -> str:
        """Serialize the response body sent to the service."""
        return self.model_dump_json(by_alias=True, exclude_none=True, exclude={"states"})


class UserEventResponse(_StatefulResponse):
    """Reply to a user event."""

    data: bytes | None = None
    data_type: DataType = Field(default=DataType.TEXT, alias="dataType")

    @field_validator("data", mode="before")
    @classmethod
    def _coerce_data(cls, value: Any) -> Any:
        if value is None or isinstance(value, bytes):
            return value
        if isinstance(value, str):
            return value.encode("utf-8")
        # Non-string JSON values are sent as their JSON text
        return json.dumps(value).encode("utf-8")

    @field_validator("data_type", mode="before")
    @classmethod
    def _normalize_data_type(cls, value: Any) -> Any:
        return value.lower() if isinstance(value, str) else value
