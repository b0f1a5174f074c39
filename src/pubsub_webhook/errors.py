"""Exceptions raised by the webhook layer."""

from __future__ import annotations


class WebhookError(Exception):
    """Base class for errors surfaced to the caller of the webhook layer."""


class UnsupportedMediaTypeError(WebhookError, ValueError):
    """Raised when a content type does not map to a known data type."""

    def __init__(self, content_type: str | None) -> None:
        super().__init__(f"Unsupported content type: {content_type}")
        self.content_type = content_type


class MissingHeaderError(WebhookError):
    """Raised when a header required by the request contract is absent."""

    def __init__(self, header: str) -> None:
        super().__init__(f"Missing required header: {header}")
        self.header = header


class StateDecodeError(WebhookError, ValueError):
    """Raised when an encoded connection state header cannot be decoded."""
