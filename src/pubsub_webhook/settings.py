"""Webhook configuration.

Settings come from an optional YAML file, overlaid by environment
variables:

    PUBSUB_WEBHOOK_HUB              Only accept events for this hub
    PUBSUB_WEBHOOK_ALLOWED_ORIGINS  Comma-separated handshake origins ("*" for any)
    PUBSUB_WEBHOOK_ACCESS_KEYS      Comma-separated keys for ce-signature checks
    PUBSUB_WEBHOOK_PATH             Route the webhook is served on
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from .constants import DEFAULT_WEBHOOK_PATH

logger = logging.getLogger(__name__)

ENV_PREFIX = "PUBSUB_WEBHOOK_"
_LIST_FIELDS = ("allowed_origins", "access_keys")


class WebhookSettings(BaseModel):
    """Runtime settings for the webhook endpoint."""

    hub: str | None = None
    allowed_origins: list[str] = Field(default_factory=lambda: ["*"])
    access_keys: list[str] = Field(default_factory=list)
    path: str = DEFAULT_WEBHOOK_PATH

    def allows_any_origin(self) -> bool:
        return "*" in self.allowed_origins

    def is_origin_allowed(self, origin: str) -> bool:
        """Check an origin host against allowed_origins (case-insensitive)."""
        if self.allows_any_origin():
            return True
        return origin.lower() in (allowed.lower() for allowed in self.allowed_origins)

    def accepts_hub(self, hub: str | None) -> bool:
        """Check whether events for a hub should be handled."""
        if self.hub is None:
            return True
        return hub is not None and hub.lower() == self.hub.lower()


def _split(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def load_settings(
    path: str | Path | None = None,
    env: Mapping[str, str] | None = None,
) -> WebhookSettings:
    """Load settings from a YAML file and the environment.

    Args:
        path: Optional YAML file with keys matching WebhookSettings fields
        env: Environment mapping, defaults to os.environ

    Returns:
        Validated settings

    Raises:
        FileNotFoundError: If path is given but does not exist
        pydantic.ValidationError: If a value has the wrong shape
    """
    env = os.environ if env is None else env
    values: dict[str, Any] = {}

    if path is not None:
        with open(path) as f:
            loaded = yaml.safe_load(f) or {}
        if not isinstance(loaded, dict):
            raise ValueError(f"Settings file {path} must contain a mapping")
        values.update(loaded)
        logger.debug(f"Loaded webhook settings from {path}")

    for name in WebhookSettings.model_fields:
        raw = env.get(f"{ENV_PREFIX}{name.upper()}")
        if raw is None:
            continue
        values[name] = _split(raw) if name in _LIST_FIELDS else raw

    return WebhookSettings.model_validate(values)
