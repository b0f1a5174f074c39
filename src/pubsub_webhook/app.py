"""Webhook Server Application.

Creates the Starlette ASGI application with all routes.
"""

from __future__ import annotations

import os

from starlette.applications import Starlette
from starlette.routing import Route

from .handler import EventHandler, load_handler
from .routes import create_webhook_routes, health_routes
from .settings import WebhookSettings, load_settings

HANDLER_ENV = "PUBSUB_WEBHOOK_HANDLER"
CONFIG_ENV = "PUBSUB_WEBHOOK_CONFIG"


def create_app(handler: EventHandler, settings: WebhookSettings | None = None) -> Starlette:
    """Create the webhook application.

    Args:
        handler: Application handler called for every accepted event
        settings: Webhook settings, loaded from the environment if omitted

    Returns:
        Configured Starlette application
    """
    if settings is None:
        settings = load_settings()

    routes: list[Route] = []
    routes.extend(health_routes)
    routes.extend(create_webhook_routes(handler, settings))

    app = Starlette(routes=routes)
    app.state.settings = settings
    return app


def create_app_from_env() -> Starlette:
    """App factory for uvicorn.

    The CLI passes the handler reference and config path through the
    environment so that reload workers can rebuild the app.
    """
    reference = os.environ.get(HANDLER_ENV)
    if not reference:
        raise RuntimeError(f"{HANDLER_ENV} is not set")
    return create_app(load_handler(reference), load_settings(os.environ.get(CONFIG_ENV)))
