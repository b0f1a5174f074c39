"""HTTP routes for the webhook server."""

from .health import health_routes
from .webhook import create_webhook_routes

__all__ = [
    "health_routes",
    "create_webhook_routes",
]
