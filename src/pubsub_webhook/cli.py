"""Webhook server CLI.

Usage:
    pubsub-webhook serve --handler myapp.events:handle          # Serve on 127.0.0.1:8080
    pubsub-webhook serve --handler myapp.events:handle --port 7071
    pubsub-webhook serve --handler myapp.events:handle --config webhook.yaml
    pubsub-webhook health                                       # Probe a running server
    pubsub-webhook config                                       # Show effective settings
"""

from __future__ import annotations

import json
import logging
import os
import sys

import click
import httpx

from .app import CONFIG_ENV, HANDLER_ENV
from .handler import load_handler
from .settings import load_settings

LOG_LEVELS = ["debug", "info", "warning", "error"]


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@click.group()
def main() -> None:
    """Webhook server for pub/sub connection and user events."""


@main.command()
@click.option("--handler", "handler_ref", required=True, help="Event handler as module:function")
@click.option("--host", default="127.0.0.1", help="Host to bind to")
@click.option("--port", default=8080, help="Port to bind to")
@click.option("--config", "config_path", type=click.Path(exists=True), help="YAML settings file")
@click.option("--log-level", type=click.Choice(LOG_LEVELS), default="info", help="Logging level")
@click.option("--reload", is_flag=True, help="Enable auto-reload for development")
def serve(
    handler_ref: str,
    host: str,
    port: int,
    config_path: str | None,
    log_level: str,
    reload: bool,
) -> None:
    """Run the webhook HTTP server."""
    import uvicorn

    _configure_logging(log_level)

    # Fail fast on a bad handler reference instead of inside the worker
    try:
        load_handler(handler_ref)
    except (ValueError, ImportError, AttributeError, TypeError) as e:
        raise click.BadParameter(str(e), param_hint="--handler") from e

    settings = load_settings(config_path)

    # The app factory reads these so reload workers can rebuild the app
    os.environ[HANDLER_ENV] = handler_ref
    if config_path:
        os.environ[CONFIG_ENV] = config_path
    else:
        os.environ.pop(CONFIG_ENV, None)

    click.echo(f"Starting webhook server on http://{host}:{port}{settings.path}", err=True)
    click.echo("Press Ctrl+C to stop", err=True)

    uvicorn.run(
        "pubsub_webhook.app:create_app_from_env",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_level=log_level,
    )


@main.command()
@click.option("--url", default="http://localhost:8080", help="Server URL")
def health(url: str) -> None:
    """Check that a webhook server is up."""
    try:
        response = httpx.get(f"{url.rstrip('/')}/health", timeout=5.0)
        response.raise_for_status()
    except httpx.HTTPError as e:
        click.echo(f"Unhealthy: {e}", err=True)
        sys.exit(1)
    click.echo(f"Healthy: {response.json().get('status', 'unknown')}")


@main.command()
@click.option("--config", "config_path", type=click.Path(exists=True), help="YAML settings file")
def config(config_path: str | None) -> None:
    """Show the effective settings."""
    settings = load_settings(config_path)
    # Keys are secrets; show only how many are configured
    shown = settings.model_dump(exclude={"access_keys"})
    shown["access_keys"] = f"{len(settings.access_keys)} configured"
    click.echo(json.dumps(shown, indent=2))


if __name__ == "__main__":
    main()
