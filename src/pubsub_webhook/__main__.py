"""Entry point for ``python -m pubsub_webhook``."""

from .cli import main

main()
