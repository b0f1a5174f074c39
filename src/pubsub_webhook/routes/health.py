"""Health check endpoint."""

from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route


async def health_check(request: Request) -> JSONResponse:
    """Report liveness and where the webhook is mounted."""
    settings = getattr(request.app.state, "settings", None)
    return JSONResponse(
        {
            "status": "ok",
            "webhook_path": settings.path if settings is not None else None,
            "hub": settings.hub if settings is not None else None,
        }
    )


health_routes = [
    Route("/health", health_check, methods=["GET"]),
]
