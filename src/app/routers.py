"""REST API routers."""

from fastapi import FastAPI

from app.endpoints import (
    chat,
    health,
    metrics,
)


def include_routers(app: FastAPI) -> None:
    """Include FastAPI routers for different endpoints.

    Args:
        app: The `FastAPI` app instance.
    """
    app.include_router(chat.router, prefix="/v1")

    # health probes and metrics are not versioned
    app.include_router(health.router)
    app.include_router(metrics.router)
