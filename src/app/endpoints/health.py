"""Handlers for health REST API endpoints.

These endpoints are used to check if service is live and prepared to accept
requests. Note that these endpoints can be accessed using GET or HEAD HTTP
methods. For HEAD HTTP method, just the HTTP response code is used.
"""

from typing import Any

from fastapi import APIRouter, Response, status

from configuration import LogicError, configuration
from log import get_logger
from models.responses import LivenessResponse, ReadinessResponse

logger = get_logger(__name__)
router = APIRouter(tags=["health"])


get_readiness_responses: dict[int | str, dict[str, Any]] = {
    200: {
        "description": "Service is ready",
        "model": ReadinessResponse,
    },
    503: {
        "description": "Service is not ready",
        "model": ReadinessResponse,
    },
}


@router.get("/readiness", responses=get_readiness_responses)
async def readiness_probe_get_method(response: Response) -> ReadinessResponse:
    """
    Handle the readiness probe endpoint, returning service readiness.

    The service is ready when chat endpoints are initialized and all
    configured stores are connected. Returns 503 otherwise.
    """
    logger.info("Response to /readiness endpoint")

    try:
        _ = configuration.endpoint_registry
        stores = {name: store.ready() for name, store in configuration.stores().items()}
    except LogicError as e:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return ReadinessResponse(ready=False, reason=str(e))

    not_ready = [name for name, ready in stores.items() if not ready]
    if not_ready:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return ReadinessResponse(
            ready=False,
            reason=f"Stores not ready: {', '.join(not_ready)}",
            stores=stores,
        )
    return ReadinessResponse(ready=True, reason="Service is ready", stores=stores)


get_liveness_responses: dict[int | str, dict[str, Any]] = {
    200: {
        "description": "Service is alive",
        "model": LivenessResponse,
    },
    # HTTP_503_SERVICE_UNAVAILABLE will never be returned when unreachable
}


@router.get("/liveness", responses=get_liveness_responses)
async def liveness_probe_get_method() -> LivenessResponse:
    """
    Return the liveness status of the service.

    Returns:
        LivenessResponse: Indicates that the service is alive.
    """
    logger.info("Response to /liveness endpoint")

    return LivenessResponse(alive=True)
