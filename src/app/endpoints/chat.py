"""Handler for REST API calls to configured chat endpoints."""

from typing import Any

from fastapi import APIRouter, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from authentication.utils import extract_user_token
from configuration import configuration
from log import get_logger
from models.requests import ChatRequest
from models.responses import ChatResponse, ErrorResponse

logger = get_logger(__name__)
router = APIRouter(tags=["chat"])


chat_responses: dict[int | str, dict[str, Any]] = {
    200: {
        "description": "Response generated or served from cache",
        "model": ChatResponse,
    },
    401: {
        "description": "Missing or unknown credential",
        "model": ErrorResponse,
    },
    403: {
        "description": "Credential disabled, owned by someone else or not allowed",
        "model": ErrorResponse,
    },
    404: {
        "description": "Unknown chat endpoint or conversation",
        "model": ErrorResponse,
    },
    429: {
        "description": "Credential request limit exceeded",
        "model": ErrorResponse,
    },
    500: {
        "description": "Response could not be generated",
        "model": ErrorResponse,
    },
}


def response_body(result: Any) -> Any:
    """Serialize successful pipeline result, omitting absent chat ID and usage."""
    if not isinstance(result, ChatResponse):
        return jsonable_encoder(result)
    body: dict[str, Any] = {"response": jsonable_encoder(result.response)}
    if result.chat_id is not None:
        body["chat_id"] = result.chat_id
    if result.usage_details is not None:
        body["usage_details"] = result.usage_details.model_dump(mode="json")
    return body


@router.post("/chat/{endpoint}", responses=chat_responses)
async def chat_endpoint_handler(
    endpoint: str, chat_request: ChatRequest, request: Request
) -> JSONResponse:
    """
    Handle request to a configured chat endpoint.

    The credential token is read from the Authorization header and handed
    over to the endpoint pipeline, which decides whether it is needed.

    Returns:
        JSONResponse: Response value, or `{"response", "chat_id", "usage_details"}`
        object, or `{"error"}` object with the matching HTTP status.
    """
    pipeline = configuration.endpoint_registry.get(endpoint)
    if pipeline is None:
        logger.warning("Request for unknown chat endpoint %s", endpoint)
        return JSONResponse(
            status_code=404,
            content=ErrorResponse(error=f"Chat endpoint {endpoint} not found").model_dump(),
        )

    token = extract_user_token(request.headers)
    result = await pipeline.handle(chat_request, token)
    if isinstance(result, ErrorResponse):
        return JSONResponse(status_code=result.status_code, content=result.model_dump())
    return JSONResponse(content=response_body(result))
