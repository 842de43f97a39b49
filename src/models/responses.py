"""Models for REST API responses."""

from typing import Any, Optional

from pydantic import BaseModel, Field


class MediaPayload(BaseModel):
    """Media output returned by a generator: content type plus location."""

    content_type: str = Field(
        description="MIME type of the generated media",
        examples=["image/png"],
    )
    url: str = Field(
        description="Location of the generated media",
        examples=["https://example.com/media/1.png"],
    )


class ToolCall(BaseModel):
    """Model representing a tool call made during response generation."""

    tool_name: str = Field(description="Name of the tool called")
    arguments: Any = Field(None, description="Arguments passed to the tool")
    result: Any = Field(None, description="Result from the tool")


class UsageDetails(BaseModel):
    """Token usage and tooling metadata reported by the generator."""

    input_tokens: int = 0
    output_tokens: int = 0
    total_tokens: int = 0
    tool_calls: list[ToolCall] = Field(default_factory=list)


class ChatResponse(BaseModel):
    """Model representing a successful chat endpoint response.

    Attributes:
        response: Response payload; a string for text output, parsed JSON for
            json output, or a media payload for media output.
        chat_id: Conversation ID, present only when chat history is enabled.
        usage_details: Usage metadata, present only for verbose endpoints.
    """

    response: Any
    chat_id: Optional[str] = None
    usage_details: Optional[UsageDetails] = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "response": "The price of X is 10 USD.",
                    "chat_id": "pG9u6Y3kQ1y3v0nq1sH3C2XvGZ8aZ6pMZbWb1nq9xJk",
                }
            ]
        }
    }


class ErrorResponse(BaseModel):
    """Model representing a failed chat endpoint response.

    Every failure surfaces as a single human-readable message. The HTTP status
    is carried alongside but is never serialized.
    """

    error: str
    status_code: int = Field(default=500, exclude=True)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"error": "Authorization failed. API key is disabled."},
            ]
        }
    }


class LivenessResponse(BaseModel):
    """Model representing a response to a liveness request."""

    alive: bool


class ReadinessResponse(BaseModel):
    """Model representing a response to a readiness request.

    Attributes:
        ready: Whether all configured stores are connected.
        reason: Human readable explanation.
        stores: Connection state per configured store.
    """

    ready: bool
    reason: str
    stores: dict[str, bool] = Field(default_factory=dict)
