"""Models for REST API requests."""

from typing import Optional

from pydantic import BaseModel, Field
from typing_extensions import Literal


class ChatRequest(BaseModel):
    """Model representing a request to a chat endpoint.

    Attributes:
        query: The query string. An empty query is answered with a greeting.
        chat_id: The optional conversation ID to continue.
        owner_id: ID of the caller; must match the credential owner when auth
            is enabled.
        output_kind: Optional override of the endpoint's declared output kind.

    Example:
        ```python
        chat_request = ChatRequest(query="What is the price of X?")
        ```
    """

    query: str = Field(
        description="The query string",
        examples=["What is the price of X?"],
    )

    chat_id: Optional[str] = Field(
        None,
        description="The optional conversation ID",
        examples=["pG9u6Y3kQ1y3v0nq1sH3C2XvGZ8aZ6pMZbWb1nq9xJk"],
    )

    owner_id: Optional[str] = Field(
        None,
        description="ID of the credential owner, required when auth is enabled",
        examples=["user-1"],
    )

    output_kind: Optional[Literal["text", "json", "media"]] = Field(
        None,
        description="Override of the output kind declared by the endpoint",
        examples=["json"],
    )

    model_config = {
        "extra": "forbid",
        "json_schema_extra": {
            "examples": [
                {
                    "query": "What is the price of X?",
                    "chat_id": "pG9u6Y3kQ1y3v0nq1sH3C2XvGZ8aZ6pMZbWb1nq9xJk",
                    "owner_id": "user-1",
                }
            ]
        },
    }
