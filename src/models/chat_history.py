"""Models for conversation history."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field
from typing_extensions import Literal

from models.responses import MediaPayload


class ChatMessage(BaseModel):
    """One role-tagged message of a conversation.

    Attributes:
        role: Message author: "system", "user" or "model".
        content: Text content; structured output is stored serialized.
        media: Media content, if the message carries media output.
    """

    role: Literal["system", "user", "model"]
    content: str = ""
    media: Optional[MediaPayload] = None


class ChatHistoryRecord(BaseModel):
    """Conversation stored under an opaque ID, in append order."""

    conversation_id: str
    messages: list[ChatMessage] = Field(default_factory=list)
    last_updated: datetime
