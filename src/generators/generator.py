"""Response generator interface.

A response generator turns a fully assembled prompt into a response. It is
the only component that talks to the model.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from pydantic import BaseModel, Field

import constants
from models.chat_history import ChatMessage
from models.config import OutputConfiguration
from models.responses import MediaPayload, UsageDetails


class ModelSettings(BaseModel):
    """Model selection and sampling options for one generation call."""

    model: Optional[str] = None
    provider: Optional[str] = None
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None


class GenerateRequest(BaseModel):
    """Everything the generator needs to produce one response.

    Attributes:
        system_prompt: Effective system prompt selected by the chat agent.
        query: User prompt, already combined with retrieved context.
        context: Retrieved context, if any.
        history: Previous messages of the conversation.
        output: Expected output kind.
        model_settings: Model and sampling options.
        tools: Tool definitions passed to the model.
    """

    system_prompt: str
    query: str
    context: Optional[str] = None
    history: list[ChatMessage] = Field(default_factory=list)
    output: OutputConfiguration = Field(default_factory=OutputConfiguration)
    model_settings: ModelSettings = Field(default_factory=ModelSettings)
    tools: list[dict[str, Any]] = Field(default_factory=list)

    def messages(self) -> list[ChatMessage]:
        """Return the conversation sent to the model, without the response.

        The system prompt is prepended unless the history already starts
        the conversation with a system message.
        """
        messages = [message.model_copy() for message in self.history]
        if not any(message.role == constants.ROLE_SYSTEM for message in messages):
            messages.insert(
                0, ChatMessage(role=constants.ROLE_SYSTEM, content=self.system_prompt)
            )
        messages.append(ChatMessage(role=constants.ROLE_USER, content=self.query))
        return messages


class GenerateResponse(BaseModel):
    """Response produced by a generator.

    Attributes:
        text: Raw text returned by the model.
        output: Structured output parsed from the text for JSON responses.
        media: Media payload for media responses.
        usage: Token usage and tool calls, when reported.
        messages: Conversation the response was generated for.
    """

    text: str = ""
    output: Any = None
    media: Optional[MediaPayload] = None
    usage: Optional[UsageDetails] = None
    messages: list[ChatMessage] = Field(default_factory=list)

    def value(self, kind: str) -> Any:
        """Return the response value of the given output kind."""
        match kind:
            case constants.OUTPUT_KIND_MEDIA:
                return self.media
            case constants.OUTPUT_KIND_JSON:
                return self.output
            case _:
                return self.text

    def to_history(self) -> list[ChatMessage]:
        """Return the conversation including the model response."""
        return self.messages + [
            ChatMessage(role=constants.ROLE_MODEL, content=self.text, media=self.media)
        ]


class ResponseGenerator(ABC):  # pylint: disable=too-few-public-methods
    """Abstract class that is the parent for all response generators."""

    @abstractmethod
    async def generate(self, request: GenerateRequest) -> GenerateResponse:
        """Generate response for the request.

        Raises:
            GenerationError: for any failure of the underlying model call.
        """
