"""Chat agents: open-ended, close-ended and retrieval augmented.

An agent decides which system prompt a conversation runs with and how the
user prompt is formatted. All agents share one generation call contract:
they assemble a `GenerateRequest` and hand it to the response generator.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

import constants
from agents import prompts
from agents.agent_error import AgentConfigurationError, RagConfigurationError
from generators.generator import (
    GenerateRequest,
    GenerateResponse,
    ModelSettings,
    ResponseGenerator,
)
from models.chat_history import ChatMessage
from models.config import OutputConfiguration


class ChatAgent(ABC):
    """Base class for chat agents."""

    agent_type: str

    def __init__(
        self, topic: Optional[str] = None, system_prompt: Optional[str] = None
    ) -> None:
        """Initialize agent with optional topic and system prompt override."""
        self.topic = topic
        self._system_prompt_override = system_prompt

    @abstractmethod
    def default_system_prompt(self) -> str:
        """Return the system prompt of the agent variant."""

    def system_prompt(self) -> str:
        """Return the effective system prompt."""
        if self._system_prompt_override:
            return self._system_prompt_override
        return self.default_system_prompt()

    def user_prompt(self, query: str, context: Optional[str] = None) -> str:
        """Format the user query; context is ignored by agents without RAG."""
        return query

    async def generate(  # pylint: disable=too-many-arguments
        self,
        generator: ResponseGenerator,
        query: str,
        *,
        context: Optional[str] = None,
        history: Optional[list[ChatMessage]] = None,
        output: Optional[OutputConfiguration] = None,
        model_settings: Optional[ModelSettings] = None,
        tools: Optional[list[dict[str, Any]]] = None,
    ) -> GenerateResponse:
        """Assemble the prompt and invoke the response generator."""
        request = GenerateRequest(
            system_prompt=self.system_prompt(),
            query=self.user_prompt(query, context),
            context=context,
            history=history or [],
            output=output or OutputConfiguration(),
            model_settings=model_settings or ModelSettings(),
            tools=tools or [],
        )
        return await generator.generate(request)


class OpenEndedAgent(ChatAgent):
    """Agent that answers queries on any topic."""

    agent_type = constants.AGENT_TYPE_OPEN_ENDED

    def default_system_prompt(self) -> str:
        """Return the open-ended system prompt."""
        return prompts.OPEN_ENDED_SYSTEM_PROMPT


class CloseEndedAgent(ChatAgent):
    """Agent restricted to a single topic."""

    agent_type = constants.AGENT_TYPE_CLOSE_ENDED

    def __init__(
        self, topic: Optional[str] = None, system_prompt: Optional[str] = None
    ) -> None:
        """Initialize agent, topic is mandatory."""
        if not topic:
            raise AgentConfigurationError(
                "Topic is required for close-ended chat agent"
            )
        super().__init__(topic, system_prompt)

    def default_system_prompt(self) -> str:
        """Return the close-ended system prompt for the topic."""
        return prompts.CLOSE_ENDED_SYSTEM_PROMPT.format(topic=self.topic)


class RagAgent(ChatAgent):
    """Agent restricted to a topic that answers from retrieved context."""

    agent_type = constants.AGENT_TYPE_RAG

    def __init__(
        self, topic: Optional[str] = None, system_prompt: Optional[str] = None
    ) -> None:
        """Initialize agent, topic is mandatory."""
        if not topic:
            raise RagConfigurationError("Topic is required for RAG chat agent")
        super().__init__(topic, system_prompt)

    def default_system_prompt(self) -> str:
        """Return the RAG system prompt for the topic."""
        return prompts.RAG_SYSTEM_PROMPT.format(topic=self.topic)

    def user_prompt(self, query: str, context: Optional[str] = None) -> str:
        """Wrap the query with the retrieved context."""
        if context is None:
            raise RagConfigurationError(
                "RAG chat agent requires context or a retriever to produce it"
            )
        return prompts.RAG_USER_PROMPT.format(context=context, query=query)


def get_agent(
    agent_type: str,
    topic: Optional[str] = None,
    system_prompt: Optional[str] = None,
) -> ChatAgent:
    """Create chat agent of the given type.

    Raises:
        AgentConfigurationError: for unknown agent type or missing topic.
    """
    match agent_type:
        case constants.AGENT_TYPE_OPEN_ENDED:
            return OpenEndedAgent(topic, system_prompt)
        case constants.AGENT_TYPE_CLOSE_ENDED:
            return CloseEndedAgent(topic, system_prompt)
        case constants.AGENT_TYPE_RAG:
            return RagAgent(topic, system_prompt)
        case _:
            raise AgentConfigurationError(f"Unknown chat agent type: {agent_type}")
