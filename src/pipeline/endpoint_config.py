"""Runtime configuration of one chat endpoint.

Each optional concern is a tagged variant: either disabled, or enabled
together with everything it needs. An enabled concern without its store can
not be constructed. Endpoint configurations are assembled once at startup
and never change afterwards.
"""

from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing_extensions import Literal, Self

import constants
from authentication.credential_store import CredentialStore
from cache.cache import CacheStore
from generators.generator import ModelSettings
from history.chat_history_store import ChatHistoryStore
from models.config import OutputConfiguration, RetrieverConfiguration
from retrievers.retriever import Retriever


class ConcernConfiguration(BaseModel):
    """Base class for the variants of endpoint concerns."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)


class AuthDisabled(ConcernConfiguration):
    """Requests are not authorized."""

    enabled: Literal[False] = False


class AuthEnabled(ConcernConfiguration):
    """Requests are authorized against the credential store."""

    enabled: Literal[True] = True
    store: CredentialStore


class CacheDisabled(ConcernConfiguration):
    """Responses are never cached."""

    enabled: Literal[False] = False


class CacheEnabled(ConcernConfiguration):
    """Responses are admitted into the cache store.

    Attributes:
        store: Response cache store.
        fingerprint_history: Whether loaded chat history is part of the
            fingerprinted query material.
    """

    enabled: Literal[True] = True
    store: CacheStore
    fingerprint_history: bool = True


class HistoryDisabled(ConcernConfiguration):
    """Conversations are not persisted."""

    enabled: Literal[False] = False


class HistoryEnabled(ConcernConfiguration):
    """Conversations are persisted in the chat history store."""

    enabled: Literal[True] = True
    store: ChatHistoryStore


class RagDisabled(ConcernConfiguration):
    """Responses are not grounded in retrieved context."""

    enabled: Literal[False] = False


class RagEnabled(ConcernConfiguration):
    """Responses are grounded in context retrieved for the query.

    Exactly one of a ready retriever or a retriever construction
    configuration has to be given; this is checked when a request is handled.
    """

    enabled: Literal[True] = True
    retriever: Optional[Retriever] = None
    retriever_config: Optional[RetrieverConfiguration] = None


AuthConfig = Union[AuthDisabled, AuthEnabled]
CacheConfig = Union[CacheDisabled, CacheEnabled]
HistoryConfig = Union[HistoryDisabled, HistoryEnabled]
RagConfig = Union[RagDisabled, RagEnabled]


class EndpointConfig(BaseModel):
    """Immutable configuration of one chat endpoint."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    name: str = Field(min_length=1)
    agent_type: Literal["open-ended", "close-ended", "rag"] = (
        constants.AGENT_TYPE_OPEN_ENDED
    )
    topic: Optional[str] = None
    system_prompt: Optional[str] = None
    auth: AuthConfig = Field(default_factory=AuthDisabled)
    cache: CacheConfig = Field(default_factory=CacheDisabled)
    history: HistoryConfig = Field(default_factory=HistoryDisabled)
    rag: RagConfig = Field(default_factory=RagDisabled)
    output: OutputConfiguration = Field(default_factory=OutputConfiguration)
    verbose: bool = False
    model_settings: ModelSettings = Field(default_factory=ModelSettings)
    tools: list[dict[str, Any]] = Field(default_factory=list)
    generation_timeout: Optional[float] = None

    @model_validator(mode="after")
    def check_rag_agent(self) -> Self:
        """Check that RAG agent is used only together with enabled RAG."""
        if self.agent_type == constants.AGENT_TYPE_RAG and not isinstance(
            self.rag, RagEnabled
        ):
            raise ValueError("RAG agent requires RAG to be enabled")
        return self

    @property
    def effective_agent_type(self) -> str:
        """Return agent type, enabling RAG always selects the RAG agent."""
        if isinstance(self.rag, RagEnabled):
            return constants.AGENT_TYPE_RAG
        return self.agent_type
