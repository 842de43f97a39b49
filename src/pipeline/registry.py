"""Registry of chat endpoints assembled from configuration."""

from typing import Optional

from authentication.credential_store import CredentialStore
from cache.cache import CacheStore
from generators.generator import ModelSettings, ResponseGenerator
from history.chat_history_store import ChatHistoryStore
from log import get_logger
from models.config import EndpointConfiguration, InferenceConfiguration
from pipeline.endpoint_config import (
    AuthConfig,
    AuthDisabled,
    AuthEnabled,
    CacheConfig,
    CacheDisabled,
    CacheEnabled,
    EndpointConfig,
    HistoryConfig,
    HistoryDisabled,
    HistoryEnabled,
    RagConfig,
    RagDisabled,
    RagEnabled,
)
from pipeline.pipeline import ChatEndpointPipeline

logger = get_logger(__name__)


def build_endpoint_config(  # pylint: disable=too-many-arguments
    endpoint: EndpointConfiguration,
    inference: Optional[InferenceConfiguration] = None,
    credential_store: Optional[CredentialStore] = None,
    cache_store: Optional[CacheStore] = None,
    history_store: Optional[ChatHistoryStore] = None,
) -> EndpointConfig:
    """Turn endpoint definition from the configuration file into runtime configuration.

    Raises:
        ValueError: when a concern is enabled but its store is missing.
    """
    auth: AuthConfig = AuthDisabled()
    if endpoint.enable_auth:
        if credential_store is None:
            raise ValueError(f"Endpoint '{endpoint.name}' requires credential store")
        auth = AuthEnabled(store=credential_store)

    cache: CacheConfig = CacheDisabled()
    if endpoint.enable_cache:
        if cache_store is None:
            raise ValueError(f"Endpoint '{endpoint.name}' requires response cache")
        cache = CacheEnabled(
            store=cache_store, fingerprint_history=endpoint.fingerprint_history
        )

    history: HistoryConfig = HistoryDisabled()
    if endpoint.enable_chat_history:
        if history_store is None:
            raise ValueError(f"Endpoint '{endpoint.name}' requires chat history store")
        history = HistoryEnabled(store=history_store)

    rag: RagConfig = RagDisabled()
    if endpoint.rag.enabled:
        rag = RagEnabled(retriever_config=endpoint.rag.retriever)

    inference = inference or InferenceConfiguration()
    model_settings = ModelSettings(
        model=endpoint.model or inference.default_model,
        provider=endpoint.provider or inference.default_provider,
        temperature=endpoint.temperature,
        max_tokens=endpoint.max_tokens,
    )

    return EndpointConfig(
        name=endpoint.name,
        agent_type=endpoint.agent_type,
        topic=endpoint.topic,
        system_prompt=endpoint.system_prompt,
        auth=auth,
        cache=cache,
        history=history,
        rag=rag,
        output=endpoint.output,
        verbose=endpoint.verbose,
        model_settings=model_settings,
        tools=endpoint.tools,
        generation_timeout=endpoint.generation_timeout,
    )


class EndpointRegistry:
    """Chat endpoint pipelines by endpoint name."""

    def __init__(self, pipelines: Optional[list[ChatEndpointPipeline]] = None) -> None:
        """Initialize registry with pipelines."""
        self._pipelines: dict[str, ChatEndpointPipeline] = {}
        for pipeline in pipelines or []:
            self.register(pipeline)

    def register(self, pipeline: ChatEndpointPipeline) -> None:
        """Register pipeline under its endpoint name."""
        if pipeline.name in self._pipelines:
            raise ValueError(f"Endpoint '{pipeline.name}' is already registered")
        logger.info(
            "Registering chat endpoint %s (%s agent)",
            pipeline.name,
            pipeline.config.effective_agent_type,
        )
        self._pipelines[pipeline.name] = pipeline

    def get(self, name: str) -> Optional[ChatEndpointPipeline]:
        """Return pipeline of the endpoint, or None for unknown endpoint."""
        return self._pipelines.get(name)

    def names(self) -> list[str]:
        """Return names of registered endpoints."""
        return list(self._pipelines)

    @classmethod
    def from_configuration(  # pylint: disable=too-many-arguments
        cls,
        endpoints: list[EndpointConfiguration],
        generator: ResponseGenerator,
        inference: Optional[InferenceConfiguration] = None,
        credential_store: Optional[CredentialStore] = None,
        cache_store: Optional[CacheStore] = None,
        history_store: Optional[ChatHistoryStore] = None,
    ) -> "EndpointRegistry":
        """Assemble registry once from endpoint definitions."""
        return cls(
            [
                ChatEndpointPipeline(
                    build_endpoint_config(
                        endpoint, inference, credential_store, cache_store, history_store
                    ),
                    generator,
                )
                for endpoint in endpoints
            ]
        )
