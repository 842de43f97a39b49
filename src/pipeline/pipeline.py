"""Request pipeline of a chat endpoint.

One inbound query passes through these stages, each of which can end the
request early:

1. authorization of the credential (auth enabled),
2. loading of the conversation (history enabled and chat ID given),
3. response cache lookup and admission counting (cache enabled),
4. context retrieval (RAG enabled),
5. response generation,
6. admission of the generated response into the cache,
7. persisting of the new conversation turn (history enabled),
8. rendering of the response.

Every failure is converted into an `ErrorResponse`; the pipeline never lets
an exception escape `handle()`. Failures of cache and history writes that
happen after a response has been generated are logged and do not affect the
response returned to the caller.
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Optional

import constants
import metrics
from agents.agent_error import AgentConfigurationError, RagConfigurationError
from agents.chat_agent import ChatAgent, get_agent
from authentication.auth_error import AuthorizationError
from authentication.policy import authorize_request
from cache.cache import CacheStore
from cache.cache_error import CacheError, CacheRecordNotFoundError
from generators.generation_error import GenerationError
from generators.generator import GenerateResponse, ResponseGenerator
from history.chat_history_store import ChatHistoryStore
from history.history_error import ChatHistoryError
from log import get_logger
from models.cache_record import CachedResponse, CacheRecord, ResponseKind
from models.chat_history import ChatMessage
from models.requests import ChatRequest
from models.responses import ChatResponse, ErrorResponse, UsageDetails
from pipeline.endpoint_config import (
    AuthEnabled,
    CacheEnabled,
    EndpointConfig,
    HistoryEnabled,
    RagEnabled,
)
from retrievers.retriever_error import RetrievalError
from retrievers.retriever_factory import get_retriever
from utils.fingerprint import chat_history_as_string, response_fingerprint

logger = get_logger(__name__)

PIPELINE_ERRORS = (
    AuthorizationError,
    ChatHistoryError,
    CacheError,
    AgentConfigurationError,
    RetrievalError,
    GenerationError,
)


@dataclass
class CacheLookup:
    """Outcome of the cache lookup stage.

    Attributes:
        fingerprint: Fingerprint of the query material.
        hit: Record whose response can be served, if any.
        must_cache: The generated response has to be admitted into the cache.
    """

    fingerprint: str
    hit: Optional[CacheRecord] = None
    must_cache: bool = False


class ChatEndpointPipeline:
    """Orchestrates auth, history, cache and RAG around response generation."""

    def __init__(self, config: EndpointConfig, generator: ResponseGenerator) -> None:
        """Initialize pipeline for the endpoint."""
        self.config = config
        self.generator = generator

    @property
    def name(self) -> str:
        """Return endpoint name."""
        return self.config.name

    async def handle(self, request: ChatRequest, token: Optional[str] = None) -> Any:
        """Handle one chat request.

        Args:
            request: Inbound chat request.
            token: Credential token supplied out of band.

        Returns:
            `ErrorResponse` on failure. On success either the bare response
            value, or `ChatResponse` when chat history is enabled or usage
            details are reported.
        """
        try:
            return await self._process(request, token)
        except PIPELINE_ERRORS as e:
            logger.warning("Endpoint %s request failed: %s", self.name, e)
            metrics.chat_requests_total.labels(self.name, "error").inc()
            return ErrorResponse(error=str(e), status_code=e.status_code)
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.exception("Unexpected error in endpoint %s", self.name)
            metrics.chat_requests_total.labels(self.name, "error").inc()
            return ErrorResponse(error=f"Unexpected error: {e}", status_code=500)

    async def _process(self, request: ChatRequest, token: Optional[str]) -> Any:
        """Run the pipeline stages."""
        query = request.query
        if not query:
            metrics.chat_requests_total.labels(self.name, "greeting").inc()
            return ChatResponse(response=constants.GREETING_RESPONSE)

        config = self.config
        kind: ResponseKind = request.output_kind or config.output.kind
        agent = get_agent(
            config.effective_agent_type, config.topic, config.system_prompt
        )
        self._check_rag_configuration()

        if isinstance(config.auth, AuthEnabled):
            await authorize_request(
                token, request.owner_id, config.name, config.auth.store
            )

        chat_id: Optional[str] = None
        history: list[ChatMessage] = []
        if isinstance(config.history, HistoryEnabled) and request.chat_id:
            history = await config.history.store.fetch(request.chat_id)
            chat_id = request.chat_id

        lookup: Optional[CacheLookup] = None
        if isinstance(config.cache, CacheEnabled):
            material = query
            if history and config.cache.fingerprint_history:
                material += chat_history_as_string(history)
            lookup = await self._lookup(config.cache.store, material, kind)
            if lookup.hit is not None:
                return await self._serve_cached(
                    config.cache.store, lookup.hit, kind, agent, query, chat_id
                )

        context = await self._retrieve(query)
        response = await self._generate(agent, query, context, history, kind)
        value = response.value(kind)
        cached_response = self._to_cached_response(kind, value)

        if lookup is not None and lookup.must_cache:
            await self._admit(lookup.fingerprint, cached_response)

        if isinstance(config.history, HistoryEnabled):
            chat_id = await self._write_history(
                config.history.store, chat_id, agent, query, cached_response
            )

        metrics.chat_requests_total.labels(self.name, "generated").inc()
        return self._render(value, chat_id, response.usage)

    def _check_rag_configuration(self) -> None:
        """Check that RAG, if enabled, has exactly one source of context."""
        rag = self.config.rag
        if not isinstance(rag, RagEnabled):
            return
        if (rag.retriever is None) == (rag.retriever_config is None):
            raise RagConfigurationError(
                "To enable RAG you must provide either retriever or retriever config."
            )

    async def _lookup(
        self, store: CacheStore, material: str, kind: ResponseKind
    ) -> CacheLookup:
        """Look the query material up and count its sighting.

        Admission state is read from the store for every request, and the
        remaining threshold is always the value returned by the store.
        """
        fingerprint = response_fingerprint(material, kind)
        try:
            record = await store.get_record(fingerprint)
        except CacheRecordNotFoundError:
            await store.add_query(material, fingerprint, kind)
            return await self._count_sighting(store, fingerprint)

        await store.update_last_accessed(fingerprint)
        if record.response_kind != kind:
            logger.warning(
                "Cache record %s is of kind %s, request expects %s",
                fingerprint,
                record.response_kind,
                kind,
            )
            return CacheLookup(fingerprint=fingerprint)

        if record.response is not None:
            if not store.is_expired(record):
                return CacheLookup(fingerprint=fingerprint, hit=record)
            logger.info("Cached response for %s expired", fingerprint)
            await store.reset_record(fingerprint)

        return await self._count_sighting(store, fingerprint)

    async def _count_sighting(self, store: CacheStore, fingerprint: str) -> CacheLookup:
        remaining = await store.decrement_threshold(fingerprint)
        logger.debug("Cache admission for %s: %d remaining", fingerprint, remaining)
        return CacheLookup(fingerprint=fingerprint, must_cache=remaining == 0)

    async def _serve_cached(  # pylint: disable=too-many-arguments
        self,
        store: CacheStore,
        record: CacheRecord,
        kind: ResponseKind,
        agent: ChatAgent,
        query: str,
        chat_id: Optional[str],
    ) -> Any:
        """Return cached response, weaving the turn into the conversation."""
        cached_response = record.response
        if cached_response is None:
            raise CacheError(f"Cache record {record.fingerprint} has no response")
        value = cached_response.payload(kind)

        await store.increment_hits(record.fingerprint)
        await store.update_last_used(record.fingerprint)
        metrics.cache_hits_total.labels(self.name).inc()

        if isinstance(self.config.history, HistoryEnabled):
            chat_id = await self._write_history(
                self.config.history.store, chat_id, agent, query, cached_response
            )

        metrics.chat_requests_total.labels(self.name, "cached").inc()
        logger.info("Endpoint %s served response from cache", self.name)
        return self._render(value, chat_id, None)

    async def _retrieve(self, query: str) -> Optional[str]:
        """Retrieve context for the query when RAG is enabled."""
        rag = self.config.rag
        if not isinstance(rag, RagEnabled):
            return None
        retriever = rag.retriever
        if retriever is None and rag.retriever_config is not None:
            retriever = get_retriever(rag.retriever_config)
        if retriever is None:
            raise RagConfigurationError(
                "To enable RAG you must provide either retriever or retriever config."
            )
        try:
            return await retriever.invoke(query)
        except RetrievalError:
            raise
        except Exception as e:
            raise RetrievalError(f"Error retrieving context: {e}") from e

    async def _generate(
        self,
        agent: ChatAgent,
        query: str,
        context: Optional[str],
        history: list[ChatMessage],
        kind: ResponseKind,
    ) -> GenerateResponse:
        """Invoke the response generator through the chat agent."""
        config = self.config
        output = config.output
        if output.kind != kind:
            output = output.model_copy(update={"kind": kind, "json_schema": None})

        generation = agent.generate(
            self.generator,
            query,
            context=context,
            history=history,
            output=output,
            model_settings=config.model_settings,
            tools=config.tools,
        )
        try:
            if config.generation_timeout is not None:
                response = await asyncio.wait_for(
                    generation, timeout=config.generation_timeout
                )
            else:
                response = await generation
        except AgentConfigurationError:
            raise
        except GenerationError:
            metrics.llm_calls_failures_total.inc()
            raise
        except TimeoutError as e:
            metrics.llm_calls_failures_total.inc()
            raise GenerationError(
                f"generation timed out after {config.generation_timeout} seconds"
            ) from e
        except Exception as e:
            metrics.llm_calls_failures_total.inc()
            raise GenerationError(str(e)) from e

        self._update_token_metrics(response.usage)
        return response

    def _update_token_metrics(self, usage: Optional[UsageDetails]) -> None:
        model = self.config.model_settings.model or ""
        provider = self.config.model_settings.provider or ""
        metrics.llm_calls_total.labels(provider, model).inc()
        if usage is not None:
            metrics.llm_token_sent_total.labels(provider, model).inc(usage.input_tokens)
            metrics.llm_token_received_total.labels(provider, model).inc(
                usage.output_tokens
            )

    @staticmethod
    def _to_cached_response(kind: ResponseKind, value: Any) -> CachedResponse:
        """Wrap generated value, rejecting empty responses."""
        try:
            return CachedResponse.from_output(kind, value)
        except ValueError as e:
            raise GenerationError(f"generator returned no {kind} response") from e

    async def _admit(self, fingerprint: str, response: CachedResponse) -> None:
        """Admit generated response into the cache."""
        cache = self.config.cache
        if not isinstance(cache, CacheEnabled):
            return
        try:
            await cache.store.cache_response(fingerprint, response)
            metrics.cached_responses_total.labels(self.name).inc()
        except Exception:  # pylint: disable=broad-exception-caught
            logger.exception("Unable to cache response for %s", fingerprint)

    async def _write_history(  # pylint: disable=too-many-arguments
        self,
        store: ChatHistoryStore,
        chat_id: Optional[str],
        agent: ChatAgent,
        query: str,
        response: CachedResponse,
    ) -> Optional[str]:
        """Persist the user/model turn, creating the conversation if needed.

        Returns:
            Conversation ID the turn has been written to.
        """
        turn = [
            ChatMessage(role=constants.ROLE_USER, content=query),
            ChatMessage(
                role=constants.ROLE_MODEL,
                content=response.as_message_text(),
                media=response.media,
            ),
        ]
        try:
            if chat_id is None:
                seed = ChatMessage(role=constants.ROLE_SYSTEM, content=agent.system_prompt())
                return await store.create([seed] + turn)
            await store.append(chat_id, turn)
        except Exception:  # pylint: disable=broad-exception-caught
            logger.exception("Unable to store chat history for %s", self.name)
        return chat_id

    def _render(
        self, value: Any, chat_id: Optional[str], usage: Optional[UsageDetails]
    ) -> Any:
        """Shape the successful response."""
        usage_details = usage if self.config.verbose else None
        if not isinstance(self.config.history, HistoryEnabled) and usage_details is None:
            return value
        return ChatResponse(response=value, chat_id=chat_id, usage_details=usage_details)
