"""Retriever that queries a Llama Stack vector database."""

from llama_stack_client import APIConnectionError, APIStatusError, AsyncLlamaStackClient
from llama_stack_client.lib.agents.event_logger import interleaved_content_as_str

import constants
from log import get_logger
from retrievers.retriever import Retriever
from retrievers.retriever_error import RetrievalError

logger = get_logger(__name__)


class VectorIORetriever(Retriever):  # pylint: disable=too-few-public-methods
    """Retriever that joins chunks returned by `vector_io.query` into one context."""

    def __init__(
        self,
        client: AsyncLlamaStackClient,
        vector_db_id: str,
        max_chunks: int = constants.DEFAULT_RETRIEVER_MAX_CHUNKS,
    ) -> None:
        """Initialize retriever for the vector database."""
        self.client = client
        self.vector_db_id = vector_db_id
        self.max_chunks = max_chunks

    async def invoke(self, query: str) -> str:
        """Query the vector database and return the chunks as context."""
        try:
            response = await self.client.vector_io.query(
                vector_db_id=self.vector_db_id,
                query=query,
                params={"max_chunks": self.max_chunks},
            )
        except (APIConnectionError, APIStatusError) as e:
            logger.error("Vector database %s query failed: %s", self.vector_db_id, e)
            raise RetrievalError(
                f"Unable to retrieve context from vector database {self.vector_db_id}"
            ) from e

        chunks = [interleaved_content_as_str(chunk.content) for chunk in response.chunks]
        logger.debug(
            "Retrieved %d chunks from vector database %s", len(chunks), self.vector_db_id
        )
        return "\n\n".join(chunks)
