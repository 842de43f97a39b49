"""Retriever factory."""

from typing import Optional

from llama_stack_client import AsyncLlamaStackClient

import constants
from agents.agent_error import RagConfigurationError
from client import AsyncLlamaStackClientHolder
from models.config import RetrieverConfiguration
from retrievers.file_retriever import FileRetriever
from retrievers.retriever import Retriever
from retrievers.vector_io_retriever import VectorIORetriever


def get_retriever(
    config: RetrieverConfiguration, client: Optional[AsyncLlamaStackClient] = None
) -> Retriever:
    """Build retriever from its construction configuration.

    The shared Llama Stack client is used when no client is given.
    """
    match config.type:
        case constants.RETRIEVER_TYPE_VECTOR_IO:
            if not config.vector_db_id:
                raise RagConfigurationError("vector_db_id is required for retriever")
            return VectorIORetriever(
                client or AsyncLlamaStackClientHolder().get_client(),
                config.vector_db_id,
                config.max_chunks,
            )
        case constants.RETRIEVER_TYPE_FILE:
            if config.path is None:
                raise RagConfigurationError("path is required for file retriever")
            return FileRetriever(config.path)
        case _:
            raise RagConfigurationError(f"Unknown retriever type: {config.type}")
