"""Retriever interface."""

from abc import ABC, abstractmethod


class Retriever(ABC):  # pylint: disable=too-few-public-methods
    """Abstract class that is the parent for all retrievers."""

    @abstractmethod
    async def invoke(self, query: str) -> str:
        """Return context text relevant to the query.

        Raises:
            RetrievalError: when the context can not be retrieved.
        """
