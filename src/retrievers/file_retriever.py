"""Retriever that serves a static context file."""

from pathlib import Path

from log import get_logger
from retrievers.retriever import Retriever
from retrievers.retriever_error import RetrievalError

logger = get_logger(__name__)


class FileRetriever(Retriever):  # pylint: disable=too-few-public-methods
    """Retriever returning the whole content of a text file for every query."""

    def __init__(self, path: Path) -> None:
        """Initialize retriever for the file."""
        self.path = path

    async def invoke(self, query: str) -> str:
        """Return content of the file."""
        try:
            with open(self.path, encoding="utf-8") as fin:
                return fin.read().rstrip()
        except OSError as e:
            logger.error("Unable to read context file %s: %s", self.path, e)
            raise RetrievalError(f"Unable to read context file {self.path}") from e
