"""Abstract class that is the parent for all chat history store implementations.

Messages of one conversation are kept in append order. Concurrent writes to
the same conversation are not ordered by the store, the last write wins.
"""

from abc import ABC, abstractmethod
from typing import Optional

from models.chat_history import ChatMessage
from utils.suid import get_suid


class ChatHistoryStore(ABC):
    """Abstract class that is the parent for all chat history store implementations."""

    @staticmethod
    def new_conversation_id() -> str:
        """Generate random conversation ID."""
        return get_suid()

    @abstractmethod
    async def create(self, messages: Optional[list[ChatMessage]] = None) -> str:
        """Create new conversation, optionally seeded with messages.

        Returns:
            ID of the new conversation.
        """

    @abstractmethod
    async def overwrite(self, conversation_id: str, messages: list[ChatMessage]) -> None:
        """Replace all messages of the conversation.

        Raises:
            ChatHistoryNotFoundError: if the conversation does not exist.
        """

    @abstractmethod
    async def append(self, conversation_id: str, messages: list[ChatMessage]) -> None:
        """Append messages to the end of the conversation.

        Raises:
            ChatHistoryNotFoundError: if the conversation does not exist.
        """

    @abstractmethod
    async def fetch(self, conversation_id: str) -> list[ChatMessage]:
        """Return all messages of the conversation in append order.

        Raises:
            ChatHistoryNotFoundError: if the conversation does not exist.
        """

    @abstractmethod
    async def delete(self, conversation_id: str) -> bool:
        """Delete conversation, returning whether it existed."""

    def ready(self) -> bool:
        """Check if the store is ready to serve requests."""
        return True
