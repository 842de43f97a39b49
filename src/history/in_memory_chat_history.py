"""In-memory chat history store implementation."""

import threading
from datetime import UTC, datetime
from typing import Optional

from history.chat_history_store import ChatHistoryStore
from history.history_error import ChatHistoryNotFoundError
from log import get_logger
from models.chat_history import ChatHistoryRecord, ChatMessage

logger = get_logger(__name__)


class InMemoryChatHistoryStore(ChatHistoryStore):
    """Chat history store that keeps conversations in a lock-guarded dictionary."""

    def __init__(self) -> None:
        """Create a new, empty, chat history store."""
        self._conversations: dict[str, ChatHistoryRecord] = {}
        self._lock = threading.Lock()

    async def create(self, messages: Optional[list[ChatMessage]] = None) -> str:
        """Create new conversation."""
        conversation_id = self.new_conversation_id()
        record = ChatHistoryRecord(
            conversation_id=conversation_id,
            messages=_copy(messages or []),
            last_updated=datetime.now(UTC),
        )
        with self._lock:
            self._conversations[conversation_id] = record
        logger.debug("Created conversation %s", conversation_id)
        return conversation_id

    async def overwrite(self, conversation_id: str, messages: list[ChatMessage]) -> None:
        """Replace all messages of the conversation."""
        with self._lock:
            record = self._get(conversation_id)
            record.messages = _copy(messages)
            record.last_updated = datetime.now(UTC)

    async def append(self, conversation_id: str, messages: list[ChatMessage]) -> None:
        """Append messages to the end of the conversation."""
        with self._lock:
            record = self._get(conversation_id)
            record.messages.extend(_copy(messages))
            record.last_updated = datetime.now(UTC)

    async def fetch(self, conversation_id: str) -> list[ChatMessage]:
        """Return copy of all messages of the conversation."""
        with self._lock:
            return _copy(self._get(conversation_id).messages)

    async def delete(self, conversation_id: str) -> bool:
        """Delete conversation."""
        with self._lock:
            return self._conversations.pop(conversation_id, None) is not None

    def _get(self, conversation_id: str) -> ChatHistoryRecord:
        # caller holds the lock
        record = self._conversations.get(conversation_id)
        if record is None:
            raise ChatHistoryNotFoundError(conversation_id)
        return record


def _copy(messages: list[ChatMessage]) -> list[ChatMessage]:
    return [message.model_copy(deep=True) for message in messages]
