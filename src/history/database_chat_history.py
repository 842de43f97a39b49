"""Chat history store persisted in SQLite or PostgreSQL.

Every message is one row of the `chat_messages` table. Rows get increasing
IDs on insert, so ordering by ID yields the append order of the conversation.
"""

from datetime import UTC, datetime
from typing import Any, Optional

from history import sql
from history.chat_history_store import ChatHistoryStore
from history.history_error import ChatHistoryError, ChatHistoryNotFoundError
from log import get_logger
from models.chat_history import ChatMessage
from models.responses import MediaPayload
from storage.database_store import DatabaseStore
from utils.connection_decorator import connection

logger = get_logger(__name__)


class DatabaseChatHistoryStore(DatabaseStore, ChatHistoryStore):
    """Chat history store persisted in a relational database."""

    disconnected_error = ChatHistoryError

    def _initialize_tables(self) -> None:
        """Initialize tables used by chat history store."""
        logger.info("Initializing tables for chat history")
        self._execute_script(
            sql.CREATE_CONVERSATIONS_TABLE,
            self._statement(
                sql.CREATE_MESSAGES_TABLE_PG, sql.CREATE_MESSAGES_TABLE_SQLITE
            ),
            sql.CREATE_MESSAGES_INDEX,
        )

    @connection
    async def create(self, messages: Optional[list[ChatMessage]] = None) -> str:
        """Create new conversation."""
        conversation_id = self.new_conversation_id()
        cursor = self._cursor("create conversation")
        cursor.execute(
            self._statement(sql.INSERT_CONVERSATION_PG, sql.INSERT_CONVERSATION_SQLITE),
            (conversation_id, datetime.now(UTC).timestamp()),
        )
        self._insert_messages(cursor, conversation_id, messages or [])
        cursor.close()
        self.connection.commit()
        logger.debug("Created conversation %s", conversation_id)
        return conversation_id

    @connection
    async def overwrite(self, conversation_id: str, messages: list[ChatMessage]) -> None:
        """Replace all messages of the conversation."""
        cursor = self._cursor("overwrite conversation")
        self._touch(cursor, conversation_id)
        cursor.execute(
            self._statement(sql.DELETE_MESSAGES_PG, sql.DELETE_MESSAGES_SQLITE),
            (conversation_id,),
        )
        self._insert_messages(cursor, conversation_id, messages)
        cursor.close()
        self.connection.commit()

    @connection
    async def append(self, conversation_id: str, messages: list[ChatMessage]) -> None:
        """Append messages to the end of the conversation."""
        cursor = self._cursor("append to conversation")
        self._touch(cursor, conversation_id)
        self._insert_messages(cursor, conversation_id, messages)
        cursor.close()
        self.connection.commit()

    @connection
    async def fetch(self, conversation_id: str) -> list[ChatMessage]:
        """Return all messages of the conversation in append order."""
        cursor = self._cursor("fetch conversation")
        cursor.execute(
            self._statement(sql.SELECT_CONVERSATION_PG, sql.SELECT_CONVERSATION_SQLITE),
            (conversation_id,),
        )
        if cursor.fetchone() is None:
            cursor.close()
            raise ChatHistoryNotFoundError(conversation_id)
        cursor.execute(
            self._statement(sql.SELECT_MESSAGES_PG, sql.SELECT_MESSAGES_SQLITE),
            (conversation_id,),
        )
        rows = cursor.fetchall()
        cursor.close()
        return [_message_from_row(row) for row in rows]

    @connection
    async def delete(self, conversation_id: str) -> bool:
        """Delete conversation."""
        cursor = self._cursor("delete conversation")
        cursor.execute(
            self._statement(sql.DELETE_MESSAGES_PG, sql.DELETE_MESSAGES_SQLITE),
            (conversation_id,),
        )
        cursor.execute(
            self._statement(sql.DELETE_CONVERSATION_PG, sql.DELETE_CONVERSATION_SQLITE),
            (conversation_id,),
        )
        deleted = cursor.rowcount > 0
        cursor.close()
        self.connection.commit()
        return deleted

    def _touch(self, cursor: Any, conversation_id: str) -> None:
        """Update last updated time, failing for unknown conversation."""
        cursor.execute(
            self._statement(sql.TOUCH_CONVERSATION_PG, sql.TOUCH_CONVERSATION_SQLITE),
            (datetime.now(UTC).timestamp(), conversation_id),
        )
        if cursor.rowcount == 0:
            cursor.close()
            raise ChatHistoryNotFoundError(conversation_id)

    def _insert_messages(
        self, cursor: Any, conversation_id: str, messages: list[ChatMessage]
    ) -> None:
        statement = self._statement(sql.INSERT_MESSAGE_PG, sql.INSERT_MESSAGE_SQLITE)
        for message in messages:
            cursor.execute(
                statement,
                (
                    conversation_id,
                    message.role,
                    message.content,
                    message.media.model_dump_json() if message.media else None,
                ),
            )


def _message_from_row(row: Any) -> ChatMessage:
    role, content, media = row
    return ChatMessage(
        role=role,
        content=content,
        media=MediaPayload.model_validate_json(media) if media else None,
    )
