"""Chat history store factory class."""

import constants
from history.chat_history_store import ChatHistoryStore
from history.database_chat_history import DatabaseChatHistoryStore
from history.in_memory_chat_history import InMemoryChatHistoryStore
from log import get_logger
from models.config import StoreConfiguration

logger = get_logger(__name__)


# pylint: disable=R0903
class ChatHistoryFactory:
    """Chat history store factory class."""

    @staticmethod
    def chat_history(config: StoreConfiguration) -> ChatHistoryStore:
        """Create an instance of ChatHistoryStore based on loaded configuration.

        Returns:
            An instance of `ChatHistoryStore` (either `InMemoryChatHistoryStore`
            or `DatabaseChatHistoryStore`).
        """
        logger.info("Creating chat history store instance of type %s", config.type)
        match config.type:
            case constants.STORE_TYPE_MEMORY:
                return InMemoryChatHistoryStore()
            case constants.STORE_TYPE_SQLITE | constants.STORE_TYPE_POSTGRES:
                return DatabaseChatHistoryStore(config)
            case _:
                raise ValueError(
                    f"Invalid chat history store type: {config.type}. "
                    f"Use '{constants.STORE_TYPE_MEMORY}', "
                    f"'{constants.STORE_TYPE_SQLITE}' or "
                    f"'{constants.STORE_TYPE_POSTGRES}' options."
                )
