"""Errors raised by chat history stores."""


class ChatHistoryError(Exception):
    """Any error raised by a chat history store."""

    status_code = 500


class ChatHistoryNotFoundError(ChatHistoryError):
    """No conversation is stored under the given ID."""

    status_code = 404

    def __init__(self, conversation_id: str) -> None:
        """Construct the error for given conversation ID."""
        super().__init__(f"Chat history with ID {conversation_id} not found.")
        self.conversation_id = conversation_id
