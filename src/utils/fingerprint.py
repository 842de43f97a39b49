"""Request fingerprinting used as the response cache key."""

import hashlib
from typing import Iterable

from models.chat_history import ChatMessage


def chat_history_as_string(messages: Iterable[ChatMessage]) -> str:
    """Render chat history into the canonical text form used for fingerprinting.

    Only messages with text content are included:

    ```
    <chat_history>
    <chat_history_item>role: text</chat_history_item>
    ...
    </chat_history>
    ```
    """
    lines = ["<chat_history>"]
    for message in messages:
        if message.content:
            lines.append(
                f"<chat_history_item>{message.role}: {message.content}</chat_history_item>"
            )
    lines.append("</chat_history>")
    return "\n".join(lines)


def generate_fingerprint(data: str, algorithm: str = "sha256") -> str:
    """Return hex digest of the given text."""
    return hashlib.new(algorithm, data.encode("utf-8")).hexdigest()


def response_fingerprint(material: str, kind: str) -> str:
    """Return cache key of the query material for the given response kind.

    Responses of each kind are admitted and cached under their own key, so a
    query first seen with one output kind still gets cached for the others.
    """
    return generate_fingerprint(f"<output_kind>{kind}</output_kind>\n{material}")
