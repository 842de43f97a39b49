"""Conversation ID utility functions."""

import secrets

import constants


def get_suid(nbytes: int = constants.CHAT_ID_BYTES) -> str:
    """
    Generate a new conversation ID.

    The value is a URL-safe base64 string built from `nbytes` bytes produced
    by the operating system CSPRNG (256 bits by default). Uniqueness is
    probabilistic and is not enforced by any store.

    Returns:
        str: A random string suitable for use as a conversation identifier.
    """
    return secrets.token_urlsafe(nbytes)


def check_suid(suid: str) -> bool:
    """
    Check if given string looks like a conversation ID produced by get_suid().

    Only the alphabet and a minimal length are checked, the ID itself is
    opaque.
    """
    if not isinstance(suid, str) or len(suid) < 16:
        return False
    return all(c.isalnum() or c in "-_" for c in suid)
