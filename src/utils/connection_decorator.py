"""Decorator that makes sure the object is 'connected' according to its connected predicate."""

import functools
import inspect
import sqlite3
from typing import Any, Callable

import psycopg2


def _ensure_connected(connectable: Any) -> None:
    """Reconnect the object when it is not connected.

    Database errors raised while reconnecting are reported as the object's
    `disconnected_error`, so every store fails with its own error family.
    """
    if connectable.connected():
        return
    try:
        connectable.connect()
    except (psycopg2.Error, sqlite3.Error) as e:
        error = getattr(connectable, "disconnected_error", ConnectionError)
        raise error(
            f"unable to reconnect {connectable.__class__.__name__}: {e}"
        ) from e


def connection(f: Callable) -> Callable:
    """Reconnect the decorated object's storage before calling the method.

    Works for both plain and coroutine methods. The decorated object has to
    provide `connected()` and `connect()` methods.
    """
    if inspect.iscoroutinefunction(f):

        @functools.wraps(f)
        async def async_wrapper(connectable: Any, *args: Any, **kwargs: Any) -> Any:
            _ensure_connected(connectable)
            return await f(connectable, *args, **kwargs)

        return async_wrapper

    @functools.wraps(f)
    def wrapper(connectable: Any, *args: Any, **kwargs: Any) -> Any:
        _ensure_connected(connectable)
        return f(connectable, *args, **kwargs)

    return wrapper
