"""Common utilities for the project."""

import asyncio
from functools import wraps
from typing import Any, Callable


def run_once_async(func: Callable) -> Callable:
    """Decorate an async function to run only once.

    All callers, including concurrent ones, await the same task and get its
    result.
    """
    task = None

    @wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        nonlocal task
        if task is None:
            loop = asyncio.get_running_loop()
            task = loop.create_task(func(*args, **kwargs))
        return await task

    return wrapper
