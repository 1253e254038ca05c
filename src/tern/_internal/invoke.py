"""Calling component functions that may or may not be coroutines.

Templates call ``def`` and ``async def`` exports with the same syntax,
so the evaluator always goes through :func:`invoke`.
"""

import inspect
from typing import Any


async def invoke(func: Any, *args: Any, **kwargs: Any) -> Any:
    """Call *func*; await the result when it is awaitable."""
    result = func(*args, **kwargs)
    if inspect.isawaitable(result):
        return await result
    return result
