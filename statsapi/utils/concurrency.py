import asyncio
from typing import Callable, TypeVar

T = TypeVar("T")


async def run_blocking(func: Callable[..., T], *args, **kwargs) -> T:
    """Run blocking function in default executor.

    Cancelling the awaiting task abandons the result; the worker thread runs
    to completion on its own.
    """
    return await asyncio.to_thread(func, *args, **kwargs)
