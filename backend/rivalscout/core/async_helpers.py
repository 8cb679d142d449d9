"""
Async helpers for the discovery pipeline.
Fans out provider calls and keeps CPU-bound text mining off the event loop.
"""

import asyncio
from concurrent.futures import ThreadPoolExecutor
import logging
from typing import Any, Awaitable, Callable, Iterable, List, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Thread pool for CPU-bound operations
_executor = ThreadPoolExecutor(max_workers=4)


async def run_in_thread(func: Callable[..., T], *args: Any) -> T:
    """
    Run a blocking function in the thread pool.
    Used for n-gram mining over large body samples.
    """
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(_executor, func, *args)


async def gather_settled(
    coros: Iterable[Awaitable[T]],
    default: Callable[[], T],
    label: str = "task",
) -> List[T]:
    """
    Run awaitables concurrently, replacing failures with ``default()``.

    Results keep the order of *coros*, so callers can zip them with their inputs.
    """
    results = await asyncio.gather(*coros, return_exceptions=True)

    settled: List[T] = []
    for result in results:
        if isinstance(result, asyncio.CancelledError):
            raise result
        if isinstance(result, BaseException):
            logger.warning("%s failed: %s", label, result)
            settled.append(default())
        else:
            settled.append(result)
    return settled


def shutdown_executor():
    """Cleanup thread pool (call on app shutdown)."""
    _executor.shutdown(wait=True)
