"""
Async utility functions.

Helpers for running coroutines from synchronous code (the CLI) and for
superseding in-flight work such as search-as-you-type queries.
"""

import asyncio
import concurrent.futures
import logging
from typing import Any, Coroutine, Optional

logger = logging.getLogger(__name__)


def run_async_safe(coro: Coroutine) -> Any:
    """
    Execute a coroutine from synchronous code, with or without a running loop.

    1. No loop is running in this thread - runs it with asyncio.run()
    2. A loop is already running - runs it on a fresh loop in a worker thread

    Args:
        coro: The coroutine to execute

    Returns:
        The result of the coroutine execution
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        # No running event loop in this thread
        return asyncio.run(coro)

    with concurrent.futures.ThreadPoolExecutor(max_workers=1) as executor:
        future = executor.submit(asyncio.run, coro)
        return future.result()


class SupersedingRunner:
    """
    Runs at most one coroutine at a time; starting a new one cancels the old.

    The awaiter of a superseded run receives ``asyncio.CancelledError``, so
    its partial result never reaches the caller and nothing after the
    cancelled await (a cache write, for instance) is executed.

    Usage:
        runner = SupersedingRunner()
        results = await runner.run(search.execute(text))
    """

    def __init__(self):
        self._current: Optional[asyncio.Task] = None

    @property
    def is_running(self) -> bool:
        return self._current is not None and not self._current.done()

    def cancel(self) -> None:
        """Cancel the current run, if any."""
        if self.is_running:
            logger.debug("Superseding in-flight run")
            self._current.cancel()

    async def run(self, coro: Coroutine) -> Any:
        self.cancel()
        task = asyncio.ensure_future(coro)
        self._current = task
        try:
            return await task
        finally:
            if self._current is task:
                self._current = None
