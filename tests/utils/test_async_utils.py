"""
Unit tests for comicshelf/utils/async_utils.py

- run_async_safe (safe execution of coroutines)
- SupersedingRunner (cancel the previous run when a new one starts)
"""

import asyncio

import pytest

from comicshelf.utils.async_utils import SupersedingRunner, run_async_safe


class TestRunAsyncSafe:
    """Tests for run_async_safe function."""

    def test_simple_coroutine_returns_value(self):
        """Simple coroutine should return its value."""
        async def simple_coro():
            return 42

        assert run_async_safe(simple_coro()) == 42

    def test_async_with_await(self):
        """Coroutine with await should work."""
        async def coro_with_await():
            await asyncio.sleep(0.01)
            return "done"

        assert run_async_safe(coro_with_await()) == "done"

    def test_exception_propagation(self):
        """Exceptions in coroutine should propagate."""
        async def error_coro():
            raise ValueError("test error")

        with pytest.raises(ValueError, match="test error"):
            run_async_safe(error_coro())

    @pytest.mark.asyncio
    async def test_from_running_loop(self):
        """Should run in a worker thread when a loop is already running."""
        async def inner():
            return "from thread"

        assert run_async_safe(inner()) == "from thread"


class TestSupersedingRunner:
    """Tests for SupersedingRunner."""

    @pytest.mark.asyncio
    async def test_returns_result(self):
        """A single run should return its result."""
        runner = SupersedingRunner()

        async def work():
            return [1, 2]

        assert await runner.run(work()) == [1, 2]
        assert not runner.is_running

    @pytest.mark.asyncio
    async def test_new_run_cancels_previous(self):
        """Starting a run should cancel the one in flight."""
        runner = SupersedingRunner()
        finished = []

        async def search(text, delay):
            await asyncio.sleep(delay)
            finished.append(text)
            return text

        first = asyncio.ensure_future(runner.run(search("spi", 0.5)))
        await asyncio.sleep(0.01)
        second = await runner.run(search("spider", 0.01))

        assert second == "spider"
        with pytest.raises(asyncio.CancelledError):
            await first
        assert finished == ["spider"]

    @pytest.mark.asyncio
    async def test_cancel(self):
        """cancel() should stop the current run."""
        runner = SupersedingRunner()
        pending = asyncio.ensure_future(runner.run(asyncio.sleep(10)))
        await asyncio.sleep(0.01)
        assert runner.is_running

        runner.cancel()
        with pytest.raises(asyncio.CancelledError):
            await pending
