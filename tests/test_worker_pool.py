"""Tests for WorkerPool."""

import threading

import pytest
from page2md.concurrency import WorkerPool


class TestWorkerPool:
    """Tests for the worker thread pool."""

    @pytest.mark.asyncio
    async def test_runs_in_worker_thread(self):
        async with WorkerPool(workers=2) as pool:
            name = await pool.run(lambda: threading.current_thread().name)

        assert name.startswith("page2md-worker-")

    @pytest.mark.asyncio
    async def test_passes_arguments(self):
        async with WorkerPool(workers=1) as pool:
            result = await pool.run(sorted, [3, 1, 2], reverse=True)

        assert result == [3, 2, 1]
        assert pool.in_flight == 0

    @pytest.mark.asyncio
    async def test_exceptions_propagate(self):
        def fail():
            raise ValueError("bad page")

        async with WorkerPool(workers=1) as pool:
            with pytest.raises(ValueError, match="bad page"):
                await pool.run(fail)

            assert pool.in_flight == 0

    def test_default_max_pending(self):
        assert WorkerPool(workers=3).max_pending == 12
        assert WorkerPool(workers=3, max_pending=5).max_pending == 5

    @pytest.mark.asyncio
    async def test_restarts_after_close(self):
        pool = WorkerPool(workers=1)
        assert await pool.run(len, "abc") == 3
        pool.close()

        assert await pool.run(len, "abcd") == 4
        pool.close()
