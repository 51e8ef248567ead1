"""Worker threads for parsing-heavy conversion work."""

import asyncio
import functools
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Optional, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)


class WorkerPool:
    """
    Runs readability scoring and Markdown rendering off the event loop.

    Both parse the whole document, so a large page would otherwise hold up
    every other request the server is handling. ``max_pending`` bounds how
    many jobs may wait for a thread; callers beyond it wait in ``run``
    instead of piling documents into the executor queue.

    Example:
        async with WorkerPool(workers=4) as pool:
            article = await pool.run(extractor.extract, html, url)
    """

    def __init__(self, workers: int = 4, max_pending: Optional[int] = None) -> None:
        """
        Args:
            workers: Number of worker threads
            max_pending: Jobs allowed in flight at once (defaults to 4 per worker)
        """
        self.workers = workers
        self.max_pending = max_pending or workers * 4
        self._executor: Optional[ThreadPoolExecutor] = None
        self._slots: Optional[asyncio.Semaphore] = None
        self._in_flight = 0

    @property
    def in_flight(self) -> int:
        """Jobs submitted and not yet finished."""
        return self._in_flight

    def _ensure_started(self) -> ThreadPoolExecutor:
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=self.workers,
                thread_name_prefix="page2md-worker-",
            )
            logger.debug(f"Started worker pool with {self.workers} threads")
        if self._slots is None:
            self._slots = asyncio.Semaphore(self.max_pending)
        return self._executor

    async def run(self, func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        """Call ``func(*args, **kwargs)`` in a worker thread and return its result."""
        executor = self._ensure_started()
        call = functools.partial(func, *args, **kwargs)

        async with self._slots:
            self._in_flight += 1
            try:
                return await asyncio.get_running_loop().run_in_executor(executor, call)
            finally:
                self._in_flight -= 1

    def close(self, wait: bool = True) -> None:
        """Stop the worker threads; the pool starts again on the next ``run``."""
        if self._executor is not None:
            self._executor.shutdown(wait=wait)
            self._executor = None
        self._slots = None

    async def __aenter__(self) -> "WorkerPool":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close(wait=True)
