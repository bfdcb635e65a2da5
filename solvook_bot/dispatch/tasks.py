"""
Deferred work.

Processing of an inbound event happens after it has been acknowledged. The
``TaskRunner`` owns those continuations: it keeps a reference to every running
task, logs any exception a task ends with, and can wait for outstanding work
on shutdown.
"""

import asyncio
from typing import Any, Awaitable, Optional, Set

from solvook_bot.utils.logger import setup_logger

# Initialize logger
logger = setup_logger(__name__)


class TaskRunner:
    """Tracks fire-and-forget continuations so none of their errors go unobserved."""

    def __init__(self) -> None:
        self._tasks: Set[asyncio.Task] = set()
        self.failures = 0

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def submit(self, coro: Awaitable[Any], name: Optional[str] = None) -> asyncio.Task:
        """
        Schedule a coroutine on the running loop.

        Args:
            coro: The continuation to run
            name: Task name used in log messages

        Returns:
            asyncio.Task: The scheduled task
        """
        task = asyncio.ensure_future(coro)
        if name:
            task.set_name(name)
        self._tasks.add(task)
        task.add_done_callback(self._on_done)
        return task

    def _on_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            logger.warning(f"Task {task.get_name()} was cancelled")
            return

        error = task.exception()
        if error is not None:
            self.failures += 1
            logger.error(f"Task {task.get_name()} failed: {error!r}", exc_info=error)

    async def drain(self, timeout: Optional[float] = None) -> None:
        """
        Wait for outstanding tasks, cancelling whatever is left after ``timeout``.

        Args:
            timeout: Seconds to wait, or None to wait indefinitely
        """
        if not self._tasks:
            return

        tasks = list(self._tasks)
        logger.info(f"Waiting for {len(tasks)} outstanding task(s)")
        _, still_running = await asyncio.wait(tasks, timeout=timeout)
        for task in still_running:
            task.cancel()
        if still_running:
            await asyncio.gather(*still_running, return_exceptions=True)
