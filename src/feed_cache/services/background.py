"""Fire-and-forget background work that outlives the response.

Refills and refreshes must not delay the reply, but they must also not
be dropped when the reply is sent. ``BackgroundTaskRunner`` owns the
tasks until they finish and the application lifespan drains it before
shutdown.
"""

import asyncio
import logging
from collections.abc import Coroutine
from typing import Any

logger = logging.getLogger(__name__)


class BackgroundTaskRunner:
    """Schedules detached asyncio tasks and keeps them alive until done.

    Failures are logged and swallowed; tasks are never retried.

    Example:
        ```python
        runner = BackgroundTaskRunner()
        task = runner.schedule(refill(), name="names-refill")
        ...
        await runner.drain(timeout=30)
        ```
    """

    def __init__(self) -> None:
        self._tasks: set[asyncio.Task] = set()
        self._stats = {
            "scheduled": 0,
            "succeeded": 0,
            "failed": 0,
        }

    def schedule(self, coro: Coroutine[Any, Any, Any], name: str | None = None) -> asyncio.Task:
        """Start ``coro`` on the running loop without awaiting it.

        Args:
            coro: The coroutine to run
            name: Task name used in log lines

        Returns:
            The created task (can be cancelled by the caller)
        """
        task = asyncio.get_running_loop().create_task(coro, name=name)
        self._tasks.add(task)
        self._stats["scheduled"] += 1
        task.add_done_callback(self._on_done)
        logger.debug(f"Background task scheduled: {task.get_name()}")
        return task

    def _on_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            logger.warning(f"Background task cancelled: {task.get_name()}")
            self._stats["failed"] += 1
            return
        error = task.exception()
        if error is not None:
            logger.warning(f"Background task failed: {task.get_name()} - {error!r}")
            self._stats["failed"] += 1
        else:
            logger.debug(f"Background task complete: {task.get_name()}")
            self._stats["succeeded"] += 1

    async def drain(self, timeout: float | None = None) -> None:
        """Wait for every outstanding task, including ones scheduled meanwhile.

        Tasks still running after ``timeout`` seconds are cancelled.

        Args:
            timeout: Maximum seconds to wait, or None to wait indefinitely
        """
        loop = asyncio.get_running_loop()
        deadline = None if timeout is None else loop.time() + timeout

        while self._tasks:
            remaining = None if deadline is None else max(deadline - loop.time(), 0)
            _, pending = await asyncio.wait(set(self._tasks), timeout=remaining)
            if pending and deadline is not None and loop.time() >= deadline:
                logger.warning(f"Cancelling {len(pending)} background tasks at shutdown")
                for task in pending:
                    task.cancel()
                await asyncio.gather(*pending, return_exceptions=True)
                return

    @property
    def pending(self) -> int:
        """Number of tasks still running."""
        return len(self._tasks)

    def get_stats(self) -> dict[str, int]:
        """Get runner statistics."""
        return {**self._stats, "pending": len(self._tasks)}
