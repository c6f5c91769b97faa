"""Fire-and-forget task dispatch for cache write-backs."""

import asyncio
import logging
from collections.abc import Coroutine
from typing import Any

logger = logging.getLogger(__name__)


class BackgroundTasks:
    """Run write-back coroutines detached from the triggering request.

    Failures are logged at WARNING and never reach the caller. Strong
    references are kept until each task finishes, otherwise the event
    loop may garbage-collect a pending task.
    """

    def __init__(self) -> None:
        self._tasks: set[asyncio.Task] = set()

    def spawn(self, coro: Coroutine[Any, Any, Any], description: str) -> asyncio.Task | None:
        """Schedule ``coro`` on the running loop and return immediately.

        Outside a running loop the coroutine is closed unscheduled and
        None is returned.
        """
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            coro.close()
            logger.warning(f"Background task skipped, no running event loop: {description}")
            return None

        task = loop.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(lambda t: self._finished(t, description))
        return task

    def _finished(self, task: asyncio.Task, description: str) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            logger.debug(f"Background task cancelled: {description}")
            return
        error = task.exception()
        if error is not None:
            logger.warning(f"Background task failed ({description}): {error!r}")

    @property
    def pending(self) -> int:
        """Number of tasks still running."""
        return len(self._tasks)

    async def drain(self) -> None:
        """Wait for every pending task. Used on shutdown and in tests."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
