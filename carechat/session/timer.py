"""Cancellable one-shot timer for staged message delivery."""

import asyncio
from collections.abc import Callable

from carechat.observability.logging import get_logger

logger = get_logger(__name__)


class StagedTimer:
    """Runs a callback once after a delay, unless cancelled first.

    Scheduling again replaces any pending callback. The callback runs on
    the event loop, so it never interleaves with other controller code.
    """

    def __init__(self) -> None:
        self._task: asyncio.Task | None = None

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    def schedule(self, delay: float, callback: Callable[[], None]) -> None:
        """Run callback after delay seconds."""
        self.cancel()
        self._task = asyncio.create_task(self._run(delay, callback))

    async def _run(self, delay: float, callback: Callable[[], None]) -> None:
        await asyncio.sleep(delay)
        callback()

    def cancel(self) -> bool:
        """Cancel the pending callback, returning whether one was pending."""
        if not self.pending:
            return False
        assert self._task is not None
        self._task.cancel()
        logger.debug("staged_timer_cancelled")
        return True

    async def wait(self) -> None:
        """Wait until the pending callback has run or been cancelled."""
        task = self._task
        if task is None:
            return
        await asyncio.wait({task})
        if not task.cancelled():
            task.result()
