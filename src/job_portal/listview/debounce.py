"""Debounce for search input."""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_SECONDS = 0.3


class Debouncer:
    """
    Coalesce rapid calls into one, fired after a quiet period.

    Each ``trigger`` cancels the pending timer and starts a new one; only the
    last call inside the window runs. Must be used from a running event loop.
    """

    def __init__(
        self,
        action: Callable[..., Awaitable[Any]],
        delay: float = DEFAULT_DEBOUNCE_SECONDS,
    ):
        """
        Initialize debouncer.

        Args:
            action: Coroutine function to run once input settles
            delay: Quiet period in seconds
        """
        self.action = action
        self.delay = delay
        self._task: Optional[asyncio.Task] = None

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    def trigger(self, *args: Any, **kwargs: Any) -> asyncio.Task:
        """
        Schedule ``action(*args, **kwargs)`` after the quiet period.

        Returns:
            Task that completes when the action ran, or is cancelled if a
            later trigger superseded it
        """
        self.cancel()
        self._task = asyncio.get_running_loop().create_task(self._run(args, kwargs))
        return self._task

    async def _run(self, args: tuple, kwargs: dict) -> Any:
        if self.delay > 0:
            await asyncio.sleep(self.delay)
        return await self.action(*args, **kwargs)

    def cancel(self) -> None:
        """Drop the pending call, if any."""
        if self.pending:
            logger.debug("Debounced call superseded")
            self._task.cancel()
        self._task = None

    async def flush(self) -> Any:
        """Wait for the pending call to finish. Returns its result, or None."""
        task = self._task
        if task is None:
            return None
        try:
            return await task
        except asyncio.CancelledError:
            if not task.cancelled():
                raise
            return None
