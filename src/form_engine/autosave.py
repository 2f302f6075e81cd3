"""
Debounced auto-save.

Each ``schedule()`` call cancels the pending timer and starts a new one,
so the callback fires once per quiet period with the latest values.
The timer runs on the asyncio event loop; auto-save failures are logged
and never reach the form.
"""

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable

logger = logging.getLogger("form-engine")

AutoSaveCallback = Callable[[dict[str, Any]], Awaitable[None] | None]


class AutoSaveScheduler:
    """
    Debounce timer for the auto-save callback.

    Usage:
        scheduler = AutoSaveScheduler(save_draft, delay=1.0)
        scheduler.schedule({"email": "a@b.co"})
        scheduler.schedule({"email": "a@b.com"})  # restarts the timer
        # one call to save_draft({"email": "a@b.com"}) after 1s of quiet
    """

    def __init__(
        self,
        callback: AutoSaveCallback,
        delay: float,
        loop: asyncio.AbstractEventLoop | None = None,
    ):
        """
        Initialize the scheduler.

        Args:
            callback: Called with a snapshot of the form values.
                May return an awaitable, which is run as a task.
            delay: Quiet period in seconds.
            loop: Event loop for the timer. If None, the running loop
                is used when scheduling.
        """
        if delay < 0:
            raise ValueError(f"Auto-save delay must not be negative: {delay}")
        self.callback = callback
        self.delay = delay
        self._loop = loop
        self._handle: asyncio.TimerHandle | None = None
        self._tasks: set[asyncio.Task] = set()

    @property
    def pending(self) -> bool:
        """Whether a save is waiting for the quiet period to end."""
        return self._handle is not None

    def resolve_loop(self) -> asyncio.AbstractEventLoop:
        """
        Get the loop the timer will run on.

        Raises:
            RuntimeError: If no loop was given and none is running.
        """
        if self._loop is not None:
            return self._loop
        try:
            return asyncio.get_running_loop()
        except RuntimeError:
            raise RuntimeError(
                "Auto-save requires a running event loop; pass loop= to schedule outside one"
            ) from None

    def schedule(self, values: dict[str, Any]) -> None:
        """(Re)start the timer with the latest values."""
        loop = self.resolve_loop()
        self.cancel()
        self._handle = loop.call_later(self.delay, self._fire, dict(values))

    def cancel(self) -> None:
        """Cancel the pending save, if any."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self, values: dict[str, Any]) -> None:
        self._handle = None
        logger.debug(f"Auto-saving {len(values)} field value(s)")
        try:
            result = self.callback(values)
        except Exception as e:
            logger.error(f"Auto-save callback failed: {type(e).__name__}: {e}")
            return

        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result, loop=self._loop)
            self._tasks.add(task)
            task.add_done_callback(self._on_task_done)

    def _on_task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(f"Auto-save callback failed: {type(error).__name__}: {error}")
