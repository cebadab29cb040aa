"""Debounced, coalescing refresh scheduling.

A burst of "data changed" notifications (several writes landing together,
realtime events from the store) must produce a single re-classification.
``RefreshScheduler`` keeps one pending slot: every trigger restarts the quiet
period, and the refresh runs once the triggers stop.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

import structlog

from cert_irregularity.config import REFRESH_DEBOUNCE_SECONDS

logger = structlog.get_logger(__name__)


class RefreshScheduler:
    """Single-slot debounce timer around an async refresh callback.

    Example:
        >>> scheduler = RefreshScheduler(session.refresh, delay=1.0)
        >>> scheduler.trigger()
        >>> scheduler.trigger()  # coalesced with the first
        >>> await scheduler.wait_idle()
        >>> scheduler.runs
        1
    """

    def __init__(
        self,
        refresh: Callable[[], Awaitable[object]],
        delay: float = REFRESH_DEBOUNCE_SECONDS,
    ) -> None:
        """Initialize the scheduler.

        Args:
            refresh: Coroutine function to run after the quiet period.
            delay: Quiet period in seconds.
        """
        self._refresh = refresh
        self.delay = delay
        self._timer: asyncio.TimerHandle | None = None
        self._task: asyncio.Task[None] | None = None
        self._rerun = False
        self.runs = 0
        self.last_error: Exception | None = None

    @property
    def pending(self) -> bool:
        """Whether a refresh is waiting for its quiet period to end."""
        return self._timer is not None

    @property
    def running(self) -> bool:
        """Whether a refresh is currently executing."""
        return self._task is not None and not self._task.done()

    def trigger(self) -> None:
        """Request a refresh, restarting the quiet period.

        Must be called from within a running event loop.
        """
        if self.running:
            # Data changed mid-refresh; run once more afterwards
            self._rerun = True
            return

        if self._timer is not None:
            self._timer.cancel()
        self._schedule()

    def cancel(self) -> None:
        """Drop any pending refresh. A refresh already running is left alone."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self._rerun = False

    async def wait_idle(self) -> None:
        """Wait until no refresh is pending or running."""
        while self.pending or self.running:
            if self._task is not None and not self._task.done():
                await asyncio.shield(self._task)
            else:
                await asyncio.sleep(self.delay / 4)

    def _schedule(self) -> None:
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(self.delay, self._fire)
        logger.debug("Refresh scheduled", delay=self.delay)

    def _fire(self) -> None:
        self._timer = None
        self._task = asyncio.get_running_loop().create_task(self._run())

    async def _run(self) -> None:
        self.runs += 1
        logger.info("Running coalesced refresh", run=self.runs)
        try:
            await self._refresh()
            self.last_error = None
        except Exception as e:
            # Nobody awaits this task; keep the error for the caller to surface
            self.last_error = e
            logger.exception("Scheduled refresh failed")
        finally:
            if self._rerun:
                self._rerun = False
                self._schedule()
