"""
Scheduler component - Flush lifecycle for an engagement buffer.

Flushes the buffer of one menu view periodically, when the page becomes
hidden, and once more on teardown.

Invariants:
- Flushes never overlap: every trigger goes through one lock.
- Teardown stops the interval and all event sources before the final flush,
  and runs exactly one final flush.
- A failing flush never stops the interval loop.
"""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from collections.abc import Callable

from menu_engine.components.engagement.models import FlushOutput
from menu_engine.components.engagement.ports import ViewportVisibilityReporter

from .models import FlushAttempt, FlushTrigger
from .ports import FlushablePort, PageVisibilityPort, RulesPort

logger = logging.getLogger(__name__)

DEFAULT_FLUSH_INTERVAL_SECONDS = 30.0

# Most recent flush attempts kept for inspection
HISTORY_LIMIT = 50


class FlushScheduler:
    """
    Drives ``buffer.flush()`` for the lifetime of a menu view.

    Must be started from inside a running event loop.
    """

    def __init__(
        self,
        buffer: FlushablePort,
        *,
        interval_seconds: float | None = None,
        page_visibility: PageVisibilityPort | None = None,
        rules: RulesPort | None = None,
        history_limit: int = HISTORY_LIMIT,
    ) -> None:
        """
        Initialize scheduler.

        Args:
            buffer: Buffer to flush
            interval_seconds: Seconds between periodic flushes; falls back to
                rules, then DEFAULT_FLUSH_INTERVAL_SECONDS
            page_visibility: Optional page visibility source
            rules: Optional rules port
            history_limit: Number of recent flush attempts kept in ``history``
        """
        if interval_seconds is None:
            if rules is not None:
                interval_seconds = rules.get_flush_interval_seconds()
            else:
                interval_seconds = DEFAULT_FLUSH_INTERVAL_SECONDS

        self._buffer = buffer
        self._interval = interval_seconds
        self._page_visibility = page_visibility

        self._lock = asyncio.Lock()
        self._stop_event = asyncio.Event()
        self._task: asyncio.Task[None] | None = None
        self._pending: set[asyncio.Task[FlushOutput | None]] = set()
        self._unsubscribe_page: Callable[[], None] | None = None
        self._running = False
        self._torn_down = False
        self.history: deque[FlushAttempt] = deque(maxlen=history_limit)
        self.attempt_count = 0

    @property
    def is_running(self) -> bool:
        """Check if the interval loop is active."""
        return self._running

    @property
    def interval_seconds(self) -> float:
        return self._interval

    def start(self) -> None:
        """Start the interval loop and listen for page visibility changes."""
        if self._running or self._torn_down:
            return

        self._stop_event.clear()
        self._task = asyncio.get_running_loop().create_task(self._interval_loop())
        if self._page_visibility is not None:
            self._unsubscribe_page = self._page_visibility.subscribe(self._on_page_visibility)
        self._running = True
        logger.info("Flush scheduler started (interval: %.1fs)", self._interval)

    async def trigger_now(self, trigger: FlushTrigger = "manual") -> FlushOutput:
        """Run one flush, waiting for any flush already in progress."""
        async with self._lock:
            output = await self._buffer.flush()
        self.history.append(FlushAttempt(trigger=trigger, output=output))
        self.attempt_count += 1
        if output.status == "failed":
            logger.info("Flush (%s) failed, data kept for retry", trigger)
        return output

    async def teardown(self) -> FlushOutput | None:
        """
        Stop all triggers and run the final flush.

        Returns:
            Output of the final flush, or None if already torn down.
        """
        if self._torn_down:
            return None
        self._torn_down = True

        self._stop_event.set()
        if self._task is not None:
            await self._task
            self._task = None

        if self._unsubscribe_page is not None:
            self._unsubscribe_page()
            self._unsubscribe_page = None
        self._buffer.detach()

        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)

        self._running = False
        output = await self.trigger_now("teardown")
        logger.info("Flush scheduler stopped (final flush: %s)", output.status)
        return output

    def _on_page_visibility(self, state: str) -> None:
        if state != "hidden" or self._torn_down:
            return
        task = asyncio.get_running_loop().create_task(self._flush_safely("visibility"))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _flush_safely(self, trigger: FlushTrigger) -> FlushOutput | None:
        try:
            return await self.trigger_now(trigger)
        except Exception:
            logger.exception("Error during %s flush", trigger)
            return None

    async def _interval_loop(self) -> None:
        """Background interval loop."""
        while True:
            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=self._interval)
                return
            except TimeoutError:
                pass
            await self._flush_safely("interval")


# Factory functions


def create_view_session(
    buffer: FlushablePort,
    *,
    viewport: ViewportVisibilityReporter | None = None,
    page_visibility: PageVisibilityPort | None = None,
    rules: RulesPort | None = None,
) -> FlushScheduler:
    """
    Wire a buffer to its event sources and start flushing.

    Args:
        buffer: Engagement buffer for the view
        viewport: Optional viewport visibility reporter to attach the buffer to
        page_visibility: Optional page visibility source
        rules: Optional rules port

    Returns:
        Started FlushScheduler
    """
    if viewport is not None:
        buffer.attach(viewport)
    scheduler = FlushScheduler(buffer, page_visibility=page_visibility, rules=rules)
    scheduler.start()
    return scheduler
