"""
Engagement component - Per-item impression and engagement buffering.

Collects impressions and engagement durations for the items a customer sees
during one menu view, and flushes them to the analytics backend as a batch.

Invariants:
- At most one open timer per item; starting while open is a no-op.
- A flush snapshots the buffer; on success exactly the snapshot is removed,
  events recorded while the submission was in flight stay buffered.
- On failure nothing is removed, so the next flush retries the same data.
- Transport errors are logged, never raised to the caller.
- Only one flush runs at a time per buffer.
"""

from __future__ import annotations

import logging
import math
import time
from collections.abc import Sequence
from datetime import UTC, datetime

from menu_engine.domain.entities import DEFAULT_CATEGORY, MenuItem

from .models import (
    AnalyticsBatch,
    AnalyticsEntry,
    EngagementRecord,
    FlushOutput,
)
from .ports import (
    EngagementRulesPort,
    FlushTransportPort,
    TimePort,
    Unsubscribe,
    ViewportVisibilityReporter,
)

logger = logging.getLogger(__name__)


# --- Default Configuration ---

DEFAULT_VISIBILITY_THRESHOLD = 0.75


# --- Pure Functions (Functional Core) ---


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return math.floor(value + 0.5)


def average(values: Sequence[float]) -> float:
    """Arithmetic mean, 0.0 for an empty sequence."""
    if not values:
        return 0.0
    return sum(values) / len(values)


def format_timestamp_day(moment: datetime) -> str:
    """Format a datetime as ``MM/DD/YYYY``."""
    return moment.strftime("%m/%d/%Y")


def summarize_record(record: EngagementRecord, timestamp_day: str) -> AnalyticsEntry:
    """Build the wire entry for one record."""
    durations = record.engagement_durations
    return AnalyticsEntry(
        timestamp_day=timestamp_day,
        impressions=record.impressions,
        engagement_sec=tuple(round_half_up(d) for d in durations),
        food_name=record.food_name,
        average_engagement=average(durations),
        food_category=record.food_category,
    )


def build_batch(
    owner_id: str,
    menu_id: str,
    records: Sequence[EngagementRecord],
    timestamp_day: str,
) -> AnalyticsBatch:
    """Build an analytics batch from a set of records."""
    return AnalyticsBatch(
        owner_id=owner_id,
        menu_id=menu_id,
        analytics=tuple(summarize_record(r, timestamp_day) for r in records),
    )


class _SystemTime:
    def now_utc(self) -> datetime:
        return datetime.now(UTC)

    def monotonic(self) -> float:
        return time.monotonic()


# --- Stateful Buffer ---


class EngagementBuffer:
    """
    Engagement buffer owned by one menu view.

    Mutations (start/end tracking) are synchronous; only ``flush`` awaits.
    """

    def __init__(
        self,
        owner_id: str,
        menu_id: str,
        transport: FlushTransportPort,
        *,
        time_port: TimePort | None = None,
        rules: EngagementRulesPort | None = None,
    ) -> None:
        self.owner_id = owner_id
        self.menu_id = menu_id
        self._transport = transport
        self._time = time_port or _SystemTime()

        self._visibility_threshold = DEFAULT_VISIBILITY_THRESHOLD
        self._default_category = DEFAULT_CATEGORY
        if rules is not None:
            self._visibility_threshold = rules.get_visibility_threshold()
            self._default_category = rules.get_default_category()

        self._records: dict[str, EngagementRecord] = {}
        self._active_timers: dict[str, float] = {}
        self._flushing = False
        self._unsubscribe: Unsubscribe | None = None

    # --- Inspection ---

    @property
    def records(self) -> dict[str, EngagementRecord]:
        """Live records keyed by food name."""
        return self._records

    @property
    def active_timers(self) -> dict[str, float]:
        """Open timers: food name to monotonic start time."""
        return self._active_timers

    @property
    def is_flushing(self) -> bool:
        return self._flushing

    def is_empty(self) -> bool:
        return not self._records

    # --- Tracking ---

    def start_tracking(self, item: MenuItem) -> None:
        """
        Count an impression and open an engagement timer for ``item``.

        No-op while a timer for the same name is already open, so duplicate
        visibility events do not double count.
        """
        name = item.name
        if name in self._active_timers:
            return

        record = self._records.get(name)
        if record is None:
            record = EngagementRecord(
                food_name=name,
                food_category=item.category or self._default_category,
            )
            self._records[name] = record
        record.impressions += 1

        self._active_timers[name] = self._time.monotonic()

    def end_tracking(self, food_name: str) -> None:
        """Close the open timer for ``food_name`` and record its duration."""
        started = self._active_timers.pop(food_name, None)
        if started is None:
            return

        duration = max(0.0, self._time.monotonic() - started)
        record = self._records.get(food_name)
        if record is not None:
            record.engagement_durations.append(duration)

    def close_open_timers(self) -> int:
        """End every open timer now. Returns how many were closed."""
        names = list(self._active_timers)
        for name in names:
            self.end_tracking(name)
        return len(names)

    # --- Viewport Visibility ---

    def on_became_visible(self, item: MenuItem, visible_ratio: float) -> None:
        if visible_ratio >= self._visibility_threshold:
            self.start_tracking(item)

    def on_became_hidden(self, food_name: str) -> None:
        self.end_tracking(food_name)

    def attach(self, reporter: ViewportVisibilityReporter) -> None:
        """Start receiving visibility events from ``reporter``."""
        self.detach()
        self._unsubscribe = reporter.subscribe(self.on_became_visible, self.on_became_hidden)

    def detach(self) -> None:
        """Stop receiving visibility events."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    # --- Flush ---

    def _take_snapshot(self) -> list[EngagementRecord]:
        return [
            EngagementRecord(
                food_name=r.food_name,
                food_category=r.food_category,
                impressions=r.impressions,
                engagement_durations=list(r.engagement_durations),
            )
            for r in self._records.values()
        ]

    def _discard_snapshot(self, snapshot: list[EngagementRecord]) -> None:
        """Remove exactly what was submitted, keeping anything recorded since."""
        for sent in snapshot:
            live = self._records.get(sent.food_name)
            if live is None:
                continue
            live.impressions = max(0, live.impressions - sent.impressions)
            del live.engagement_durations[: len(sent.engagement_durations)]
            if live.is_empty:
                del self._records[sent.food_name]

    async def flush(self) -> FlushOutput:
        """
        Submit buffered analytics.

        Open timers are closed at flush time so their durations are included.

        Returns:
            FlushOutput with status sent, failed, empty or skipped.
        """
        if self._flushing:
            return FlushOutput(status="skipped", message="flush already in flight")
        if not self.owner_id or not self.menu_id:
            return FlushOutput(status="skipped", message="missing owner or menu id")
        if not self._records:
            return FlushOutput(status="empty")

        self._flushing = True
        try:
            self.close_open_timers()
            snapshot = self._take_snapshot()
            batch = build_batch(
                self.owner_id,
                self.menu_id,
                snapshot,
                format_timestamp_day(self._time.now_utc()),
            )

            try:
                accepted = await self._transport.submit_analytics(batch)
            except Exception as e:
                logger.warning(
                    "Analytics flush for menu %s failed: %s", self.menu_id, e, exc_info=True
                )
                return FlushOutput(status="failed", batch=batch, message=str(e))

            if not accepted:
                logger.warning(
                    "Analytics flush for menu %s rejected; keeping %d records",
                    self.menu_id,
                    len(snapshot),
                )
                return FlushOutput(status="failed", batch=batch, message="rejected")

            self._discard_snapshot(snapshot)
            logger.debug("Flushed %d analytics records for menu %s", len(snapshot), self.menu_id)
            return FlushOutput(status="sent", batch=batch)
        finally:
            self._flushing = False
