"""
Unit tests for Engagement component.
"""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime

import pytest

from menu_engine.adapters.visibility import InMemoryViewportReporter
from menu_engine.domain.entities import MenuItem

from ..component import (
    EngagementBuffer,
    average,
    build_batch,
    format_timestamp_day,
    round_half_up,
)
from ..models import AnalyticsBatch, EngagementRecord

# --- Test Fixtures ---


class FakeTimePort:
    """Fake time port with a manually advanced monotonic clock."""

    def __init__(self, fixed_time: datetime | None = None):
        self._now = fixed_time or datetime(2026, 1, 14, 12, 0, 0, tzinfo=UTC)
        self._mono = 1000.0

    def now_utc(self) -> datetime:
        return self._now

    def monotonic(self) -> float:
        return self._mono

    def advance(self, seconds: float) -> None:
        self._mono += seconds


class RecordingTransport:
    """Transport that records batches and answers with a fixed result."""

    def __init__(self, accept: bool = True, error: Exception | None = None):
        self.accept = accept
        self.error = error
        self.batches: list[AnalyticsBatch] = []

    async def submit_analytics(self, batch: AnalyticsBatch) -> bool:
        self.batches.append(batch)
        if self.error is not None:
            raise self.error
        return self.accept


class GatedTransport(RecordingTransport):
    """Transport that waits until released, to interleave events with a flush."""

    def __init__(self, accept: bool = True):
        super().__init__(accept=accept)
        self.started = asyncio.Event()
        self.release = asyncio.Event()

    async def submit_analytics(self, batch: AnalyticsBatch) -> bool:
        self.batches.append(batch)
        self.started.set()
        await self.release.wait()
        return self.accept


class FakeEngagementRules:
    """Fake engagement rules for testing."""

    def get_visibility_threshold(self) -> float:
        return 0.5

    def get_default_category(self) -> str:
        return "Misc"


def menu_item(name: str, category: str = "Mains") -> MenuItem:
    return MenuItem(id=name.lower(), name=name, category=category)


@pytest.fixture
def clock() -> FakeTimePort:
    return FakeTimePort()


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def buffer(clock: FakeTimePort, transport: RecordingTransport) -> EngagementBuffer:
    return EngagementBuffer("owner-1", "menu-1", transport, time_port=clock)


# --- Pure Functions ---


class TestPureFunctions:
    """Serialization helpers."""

    def test_round_half_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(3.5) == 4
        assert round_half_up(2.49) == 2
        assert round_half_up(0.0) == 0

    def test_average(self):
        assert average([]) == 0.0
        assert average([1.0, 2.0, 4.5]) == pytest.approx(2.5)

    def test_timestamp_day_format(self):
        assert format_timestamp_day(datetime(2026, 3, 7, 23, 59, tzinfo=UTC)) == "03/07/2026"

    def test_build_batch_payload(self):
        record = EngagementRecord("Soup", "Soups", impressions=2, engagement_durations=[1.4, 2.6])
        batch = build_batch("o", "m", [record], "01/14/2026")
        assert batch.to_payload() == {
            "ownerId": "o",
            "menuId": "m",
            "analytics": [
                {
                    "timestamp_day": "01/14/2026",
                    "impressions": 2,
                    "engagement_sec": [1, 3],
                    "food_name": "Soup",
                    "average_engagement": pytest.approx(2.0),
                    "purchase_count": 0,
                    "purchased_with": [],
                    "food_category": "Soups",
                }
            ],
        }


# --- Tracking ---


class TestTracking:
    """start_tracking / end_tracking semantics."""

    def test_repeated_start_counts_once(self, buffer: EngagementBuffer):
        buffer.start_tracking(menu_item("X"))
        buffer.start_tracking(menu_item("X"))
        assert buffer.records["X"].impressions == 1

    def test_start_end_start_counts_twice(self, buffer: EngagementBuffer, clock: FakeTimePort):
        buffer.start_tracking(menu_item("X"))
        clock.advance(3)
        buffer.end_tracking("X")
        buffer.start_tracking(menu_item("X"))
        assert buffer.records["X"].impressions == 2
        assert buffer.records["X"].engagement_durations == [3.0]
        assert "X" in buffer.active_timers

    def test_end_without_start_is_noop(self, buffer: EngagementBuffer):
        buffer.end_tracking("Ghost")
        assert buffer.is_empty()

    def test_duplicate_end_records_once(self, buffer: EngagementBuffer, clock: FakeTimePort):
        buffer.start_tracking(menu_item("X"))
        clock.advance(2)
        buffer.end_tracking("X")
        clock.advance(5)
        buffer.end_tracking("X")
        assert buffer.records["X"].engagement_durations == [2.0]

    def test_category_default(self, buffer: EngagementBuffer):
        buffer.start_tracking(MenuItem(name="Mystery", category=""))
        assert buffer.records["Mystery"].food_category == "Other"

    def test_rules_override_defaults(self, clock: FakeTimePort, transport: RecordingTransport):
        buffer = EngagementBuffer(
            "o", "m", transport, time_port=clock, rules=FakeEngagementRules()
        )
        buffer.on_became_visible(MenuItem(name="Mystery", category=""), 0.5)
        assert buffer.records["Mystery"].food_category == "Misc"


# --- Viewport Visibility ---


class TestViewportVisibility:
    """Visibility reporter drives tracking."""

    def test_threshold_gates_start(self, buffer: EngagementBuffer):
        reporter = InMemoryViewportReporter()
        buffer.attach(reporter)

        reporter.report_visible(menu_item("A"), 0.5)
        assert buffer.is_empty()

        reporter.report_visible(menu_item("A"), 0.75)
        assert buffer.records["A"].impressions == 1

    def test_hidden_ends_tracking(self, buffer: EngagementBuffer, clock: FakeTimePort):
        reporter = InMemoryViewportReporter()
        buffer.attach(reporter)
        reporter.report_visible(menu_item("A"), 1.0)
        clock.advance(4)
        reporter.report_hidden("A")
        assert buffer.records["A"].engagement_durations == [4.0]

    def test_detach_stops_events(self, buffer: EngagementBuffer):
        reporter = InMemoryViewportReporter()
        buffer.attach(reporter)
        buffer.detach()
        reporter.report_visible(menu_item("A"), 1.0)
        assert buffer.is_empty()
        assert reporter.subscriber_count == 0


# --- Flush ---


class TestFlush:
    """Flush success, failure and snapshot semantics."""

    @pytest.mark.asyncio
    async def test_empty_buffer_does_not_call_transport(
        self, buffer: EngagementBuffer, transport: RecordingTransport
    ):
        out = await buffer.flush()
        assert out.status == "empty"
        assert transport.batches == []

    @pytest.mark.asyncio
    async def test_success_clears_buffer(
        self, buffer: EngagementBuffer, clock: FakeTimePort, transport: RecordingTransport
    ):
        buffer.start_tracking(menu_item("X"))
        clock.advance(2)
        buffer.end_tracking("X")

        out = await buffer.flush()

        assert out.success is True
        assert buffer.is_empty()
        entry = transport.batches[0].analytics[0]
        assert entry.food_name == "X"
        assert entry.impressions == 1
        assert entry.engagement_sec == (2,)
        assert entry.timestamp_day == "01/14/2026"

    @pytest.mark.asyncio
    async def test_failure_retains_records(self, clock: FakeTimePort):
        rejecting = RecordingTransport(accept=False)
        failing = EngagementBuffer("o", "m", rejecting, time_port=clock)
        failing.start_tracking(menu_item("X"))
        clock.advance(1)
        failing.end_tracking("X")

        out = await failing.flush()

        assert out.status == "failed"
        assert failing.records["X"].impressions == 1
        assert failing.records["X"].engagement_durations == [1.0]

        rejecting.accept = True
        out = await failing.flush()
        assert out.success is True
        assert failing.is_empty()
        assert rejecting.batches[0] == rejecting.batches[1]

    @pytest.mark.asyncio
    async def test_transport_exception_is_swallowed(self, clock: FakeTimePort):
        transport = RecordingTransport(error=ConnectionError("down"))
        buffer = EngagementBuffer("o", "m", transport, time_port=clock)
        buffer.start_tracking(menu_item("X"))

        out = await buffer.flush()

        assert out.status == "failed"
        assert out.message == "down"
        assert buffer.records["X"].impressions == 1

    @pytest.mark.asyncio
    async def test_retry_does_not_double_count(self, clock: FakeTimePort):
        transport = RecordingTransport(accept=False)
        buffer = EngagementBuffer("o", "m", transport, time_port=clock)
        buffer.start_tracking(menu_item("X"))
        await buffer.flush()
        await buffer.flush()
        assert buffer.records["X"].impressions == 1

        buffer.start_tracking(menu_item("X"))
        await buffer.flush()
        assert transport.batches[-1].analytics[0].impressions == 2

    @pytest.mark.asyncio
    async def test_open_timer_synthesized_at_flush(
        self, buffer: EngagementBuffer, clock: FakeTimePort, transport: RecordingTransport
    ):
        buffer.start_tracking(menu_item("X"))
        clock.advance(7.4)

        await buffer.flush()

        assert buffer.active_timers == {}
        entry = transport.batches[0].analytics[0]
        assert entry.engagement_sec == (7,)
        assert entry.average_engagement == pytest.approx(7.4)

    @pytest.mark.asyncio
    async def test_open_timer_closed_even_when_flush_fails(self, clock: FakeTimePort):
        buffer = EngagementBuffer("o", "m", RecordingTransport(accept=False), time_port=clock)
        buffer.start_tracking(menu_item("X"))
        clock.advance(3)

        await buffer.flush()

        assert buffer.active_timers == {}
        assert buffer.records["X"].engagement_durations == [3.0]

    @pytest.mark.asyncio
    async def test_missing_ids_skip(self, clock: FakeTimePort, transport: RecordingTransport):
        buffer = EngagementBuffer("", "menu", transport, time_port=clock)
        buffer.start_tracking(menu_item("X"))
        out = await buffer.flush()
        assert out.status == "skipped"
        assert transport.batches == []


class TestFlushInterleaving:
    """Events arriving while a flush is awaiting the transport."""

    @pytest.mark.asyncio
    async def test_events_during_flight_survive_success(self, clock: FakeTimePort):
        transport = GatedTransport()
        buffer = EngagementBuffer("o", "m", transport, time_port=clock)
        buffer.start_tracking(menu_item("X"))
        clock.advance(2)
        buffer.end_tracking("X")

        task = asyncio.create_task(buffer.flush())
        await transport.started.wait()

        buffer.start_tracking(menu_item("X"))
        buffer.start_tracking(menu_item("Y"))
        clock.advance(1)
        buffer.end_tracking("X")

        transport.release.set()
        out = await task

        assert out.success is True
        assert out.batch.analytics[0].impressions == 1
        assert buffer.records["X"].impressions == 1
        assert buffer.records["X"].engagement_durations == [1.0]
        assert buffer.records["Y"].impressions == 1
        assert "Y" in buffer.active_timers

    @pytest.mark.asyncio
    async def test_concurrent_flush_is_skipped(self, clock: FakeTimePort):
        transport = GatedTransport()
        buffer = EngagementBuffer("o", "m", transport, time_port=clock)
        buffer.start_tracking(menu_item("X"))

        first = asyncio.create_task(buffer.flush())
        await transport.started.wait()

        second = await buffer.flush()
        assert second.status == "skipped"

        transport.release.set()
        assert (await first).success is True
        assert len(transport.batches) == 1
        assert buffer.is_flushing is False
