"""
Unit tests for Ordering component.
"""

from __future__ import annotations

from datetime import UTC, datetime, time, timedelta, timezone

import pytest

from menu_engine.domain.entities import MenuItem, OverrideSchedule

from ..component import (
    active_overrides,
    group_by_category,
    is_window_active,
    parse_hhmm,
    resolve_order,
    run,
    run_build_feed,
    run_resolve,
    validate_schedules,
)
from ..models import (
    BuildFeedInput,
    ResolveOrderInput,
    ValidateSchedulesInput,
)

# --- Test Fixtures ---


class FakeTimePort:
    """Fake time port for testing."""

    def __init__(self, fixed_time: datetime | None = None):
        self._now = fixed_time or datetime(2026, 1, 14, 12, 0, 0, tzinfo=UTC)

    def now_utc(self) -> datetime:
        return self._now


def item(name: str, order: int | None = None, category: str = "Other") -> MenuItem:
    return MenuItem(id=name.lower(), name=name, display_order=order, category=category)


def schedule(name: str, start: str, end: str, order: int) -> OverrideSchedule:
    return OverrideSchedule(
        food_name=name,
        start_time=start,
        end_time=end,
        display_order_override=order,
    )


def names(items) -> list[str]:
    return [i.name for i in items]


@pytest.fixture
def soup_and_cake() -> list[MenuItem]:
    return [item("Soup", 5), item("Cake", 1)]


# --- Time Parsing ---


class TestParseHHMM:
    """Strict HH:MM parsing."""

    def test_valid_times(self):
        assert parse_hhmm("00:00") == 0
        assert parse_hhmm("09:30") == 570
        assert parse_hhmm("23:59") == 1439

    @pytest.mark.parametrize(
        "value",
        ["24:00", "9:30", "12:60", "12:5", "noon", "", "12:00:00", " 12:00", None],
    )
    def test_malformed_times(self, value):
        assert parse_hhmm(value) is None


# --- Window Activity ---


class TestWindowActivity:
    """Active window checks including midnight wrap."""

    def test_plain_window_is_half_open(self):
        assert is_window_active(600, 720, 600) is True
        assert is_window_active(600, 720, 719) is True
        assert is_window_active(600, 720, 720) is False
        assert is_window_active(600, 720, 599) is False

    def test_wrapping_window(self):
        start, end = parse_hhmm("22:00"), parse_hhmm("02:00")
        assert is_window_active(start, end, parse_hhmm("23:30")) is True
        assert is_window_active(start, end, parse_hhmm("01:00")) is True
        assert is_window_active(start, end, parse_hhmm("12:00")) is False
        assert is_window_active(start, end, parse_hhmm("02:00")) is False

    def test_empty_window_never_active(self):
        assert is_window_active(600, 600, 600) is False


# --- Resolution ---


class TestResolveOrder:
    """Effective order resolution."""

    def test_override_active_late_evening(self, soup_and_cake):
        schedules = [schedule("Soup", "22:00", "02:00", 0)]
        result = resolve_order(soup_and_cake, schedules, time(23, 0))
        assert names(result) == ["Soup", "Cake"]

    def test_override_inactive_midday(self, soup_and_cake):
        schedules = [schedule("Soup", "22:00", "02:00", 0)]
        result = resolve_order(soup_and_cake, schedules, time(12, 0))
        assert names(result) == ["Cake", "Soup"]

    def test_override_active_after_midnight(self, soup_and_cake):
        schedules = [schedule("Soup", "22:00", "02:00", 0)]
        result = resolve_order(soup_and_cake, schedules, time(1, 0))
        assert names(result) == ["Soup", "Cake"]

    def test_resolution_is_idempotent(self, soup_and_cake):
        schedules = [schedule("Soup", "22:00", "02:00", 0)]
        now = datetime(2026, 3, 1, 23, 15, tzinfo=UTC)
        first = resolve_order(soup_and_cake, schedules, now)
        second = resolve_order(soup_and_cake, schedules, now)
        assert first == second

    def test_input_not_mutated(self, soup_and_cake):
        original = list(soup_and_cake)
        resolve_order(soup_and_cake, [], time(12, 0))
        assert soup_and_cake == original

    def test_empty_schedules_sorts_by_order_then_name(self):
        items = [item("Beta", 2), item("Alpha", 2), item("Gamma", 1)]
        assert names(resolve_order(items, [], time(8, 0))) == ["Gamma", "Alpha", "Beta"]

    def test_missing_order_sorts_last(self):
        items = [item("Zed", None), item("Able", None), item("Mid", 100)]
        assert names(resolve_order(items, [], time(8, 0))) == ["Mid", "Able", "Zed"]

    def test_override_applies_to_item_without_order(self):
        items = [item("Special", None), item("Regular", 3)]
        schedules = [schedule("Special", "00:00", "23:59", 1)]
        assert names(resolve_order(items, schedules, time(8, 0))) == ["Special", "Regular"]

    def test_malformed_schedule_skipped(self, soup_and_cake):
        schedules = [schedule("Soup", "10pm", "02:00", 0)]
        result = resolve_order(soup_and_cake, schedules, time(23, 0))
        assert names(result) == ["Cake", "Soup"]

    def test_unknown_food_name_ignored(self, soup_and_cake):
        schedules = [schedule("Pie", "00:00", "23:59", 0)]
        result = resolve_order(soup_and_cake, schedules, time(12, 0))
        assert names(result) == ["Cake", "Soup"]

    def test_empty_items(self):
        assert resolve_order([], [schedule("Soup", "00:00", "23:59", 0)], time(1, 0)) == []

    def test_aware_datetime_converted_to_utc(self, soup_and_cake):
        schedules = [schedule("Soup", "22:00", "02:00", 0)]
        # 00:30 at UTC+2 is 22:30 UTC
        now = datetime(2026, 3, 2, 0, 30, tzinfo=timezone(timedelta(hours=2)))
        assert names(resolve_order(soup_and_cake, schedules, now)) == ["Soup", "Cake"]


class TestOverlappingSchedules:
    """Later active schedule for the same item wins."""

    def test_last_active_schedule_wins(self):
        schedules = [
            schedule("Soup", "10:00", "14:00", 0),
            schedule("Soup", "11:00", "13:00", 9),
        ]
        assert active_overrides(schedules, time(12, 0)) == {"Soup": 9}

    def test_inactive_later_schedule_does_not_override(self):
        schedules = [
            schedule("Soup", "10:00", "14:00", 0),
            schedule("Soup", "18:00", "20:00", 9),
        ]
        assert active_overrides(schedules, time(12, 0)) == {"Soup": 0}


# --- Feed ---


class TestFeed:
    """Category grouping."""

    def test_all_first_then_alphabetical(self):
        items = [
            item("Pie", 2, "Desserts"),
            item("Salad", 1, "Appetizers"),
            item("Cake", 1, "Desserts"),
        ]
        ordered = resolve_order(items, [], time(12, 0))
        feed = group_by_category(ordered)

        assert [c.name for c in feed] == ["All", "Appetizers", "Desserts"]
        assert names(feed[0].items) == ["Cake", "Salad", "Pie"]
        assert names(feed[2].items) == ["Cake", "Pie"]

    def test_empty_feed_has_only_all(self):
        feed = group_by_category([])
        assert len(feed) == 1
        assert feed[0].items == ()

    def test_run_build_feed_uses_time_port(self, soup_and_cake):
        schedules = (schedule("Soup", "22:00", "02:00", 0),)
        port = FakeTimePort(datetime(2026, 1, 14, 23, 0, tzinfo=UTC))
        out = run_build_feed(BuildFeedInput(items=tuple(soup_and_cake), schedules=schedules), time_port=port)
        assert names(out.categories[0].items) == ["Soup", "Cake"]


# --- Validation ---


class TestValidateSchedules:
    """Schedule validation reports but never raises."""

    def test_valid_schedules(self):
        errors = validate_schedules([schedule("Soup", "22:00", "02:00", 0)], frozenset({"Soup"}))
        assert errors == []

    def test_reports_bad_times_and_unknown_items(self):
        errors = validate_schedules(
            [schedule("Soup", "25:00", "2:00", 0), schedule("Pie", "01:00", "02:00", 1)],
            frozenset({"Soup"}),
        )
        codes = [e.code for e in errors]
        assert codes == ["INVALID_START_TIME", "INVALID_END_TIME", "UNKNOWN_ITEM"]
        assert errors[2].index == 1

    def test_unknown_items_not_reported_without_names(self):
        assert validate_schedules([schedule("Pie", "01:00", "02:00", 1)]) == []


# --- Entry Points ---


class TestEntryPoints:
    """Dispatch through run()."""

    def test_run_resolve_reports_active_overrides(self, soup_and_cake):
        inp = ResolveOrderInput(
            items=tuple(soup_and_cake),
            schedules=(schedule("Soup", "22:00", "02:00", 0),),
            now_utc=time(23, 0),
        )
        out = run_resolve(inp)
        assert out.success is True
        assert out.active_overrides == {"Soup": 0}
        assert names(out.items) == ["Soup", "Cake"]

    def test_run_dispatches_validation(self):
        out = run(ValidateSchedulesInput(schedules=(schedule("Soup", "x", "02:00", 0),)))
        assert out.success is False

    def test_run_rejects_unknown_input(self):
        with pytest.raises(ValueError):
            run(object())  # type: ignore[arg-type]
