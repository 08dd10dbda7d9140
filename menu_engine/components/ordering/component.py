"""
Ordering component - Effective display order under override schedules.

Resolves the order customers see for a menu, honouring time-windowed
display order overrides, and groups the result into category tabs.

Invariants:
- Resolution is pure: identical inputs yield identical output.
- Malformed schedules and unknown item names are ignored, never raised.
- Ordering is total: (effective order, name), items without an order last.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from datetime import UTC, datetime, time

from menu_engine.domain.entities import DEFAULT_CATEGORY, MenuItem, OverrideSchedule

from .models import (
    ALL_CATEGORY,
    BuildFeedInput,
    BuildFeedOutput,
    FeedCategory,
    OrderingValidationError,
    ResolveOrderInput,
    ResolveOrderOutput,
    ValidateSchedulesInput,
    ValidateSchedulesOutput,
)
from .ports import TimePort

_HHMM = re.compile(r"([01]\d|2[0-3]):([0-5]\d)")

MINUTES_PER_DAY = 24 * 60


# --- Pure Functions (Functional Core) ---


def parse_hhmm(value: str | None) -> int | None:
    """
    Parse a strict ``HH:MM`` string into minutes since midnight.

    Returns:
        Minutes (0-1439), or None when the value is malformed.
    """
    if not isinstance(value, str):
        return None
    match = _HHMM.fullmatch(value)
    if match is None:
        return None
    return int(match.group(1)) * 60 + int(match.group(2))


def minutes_of_day(now_utc: datetime | time) -> int:
    """Minutes since UTC midnight for a datetime or time."""
    if isinstance(now_utc, datetime) and now_utc.tzinfo is not None:
        now_utc = now_utc.astimezone(UTC)
    return now_utc.hour * 60 + now_utc.minute


def is_window_active(start: int, end: int, current: int) -> bool:
    """
    Check whether ``current`` falls in the window [start, end).

    A window with start > end wraps past midnight. start == end is empty.
    """
    if start <= end:
        return start <= current < end
    return current >= start or current < end


def is_schedule_active(schedule: OverrideSchedule, current_minutes: int) -> bool:
    """Check a schedule against minutes of day; malformed schedules are inactive."""
    start = parse_hhmm(schedule.start_time)
    end = parse_hhmm(schedule.end_time)
    if start is None or end is None:
        return False
    return is_window_active(start, end, current_minutes)


def active_overrides(
    schedules: Iterable[OverrideSchedule],
    now_utc: datetime | time,
) -> dict[str, int]:
    """
    Map food name to override order for every schedule active at ``now_utc``.

    When several active schedules target the same name, the one that comes
    last in ``schedules`` wins.
    """
    current = minutes_of_day(now_utc)
    overrides: dict[str, int] = {}
    for schedule in schedules:
        if is_schedule_active(schedule, current):
            overrides[schedule.food_name] = schedule.display_order_override
    return overrides


def effective_order(item: MenuItem, overrides: dict[str, int]) -> int | None:
    """Override if one is active, else the item's own order (may be None)."""
    if item.name in overrides:
        return overrides[item.name]
    return item.display_order


def _sort_key(item: MenuItem, overrides: dict[str, int]) -> tuple[int, int, str]:
    order = effective_order(item, overrides)
    if order is None:
        return (1, 0, item.name)
    return (0, order, item.name)


def resolve_order(
    items: Iterable[MenuItem],
    schedules: Iterable[OverrideSchedule],
    now_utc: datetime | time,
) -> list[MenuItem]:
    """
    Return a new list of ``items`` in effective display order at ``now_utc``.

    Args:
        items: Menu items (not modified).
        schedules: Override schedules; malformed entries are skipped.
        now_utc: Current UTC time (only hour and minute are used).

    Returns:
        Items sorted by (effective order, name); items without any order last.
    """
    overrides = active_overrides(schedules, now_utc)
    return sorted(items, key=lambda item: _sort_key(item, overrides))


def group_by_category(ordered: Sequence[MenuItem]) -> list[FeedCategory]:
    """
    Split an already-ordered list into feed tabs.

    ``All`` comes first, then categories alphabetically; each tab keeps the
    relative order of ``ordered``.
    """
    buckets: dict[str, list[MenuItem]] = {}
    for item in ordered:
        buckets.setdefault(item.category or DEFAULT_CATEGORY, []).append(item)

    categories = [FeedCategory(name=ALL_CATEGORY, items=tuple(ordered))]
    for name in sorted(buckets):
        categories.append(FeedCategory(name=name, items=tuple(buckets[name])))
    return categories


def validate_schedules(
    schedules: Sequence[OverrideSchedule],
    item_names: frozenset[str] | None = None,
) -> list[OrderingValidationError]:
    """
    Report schedules that resolution would ignore.

    Args:
        schedules: Schedules to check.
        item_names: Names present on the menu; unknown targets are reported
            only when this is given.

    Returns:
        List of validation errors (empty if every schedule is usable)
    """
    errors: list[OrderingValidationError] = []

    for index, schedule in enumerate(schedules):
        if parse_hhmm(schedule.start_time) is None:
            errors.append(
                OrderingValidationError(
                    code="INVALID_START_TIME",
                    message=f"Start time {schedule.start_time!r} is not HH:MM",
                    food_name=schedule.food_name,
                    index=index,
                )
            )
        if parse_hhmm(schedule.end_time) is None:
            errors.append(
                OrderingValidationError(
                    code="INVALID_END_TIME",
                    message=f"End time {schedule.end_time!r} is not HH:MM",
                    food_name=schedule.food_name,
                    index=index,
                )
            )
        if item_names and schedule.food_name not in item_names:
            errors.append(
                OrderingValidationError(
                    code="UNKNOWN_ITEM",
                    message=f"No menu item named {schedule.food_name!r}",
                    food_name=schedule.food_name,
                    index=index,
                )
            )

    return errors


# --- Component Entry Points ---


def _resolve_now(now_utc: datetime | time | None, time_port: TimePort | None) -> datetime | time:
    if now_utc is not None:
        return now_utc
    if time_port is not None:
        return time_port.now_utc()
    return datetime.now(UTC)


def run_resolve(
    inp: ResolveOrderInput,
    *,
    time_port: TimePort | None = None,
) -> ResolveOrderOutput:
    """
    Resolve the effective display order.

    Uses ``inp.now_utc`` when given, otherwise the time port, otherwise the
    system clock.
    """
    now = _resolve_now(inp.now_utc, time_port)
    overrides = active_overrides(inp.schedules, now)
    ordered = sorted(inp.items, key=lambda item: _sort_key(item, overrides))

    return ResolveOrderOutput(
        items=tuple(ordered),
        active_overrides=overrides,
    )


def run_build_feed(
    inp: BuildFeedInput,
    *,
    time_port: TimePort | None = None,
) -> BuildFeedOutput:
    """Resolve order and group into category tabs."""
    now = _resolve_now(inp.now_utc, time_port)
    ordered = resolve_order(inp.items, inp.schedules, now)

    return BuildFeedOutput(categories=tuple(group_by_category(ordered)))


def run_validate_schedules(inp: ValidateSchedulesInput) -> ValidateSchedulesOutput:
    """Validate override schedules without affecting resolution."""
    errors = validate_schedules(inp.schedules, inp.item_names)
    return ValidateSchedulesOutput(errors=errors, success=len(errors) == 0)


def run(
    inp: ResolveOrderInput | BuildFeedInput | ValidateSchedulesInput,
    *,
    time_port: TimePort | None = None,
) -> ResolveOrderOutput | BuildFeedOutput | ValidateSchedulesOutput:
    """
    Main entry point for the ordering component.

    Dispatches to appropriate handler based on input type.
    """
    if isinstance(inp, ResolveOrderInput):
        return run_resolve(inp, time_port=time_port)
    elif isinstance(inp, BuildFeedInput):
        return run_build_feed(inp, time_port=time_port)
    elif isinstance(inp, ValidateSchedulesInput):
        return run_validate_schedules(inp)
    else:
        raise ValueError(f"Unknown input type: {type(inp)}")
