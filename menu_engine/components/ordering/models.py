"""
Ordering component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, time

from menu_engine.domain.entities import MenuItem, OverrideSchedule

# --- Validation Error ---


@dataclass(frozen=True)
class OrderingValidationError:
    """Override schedule validation error."""

    code: str
    message: str
    food_name: str | None = None
    index: int | None = None


# --- Feed Model ---


ALL_CATEGORY = "All"


@dataclass(frozen=True)
class FeedCategory:
    """One tab of the customer-facing feed."""

    name: str
    items: tuple[MenuItem, ...]


# --- Input Models ---


@dataclass(frozen=True)
class ResolveOrderInput:
    """Input for resolving the effective display order."""

    items: tuple[MenuItem, ...]
    schedules: tuple[OverrideSchedule, ...] = ()
    now_utc: datetime | time | None = None


@dataclass(frozen=True)
class BuildFeedInput:
    """Input for building the categorised feed."""

    items: tuple[MenuItem, ...]
    schedules: tuple[OverrideSchedule, ...] = ()
    now_utc: datetime | time | None = None


@dataclass(frozen=True)
class ValidateSchedulesInput:
    """Input for checking override schedules against a menu."""

    schedules: tuple[OverrideSchedule, ...]
    item_names: frozenset[str] = frozenset()


# --- Output Models ---


@dataclass(frozen=True)
class ResolveOrderOutput:
    """Resolved order plus the overrides that were in effect."""

    items: tuple[MenuItem, ...]
    active_overrides: dict[str, int] = field(default_factory=dict)
    errors: list[OrderingValidationError] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class BuildFeedOutput:
    """Categorised feed, ``All`` first."""

    categories: tuple[FeedCategory, ...]
    errors: list[OrderingValidationError] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class ValidateSchedulesOutput:
    """Schedule problems found; never raised."""

    errors: list[OrderingValidationError] = field(default_factory=list)
    success: bool = True
