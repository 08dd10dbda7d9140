"""
Ordering component - Display order resolution under override schedules.
"""

from .component import (
    active_overrides,
    effective_order,
    group_by_category,
    is_schedule_active,
    is_window_active,
    minutes_of_day,
    parse_hhmm,
    resolve_order,
    run,
    run_build_feed,
    run_resolve,
    run_validate_schedules,
    validate_schedules,
)
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

__all__ = [
    # Component functions
    "run",
    "run_resolve",
    "run_build_feed",
    "run_validate_schedules",
    # Pure functions
    "active_overrides",
    "effective_order",
    "group_by_category",
    "is_schedule_active",
    "is_window_active",
    "minutes_of_day",
    "parse_hhmm",
    "resolve_order",
    "validate_schedules",
    # Models
    "ALL_CATEGORY",
    "BuildFeedInput",
    "BuildFeedOutput",
    "FeedCategory",
    "OrderingValidationError",
    "ResolveOrderInput",
    "ResolveOrderOutput",
    "ValidateSchedulesInput",
    "ValidateSchedulesOutput",
    # Ports
    "TimePort",
]
