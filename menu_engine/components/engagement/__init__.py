"""
Engagement component - Per-item impression and engagement buffering.
"""

from .component import (
    DEFAULT_VISIBILITY_THRESHOLD,
    EngagementBuffer,
    average,
    build_batch,
    format_timestamp_day,
    round_half_up,
    summarize_record,
)
from .models import (
    AnalyticsBatch,
    AnalyticsEntry,
    EngagementRecord,
    FlushOutput,
    FlushStatus,
)
from .ports import (
    EngagementRulesPort,
    FlushTransportPort,
    HiddenCallback,
    TimePort,
    Unsubscribe,
    ViewportVisibilityReporter,
    VisibleCallback,
)

__all__ = [
    # Buffer
    "EngagementBuffer",
    "DEFAULT_VISIBILITY_THRESHOLD",
    # Pure functions
    "average",
    "build_batch",
    "format_timestamp_day",
    "round_half_up",
    "summarize_record",
    # Models
    "AnalyticsBatch",
    "AnalyticsEntry",
    "EngagementRecord",
    "FlushOutput",
    "FlushStatus",
    # Ports
    "EngagementRulesPort",
    "FlushTransportPort",
    "HiddenCallback",
    "TimePort",
    "Unsubscribe",
    "ViewportVisibilityReporter",
    "VisibleCallback",
]
