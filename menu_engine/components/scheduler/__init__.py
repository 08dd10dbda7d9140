"""
Scheduler component - Flush lifecycle for engagement buffers.
"""

from .component import (
    DEFAULT_FLUSH_INTERVAL_SECONDS,
    HISTORY_LIMIT,
    FlushScheduler,
    create_view_session,
)
from .models import FlushAttempt, FlushTrigger
from .ports import FlushablePort, PageVisibilityPort, RulesPort

__all__ = [
    "DEFAULT_FLUSH_INTERVAL_SECONDS",
    "HISTORY_LIMIT",
    "FlushScheduler",
    "create_view_session",
    # Models
    "FlushAttempt",
    "FlushTrigger",
    # Ports
    "FlushablePort",
    "PageVisibilityPort",
    "RulesPort",
]
