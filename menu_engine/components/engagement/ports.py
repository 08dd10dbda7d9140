"""
Engagement component port definitions.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from typing import Protocol

from menu_engine.domain.entities import MenuItem

from .models import AnalyticsBatch

VisibleCallback = Callable[[MenuItem, float], None]
HiddenCallback = Callable[[str], None]
Unsubscribe = Callable[[], None]


class FlushTransportPort(Protocol):
    """Analytics submission endpoint."""

    async def submit_analytics(self, batch: AnalyticsBatch) -> bool:
        """Submit a batch. Returns True only if the backend accepted it."""
        ...


class ViewportVisibilityReporter(Protocol):
    """
    Source of per-item viewport visibility events.

    ``on_became_visible`` receives the item and its visible ratio (0-1);
    ``on_became_hidden`` receives the item name.
    """

    def subscribe(
        self,
        on_became_visible: VisibleCallback,
        on_became_hidden: HiddenCallback,
    ) -> Unsubscribe:
        """Register callbacks. Returns a function that removes them."""
        ...


class TimePort(Protocol):
    """Time provider interface."""

    def now_utc(self) -> datetime:
        """Get current UTC time."""
        ...

    def monotonic(self) -> float:
        """Get monotonic seconds for measuring durations."""
        ...


class EngagementRulesPort(Protocol):
    """Port for engagement tracking configuration."""

    def get_visibility_threshold(self) -> float:
        """Get minimum visible ratio that starts an engagement."""
        ...

    def get_default_category(self) -> str:
        """Get category recorded for items without one."""
        ...
