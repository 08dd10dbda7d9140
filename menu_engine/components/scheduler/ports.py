"""
Scheduler component port definitions.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol

from menu_engine.components.engagement.models import FlushOutput
from menu_engine.components.engagement.ports import ViewportVisibilityReporter


class FlushablePort(Protocol):
    """Buffer the scheduler drives."""

    async def flush(self) -> FlushOutput:
        """Flush buffered data. Must not raise for transport failures."""
        ...

    def attach(self, reporter: ViewportVisibilityReporter) -> None:
        """Start receiving viewport events from ``reporter``."""
        ...

    def detach(self) -> None:
        """Stop receiving viewport events."""
        ...


class PageVisibilityPort(Protocol):
    """Page visibility source (``visible`` / ``hidden``)."""

    def subscribe(self, callback: Callable[[str], None]) -> Callable[[], None]:
        """Register a state-change callback. Returns an unsubscribe function."""
        ...


class RulesPort(Protocol):
    """Port for flush scheduling configuration."""

    def get_flush_interval_seconds(self) -> float:
        """Get seconds between periodic flushes."""
        ...
