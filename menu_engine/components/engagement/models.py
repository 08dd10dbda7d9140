"""
Engagement component models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

# --- Flush Status Type ---

FlushStatus = Literal["sent", "failed", "empty", "skipped"]


# --- Buffer Model ---


@dataclass
class EngagementRecord:
    """
    Per-item engagement accumulated during one browsing session.

    Mutated in place by the buffer; durations are only ever appended.
    """

    food_name: str
    food_category: str
    impressions: int = 0
    engagement_durations: list[float] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return self.impressions == 0 and not self.engagement_durations


# --- Wire Models ---


@dataclass(frozen=True)
class AnalyticsEntry:
    """One item's analytics row as submitted to the backend."""

    timestamp_day: str  # MM/DD/YYYY
    impressions: int
    engagement_sec: tuple[int, ...]
    food_name: str
    average_engagement: float
    food_category: str
    purchase_count: int = 0
    purchased_with: tuple[Any, ...] = ()

    def to_payload(self) -> dict[str, Any]:
        return {
            "timestamp_day": self.timestamp_day,
            "impressions": self.impressions,
            "engagement_sec": list(self.engagement_sec),
            "food_name": self.food_name,
            "average_engagement": self.average_engagement,
            "purchase_count": self.purchase_count,
            "purchased_with": list(self.purchased_with),
            "food_category": self.food_category,
        }


@dataclass(frozen=True)
class AnalyticsBatch:
    """Analytics submission for one menu, built fresh at flush time."""

    owner_id: str
    menu_id: str
    analytics: tuple[AnalyticsEntry, ...]

    def to_payload(self) -> dict[str, Any]:
        return {
            "ownerId": self.owner_id,
            "menuId": self.menu_id,
            "analytics": [entry.to_payload() for entry in self.analytics],
        }


# --- Output Models ---


@dataclass(frozen=True)
class FlushOutput:
    """Outcome of one flush attempt."""

    status: FlushStatus
    batch: AnalyticsBatch | None = None
    message: str | None = None

    @property
    def success(self) -> bool:
        return self.status == "sent"
