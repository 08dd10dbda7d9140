"""
Rules adapter - exposes loaded rules through the component rules ports.
"""

from __future__ import annotations

from menu_engine.rules.models import Rules


class RulesAdapter:
    """Implements the experiments, engagement and scheduler rules ports."""

    def __init__(self, rules: Rules) -> None:
        self._rules = rules

    @property
    def rules(self) -> Rules:
        return self._rules

    # Experiments
    def get_order_delta_threshold(self) -> int:
        return self._rules.experiments.order_delta

    def get_recommendation_delta_threshold(self) -> int:
        return self._rules.experiments.recommendation_delta

    # Engagement
    def get_visibility_threshold(self) -> float:
        return self._rules.engagement.visibility_threshold

    def get_default_category(self) -> str:
        return self._rules.engagement.default_category

    # Scheduler
    def get_flush_interval_seconds(self) -> float:
        return self._rules.engagement.flush_interval_seconds
