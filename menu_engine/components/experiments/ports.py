"""
Experiments component port definitions.
"""

from __future__ import annotations

from typing import Protocol


class RulesPort(Protocol):
    """Port for experiment report configuration."""

    def get_order_delta_threshold(self) -> int:
        """Get minimum display order delta that counts as significant."""
        ...

    def get_recommendation_delta_threshold(self) -> int:
        """Get minimum added + removed recommendations that counts as significant."""
        ...
