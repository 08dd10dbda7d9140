"""
Scheduler component models.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from menu_engine.components.engagement.models import FlushOutput

# --- Trigger Type ---

FlushTrigger = Literal["interval", "visibility", "teardown", "manual"]


# --- Attempt Model ---


@dataclass(frozen=True)
class FlushAttempt:
    """One flush run by the scheduler and what caused it."""

    trigger: FlushTrigger
    output: FlushOutput
