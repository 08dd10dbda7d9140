"""
Menu source port.
"""

from __future__ import annotations

from typing import Protocol

from menu_engine.domain.entities import MenuSnapshot, MenuVariant


class MenuSourceError(RuntimeError):
    """Raised when a menu cannot be fetched or decoded."""


class MenuSourcePort(Protocol):
    """Provides menu snapshots for an owner's menu."""

    async def fetch_menu(
        self,
        owner_id: str,
        menu_id: str,
        variant: MenuVariant = "control",
    ) -> MenuSnapshot:
        """Fetch one variant of a menu. Raises MenuSourceError on failure."""
        ...

    async def fetch_experiment(
        self,
        owner_id: str,
        menu_id: str,
    ) -> tuple[MenuSnapshot, MenuSnapshot]:
        """Fetch the control and test variants of a menu in one request."""
        ...
