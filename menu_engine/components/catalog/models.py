"""
Catalog component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from menu_engine.domain.entities import MenuSnapshot, MenuVariant

# --- Validation Error ---


@dataclass(frozen=True)
class CatalogValidationError:
    """Backend entry that could not be mapped."""

    code: str
    message: str
    index: int | None = None


# --- Input Models ---


@dataclass(frozen=True)
class ParseMenuInput:
    """Raw backend menu document for one owner/menu."""

    owner_id: str
    menu_id: str
    document: dict[str, Any]
    variant: MenuVariant = "control"


# --- Output Models ---


@dataclass(frozen=True)
class ParseMenuOutput:
    """Mapped snapshot plus entries that were dropped."""

    snapshot: MenuSnapshot
    errors: list[CatalogValidationError] = field(default_factory=list)
    success: bool = True
