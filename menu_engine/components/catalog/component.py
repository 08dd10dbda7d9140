"""
Catalog component - Map backend menu documents to menu snapshots.

The backend stores prices in cents and uses snake_case entries; this maps
them to the display-ready MenuItem snapshots the engines work on.

Invariants:
- Entries without a name or with malformed fields are dropped and reported,
  never raised.
- Override schedules are copied as-is; time validation happens at resolution.
- Prices are formatted as dollars with two decimals.
"""

from __future__ import annotations

import re
from typing import Any

from menu_engine.domain.entities import (
    DEFAULT_CATEGORY,
    DietaryIcon,
    MediaObject,
    MenuItem,
    MenuSnapshot,
    MenuVariant,
    OverrideSchedule,
)

from .models import CatalogValidationError, ParseMenuInput, ParseMenuOutput

VARIANT_ENTRY_KEYS: dict[str, str] = {
    "control": "food_service_entries",
    "test": "test_food_service_entries",
}

_WHITESPACE = re.compile(r"\s+")


# --- Pure Functions (Functional Core) ---


def format_price(cents: int | float | None) -> str:
    """Format a price in cents as ``$x.xx``."""
    if cents is None:
        return ""
    return f"${cents / 100:.2f}"


def item_id(name: str, menu_id: str, index: int) -> str:
    """Client-side identifier, unique per menu position."""
    return f"{_WHITESPACE.sub('-', name)}-{menu_id}-{index}"


def derive_dietary_icons(
    category: str | None,
    allergen_tags: list[str] | tuple[str, ...] | None,
) -> tuple[DietaryIcon, ...]:
    """Derive dietary badges from category and allergen tags."""
    icons: list[DietaryIcon] = []
    category_lower = (category or "").lower()
    tags_lower = [tag.lower() for tag in allergen_tags or ()]

    if category_lower == "vegan":
        icons.append("vegan")
    if category_lower == "vegetarian" or "vegan" in icons:
        icons.append("vegetarian")
    if "gluten free" in category_lower or "gluten-free" in tags_lower or "gluten free" in tags_lower:
        icons.append("gluten-free")
    if any("spicy" in tag or "hot" in tag for tag in tags_lower):
        icons.append("spicy")

    return tuple(dict.fromkeys(icons))


def _first_words(text: str | None, count: int = 2) -> str | None:
    if not text or not text.strip():
        return None
    return " ".join(text.split()[:count])


def build_media(entry: dict[str, Any]) -> tuple[MediaObject, ...]:
    """Image for an entry: generated image preferred over the source upload."""
    url = entry.get("generated_blob_media_ref") or entry.get("source_media_blob_ref")
    if not url or not str(url).startswith(("http://", "https://")):
        return ()

    hint = (
        _first_words(entry.get("visual_description"))
        or _first_words(entry.get("name"))
        or "food item"
    )
    return (MediaObject(type="image", url=str(url), data_ai_hint=hint),)


def parse_menu_item(entry: dict[str, Any], menu_id: str, index: int) -> MenuItem:
    """Map one backend food service entry."""
    name = str(entry["name"])
    category = entry.get("food_category") or DEFAULT_CATEGORY
    allergen_tags = tuple(entry.get("allergen_tags") or ())
    display_order = entry.get("display_order")

    return MenuItem(
        id=item_id(name, menu_id, index),
        name=name,
        category=category,
        price=format_price(entry.get("price")),
        description=entry.get("description") or "",
        display_order=int(display_order) if display_order is not None else None,
        you_may_also_like=tuple(entry.get("you_may_also_like") or ()),
        ingredients=entry.get("ingredients") or None,
        allergen_tags=allergen_tags,
        dietary_icons=derive_dietary_icons(entry.get("food_category"), allergen_tags),
        media=build_media(entry),
    )


def parse_override_schedule(entry: dict[str, Any]) -> OverrideSchedule | None:
    """Map one override schedule; None when a field is missing."""
    try:
        return OverrideSchedule(
            food_name=str(entry["food_name"]),
            start_time=str(entry["start_time"]),
            end_time=str(entry["end_time"]),
            display_order_override=int(entry["display_order_override"]),
        )
    except (KeyError, TypeError, ValueError):
        return None


def parse_menu_document(
    document: dict[str, Any],
    owner_id: str,
    menu_id: str,
    variant: MenuVariant = "control",
) -> tuple[MenuSnapshot, list[CatalogValidationError]]:
    """
    Map a backend menu document to a snapshot of one variant.

    Args:
        document: Backend JSON document.
        owner_id: Owner identifier.
        menu_id: Menu identifier (falls back to the document's MenuID).
        variant: ``control`` or ``test`` entries.

    Returns:
        Tuple of (snapshot, errors for dropped entries)
    """
    errors: list[CatalogValidationError] = []
    resolved_menu_id = menu_id or str(document.get("MenuID") or "")

    items: list[MenuItem] = []
    for index, entry in enumerate(document.get(VARIANT_ENTRY_KEYS[variant]) or []):
        if not isinstance(entry, dict) or not entry.get("name"):
            errors.append(
                CatalogValidationError(
                    code="MISSING_NAME",
                    message="Menu entry has no name",
                    index=index,
                )
            )
            continue
        try:
            items.append(parse_menu_item(entry, resolved_menu_id, index))
        except (TypeError, ValueError) as e:
            errors.append(
                CatalogValidationError(
                    code="INVALID_ENTRY",
                    message=f"Menu entry {entry['name']!r} has malformed fields: {e}",
                    index=index,
                )
            )

    schedules: list[OverrideSchedule] = []
    for index, raw in enumerate(document.get("override_schedules") or []):
        parsed = parse_override_schedule(raw) if isinstance(raw, dict) else None
        if parsed is None:
            errors.append(
                CatalogValidationError(
                    code="INVALID_SCHEDULE",
                    message="Override schedule is missing fields",
                    index=index,
                )
            )
            continue
        schedules.append(parsed)

    snapshot = MenuSnapshot(
        owner_id=owner_id or str(document.get("OwnerID") or ""),
        menu_id=resolved_menu_id,
        variant=variant,
        items=tuple(items),
        override_schedules=tuple(schedules),
        allow_ab_testing=bool(document.get("AllowABTesting", False)),
        currency_code=document.get("currency_code"),
        restaurant_name=str(document.get("MenuID") or resolved_menu_id),
    )
    return snapshot, errors


# --- Component Entry Points ---


def run(inp: ParseMenuInput) -> ParseMenuOutput:
    """
    Main entry point for the catalog component.

    Args:
        inp: Raw backend document and identifiers.

    Returns:
        ParseMenuOutput with the snapshot and dropped entries.
    """
    snapshot, errors = parse_menu_document(inp.document, inp.owner_id, inp.menu_id, inp.variant)
    return ParseMenuOutput(snapshot=snapshot, errors=errors, success=len(errors) == 0)
