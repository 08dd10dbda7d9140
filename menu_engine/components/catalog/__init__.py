"""
Catalog component - Backend menu document mapping.
"""

from .component import (
    VARIANT_ENTRY_KEYS,
    build_media,
    derive_dietary_icons,
    format_price,
    item_id,
    parse_menu_document,
    parse_menu_item,
    parse_override_schedule,
    run,
)
from .models import CatalogValidationError, ParseMenuInput, ParseMenuOutput

__all__ = [
    "run",
    # Pure functions
    "VARIANT_ENTRY_KEYS",
    "build_media",
    "derive_dietary_icons",
    "format_price",
    "item_id",
    "parse_menu_document",
    "parse_menu_item",
    "parse_override_schedule",
    # Models
    "CatalogValidationError",
    "ParseMenuInput",
    "ParseMenuOutput",
]
