from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

# --- Enums / Literals ---
MenuVariant = Literal["control", "test"]
MediaType = Literal["image", "video"]
DietaryIcon = Literal["vegetarian", "vegan", "gluten-free", "spicy"]

DEFAULT_CATEGORY = "Other"

# --- Menu ---

class MediaObject(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: MediaType = "image"
    url: str
    data_ai_hint: str | None = None

class MenuItem(BaseModel):
    """
    Read-only snapshot of a menu item.

    ``name`` is the join key for override schedules and control/test diffs.
    ``display_order`` is optional; a missing order sorts after every present one.
    """

    model_config = ConfigDict(frozen=True)

    id: str = ""
    name: str
    category: str = DEFAULT_CATEGORY
    price: str = ""
    description: str = ""
    display_order: int | None = None
    you_may_also_like: tuple[str, ...] = ()

    ingredients: str | None = None
    allergen_tags: tuple[str, ...] = ()
    dietary_icons: tuple[DietaryIcon, ...] = ()
    media: tuple[MediaObject, ...] = ()

class OverrideSchedule(BaseModel):
    """Time-boxed display order override. Times are ``HH:MM`` in UTC."""

    model_config = ConfigDict(frozen=True)

    food_name: str
    start_time: str
    end_time: str
    display_order_override: int

class MenuSnapshot(BaseModel):
    """Items and override schedules of one menu variant."""

    model_config = ConfigDict(frozen=True)

    owner_id: str
    menu_id: str
    variant: MenuVariant = "control"
    items: tuple[MenuItem, ...] = ()
    override_schedules: tuple[OverrideSchedule, ...] = ()
    allow_ab_testing: bool = False
    currency_code: str | None = None
    restaurant_name: str = Field(default="")
