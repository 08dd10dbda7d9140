from pathlib import Path
from typing import Any

import pytest

PROJECT_ROOT = Path(__file__).parent.parent


@pytest.fixture
def rules_path() -> Path:
    """The project's real rules.yaml."""
    return PROJECT_ROOT / "rules.yaml"


@pytest.fixture
def menu_document() -> dict[str, Any]:
    """Backend menu document with control and test entries."""
    return {
        "OwnerID": "owner-1",
        "MenuID": "dinner",
        "AllowABTesting": True,
        "food_service_entries": [
            {
                "name": "Burger",
                "food_category": "Mains",
                "description": "Beef patty",
                "price": 1250,
                "display_order": 2,
                "you_may_also_like": ["Fries"],
            },
            {
                "name": "Fries",
                "food_category": "Sides",
                "description": "Crispy",
                "price": 450,
                "display_order": 1,
            },
            {
                "name": "Salad",
                "food_category": "Vegan",
                "description": "Greens",
                "price": 900,
            },
        ],
        "test_food_service_entries": [
            {
                "name": "Burger",
                "food_category": "Mains",
                "description": "Beef patty",
                "price": 1350,
                "display_order": 2,
                "you_may_also_like": ["Fries"],
            },
            {
                "name": "Fries",
                "food_category": "Sides",
                "description": "Crispy",
                "price": 450,
                "display_order": 1,
            },
            {
                "name": "Milkshake",
                "food_category": "Drinks",
                "price": 600,
                "display_order": 3,
            },
        ],
        "override_schedules": [
            {
                "food_name": "Salad",
                "start_time": "11:00",
                "end_time": "14:00",
                "display_order_override": 0,
            }
        ],
    }
