import os
from functools import lru_cache
from pathlib import Path

from menu_engine.adapters.clock import SystemClock
from menu_engine.adapters.http_menu_source import HttpMenuSource
from menu_engine.ports.menu_source import MenuSourcePort
from menu_engine.rules.adapter import RulesAdapter
from menu_engine.rules.loader import load_rules
from menu_engine.rules.models import Rules


# --- Settings ---
class Settings:
    def __init__(self) -> None:
        self.base_dir = Path(os.getcwd())
        self.rules_path = Path(os.environ.get("MENU_ENGINE_RULES", self.base_dir / "rules.yaml"))
        self.backend_url = os.environ.get("MENU_ENGINE_BACKEND_URL")


@lru_cache
def get_settings() -> Settings:
    return Settings()


# --- Rules ---
def apply_overrides(rules: Rules, settings: Settings) -> Rules:
    """Apply environment overrides on top of the rules file."""
    if not settings.backend_url:
        return rules
    backend = rules.backend.model_copy(update={"base_url": settings.backend_url})
    return rules.model_copy(update={"backend": backend})


@lru_cache
def get_rules() -> Rules:
    settings = get_settings()
    return apply_overrides(load_rules(settings.rules_path), settings)


def get_rules_adapter() -> RulesAdapter:
    return RulesAdapter(get_rules())


# --- Adapters ---
def get_clock() -> SystemClock:
    return SystemClock()


def get_menu_source() -> MenuSourcePort:
    return HttpMenuSource.from_rules(get_rules().backend)
