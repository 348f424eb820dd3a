"""Public API for shared Coffees configuration utilities."""

from .loader import load_config, load_settings
from .models import (
    DEFAULT_CONFIG_PATH,
    ENV_PREFIX,
    CoffeeSettings,
    ComponentsSettings,
    HttpSettings,
    LoggingSettings,
    resolve_component_settings,
)

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "ENV_PREFIX",
    "CoffeeSettings",
    "ComponentsSettings",
    "HttpSettings",
    "LoggingSettings",
    "load_config",
    "load_settings",
    "resolve_component_settings",
]
