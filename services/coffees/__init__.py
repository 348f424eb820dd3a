"""Coffees Service native API exports."""

from services.coffees.config import (
    SERVICE_COMPONENT_ID,
    CoffeesServiceSettings,
    resolve_coffees_settings,
)
from services.coffees.domain import (
    CoffeeRecord,
    EventRecord,
    FlavorRecord,
    FlavorRef,
    HealthStatus,
)
from services.coffees.errors import CoffeeNotFoundError, RecommendationFailedError
from services.coffees.service import CoffeesService, build_coffees_service

__all__ = [
    "SERVICE_COMPONENT_ID",
    "CoffeeNotFoundError",
    "CoffeeRecord",
    "CoffeesService",
    "CoffeesServiceSettings",
    "EventRecord",
    "FlavorRecord",
    "FlavorRef",
    "HealthStatus",
    "RecommendationFailedError",
    "build_coffees_service",
    "resolve_coffees_settings",
]
