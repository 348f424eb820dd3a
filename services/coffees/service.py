"""Authoritative in-process Python API for Coffees Service."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from packages.coffee_shared.config import CoffeeSettings
from services.coffees.data.runtime import CoffeesSqlRuntime
from services.coffees.domain import CoffeeRecord, FlavorRef, HealthStatus


class CoffeesService(ABC):
    """Public API for coffee catalog and recommendation operations."""

    @abstractmethod
    async def find_all(
        self, *, offset: int | None = None, limit: int | None = None
    ) -> list[CoffeeRecord]:
        """Return one page of coffees with flavors attached."""

    @abstractmethod
    async def find_one(self, *, coffee_id: int | str) -> CoffeeRecord:
        """Return one coffee by id or raise ``CoffeeNotFoundError``."""

    @abstractmethod
    async def create(self, *, payload: dict[str, Any]) -> CoffeeRecord:
        """Create one coffee, resolving or staging each flavor by name."""

    @abstractmethod
    async def update(
        self, *, coffee_id: int | str, payload: dict[str, Any]
    ) -> CoffeeRecord:
        """Merge supplied fields onto one coffee, replacing flavors if given."""

    @abstractmethod
    async def remove(self, *, coffee_id: int | str) -> CoffeeRecord:
        """Delete one coffee and return it as it was before deletion."""

    @abstractmethod
    async def recommend(self, *, coffee_id: int | str) -> CoffeeRecord:
        """Atomically increment recommendations and record one audit event."""

    @abstractmethod
    async def preload_flavor_by_name(self, *, name: str) -> FlavorRef:
        """Return an existing flavor reference or a staged one."""

    @abstractmethod
    async def health(self) -> HealthStatus:
        """Return Coffees Service and owned dependency readiness status."""


def build_coffees_service(
    *,
    settings: CoffeeSettings,
    runtime: CoffeesSqlRuntime | None = None,
) -> CoffeesService:
    """Build the default Coffees Service implementation from typed settings."""
    from services.coffees.config import resolve_coffees_settings
    from services.coffees.data import SqlCoffeeRepository
    from services.coffees.implementation import DefaultCoffeesService

    service_settings = resolve_coffees_settings(settings)
    resolved_runtime = runtime or CoffeesSqlRuntime.from_settings(settings)
    return DefaultCoffeesService(
        settings=service_settings,
        repository=SqlCoffeeRepository(
            resolved_runtime,
            flavor_conflict_retries=service_settings.flavor_conflict_retries,
        ),
    )
