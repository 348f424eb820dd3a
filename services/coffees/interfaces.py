"""Transport-neutral protocol interfaces used by Coffees Service."""

from __future__ import annotations

from contextlib import AbstractAsyncContextManager
from typing import Protocol

from services.coffees.domain import (
    CoffeeDraft,
    CoffeeRecord,
    EventDraft,
    EventRecord,
    FlavorRecord,
)


class CoffeeUnitOfWork(Protocol):
    """Operations available inside one atomic recommendation transaction."""

    async def get_coffee(self, *, coffee_id: int) -> CoffeeRecord | None:
        """Load one coffee into the transaction scope."""

    async def increment_recommendations(self, *, coffee_id: int) -> CoffeeRecord:
        """Increment the loaded coffee's counter and stage the write."""

    async def add_event(self, *, draft: EventDraft) -> EventRecord:
        """Stage one audit event insert."""


class CoffeeRepository(Protocol):
    """Protocol for authoritative coffee and flavor persistence operations."""

    async def find(self, *, offset: int, limit: int | None) -> list[CoffeeRecord]:
        """Read one page of coffees with flavors attached."""

    async def find_by_id(self, *, coffee_id: int) -> CoffeeRecord | None:
        """Read one coffee with flavors attached."""

    async def find_flavor_by_name(self, *, name: str) -> FlavorRecord | None:
        """Read one flavor by exact name."""

    async def save(self, *, draft: CoffeeDraft) -> CoffeeRecord | None:
        """Insert or replace one coffee, persisting staged flavors.

        Returns ``None`` when ``draft.id`` names a coffee that no longer exists.
        """

    async def delete(self, *, coffee_id: int) -> bool:
        """Delete one coffee and return whether it existed."""

    def run_in_transaction(self) -> AbstractAsyncContextManager[CoffeeUnitOfWork]:
        """Open one atomic unit of work; commit on success, roll back on error."""

    async def ping(self) -> bool:
        """Return whether backing storage is reachable."""
