"""Shared fixtures for Coffees Service test modules."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from pathlib import Path

import pytest
import pytest_asyncio

from resources.substrates.sql import SqlSettings
from services.coffees.config import CoffeesServiceSettings
from services.coffees.data import CoffeesSqlRuntime, SqlCoffeeRepository
from services.coffees.domain import (
    CoffeeDraft,
    CoffeeRecord,
    EventDraft,
    EventRecord,
    FlavorRecord,
)
from services.coffees.implementation import DefaultCoffeesService


class FakeUnitOfWork:
    """Unit of work writing straight into the fake repository's rows."""

    def __init__(self, repository: "FakeCoffeeRepository") -> None:
        self._repository = repository

    async def get_coffee(self, *, coffee_id: int) -> CoffeeRecord | None:
        return self._repository.coffees.get(coffee_id)

    async def increment_recommendations(self, *, coffee_id: int) -> CoffeeRecord:
        row = self._repository.coffees[coffee_id]
        updated = row.model_copy(update={"recommendations": row.recommendations + 1})
        self._repository.coffees[coffee_id] = updated
        return updated

    async def add_event(self, *, draft: EventDraft) -> EventRecord:
        if self._repository.raise_on_add_event is not None:
            raise self._repository.raise_on_add_event
        record = EventRecord(
            id=len(self._repository.events) + 1,
            name=draft.name,
            type=draft.type,
            payload=dict(draft.payload),
            created_at=datetime.now(tz=UTC),
        )
        self._repository.events.append(record)
        return record


class FakeCoffeeRepository:
    """In-memory coffee repository fake with snapshot rollback semantics."""

    def __init__(self) -> None:
        self.coffees: dict[int, CoffeeRecord] = {}
        self.flavors: dict[str, FlavorRecord] = {}
        self.events: list[EventRecord] = []
        self.raise_on_add_event: Exception | None = None
        self.vanish_on_save = False
        self.healthy = True
        self.commits = 0
        self.rollbacks = 0
        self._next_coffee_id = 1

    async def find(self, *, offset: int, limit: int | None) -> list[CoffeeRecord]:
        rows = [self.coffees[key] for key in sorted(self.coffees)]
        rows = rows[offset:]
        return rows if limit is None else rows[:limit]

    async def find_by_id(self, *, coffee_id: int) -> CoffeeRecord | None:
        return self.coffees.get(coffee_id)

    async def find_flavor_by_name(self, *, name: str) -> FlavorRecord | None:
        return self.flavors.get(name)

    async def save(self, *, draft: CoffeeDraft) -> CoffeeRecord | None:
        if draft.id is not None and (self.vanish_on_save or draft.id not in self.coffees):
            self.coffees.pop(draft.id, None)
            return None
        flavors: list[FlavorRecord] = []
        for ref in draft.flavors:
            row = self.flavors.get(ref.name)
            if row is None:
                row = FlavorRecord(id=len(self.flavors) + 1, name=ref.name)
                self.flavors[ref.name] = row
            flavors.append(row)

        coffee_id = draft.id
        recommendations = 0
        if coffee_id is None:
            coffee_id = self._next_coffee_id
            self._next_coffee_id += 1
        else:
            recommendations = self.coffees[coffee_id].recommendations
        record = CoffeeRecord(
            id=coffee_id,
            name=draft.name,
            brand=draft.brand,
            description=draft.description,
            recommendations=recommendations,
            flavors=flavors,
        )
        self.coffees[coffee_id] = record
        return record

    async def delete(self, *, coffee_id: int) -> bool:
        return self.coffees.pop(coffee_id, None) is not None

    @asynccontextmanager
    async def run_in_transaction(self) -> AsyncIterator[FakeUnitOfWork]:
        coffees = dict(self.coffees)
        events = list(self.events)
        try:
            yield FakeUnitOfWork(self)
        except Exception:
            self.coffees = coffees
            self.events = events
            self.rollbacks += 1
            raise
        self.commits += 1

    async def ping(self) -> bool:
        return self.healthy


@pytest.fixture()
def fake_repository() -> FakeCoffeeRepository:
    """Return an empty in-memory coffee repository."""
    return FakeCoffeeRepository()


@pytest.fixture()
def fake_service(fake_repository: FakeCoffeeRepository) -> DefaultCoffeesService:
    """Return the default service wired to the in-memory repository."""
    return DefaultCoffeesService(
        settings=CoffeesServiceSettings(),
        repository=fake_repository,
    )


@pytest_asyncio.fixture()
async def sqlite_runtime(tmp_path: Path) -> AsyncIterator[CoffeesSqlRuntime]:
    """Yield a schema-initialized runtime over a file-backed SQLite database."""
    runtime = CoffeesSqlRuntime.from_sql_settings(
        SqlSettings(url=f"sqlite+aiosqlite:///{tmp_path / 'coffees.db'}")
    )
    await runtime.create_schema()
    try:
        yield runtime
    finally:
        await runtime.dispose()


@pytest.fixture()
def sql_repository(sqlite_runtime: CoffeesSqlRuntime) -> SqlCoffeeRepository:
    """Return the SQL repository bound to the SQLite runtime."""
    return SqlCoffeeRepository(sqlite_runtime, flavor_conflict_retries=1)


@pytest.fixture()
def sql_service(sql_repository: SqlCoffeeRepository) -> DefaultCoffeesService:
    """Return the default service wired to the SQLite-backed repository."""
    return DefaultCoffeesService(
        settings=CoffeesServiceSettings(),
        repository=sql_repository,
    )
