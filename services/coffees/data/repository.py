"""Authoritative SQL repository for Coffees Service state."""

from __future__ import annotations

from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from packages.coffee_shared.logging import get_logger
from resources.substrates.sql import QueryRunner, runner_transaction, transactional_session
from services.coffees.data.runtime import CoffeesSqlRuntime
from services.coffees.domain import (
    CoffeeDraft,
    CoffeeRecord,
    EventDraft,
    EventRecord,
    FlavorRecord,
    FlavorRef,
)
from services.coffees.errors import CoffeeNotFoundError
from services.coffees.interfaces import CoffeeRepository, CoffeeUnitOfWork

from .schema import Coffee, Event, Flavor

_LOGGER = get_logger(__name__)


class SqlCoffeeRepository(CoffeeRepository):
    """SQL repository over Coffees-owned tables."""

    def __init__(
        self,
        runtime: CoffeesSqlRuntime,
        *,
        flavor_conflict_retries: int = 1,
    ) -> None:
        self._runtime = runtime
        self._session_factory = runtime.session_factory
        self._flavor_conflict_retries = flavor_conflict_retries

    async def find(self, *, offset: int, limit: int | None) -> list[CoffeeRecord]:
        """Read one page of coffees ordered by primary key."""
        stmt = (
            select(Coffee)
            .options(selectinload(Coffee.flavors))
            .order_by(Coffee.id)
            .offset(offset)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        async with transactional_session(self._session_factory) as session:
            rows = (await session.scalars(stmt)).all()
            return [_to_coffee(row) for row in rows]

    async def find_by_id(self, *, coffee_id: int) -> CoffeeRecord | None:
        """Read one coffee by id with flavors attached."""
        async with transactional_session(self._session_factory) as session:
            row = await _load_coffee(session, coffee_id)
            if row is None:
                return None
            return _to_coffee(row)

    async def find_flavor_by_name(self, *, name: str) -> FlavorRecord | None:
        """Read one flavor by exact name."""
        async with transactional_session(self._session_factory) as session:
            row = (
                await session.scalars(select(Flavor).where(Flavor.name == name))
            ).one_or_none()
            if row is None:
                return None
            return FlavorRecord(id=row.id, name=row.name)

    async def save(self, *, draft: CoffeeDraft) -> CoffeeRecord | None:
        """Insert or replace one coffee, retrying on concurrent flavor inserts."""
        attempt = 0
        while True:
            try:
                async with transactional_session(self._session_factory) as session:
                    return await _save_coffee(session, draft)
            except IntegrityError as exc:
                if attempt >= self._flavor_conflict_retries:
                    raise
                attempt += 1
                _LOGGER.warning(
                    "Coffee save hit a flavor conflict; retrying: attempt=%s "
                    "exception_type=%s",
                    attempt,
                    type(exc).__name__,
                )

    async def delete(self, *, coffee_id: int) -> bool:
        """Delete one coffee and its flavor links."""
        async with transactional_session(self._session_factory) as session:
            row = await _load_coffee(session, coffee_id)
            if row is None:
                return False
            await session.delete(row)
            return True

    @asynccontextmanager
    async def run_in_transaction(self) -> AsyncIterator[CoffeeUnitOfWork]:
        """Open one query-runner transaction exposed as a unit of work."""
        async with runner_transaction(self._session_factory) as runner:
            yield SqlCoffeeUnitOfWork(runner)

    async def ping(self) -> bool:
        """Return whether the backing database answers a bounded probe."""
        return await self._runtime.is_healthy()


class SqlCoffeeUnitOfWork(CoffeeUnitOfWork):
    """Unit of work bound to one query runner's open transaction."""

    def __init__(self, runner: QueryRunner) -> None:
        self._runner = runner
        self._coffees: dict[int, Coffee] = {}

    async def get_coffee(self, *, coffee_id: int) -> CoffeeRecord | None:
        """Load one coffee into this transaction."""
        row = await _load_coffee(self._runner.session, coffee_id)
        if row is None:
            return None
        self._coffees[coffee_id] = row
        return _to_coffee(row)

    async def increment_recommendations(self, *, coffee_id: int) -> CoffeeRecord:
        """Increment the loaded coffee's counter and flush the update."""
        row = self._coffees.get(coffee_id)
        if row is None:
            row = await _load_coffee(self._runner.session, coffee_id)
            if row is None:
                raise CoffeeNotFoundError.for_id(coffee_id)
            self._coffees[coffee_id] = row
        row.recommendations = (row.recommendations or 0) + 1
        await self._runner.session.flush()
        return _to_coffee(row)

    async def add_event(self, *, draft: EventDraft) -> EventRecord:
        """Insert one audit event inside this transaction."""
        row = Event(
            name=draft.name,
            type=draft.type,
            payload=dict(draft.payload),
            created_at=datetime.now(UTC),
        )
        self._runner.session.add(row)
        await self._runner.session.flush()
        return _to_event(row)


async def _load_coffee(session: AsyncSession, coffee_id: int) -> Coffee | None:
    """Load one coffee row with its flavor collection populated."""
    return await session.get(
        Coffee,
        coffee_id,
        options=[selectinload(Coffee.flavors)],
    )


async def _save_coffee(session: AsyncSession, draft: CoffeeDraft) -> CoffeeRecord | None:
    """Write one coffee draft in the given session and flush it."""
    if draft.id is None:
        row = Coffee(
            name=draft.name,
            brand=draft.brand,
            description=draft.description,
            recommendations=0,
        )
        session.add(row)
    else:
        row = await _load_coffee(session, draft.id)
        if row is None:
            return None
        row.name = draft.name
        row.brand = draft.brand
        row.description = draft.description

    row.flavors = await _resolve_flavor_rows(session, draft.flavors)
    await session.flush()
    return _to_coffee(row)


async def _resolve_flavor_rows(
    session: AsyncSession, refs: Sequence[FlavorRef]
) -> list[Flavor]:
    """Re-resolve flavor names in-session, staging rows for missing names."""
    names = [ref.name for ref in refs]
    if not names:
        return []
    existing = (
        await session.scalars(select(Flavor).where(Flavor.name.in_(names)))
    ).all()
    by_name = {row.name: row for row in existing}
    resolved: list[Flavor] = []
    for name in names:
        row = by_name.get(name)
        if row is None:
            row = Flavor(name=name)
            session.add(row)
            by_name[name] = row
        resolved.append(row)
    return resolved


def _to_coffee(row: Coffee) -> CoffeeRecord:
    """Convert one ORM coffee into a typed domain record."""
    return CoffeeRecord(
        id=int(row.id),
        name=str(row.name),
        brand=str(row.brand),
        description=row.description,
        recommendations=int(row.recommendations or 0),
        flavors=[
            FlavorRecord(id=int(flavor.id), name=str(flavor.name))
            for flavor in sorted(row.flavors, key=lambda flavor: flavor.id)
        ],
    )


def _to_event(row: Event) -> EventRecord:
    """Convert one ORM event into a typed domain record."""
    return EventRecord(
        id=int(row.id),
        name=str(row.name),
        type=str(row.type),
        payload=dict(row.payload or {}),
        created_at=_row_dt(row.created_at),
    )


def _row_dt(value: datetime) -> datetime:
    """Return timezone-aware UTC datetimes for driver values."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)
