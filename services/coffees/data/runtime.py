"""Coffees-owned SQL runtime wiring."""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from packages.coffee_shared.config import CoffeeSettings
from resources.substrates.sql import (
    SqlSettings,
    create_session_factory,
    create_sql_engine,
    ping,
    resolve_sql_settings,
)
from services.coffees.data.schema import metadata


@dataclass(frozen=True)
class CoffeesSqlRuntime:
    """Concrete handle for Coffees Service SQL access."""

    engine: AsyncEngine
    session_factory: async_sessionmaker[AsyncSession]
    health_timeout_seconds: float = 1.0

    @classmethod
    def from_settings(cls, settings: CoffeeSettings) -> "CoffeesSqlRuntime":
        """Build the Coffees DB runtime from typed application settings."""
        return cls.from_sql_settings(resolve_sql_settings(settings))

    @classmethod
    def from_sql_settings(cls, config: SqlSettings) -> "CoffeesSqlRuntime":
        """Build the Coffees DB runtime from resolved substrate settings."""
        engine = create_sql_engine(config)
        return cls(
            engine=engine,
            session_factory=create_session_factory(engine),
            health_timeout_seconds=config.health_timeout_seconds,
        )

    async def create_schema(self) -> None:
        """Create any missing Coffees tables, indexes, and constraints."""
        async with self.engine.begin() as conn:
            await conn.run_sync(metadata.create_all)

    async def is_healthy(self) -> bool:
        """Return ``True`` when the backing database is reachable."""
        return await ping(self.engine, timeout_seconds=self.health_timeout_seconds)

    async def dispose(self) -> None:
        """Close every pooled connection held by the engine."""
        await self.engine.dispose()
