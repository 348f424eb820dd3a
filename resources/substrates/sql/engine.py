"""Async SQLAlchemy engine construction for the shared SQL substrate."""

from __future__ import annotations

from typing import Any

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from resources.substrates.sql.config import SqlSettings


def create_sql_engine(config: SqlSettings) -> AsyncEngine:
    """Construct a configured async engine for the configured driver."""
    return create_async_engine(config.url, **_engine_kwargs(config))


def _engine_kwargs(config: SqlSettings) -> dict[str, Any]:
    """Build driver-appropriate engine keyword arguments."""
    kwargs: dict[str, Any] = {
        "echo": config.echo,
        "pool_pre_ping": config.pool_pre_ping,
    }
    if config.is_sqlite:
        # SQLite pools are driver-managed; sizing arguments do not apply.
        return kwargs
    kwargs.update(
        pool_size=config.pool_size,
        max_overflow=config.max_overflow,
        pool_timeout=config.pool_timeout_seconds,
        connect_args={"timeout": config.connect_timeout_seconds},
    )
    return kwargs
