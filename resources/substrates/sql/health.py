"""Health-check utilities for the shared SQL substrate."""

from __future__ import annotations

import asyncio

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine


async def ping(engine: AsyncEngine, *, timeout_seconds: float = 1.0) -> bool:
    """Return True when the database can answer a trivial query quickly."""
    try:
        await asyncio.wait_for(_select_one(engine), timeout=timeout_seconds)
        return True
    except Exception:  # noqa: BLE001
        return False


async def _select_one(engine: AsyncEngine) -> None:
    """Run ``SELECT 1`` on a fresh pooled connection."""
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
