"""Tests for SQL substrate readiness probes."""

from __future__ import annotations

import asyncio

import pytest

from resources.substrates.sql.health import ping


class _FakeConnection:
    """Async context-managed connection double capturing executed SQL."""

    def __init__(self, *, delay: float = 0.0, error: Exception | None = None) -> None:
        self.calls: list[str] = []
        self._delay = delay
        self._error = error

    async def __aenter__(self) -> "_FakeConnection":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        del exc_type, exc, tb

    async def execute(self, statement) -> None:
        self.calls.append(str(statement))
        if self._delay:
            await asyncio.sleep(self._delay)
        if self._error is not None:
            raise self._error


class _FakeEngine:
    """Minimal async engine double exposing ``connect``."""

    def __init__(self, conn: _FakeConnection) -> None:
        self._conn = conn

    def connect(self) -> _FakeConnection:
        return self._conn


@pytest.mark.asyncio
async def test_ping_runs_select_one() -> None:
    """Ping should succeed after running a trivial query."""
    conn = _FakeConnection()

    assert await ping(_FakeEngine(conn), timeout_seconds=1.0) is True
    assert conn.calls == ["SELECT 1"]


@pytest.mark.asyncio
async def test_ping_returns_false_when_query_fails() -> None:
    """Ping should degrade cleanly on probe exceptions."""
    conn = _FakeConnection(error=RuntimeError("boom"))

    assert await ping(_FakeEngine(conn), timeout_seconds=1.0) is False


@pytest.mark.asyncio
async def test_ping_returns_false_when_probe_times_out() -> None:
    """Slow probes should be bounded by the configured timeout."""
    conn = _FakeConnection(delay=0.5)

    assert await ping(_FakeEngine(conn), timeout_seconds=0.01) is False
