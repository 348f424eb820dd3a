"""Session lifecycle helpers for shared SQL substrate access."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from packages.coffee_shared.logging import get_logger

_LOGGER = get_logger(__name__)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create an async session factory bound to the provided engine."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False,
    )


@asynccontextmanager
async def transactional_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncIterator[AsyncSession]:
    """Yield a session and enforce commit/rollback semantics."""
    session = session_factory()
    try:
        yield session
        await session.commit()
    except Exception:
        await session.rollback()
        raise
    finally:
        await session.close()


class QueryRunner:
    """Explicit unit-of-work handle over one dedicated session.

    Lifecycle: ``connect`` -> ``start_transaction`` -> ``commit_transaction``
    or ``rollback_transaction`` -> ``release``. ``release`` is safe to call
    in any state and must always run.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory
        self._session: AsyncSession | None = None

    @property
    def session(self) -> AsyncSession:
        """Return the connected session."""
        if self._session is None:
            raise RuntimeError("query runner is not connected")
        return self._session

    @property
    def is_transaction_active(self) -> bool:
        """Return whether a transaction is currently open."""
        return self._session is not None and self._session.in_transaction()

    async def connect(self) -> AsyncSession:
        """Acquire a dedicated session for this runner."""
        if self._session is None:
            self._session = self._session_factory()
        return self._session

    async def start_transaction(self) -> None:
        """Begin one transaction on the connected session."""
        if self.is_transaction_active:
            raise RuntimeError("transaction already started")
        await self.session.begin()

    async def commit_transaction(self) -> None:
        """Flush pending work and commit the open transaction."""
        if not self.is_transaction_active:
            raise RuntimeError("no active transaction to commit")
        await self.session.commit()

    async def rollback_transaction(self) -> None:
        """Roll back the open transaction, discarding pending work."""
        if not self.is_transaction_active:
            return
        await self.session.rollback()

    async def release(self) -> None:
        """Close the session and return its connection to the pool."""
        if self._session is None:
            return
        session, self._session = self._session, None
        await session.close()


@asynccontextmanager
async def runner_transaction(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncIterator[QueryRunner]:
    """Run one block inside a query runner transaction.

    Commits when the block succeeds. Rolls back and re-raises when it fails.
    The runner is always released.
    """
    runner = QueryRunner(session_factory)
    await runner.connect()
    try:
        await runner.start_transaction()
        try:
            yield runner
            await runner.commit_transaction()
        except Exception as exc:
            _LOGGER.debug(
                "Rolling back transaction: exception_type=%s", type(exc).__name__
            )
            await runner.rollback_transaction()
            raise
    finally:
        await runner.release()
