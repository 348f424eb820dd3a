"""SQLAlchemy exception normalization helpers."""

from __future__ import annotations

from packages.coffee_shared.errors import (
    ErrorDetail,
    codes,
    conflict_error,
    dependency_error,
    internal_error,
)

_UNIQUE_MARKERS = (
    "duplicate key value",
    "unique constraint failed",
    "uniqueviolation",
)


def normalize_sql_error(exc: Exception) -> ErrorDetail:
    """Map low-level DB exceptions into shared structured error semantics."""
    exc_type_name = type(exc).__name__
    message = str(exc)
    lowered = message.lower()
    metadata = {"exception_type": exc_type_name}

    if "UniqueViolation" in exc_type_name or any(
        marker in lowered for marker in _UNIQUE_MARKERS
    ):
        return conflict_error(
            "resource already exists",
            code=codes.ALREADY_EXISTS,
            metadata=metadata,
        )

    if "OperationalError" in exc_type_name or "timeout" in lowered:
        return dependency_error(
            "database unavailable",
            code=codes.DEPENDENCY_UNAVAILABLE,
            retryable=True,
            metadata=metadata,
        )

    if "InterfaceError" in exc_type_name or "ProgrammingError" in exc_type_name:
        return dependency_error(
            "database request failed",
            code=codes.DEPENDENCY_FAILURE,
            retryable=False,
            metadata=metadata,
        )

    return internal_error(
        "unexpected database failure",
        code=codes.UNEXPECTED_EXCEPTION,
        metadata=metadata,
    )


def is_sql_error(exc: Exception) -> bool:
    """Return whether one exception appears to originate from the SQL stack."""
    module = type(exc).__module__
    return module.startswith(("sqlalchemy", "asyncpg", "sqlite3", "aiosqlite"))
