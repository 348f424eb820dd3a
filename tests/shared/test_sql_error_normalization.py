"""Tests for SQL exception normalization into shared error taxonomy."""

from __future__ import annotations

from sqlalchemy.exc import IntegrityError, OperationalError

from packages.coffee_shared.errors import codes
from resources.substrates.sql.errors import is_sql_error, normalize_sql_error


def test_normalize_unique_violation_maps_to_conflict() -> None:
    """Unique key failures should map to conflict/already-exists semantics."""

    class UniqueViolation(Exception):
        """Synthetic unique-violation exception."""

    error = normalize_sql_error(
        UniqueViolation("duplicate key value violates unique constraint")
    )
    assert error.category.value == "conflict"
    assert error.code == codes.ALREADY_EXISTS


def test_normalize_sqlite_unique_failure_maps_to_conflict() -> None:
    """SQLite unique failures wrapped by SQLAlchemy should also conflict."""
    exc = IntegrityError(
        "INSERT INTO flavors", {}, Exception("UNIQUE constraint failed: flavors.name")
    )

    error = normalize_sql_error(exc)

    assert error.category.value == "conflict"
    assert error.metadata == {"exception_type": "IntegrityError"}


def test_normalize_operational_errors_map_to_retryable_dependency() -> None:
    """Operational/timeout failures should be retryable dependency errors."""
    error = normalize_sql_error(
        OperationalError("SELECT 1", {}, Exception("connection refused"))
    )
    assert error.category.value == "dependency"
    assert error.code == codes.DEPENDENCY_UNAVAILABLE
    assert error.retryable is True


def test_normalize_programming_errors_map_to_non_retryable_dependency() -> None:
    """Interface/programming failures should be non-retryable dependency errors."""

    class ProgrammingError(Exception):
        """Synthetic programming exception."""

    error = normalize_sql_error(ProgrammingError("bad SQL"))
    assert error.category.value == "dependency"
    assert error.retryable is False


def test_normalize_unknown_exception_maps_to_internal() -> None:
    """Unexpected failures should map to internal/unexpected semantics."""
    error = normalize_sql_error(RuntimeError("boom"))
    assert error.category.value == "internal"
    assert error.code == codes.UNEXPECTED_EXCEPTION


def test_is_sql_error_matches_driver_stack_only() -> None:
    """Only exceptions from the SQL stack should be treated as SQL errors."""
    assert is_sql_error(OperationalError("SELECT 1", {}, Exception("x"))) is True
    assert is_sql_error(RuntimeError("boom")) is False
