"""Typed domain exceptions carrying one shared ``ErrorDetail``."""

from __future__ import annotations

from dataclasses import dataclass

from .types import ErrorCategory, ErrorDetail


@dataclass(eq=False)
class DomainError(Exception):
    """Base error type for domain-level service failures."""

    detail: ErrorDetail

    def __str__(self) -> str:
        """Return the human-readable error message."""
        return self.detail.message

    @property
    def category(self) -> ErrorCategory:
        """Return the shared category of the carried error detail."""
        return self.detail.category


@dataclass(eq=False)
class DomainValidationError(DomainError):
    """Validation-category domain failure."""

    details: tuple[ErrorDetail, ...] = ()


@dataclass(eq=False)
class DomainNotFoundError(DomainError):
    """Not-found category domain failure."""


@dataclass(eq=False)
class DomainConflictError(DomainError):
    """Conflict-category domain failure."""


@dataclass(eq=False)
class DomainDependencyError(DomainError):
    """Dependency-category domain failure."""


@dataclass(eq=False)
class DomainInternalError(DomainError):
    """Internal-category domain failure."""


def error_details(exc: DomainError) -> tuple[ErrorDetail, ...]:
    """Return every error detail carried by one domain exception."""
    if isinstance(exc, DomainValidationError) and exc.details:
        return exc.details
    return (exc.detail,)
