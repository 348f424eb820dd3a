"""Public shared error API for Coffees components."""

from . import codes
from .exceptions import (
    DomainConflictError,
    DomainDependencyError,
    DomainError,
    DomainInternalError,
    DomainNotFoundError,
    DomainValidationError,
    error_details,
)
from .factories import (
    conflict_error,
    dependency_error,
    internal_error,
    not_found_error,
    validation_error,
)
from .types import ErrorCategory, ErrorDetail

__all__ = [
    "DomainConflictError",
    "DomainDependencyError",
    "DomainError",
    "DomainInternalError",
    "DomainNotFoundError",
    "DomainValidationError",
    "ErrorCategory",
    "ErrorDetail",
    "codes",
    "conflict_error",
    "dependency_error",
    "error_details",
    "internal_error",
    "not_found_error",
    "validation_error",
]
