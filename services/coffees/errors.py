"""Coffees Service error codes and typed domain exceptions."""

from __future__ import annotations

from dataclasses import dataclass

from packages.coffee_shared.errors import (
    DomainInternalError,
    DomainNotFoundError,
    internal_error,
    not_found_error,
)

COFFEE_NOT_FOUND = "COFFEE_NOT_FOUND"
RECOMMENDATION_FAILED = "RECOMMENDATION_FAILED"


@dataclass(eq=False)
class CoffeeNotFoundError(DomainNotFoundError):
    """No coffee exists for the requested id."""

    coffee_id: int = 0

    @classmethod
    def for_id(cls, coffee_id: int) -> "CoffeeNotFoundError":
        """Build the canonical not-found error for one coffee id."""
        return cls(
            detail=not_found_error(
                f"coffee {coffee_id} not found",
                code=COFFEE_NOT_FOUND,
                metadata={"coffee_id": str(coffee_id)},
            ),
            coffee_id=coffee_id,
        )


@dataclass(eq=False)
class RecommendationFailedError(DomainInternalError):
    """Recommendation transaction failed and was rolled back."""

    coffee_id: int = 0

    @classmethod
    def for_exception(cls, coffee_id: int, exc: Exception) -> "RecommendationFailedError":
        """Build the recommendation failure raised after a rollback."""
        return cls(
            detail=internal_error(
                f"recommendation for coffee {coffee_id} failed and was rolled back",
                code=RECOMMENDATION_FAILED,
                metadata={
                    "coffee_id": str(coffee_id),
                    "exception_type": type(exc).__name__,
                },
            ),
            coffee_id=coffee_id,
        )
