"""Pydantic request-validation models for Coffees Service API."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator


class _ValidationModel(BaseModel):
    """Base request model with strict shape semantics."""

    model_config = ConfigDict(frozen=True, extra="forbid")


def _require_text(value: str, info: ValidationInfo) -> str:
    """Strip one text field and require it to be non-empty."""
    normalized = value.strip()
    if normalized == "":
        raise ValueError(f"{info.field_name} is required")
    return normalized


def _normalize_flavor_names(values: list[str]) -> list[str]:
    """Strip, require, and de-duplicate flavor names preserving order."""
    names: list[str] = []
    for raw in values:
        name = raw.strip()
        if name == "":
            raise ValueError("flavor names must be non-empty")
        if name not in names:
            names.append(name)
    return names


class CreateCoffeeRequest(_ValidationModel):
    """Validated create-coffee request shape."""

    name: str
    brand: str
    flavors: list[str] = Field(default_factory=list)
    description: str | None = None

    @field_validator("name", "brand")
    @classmethod
    def _validate_text(cls, value: str, info: ValidationInfo) -> str:
        """Require non-empty descriptive fields."""
        return _require_text(value, info)

    @field_validator("flavors")
    @classmethod
    def _validate_flavors(cls, value: list[str]) -> list[str]:
        """Normalize flavor names."""
        return _normalize_flavor_names(value)


class UpdateCoffeeRequest(_ValidationModel):
    """Validated partial update; only fields present in input are applied."""

    name: str | None = None
    brand: str | None = None
    flavors: list[str] | None = None
    description: str | None = None

    @field_validator("name", "brand")
    @classmethod
    def _validate_text(cls, value: str | None, info: ValidationInfo) -> str:
        """Reject clearing required descriptive fields."""
        if value is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return _require_text(value, info)

    @field_validator("flavors")
    @classmethod
    def _validate_flavors(cls, value: list[str] | None) -> list[str] | None:
        """Normalize flavor names when supplied."""
        if value is None:
            return None
        return _normalize_flavor_names(value)


class PaginationQuery(_ValidationModel):
    """Offset/limit window for listing coffees."""

    offset: int | None = Field(default=None, ge=0)
    limit: int | None = Field(default=None, ge=1)


class CoffeeIdRequest(_ValidationModel):
    """Validated request shape for operations keyed by coffee id."""

    coffee_id: int


class FlavorNameRequest(_ValidationModel):
    """Validated request shape for flavor lookups by name."""

    name: str

    @field_validator("name")
    @classmethod
    def _validate_name(cls, value: str, info: ValidationInfo) -> str:
        """Require a non-empty flavor name."""
        return _require_text(value, info)
