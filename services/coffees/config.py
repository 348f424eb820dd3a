"""Pydantic settings for Coffees Service behavior."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator

from packages.coffee_shared.config import CoffeeSettings, resolve_component_settings

SERVICE_COMPONENT_ID = "service_coffees"


class CoffeesServiceSettings(BaseModel):
    """Coffees Service runtime behavior settings."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    default_page_limit: int | None = Field(default=None, gt=0)
    max_page_limit: int = Field(default=500, gt=0)
    flavor_conflict_retries: int = Field(default=1, ge=0)

    @model_validator(mode="after")
    def _validate_page_limits(self) -> "CoffeesServiceSettings":
        """Keep the default page size within the configured maximum."""
        if (
            self.default_page_limit is not None
            and self.default_page_limit > self.max_page_limit
        ):
            raise ValueError("default_page_limit must be <= max_page_limit")
        return self


def resolve_coffees_settings(settings: CoffeeSettings) -> CoffeesServiceSettings:
    """Resolve service settings from ``components.service.coffees``."""
    return resolve_component_settings(
        settings=settings,
        component_id=SERVICE_COMPONENT_ID,
        model=CoffeesServiceSettings,
    )
