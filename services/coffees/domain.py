"""Domain contracts for Coffees Service payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

RECOMMEND_EVENT_NAME = "recommend_coffee"
RECOMMEND_EVENT_TYPE = "coffee"

# Largest value the integer primary key columns can hold.
MAX_COFFEE_ID = 2**31 - 1


class FlavorRef(BaseModel):
    """Resolved flavor reference; ``id`` is ``None`` while only staged."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str
    id: int | None = None

    @property
    def is_staged(self) -> bool:
        """Return whether this flavor still needs to be persisted."""
        return self.id is None


class FlavorRecord(BaseModel):
    """Persisted flavor shared by many coffees."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: int
    name: str


class CoffeeRecord(BaseModel):
    """Persisted coffee including its attached flavors."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: int
    name: str
    brand: str
    description: str | None = None
    recommendations: int = 0
    flavors: list[FlavorRecord] = Field(default_factory=list)

    @property
    def flavor_names(self) -> set[str]:
        """Return the attached flavor names as an unordered set."""
        return {flavor.name for flavor in self.flavors}


class CoffeeDraft(BaseModel):
    """Full coffee state to persist; ``id`` is ``None`` for inserts."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str
    brand: str
    description: str | None = None
    flavors: list[FlavorRef] = Field(default_factory=list)
    id: int | None = None


class EventDraft(BaseModel):
    """Audit event to insert."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str
    type: str
    payload: dict[str, Any] = Field(default_factory=dict)


class EventRecord(BaseModel):
    """Persisted insert-only audit event."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: int
    name: str
    type: str
    payload: dict[str, Any]
    created_at: datetime


class HealthStatus(BaseModel):
    """Coffees Service and owned dependency readiness status payload."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    service_ready: bool
    substrate_ready: bool
    detail: str
