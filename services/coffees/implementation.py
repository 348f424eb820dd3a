"""Concrete Coffees Service implementation."""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from packages.coffee_shared.errors import (
    DomainValidationError,
    codes,
    validation_error,
)
from packages.coffee_shared.logging import get_logger, public_api_logged
from services.coffees.config import (
    SERVICE_COMPONENT_ID,
    CoffeesServiceSettings,
)
from services.coffees.domain import (
    MAX_COFFEE_ID,
    RECOMMEND_EVENT_NAME,
    RECOMMEND_EVENT_TYPE,
    CoffeeDraft,
    CoffeeRecord,
    EventDraft,
    FlavorRef,
    HealthStatus,
)
from services.coffees.errors import CoffeeNotFoundError, RecommendationFailedError
from services.coffees.interfaces import CoffeeRepository
from services.coffees.service import CoffeesService
from services.coffees.validation import (
    CoffeeIdRequest,
    CreateCoffeeRequest,
    FlavorNameRequest,
    PaginationQuery,
    UpdateCoffeeRequest,
)

_LOGGER = get_logger(__name__)

_RequestT = TypeVar("_RequestT", bound=BaseModel)


class DefaultCoffeesService(CoffeesService):
    """Default Coffees Service implementation over a coffee repository."""

    def __init__(
        self,
        *,
        settings: CoffeesServiceSettings,
        repository: CoffeeRepository,
    ) -> None:
        self._settings = settings
        self._repository = repository

    @public_api_logged(logger=_LOGGER, component_id=SERVICE_COMPONENT_ID)
    async def find_all(
        self, *, offset: int | None = None, limit: int | None = None
    ) -> list[CoffeeRecord]:
        """Return one page of coffees ordered by id."""
        query = self._validate(
            PaginationQuery, {"offset": offset, "limit": limit}
        )
        resolved_limit = (
            query.limit if query.limit is not None else self._settings.default_page_limit
        )
        if resolved_limit is not None and resolved_limit > self._settings.max_page_limit:
            raise DomainValidationError(
                detail=validation_error(
                    f"limit must be <= {self._settings.max_page_limit}",
                    code=codes.INVALID_ARGUMENT,
                    metadata={"field": "limit"},
                )
            )
        return await self._repository.find(
            offset=query.offset or 0,
            limit=resolved_limit,
        )

    @public_api_logged(
        logger=_LOGGER,
        component_id=SERVICE_COMPONENT_ID,
        id_fields=("coffee_id",),
    )
    async def find_one(self, *, coffee_id: int | str) -> CoffeeRecord:
        """Return one coffee by id."""
        return await self._require_coffee(self._coffee_id(coffee_id))

    @public_api_logged(logger=_LOGGER, component_id=SERVICE_COMPONENT_ID)
    async def create(self, *, payload: dict[str, Any]) -> CoffeeRecord:
        """Create one coffee and any flavors it names that do not exist yet."""
        request = self._validate(CreateCoffeeRequest, payload)
        draft = CoffeeDraft(
            name=request.name,
            brand=request.brand,
            description=request.description,
            flavors=await self._resolve_flavors(request.flavors),
        )
        saved = await self._repository.save(draft=draft)
        if saved is None:
            raise RuntimeError("repository returned no record for a new coffee")
        return saved

    @public_api_logged(
        logger=_LOGGER,
        component_id=SERVICE_COMPONENT_ID,
        id_fields=("coffee_id",),
    )
    async def update(
        self, *, coffee_id: int | str, payload: dict[str, Any]
    ) -> CoffeeRecord:
        """Apply a partial update; fields absent from ``payload`` are kept."""
        resolved_id = self._coffee_id(coffee_id)
        request = self._validate(UpdateCoffeeRequest, payload)
        existing = await self._require_coffee(resolved_id)

        supplied = request.model_fields_set
        if "flavors" in supplied and request.flavors is not None:
            flavors = await self._resolve_flavors(request.flavors)
        else:
            flavors = [
                FlavorRef(id=flavor.id, name=flavor.name) for flavor in existing.flavors
            ]

        draft = CoffeeDraft(
            id=resolved_id,
            name=request.name if "name" in supplied else existing.name,
            brand=request.brand if "brand" in supplied else existing.brand,
            description=(
                request.description
                if "description" in supplied
                else existing.description
            ),
            flavors=flavors,
        )
        saved = await self._repository.save(draft=draft)
        if saved is None:
            raise CoffeeNotFoundError.for_id(resolved_id)
        return saved

    @public_api_logged(
        logger=_LOGGER,
        component_id=SERVICE_COMPONENT_ID,
        id_fields=("coffee_id",),
    )
    async def remove(self, *, coffee_id: int | str) -> CoffeeRecord:
        """Delete one coffee and return its last known state."""
        resolved_id = self._coffee_id(coffee_id)
        existing = await self._require_coffee(resolved_id)
        if not await self._repository.delete(coffee_id=resolved_id):
            raise CoffeeNotFoundError.for_id(resolved_id)
        return existing

    @public_api_logged(
        logger=_LOGGER,
        component_id=SERVICE_COMPONENT_ID,
        id_fields=("coffee_id",),
    )
    async def recommend(self, *, coffee_id: int | str) -> CoffeeRecord:
        """Increment recommendations and insert one event, all or nothing."""
        resolved_id = self._coffee_id(coffee_id)
        try:
            async with self._repository.run_in_transaction() as unit:
                if await unit.get_coffee(coffee_id=resolved_id) is None:
                    raise CoffeeNotFoundError.for_id(resolved_id)
                updated = await unit.increment_recommendations(coffee_id=resolved_id)
                await unit.add_event(
                    draft=EventDraft(
                        name=RECOMMEND_EVENT_NAME,
                        type=RECOMMEND_EVENT_TYPE,
                        payload={"coffeeId": resolved_id},
                    )
                )
        except CoffeeNotFoundError:
            raise
        except Exception as exc:
            _LOGGER.warning(
                "Recommendation rolled back: coffee_id=%s exception_type=%s",
                resolved_id,
                type(exc).__name__,
                exc_info=exc,
            )
            raise RecommendationFailedError.for_exception(resolved_id, exc) from exc
        return updated

    @public_api_logged(logger=_LOGGER, component_id=SERVICE_COMPONENT_ID)
    async def preload_flavor_by_name(self, *, name: str) -> FlavorRef:
        """Resolve one flavor by name without writing."""
        request = self._validate(FlavorNameRequest, {"name": name})
        return await self._preload_flavor(request.name)

    @public_api_logged(logger=_LOGGER, component_id=SERVICE_COMPONENT_ID)
    async def health(self) -> HealthStatus:
        """Return readiness based on owned SQL substrate availability."""
        substrate_ready = await self._repository.ping()
        return HealthStatus(
            service_ready=True,
            substrate_ready=substrate_ready,
            detail="ok" if substrate_ready else "sql substrate unavailable",
        )

    async def _require_coffee(self, coffee_id: int) -> CoffeeRecord:
        """Read one coffee or raise the canonical not-found error."""
        record = await self._repository.find_by_id(coffee_id=coffee_id)
        if record is None:
            raise CoffeeNotFoundError.for_id(coffee_id)
        return record

    async def _resolve_flavors(self, names: list[str]) -> list[FlavorRef]:
        """Resolve each normalized flavor name to an existing or staged ref."""
        return [await self._preload_flavor(name) for name in names]

    async def _preload_flavor(self, name: str) -> FlavorRef:
        """Return the stored flavor for ``name`` or a staged reference."""
        existing = await self._repository.find_flavor_by_name(name=name)
        if existing is None:
            return FlavorRef(name=name)
        return FlavorRef(id=existing.id, name=existing.name)

    def _coffee_id(self, coffee_id: int | str) -> int:
        """Coerce one coffee id; numeric ids outside the key range have no row."""
        resolved = self._validate(CoffeeIdRequest, {"coffee_id": coffee_id}).coffee_id
        if not 1 <= resolved <= MAX_COFFEE_ID:
            raise CoffeeNotFoundError.for_id(resolved)
        return resolved

    def _validate(
        self,
        model: type[_RequestT],
        payload: dict[str, Any] | None,
    ) -> _RequestT:
        """Validate one request payload, raising a domain validation error."""
        try:
            return model.model_validate(payload or {})
        except ValidationError as exc:
            details = tuple(
                validation_error(
                    f"request validation failed: {err['msg']}",
                    code=codes.INVALID_ARGUMENT,
                    metadata={"field": ".".join(str(p) for p in err["loc"])},
                )
                for err in exc.errors()
            )
            raise DomainValidationError(
                detail=details[0]
                if details
                else validation_error("request validation failed"),
                details=details,
            ) from exc
