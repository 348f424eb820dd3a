"""HTTP adapter routes for Coffees Service."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence
from http import HTTPStatus
from typing import Any

from fastapi import APIRouter, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from packages.coffee_shared.errors import (
    DomainError,
    ErrorCategory,
    ErrorDetail,
    codes,
    error_details,
    validation_error,
)
from packages.coffee_shared.http import HttpServerError, read_json_object
from packages.coffee_shared.logging import get_logger
from resources.substrates.sql import is_sql_error, normalize_sql_error
from services.coffees.service import CoffeesService

_LOGGER = get_logger(__name__)


def register_routes(*, router: APIRouter, service: CoffeesService) -> None:
    """Register Coffees HTTP routes on one router."""

    @router.get("/coffees")
    async def list_coffees(
        offset: str | None = None, limit: str | None = None
    ) -> JSONResponse:
        return await _respond(lambda: service.find_all(offset=offset, limit=limit))

    @router.get("/coffees/{coffee_id}")
    async def get_coffee(coffee_id: str) -> JSONResponse:
        return await _respond(lambda: service.find_one(coffee_id=coffee_id))

    @router.post("/coffees")
    async def create_coffee(request: Request) -> JSONResponse:
        async def _call() -> Any:
            payload = await read_json_object(request)
            return await service.create(payload=payload)

        return await _respond(_call, status_code=HTTPStatus.CREATED)

    @router.patch("/coffees/{coffee_id}")
    async def update_coffee(coffee_id: str, request: Request) -> JSONResponse:
        async def _call() -> Any:
            payload = await read_json_object(request)
            return await service.update(coffee_id=coffee_id, payload=payload)

        return await _respond(_call)

    @router.delete("/coffees/{coffee_id}")
    async def remove_coffee(coffee_id: str) -> JSONResponse:
        return await _respond(lambda: service.remove(coffee_id=coffee_id))

    @router.post("/coffees/{coffee_id}/recommend")
    async def recommend_coffee(coffee_id: str) -> JSONResponse:
        return await _respond(lambda: service.recommend(coffee_id=coffee_id))

    @router.get("/health")
    async def health() -> JSONResponse:
        try:
            status = await service.health()
        except Exception as exc:
            failure = _failure_response(exc)
            if failure is None:
                raise
            return failure
        return JSONResponse(
            status_code=(
                HTTPStatus.OK
                if status.substrate_ready
                else HTTPStatus.SERVICE_UNAVAILABLE
            ),
            content=jsonable_encoder(status),
        )


async def _respond(
    call: Callable[[], Awaitable[Any]],
    *,
    status_code: int = HTTPStatus.OK,
) -> JSONResponse:
    """Run one service call and render its result or structured errors."""
    try:
        result = await call()
    except Exception as exc:
        failure = _failure_response(exc)
        if failure is None:
            raise
        return failure
    return JSONResponse(status_code=status_code, content=jsonable_encoder(result))


def _failure_response(exc: Exception) -> JSONResponse | None:
    """Render one handled failure; ``None`` means the caller should re-raise."""
    if isinstance(exc, DomainError):
        return _error_response(error_details(exc))
    if isinstance(exc, HttpServerError):
        return _error_response(
            (validation_error(str(exc), code=codes.INVALID_ARGUMENT),)
        )
    if not is_sql_error(exc):
        return None
    detail = normalize_sql_error(exc)
    _LOGGER.warning(
        "Coffees request failed in SQL layer: code=%s exception_type=%s",
        detail.code,
        type(exc).__name__,
        exc_info=exc,
    )
    return _error_response((detail,))


def _error_response(errors: Sequence[ErrorDetail]) -> JSONResponse:
    """Render one structured failure body with a category-derived status."""
    status = _error_status(errors[0].category) if errors else 500
    return JSONResponse(
        status_code=status,
        content={
            "ok": False,
            "errors": [
                {
                    "code": error.code,
                    "category": error.category.value,
                    "message": error.message,
                }
                for error in errors
            ],
        },
    )


def _error_status(category: ErrorCategory) -> int:
    """Map structured error category to HTTP status code."""
    if category == ErrorCategory.VALIDATION:
        return HTTPStatus.BAD_REQUEST
    if category == ErrorCategory.NOT_FOUND:
        return HTTPStatus.NOT_FOUND
    if category == ErrorCategory.CONFLICT:
        return HTTPStatus.CONFLICT
    if category == ErrorCategory.DEPENDENCY:
        return HTTPStatus.SERVICE_UNAVAILABLE
    return HTTPStatus.INTERNAL_SERVER_ERROR
