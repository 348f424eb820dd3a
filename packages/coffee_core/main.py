"""Process entrypoint for the Coffees HTTP runtime."""

from __future__ import annotations

import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import APIRouter, FastAPI

from packages.coffee_shared.config import CoffeeSettings, load_settings
from packages.coffee_shared.http import create_app, run_app
from packages.coffee_shared.logging import configure_logging, get_logger
from services.coffees.api import register_routes
from services.coffees.data import CoffeesSqlRuntime
from services.coffees.service import CoffeesService, build_coffees_service

_LOGGER = get_logger(__name__)

CONFIG_FILE_ENV = "COFFEES_CONFIG_FILE"


def create_coffees_app(
    settings: CoffeeSettings,
    *,
    service: CoffeesService | None = None,
    runtime: CoffeesSqlRuntime | None = None,
) -> FastAPI:
    """Build the Coffees FastAPI app with routes and SQL lifecycle hooks."""
    owned_runtime = runtime
    if service is None:
        owned_runtime = runtime or CoffeesSqlRuntime.from_settings(settings)
        service = build_coffees_service(settings=settings, runtime=owned_runtime)

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        if owned_runtime is not None and settings.http.create_schema_on_startup:
            await owned_runtime.create_schema()
            _LOGGER.info("coffees schema ensured")
        try:
            yield
        finally:
            if owned_runtime is not None:
                await owned_runtime.dispose()
                _LOGGER.info("coffees SQL engine disposed")

    app = create_app(title="Coffees API", lifespan=lifespan)
    router = APIRouter()
    register_routes(router=router, service=service)
    app.include_router(router)
    return app


def main() -> None:
    """Load settings, configure logging, and serve the Coffees HTTP API."""
    config_path = os.getenv(CONFIG_FILE_ENV, "").strip()
    settings = load_settings(config_path=Path(config_path) if config_path else None)
    configure_logging(
        level=settings.logging.level,
        json_output=settings.logging.json_output,
        service=settings.logging.service,
        environment=settings.logging.environment,
    )
    app = create_coffees_app(settings)
    _LOGGER.info(
        "coffees HTTP runtime starting",
        extra={"host": settings.http.host, "port": settings.http.port},
    )
    run_app(
        app,
        host=settings.http.host,
        port=settings.http.port,
        log_level=settings.logging.level.lower(),
    )


if __name__ == "__main__":
    main()
