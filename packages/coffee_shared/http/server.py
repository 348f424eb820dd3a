"""Minimal FastAPI and uvicorn helpers for Coffees HTTP handling."""

from __future__ import annotations

import json
from typing import Any, Callable

import uvicorn
from fastapi import FastAPI, Request

from .errors import InvalidBodyError, InvalidJsonBodyError


def create_app(
    *,
    title: str = "coffees",
    version: str = "0.0.0",
    lifespan: Callable[[FastAPI], Any] | None = None,
) -> FastAPI:
    """Create a FastAPI app with project defaults."""
    return FastAPI(title=title, version=version, lifespan=lifespan)


def run_app(
    app: FastAPI,
    *,
    host: str = "127.0.0.1",
    port: int = 8000,
    log_level: str = "info",
) -> None:
    """Run one FastAPI app through uvicorn."""
    uvicorn.run(app, host=host, port=port, log_level=log_level)


async def read_json_body(request: Request) -> Any:
    """Read and decode one request body as JSON."""
    body = await request.body()
    if body.strip() == b"":
        return {}
    try:
        return json.loads(body)
    except UnicodeDecodeError as exc:
        raise InvalidBodyError(message="Body is not valid UTF-8") from exc
    except json.JSONDecodeError as exc:
        raise InvalidJsonBodyError(message="Body is not valid JSON") from exc


async def read_json_object(request: Request) -> dict[str, Any]:
    """Read one JSON body and require a top-level object."""
    payload = await read_json_body(request)
    if not isinstance(payload, dict):
        raise InvalidBodyError(message="Body must be a JSON object")
    return payload
