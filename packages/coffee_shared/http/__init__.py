"""Public shared HTTP API for Coffees packages."""

from .errors import (
    HttpError,
    HttpServerError,
    InvalidBodyError,
    InvalidJsonBodyError,
)
from .server import create_app, read_json_body, read_json_object, run_app

__all__ = [
    "HttpError",
    "HttpServerError",
    "InvalidBodyError",
    "InvalidJsonBodyError",
    "create_app",
    "read_json_body",
    "read_json_object",
    "run_app",
]
