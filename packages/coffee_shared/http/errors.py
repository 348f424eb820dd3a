"""Typed errors for shared HTTP server helpers."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(eq=False)
class HttpError(Exception):
    """Base error type for shared HTTP helper failures."""

    message: str

    def __str__(self) -> str:
        """Return the human-readable error message."""
        return self.message


@dataclass(eq=False)
class HttpServerError(HttpError):
    """Base error type for inbound HTTP parsing/validation helpers."""


@dataclass(eq=False)
class InvalidBodyError(HttpServerError):
    """Inbound HTTP body is invalid for the expected shape."""


@dataclass(eq=False)
class InvalidJsonBodyError(InvalidBodyError):
    """Inbound HTTP body is not valid JSON."""
