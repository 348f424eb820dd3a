"""Public API for Coffees HTTP runtime startup."""

from packages.coffee_core.main import create_coffees_app, main

__all__ = [
    "create_coffees_app",
    "main",
]
