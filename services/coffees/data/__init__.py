"""Coffees Service data-layer exports."""

from services.coffees.data.repository import SqlCoffeeRepository, SqlCoffeeUnitOfWork
from services.coffees.data.runtime import CoffeesSqlRuntime

__all__ = [
    "CoffeesSqlRuntime",
    "SqlCoffeeRepository",
    "SqlCoffeeUnitOfWork",
]
