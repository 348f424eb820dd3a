"""Shared SQL substrate primitives for Coffees services."""

from resources.substrates.sql.config import (
    RESOURCE_COMPONENT_ID,
    SqlSettings,
    resolve_sql_settings,
)
from resources.substrates.sql.engine import create_sql_engine
from resources.substrates.sql.errors import is_sql_error, normalize_sql_error
from resources.substrates.sql.health import ping
from resources.substrates.sql.session import (
    QueryRunner,
    create_session_factory,
    runner_transaction,
    transactional_session,
)

__all__ = [
    "RESOURCE_COMPONENT_ID",
    "QueryRunner",
    "SqlSettings",
    "create_session_factory",
    "create_sql_engine",
    "is_sql_error",
    "normalize_sql_error",
    "ping",
    "resolve_sql_settings",
    "runner_transaction",
    "transactional_session",
]
