"""SQLAlchemy adapter package for claim storage."""

from __future__ import annotations

from .engine import (
    StartupError,
    configured_engine,
    is_started,
    session_factory,
    shutdown,
    startup,
)
from .gateways import SqlAlchemyClaimSource, SqlAlchemyOverrideSource
from .mappings import (
    claim_table,
    create_all_tables,
    market_override_table,
    metadata,
    product_ingredient_table,
    product_table,
)

__all__ = [
    "SqlAlchemyClaimSource",
    "SqlAlchemyOverrideSource",
    "StartupError",
    "claim_table",
    "configured_engine",
    "create_all_tables",
    "is_started",
    "market_override_table",
    "metadata",
    "product_ingredient_table",
    "product_table",
    "session_factory",
    "shutdown",
    "startup",
]
