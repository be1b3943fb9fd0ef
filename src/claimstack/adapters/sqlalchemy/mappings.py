"""SQLAlchemy table metadata for upstream claim storage.

claimstack only reads these tables. They mirror the upstream schema closely
enough for the gateways' queries; ``create_all_tables`` exists for tests and
local fixture databases.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from enum import StrEnum
from typing import TYPE_CHECKING

from sqlalchemy import (
    Column,
    DateTime,
    Dialect,
    Enum,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    TypeDecorator,
)

from claimstack.domain.model import ClaimLevel, ClaimType, OverrideAction, OverrideScope

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


def _enum_values(enum_cls: type[StrEnum]) -> list[str]:
    return [member.value for member in enum_cls]


metadata = MetaData(
    naming_convention={
        "ix": "ix_%(column_0_label)s",
        "uq": "uq_%(table_name)s_%(column_0_label)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
        "pk": "pk_%(table_name)s",
    }
)

product_table = Table(
    "product",
    metadata,
    Column("id", String(128), primary_key=True),
    Column("name", String(255), nullable=False),
    Column("master_brand_id", String(128), nullable=True, index=True),
)

product_ingredient_table = Table(
    "product_ingredient",
    metadata,
    Column("product_id", String(128), ForeignKey("product.id"), primary_key=True),
    Column("ingredient_id", String(128), primary_key=True),
)

claim_table = Table(
    "claim",
    metadata,
    Column("id", String(128), primary_key=True),
    Column("claim_text", Text, nullable=False),
    Column(
        "claim_type",
        Enum(ClaimType, values_callable=_enum_values, native_enum=False, length=32),
        nullable=False,
    ),
    Column(
        "level",
        Enum(ClaimLevel, values_callable=_enum_values, native_enum=False, length=32),
        nullable=False,
    ),
    Column("product_id", String(128), nullable=True),
    Column("ingredient_id", String(128), nullable=True),
    Column("master_brand_id", String(128), nullable=True),
    Column("country_code", String(32), nullable=False),
    Column("priority", Integer, nullable=False, default=0),
    Column("description", Text, nullable=True),
    Index("ix_claim_level_product", "level", "product_id"),
    Index("ix_claim_level_ingredient", "level", "ingredient_id"),
    Index("ix_claim_level_brand", "level", "master_brand_id"),
)

market_override_table = Table(
    "market_override",
    metadata,
    Column("id", String(128), primary_key=True),
    Column("target_product_id", String(128), nullable=False, index=True),
    Column("claim_text", Text, nullable=False),
    Column(
        "scope",
        Enum(OverrideScope, values_callable=_enum_values, native_enum=False, length=16),
        nullable=False,
    ),
    Column("country_code", String(32), nullable=True),
    Column(
        "action",
        Enum(OverrideAction, values_callable=_enum_values, native_enum=False, length=16),
        nullable=False,
    ),
    Column("created_at", UTCDateTime(), nullable=True),
    Column("created_by", String(128), nullable=True),
)


def create_all_tables(engine: Engine) -> None:
    """Create the claim tables if missing (tests and local fixture databases)."""

    metadata.create_all(engine, checkfirst=True)
    log.debug("Ensured claim tables exist on %s", engine.url)
