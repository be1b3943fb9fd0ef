from __future__ import annotations

import json
import os
from datetime import UTC, datetime
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine, insert
from sqlalchemy.engine import Engine  # noqa: TC002
from sqlalchemy.orm import Session, sessionmaker

from claimstack import app
from claimstack.adapters.sqlalchemy import (
    claim_table,
    create_all_tables,
    market_override_table,
    product_ingredient_table,
    product_table,
    shutdown,
)

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path


_DEFAULT_ENTITY = {"product": "p-1", "ingredient": "i-1", "brand": "b-1"}


def _claim_row(  # noqa: PLR0913
    claim_id: str,
    text: str,
    claim_type: str,
    level: str,
    *,
    entity: str | None = None,
    country: str = "__GLOBAL__",
    priority: int = 0,
) -> dict[str, object]:
    entity_id = entity or _DEFAULT_ENTITY[level]
    return {
        "id": claim_id,
        "claim_text": text,
        "claim_type": claim_type,
        "level": level,
        "product_id": entity_id if level == "product" else None,
        "ingredient_id": entity_id if level == "ingredient" else None,
        "master_brand_id": entity_id if level == "brand" else None,
        "country_code": country,
        "priority": priority,
        "description": None,
    }


@pytest.fixture(autouse=True)
def _reset_process_state() -> Iterator[None]:
    yield
    app.reset()
    shutdown()


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    create_all_tables(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_session_factory(sqlite_engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=sqlite_engine, future=True)


@pytest.fixture
def seeded_engine(sqlite_engine: Engine) -> Engine:
    """Serum p-1 (brand b-1, ingredient i-1) plus an unrelated product p-2."""

    with sqlite_engine.begin() as connection:
        connection.execute(
            insert(product_table),
            [
                {"id": "p-1", "name": "Hydra Serum", "master_brand_id": "b-1"},
                {"id": "p-2", "name": "Night Cream", "master_brand_id": "b-2"},
            ],
        )
        connection.execute(
            insert(product_ingredient_table),
            [
                {"product_id": "p-1", "ingredient_id": "i-1"},
                {"product_id": "p-2", "ingredient_id": "i-2"},
            ],
        )
        connection.execute(
            insert(claim_table),
            [
                _claim_row("c-1", "Hydrates for 24 hours", "allowed", "product", priority=5),
                _claim_row("c-2", "Hydrates for 24 hours", "disallowed", "product", country="US"),
                _claim_row("c-3", "Contains hyaluronic acid", "allowed", "ingredient"),
                _claim_row("c-4", "Cruelty free", "allowed", "brand"),
                _claim_row("c-5", "Reduces wrinkles", "allowed", "product", entity="p-2"),
                _claim_row("c-6", "Vegan formula", "allowed", "ingredient", entity="i-2"),
            ],
        )
        connection.execute(
            insert(market_override_table),
            [
                {
                    "id": "o-1",
                    "target_product_id": "p-1",
                    "claim_text": "cruelty free",
                    "scope": "country",
                    "country_code": "FR",
                    "action": "block",
                    "created_at": datetime(2025, 3, 1, 12, 0, tzinfo=UTC),
                    "created_by": "legal@example.com",
                },
                {
                    "id": "o-2",
                    "target_product_id": "p-2",
                    "claim_text": "Reduces wrinkles",
                    "scope": "global",
                    "country_code": None,
                    "action": "block",
                    "created_at": None,
                    "created_by": None,
                },
            ],
        )
    return sqlite_engine


@pytest.fixture
def export_payload() -> dict[str, object]:
    return {
        "products": [
            {
                "id": "p-1",
                "name": "Hydra Serum",
                "brand_name": "Acme",
                "master_brand_id": "b-1",
                "ingredient_ids": ["i-1"],
            }
        ],
        "claims": [
            {
                "id": "c-1",
                "claim_text": "Hydrates for 24 hours",
                "claim_type": "allowed",
                "level": "product",
                "product_id": "p-1",
                "country_code": "__GLOBAL__",
                "priority": 5,
            },
            {
                "id": "c-2",
                "claim_text": "Contains hyaluronic acid",
                "claim_type": "allowed",
                "level": "ingredient",
                "ingredient_id": "i-1",
                "country_code": "__GLOBAL__",
            },
            {
                "id": "c-3",
                "claim_text": "Cruelty free",
                "claim_type": "allowed",
                "level": "brand",
                "master_brand_id": "b-1",
                "country_code": "__GLOBAL__",
            },
            {
                "id": "c-4",
                "claim_text": "Dermatologist tested",
                "claim_type": "allowed",
                "level": "product",
                "product_id": "p-other",
                "country_code": "__GLOBAL__",
            },
        ],
        "overrides": [
            {
                "id": "o-1",
                "target_product_id": "p-1",
                "claim_text": "Cruelty free",
                "scope": "country",
                "country_code": "FR",
                "action": "block",
                "created_at": "2025-03-01T12:00:00Z",
            }
        ],
    }


@pytest.fixture
def export_file(tmp_path: Path, export_payload: dict[str, object]) -> Path:
    path = tmp_path / "claims.json"
    path.write_text(json.dumps(export_payload), encoding="utf-8")
    return path
