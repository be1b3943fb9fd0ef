"""Claim and override gateways backed by SQLAlchemy sessions."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from claimstack.domain.cancellation import check_scope
from claimstack.domain.errors import DataAccessError
from claimstack.domain.model import Claim, ClaimLevel, ClaimsByLevel, Override

from .engine import session_factory as default_session_factory
from .mappings import (
    claim_table,
    market_override_table,
    product_ingredient_table,
    product_table,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy import Row
    from sqlalchemy.orm import Session, sessionmaker

    from claimstack.domain.cancellation import CancelScope
    from claimstack.domain.model import ProductId

log = logging.getLogger(__name__)


class SqlAlchemyClaimSource:
    """Reads product, ingredient and brand claims linked to one product."""

    def __init__(self, session_factory: sessionmaker[Session] | None = None) -> None:
        self._session_factory = session_factory or default_session_factory()

    def fetch_claims(
        self,
        product_id: ProductId,
        *,
        scope: CancelScope | None = None,
    ) -> ClaimsByLevel:
        try:
            with self._session_factory() as session:
                return self._fetch(session, product_id, scope=scope)
        except SQLAlchemyError as exc:
            raise DataAccessError(
                f"Failed to read claims for product {product_id}", product_id=product_id
            ) from exc
        except (LookupError, ValueError) as exc:
            # LookupError: stored enum value outside the mapped Enum
            raise DataAccessError(
                f"Malformed claim row for product {product_id}: {exc}", product_id=product_id
            ) from exc

    def _fetch(
        self,
        session: Session,
        product_id: ProductId,
        *,
        scope: CancelScope | None,
    ) -> ClaimsByLevel:
        check_scope(scope, "product claims query")
        product_rows = session.execute(
            select(claim_table)
            .where(claim_table.c.level == ClaimLevel.PRODUCT)
            .where(claim_table.c.product_id == product_id)
            .order_by(claim_table.c.id)
        ).all()

        check_scope(scope, "ingredient claims query")
        ingredient_ids = select(product_ingredient_table.c.ingredient_id).where(
            product_ingredient_table.c.product_id == product_id
        )
        ingredient_rows = session.execute(
            select(claim_table)
            .where(claim_table.c.level == ClaimLevel.INGREDIENT)
            .where(claim_table.c.ingredient_id.in_(ingredient_ids.scalar_subquery()))
            .order_by(claim_table.c.id)
        ).all()

        check_scope(scope, "brand claims query")
        brand_id = session.execute(
            select(product_table.c.master_brand_id).where(product_table.c.id == product_id)
        ).scalar_one_or_none()
        brand_rows: list[Row[tuple[object, ...]]] = []
        if brand_id is not None:
            brand_rows = list(
                session.execute(
                    select(claim_table)
                    .where(claim_table.c.level == ClaimLevel.BRAND)
                    .where(claim_table.c.master_brand_id == brand_id)
                    .order_by(claim_table.c.id)
                ).all()
            )

        claims = ClaimsByLevel(
            ingredient=_claims_from_rows(ingredient_rows, ClaimLevel.INGREDIENT),
            product=_claims_from_rows(product_rows, ClaimLevel.PRODUCT),
            brand=_claims_from_rows(brand_rows, ClaimLevel.BRAND),
        )
        log.debug(
            "Fetched claims for product=%s: ingredient=%d product=%d brand=%d",
            product_id,
            len(claims.ingredient),
            len(claims.product),
            len(claims.brand),
        )
        return claims


class SqlAlchemyOverrideSource:
    """Reads market overrides targeting one product."""

    def __init__(self, session_factory: sessionmaker[Session] | None = None) -> None:
        self._session_factory = session_factory or default_session_factory()

    def fetch_overrides(
        self,
        product_id: ProductId,
        *,
        scope: CancelScope | None = None,
    ) -> tuple[Override, ...]:
        try:
            with self._session_factory() as session:
                check_scope(scope, "market overrides query")
                rows = session.execute(
                    select(market_override_table)
                    .where(market_override_table.c.target_product_id == product_id)
                    .order_by(market_override_table.c.id)
                ).all()
                return tuple(_override_from_row(row) for row in rows)
        except SQLAlchemyError as exc:
            raise DataAccessError(
                f"Failed to read market overrides for product {product_id}",
                product_id=product_id,
            ) from exc
        except (LookupError, ValueError) as exc:
            # LookupError: stored enum value outside the mapped Enum
            raise DataAccessError(
                f"Malformed override row for product {product_id}: {exc}", product_id=product_id
            ) from exc


def _claims_from_rows(
    rows: Sequence[Row[tuple[object, ...]]],
    level: ClaimLevel,
) -> tuple[Claim, ...]:
    return tuple(_claim_from_row(row, level) for row in rows)


def _claim_from_row(row: Row[tuple[object, ...]], level: ClaimLevel) -> Claim:
    mapping = row._mapping  # noqa: SLF001
    source_entity_id = {
        ClaimLevel.PRODUCT: mapping["product_id"],
        ClaimLevel.INGREDIENT: mapping["ingredient_id"],
        ClaimLevel.BRAND: mapping["master_brand_id"],
    }[level]
    return Claim(
        id=str(mapping["id"]),
        text=str(mapping["claim_text"]),
        type=mapping["claim_type"],
        level=level,
        source_entity_id=None if source_entity_id is None else str(source_entity_id),
        country_code=str(mapping["country_code"]),
        priority=int(mapping["priority"] or 0),
        description=mapping["description"],
    )


def _override_from_row(row: Row[tuple[object, ...]]) -> Override:
    mapping = row._mapping  # noqa: SLF001
    return Override(
        id=str(mapping["id"]),
        claim_text=str(mapping["claim_text"]),
        scope=mapping["scope"],
        action=mapping["action"],
        country_code=mapping["country_code"],
        created_at=mapping["created_at"],
        created_by=mapping["created_by"],
    )


if TYPE_CHECKING:
    from typing import cast

    from claimstack.domain.ports import ClaimSource, OverrideSource

    _factory_stub = cast("sessionmaker[Session]", object())
    _claim_source_check: ClaimSource = SqlAlchemyClaimSource(_factory_stub)
    _override_source_check: OverrideSource = SqlAlchemyOverrideSource(_factory_stub)
