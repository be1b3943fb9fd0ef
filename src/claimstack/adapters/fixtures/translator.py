"""Translate validated export payloads into domain rows."""

from __future__ import annotations

from typing import TYPE_CHECKING

from claimstack.domain.model import Claim, ClaimLevel, ClaimsByLevel, Override

if TYPE_CHECKING:
    from .schema import ClaimsExport, ExportClaim, ExportOverride


def claims_for_product(export: ClaimsExport, product_id: str) -> ClaimsByLevel:
    """Collect the claims linked to ``product_id`` at each level.

    Ingredient and brand claims are reached through the product entry; a product
    missing from ``products`` only contributes its own product-level claims.
    """

    product = export.product(product_id)
    ingredient_ids = set(product.ingredient_ids) if product else set()
    brand_id = product.master_brand_id if product else None

    by_level: dict[ClaimLevel, list[Claim]] = {level: [] for level in ClaimLevel}
    for raw in export.claims:
        if raw.level is ClaimLevel.PRODUCT and raw.product_id == product_id:
            by_level[ClaimLevel.PRODUCT].append(translate_claim(raw))
        elif raw.level is ClaimLevel.INGREDIENT and raw.ingredient_id in ingredient_ids:
            by_level[ClaimLevel.INGREDIENT].append(translate_claim(raw))
        elif (
            raw.level is ClaimLevel.BRAND
            and brand_id is not None
            and raw.master_brand_id == brand_id
        ):
            by_level[ClaimLevel.BRAND].append(translate_claim(raw))

    return ClaimsByLevel(
        ingredient=tuple(by_level[ClaimLevel.INGREDIENT]),
        product=tuple(by_level[ClaimLevel.PRODUCT]),
        brand=tuple(by_level[ClaimLevel.BRAND]),
    )


def overrides_for_product(export: ClaimsExport, product_id: str) -> tuple[Override, ...]:
    return tuple(
        translate_override(raw) for raw in export.overrides if raw.target_product_id == product_id
    )


def translate_claim(raw: ExportClaim) -> Claim:
    source_entity_id = {
        ClaimLevel.PRODUCT: raw.product_id,
        ClaimLevel.INGREDIENT: raw.ingredient_id,
        ClaimLevel.BRAND: raw.master_brand_id,
    }[raw.level]
    return Claim(
        id=raw.id,
        text=raw.claim_text,
        type=raw.claim_type,
        level=raw.level,
        source_entity_id=source_entity_id,
        country_code=raw.country_code,
        priority=raw.priority,
        description=raw.description,
    )


def translate_override(raw: ExportOverride) -> Override:
    return Override(
        id=raw.id,
        claim_text=raw.claim_text,
        scope=raw.scope,
        action=raw.action,
        country_code=raw.country_code,
        created_at=raw.created_at,
        created_by=raw.created_by,
    )
