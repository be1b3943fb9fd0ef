"""Public domain model surface."""

from __future__ import annotations

from claimstack.domain.model.claims import Claim, ClaimsByLevel, EffectiveClaim, Override
from claimstack.domain.model.enums import (
    LEVEL_DISPLAY_ORDER,
    ClaimLevel,
    ClaimType,
    OverrideAction,
    OverrideScope,
)
from claimstack.domain.model.markets import (
    ALL_COUNTRIES_CODE,
    GLOBAL_COUNTRY_CODE,
    CountryCode,
    ProductId,
    is_global,
    validate_market,
    validate_product_id,
)

__all__ = [  # noqa: RUF022
    # rows
    "Claim",
    "ClaimsByLevel",
    "EffectiveClaim",
    "Override",
    # enums
    "ClaimLevel",
    "ClaimType",
    "LEVEL_DISPLAY_ORDER",
    "OverrideAction",
    "OverrideScope",
    # markets
    "ALL_COUNTRIES_CODE",
    "CountryCode",
    "GLOBAL_COUNTRY_CODE",
    "ProductId",
    "is_global",
    "validate_market",
    "validate_product_id",
]
