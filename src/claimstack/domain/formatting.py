"""Display- and prompt-ready grouping of effective claims.

``format_claims`` is pure: identical input yields byte-identical ``to_json``
output, which keeps UI snapshots stable and downstream prompt caches warm.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import TYPE_CHECKING

from claimstack.domain.model import LEVEL_DISPLAY_ORDER, ClaimType

if TYPE_CHECKING:
    from collections.abc import Iterable

    from claimstack.domain.model import EffectiveClaim


@dataclass(frozen=True, slots=True, kw_only=True)
class FormatContext:
    product_name: str | None = None
    brand_name: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class ClaimGroup:
    level: str
    allowed_claims: tuple[str, ...] = ()
    disallowed_claims: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, object]:
        return {
            "level": self.level,
            "allowed_claims": list(self.allowed_claims),
            "disallowed_claims": list(self.disallowed_claims),
        }


@dataclass(frozen=True, slots=True, kw_only=True)
class StyledClaims:
    introductory_sentence: str | None
    grouped_claims: tuple[ClaimGroup, ...] = ()

    def to_dict(self) -> dict[str, object]:
        return {
            "introductory_sentence": self.introductory_sentence,
            "grouped_claims": [group.to_dict() for group in self.grouped_claims],
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), sort_keys=True, ensure_ascii=False, indent=2)


def format_claims(
    effective_claims: Iterable[EffectiveClaim],
    context: FormatContext | None = None,
) -> StyledClaims:
    """Group claims by level (Product, Ingredient, Brand) and split by type.

    Levels without claims are omitted. An empty input yields no groups and no
    introductory sentence.
    """

    claims = [claim for claim in effective_claims if claim.text.strip()]
    if not claims:
        return StyledClaims(introductory_sentence=None)

    groups: list[ClaimGroup] = []
    for level in LEVEL_DISPLAY_ORDER:
        level_claims = [claim for claim in claims if claim.level is level]
        if not level_claims:
            continue
        groups.append(
            ClaimGroup(
                level=level.display_name,
                allowed_claims=_sorted_texts(level_claims, ClaimType.ALLOWED),
                disallowed_claims=_sorted_texts(level_claims, ClaimType.DISALLOWED),
            )
        )

    return StyledClaims(
        introductory_sentence=introductory_sentence(context or FormatContext()),
        grouped_claims=tuple(groups),
    )


def introductory_sentence(context: FormatContext) -> str:
    product = (context.product_name or "").strip()
    brand = (context.brand_name or "").strip()
    if product and brand:
        return f"Approved claims for {product} by {brand}."
    if product:
        return f"Approved claims for {product}."
    if brand:
        return f"Approved claims for {brand} products."
    return "Approved claims for this product."


def _sorted_texts(claims: list[EffectiveClaim], claim_type: ClaimType) -> tuple[str, ...]:
    selected = [claim for claim in claims if claim.type is claim_type]
    selected.sort(key=lambda claim: (-claim.priority, claim.text.strip().casefold(), claim.text))
    return tuple(claim.text.strip() for claim in selected)
