"""Stack ingredient, product and brand claims into one winner per claim text.

Steps:
1) concatenate the three levels, tagging each row with the level it came from
2) drop rows for markets other than GLOBAL and the requested one
3) group by normalized text
4) pick one winner per group using ``CLAIM_PRECEDENCE``
5) emit one ``EffectiveClaim`` per group, with every considered row in provenance
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import TYPE_CHECKING

from claimstack.domain.model import GLOBAL_COUNTRY_CODE, Claim, ClaimLevel, EffectiveClaim

from .deduplicate import group_by_normalized_text
from .precedence import CLAIM_PRECEDENCE, pick_winner, precedence_key

if TYPE_CHECKING:
    from collections.abc import Iterator

    from claimstack.domain.model import ClaimsByLevel, CountryCode

    from .precedence import PrecedenceTable

log = logging.getLogger(__name__)


def stack_claims(
    claims_by_level: ClaimsByLevel,
    market: CountryCode,
    *,
    table: PrecedenceTable[Claim] = CLAIM_PRECEDENCE,
) -> tuple[EffectiveClaim, ...]:
    """Resolve raw claim rows for ``market`` into one effective claim per text."""

    relevant = [row for row in _tagged_rows(claims_by_level) if _in_market(row, market)]
    groups = group_by_normalized_text(relevant)

    resolved: list[EffectiveClaim] = []
    for rows in groups.values():
        winner = pick_winner(rows, market, table, tiebreak=_row_id)
        considered = sorted(
            rows,
            key=lambda row: (row is not winner, precedence_key(row, market, table), row.id),
        )
        resolved.append(
            EffectiveClaim(
                text=winner.text,
                type=winner.type,
                level=winner.level,
                resolved_country_code=winner.country_code,
                provenance=tuple(row.id for row in considered),
                priority=winner.priority,
                description=winner.description,
            )
        )

    log.debug(
        "Stacked claims for market=%s: in=%d relevant=%d out=%d",
        market,
        len(claims_by_level),
        len(relevant),
        len(resolved),
    )
    return tuple(resolved)


def _tagged_rows(claims_by_level: ClaimsByLevel) -> Iterator[Claim]:
    for level, rows in (
        (ClaimLevel.INGREDIENT, claims_by_level.ingredient),
        (ClaimLevel.PRODUCT, claims_by_level.product),
        (ClaimLevel.BRAND, claims_by_level.brand),
    ):
        for row in rows:
            if row.level is not level:
                log.debug(
                    "Claim %s declared level=%s but was fetched as %s; using %s",
                    row.id,
                    row.level,
                    level,
                    level,
                )
                row = replace(row, level=level)  # noqa: PLW2901
            yield row


def _in_market(row: Claim, market: CountryCode) -> bool:
    return row.country_code in (GLOBAL_COUNTRY_CODE, market)


def _row_id(row: Claim) -> str:
    return row.id
