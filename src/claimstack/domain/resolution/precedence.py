"""Ordered tie-break tables for claims and overrides.

Each table is a sequence of named rules. A rule maps a row to a rank where a
lower rank wins; rows are compared rule by rule in table order, so changing
policy means editing a table, not control flow.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from claimstack.domain.model import (
    GLOBAL_COUNTRY_CODE,
    Claim,
    ClaimLevel,
    ClaimType,
    Override,
    OverrideAction,
)

if TYPE_CHECKING:
    from claimstack.domain.model import CountryCode


@dataclass(frozen=True, slots=True)
class PrecedenceRule[TRow]:
    name: str
    rank: Callable[[TRow, CountryCode], int]


type PrecedenceTable[TRow] = Sequence[PrecedenceRule[TRow]]


def _country_rank(country_code: CountryCode, market: CountryCode) -> int:
    if country_code == market:
        return 0
    if country_code == GLOBAL_COUNTRY_CODE:
        return 1
    return 2


LEVEL_SPECIFICITY: dict[ClaimLevel, int] = {
    ClaimLevel.PRODUCT: 0,
    ClaimLevel.INGREDIENT: 1,
    ClaimLevel.BRAND: 2,
}

CLAIM_TYPE_RANK: dict[ClaimType, int] = {
    ClaimType.DISALLOWED: 0,
    ClaimType.ALLOWED: 1,
}

OVERRIDE_ACTION_RANK: dict[OverrideAction, int] = {
    OverrideAction.BLOCK: 0,
    OverrideAction.ALLOW: 1,
}


CLAIM_PRECEDENCE: tuple[PrecedenceRule[Claim], ...] = (
    PrecedenceRule(
        "country_over_global",
        lambda row, market: _country_rank(row.country_code, market),
    ),
    PrecedenceRule("disallowed_over_allowed", lambda row, _market: CLAIM_TYPE_RANK[row.type]),
    PrecedenceRule("higher_priority", lambda row, _market: -row.priority),
    PrecedenceRule("level_specificity", lambda row, _market: LEVEL_SPECIFICITY[row.level]),
)

OVERRIDE_PRECEDENCE: tuple[PrecedenceRule[Override], ...] = (
    PrecedenceRule(
        "country_over_global",
        lambda row, market: _country_rank(row.effective_country_code, market),
    ),
    PrecedenceRule("block_over_allow", lambda row, _market: OVERRIDE_ACTION_RANK[row.action]),
)


def precedence_key[TRow](
    row: TRow,
    market: CountryCode,
    table: PrecedenceTable[TRow],
) -> tuple[int, ...]:
    return tuple(rule.rank(row, market) for rule in table)


def pick_winner[TRow](
    rows: Sequence[TRow],
    market: CountryCode,
    table: PrecedenceTable[TRow],
    *,
    tiebreak: Callable[[TRow], str],
) -> TRow:
    """Return the single winning row.

    ``tiebreak`` only decides rows the table ranks identically, keeping the
    choice independent of input order.
    """

    if not rows:
        raise ValueError("Cannot pick a winner from an empty group")
    return min(rows, key=lambda row: (precedence_key(row, market, table), tiebreak(row)))


def specificity(country_code: CountryCode, market: CountryCode) -> int:
    """Country-specificity rank shared by claims and overrides (lower is more specific)."""

    return _country_rank(country_code, market)
