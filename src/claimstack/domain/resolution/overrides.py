"""Apply market block/allow overrides on top of stacked claims.

Overrides follow the same specificity rules as claims: a country override for
the requested market beats a global one regardless of creation time, and at
equal scope ``block`` beats ``allow``. A broader ``allow`` never reverses a
more specific ``disallowed`` outcome. Overrides for text that has no stacked
claim are ignored; they never fabricate an effective claim.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import TYPE_CHECKING

from claimstack.domain.model import ClaimType, EffectiveClaim, Override, OverrideAction

from .normalize import normalize_claim_text
from .precedence import OVERRIDE_PRECEDENCE, pick_winner, specificity

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from claimstack.domain.model import CountryCode

    from .normalize import NormalizedText
    from .precedence import PrecedenceTable

log = logging.getLogger(__name__)

_TARGET_TYPE: dict[OverrideAction, ClaimType] = {
    OverrideAction.BLOCK: ClaimType.DISALLOWED,
    OverrideAction.ALLOW: ClaimType.ALLOWED,
}


def apply_overrides(
    claims: Sequence[EffectiveClaim],
    overrides: Iterable[Override],
    market: CountryCode,
    *,
    table: PrecedenceTable[Override] = OVERRIDE_PRECEDENCE,
) -> tuple[EffectiveClaim, ...]:
    """Return ``claims`` with the winning override for each text applied."""

    overrides_by_text = _group_overrides(overrides, market)
    claim_texts = {normalize_claim_text(claim.text) for claim in claims}
    for text, group in overrides_by_text.items():
        if text not in claim_texts:
            log.warning(
                "Ignoring override(s) %s for market=%s: no resolved claim matches %r",
                ", ".join(sorted(override.id for override in group)),
                market,
                group[0].claim_text,
            )

    result: list[EffectiveClaim] = []
    for claim in claims:
        group = overrides_by_text.get(normalize_claim_text(claim.text))
        if not group:
            result.append(claim)
            continue
        winner = pick_winner(group, market, table, tiebreak=_override_id)
        result.append(_apply_override(claim, winner, market))
    return tuple(result)


def _group_overrides(
    overrides: Iterable[Override],
    market: CountryCode,
) -> dict[NormalizedText, list[Override]]:
    grouped: dict[NormalizedText, list[Override]] = {}
    for override in overrides:
        if not override.applies_to(market):
            continue
        text = normalize_claim_text(override.claim_text)
        if not text:
            log.warning("Skipping override %s with blank claim text", override.id)
            continue
        grouped.setdefault(text, []).append(override)
    return grouped


def _apply_override(
    claim: EffectiveClaim,
    override: Override,
    market: CountryCode,
) -> EffectiveClaim:
    target = _TARGET_TYPE[override.action]
    if target is claim.type:
        return claim

    if override.action is OverrideAction.ALLOW and specificity(
        override.effective_country_code, market
    ) > specificity(claim.resolved_country_code, market):
        log.info(
            "Override %s (allow, %s) cannot reverse market-specific disallowed claim %r",
            override.id,
            override.effective_country_code,
            claim.text,
        )
        return claim

    log.debug(
        "Override %s (%s) changes %r from %s to %s for market=%s",
        override.id,
        override.action,
        claim.text,
        claim.type,
        target,
        market,
    )
    return replace(
        claim,
        type=target,
        resolved_country_code=override.effective_country_code,
        provenance=(*claim.provenance, override.id),
        was_overridden=True,
    )


def _override_id(override: Override) -> str:
    return override.id
