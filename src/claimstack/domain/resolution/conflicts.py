"""Guard the one-type-per-text invariant on resolved output."""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING

from claimstack.domain.errors import ConflictInvariantViolation
from claimstack.domain.model import ClaimType, EffectiveClaim

from .normalize import normalize_claim_text

if TYPE_CHECKING:
    from collections.abc import Collection, Sequence


def check_single_type(claims: Sequence[EffectiveClaim]) -> None:
    """Raise ``ConflictInvariantViolation`` if any text resolved to more than one type."""

    seen: dict[str, ClaimType] = {}
    conflicting: set[str] = set()
    for claim in claims:
        key = normalize_claim_text(claim.text)
        previous = seen.setdefault(key, claim.type)
        if previous is not claim.type:
            conflicting.add(key)
    if conflicting:
        raise ConflictInvariantViolation(conflicting)


def fail_closed(
    claims: Sequence[EffectiveClaim],
    normalized_texts: Collection[str],
) -> tuple[EffectiveClaim, ...]:
    """Collapse each conflicting text into one ``disallowed`` claim.

    The survivor is based on the first disallowed entry for that text and keeps
    the provenance of every colliding entry. It takes the position of the first
    colliding entry.
    """

    collisions: dict[str, list[EffectiveClaim]] = {}
    ordered: list[str | EffectiveClaim] = []
    for claim in claims:
        key = normalize_claim_text(claim.text)
        if key not in normalized_texts:
            ordered.append(claim)
            continue
        if key not in collisions:
            ordered.append(key)
        collisions.setdefault(key, []).append(claim)

    survivors = {key: _collapse(group) for key, group in collisions.items()}
    return tuple(survivors[item] if isinstance(item, str) else item for item in ordered)


def _collapse(group: list[EffectiveClaim]) -> EffectiveClaim:
    base = next((claim for claim in group if claim.type is ClaimType.DISALLOWED), group[0])
    provenance = tuple(dict.fromkeys(ref for claim in group for ref in claim.provenance))
    return replace(
        base,
        type=ClaimType.DISALLOWED,
        provenance=provenance,
        was_overridden=any(claim.was_overridden for claim in group),
    )
