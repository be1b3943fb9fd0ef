"""Claim resolution core.

Flow for one (product, market):
1) stack ingredient/product/brand claims into one winner per text
2) apply market overrides with the same specificity rules
3) deduplicate and guard the one-type-per-text invariant
"""

from __future__ import annotations

from .conflicts import check_single_type, fail_closed
from .deduplicate import deduplicate_claims, group_by_normalized_text
from .normalize import normalize_claim_text
from .overrides import apply_overrides
from .precedence import CLAIM_PRECEDENCE, OVERRIDE_PRECEDENCE, PrecedenceRule, pick_winner
from .service import ClaimsResolver, resolve_claims
from .stacking import stack_claims

__all__ = [
    "CLAIM_PRECEDENCE",
    "OVERRIDE_PRECEDENCE",
    "ClaimsResolver",
    "PrecedenceRule",
    "apply_overrides",
    "check_single_type",
    "deduplicate_claims",
    "fail_closed",
    "group_by_normalized_text",
    "normalize_claim_text",
    "pick_winner",
    "resolve_claims",
    "stack_claims",
]
