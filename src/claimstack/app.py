"""Application entry points for resolving, invalidating and formatting claims.

A single ``ClaimsResolver`` (and its in-process cache) lives for the whole
process. It is built lazily from configuration on first use, or installed
explicitly with ``configure``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from claimstack.adapters.memory_cache import InMemoryClaimsCache
from claimstack.adapters.sqlalchemy import (
    SqlAlchemyClaimSource,
    SqlAlchemyOverrideSource,
    is_started,
    startup,
)
from claimstack.config import get_cache_config
from claimstack.domain.formatting import FormatContext, StyledClaims, format_claims
from claimstack.domain.resolution import ClaimsResolver

if TYPE_CHECKING:
    from collections.abc import Iterable

    from claimstack.domain.cancellation import CancelScope
    from claimstack.domain.model import CountryCode, EffectiveClaim, ProductId
    from claimstack.domain.ports import ClaimsCache, ClaimSource, OverrideSource

log = logging.getLogger(__name__)


@dataclass(slots=True)
class _AppState:
    resolver: ClaimsResolver | None = None


_STATE = _AppState()


def build_resolver(
    *,
    claim_source: ClaimSource | None = None,
    override_source: OverrideSource | None = None,
    cache: ClaimsCache | None = None,
) -> ClaimsResolver:
    """Assemble a resolver from configuration, defaulting to the SQLAlchemy gateways."""

    cache_config = get_cache_config()
    if claim_source is None or override_source is None:
        if not is_started():
            startup()
        claim_source = claim_source or SqlAlchemyClaimSource()
        override_source = override_source or SqlAlchemyOverrideSource()
    if cache is None and cache_config.enabled:
        cache = InMemoryClaimsCache(default_ttl_seconds=cache_config.ttl_seconds)
    log.debug(
        "Built claims resolver: cache=%s ttl=%ss",
        type(cache).__name__ if cache is not None else None,
        cache_config.ttl_seconds,
    )
    return ClaimsResolver(
        claim_source=claim_source,
        override_source=override_source,
        cache=cache,
        cache_ttl_seconds=cache_config.ttl_seconds,
    )


def configure(resolver: ClaimsResolver) -> None:
    """Install the process-wide resolver (startup wiring and tests)."""

    _STATE.resolver = resolver


def reset() -> None:
    _STATE.resolver = None


def get_resolver() -> ClaimsResolver:
    if _STATE.resolver is None:
        _STATE.resolver = build_resolver()
    return _STATE.resolver


def resolve_effective_claims(
    product_id: ProductId,
    country_code: CountryCode,
    *,
    scope: CancelScope | None = None,
) -> tuple[EffectiveClaim, ...]:
    """Return the effective claims for one product in one concrete market."""

    return get_resolver().resolve_effective_claims(product_id, country_code, scope=scope)


def resolve_claims_matrix(
    product_id: ProductId,
    country_codes: Iterable[CountryCode],
    *,
    scope: CancelScope | None = None,
) -> dict[CountryCode, tuple[EffectiveClaim, ...]]:
    return get_resolver().resolve_claims_matrix(product_id, country_codes, scope=scope)


def invalidate_claims_for_product(product_id: ProductId) -> None:
    """Must be called by every write path touching a product's claims or overrides."""

    get_resolver().invalidate_claims_for_product(product_id)


def invalidate_all_claims() -> None:
    get_resolver().invalidate_all()


def format_for_display(
    effective_claims: Iterable[EffectiveClaim],
    context: FormatContext | None = None,
) -> StyledClaims:
    return format_claims(effective_claims, context)
