"""Cache-aware resolution of effective claims for one product and market."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from claimstack.domain.cancellation import check_scope
from claimstack.domain.errors import CacheUnavailableError, ConflictInvariantViolation
from claimstack.domain.model import LEVEL_DISPLAY_ORDER, validate_market, validate_product_id
from claimstack.domain.ports.cache import cache_key

from .conflicts import check_single_type, fail_closed
from .deduplicate import deduplicate_claims
from .normalize import normalize_claim_text
from .overrides import apply_overrides
from .stacking import stack_claims

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from claimstack.domain.cancellation import CancelScope
    from claimstack.domain.model import (
        ClaimsByLevel,
        CountryCode,
        EffectiveClaim,
        Override,
        ProductId,
    )
    from claimstack.domain.ports import ClaimsCache, ClaimSource, OverrideSource

log = logging.getLogger(__name__)

_LEVEL_INDEX = {level: index for index, level in enumerate(LEVEL_DISPLAY_ORDER)}


def resolve_claims(
    claims_by_level: ClaimsByLevel,
    overrides: Sequence[Override],
    market: CountryCode,
) -> tuple[EffectiveClaim, ...]:
    """Pure pipeline: stack, apply overrides, dedupe and guard the type invariant.

    Output is ordered by level (product, ingredient, brand) then normalized text,
    independent of the order rows were fetched in.
    """

    stacked = stack_claims(claims_by_level, market)
    overridden = apply_overrides(stacked, overrides, market)
    resolved = tuple(deduplicate_claims(overridden))
    try:
        check_single_type(resolved)
    except ConflictInvariantViolation as exc:
        log.critical(
            "Claim resolution invariant violated for market=%s; failing closed: %s",
            market,
            exc,
        )
        resolved = fail_closed(resolved, exc.normalized_texts)
    return tuple(sorted(resolved, key=_output_order))


def _output_order(claim: EffectiveClaim) -> tuple[int, str, str]:
    return (_LEVEL_INDEX[claim.level], normalize_claim_text(claim.text), claim.text)


@dataclass(slots=True)
class ClaimsResolver:
    """Resolve effective claims through an optional cache.

    A miss recomputes synchronously in the caller. Concurrent misses on the same
    key may each recompute; resolution is idempotent so the last write wins. The
    cache generation is read before the fetch and handed back with the write, so
    an invalidation that lands mid-fetch drops the result instead of caching it.
    """

    claim_source: ClaimSource
    override_source: OverrideSource
    cache: ClaimsCache | None = None
    cache_ttl_seconds: float | None = None

    def resolve_effective_claims(
        self,
        product_id: ProductId,
        country_code: CountryCode,
        *,
        scope: CancelScope | None = None,
    ) -> tuple[EffectiveClaim, ...]:
        """Return the effective claims for ``product_id`` in one concrete market.

        Raises ``ClaimValidationError`` before touching the cache or gateways,
        ``DataAccessError`` when a gateway fails and ``ResolutionCancelledError``
        when ``scope`` is cancelled. Nothing is cached on failure.
        """

        product_id = validate_product_id(product_id)
        market = validate_market(country_code)
        key = cache_key(product_id, market)

        cached = self._cache_get(key)
        if cached is not None:
            log.debug("Claims cache hit: %s", key)
            return cached

        log.debug("Claims cache miss: %s", key)
        generation = self._cache_generation(product_id)
        claims_by_level, overrides = self._fetch(product_id, scope=scope)
        resolved = resolve_claims(claims_by_level, overrides, market)
        check_scope(scope, "cache write")
        self._cache_set(key, resolved, generation)
        log.info(
            "Resolved %d effective claims for product=%s market=%s",
            len(resolved),
            product_id,
            market,
        )
        return resolved

    def resolve_claims_matrix(
        self,
        product_id: ProductId,
        country_codes: Iterable[CountryCode],
        *,
        scope: CancelScope | None = None,
    ) -> dict[CountryCode, tuple[EffectiveClaim, ...]]:
        """Resolve one product for several markets, fetching rows at most once."""

        product_id = validate_product_id(product_id)
        markets = tuple(dict.fromkeys(validate_market(code) for code in country_codes))

        matrix: dict[CountryCode, tuple[EffectiveClaim, ...]] = {}
        missing: list[CountryCode] = []
        for market in markets:
            cached = self._cache_get(cache_key(product_id, market))
            if cached is None:
                missing.append(market)
            else:
                matrix[market] = cached

        if missing:
            generation = self._cache_generation(product_id)
            claims_by_level, overrides = self._fetch(product_id, scope=scope)
            fresh = {
                market: resolve_claims(claims_by_level, overrides, market) for market in missing
            }
            check_scope(scope, "cache write")
            for market, resolved in fresh.items():
                self._cache_set(cache_key(product_id, market), resolved, generation)
            matrix.update(fresh)

        return {market: matrix[market] for market in markets}

    def invalidate_claims_for_product(self, product_id: ProductId) -> None:
        """Drop every cached market for ``product_id``.

        Cache faults propagate: a write path must know when stale entries may remain.
        """

        product_id = validate_product_id(product_id)
        if self.cache is None:
            return
        removed = self.cache.invalidate_for_product(product_id)
        log.info("Invalidated %d cached market(s) for product=%s", removed, product_id)

    def invalidate_all(self) -> None:
        if self.cache is None:
            return
        self.cache.invalidate_all()
        log.info("Flushed claims cache")

    def _fetch(
        self,
        product_id: ProductId,
        *,
        scope: CancelScope | None,
    ) -> tuple[ClaimsByLevel, tuple[Override, ...]]:
        check_scope(scope, "claim fetch")
        claims_by_level = self.claim_source.fetch_claims(product_id, scope=scope)
        check_scope(scope, "override fetch")
        overrides = self.override_source.fetch_overrides(product_id, scope=scope)
        check_scope(scope, "resolution")
        return claims_by_level, tuple(overrides)

    def _cache_get(self, key: str) -> tuple[EffectiveClaim, ...] | None:
        if self.cache is None:
            return None
        try:
            return self.cache.get(key)
        except CacheUnavailableError as exc:
            log.warning("Claims cache unavailable on get(%s); resolving fresh: %s", key, exc)
            return None

    def _cache_generation(self, product_id: ProductId) -> int | None:
        if self.cache is None:
            return None
        try:
            return self.cache.generation(product_id)
        except CacheUnavailableError as exc:
            log.warning(
                "Claims cache unavailable on generation(%s); writing unconditionally: %s",
                product_id,
                exc,
            )
            return None

    def _cache_set(
        self,
        key: str,
        value: tuple[EffectiveClaim, ...],
        generation: int | None,
    ) -> None:
        if self.cache is None:
            return
        try:
            self.cache.set(key, value, self.cache_ttl_seconds, generation=generation)
        except CacheUnavailableError as exc:
            log.warning("Claims cache unavailable on set(%s); skipping write: %s", key, exc)
