"""Port for memoizing resolved claims per (product, market)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final, Protocol, runtime_checkable

if TYPE_CHECKING:
    from claimstack.domain.model import CountryCode, EffectiveClaim, ProductId

CACHE_KEY_PREFIX: Final[str] = "stacked"

type CachedClaims = tuple[EffectiveClaim, ...]


def cache_key(product_id: ProductId, country_code: CountryCode) -> str:
    return f"{CACHE_KEY_PREFIX}:{product_id}:{country_code}"


def product_key_prefix(product_id: ProductId) -> str:
    """Prefix shared by every market's key for ``product_id``."""

    return f"{CACHE_KEY_PREFIX}:{product_id}:"


def product_id_from_key(key: str) -> ProductId:
    return key.split(":", 2)[1]


@runtime_checkable
class ClaimsCache(Protocol):
    """Key-value store for resolved claims.

    Implementations raise ``CacheUnavailableError`` when their backing store
    cannot be reached; callers degrade to a miss.
    """

    def get(self, key: str) -> CachedClaims | None: ...

    def generation(self, product_id: ProductId) -> int:
        """Token that changes whenever ``product_id`` is invalidated."""
        ...

    def set(
        self,
        key: str,
        value: CachedClaims,
        ttl_seconds: float | None = None,
        *,
        generation: int | None = None,
    ) -> None:
        """Store ``value``; skip the write if ``generation`` is no longer current."""
        ...

    def invalidate_for_product(self, product_id: ProductId) -> int:
        """Drop every market's entry for ``product_id``; return the number removed."""
        ...

    def invalidate_all(self) -> None: ...


__all__ = [
    "CACHE_KEY_PREFIX",
    "CachedClaims",
    "ClaimsCache",
    "cache_key",
    "product_id_from_key",
    "product_key_prefix",
]
