"""In-process claims cache.

Constructed once per process; holds nothing across restarts. A single lock
guards the whole key-space, so get/set/invalidate on the same key or product
prefix are serialized.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from claimstack.config import DEFAULT_CACHE_TTL_SECONDS
from claimstack.domain.ports.cache import product_id_from_key, product_key_prefix

if TYPE_CHECKING:
    from claimstack.domain.model import ProductId
    from claimstack.domain.ports.cache import CachedClaims

log = logging.getLogger(__name__)

type Clock = Callable[[], float]


@dataclass(slots=True, frozen=True)
class _Entry:
    value: CachedClaims
    expires_at: float | None


class InMemoryClaimsCache:
    """Dictionary-backed ``ClaimsCache`` with lazy TTL expiry.

    Every invalidation advances a counter. ``generation(product_id)`` reports the
    counter value of the last invalidation that touched the product, and a write
    carrying an older generation is dropped, so a result computed from rows read
    before an invalidation never lands after it.
    """

    def __init__(
        self,
        *,
        default_ttl_seconds: float | None = DEFAULT_CACHE_TTL_SECONDS,
        clock: Clock = time.monotonic,
    ) -> None:
        self._default_ttl_seconds = default_ttl_seconds
        self._clock = clock
        self._entries: dict[str, _Entry] = {}
        self._invalidations = 0
        self._flushed_at = 0
        self._generations: dict[ProductId, int] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> CachedClaims | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.expires_at is not None and self._clock() >= entry.expires_at:
                del self._entries[key]
                return None
            return entry.value

    def generation(self, product_id: ProductId) -> int:
        with self._lock:
            return self._generation(product_id)

    def set(
        self,
        key: str,
        value: CachedClaims,
        ttl_seconds: float | None = None,
        *,
        generation: int | None = None,
    ) -> None:
        ttl = self._default_ttl_seconds if ttl_seconds is None else ttl_seconds
        with self._lock:
            if ttl is not None and ttl <= 0:
                self._entries.pop(key, None)
                return
            if generation is not None:
                current = self._generation(product_id_from_key(key))
                if current != generation:
                    log.debug(
                        "Skipping stale write for %s (generation %d, current %d)",
                        key,
                        generation,
                        current,
                    )
                    return
            expires_at = None if ttl is None else self._clock() + ttl
            self._entries[key] = _Entry(value=tuple(value), expires_at=expires_at)

    def invalidate_for_product(self, product_id: ProductId) -> int:
        prefix = product_key_prefix(product_id)
        with self._lock:
            self._invalidations += 1
            self._generations[product_id] = self._invalidations
            doomed = [key for key in self._entries if key.startswith(prefix)]
            for key in doomed:
                del self._entries[key]
        log.debug("Dropped %d cache entries with prefix %s", len(doomed), prefix)
        return len(doomed)

    def invalidate_all(self) -> None:
        with self._lock:
            self._invalidations += 1
            self._flushed_at = self._invalidations
            self._generations.clear()
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _generation(self, product_id: ProductId) -> int:
        return max(self._generations.get(product_id, 0), self._flushed_at)


if TYPE_CHECKING:
    from claimstack.domain.ports.cache import ClaimsCache

    _cache_check: ClaimsCache = InMemoryClaimsCache()
