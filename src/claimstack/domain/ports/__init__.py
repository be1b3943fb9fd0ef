"""Domain port definitions for adapters."""

from __future__ import annotations

from .cache import (
    CACHE_KEY_PREFIX,
    CachedClaims,
    ClaimsCache,
    cache_key,
    product_id_from_key,
    product_key_prefix,
)
from .sources import ClaimSource, OverrideSource

__all__ = [
    "CACHE_KEY_PREFIX",
    "CachedClaims",
    "ClaimSource",
    "ClaimsCache",
    "OverrideSource",
    "cache_key",
    "product_id_from_key",
    "product_key_prefix",
]
