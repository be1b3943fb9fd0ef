"""Claims cache configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from .env import env_bool, env_float

DEFAULT_CACHE_TTL_SECONDS: Final[float] = 300.0


@dataclass(frozen=True, slots=True)
class CacheConfig:
    enabled: bool = True
    ttl_seconds: float = DEFAULT_CACHE_TTL_SECONDS


def get_cache_config() -> CacheConfig:
    return CacheConfig(
        enabled=env_bool("CLAIMSTACK_CACHE_ENABLED", default=True),
        ttl_seconds=env_float(
            "CLAIMSTACK_CACHE_TTL_SECONDS",
            DEFAULT_CACHE_TTL_SECONDS,
            minimum=0.0,
        ),
    )
