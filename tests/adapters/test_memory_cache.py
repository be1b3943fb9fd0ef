from __future__ import annotations

from claimstack.adapters.memory_cache import InMemoryClaimsCache
from claimstack.domain.model import GLOBAL_COUNTRY_CODE, ClaimLevel, ClaimType, EffectiveClaim
from claimstack.domain.ports import ClaimsCache, cache_key
from tests.helpers.claims import FakeClock

_CLAIMS = (
    EffectiveClaim(
        text="Vegan",
        type=ClaimType.ALLOWED,
        level=ClaimLevel.PRODUCT,
        resolved_country_code=GLOBAL_COUNTRY_CODE,
        provenance=("c-1",),
    ),
)


def test_satisfies_cache_port() -> None:
    assert isinstance(InMemoryClaimsCache(), ClaimsCache)


def test_get_returns_stored_value() -> None:
    cache = InMemoryClaimsCache()
    key = cache_key("p-1", "GB")

    assert cache.get(key) is None
    cache.set(key, _CLAIMS)
    assert cache.get(key) == _CLAIMS


def test_entries_expire_lazily() -> None:
    clock = FakeClock()
    cache = InMemoryClaimsCache(default_ttl_seconds=10, clock=clock)
    cache.set("stacked:p-1:GB", _CLAIMS)
    cache.set("stacked:p-1:FR", _CLAIMS, ttl_seconds=30)

    clock.advance(10)

    assert cache.get("stacked:p-1:GB") is None
    assert cache.get("stacked:p-1:FR") == _CLAIMS
    assert len(cache) == 1


def test_non_positive_ttl_removes_entry() -> None:
    cache = InMemoryClaimsCache()
    cache.set("stacked:p-1:GB", _CLAIMS)

    cache.set("stacked:p-1:GB", _CLAIMS, ttl_seconds=0)

    assert cache.get("stacked:p-1:GB") is None


def test_no_default_ttl_keeps_entries() -> None:
    clock = FakeClock()
    cache = InMemoryClaimsCache(default_ttl_seconds=None, clock=clock)
    cache.set("stacked:p-1:GB", _CLAIMS)

    clock.advance(10**9)

    assert cache.get("stacked:p-1:GB") == _CLAIMS


def test_invalidate_for_product_is_prefix_exact() -> None:
    cache = InMemoryClaimsCache()
    for key in (
        cache_key("p-1", "GB"),
        cache_key("p-1", "FR"),
        cache_key("p-10", "GB"),
        cache_key("p-2", "GB"),
    ):
        cache.set(key, _CLAIMS)

    removed = cache.invalidate_for_product("p-1")

    assert removed == 2
    assert cache.get(cache_key("p-10", "GB")) == _CLAIMS
    assert cache.get(cache_key("p-2", "GB")) == _CLAIMS
    assert cache.invalidate_for_product("p-1") == 0


def test_invalidate_all() -> None:
    cache = InMemoryClaimsCache()
    cache.set(cache_key("p-1", "GB"), _CLAIMS)
    cache.set(cache_key("p-2", "GB"), _CLAIMS)

    cache.invalidate_all()

    assert len(cache) == 0


def test_write_with_outdated_generation_is_dropped() -> None:
    cache = InMemoryClaimsCache()
    key = cache_key("p-1", "GB")
    generation = cache.generation("p-1")

    cache.invalidate_for_product("p-1")
    cache.set(key, _CLAIMS, generation=generation)

    assert cache.get(key) is None
    cache.set(key, _CLAIMS, generation=cache.generation("p-1"))
    assert cache.get(key) == _CLAIMS


def test_generation_is_scoped_per_product_until_flush() -> None:
    cache = InMemoryClaimsCache()
    before = cache.generation("p-2")

    cache.invalidate_for_product("p-1")
    assert cache.generation("p-2") == before
    cache.set(cache_key("p-2", "GB"), _CLAIMS, generation=before)
    assert len(cache) == 1

    cache.invalidate_all()
    assert cache.generation("p-2") != before
    cache.set(cache_key("p-2", "GB"), _CLAIMS, generation=before)
    assert len(cache) == 0
