from datetime import datetime, timedelta

import pytest

from vcverifier.cache import (
    NO_EXPIRATION,
    AllCaches,
    CacheKeyExistsError,
    ExpiringCache,
    global_cache,
    reset_global_cache,
)


class FakeClock:
    def __init__(self):
        self.current = datetime(2024, 1, 1, 12, 0, 0)

    def now(self):
        return self.current

    def advance(self, seconds):
        self.current += timedelta(seconds=seconds)


@pytest.fixture
def clock():
    return FakeClock()


def test_get_missing_key_raises(clock):
    cache = ExpiringCache(10, clock)
    with pytest.raises(KeyError):
        cache.get("missing")


def test_set_then_get_round_trip(clock):
    cache = ExpiringCache(10, clock)
    cache.set("key", {"a": 1})
    assert cache.get("key") == {"a": 1}


def test_default_expiry_applies(clock):
    cache = ExpiringCache(10, clock)
    cache.set("key", "value")
    clock.advance(9)
    assert cache.get("key") == "value"
    clock.advance(2)
    with pytest.raises(KeyError):
        cache.get("key")


def test_explicit_expiry_overrides_default(clock):
    cache = ExpiringCache(10, clock)
    cache.set("key", "value", 100)
    clock.advance(50)
    assert cache.get("key") == "value"


def test_no_expiration_keeps_entry(clock):
    cache = ExpiringCache(10, clock)
    cache.set("key", "value", NO_EXPIRATION)
    clock.advance(100000)
    assert cache.get("key") == "value"


def test_timedelta_expiry(clock):
    cache = ExpiringCache(timedelta(seconds=5), clock)
    cache.set("key", "value")
    clock.advance(6)
    assert "key" not in cache


def test_add_refuses_existing_key(clock):
    cache = ExpiringCache(10, clock)
    cache.add("key", "first")
    with pytest.raises(CacheKeyExistsError):
        cache.add("key", "second")
    assert cache.get("key") == "first"


def test_add_allowed_after_expiry(clock):
    cache = ExpiringCache(10, clock)
    cache.add("key", "first")
    clock.advance(11)
    cache.add("key", "second")
    assert cache.get("key") == "second"


def test_delete_removes_and_ignores_missing(clock):
    cache = ExpiringCache(10, clock)
    cache.set("key", "value")
    cache.delete("key")
    cache.delete("never-there")
    assert "key" not in cache


def test_false_values_are_cached(clock):
    cache = ExpiringCache(10, clock)
    cache.set("flag", False)
    assert cache.get("flag") is False


def test_reset_global_cache_gives_empty_caches():
    global_cache().issuer_cache.set("key", "value")
    before = global_cache()
    reset_global_cache()
    after = global_cache()
    assert after is not before
    assert "key" not in after.issuer_cache
    assert "key" in before.issuer_cache


def test_all_caches_are_independent():
    caches = AllCaches()
    caches.service_cache.set("key", "value")
    assert "key" not in caches.tir_endpoints
    assert "key" not in caches.issuers_cache
    assert caches.service_cache.get("key") == "value"