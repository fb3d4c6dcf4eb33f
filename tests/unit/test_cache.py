"""In-process TTL cache and cache key builders."""

import pytest

from civickey.core.cache_keys import (
    active_municipalities_key,
    domain_key,
    municipality_config_key,
    municipality_pattern,
    session_activity_key,
)
from civickey.infrastructure.cache import MemoryCache


class Clock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


async def test_entry_expires_after_ttl() -> None:
    clock = Clock()
    cache = MemoryCache(clock=clock)
    await cache.set("k", "v", ttl=10)
    clock.now = 9.9
    assert await cache.get("k") == "v"
    clock.now = 10
    assert await cache.get("k") is None
    assert len(cache) == 0


async def test_least_recently_used_is_evicted() -> None:
    cache = MemoryCache(max_entries=2)
    await cache.set("a", 1)
    await cache.set("b", 2)
    await cache.get("a")
    await cache.set("c", 3)
    assert await cache.get("b") is None
    assert await cache.get("a") == 1
    assert await cache.get("c") == 3


async def test_delete_pattern_is_scoped_to_one_municipality() -> None:
    cache = MemoryCache()
    await cache.set(municipality_config_key("saint-lazare"), {"id": "saint-lazare"})
    await cache.set(municipality_config_key("hudson"), {"id": "hudson"})
    assert await cache.delete_pattern(municipality_pattern("saint-lazare")) == 1
    assert await cache.get(municipality_config_key("hudson")) == {"id": "hudson"}


async def test_delete_and_clear() -> None:
    cache = MemoryCache()
    await cache.set("a", 1)
    assert await cache.delete("a") is True
    assert await cache.delete("a") is False
    await cache.set("b", 2)
    await cache.clear_all()
    assert len(cache) == 0


def test_max_entries_must_be_positive() -> None:
    with pytest.raises(ValueError):
        MemoryCache(max_entries=0)


def test_key_formats_are_distinct() -> None:
    keys = {
        domain_key("www.saint-lazare.ca"),
        municipality_config_key("saint-lazare"),
        active_municipalities_key(),
        session_activity_key("uid-1", 1700000000),
    }
    assert len(keys) == 4


@pytest.mark.parametrize("bad", ["", "a:b"])
def test_key_components_are_validated(bad: str) -> None:
    with pytest.raises(ValueError):
        domain_key(bad)
