import pytest

from walktrack.core.cache import FIFOEviction, LRUEviction, TTLCache, make_eviction_policy
from walktrack.domains.dogs.repository.dog_repository import DogRepository
from walktrack.models.dog import Dog


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


def test_entry_expires_after_ttl(clock):
    cache = TTLCache(ttl_seconds=10, clock=clock)
    cache.set("a", 1)

    clock.advance(9.9)
    assert cache.get("a") == 1

    clock.advance(0.1)
    assert cache.get("a") is None
    assert "a" not in cache
    assert cache.stats.expirations == 1


def test_per_entry_ttl_override(clock):
    cache = TTLCache(ttl_seconds=10, clock=clock)
    cache.set("short", 1, ttl_seconds=1)
    cache.set("long", 2)

    clock.advance(5)
    assert cache.get("short") is None
    assert cache.get("long") == 2


def test_lru_evicts_least_recently_used(clock):
    cache = TTLCache(ttl_seconds=60, max_size=2, policy=LRUEviction(), clock=clock)
    cache.set("a", 1)
    cache.set("b", 2)
    cache.get("a")
    cache.set("c", 3)

    assert "a" in cache
    assert "b" not in cache
    assert cache.stats.evictions == 1


def test_fifo_ignores_access_order(clock):
    cache = TTLCache(ttl_seconds=60, max_size=2, policy=FIFOEviction(), clock=clock)
    cache.set("a", 1)
    cache.set("b", 2)
    cache.get("a")
    cache.set("c", 3)

    assert "a" not in cache
    assert "b" in cache


def test_get_or_load_caches_value_but_not_none(clock):
    cache = TTLCache(ttl_seconds=60, clock=clock)
    calls = []

    def loader():
        calls.append(1)
        return {"name": "Luna"}

    assert cache.get_or_load("dog", loader) == {"name": "Luna"}
    assert cache.get_or_load("dog", loader) == {"name": "Luna"}
    assert len(calls) == 1
    assert cache.stats.hits == 1

    assert cache.get_or_load("missing", lambda: None) is None
    assert "missing" not in cache


def test_purge_expired_and_invalidate(clock):
    cache = TTLCache(ttl_seconds=5, clock=clock)
    cache.set("a", 1)
    cache.set("b", 2, ttl_seconds=60)

    clock.advance(10)
    assert cache.purge_expired() == 1
    assert len(cache) == 1

    assert cache.invalidate("b") is True
    assert cache.invalidate("b") is False
    assert len(cache) == 0


@pytest.mark.parametrize("kwargs", [{"ttl_seconds": 0}, {"ttl_seconds": 5, "max_size": 0}])
def test_invalid_configuration(kwargs):
    with pytest.raises(ValueError):
        TTLCache(**kwargs)


def test_make_eviction_policy():
    assert isinstance(make_eviction_policy("LRU"), LRUEviction)
    assert type(make_eviction_policy("fifo")) is FIFOEviction
    with pytest.raises(ValueError):
        make_eviction_policy("random")


def test_dog_display_is_served_from_cache(db_session, seed, clock):
    cache = TTLCache(ttl_seconds=30, clock=clock)
    repo = DogRepository(db_session, cache=cache)

    assert repo.get_display(seed["luna_id"])["name"] == "Luna"

    dog = db_session.get(Dog, seed["luna_id"])
    dog.name = "Luna II"
    db_session.commit()

    assert repo.get_display(seed["luna_id"])["name"] == "Luna"

    clock.advance(30)
    assert repo.get_display(seed["luna_id"])["name"] == "Luna II"


def test_dog_displays_skip_unknown_dogs(db_session, seed):
    repo = DogRepository(db_session, cache=TTLCache(ttl_seconds=30))
    displays = repo.get_displays([seed["luna_id"], seed["bori_id"], seed["luna_id"], 999])
    assert set(displays) == {seed["luna_id"], seed["bori_id"]}
