from conftest import FakeClock

from utils.cache import ResultCache, make_cache_key


class TestCacheKey:
    def test_without_params_is_url(self):
        url = "https://pokeapi.co/api/v2/pokemon/pikachu"
        assert make_cache_key(url) == url
        assert make_cache_key(url, {}) == url

    def test_param_order_does_not_matter(self):
        url = "https://pokeapi.co/api/v2/pokemon"
        a = make_cache_key(url, {"limit": 20, "offset": 40})
        b = make_cache_key(url, {"offset": 40, "limit": 20})
        assert a == b == f"{url}?limit=20&offset=40"

    def test_different_params_do_not_collide(self):
        url = "https://pokeapi.co/api/v2/pokemon"
        assert make_cache_key(url, {"limit": 20, "offset": 0}) != make_cache_key(
            url, {"limit": 20, "offset": 20}
        )


class TestResultCache:
    def test_get_missing_returns_none(self):
        cache = ResultCache(cache_duration=300, clock=FakeClock())
        assert cache.get("missing") is None
        assert cache.misses == 1

    def test_fresh_entry_is_returned(self):
        clock = FakeClock()
        cache = ResultCache(cache_duration=300, clock=clock)
        cache.set("k", {"id": 1})

        clock.advance(299)
        assert cache.get("k") == {"id": 1}
        assert cache.hits == 1

    def test_expired_entry_counted_then_evicted(self):
        clock = FakeClock()
        cache = ResultCache(cache_duration=300, clock=clock)
        cache.set("old", {"id": 1})
        cache.set("new", {"id": 2})
        clock.advance(200)
        cache.set("new", {"id": 2})
        clock.advance(150)

        # stats() reports the stale entry without evicting it
        stats = cache.stats()
        assert stats["total_entries"] == 2
        assert stats["valid_entries"] == 1
        assert stats["expired_entries"] == 1
        assert stats["cache_duration"] == 300
        assert "old" in cache

        assert cache.get("old") is None
        assert "old" not in cache
        assert cache.stats()["total_entries"] == 1
        assert cache.stats()["expired_entries"] == 0

    def test_entry_exactly_at_duration_is_stale(self):
        clock = FakeClock()
        cache = ResultCache(cache_duration=300, clock=clock)
        cache.set("k", "v")
        clock.advance(300)
        assert cache.get("k") is None

    def test_set_overwrites_and_resets_timestamp(self):
        clock = FakeClock()
        cache = ResultCache(cache_duration=300, clock=clock)
        cache.set("k", {"v": 1})
        clock.advance(250)
        cache.set("k", {"v": 2})
        clock.advance(250)

        assert cache.get("k") == {"v": 2}
        assert len(cache) == 1

    def test_clear_removes_entries_and_counters(self):
        cache = ResultCache(cache_duration=300, clock=FakeClock())
        cache.set("a", 1)
        cache.get("a")
        cache.get("b")

        cache.clear()

        assert cache.stats() == {
            "total_entries": 0,
            "valid_entries": 0,
            "expired_entries": 0,
            "cache_duration": 300,
            "hits": 0,
            "misses": 0,
        }
