"""Tests for LRUCache."""

from vdoclsp.util.lru_cache import LRUCache


class TestLRUCache:
    def test_basic_operations(self) -> None:
        cache = LRUCache[str, int](max_entries=3)
        cache.put("a", 1)
        cache.put("b", 2)

        assert cache.get("a") == 1
        assert cache.get("b") == 2
        assert cache.get("c") is None
        assert cache.hits == 2
        assert cache.misses == 1

    def test_eviction_by_count(self) -> None:
        cache = LRUCache[str, str](max_entries=2)
        cache.put("a", "value_a")
        cache.put("b", "value_b")
        cache.put("c", "value_c")  # evicts "a"

        assert "a" not in cache
        assert cache.get("b") == "value_b"
        assert cache.get("c") == "value_c"

    def test_access_refreshes_entry(self) -> None:
        cache = LRUCache[str, str](max_entries=2)
        cache.put("a", "value_a")
        cache.put("b", "value_b")
        assert cache.get("a") == "value_a"
        cache.put("c", "value_c")  # evicts "b", the least recently used

        assert cache.get("a") == "value_a"
        assert cache.get("b") is None

    def test_eviction_by_size(self) -> None:
        cache = LRUCache[str, str](max_entries=100, max_size=10, sizeof=len)
        cache.put("a", "12345")
        cache.put("b", "12345")
        assert len(cache) == 2
        cache.put("c", "1")
        assert "a" not in cache
        assert cache.size == 6

    def test_oversized_value_is_kept(self) -> None:
        cache = LRUCache[str, str](max_entries=100, max_size=4, sizeof=len)
        cache.put("a", "12")
        cache.put("b", "123456")
        assert "a" not in cache
        assert cache.get("b") == "123456"

    def test_update_existing_key(self) -> None:
        cache = LRUCache[str, str](max_entries=3, max_size=100, sizeof=len)
        cache.put("a", "xx")
        cache.put("a", "yyyy")
        assert cache.get("a") == "yyyy"
        assert len(cache) == 1
        assert cache.size == 4

    def test_remove_and_clear(self) -> None:
        cache = LRUCache[str, int](max_entries=3)
        cache.put("a", 1)
        cache.put("b", 2)
        assert cache.remove("a")
        assert not cache.remove("a")
        cache.clear()
        assert len(cache) == 0
        assert cache.size == 0
