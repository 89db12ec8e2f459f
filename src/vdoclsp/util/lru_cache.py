"""
LRU cache bounded by entry count and by the total size of its values.
"""

from collections import OrderedDict
from collections.abc import Callable
from typing import Generic, TypeVar

from sensai.util import logging

log = logging.getLogger(__name__)

K = TypeVar("K")
V = TypeVar("V")


class LRUCache(Generic[K, V]):
    """
    Least-recently-used cache. Entries are evicted once either the number of entries exceeds `max_entries`
    or the summed size of all values (as measured by `sizeof`) exceeds `max_size`.

    The cache is not thread-safe; it is meant to be used from a single event loop.
    """

    def __init__(self, max_entries: int, max_size: int | None = None, sizeof: Callable[[V], int] = lambda _: 1):
        """
        :param max_entries: maximum number of entries
        :param max_size: maximum summed size of all values; None for no size limit
        :param sizeof: function measuring the size of a value
        """
        self._max_entries = max_entries
        self._max_size = max_size
        self._sizeof = sizeof
        self._entries: OrderedDict[K, V] = OrderedDict()
        self._size = 0
        self.hits = 0
        self.misses = 0

    def get(self, key: K) -> V | None:
        if key not in self._entries:
            self.misses += 1
            return None
        self._entries.move_to_end(key)
        self.hits += 1
        return self._entries[key]

    def put(self, key: K, value: V) -> None:
        if key in self._entries:
            self._size -= self._sizeof(self._entries.pop(key))
        self._entries[key] = value
        self._size += self._sizeof(value)
        self._evict()

    def remove(self, key: K) -> bool:
        if key not in self._entries:
            return False
        self._size -= self._sizeof(self._entries.pop(key))
        return True

    def clear(self) -> None:
        self._entries.clear()
        self._size = 0

    def _evict(self) -> None:
        evicted = 0
        # the most recently added entry is always kept, even if it exceeds the size limit on its own
        while len(self._entries) > 1 and (
            len(self._entries) > self._max_entries or (self._max_size is not None and self._size > self._max_size)
        ):
            _, value = self._entries.popitem(last=False)
            self._size -= self._sizeof(value)
            evicted += 1
        if evicted > 0:
            log.debug(f"Evicted {evicted} cache entries; {len(self._entries)} entries remaining (size {self._size})")

    @property
    def size(self) -> int:
        return self._size

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries
