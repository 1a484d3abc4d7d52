"""
Min-priority queue ordered by a caller-supplied key function.

Dijkstra relaxes distances for cells that are already queued. Re-inserting
an item after its key changed pushes a fresh heap entry; the older entry
goes stale and is skipped when it reaches the top. Items with equal keys
come out in insertion order.
"""
from typing import Callable, Dict, Generic, Hashable, List, Optional, Tuple, TypeVar
import heapq
import itertools

T = TypeVar("T", bound=Hashable)


class KeyedMinHeap(Generic[T]):
    """
    heapq-backed min-heap over hashable items with lazy decrease-key.

    Usage:
        dist = {...}
        heap = KeyedMinHeap(key=lambda cell: dist[cell])
        heap.insert(start)
        cell = heap.extract_min()  # None when empty
    """

    def __init__(self, key: Callable[[T], float]):
        self._key = key
        self._entries: List[Tuple[float, int, T]] = []
        self._queued: Dict[T, float] = {}  # item -> key of its live entry
        self._counter = itertools.count()

    def insert(self, item: T) -> None:
        """Add an item, or requeue it under its current key if that changed."""
        key = self._key(item)
        if item in self._queued and self._queued[item] == key:
            return
        self._queued[item] = key
        heapq.heappush(self._entries, (key, next(self._counter), item))

    def extract_min(self) -> Optional[T]:
        """Remove and return the item with the smallest key, or None if empty."""
        while self._entries:
            key, _, item = heapq.heappop(self._entries)
            if item in self._queued and self._queued[item] == key:
                del self._queued[item]
                return item
        return None

    def is_empty(self) -> bool:
        return not self._queued

    def __len__(self) -> int:
        return len(self._queued)

    def __contains__(self, item: T) -> bool:
        return item in self._queued
