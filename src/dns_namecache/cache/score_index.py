"""
Score Index

Ordered mapping from cache key to an integer age score, answering
"which key is oldest" in O(log n) amortized time.

The index is a binary heap of ``[score, sequence, key]`` entries plus a side
dictionary from key to its live heap entry. Overwriting or deleting a key
marks the old heap entry as removed instead of searching the heap for it;
removed entries are discarded when they surface at the top, and the heap is
rebuilt once they outnumber the live ones.
"""

import heapq
import itertools
from typing import Dict, Hashable, Iterator, List, Optional

from ..errors import EmptyIndex

_REMOVED = object()  # placeholder for a superseded heap entry


class ScoreIndex:
    """Key -> score mapping with cheap minimum lookup"""

    def __init__(self) -> None:
        self._heap: List[list] = []
        self._entries: Dict[Hashable, list] = {}
        self._counter = itertools.count()
        self._stale = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: Hashable) -> bool:
        return key in self._entries

    def __iter__(self) -> Iterator[Hashable]:
        return iter(list(self._entries))

    def size(self) -> int:
        return len(self._entries)

    def set_score(self, key: Hashable, score: int) -> None:
        """Insert key with score, replacing any previous score"""
        if key in self._entries:
            self._invalidate(key)
        entry = [score, next(self._counter), key]
        self._entries[key] = entry
        heapq.heappush(self._heap, entry)
        self._maybe_compact()

    def delete_score(self, key: Hashable) -> None:
        """Remove key; unknown keys are ignored"""
        if key in self._entries:
            self._invalidate(key)
            self._maybe_compact()

    def get_score(self, key: Hashable) -> Optional[int]:
        entry = self._entries.get(key)
        return None if entry is None else entry[0]

    def get_min_score(self) -> int:
        """Smallest score currently stored

        Raises:
            EmptyIndex: If the index holds no keys
        """
        return self._peek()[0]

    def get_min_object(self) -> Hashable:
        """Key holding the smallest score; earliest-set key wins ties

        Raises:
            EmptyIndex: If the index holds no keys
        """
        return self._peek()[2]

    def clear(self) -> None:
        self._heap.clear()
        self._entries.clear()
        self._stale = 0

    def _invalidate(self, key: Hashable) -> None:
        entry = self._entries.pop(key)
        entry[2] = _REMOVED
        self._stale += 1

    def _peek(self) -> list:
        heap = self._heap
        while heap and heap[0][2] is _REMOVED:
            heapq.heappop(heap)
            self._stale -= 1
        if not heap:
            raise EmptyIndex("score index is empty")
        return heap[0]

    def _maybe_compact(self) -> None:
        if self._stale > 64 and self._stale > len(self._entries):
            self._heap = [entry for entry in self._heap if entry[2] is not _REMOVED]
            heapq.heapify(self._heap)
            self._stale = 0
