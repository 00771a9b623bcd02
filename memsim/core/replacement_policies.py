"""Replacement policies for one associativity set.

Both policies share a small API so `CacheLevel` can call them
interchangeably:

- access(cache_set, way): notify the policy that `way` was used
- evict(cache_set): return the way a new block should be placed in
- peek(cache_set): ways ordered from next victim to most recently used

The recency state lives on the slots themselves (`CacheSlot.recency`),
so policies hold no per-set state and one instance serves a whole level.
"""

from typing import List, Sequence


class LRUReplacement:
    """Least-Recently-Used using per-slot age counters.

    Accessing a way resets its age to 0 and ages every other valid way in
    the set by one. The victim is the first invalid way, otherwise the
    oldest; equal ages resolve to the lowest way index.
    """

    def access(self, cache_set: Sequence, way: int) -> None:
        for i, slot in enumerate(cache_set):
            if i != way and slot.valid:
                slot.recency += 1
        cache_set[way].recency = 0

    def evict(self, cache_set: Sequence) -> int:
        victim = 0
        oldest = -1
        for i, slot in enumerate(cache_set):
            if not slot.valid:
                return i
            # strict '>' keeps the lowest index on ties
            if slot.recency > oldest:
                oldest = slot.recency
                victim = i
        return victim

    def peek(self, cache_set: Sequence) -> List[int]:
        invalid = [i for i, s in enumerate(cache_set) if not s.valid]
        valid = [i for i, s in enumerate(cache_set) if s.valid]
        valid.sort(key=lambda i: (-cache_set[i].recency, i))
        return invalid + valid


class DirectMappedReplacement:
    """One way per set: nothing to track, the only way is always replaced."""

    def access(self, cache_set: Sequence, way: int) -> None:
        return None

    def evict(self, cache_set: Sequence) -> int:
        return 0

    def peek(self, cache_set: Sequence) -> List[int]:
        return list(range(len(cache_set)))


__all__ = ["LRUReplacement", "DirectMappedReplacement"]
