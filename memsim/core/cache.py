"""One level of the cache hierarchy.

A level is a `num_sets x associativity` matrix of slots. The same class
models all three mapping strategies; they differ only in geometry and in
the replacement policy attached to the level:

- direct-mapped:     many sets of one way, unconditional overwrite
- fully associative: one set holding every slot, LRU
- set-associative:   sets of `associativity` ways, LRU within the set

Contents change only through `install`, `touch` and `invalidate`;
`lookup` never mutates the level.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Set, Tuple

from memsim.core.address import DecodedAddress, block_base, decode
from memsim.core.config import LevelGeometry, MappingStrategy
from memsim.core.errors import ConfigurationError
from memsim.core.replacement_policies import DirectMappedReplacement, LRUReplacement


@dataclass
class CacheSlot:
    """A single way of a set.

    Fields:
    - tag: block identifier within the set, None while invalid
    - valid: whether the slot holds a live block
    - resident_address: last address mapped here (display only)
    - recency: LRU age, 0 for the most recently used way
    """

    tag: Optional[int] = None
    valid: bool = False
    resident_address: int = 0
    recency: int = 0


class CacheLevel:
    def __init__(self, name: str, geometry: LevelGeometry, strategy: MappingStrategy):
        if geometry.num_sets <= 0 or geometry.associativity <= 0:
            raise ConfigurationError(
                f"{name}: num_sets and associativity must be >= 1, got {geometry.num_sets}x{geometry.associativity}"
            )
        if geometry.word_size <= 0 or geometry.words_per_line <= 0:
            raise ConfigurationError(f"{name}: word_size and words_per_line must be >= 1")

        self.name = name
        self.geometry = geometry
        self.strategy = strategy
        if strategy is MappingStrategy.DIRECT_MAPPED:
            self.policy = DirectMappedReplacement()
        else:
            self.policy = LRUReplacement()

        self.sets: List[List[CacheSlot]] = [
            [CacheSlot() for _ in range(geometry.associativity)]
            for _ in range(geometry.num_sets)
        ]

    @property
    def num_sets(self) -> int:
        return self.geometry.num_sets

    @property
    def associativity(self) -> int:
        return self.geometry.associativity

    @property
    def occupancy(self) -> int:
        return sum(1 for s in self.sets for slot in s if slot.valid)

    def decode(self, address: int) -> DecodedAddress:
        return decode(address, self.geometry)

    def lookup(self, address: int) -> Optional[Tuple[int, int, int]]:
        """Return (set_index, way, tag) of the slot holding `address`, or None."""
        decoded = self.decode(address)
        for way, slot in enumerate(self.sets[decoded.set_index]):
            if slot.valid and slot.tag == decoded.tag:
                return decoded.set_index, way, decoded.tag
        return None

    def touch(self, set_index: int, way: int) -> None:
        """Mark `way` as most recently used within its set."""
        self.policy.access(self.sets[set_index], way)

    def select_victim(self, set_index: int) -> int:
        return self.policy.evict(self.sets[set_index])

    def install(self, set_index: int, way: int, tag: int, address: int) -> None:
        slot = self.sets[set_index][way]
        slot.valid = True
        slot.tag = tag
        slot.resident_address = address
        self.touch(set_index, way)

    def invalidate(self, set_index: int, way: int) -> None:
        slot = self.sets[set_index][way]
        slot.valid = False
        slot.tag = None
        slot.recency = 0

    def reset(self) -> None:
        """Return every slot to the empty, invalid state."""
        for cache_set in self.sets:
            for slot in cache_set:
                slot.tag = None
                slot.valid = False
                slot.resident_address = 0
                slot.recency = 0

    def block_of(self, set_index: int, way: int) -> Optional[int]:
        """Block number stored in a slot, or None if the slot is empty."""
        slot = self.sets[set_index][way]
        if not slot.valid:
            return None
        return block_base(slot.tag, set_index, self.geometry) // self.geometry.block_size

    def resident_blocks(self) -> Set[int]:
        blocks = set()
        for set_index, cache_set in enumerate(self.sets):
            for way in range(len(cache_set)):
                block = self.block_of(set_index, way)
                if block is not None:
                    blocks.add(block)
        return blocks

    def snapshot(self) -> List[Dict[str, object]]:
        """Flat view of every slot for display layers."""
        rows = []
        for set_index, cache_set in enumerate(self.sets):
            for way, slot in enumerate(cache_set):
                rows.append({
                    'set': set_index,
                    'way': way,
                    'valid': slot.valid,
                    'tag': slot.tag,
                    'address': slot.resident_address if slot.valid else None,
                    'recency': slot.recency,
                })
        return rows

    def __repr__(self) -> str:
        return (f"CacheLevel({self.name!r}, {self.strategy.label}, "
                f"sets={self.num_sets}, ways={self.associativity})")


__all__ = ["CacheSlot", "CacheLevel"]
