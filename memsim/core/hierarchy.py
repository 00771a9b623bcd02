"""Inclusive two-level hierarchy (L1, L2, main memory).

Resolution of one address:

1. L1 hit: charge l1_cost, refresh L1 recency.
2. L1 miss, L2 hit: charge l1_cost + l2_cost, refresh L2 recency, then
   copy the block into L1 (choosing an L1 victim).
3. L2 miss: charge l1_cost + l2_cost + memory_cost, fetch from memory and
   install into both levels, each choosing its own victim.

Costs are cumulative because a lower level is only probed after the level
above it missed.

Inclusion (every L1 block also lives in L2) is kept by back-invalidation:
when L2 evicts a valid block, any copy of it in L1 is dropped.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from memsim.core.address import DecodedAddress
from memsim.core.cache import CacheLevel
from memsim.core.config import CacheConfig, MappingStrategy
from memsim.core.ram import MainMemory

logger = logging.getLogger(__name__)


class AccessLevel(Enum):
    L1 = "L1"
    L2 = "L2"
    MEMORY = "Memory"


@dataclass
class AccessOutcome:
    """Result of resolving one address.

    `l1`/`l2` hold the address as each level decodes it; `way` is the L1
    way that holds the block after the access. `evicted` lists
    (level name, block number) pairs displaced by this access.
    """

    address: int
    level: AccessLevel
    cost: int
    l1: DecodedAddress
    l2: DecodedAddress
    way: int
    evicted: List[tuple] = field(default_factory=list)

    @property
    def hit(self) -> bool:
        return self.level is not AccessLevel.MEMORY


class Hierarchy:
    def __init__(self, config: CacheConfig, strategy: MappingStrategy):
        self.config = config.validate()
        self.strategy = strategy
        self.l1 = CacheLevel("L1", config.geometry(strategy, 1), strategy)
        self.l2 = CacheLevel("L2", config.geometry(strategy, 2), strategy)
        self.memory = MainMemory(config.address_space_size, config.block_size)
        logger.info(
            "%s hierarchy: L1 %dx%d, L2 %dx%d, %d-byte blocks",
            strategy.label,
            self.l1.num_sets, self.l1.associativity,
            self.l2.num_sets, self.l2.associativity,
            config.block_size,
        )

    def access(self, address: int) -> AccessOutcome:
        cfg = self.config
        l1_dec = self.l1.decode(address)
        l2_dec = self.l2.decode(address)

        found = self.l1.lookup(address)
        if found is not None:
            set_index, way, _ = found
            self.l1.touch(set_index, way)
            outcome = AccessOutcome(address, AccessLevel.L1, cfg.l1_cost, l1_dec, l2_dec, way)
            logger.debug("%#06x L1 hit (set %d, way %d)", address, set_index, way)
            return outcome

        evicted = []
        found = self.l2.lookup(address)
        if found is not None:
            set_index, way, _ = found
            self.l2.touch(set_index, way)
            l1_way = self._fill(self.l1, l1_dec, address, evicted)
            outcome = AccessOutcome(address, AccessLevel.L2, cfg.l1_cost + cfg.l2_cost,
                                    l1_dec, l2_dec, l1_way, evicted)
            logger.debug("%#06x L2 hit (set %d, way %d), filled L1 way %d",
                         address, set_index, way, l1_way)
            return outcome

        self.memory.fetch_block(address)
        self._fill(self.l2, l2_dec, address, evicted)
        l1_way = self._fill(self.l1, l1_dec, address, evicted)
        outcome = AccessOutcome(address, AccessLevel.MEMORY, cfg.max_access_cost,
                                l1_dec, l2_dec, l1_way, evicted)
        logger.debug("%#06x miss, filled from memory", address)
        return outcome

    def _fill(self, level: CacheLevel, dec: DecodedAddress, address: int, evicted: list) -> int:
        way = level.select_victim(dec.set_index)
        old_block = level.block_of(dec.set_index, way)
        if old_block is not None:
            evicted.append((level.name, old_block))
            logger.debug("%s evicts block %d from set %d way %d",
                         level.name, old_block, dec.set_index, way)
            if level is self.l2:
                self._back_invalidate(old_block)
        level.install(dec.set_index, way, dec.tag, address)
        return way

    def _back_invalidate(self, block: int) -> None:
        address = block * self.config.block_size
        found = self.l1.lookup(address)
        if found is not None:
            set_index, way, _ = found
            self.l1.invalidate(set_index, way)
            logger.debug("L1 drops block %d to stay inclusive", block)

    def check_inclusion(self) -> List[int]:
        """Return L1 blocks with no copy in L2; empty when inclusion holds."""
        missing = []
        bs = self.config.block_size
        for block in sorted(self.l1.resident_blocks()):
            if self.l2.lookup(block * bs) is None:
                missing.append(block)
        return missing

    def contains(self, address: int) -> Optional[AccessLevel]:
        """Highest level currently holding `address`, without touching LRU state."""
        if self.l1.lookup(address) is not None:
            return AccessLevel.L1
        if self.l2.lookup(address) is not None:
            return AccessLevel.L2
        return None

    def reset(self) -> None:
        self.l1.reset()
        self.l2.reset()
        self.memory.reset()


__all__ = ["AccessLevel", "AccessOutcome", "Hierarchy"]
