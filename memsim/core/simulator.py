"""CacheSimulator feeds an address sequence through one hierarchy.

It owns the per-run bookkeeping: statistics, the log of hits and the
running hit-rate history used for charts. Each step resolves one address
completely; callers that want to pace or display a run pass a callback to
`run_all`, which is invoked with every `AccessOutcome`.
"""
import logging
from typing import Callable, List, NamedTuple, Optional

from memsim.core.errors import AddressRangeError, AllocationError
from memsim.core.hierarchy import AccessLevel, AccessOutcome, Hierarchy
from memsim.data.stats_export import RunStatistics, StatsAggregator

logger = logging.getLogger(__name__)


class HitRecord(NamedTuple):
    address: int
    level: AccessLevel


class CacheSimulator:
    def __init__(self, hierarchy: Hierarchy, stats: Optional[StatsAggregator] = None):
        self.hierarchy = hierarchy
        self.stats = stats or StatsAggregator(hierarchy.config)
        self.sequence: List[int] = []
        self.index = 0
        self.hit_log: List[HitRecord] = []
        self.hit_rate_history: List[float] = []

    def reset(self):
        # clear stats, cache contents and rewind the sequence pointer
        self.stats.reset()
        self.hierarchy.reset()
        self.index = 0
        self.hit_log = []
        self.hit_rate_history = []

    def load_sequence(self, addresses):
        addresses = list(addresses)
        if not addresses:
            raise AllocationError("address sequence must contain at least one access")
        size = self.hierarchy.config.address_space_size
        for a in addresses:
            if not isinstance(a, int) or a < 0 or a >= size:
                raise AddressRangeError(a, size)
        self.sequence = addresses
        self.index = 0

    def has_next(self) -> bool:
        return self.index < len(self.sequence)

    def step(self) -> Optional[AccessOutcome]:
        if not self.has_next():
            return None
        address = self.sequence[self.index]
        self.index += 1

        outcome = self.hierarchy.access(address)
        self.stats.record(outcome)
        if outcome.hit:
            self.hit_log.append(HitRecord(address, outcome.level))
        self.hit_rate_history.append(self.stats.hit_rate)
        return outcome

    def run_all(self, callback: Optional[Callable[[AccessOutcome], None]] = None) -> RunStatistics:
        while self.has_next():
            outcome = self.step()
            if callback:
                callback(outcome)
        result = self.stats.finalize()
        logger.info(
            "%s run done: %d accesses, L1 %d, L2 %d, memory %d, AMAT %.2f",
            self.hierarchy.strategy.label, result.accesses, result.l1_hits,
            result.l2_hits, result.misses_to_memory, result.average_access_time,
        )
        return result
