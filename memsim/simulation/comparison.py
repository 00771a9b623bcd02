"""Head-to-head comparison of the three mapping strategies.

Every strategy gets its own hierarchy built from the same config, and the
same address stream is replayed through each. The hierarchies share no
state, so the order they are driven in does not affect the results.
"""
import logging
from typing import Callable, Dict, Iterable, List, Optional

from memsim.core.config import CacheConfig, MappingStrategy
from memsim.core.errors import AllocationError
from memsim.core.hierarchy import AccessOutcome, Hierarchy
from memsim.core.simulator import CacheSimulator, HitRecord
from memsim.data.stats_export import RunStatistics

logger = logging.getLogger(__name__)

STRATEGIES = (
    MappingStrategy.DIRECT_MAPPED,
    MappingStrategy.FULLY_ASSOCIATIVE,
    MappingStrategy.SET_ASSOCIATIVE,
)


class ComparisonResult:
    def __init__(self):
        self.stats: Dict[MappingStrategy, RunStatistics] = {}
        self.hit_logs: Dict[MappingStrategy, List[HitRecord]] = {}
        self.hit_rate_history: Dict[MappingStrategy, List[float]] = {}

    def __getitem__(self, strategy: MappingStrategy) -> RunStatistics:
        return self.stats[strategy]

    def __iter__(self):
        return iter(self.stats)

    def by_label(self) -> Dict[str, RunStatistics]:
        return {s.label: st for s, st in self.stats.items()}

    def ranked(self, key: Callable[[RunStatistics], float], reverse: bool = False) -> List[MappingStrategy]:
        """Strategies ordered by `key`; ties keep the direct/fully/set order."""
        return sorted(self.stats, key=lambda s: key(self.stats[s]), reverse=reverse)


class ComparisonRunner:
    def __init__(self, config: Optional[CacheConfig] = None):
        self.config = (config or CacheConfig()).validate()
        self.simulators: Dict[MappingStrategy, CacheSimulator] = {
            s: CacheSimulator(Hierarchy(self.config, s)) for s in STRATEGIES
        }

    def hierarchy(self, strategy: MappingStrategy) -> Hierarchy:
        return self.simulators[strategy].hierarchy

    def reset(self):
        for sim in self.simulators.values():
            sim.reset()

    def run(self, addresses: Iterable[int],
            callback: Optional[Callable[[MappingStrategy, AccessOutcome], None]] = None) -> ComparisonResult:
        """Replay `addresses` through every strategy from an empty state."""
        addresses = list(addresses)
        if not addresses:
            raise AllocationError("address stream must contain at least one access")
        self.reset()
        # validate every stream before resolving anything
        for sim in self.simulators.values():
            sim.load_sequence(addresses)

        result = ComparisonResult()
        for strategy, sim in self.simulators.items():
            observer = None
            if callback is not None:
                def observer(outcome, _s=strategy):
                    callback(_s, outcome)
            result.stats[strategy] = sim.run_all(observer)
            result.hit_logs[strategy] = list(sim.hit_log)
            result.hit_rate_history[strategy] = list(sim.hit_rate_history)
        logger.info("compared %d strategies over %d accesses", len(result.stats), len(addresses))
        return result
