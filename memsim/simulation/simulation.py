"""Address streams and the scenario runner used by the console harness.

Three access patterns exercise different kinds of locality:

- sequential: consecutive words, wrapping at the end of the address space
- random:     uniformly distributed word-aligned addresses
- repeated:   cycles through a small random working set
"""
import random
from typing import Dict, List, Optional

from memsim.core.config import CacheConfig
from memsim.core.errors import AllocationError
from memsim.simulation.comparison import ComparisonResult, ComparisonRunner

PATTERNS = ('sequential', 'random', 'repeated')


def _check_count(count: int) -> int:
    if not isinstance(count, int) or count <= 0:
        raise AllocationError(f"number of accesses must be a positive integer, got {count!r}")
    return count


def sequential_addresses(count: int, config: CacheConfig) -> List[int]:
    _check_count(count)
    return [(i * config.word_size) % config.address_space_size for i in range(count)]


def random_addresses(count: int, config: CacheConfig, seed: Optional[int] = None) -> List[int]:
    _check_count(count)
    rng = random.Random(seed)
    words = config.address_space_size // config.word_size
    return [rng.randrange(words) * config.word_size for _ in range(count)]


def repeated_addresses(count: int, config: CacheConfig, unique: int = 20, seed: Optional[int] = None) -> List[int]:
    _check_count(count)
    working_set = random_addresses(unique, config, seed)
    return [working_set[i % unique] for i in range(count)]


def generate_sequence(pattern: str, count: int, config: CacheConfig, seed: Optional[int] = None) -> List[int]:
    if pattern == 'sequential':
        return sequential_addresses(count, config)
    elif pattern == 'random':
        return random_addresses(count, config, seed)
    elif pattern == 'repeated':
        return repeated_addresses(count, config, seed=seed)
    raise ValueError(f"unknown access pattern {pattern!r}, expected one of {', '.join(PATTERNS)}")


class Simulation:
    """Runs named access patterns through a fresh comparison of all strategies."""

    def __init__(self, config: Optional[CacheConfig] = None):
        self.config = (config or CacheConfig()).validate()
        self.runner = ComparisonRunner(self.config)

    def run_pattern(self, pattern: str, count: int, seed: Optional[int] = None, callback=None) -> ComparisonResult:
        addresses = generate_sequence(pattern, count, self.config, seed)
        return self.runner.run(addresses, callback)

    def run_all_patterns(self, count: int, seed: Optional[int] = None) -> Dict[str, ComparisonResult]:
        return {name: self.run_pattern(name, count, seed) for name in PATTERNS}
