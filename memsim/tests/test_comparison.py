import random

import pytest

from memsim.core.config import CacheConfig, MappingStrategy
from memsim.core.errors import AddressRangeError, AllocationError
from memsim.core.hierarchy import Hierarchy
from memsim.core.simulator import CacheSimulator
from memsim.simulation.comparison import STRATEGIES, ComparisonRunner


def test_conflicting_stream_favours_associativity():
    # Input: alternate 0x000 and 0x400. Both land in set 0 of the direct-mapped
    # L1 and L2, but fit side by side in the 2-way/4-way set-associative levels.
    # Expected: direct-mapped never hits; set-associative hits after the two
    # compulsory misses, so its hit rate is at least the direct-mapped one.
    stream = [0x000, 0x400] * 10
    result = ComparisonRunner(CacheConfig()).run(stream)
    dm = result[MappingStrategy.DIRECT_MAPPED]
    sa = result[MappingStrategy.SET_ASSOCIATIVE]
    fa = result[MappingStrategy.FULLY_ASSOCIATIVE]
    assert dm.overall_hit_ratio <= sa.overall_hit_ratio
    assert dm.l1_hit_ratio < sa.l1_hit_ratio
    assert dm.misses_to_memory == 20
    assert sa.misses_to_memory == 2
    assert sa.l1_hits == 18
    assert fa.l1_hits == 18
    assert dm.average_access_time > sa.average_access_time


def test_runner_matches_independent_runs(config):
    rng = random.Random(5)
    stream = [rng.randrange(config.address_space_size) for _ in range(800)]
    result = ComparisonRunner(config).run(stream)
    for strategy in STRATEGIES:
        sim = CacheSimulator(Hierarchy(config, strategy))
        sim.load_sequence(stream)
        assert sim.run_all() == result[strategy]


def test_rerun_starts_from_empty_caches(config):
    runner = ComparisonRunner(config)
    first = runner.run([0x10, 0x10])
    second = runner.run([0x10, 0x10])
    for strategy in STRATEGIES:
        assert first[strategy] == second[strategy]
        assert second[strategy].misses_to_memory == 1


def test_callback_receives_strategy_and_outcome(config):
    seen = []
    ComparisonRunner(config).run([0, 4, 8], lambda s, o: seen.append((s, o.address)))
    assert len(seen) == 9
    assert {s for s, _ in seen} == set(STRATEGIES)


def test_ranked_is_presentation_helper():
    result = ComparisonRunner().run([0x000, 0x400] * 4)
    best_first = result.ranked(lambda st: st.average_access_time)
    assert best_first[-1] is MappingStrategy.DIRECT_MAPPED
    labels = result.by_label()
    assert set(labels) == {'Direct-Mapped', 'Fully Associative', 'Set-Associative'}
    assert set(result.hit_rate_history) == set(STRATEGIES)


def test_empty_stream_is_rejected(config):
    with pytest.raises(AllocationError):
        ComparisonRunner(config).run([])


def test_out_of_range_stream_reports_no_partial_results(config):
    runner = ComparisonRunner(config)
    with pytest.raises(AddressRangeError):
        runner.run([0, 4, config.address_space_size])
    for strategy in STRATEGIES:
        assert runner.simulators[strategy].stats.accesses == 0


def test_every_hierarchy_stays_inclusive(config):
    rng = random.Random(8)
    runner = ComparisonRunner(config)
    runner.run([rng.randrange(config.address_space_size) for _ in range(1000)])
    for strategy in STRATEGIES:
        assert runner.hierarchy(strategy).check_inclusion() == []
