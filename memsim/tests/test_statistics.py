"""Statistics: counters, derived ratios, AMAT and cost additivity."""

import random

import pytest

from memsim.core.address import DecodedAddress
from memsim.core.config import CacheConfig, MappingStrategy
from memsim.core.errors import AllocationError
from memsim.core.hierarchy import AccessLevel, AccessOutcome, Hierarchy
from memsim.data.stats_export import StatsAggregator

_ZERO = DecodedAddress(0, 0, 0, 0)


def _outcome(level, cost):
    return AccessOutcome(0, level, cost, _ZERO, _ZERO, 0)


def _run(strategy, addresses, config):
    h = Hierarchy(config, strategy)
    agg = StatsAggregator(config)
    for a in addresses:
        agg.record(h.access(a))
    return agg


def test_record_counts_each_level(config):
    agg = StatsAggregator(config)
    agg.record(_outcome(AccessLevel.MEMORY, 111))
    agg.record(_outcome(AccessLevel.L2, 11))
    agg.record(_outcome(AccessLevel.L1, 1))
    agg.record(_outcome(AccessLevel.L1, 1))
    assert (agg.accesses, agg.l1_hits, agg.l2_hits, agg.misses_to_memory) == (4, 2, 1, 1)
    assert agg.total_cost == 124
    stats = agg.finalize()
    assert stats.l1_hit_ratio == pytest.approx(0.5)
    assert stats.l2_hit_ratio == pytest.approx(0.5)
    assert stats.l2_global_hit_ratio == pytest.approx(0.25)
    assert stats.overall_hit_ratio == pytest.approx(0.75)


def test_l2_ratio_when_l1_never_misses(config):
    agg = StatsAggregator(config)
    for _ in range(5):
        agg.record(_outcome(AccessLevel.L1, config.l1_cost))
    stats = agg.finalize()
    assert stats.l1_hit_ratio == 1.0
    assert stats.l2_hit_ratio == 0.0
    assert stats.average_access_time == pytest.approx(config.l1_cost)


def test_finalize_rejects_empty_run(config):
    with pytest.raises(AllocationError):
        StatsAggregator(config).finalize()
    with pytest.raises(AllocationError):
        StatsAggregator(config).finalize(total_accesses=0)


@pytest.mark.parametrize("strategy", list(MappingStrategy))
def test_cost_additivity_and_amat(strategy, config):
    # Input: 1500 random addresses through one hierarchy.
    # Expected: incremental total cost equals the closed form, AMAT lies in
    # [0, l1+l2+memory] and equals the average cost per access.
    rng = random.Random(11)
    addresses = [rng.randrange(config.address_space_size) for _ in range(1500)]
    stats = _run(strategy, addresses, config).finalize()
    c1, c2, cm = config.l1_cost, config.l2_cost, config.memory_cost
    expected = stats.l1_hits * c1 + stats.l2_hits * (c1 + c2) + stats.misses_to_memory * (c1 + c2 + cm)
    assert stats.total_cost == expected
    assert stats.l1_hits + stats.l2_hits + stats.misses_to_memory == stats.accesses == 1500
    assert 0 <= stats.average_access_time <= config.max_access_cost
    assert stats.average_access_time == pytest.approx(stats.average_cost_per_access)


def test_amat_all_misses_hits_upper_bound():
    cfg = CacheConfig()
    # every access is a distinct block: nothing can hit
    stats = _run(MappingStrategy.SET_ASSOCIATIVE, range(0, 0x1000, 0x10), cfg).finalize()
    assert stats.misses_to_memory == stats.accesses
    assert stats.average_access_time == pytest.approx(cfg.max_access_cost)


def test_as_dict_includes_derived_fields(config):
    stats = _run(MappingStrategy.DIRECT_MAPPED, [0, 0, 0x10], config).finalize()
    d = stats.as_dict()
    for key in ('l1_hits', 'l2_hit_ratio', 'l2_global_hit_ratio', 'overall_hit_ratio',
                'average_access_time', 'average_cost_per_access'):
        assert key in d
    assert d['accesses'] == 3
