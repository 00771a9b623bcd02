import pytest

from memsim.core.config import MappingStrategy
from memsim.core.errors import AddressRangeError, AllocationError
from memsim.core.hierarchy import AccessLevel, Hierarchy
from memsim.core.simulator import CacheSimulator


def _sim(config, strategy=MappingStrategy.DIRECT_MAPPED):
    return CacheSimulator(Hierarchy(config, strategy))


def test_step_through_sequence(config):
    sim = _sim(config)
    sim.load_sequence([0x0000, 0x0010, 0x0000])
    levels = []
    while sim.has_next():
        levels.append(sim.step().level)
    assert levels == [AccessLevel.MEMORY, AccessLevel.MEMORY, AccessLevel.L1]
    assert sim.step() is None
    assert sim.hit_log == [(0x0000, AccessLevel.L1)]
    assert sim.hit_rate_history == pytest.approx([0.0, 0.0, 1 / 3])


def test_run_all_invokes_observer_per_access(config):
    sim = _sim(config, MappingStrategy.SET_ASSOCIATIVE)
    seen = []
    sim.load_sequence([0x20, 0x24, 0x300, 0x20])
    stats = sim.run_all(seen.append)
    assert [o.address for o in seen] == [0x20, 0x24, 0x300, 0x20]
    assert stats.accesses == 4
    assert stats.l1_hits == 2
    assert stats.misses_to_memory == 2


def test_load_sequence_rejects_empty_stream(config):
    sim = _sim(config)
    with pytest.raises(AllocationError):
        sim.load_sequence([])


@pytest.mark.parametrize("bad", [-1, 0x1000, 0x5000])
def test_load_sequence_rejects_out_of_range(bad, config):
    sim = _sim(config)
    with pytest.raises(AddressRangeError):
        sim.load_sequence([0, bad])
    # also usable as a plain IndexError
    with pytest.raises(IndexError):
        sim.load_sequence([bad])
    # nothing was resolved
    assert sim.stats.accesses == 0


def test_reset_clears_run_state(config):
    sim = _sim(config)
    sim.load_sequence([0, 0])
    sim.run_all()
    sim.reset()
    assert sim.stats.accesses == 0
    assert sim.hit_log == []
    assert sim.hierarchy.l1.occupancy == 0
    # the loaded sequence is rewound, not discarded
    assert sim.has_next()
    assert sim.step().level is AccessLevel.MEMORY
