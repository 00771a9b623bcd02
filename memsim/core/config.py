"""Cache configuration.

One immutable `CacheConfig` describes both cache levels, the word/line
layout, the address space and the per-level cost table. Each mapping
strategy turns the same config into a different per-level geometry:

- direct-mapped:     num_sets = entries, associativity = 1
- fully associative: num_sets = 1,       associativity = entries
- set-associative:   num_sets = entries // associativity
"""

from dataclasses import asdict, dataclass, fields
from enum import Enum
from typing import Any, Dict, NamedTuple

from memsim.core.errors import ConfigurationError


class MappingStrategy(Enum):
    DIRECT_MAPPED = "direct"
    FULLY_ASSOCIATIVE = "fully"
    SET_ASSOCIATIVE = "set"

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS = {
    MappingStrategy.DIRECT_MAPPED: "Direct-Mapped",
    MappingStrategy.FULLY_ASSOCIATIVE: "Fully Associative",
    MappingStrategy.SET_ASSOCIATIVE: "Set-Associative",
}


class LevelGeometry(NamedTuple):
    """Shape of one cache level as seen by the address decoder."""

    num_sets: int
    associativity: int
    word_size: int
    words_per_line: int

    @property
    def block_size(self) -> int:
        return self.words_per_line * self.word_size

    @property
    def entries(self) -> int:
        return self.num_sets * self.associativity


@dataclass(frozen=True)
class CacheConfig:
    """Geometry and cost table shared by every hierarchy in a run.

    Defaults match the classic teaching setup: a 16-entry L1 and a
    64-entry L2 with 16-byte lines over a 4 KiB address space, charged
    1 / 10 / 100 cycles per level.
    """

    l1_entries: int = 16
    l2_entries: int = 64
    word_size: int = 4
    words_per_line: int = 4
    l1_associativity: int = 2
    l2_associativity: int = 4
    address_space_size: int = 0x1000
    l1_cost: int = 1
    l2_cost: int = 10
    memory_cost: int = 100

    @property
    def block_size(self) -> int:
        return self.words_per_line * self.word_size

    @property
    def l1_sets(self) -> int:
        return self.l1_entries // self.l1_associativity

    @property
    def l2_sets(self) -> int:
        return self.l2_entries // self.l2_associativity

    @property
    def max_access_cost(self) -> int:
        return self.l1_cost + self.l2_cost + self.memory_cost

    def validate(self) -> "CacheConfig":
        """Raise ConfigurationError unless every level can be built."""
        positive = (
            "l1_entries", "l2_entries", "word_size", "words_per_line",
            "l1_associativity", "l2_associativity", "address_space_size",
        )
        for name in positive:
            value = getattr(self, name)
            if not isinstance(value, int) or value <= 0:
                raise ConfigurationError(f"{name} must be a positive integer, got {value!r}")
        for name in ("l1_cost", "l2_cost", "memory_cost"):
            value = getattr(self, name)
            if not isinstance(value, int) or value < 0:
                raise ConfigurationError(f"{name} must be a non-negative integer, got {value!r}")
        for level in ("l1", "l2"):
            entries = getattr(self, f"{level}_entries")
            assoc = getattr(self, f"{level}_associativity")
            if entries % assoc != 0:
                raise ConfigurationError(
                    f"{level}_entries ({entries}) is not a multiple of {level}_associativity ({assoc})"
                )
        return self

    def geometry(self, strategy: MappingStrategy, level: int) -> LevelGeometry:
        """Return the (num_sets, associativity) layout of L1 or L2 under `strategy`."""
        if level == 1:
            entries, assoc = self.l1_entries, self.l1_associativity
        elif level == 2:
            entries, assoc = self.l2_entries, self.l2_associativity
        else:
            raise ValueError(f"level must be 1 or 2, got {level!r}")

        if strategy is MappingStrategy.DIRECT_MAPPED:
            num_sets, assoc = entries, 1
        elif strategy is MappingStrategy.FULLY_ASSOCIATIVE:
            num_sets, assoc = 1, entries
        else:
            num_sets = entries // assoc
        return LevelGeometry(num_sets, assoc, self.word_size, self.words_per_line)

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CacheConfig":
        """Build a config from a mapping (e.g. a loaded JSON file).

        Missing keys keep their defaults; unknown keys are rejected.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(f"unknown configuration keys: {', '.join(unknown)}")
        return cls(**data)


__all__ = ["MappingStrategy", "LevelGeometry", "CacheConfig"]
