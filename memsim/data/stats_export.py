"""Run statistics and exporters.

`StatsAggregator` counts outcomes while a run is in progress;
`finalize` freezes them into a `RunStatistics` with the derived ratios:

    l1_hit_ratio = l1_hits / accesses
    l2_hit_ratio = l2_hits / max(1, l1_misses)       (local, over L1 misses)
    AMAT         = l1_cost + (1 - l1_hit_ratio)
                   * (l2_cost + (1 - l2_hit_ratio) * memory_cost)

Because costs are charged cumulatively, AMAT equals total_cost / accesses
for every run; both are reported so one can check the other.

The L2 ratio over *total* accesses is reported separately as
`l2_global_hit_ratio`.
"""
import csv
import json
from dataclasses import asdict, dataclass
from typing import Dict, List, Mapping, Optional

from memsim.core.config import CacheConfig
from memsim.core.errors import AllocationError
from memsim.core.hierarchy import AccessLevel, AccessOutcome


@dataclass(frozen=True)
class RunStatistics:
    accesses: int
    l1_hits: int
    l2_hits: int
    misses_to_memory: int
    total_cost: int
    l1_hit_ratio: float
    l2_hit_ratio: float
    l2_global_hit_ratio: float
    average_access_time: float

    @property
    def l1_misses(self) -> int:
        return self.accesses - self.l1_hits

    @property
    def overall_hit_ratio(self) -> float:
        return (self.l1_hits + self.l2_hits) / self.accesses

    @property
    def average_cost_per_access(self) -> float:
        return self.total_cost / self.accesses

    def as_dict(self) -> Dict[str, float]:
        data = asdict(self)
        data['overall_hit_ratio'] = self.overall_hit_ratio
        data['average_cost_per_access'] = self.average_cost_per_access
        return data


class StatsAggregator:
    def __init__(self, config: CacheConfig):
        self.config = config
        self.reset()

    def reset(self):
        # counters start from zero
        self.accesses = 0
        self.l1_hits = 0
        self.l2_hits = 0
        self.misses_to_memory = 0
        self.total_cost = 0

    def record(self, outcome: AccessOutcome):
        self.accesses += 1
        if outcome.level is AccessLevel.L1:
            self.l1_hits += 1
        elif outcome.level is AccessLevel.L2:
            self.l2_hits += 1
        else:
            self.misses_to_memory += 1
        self.total_cost += outcome.cost

    @property
    def hit_rate(self):
        return ((self.l1_hits + self.l2_hits) / self.accesses) if self.accesses else 0.0

    def finalize(self, total_accesses: Optional[int] = None) -> RunStatistics:
        total = self.accesses if total_accesses is None else int(total_accesses)
        if total <= 0:
            raise AllocationError("cannot summarise a run with no accesses")
        cfg = self.config
        l1_ratio = self.l1_hits / total
        l1_misses = total - self.l1_hits
        l2_ratio = self.l2_hits / max(1, l1_misses)
        amat = cfg.l1_cost + (1 - l1_ratio) * (cfg.l2_cost + (1 - l2_ratio) * cfg.memory_cost)
        return RunStatistics(
            accesses=total,
            l1_hits=self.l1_hits,
            l2_hits=self.l2_hits,
            misses_to_memory=self.misses_to_memory,
            total_cost=self.total_cost,
            l1_hit_ratio=l1_ratio,
            l2_hit_ratio=l2_ratio,
            l2_global_hit_ratio=self.l2_hits / total,
            average_access_time=amat,
        )


def export_chart_json(hit_rate_history: Mapping[str, List[float]], stats: Mapping[str, Mapping[str, float]], fpath: str) -> str:
    """Export per-strategy hit-rate history and stats to a JSON file. Returns the path."""
    data = {
        'hit_rate_history': {k: list(v) for k, v in hit_rate_history.items()},
        'stats': {k: dict(v) for k, v in stats.items()},
    }
    with open(fpath, 'w', encoding='utf-8') as fh:
        json.dump(data, fh, indent=2)
    return fpath


def export_chart_pdf(hit_rate_history: Mapping[str, List[float]], fpath: str) -> str:
    """Render hit-rate history (one line per strategy) to a PDF using matplotlib."""
    import matplotlib
    matplotlib.use('Agg')
    import matplotlib.pyplot as plt

    fig, ax = plt.subplots(figsize=(6, 2.5))
    for name, history in hit_rate_history.items():
        data = list(history) or [0]
        ax.plot(range(len(data)), data, linewidth=2, label=name)
    ax.set_ylim(0, 1)
    ax.set_xlabel('Access')
    ax.set_ylabel('Hit rate')
    ax.legend(loc='lower right', fontsize='small')
    fig.tight_layout()
    fig.savefig(fpath, format='pdf', dpi=150)
    plt.close(fig)
    return fpath


def export_comparison_pdf(results: Mapping[str, RunStatistics], fpath: str) -> str:
    """Bar chart of hit ratios and AMAT, side by side for each strategy."""
    import matplotlib
    matplotlib.use('Agg')
    import matplotlib.pyplot as plt

    names = list(results)
    l1 = [results[n].l1_hit_ratio for n in names]
    overall = [results[n].overall_hit_ratio for n in names]
    amat = [results[n].average_access_time for n in names]
    xs = range(len(names))

    fig, (ax_hit, ax_amat) = plt.subplots(1, 2, figsize=(9, 3))
    ax_hit.bar([x - 0.2 for x in xs], l1, width=0.4, label='L1')
    ax_hit.bar([x + 0.2 for x in xs], overall, width=0.4, label='L1+L2')
    ax_hit.set_xticks(list(xs))
    ax_hit.set_xticklabels(names, fontsize='small')
    ax_hit.set_ylim(0, 1)
    ax_hit.set_ylabel('Hit ratio')
    ax_hit.legend(fontsize='small')
    ax_amat.bar(list(xs), amat, color='#FFA500')
    ax_amat.set_xticks(list(xs))
    ax_amat.set_xticklabels(names, fontsize='small')
    ax_amat.set_ylabel('AMAT (cycles)')
    fig.tight_layout()
    fig.savefig(fpath, format='pdf', dpi=150)
    plt.close(fig)
    return fpath


class Exporter:
    COLUMNS = [
        'strategy', 'accesses', 'l1_hits', 'l2_hits', 'misses_to_memory', 'total_cost',
        'l1_hit_ratio', 'l2_hit_ratio', 'l2_global_hit_ratio', 'overall_hit_ratio',
        'average_access_time', 'average_cost_per_access',
    ]

    @staticmethod
    def export_stats_csv(path: str, results: Mapping[str, RunStatistics]):
        with open(path, 'w', newline='') as f:
            writer = csv.writer(f)
            writer.writerow(Exporter.COLUMNS)
            for name, stats in results.items():
                row = stats.as_dict()
                writer.writerow([name] + [row[c] for c in Exporter.COLUMNS[1:]])
        return path
