"""Plain-text reports for the console harness.

Both L2 percentages are printed and labelled: "of L1 misses" is the local
ratio that feeds AMAT, "of all accesses" is the global share of L2 hits.
"""
from typing import List, Optional

from memsim.core.config import CacheConfig
from memsim.core.hierarchy import AccessOutcome
from memsim.core.simulator import HitRecord
from memsim.data.stats_export import RunStatistics
from memsim.simulation.comparison import ComparisonResult


def clamp01(x: float) -> float:
    if x < 0.0:
        return 0.0
    if x > 1.0:
        return 1.0
    return float(x)


def _bar(ratio: float, width: int = 20) -> str:
    filled = int(round(clamp01(ratio) * width))
    return '#' * filled + '.' * (width - filled)


def format_run(title: str, stats: RunStatistics) -> str:
    n = stats.accesses
    lines = [
        title,
        '-' * len(title),
        f"L1 Cache Hits: {stats.l1_hits} ({stats.l1_hit_ratio * 100:.2f}%)",
        f"L2 Cache Hits: {stats.l2_hits} ({stats.l2_hit_ratio * 100:.2f}% of L1 misses, "
        f"{stats.l2_global_hit_ratio * 100:.2f}% of all accesses)",
        f"Memory Accesses: {stats.misses_to_memory} ({stats.misses_to_memory / n * 100:.2f}%)",
        f"Total Hit Rate: {stats.overall_hit_ratio * 100:.2f}%",
        f"Total Access Cost: {stats.total_cost} cycles",
        f"AMAT: {stats.average_access_time:.2f} cycles",
        f"Average Access Cost: {stats.average_cost_per_access:.2f} cycles/access",
    ]
    return '\n'.join(lines)


def format_best(result: ComparisonResult, pattern: Optional[str] = None) -> str:
    """Verdict line naming the strategy with the lowest average access time."""
    best = result.ranked(lambda st: st.average_access_time)[0]
    where = f" for {pattern} pattern" if pattern else ""
    return f"Best cache{where}: {best.label} ({result[best].average_access_time:.2f} cycles/access)"


def format_comparison(result: ComparisonResult, title: str = 'Cache Comparison Results',
                      pattern: Optional[str] = None) -> str:
    accesses = next(iter(result.stats.values())).accesses if result.stats else 0
    heading = f"{title} ({accesses} accesses)"
    parts = [heading, '=' * len(heading), '']
    for i, strategy in enumerate(result, start=1):
        parts.append(format_run(f"{i}. {strategy.label} Cache Performance:", result[strategy]))
        parts.append('')

    parts.append('Hit Rate Comparison:')
    for strategy in result:
        ratio = result[strategy].overall_hit_ratio
        parts.append(f"- {strategy.label:<18} {_bar(ratio)} {ratio * 100:6.2f}%")
    parts.append('')
    parts.append('Average Access Time Comparison:')
    for strategy in result:
        parts.append(f"- {strategy.label:<18} {result[strategy].average_access_time:8.2f} cycles/access")
    if result.stats:
        parts.append('')
        parts.append(format_best(result, pattern))
    return '\n'.join(parts)


def format_hit_summary(hit_log: List[HitRecord], config: CacheConfig, limit: int = 10) -> str:
    """Table of the first `limit` hits with the address split for L1."""
    shown = hit_log[:limit]
    lines = [
        f"Summary of Cache Hits (showing first {len(shown)} out of {len(hit_log)} hits)",
        'Address  | Cache  | WORD | BYTE',
        '-------- | ------ | ---- | ----',
    ]
    for rec in shown:
        word = (rec.address // config.word_size) % config.words_per_line
        byte = rec.address % config.word_size
        lines.append(f"{rec.address:#06x}   | {rec.level.value:<6} | {word:#x}  | {byte:#x}")
    if len(hit_log) > limit:
        lines.append(f"... and {len(hit_log) - limit} more hits (not shown)")
    return '\n'.join(lines)


def format_outcome(step: int, outcome: AccessOutcome) -> str:
    """One trace line per access, for step-by-step output."""
    return (f"#{step:<4} {outcome.address:#06x}  {outcome.level.value:<6} "
            f"cost={outcome.cost:<4} L1[tag={outcome.l1.tag:#x} set={outcome.l1.set_index} way={outcome.way}] "
            f"L2[tag={outcome.l2.tag:#x} set={outcome.l2.set_index}]")
