"""Operation statistics data structures and presentation utilities.

The triangulation keeps one OpStats per operation name ('setup', 'insert')
so callers can see how often inserts were rejected and how much
legalization work they caused.
"""
from __future__ import annotations

import sys
from dataclasses import dataclass, fields
from typing import Dict, Any


@dataclass
class OpStats:
    attempts: int = 0
    success: int = 0
    fail: int = 0
    # Rejection breakdown (fail == sum of these for inserts)
    out_of_region: int = 0
    duplicates: int = 0
    capacity_rejects: int = 0
    # Work counters
    walk_steps: int = 0
    walk_fallbacks: int = 0
    flip_checks: int = 0
    flips: int = 0
    # Timing (seconds)
    time_total: float = 0.0
    time_max: float = 0.0
    time_min: float = 0.0  # 0 means uninitialized

    def record_time(self, duration: float) -> None:
        self.time_total += duration
        if duration > self.time_max:
            self.time_max = duration
        if self.time_min == 0.0 or duration < self.time_min:
            self.time_min = duration

    def reset(self) -> None:
        for f in fields(self):
            setattr(self, f.name, f.default)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'attempts': self.attempts,
            'success': self.success,
            'fail': self.fail,
            'out_of_region': self.out_of_region,
            'duplicates': self.duplicates,
            'capacity_rejects': self.capacity_rejects,
            'walk_steps': self.walk_steps,
            'walk_fallbacks': self.walk_fallbacks,
            'flip_checks': self.flip_checks,
            'flips': self.flips,
            'success_rate': (self.success / self.attempts) if self.attempts else 0.0,
            'flips_per_success': (self.flips / self.success) if self.success else 0.0,
            'steps_per_attempt': (self.walk_steps / self.attempts) if self.attempts else 0.0,
            'time_total': self.time_total,
            'time_max': self.time_max,
            'time_min': self.time_min,
            'time_avg': (self.time_total / self.attempts) if self.attempts else 0.0,
        }


def format_stats_table(stats_dict) -> str:
    """Return a human readable multi-line table summarizing op stats."""
    if not stats_dict:
        return "<no stats>"
    header = ["op", "attempts", "succ", "fail", "outside", "dup", "full", "flips", "steps/op", "avg_ms", "max_ms"]
    rows = []
    for op in sorted(stats_dict.keys()):
        s = stats_dict[op]
        rows.append([
            op, str(s['attempts']), str(s['success']), str(s['fail']),
            str(s['out_of_region']), str(s['duplicates']), str(s['capacity_rejects']),
            str(s['flips']), f"{s['steps_per_attempt']:8.2f}",
            f"{s['time_avg'] * 1000.0:8.3f}", f"{s['time_max'] * 1000.0:8.3f}",
        ])
    col_w = [len(h) for h in header]
    for r in rows:
        for i, v in enumerate(r):
            if len(v) > col_w[i]:
                col_w[i] = len(v)

    def fmt(r):
        return " ".join(r[i].rjust(col_w[i]) for i in range(len(r)))
    lines = [fmt(header), "-" * (sum(col_w) + len(col_w) - 1)] + [fmt(r) for r in rows]
    return "\n".join(lines)


def print_stats(stats_dict, file=None, pretty=True):  # pragma: no cover - formatting wrapper
    out = file or sys.stdout
    if not pretty:
        print(stats_dict, file=out)
        return
    print(format_stats_table(stats_dict), file=out)


__all__ = ["OpStats", "print_stats", "format_stats_table"]
