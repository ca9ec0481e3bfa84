from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List

@dataclass
class SearchMetrics:
    total_ms: float = 0.0
    explored: int = 0
    forks: int = 0
    discarded_loops: int = 0
    discarded_out_of_range: int = 0
    discarded_memo: int = 0
    peak_frontier: int = 0
    timeline: List[Dict[str, Any]] = field(default_factory=list)

    def add_timeline_point(self, **row):
        self.timeline.append(row)

    def inc_explored(self):
        self.explored += 1

    def inc_fork(self):
        self.forks += 1

    def observe_frontier(self, size: int):
        if size > self.peak_frontier:
            self.peak_frontier = size

    @property
    def discarded(self) -> int:
        return self.discarded_loops + self.discarded_out_of_range + self.discarded_memo

    def to_row(self) -> Dict[str, Any]:
        return {
            "total_ms": round(self.total_ms, 3),
            "explored": self.explored,
            "forks": self.forks,
            "discarded": self.discarded,
            "discarded_loops": self.discarded_loops,
            "discarded_out_of_range": self.discarded_out_of_range,
            "discarded_memo": self.discarded_memo,
            "peak_frontier": self.peak_frontier,
            "timeline_len": len(self.timeline),
        }
