"""
Timing utilities for the Hydro Query Gateway.

Measures wall-clock time of database work so every route can log how long
its query took and how many rows it produced.

Usage examples:
    from hydro_gateway.utils.profiler import query_timer

    with query_timer("weir") as stats:
        rows = await query.execute(conn, params)
        stats.rows = len(rows)

    print(stats.duration_ms, stats.rows)
"""

from __future__ import annotations

import contextlib
import time
from dataclasses import dataclass, field
from typing import Generator, Optional


@dataclass
class ProfileStats:
    """
    Container for timing measurements of one query.
    """

    label: str
    start_ts: float = field(default=0.0)
    end_ts: float = field(default=0.0)
    duration_seconds: float = field(default=0.0)
    rows: Optional[int] = field(default=None)

    @property
    def duration_ms(self) -> float:
        return round(self.duration_seconds * 1000.0, 2)


@contextlib.contextmanager
def query_timer(label: str) -> Generator[ProfileStats, None, None]:
    """
    Context manager timing a block with `time.perf_counter`.

    The stats object is filled in even when the block raises, so failures
    can be logged with their elapsed time as well.
    """
    stats = ProfileStats(label=label)
    stats.start_ts = time.perf_counter()
    try:
        yield stats
    finally:
        stats.end_ts = time.perf_counter()
        stats.duration_seconds = stats.end_ts - stats.start_ts


__all__ = ["ProfileStats", "query_timer"]
