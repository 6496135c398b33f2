"""Stage timing for the prediction path.

Instruments image generation and model inference with high-resolution
timing. Timings are observability only; nothing reads them to make decisions.
"""

from __future__ import annotations

import threading
import time
from collections import deque
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator


@dataclass
class StageStats:
    """Timing statistics for a single stage."""
    name: str
    avg_ms: float
    min_ms: float
    max_ms: float
    p95_ms: float
    call_count: int


class PipelineProfiler:
    """Rolling-window stage timer.

    Usage:
        profiler = PipelineProfiler()

        with profiler.stage("image_generation"):
            gray = rasterizer.rasterize(drawing)

        print(profiler.summary())
    """

    STAGES = [
        "image_generation",
        "prediction",
        "total",
    ]

    def __init__(self, window_size: int = 120):
        self._window_size = window_size
        self._timings: dict[str, deque[float]] = {
            s: deque(maxlen=window_size) for s in self.STAGES
        }
        self._counts: dict[str, int] = {s: 0 for s in self.STAGES}
        self._last: dict[str, float] = {}
        self._lock = threading.Lock()
        self._enabled = True

    @contextmanager
    def stage(self, name: str) -> Iterator[None]:
        """Context manager to time a stage.

        Time is recorded only when the block exits normally.
        """
        if not self._enabled:
            yield
            return

        t0 = time.perf_counter()
        yield
        elapsed_ms = (time.perf_counter() - t0) * 1000.0

        with self._lock:
            if name not in self._timings:
                self._timings[name] = deque(maxlen=self._window_size)
                self._counts[name] = 0
            self._timings[name].append(elapsed_ms)
            self._counts[name] += 1
            self._last[name] = elapsed_ms

    def last_ms(self, name: str) -> float | None:
        """Duration of the most recent completed run of ``name``."""
        with self._lock:
            return self._last.get(name)

    def get_stage_stats(self, name: str) -> StageStats | None:
        """Get stats for a specific stage."""
        with self._lock:
            timings = self._timings.get(name)
            if not timings:
                return None
            sorted_t = sorted(timings)
            count = self._counts.get(name, 0)

        n = len(sorted_t)
        return StageStats(
            name=name,
            avg_ms=sum(sorted_t) / n,
            min_ms=sorted_t[0],
            max_ms=sorted_t[-1],
            p95_ms=sorted_t[int(n * 0.95)] if n >= 2 else sorted_t[-1],
            call_count=count,
        )

    def summary(self) -> dict[str, dict]:
        """Get summary of all stages as a dict."""
        result = {}
        for name in list(self._timings):
            stats = self.get_stage_stats(name)
            if stats and stats.call_count > 0:
                result[name] = {
                    "avg_ms": round(stats.avg_ms, 3),
                    "min_ms": round(stats.min_ms, 3),
                    "max_ms": round(stats.max_ms, 3),
                    "p95_ms": round(stats.p95_ms, 3),
                    "calls": stats.call_count,
                }
        return result

    def reset(self):
        """Clear all timing data."""
        with self._lock:
            for d in self._timings.values():
                d.clear()
            for k in self._counts:
                self._counts[k] = 0
            self._last.clear()

    @property
    def enabled(self) -> bool:
        return self._enabled

    @enabled.setter
    def enabled(self, value: bool):
        self._enabled = value
