"""Prometheus-compatible metrics for drawing predictions.

Generates the text exposition format directly, no client library needed.

Tracked metrics:
- sketch_gestures_predictions_total (counter)
- sketch_gestures_failures_total (counter, by failure kind)
- sketch_gestures_labels_total (counter, by emitted label)
- sketch_gestures_prediction_latency_seconds (histogram)
"""

from __future__ import annotations

import threading
import time
from collections import Counter


class _Histogram:
    """Simple histogram with configurable buckets."""

    def __init__(self, buckets: list[float]):
        self.buckets = sorted(buckets)
        self.bucket_counts = [0] * len(self.buckets)
        self.count = 0
        self.sum = 0.0
        self._lock = threading.Lock()

    def observe(self, value: float):
        with self._lock:
            self.count += 1
            self.sum += value
            for i, b in enumerate(self.buckets):
                if value <= b:
                    self.bucket_counts[i] += 1
                    break

    def render(self, name: str, help_text: str) -> str:
        lines = [
            f"# HELP {name} {help_text}",
            f"# TYPE {name} histogram",
        ]
        with self._lock:
            cumulative = 0
            for i, b in enumerate(self.buckets):
                cumulative += self.bucket_counts[i]
                lines.append(f'{name}_bucket{{le="{b}"}} {cumulative}')
            lines.append(f'{name}_bucket{{le="+Inf"}} {self.count}')
            lines.append(f"{name}_sum {self.sum:.6f}")
            lines.append(f"{name}_count {self.count}")
        return "\n".join(lines)


class MetricsCollector:
    """Collects prediction counters and latency."""

    def __init__(self):
        self._predictions_total = 0
        self._failure_counts: Counter = Counter()
        self._label_counts: Counter = Counter()
        self._lock = threading.Lock()

        # Latency histogram: buckets from 1ms to 250ms
        self._latency = _Histogram(
            [0.001, 0.002, 0.005, 0.010, 0.020, 0.050, 0.100, 0.250]
        )

        self._start_time = time.time()

    def record_prediction(self, latency_seconds: float):
        with self._lock:
            self._predictions_total += 1
        self._latency.observe(latency_seconds)

    def record_failure(self, kind: str):
        with self._lock:
            self._failure_counts[kind] += 1

    def record_label(self, label: str):
        with self._lock:
            self._label_counts[label] += 1

    def render(self) -> str:
        """Render all metrics in Prometheus text exposition format."""
        lines: list[str] = []

        uptime = time.time() - self._start_time
        lines.append("# HELP sketch_gestures_uptime_seconds Time since collector creation")
        lines.append("# TYPE sketch_gestures_uptime_seconds gauge")
        lines.append(f"sketch_gestures_uptime_seconds {uptime:.1f}")
        lines.append("")

        with self._lock:
            predictions = self._predictions_total
            failures = sorted(self._failure_counts.items())
            labels = sorted(self._label_counts.items())

        lines.append("# HELP sketch_gestures_predictions_total Score vectors produced")
        lines.append("# TYPE sketch_gestures_predictions_total counter")
        lines.append(f"sketch_gestures_predictions_total {predictions}")
        lines.append("")

        lines.append("# HELP sketch_gestures_failures_total Drawings that produced no prediction, by failure kind")
        lines.append("# TYPE sketch_gestures_failures_total counter")
        for kind, count in failures:
            lines.append(f'sketch_gestures_failures_total{{kind="{kind}"}} {count}')
        lines.append("")

        lines.append("# HELP sketch_gestures_labels_total Labels emitted to the caller")
        lines.append("# TYPE sketch_gestures_labels_total counter")
        for name, count in labels:
            lines.append(f'sketch_gestures_labels_total{{label="{name}"}} {count}')
        lines.append("")

        lines.append(self._latency.render(
            "sketch_gestures_prediction_latency_seconds",
            "End-to-end prediction latency in seconds"
        ))
        lines.append("")

        return "\n".join(lines) + "\n"

    @property
    def predictions_total(self) -> int:
        with self._lock:
            return self._predictions_total

    @property
    def failure_counts(self) -> dict[str, int]:
        with self._lock:
            return dict(self._failure_counts)

    @property
    def label_counts(self) -> dict[str, int]:
        with self._lock:
            return dict(self._label_counts)
