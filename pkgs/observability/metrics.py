"""Counters and timers for engine calls."""

import time
from typing import Any, Dict


class MetricsCollector:
    """Centralized metrics collection and aggregation."""

    def __init__(self):
        self.metrics: Dict[str, Any] = {}
        self.counters: Dict[str, int] = {}
        self.timers: Dict[str, float] = {}
        self.start_times: Dict[str, float] = {}

    def set_metric(self, name: str, value: Any):
        self.metrics[name] = value

    def increment_counter(self, name: str, delta: int = 1):
        self.counters[name] = self.counters.get(name, 0) + delta

    def get_counter(self, name: str) -> int:
        return self.counters.get(name, 0)

    def start_timer(self, name: str):
        self.start_times[name] = time.perf_counter()

    def stop_timer(self, name: str) -> float:
        """Stop a timer and record duration; 0.0 if it was never started."""
        if name in self.start_times:
            duration = time.perf_counter() - self.start_times.pop(name)
            self.timers[name] = duration
            return duration
        return 0.0

    def get_all_metrics(self) -> Dict[str, Any]:
        return {
            "metrics": self.metrics.copy(),
            "counters": self.counters.copy(),
            "timers": self.timers.copy()
        }

    def reset(self):
        self.metrics.clear()
        self.counters.clear()
        self.timers.clear()
        self.start_times.clear()

    def summary_stats(self) -> Dict[str, Any]:
        return {
            "total_metrics": len(self.metrics),
            "total_counters": len(self.counters),
            "total_timers": len(self.timers),
            "counter_sum": sum(self.counters.values()),
            "timer_total": sum(self.timers.values())
        }
