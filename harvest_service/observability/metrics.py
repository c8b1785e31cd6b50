"""
In-process metrics for a harvest run.
"""

import time
from collections import defaultdict
from datetime import datetime, timezone
from typing import Any, Dict, Optional


class MetricsCollector:
    """
    Counters, gauges and timing observations for one run.
    Only touched from the orchestrating task, so no locking.
    """

    def __init__(self):
        self._counters: Dict[str, float] = defaultdict(float)
        self._gauges: Dict[str, float] = {}
        self._observations: Dict[str, Dict[str, float]] = {}
        self._start_time = datetime.now(timezone.utc)

    # Counter methods
    def inc(self, name: str, value: float = 1.0):
        self._counters[name] += value

    # Gauge methods
    def set(self, name: str, value: float):
        self._gauges[name] = value

    # Observation methods
    def observe(self, name: str, value: float):
        obs = self._observations.setdefault(name, {"sum": 0.0, "count": 0, "max": 0.0})
        obs["sum"] += value
        obs["count"] += 1
        obs["max"] = max(obs["max"], value)

    def timer(self, name: str) -> "MetricTimer":
        """Context manager for timing operations."""
        return MetricTimer(self, name)

    def snapshot(self) -> Dict[str, Any]:
        return {
            "uptime_seconds": round((datetime.now(timezone.utc) - self._start_time).total_seconds(), 3),
            "counters": dict(self._counters),
            "gauges": dict(self._gauges),
            "observations": {
                k: {**v, "avg": v["sum"] / v["count"] if v["count"] else 0.0}
                for k, v in self._observations.items()
            },
        }


class MetricTimer:
    """Records elapsed seconds as an observation."""

    def __init__(self, collector: MetricsCollector, name: str):
        self.collector = collector
        self.name = name
        self.start_time: Optional[float] = None

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.collector.observe(self.name, time.perf_counter() - self.start_time)

    async def __aenter__(self):
        return self.__enter__()

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        return self.__exit__(exc_type, exc_val, exc_tb)
