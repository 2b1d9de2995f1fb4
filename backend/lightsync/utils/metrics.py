"""
LightSync Metrics Collection
In-process counters and timings for the accent pipeline and device updates.
"""
import time
from collections import defaultdict, Counter
from typing import Any, Dict, List, Optional
from threading import Lock


class MetricsCollector:
    """Simple in-process metrics collector."""

    def __init__(self):
        """Initialize metrics collector."""
        self._lock = Lock()
        self._counters: Dict[str, int] = Counter()
        self._timings: Dict[str, List[float]] = defaultdict(list)
        self._start_time = time.time()

    def increment(self, name: str, amount: int = 1):
        """Increment a named counter."""
        with self._lock:
            self._counters[name] += amount

    def increment_accent_pick(self):
        """Count one accent color computation."""
        self.increment("accent_picks_total")

    def increment_fallback(self, reason: str):
        """Count a fallback color by reason (empty_palette, extraction_failed, zero_luminance)."""
        self.increment(f"accent_fallback_total_{reason}")

    def increment_track_change(self):
        """Count a detected track change."""
        self.increment("track_changes_total")

    def increment_govee_command(self):
        """Count a command sent to the Govee cloud."""
        self.increment("govee_commands_total")

    def increment_govee_backoff(self, status_code: int):
        """Count a backoff triggered by a Govee status code."""
        self.increment(f"govee_backoff_total_{status_code}")

    def record_timing(self, operation: str, duration_ms: float):
        """Record timing for an operation."""
        with self._lock:
            self._timings[f"{operation}_duration_ms"].append(duration_ms)

    def get_counters(self) -> Dict[str, int]:
        """Get current counter values."""
        with self._lock:
            return dict(self._counters)

    def get_timing_stats(self) -> Dict[str, Dict[str, float]]:
        """Get timing statistics."""
        with self._lock:
            stats = {}
            for operation, timings in self._timings.items():
                if timings:
                    stats[operation] = {
                        "count": len(timings),
                        "mean": sum(timings) / len(timings),
                        "min": min(timings),
                        "max": max(timings),
                        "p50": self._percentile(timings, 50),
                        "p95": self._percentile(timings, 95)
                    }
            return stats

    def get_uptime_seconds(self) -> float:
        """Get service uptime in seconds."""
        return time.time() - self._start_time

    def get_summary(self) -> Dict[str, Any]:
        """Get complete metrics summary."""
        return {
            "uptime_seconds": self.get_uptime_seconds(),
            "counters": self.get_counters(),
            "timing_stats": self.get_timing_stats()
        }

    def reset(self):
        """Reset all metrics (for testing)."""
        with self._lock:
            self._counters.clear()
            self._timings.clear()
            self._start_time = time.time()

    @staticmethod
    def _percentile(data: List[float], percentile: int) -> float:
        """Calculate percentile of data."""
        if not data:
            return 0.0

        sorted_data = sorted(data)
        k = (len(sorted_data) - 1) * percentile / 100
        f = int(k)
        c = k - f

        if f + 1 < len(sorted_data):
            return sorted_data[f] + c * (sorted_data[f + 1] - sorted_data[f])
        else:
            return sorted_data[f]


# Global metrics instance
_metrics: Optional[MetricsCollector] = None


def get_metrics() -> MetricsCollector:
    """Get or create global metrics collector."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsCollector()
    return _metrics


def reset_metrics():
    """Reset global metrics (for testing)."""
    global _metrics
    if _metrics is not None:
        _metrics.reset()
