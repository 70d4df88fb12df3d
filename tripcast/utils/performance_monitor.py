"""
Provider Call Timing
===================

Timing statistics for the planner's external calls and planning runs.

Calls are grouped by category ("weather", "geocoding", "location", "ai",
"pipeline"). A call is slow once it uses half of its category's configured
timeout and is logged as a warning once it reaches the full timeout.
Categories without a timeout (the pipeline itself) are only counted.

Classes:
    PerformanceMonitor: Collects per-call and per-category statistics
    CallStats: Counters for one measured operation

Functions:
    measure_time: Decorator recording duration and outcome of a call
    get_performance_stats: Statistics for every measured operation
    get_performance_report: Per-category summary with slow-call alerts

Author: Route Weather Trip Planner Team
"""

import time
import logging
import functools
import threading
from typing import Dict, List, Optional, Callable
from dataclasses import dataclass


SLOW_CALL_FRACTION = 0.5


def category_timeouts() -> Dict[str, float]:
    """
    Per-call timeout for each provider category, from configuration
    """
    from config import config

    return {
        "weather": max(config.ROUTE_WEATHER_TIMEOUT, config.HOME_WEATHER_TIMEOUT),
        "geocoding": config.GEOCODING_TIMEOUT,
        "ai": config.AI_API_TIMEOUT,
    }


@dataclass
class CallStats:
    """
    Counters for one measured operation

    Attributes:
        category (str): Provider category, e.g. "weather"
        operation (str): Function name, e.g. "fetch_current"
        call_count (int): Completed calls, failed ones included
        failure_count (int): Calls that raised
        total_time (float): Sum of durations in seconds
        max_time (float): Longest duration in seconds
        slow_count (int): Calls past the category's slow threshold
    """
    category: str
    operation: str
    call_count: int = 0
    failure_count: int = 0
    total_time: float = 0.0
    max_time: float = 0.0
    slow_count: int = 0

    @property
    def name(self) -> str:
        return f"{self.category}.{self.operation}"

    @property
    def avg_time(self) -> float:
        return self.total_time / self.call_count if self.call_count else 0.0

    def to_dict(self) -> Dict:
        return {
            "category": self.category,
            "operation": self.operation,
            "call_count": self.call_count,
            "failure_count": self.failure_count,
            "total_time": round(self.total_time, 4),
            "max_time": round(self.max_time, 4),
            "avg_time": round(self.avg_time, 4),
            "slow_count": self.slow_count
        }


class PerformanceMonitor:
    """Per-operation and per-category timing of provider calls"""

    def __init__(self, timeouts: Optional[Dict[str, float]] = None):
        """
        Args:
            timeouts (Dict[str, float]): Timeout per category in seconds;
                read from configuration on first use when omitted
        """
        self.logger = logging.getLogger(__name__)
        self._timeouts = timeouts
        self._stats: Dict[str, CallStats] = {}
        self._lock = threading.RLock()

    @property
    def timeouts(self) -> Dict[str, float]:
        if self._timeouts is None:
            self._timeouts = category_timeouts()
        return self._timeouts

    def slow_threshold(self, category: str) -> Optional[float]:
        timeout = self.timeouts.get(category)
        return timeout * SLOW_CALL_FRACTION if timeout else None

    def record_call(self, category: str, operation: str, execution_time: float,
                    failed: bool = False) -> None:
        """
        Record one finished call

        Args:
            category (str): Provider category
            operation (str): Function name
            execution_time (float): Duration in seconds
            failed (bool): Whether the call raised
        """
        key = f"{category}.{operation}"
        threshold = self.slow_threshold(category)
        timeout = self.timeouts.get(category)

        with self._lock:
            stats = self._stats.get(key)
            if stats is None:
                stats = self._stats[key] = CallStats(category, operation)

            stats.call_count += 1
            stats.total_time += execution_time
            stats.max_time = max(stats.max_time, execution_time)
            if failed:
                stats.failure_count += 1

            if threshold is not None and execution_time >= threshold:
                stats.slow_count += 1
                if timeout is not None and execution_time >= timeout:
                    self.logger.warning(f"{key} reached its {timeout}s timeout ({execution_time:.2f}s)")
                else:
                    self.logger.info(f"Slow call: {key} took {execution_time:.2f}s")

    def get_call_stats(self, name: str = None) -> Dict:
        """Stats for one "category.operation", or for all of them"""
        with self._lock:
            if name:
                stats = self._stats.get(name)
                return stats.to_dict() if stats else {}
            return {key: stats.to_dict() for key, stats in self._stats.items()}

    def get_category_summary(self) -> Dict[str, Dict]:
        """Totals per provider category"""
        summary: Dict[str, Dict] = {}
        with self._lock:
            for stats in self._stats.values():
                entry = summary.setdefault(stats.category, {
                    "calls": 0, "failures": 0, "slow_calls": 0, "total_time": 0.0,
                    "timeout_seconds": self.timeouts.get(stats.category)
                })
                entry["calls"] += stats.call_count
                entry["failures"] += stats.failure_count
                entry["slow_calls"] += stats.slow_count
                entry["total_time"] += stats.total_time

        for entry in summary.values():
            entry["avg_time"] = round(entry["total_time"] / entry["calls"], 4) if entry["calls"] else 0.0
            entry["total_time"] = round(entry["total_time"], 4)
        return summary

    def get_slowest_calls(self, limit: int = 5) -> List[Dict]:
        """Operations ordered by average duration, slowest first"""
        with self._lock:
            ordered = sorted(self._stats.values(), key=lambda s: s.avg_time, reverse=True)
            return [stats.to_dict() for stats in ordered[:limit]]

    def reset_stats(self) -> None:
        with self._lock:
            self._stats.clear()
        self.logger.info("Performance statistics reset")

    def generate_performance_report(self) -> Dict:
        """
        Summary of provider timing

        Returns:
            Dict: "categories" totals, "slowest_calls" and "alerts" for
                categories with slow calls
        """
        categories = self.get_category_summary()
        alerts = [
            {
                "category": category,
                "slow_calls": entry["slow_calls"],
                "timeout_seconds": entry["timeout_seconds"],
                "message": (f"{entry['slow_calls']} of {entry['calls']} {category} calls used "
                            f"over half of the {entry['timeout_seconds']}s timeout")
            }
            for category, entry in categories.items()
            if entry["slow_calls"]
        ]

        return {
            "categories": categories,
            "slowest_calls": self.get_slowest_calls(),
            "alerts": alerts
        }


# Global performance monitor instance
_performance_monitor = PerformanceMonitor()


def measure_time(func: Callable = None, *, category: str = None) -> Callable:
    """
    Decorator recording the duration and outcome of each call

    Args:
        func (Callable): Function to decorate
        category (str): Provider category; the defining module's name if omitted

    Examples:
        @measure_time(category="weather")
        def fetch_current():
            ...
    """
    def decorator(f: Callable) -> Callable:
        call_category = category or f.__module__.rsplit(".", 1)[-1]

        @functools.wraps(f)
        def wrapper(*args, **kwargs):
            start_time = time.time()
            failed = False
            try:
                return f(*args, **kwargs)
            except Exception:
                failed = True
                raise
            finally:
                _performance_monitor.record_call(call_category, f.__name__,
                                                 time.time() - start_time, failed)

        return wrapper

    # Handle both @measure_time and @measure_time() usage
    if func is None:
        return decorator
    else:
        return decorator(func)


def get_performance_stats() -> Dict:
    """Stats for every measured operation"""
    return _performance_monitor.get_call_stats()


def get_performance_report() -> Dict:
    """Per-category timing report"""
    return _performance_monitor.generate_performance_report()


def reset_performance_stats() -> None:
    _performance_monitor.reset_stats()
