"""
Named timers with per-name statistics, used by the measure decorator.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class Timing:
    """A finished measurement."""
    name: str
    start_time: float
    duration_ms: float

@dataclass(frozen=True, eq=False)
class RunningTimer:
    """Handle of one started timer; stop it with ``PerformanceTracker.stop``."""
    name: str
    start_time: float
    started: float

class PerformanceTracker:
    """
    Tracks execution time of named operations.

    Every start() returns its own handle, so overlapping runs with the same
    name never mix up their timers. Stopping by name ends the most recent one.
    """
    def __init__(self):
        self.timers: Dict[str, List[RunningTimer]] = {}
        self.stats = {
            "calls": {},
            "total_time": {},
            "max_time": {},
            "min_time": {}
        }

    def start(self, name: str) -> RunningTimer:
        """Start a named timer."""
        timer = RunningTimer(name, time.time(), time.perf_counter())
        self.timers.setdefault(name, []).append(timer)
        return timer

    def stop(self, timer: Union[str, RunningTimer]) -> Optional[Timing]:
        """
        Stop a timer.

        Args:
            timer: The handle returned by start(), or a timer name to stop the
                most recently started timer with that name.

        Returns:
            Optional[Timing]: The measurement, or None if the timer is not running.
        """
        name = timer if isinstance(timer, str) else timer.name
        running = self.timers.get(name, [])
        if isinstance(timer, str):
            timer = running[-1] if running else None
        elif not any(t is timer for t in running):
            timer = None
        if timer is None:
            logger.warning(f"Timer '{name}' was never started.")
            return None

        elapsed = time.perf_counter() - timer.started
        running.remove(timer)
        if not running:
            del self.timers[name]

        # Update stats
        if name not in self.stats["calls"]:
            self.stats["calls"][name] = 0
            self.stats["total_time"][name] = 0.0
            self.stats["max_time"][name] = 0.0
            self.stats["min_time"][name] = float('inf')

        self.stats["calls"][name] += 1
        self.stats["total_time"][name] += elapsed
        self.stats["max_time"][name] = max(self.stats["max_time"][name], elapsed)
        self.stats["min_time"][name] = min(self.stats["min_time"][name], elapsed)

        return Timing(name, timer.start_time, elapsed * 1000.0)

    def get_stats(self, name: Optional[str] = None) -> Dict[str, Any]:
        """Get performance statistics (in seconds) for a timer or all timers."""
        if name:
            if name not in self.stats["calls"]:
                return {
                    "calls": 0,
                    "total_time": 0.0,
                    "avg_time": 0.0,
                    "max_time": 0.0,
                    "min_time": 0.0
                }

            calls = self.stats["calls"][name]
            total = self.stats["total_time"][name]
            return {
                "calls": calls,
                "total_time": total,
                "avg_time": total / calls if calls > 0 else 0.0,
                "max_time": self.stats["max_time"][name],
                "min_time": self.stats["min_time"][name]
            }
        return {timer: self.get_stats(timer) for timer in self.stats["calls"]}

    def reset_stats(self, name: Optional[str] = None) -> None:
        """Reset statistics for a timer or all timers."""
        if name:
            for table in self.stats.values():
                table.pop(name, None)
        else:
            self.stats = {
                "calls": {},
                "total_time": {},
                "max_time": {},
                "min_time": {}
            }

# Global performance tracker instance
performance = PerformanceTracker()
