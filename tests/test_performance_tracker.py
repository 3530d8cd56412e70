#!/usr/bin/env python3
"""
Test suite for the PerformanceTracker.
"""

import unittest
from unittest.mock import patch

from performance_tracker import PerformanceTracker, Timing


class TestPerformanceTracker(unittest.TestCase):
    def setUp(self) -> None:
        self.tracker = PerformanceTracker()

    def test_start_stop(self):
        with patch("performance_tracker.time.perf_counter", side_effect=[1.0, 1.5]), \
                patch("performance_tracker.time.time", return_value=42.0):
            self.tracker.start("task")
            timing = self.tracker.stop("task")

        self.assertEqual(timing, Timing("task", 42.0, 500.0))
        self.assertEqual(self.tracker.timers, {})

    def test_stop_unknown_timer(self):
        with self.assertLogs("performance_tracker", level="WARNING") as logs:
            self.assertIsNone(self.tracker.stop("missing"))
        self.assertIn("Timer 'missing' was never started.", logs.output[0])

    def test_nested_timers_with_same_name(self):
        with patch("performance_tracker.time.perf_counter", side_effect=[0.0, 1.0, 1.5, 3.0]):
            self.tracker.start("recursive")
            self.tracker.start("recursive")
            inner = self.tracker.stop("recursive")
            outer = self.tracker.stop("recursive")

        self.assertEqual(inner.duration_ms, 500.0)
        self.assertEqual(outer.duration_ms, 3000.0)

    def test_stop_by_handle(self):
        with patch("performance_tracker.time.perf_counter", side_effect=[0.0, 1.0, 1.5, 3.0]):
            first = self.tracker.start("job")
            second = self.tracker.start("job")
            from_first = self.tracker.stop(first)
            from_second = self.tracker.stop(second)

        self.assertEqual(from_first.duration_ms, 1500.0)
        self.assertEqual(from_second.duration_ms, 2000.0)
        self.assertEqual(self.tracker.get_stats("job")["calls"], 2)

    def test_stop_handle_twice(self):
        timer = self.tracker.start("once")
        self.assertIsNotNone(self.tracker.stop(timer))
        with self.assertLogs("performance_tracker", level="WARNING"):
            self.assertIsNone(self.tracker.stop(timer))

    def test_stats(self):
        with patch("performance_tracker.time.perf_counter", side_effect=[0.0, 1.0, 2.0, 5.0]):
            for _ in range(2):
                self.tracker.start("task")
                self.tracker.stop("task")

        self.assertEqual(self.tracker.get_stats("task"), {
            "calls": 2,
            "total_time": 4.0,
            "avg_time": 2.0,
            "max_time": 3.0,
            "min_time": 1.0,
        })
        self.assertEqual(list(self.tracker.get_stats()), ["task"])
        self.assertEqual(self.tracker.get_stats("other")["calls"], 0)

    def test_reset_stats(self):
        for name in ["a", "b"]:
            self.tracker.start(name)
            self.tracker.stop(name)

        self.tracker.reset_stats("a")
        self.assertEqual(list(self.tracker.get_stats()), ["b"])
        self.tracker.reset_stats()
        self.assertEqual(self.tracker.get_stats(), {})


if __name__ == '__main__':
    unittest.main()
