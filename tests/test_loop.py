"""
Tests for the polling loop (cadence, drift correction, fault isolation)
"""

import unittest
from threading import Event

from snapshot_watch.core.models import CycleOutcome, Decision
from snapshot_watch.loop import LoopController, next_delay


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class ScriptedPipeline:
    """Each cycle takes a scripted duration on the fake clock."""

    def __init__(self, clock, durations, outcomes=None, errors=None):
        self.clock = clock
        self.durations = list(durations)
        self.outcomes = list(outcomes or [])
        self.errors = dict(errors or {})
        self.starts = []

    def run_cycle(self) -> CycleOutcome:
        index = len(self.starts)
        self.starts.append(self.clock.now)
        self.clock.advance(self.durations[index])
        if index in self.errors:
            raise self.errors[index]
        if self.outcomes:
            return self.outcomes[index]
        return CycleOutcome(Decision.SIMILAR)


class TestNextDelay(unittest.TestCase):
    """Test next_delay."""

    def test_remaining_interval(self):
        self.assertAlmostEqual(next_delay(1.0, 0.25), 0.75)

    def test_overrun_is_zero(self):
        self.assertEqual(next_delay(1.0, 3.0), 0.0)

    def test_exact_interval(self):
        self.assertEqual(next_delay(1.0, 1.0), 0.0)


class TestLoopController(unittest.TestCase):
    """Test LoopController scheduling."""

    def setUp(self):
        self.clock = FakeClock()
        self.waits = []

    def wait(self, seconds: float) -> None:
        self.waits.append(seconds)
        self.clock.advance(seconds)

    def controller(self, pipeline, interval_ms=1000, shutdown_event=None):
        return LoopController(
            pipeline,
            interval_ms=interval_ms,
            shutdown_event=shutdown_event,
            clock=self.clock,
            wait=self.wait,
            status_interval=0,
        )

    def test_fixed_cadence(self):
        """Fast cycles start exactly one interval apart."""
        pipeline = ScriptedPipeline(self.clock, [0.2, 0.3, 0.1, 0.4])

        self.controller(pipeline).run(max_cycles=4)

        self.assertEqual(len(pipeline.starts), 4)
        for expected, actual in zip([0.0, 1.0, 2.0, 3.0], pipeline.starts):
            self.assertAlmostEqual(actual, expected)

    def test_overrun_starts_immediately(self):
        """A slow cycle is followed by the next with zero added delay."""
        pipeline = ScriptedPipeline(self.clock, [0.3, 1.5, 0.2, 0.1])

        self.controller(pipeline).run(max_cycles=4)

        for expected, actual in zip([0.0, 1.0, 2.5, 3.5], pipeline.starts):
            self.assertAlmostEqual(actual, expected)
        # No wait at all after the overrun
        self.assertEqual(len(self.waits), 2)

    def test_no_backlog_after_overruns(self):
        """Overruns are not caught up later with a burst of cycles."""
        durations = [2.5, 0.1, 0.1, 0.1]
        pipeline = ScriptedPipeline(self.clock, durations)

        self.controller(pipeline).run(max_cycles=4)

        gaps = [b - a for a, b in zip(pipeline.starts, pipeline.starts[1:])]
        self.assertAlmostEqual(gaps[0], 2.5)
        for gap in gaps[1:]:
            self.assertAlmostEqual(gap, 1.0)

    def test_drift_bounded(self):
        """Start times never lag the ideal schedule by more than the overrun."""
        durations = [0.4, 0.9, 0.2, 0.99, 0.5, 0.3]
        pipeline = ScriptedPipeline(self.clock, durations)

        self.controller(pipeline).run(max_cycles=len(durations))

        for index, start in enumerate(pipeline.starts):
            self.assertAlmostEqual(start, float(index))

    def test_exception_does_not_stop_loop(self):
        """A pipeline that raises still gets its next tick."""
        pipeline = ScriptedPipeline(
            self.clock, [0.1, 0.1, 0.1], errors={1: RuntimeError("boom")}
        )

        stats = self.controller(pipeline).run(max_cycles=3)

        self.assertEqual(len(pipeline.starts), 3)
        self.assertEqual(stats.cycles, 3)
        self.assertEqual(stats.failures, 1)

    def test_stats(self):
        outcomes = [
            CycleOutcome(Decision.NOT_READY),
            CycleOutcome(Decision.DISSIMILAR),
            CycleOutcome(Decision.TOO_SOON),
            CycleOutcome(Decision.FAILED, stage="classify"),
        ]
        pipeline = ScriptedPipeline(self.clock, [0.1] * 4, outcomes=outcomes)

        stats = self.controller(pipeline).run(max_cycles=4)

        self.assertEqual(stats.cycles, 4)
        self.assertEqual(stats.detections, 1)
        self.assertEqual(stats.failures, 1)
        self.assertEqual(stats.decisions[Decision.TOO_SOON], 1)

    def test_shutdown_before_start(self):
        event = Event()
        event.set()
        pipeline = ScriptedPipeline(self.clock, [0.1])

        stats = self.controller(pipeline, shutdown_event=event).run()

        self.assertEqual(stats.cycles, 0)
        self.assertEqual(pipeline.starts, [])

    def test_shutdown_during_cycle(self):
        """Shutdown requested mid-cycle ends the loop after that cycle."""
        event = Event()
        pipeline = ScriptedPipeline(self.clock, [0.1, 0.1, 0.1])
        original = pipeline.run_cycle

        def run_and_stop():
            outcome = original()
            if len(pipeline.starts) == 2:
                event.set()
            return outcome

        pipeline.run_cycle = run_and_stop

        stats = self.controller(pipeline, shutdown_event=event).run()

        self.assertEqual(stats.cycles, 2)

    def test_invalid_interval(self):
        with self.assertRaises(ValueError):
            LoopController(ScriptedPipeline(self.clock, []), interval_ms=0)


if __name__ == "__main__":
    unittest.main()
