"""
Polling loop.

Runs the pipeline on a fixed cadence. Cycles never overlap: the next one is
scheduled only after the previous one returns, after
max(0, interval - elapsed). An overrun starts the next cycle immediately and
no backlog is carried forward.
"""

import logging
import time
from collections import Counter
from dataclasses import dataclass, field
from threading import Event
from typing import Callable

from .core.models import CycleOutcome, Decision
from .pipeline import DetectionPipeline
from .utils.constants import DEFAULT_POLL_INTERVAL_MS, STATUS_REPORT_INTERVAL

logger = logging.getLogger(__name__)


def next_delay(interval: float, elapsed: float) -> float:
    """Seconds to wait before the next cycle."""
    return max(0.0, interval - elapsed)


@dataclass
class LoopStats:
    """Counters accumulated over the life of the loop."""

    cycles: int = 0
    decisions: Counter = field(default_factory=Counter)
    started_at: float = field(default_factory=time.time)

    def record(self, outcome: CycleOutcome) -> None:
        self.cycles += 1
        self.decisions[outcome.decision] += 1

    @property
    def detections(self) -> int:
        return self.decisions[Decision.DISSIMILAR]

    @property
    def failures(self) -> int:
        return self.decisions[Decision.FAILED]


class LoopController:
    """Drives DetectionPipeline once per tick until shutdown."""

    def __init__(
        self,
        pipeline: DetectionPipeline,
        interval_ms: int = DEFAULT_POLL_INTERVAL_MS,
        shutdown_event: Event | None = None,
        clock: Callable[[], float] = time.monotonic,
        wait: Callable[[float], object] | None = None,
        status_interval: int = STATUS_REPORT_INTERVAL,
    ):
        if interval_ms <= 0:
            raise ValueError("interval_ms must be positive")
        self.pipeline = pipeline
        self.interval = interval_ms / 1000.0
        self.shutdown_event = shutdown_event or Event()
        self._clock = clock
        # Waiting on the event lets a shutdown signal cut the sleep short
        self._wait = wait or self.shutdown_event.wait
        self.status_interval = status_interval
        self.stats = LoopStats()

    def stop(self) -> None:
        self.shutdown_event.set()

    def tick(self) -> float:
        """
        Run one cycle.

        Returns:
            Seconds to wait before the next cycle
        """
        started = self._clock()
        try:
            outcome = self.pipeline.run_cycle()
        except Exception as e:
            # run_cycle contains its own failures; this only guards the loop
            logger.error(f"Unexpected error in detection cycle: {e}", exc_info=True)
            outcome = CycleOutcome(Decision.FAILED, stage="loop", error=e)
        self.stats.record(outcome)

        elapsed = self._clock() - started
        delay = next_delay(self.interval, elapsed)
        if delay == 0.0:
            logger.debug(
                f"Cycle took {elapsed * 1000:.0f}ms (interval {self.interval * 1000:.0f}ms), "
                "starting next immediately"
            )
        return delay

    def run(self, max_cycles: int | None = None) -> LoopStats:
        """
        Tick until shutdown (or max_cycles, when given).

        Returns:
            Accumulated loop statistics
        """
        logger.info(f"Polling every {self.interval * 1000:.0f}ms")
        try:
            while not self.shutdown_event.is_set():
                delay = self.tick()

                if self.status_interval and self.stats.cycles % self.status_interval == 0:
                    _log_status(self.stats)

                if max_cycles is not None and self.stats.cycles >= max_cycles:
                    break
                if delay > 0:
                    self._wait(delay)

        except KeyboardInterrupt:
            logger.info("Watcher stopped by user")
        finally:
            _log_final_stats(self.stats)

        return self.stats


def _log_status(stats: LoopStats) -> None:
    """Log periodic status."""
    elapsed = time.time() - stats.started_at
    logger.info(
        f"[{elapsed / 60:.1f}min] Cycles {stats.cycles} | "
        f"Detections: {stats.detections} | Failures: {stats.failures}"
    )


def _log_final_stats(stats: LoopStats) -> None:
    """Log final statistics."""
    elapsed = time.time() - stats.started_at

    logger.info("Watcher stopped")
    logger.info(f"Runtime: {elapsed / 60:.1f} minutes")
    logger.info(f"Cycles: {stats.cycles}")
    for decision in Decision:
        count = stats.decisions[decision]
        if count:
            logger.info(f"  {decision.value}: {count}")
