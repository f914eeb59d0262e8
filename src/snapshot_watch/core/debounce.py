"""
Cooldown gate between detections.
"""

from ..utils.constants import DEFAULT_COOLDOWN_MS


class DebounceGate:
    """
    Suppresses detections that follow the previous one too closely.

    The gate only reads the last detection time; the pipeline owns updating it.
    """

    def __init__(self, cooldown_ms: int = DEFAULT_COOLDOWN_MS):
        if cooldown_ms < 0:
            raise ValueError("cooldown_ms must be >= 0")
        self.cooldown_ms = cooldown_ms

    def should_suppress(self, now: float, last_detection_at: float) -> bool:
        """True when `now` is still inside the cooldown window (times in seconds)."""
        return should_suppress(now, last_detection_at, self.cooldown_ms)


def should_suppress(now: float, last_detection_at: float, cooldown_ms: float) -> bool:
    """Return True if less than cooldown_ms has passed since last_detection_at."""
    return (now - last_detection_at) * 1000.0 < cooldown_ms
