"""
Utility modules for constants.
"""

from .constants import (
    DEFAULT_CONFIDENCE_THRESHOLD,
    DEFAULT_COOLDOWN_MS,
    DEFAULT_DIFF_THRESHOLD,
    DEFAULT_POLL_INTERVAL_MS,
    DEFAULT_TEMP_DIR,
    STATUS_REPORT_INTERVAL,
)

__all__ = [
    "DEFAULT_CONFIDENCE_THRESHOLD",
    "DEFAULT_COOLDOWN_MS",
    "DEFAULT_DIFF_THRESHOLD",
    "DEFAULT_POLL_INTERVAL_MS",
    "DEFAULT_TEMP_DIR",
    "STATUS_REPORT_INTERVAL",
]
