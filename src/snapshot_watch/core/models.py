"""
Data models for change detection
"""

from dataclasses import dataclass, field
from enum import Enum

import numpy as np


@dataclass(frozen=True, eq=False)
class Frame:
    """
    One decoded snapshot.

    Attributes:
        pixels: Decoded image as an HxWxC uint8 array (BGR, as OpenCV decodes)
        captured_at: Epoch seconds when the snapshot was fetched
        raw: Encoded bytes exactly as returned by the snapshot source
    """

    pixels: np.ndarray
    captured_at: float
    raw: bytes = b""

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def shape(self) -> tuple[int, ...]:
        return tuple(self.pixels.shape)


@dataclass
class FrameStore:
    """
    The two most recent frames plus the time of the last confirmed detection.

    Attributes:
        last: Older frame of the comparable pair
        current: Newest frame
        last_detection_at: Epoch seconds of the last detection (0.0 = never)
    """

    last: Frame | None = None
    current: Frame | None = None
    last_detection_at: float = 0.0

    def install(self, frame: Frame) -> None:
        """Rotate current into last, then place the new frame."""
        if self.current is not None:
            self.last = self.current
        if self.last is not None:
            self.current = frame
        else:
            self.last = frame

    def has_pair(self) -> bool:
        """Check if both frames are present and can be compared."""
        return self.last is not None and self.current is not None


class Decision(Enum):
    """Outcome of one detection cycle."""

    NOT_READY = "not_ready"  # Fewer than two frames so far
    TOO_SOON = "too_soon"  # Inside the cooldown window
    SIMILAR = "similar"  # Below the diff threshold
    DISSIMILAR = "dissimilar"  # Change confirmed, classified and notified
    FAILED = "failed"  # Cycle aborted by an error


@dataclass(frozen=True)
class Label:
    """A classifier label with confidence in the 0-100 range."""

    name: str
    confidence: float


@dataclass
class CycleOutcome:
    """What happened during a single pipeline run."""

    decision: Decision
    score: float | None = None
    labels: list[Label] = field(default_factory=list)
    message_id: str | None = None
    stage: str | None = None
    error: Exception | None = None

    @property
    def failed(self) -> bool:
        return self.decision is Decision.FAILED

    @property
    def label_names(self) -> list[str]:
        return [label.name for label in self.labels]
