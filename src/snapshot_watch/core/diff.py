"""
Perceptual difference between two frames.

Two metrics are available:
  pixel_ratio - fraction of pixels whose largest channel delta exceeds a
                tolerance (same idea as a perceptual image diff: small noise
                is ignored, the score is "how much of the picture changed")
  mean_abs    - mean absolute channel difference, normalized to 0-1
"""

import logging

import numpy as np

from ..errors import FrameMismatchError
from ..utils.constants import DEFAULT_PIXEL_TOLERANCE
from .models import Frame

logger = logging.getLogger(__name__)

DIFF_METHODS = ("pixel_ratio", "mean_abs")


class DiffEngine:
    """Computes a dissimilarity score in [0, 1] for two same-sized frames."""

    def __init__(
        self,
        method: str = "pixel_ratio",
        pixel_tolerance: float = DEFAULT_PIXEL_TOLERANCE,
    ):
        if method not in DIFF_METHODS:
            raise ValueError(
                f"Unknown diff method '{method}' (expected one of {DIFF_METHODS})"
            )
        if not 0.0 <= pixel_tolerance < 1.0:
            raise ValueError("pixel_tolerance must be in [0, 1)")
        self.method = method
        self.pixel_tolerance = pixel_tolerance

    def diff(self, a: Frame, b: Frame) -> float:
        """
        Score how different two frames are.

        Args:
            a: First frame
            b: Second frame

        Returns:
            0.0 for identical frames, up to 1.0 for completely different ones

        Raises:
            FrameMismatchError: If the frames have different dimensions
        """
        if a.shape != b.shape:
            raise FrameMismatchError(
                f"Cannot diff frames of different size: {a.shape} vs {b.shape}"
            )

        # int16 so the subtraction cannot wrap around
        delta = np.abs(a.pixels.astype(np.int16) - b.pixels.astype(np.int16))

        if self.method == "mean_abs":
            return float(delta.mean() / 255.0)

        if delta.ndim == 3:
            delta = delta.max(axis=2)
        changed = delta > self.pixel_tolerance * 255.0
        return float(np.count_nonzero(changed) / changed.size)
