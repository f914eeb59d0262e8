"""
Snapshot Watcher

Polls a camera snapshot endpoint, detects visual change between consecutive
frames, labels the changed frame with an image classification service and
sends a notification with the result.

Package structure:
  core/         - Frame state, sampling, diffing, cooldown gate
  classifiers/  - Image labeling backends (Rekognition, HTTP)
  notifiers/    - Delivery backends (email, ntfy)
  config/       - Configuration loading and validation
  utils/        - Constants
"""

__version__ = "1.0.0"

from .config import Config, ConfigValidationError, load_config
from .core import Decision, DiffEngine, Frame, FrameStore, Label
from .loop import LoopController
from .pipeline import DetectionPipeline

__all__ = [
    "Config",
    "ConfigValidationError",
    "Decision",
    "DetectionPipeline",
    "DiffEngine",
    "Frame",
    "FrameStore",
    "Label",
    "LoopController",
    "load_config",
]
