"""
Core change-detection components.

Frame state, sampling, diffing and the cooldown gate. The pipeline that
sequences them lives in the package root (pipeline.py).
"""

from .debounce import DebounceGate, should_suppress
from .diff import DIFF_METHODS, DiffEngine
from .models import CycleOutcome, Decision, Frame, FrameStore, Label
from .sampler import HttpSnapshotSource, Sampler, SnapshotSource, decode_frame

__all__ = [
    "CycleOutcome",
    "DIFF_METHODS",
    "DebounceGate",
    "Decision",
    "DiffEngine",
    "Frame",
    "FrameStore",
    "HttpSnapshotSource",
    "Label",
    "Sampler",
    "SnapshotSource",
    "decode_frame",
    "should_suppress",
]
