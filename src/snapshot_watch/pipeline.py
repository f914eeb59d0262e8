"""
Detection Pipeline
Runs one detect -> classify -> notify cycle.

Stages, any of which can end the cycle early:
  acquire      fetch a snapshot and rotate the frame store
  cooldown     skip if the last detection was too recent
  diff         skip if the two frames are similar
  (commit)     record the detection time before calling out
  materialize  write the frame to a temp file
  classify     label the frame, keep confident labels
  notify       deliver the summary and frame
  (cleanup)    the temp file is removed on every path out of materialize
"""

import logging
import time
from typing import Callable

from .classifiers import Classifier, filter_labels
from .core.artifact import detection_artifact
from .core.debounce import DebounceGate
from .core.diff import DiffEngine
from .core.models import CycleOutcome, Decision, FrameStore
from .core.sampler import Sampler
from .notifiers import Notifier
from .utils.constants import (
    DEFAULT_CONFIDENCE_THRESHOLD,
    DEFAULT_DIFF_THRESHOLD,
    DEFAULT_TEMP_DIR,
)

logger = logging.getLogger(__name__)


class DetectionPipeline:
    """Sequences one detection cycle and contains its failures."""

    def __init__(
        self,
        store: FrameStore,
        sampler: Sampler,
        diff_engine: DiffEngine,
        gate: DebounceGate,
        classifier: Classifier,
        notifier: Notifier,
        camera_name: str,
        diff_threshold: float = DEFAULT_DIFF_THRESHOLD,
        confidence_threshold: float = DEFAULT_CONFIDENCE_THRESHOLD,
        temp_dir: str = DEFAULT_TEMP_DIR,
        clock: Callable[[], float] = time.time,
    ):
        self.store = store
        self.sampler = sampler
        self.diff_engine = diff_engine
        self.gate = gate
        self.classifier = classifier
        self.notifier = notifier
        self.camera_name = camera_name
        self.diff_threshold = diff_threshold
        self.confidence_threshold = confidence_threshold
        self.temp_dir = temp_dir
        self._clock = clock

    def prime(self) -> None:
        """
        Take the first sample before the loop starts.

        Raises:
            SnapshotError: If the camera cannot be read at startup
        """
        logger.info(f"[{self.camera_name}] Initializing...")
        self.sampler.acquire()
        logger.info(f"[{self.camera_name}] Started watching")

    def is_similar(self, score: float) -> bool:
        """A score at or below the threshold counts as no change."""
        return score <= self.diff_threshold

    def run_cycle(self) -> CycleOutcome:
        """
        Run one detection cycle.

        Never raises: failures are logged and reported as Decision.FAILED
        with the stage that failed.
        """
        stage = "acquire"
        score = None
        try:
            if not self.sampler.acquire():
                logger.debug(f"[{self.camera_name}] Not enough frames yet")
                return CycleOutcome(Decision.NOT_READY)

            now = self._clock()
            if self.gate.should_suppress(now, self.store.last_detection_at):
                logger.debug(f"[{self.camera_name}] Too early after a detection")
                return CycleOutcome(Decision.TOO_SOON)

            stage = "diff"
            score = self.diff_engine.diff(self.store.last, self.store.current)
            if self.is_similar(score):
                logger.debug(
                    f"[{self.camera_name}] Current image is similar to last "
                    f"(diff={score:.4f})"
                )
                return CycleOutcome(Decision.SIMILAR, score=score)

            logger.info(
                f"[{self.camera_name}] Detected something (diff={score:.4f}). "
                "Trying to figure out what it was..."
            )
            # Cooldown starts now, even if classification fails below
            self.store.last_detection_at = now

            stage = "materialize"
            with detection_artifact(self.store.current, self.temp_dir) as image_path:
                stage = "classify"
                with open(image_path, "rb") as f:
                    image_bytes = f.read()
                labels = filter_labels(
                    self.classifier.classify(image_bytes), self.confidence_threshold
                )
                names = [label.name for label in labels]

                stage = "notify"
                message_id = self.notifier.send(names, image_path, self.camera_name)

            if names:
                logger.info(f'[{self.camera_name}] Detected "{", ".join(names)}"')
            else:
                logger.info(f"[{self.camera_name}] Could not find labels for the detection")

            return CycleOutcome(
                Decision.DISSIMILAR, score=score, labels=labels, message_id=message_id
            )

        except Exception as e:
            logger.error(
                f"[{self.camera_name}] Detection cycle failed during {stage}: {e}",
                exc_info=True,
            )
            return CycleOutcome(Decision.FAILED, score=score, stage=stage, error=e)
