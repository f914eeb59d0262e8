"""
Classifiers - Pluggable image-labeling backends.

Provides a common interface for labeling services:
- rekognition: AWS Rekognition DetectLabels
- http: Generic JSON endpoint (self-hosted model, VLM gateway, etc.)

Every backend returns labels in the order the service ranked them and raises
ClassificationError for any service failure.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Iterable

from ..core.models import Label
from ..errors import ClassificationError

logger = logging.getLogger(__name__)


class Classifier(ABC):
    """Base class for all classifier implementations."""

    @abstractmethod
    def classify(self, image_bytes: bytes) -> list[Label]:
        """
        Label one image.

        Args:
            image_bytes: Encoded image (JPEG)

        Returns:
            Labels with 0-100 confidence, in service order

        Raises:
            ClassificationError: If the service call fails
        """
        pass


def filter_labels(labels: Iterable[Label], threshold: float) -> list[Label]:
    """Keep labels scoring strictly above threshold, preserving order."""
    return [label for label in labels if label.confidence > threshold]


def parse_label(entry: Any, name_key: str = "name", confidence_key: str = "confidence") -> Label | None:
    """
    Build a Label from one raw response entry.

    Returns:
        Label, or None if the entry is malformed
    """
    if not isinstance(entry, dict):
        return None
    name = entry.get(name_key)
    confidence = entry.get(confidence_key)
    if not isinstance(name, str) or not name.strip():
        return None
    if isinstance(confidence, bool) or not isinstance(confidence, (int, float)):
        return None
    if not 0 <= confidence <= 100:
        return None
    return Label(name=name.strip(), confidence=float(confidence))


def parse_labels(entries: Any, name_key: str = "name", confidence_key: str = "confidence") -> list[Label]:
    """Parse a list of raw entries, dropping malformed ones with a warning."""
    if not isinstance(entries, list):
        raise ClassificationError(
            f"Expected a list of labels, got {type(entries).__name__}"
        )

    labels = []
    for entry in entries:
        label = parse_label(entry, name_key, confidence_key)
        if label is None:
            logger.warning(f"Skipping malformed label entry: {entry!r}")
            continue
        labels.append(label)
    return labels


def create_classifier(config: Any) -> Classifier:
    """
    Create the classifier described by config.

    Args:
        config: ClassifierConfig

    Returns:
        Classifier instance

    Raises:
        ValueError: If the classifier type is unknown
    """
    from .http import HttpClassifier
    from .rekognition import RekognitionClassifier

    if config.type == "rekognition":
        return RekognitionClassifier(
            region=config.region,
            max_labels=config.max_labels,
        )
    if config.type == "http":
        return HttpClassifier(url=config.url, timeout=config.timeout)

    raise ValueError(f"Unknown classifier type: {config.type}")


__all__ = [
    "Classifier",
    "create_classifier",
    "filter_labels",
    "parse_label",
    "parse_labels",
]
