"""
Temporary on-disk copy of a detected frame for the classifier and notifier.
"""

import logging
import os
import time
from contextlib import contextmanager
from typing import Iterator

import cv2

from ..utils.constants import ARTIFACT_PREFIX, ARTIFACT_SUFFIX, JPEG_QUALITY
from .models import Frame

logger = logging.getLogger(__name__)


def artifact_name(timestamp: float | None = None) -> str:
    """detection-<epoch ms>.jpg"""
    ms = int((timestamp if timestamp is not None else time.time()) * 1000)
    return f"{ARTIFACT_PREFIX}{ms}{ARTIFACT_SUFFIX}"


def write_artifact(frame: Frame, temp_dir: str) -> str:
    """
    Write a frame to temp_dir as JPEG.

    Args:
        frame: Frame to save
        temp_dir: Directory for the artifact (created if missing)

    Returns:
        Path of the written file

    Raises:
        OSError: If the directory or file cannot be written
    """
    os.makedirs(temp_dir, exist_ok=True)
    filepath = os.path.join(temp_dir, artifact_name())

    ok = cv2.imwrite(filepath, frame.pixels, [cv2.IMWRITE_JPEG_QUALITY, JPEG_QUALITY])
    if not ok:
        raise OSError(f"Failed to write detection frame: {filepath}")

    logger.debug(f"Detection frame written: {filepath}")
    return filepath


def remove_artifact(filepath: str) -> None:
    """Delete an artifact, ignoring files that are already gone."""
    try:
        os.remove(filepath)
        logger.debug(f"Detection frame removed: {filepath}")
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning(f"Could not remove detection frame {filepath}: {e}")


@contextmanager
def detection_artifact(frame: Frame, temp_dir: str) -> Iterator[str]:
    """Write the frame, yield its path, and always delete it afterwards."""
    filepath = write_artifact(frame, temp_dir)
    try:
        yield filepath
    finally:
        remove_artifact(filepath)
