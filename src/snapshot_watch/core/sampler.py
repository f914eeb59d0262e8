"""
Snapshot fetching and frame rotation.
"""

import logging
import time
from typing import Callable, Protocol

import cv2
import numpy as np
import requests

from ..errors import SnapshotError
from ..utils.constants import DEFAULT_SNAPSHOT_TIMEOUT
from .models import Frame, FrameStore

logger = logging.getLogger(__name__)


class SnapshotSource(Protocol):
    """Anything that returns one encoded image per call."""

    def fetch(self) -> bytes: ...


class HttpSnapshotSource:
    """Fetches JPEG snapshots from a camera's HTTP endpoint."""

    def __init__(self, url: str, timeout: float = DEFAULT_SNAPSHOT_TIMEOUT):
        self.url = url
        self.timeout = timeout
        self._session = requests.Session()

    def fetch(self) -> bytes:
        """
        Fetch one snapshot.

        Returns:
            Encoded image bytes

        Raises:
            SnapshotError: On network failure, non-2xx status or empty body
        """
        try:
            response = self._session.get(self.url, timeout=self.timeout)
        except requests.Timeout as e:
            raise SnapshotError(f"Snapshot timeout after {self.timeout}s") from e
        except requests.RequestException as e:
            raise SnapshotError(f"Snapshot request failed: {e}") from e

        if not response.ok:
            raise SnapshotError(
                f"Snapshot endpoint returned {response.status_code}"
            )
        if not response.content:
            raise SnapshotError("Snapshot endpoint returned an empty body")
        return response.content


def decode_frame(data: bytes, captured_at: float) -> Frame:
    """
    Decode encoded image bytes into a Frame.

    Raises:
        SnapshotError: If the bytes are not a decodable image
    """
    if not data:
        raise SnapshotError("Cannot decode empty snapshot")

    buffer = np.frombuffer(data, dtype=np.uint8)
    pixels = cv2.imdecode(buffer, cv2.IMREAD_COLOR)
    if pixels is None:
        raise SnapshotError(f"Could not decode snapshot ({len(data)} bytes)")

    pixels.setflags(write=False)
    return Frame(pixels=pixels, captured_at=captured_at, raw=data)


class Sampler:
    """Pulls a frame from the source and rotates it into the store."""

    def __init__(
        self,
        source: SnapshotSource,
        store: FrameStore,
        clock: Callable[[], float] = time.time,
    ):
        self.source = source
        self.store = store
        self._clock = clock

    def acquire(self) -> bool:
        """
        Fetch, decode and install one frame.

        The store is only touched after a successful decode, so a failed
        fetch never leaves it half rotated.

        Returns:
            True if a comparable pair (last and current) now exists

        Raises:
            SnapshotError: If the snapshot cannot be fetched or decoded
        """
        data = self.source.fetch()
        frame = decode_frame(data, self._clock())
        self.store.install(frame)
        logger.debug(f"Frame acquired: {frame.width}x{frame.height}")
        return self.store.has_pair()
