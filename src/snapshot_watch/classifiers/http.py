"""
HTTP classifier - Sends frames to a JSON labeling endpoint.

Request:  {"image": "<base64 jpeg>"}
Response: {"labels": [{"name": "dog", "confidence": 92.1}, ...]}
"""

import base64
import logging

import requests

from ..core.models import Label
from ..errors import ClassificationError
from ..utils.constants import DEFAULT_CLASSIFIER_TIMEOUT
from . import Classifier, parse_labels

logger = logging.getLogger(__name__)


class HttpClassifier(Classifier):
    """Classifier backed by a self-hosted HTTP endpoint."""

    def __init__(self, url: str, timeout: float = DEFAULT_CLASSIFIER_TIMEOUT):
        self.url = url
        self.timeout = timeout

    def classify(self, image_bytes: bytes) -> list[Label]:
        payload = {"image": base64.b64encode(image_bytes).decode("utf-8")}

        try:
            response = requests.post(
                self.url,
                json=payload,
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
        except requests.Timeout as e:
            raise ClassificationError(
                f"Classifier timeout after {self.timeout}s"
            ) from e
        except requests.RequestException as e:
            raise ClassificationError(f"Classifier request failed: {e}") from e

        if not response.ok:
            raise ClassificationError(
                f"Classifier returned {response.status_code}: {response.text[:100]}"
            )

        try:
            result = response.json()
        except ValueError as e:
            raise ClassificationError(f"Invalid JSON response: {e}") from e

        if not isinstance(result, dict):
            raise ClassificationError("Classifier response is not a JSON object")

        labels = parse_labels(result.get("labels", []))
        logger.debug(f"Classifier returned {len(labels)} label(s)")
        return labels
