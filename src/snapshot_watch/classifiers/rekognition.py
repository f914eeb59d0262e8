"""
AWS Rekognition classifier.

Credentials are resolved by boto3's usual chain (AWS_ACCESS_KEY_ID /
AWS_SECRET_ACCESS_KEY, shared config, instance role).
"""

import logging
from typing import Any

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError, NoRegionError

from ..core.models import Label
from ..errors import ClassificationError, ConfigValidationError
from . import Classifier, parse_labels

logger = logging.getLogger(__name__)


class RekognitionClassifier(Classifier):
    """
    Labels images with Rekognition DetectLabels.

    Config options:
        region: AWS region (falls back to AWS_REGION / boto3 defaults)
        max_labels: Upper bound on labels returned per image
    """

    def __init__(
        self,
        region: str | None = None,
        max_labels: int | None = None,
        client: Any = None,
    ):
        self.region = region
        self.max_labels = max_labels
        self._client = client or self._create_client()

    def _create_client(self):
        # Single attempt per call
        config = Config(
            connect_timeout=5,
            read_timeout=15,
            retries={"max_attempts": 1, "mode": "standard"},
        )
        logger.info(f"Initializing Rekognition client (region={self.region or 'default'})")
        try:
            return boto3.client("rekognition", region_name=self.region, config=config)
        except NoRegionError as e:
            raise ConfigValidationError(
                ["classifier.region: no AWS region configured (set classifier.region or AWS_REGION)"]
            ) from e

    def classify(self, image_bytes: bytes) -> list[Label]:
        params: dict[str, Any] = {"Image": {"Bytes": image_bytes}}
        if self.max_labels:
            params["MaxLabels"] = self.max_labels

        try:
            response = self._client.detect_labels(**params)
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code", "Unknown")
            raise ClassificationError(f"Rekognition error ({code}): {e}") from e
        except BotoCoreError as e:
            raise ClassificationError(f"Rekognition request failed: {e}") from e

        labels = parse_labels(
            response.get("Labels", []), name_key="Name", confidence_key="Confidence"
        )
        logger.debug(f"Rekognition returned {len(labels)} label(s)")
        return labels
