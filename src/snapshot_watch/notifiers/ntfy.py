"""
ntfy.sh Notifier - Push notifications via ntfy.sh service.

Sends the detection summary as the title of an image attachment.
See: https://ntfy.sh/
"""

import base64
import logging
import os
from typing import Sequence

import requests

from ..errors import NotificationError
from . import Notifier, compose_message

logger = logging.getLogger(__name__)

NTFY_BASE_URL = "https://ntfy.sh"


def encode_header_value(value: str) -> str:
    """
    Make a header value safe for HTTP.

    Non-ASCII text is sent as an RFC 2047 encoded word, which ntfy decodes.
    """
    if value.isascii():
        return value
    encoded = base64.b64encode(value.encode("utf-8")).decode("ascii")
    return f"=?UTF-8?B?{encoded}?="


class NtfyNotifier(Notifier):
    """
    Notifier that sends push notifications via ntfy.sh.

    Config options:
        topic: ntfy topic name (required)
        base_url: Self-hosted ntfy server (default: ntfy.sh)
        priority: min/low/default/high/urgent
    """

    def __init__(
        self,
        topic: str,
        base_url: str | None = None,
        priority: str = "default",
        timeout: float = 10,
    ):
        self.topic = topic
        self.priority = priority
        self.timeout = timeout
        self.url = f"{(base_url or NTFY_BASE_URL).rstrip('/')}/{topic}"

    def send(self, labels: Sequence[str], image_path: str, camera_name: str) -> str:
        title = compose_message(labels, camera_name)

        try:
            with open(image_path, "rb") as f:
                image_data = f.read()
        except OSError as e:
            raise NotificationError(f"Cannot read detection frame {image_path}: {e}") from e

        try:
            response = requests.put(
                self.url,
                data=image_data,
                headers={
                    "Title": encode_header_value(title),
                    "Priority": self.priority,
                    "Filename": encode_header_value(os.path.basename(image_path)),
                },
                timeout=self.timeout,
            )
        except (requests.RequestException, ValueError) as e:
            raise NotificationError(f"ntfy request failed: {e}") from e

        if not response.ok:
            raise NotificationError(
                f"ntfy send failed: {response.status_code} {response.text[:100]}"
            )

        try:
            message_id = str(response.json().get("id", ""))
        except (ValueError, AttributeError):
            message_id = ""

        logger.info(f"ntfy notification sent to {self.topic}: {title}")
        return message_id
