"""
Notifiers - Pluggable notification backends.

Provides a common interface for delivering a detection:
- email: SMTP with the frame embedded inline and attached
- ntfy: Push notifications via ntfy.sh

Delivery is fire-and-forget: no retries here, the next detection is the
next attempt.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Sequence

logger = logging.getLogger(__name__)


class Notifier(ABC):
    """Base class for all notifier implementations."""

    @abstractmethod
    def send(self, labels: Sequence[str], image_path: str, camera_name: str) -> str:
        """
        Deliver a detection.

        Args:
            labels: Label names above the confidence threshold (may be empty)
            image_path: Path to the detected frame
            camera_name: Human-readable camera name

        Returns:
            Message identifier assigned by the transport

        Raises:
            NotificationError: If delivery fails
        """
        pass


def compose_message(labels: Sequence[str], camera_name: str) -> str:
    """
    Build the one-line detection summary.

    An empty label list still produces a message: something changed even if
    nothing recognizable was found.
    """
    if not labels:
        return f'Detected something on "{camera_name}"'
    return f'We have detected "{", ".join(labels)}" from the "{camera_name}" camera.'


def create_notifier(config: Any) -> Notifier:
    """
    Create the notifier described by config.

    Args:
        config: NotifierConfig

    Returns:
        Notifier instance

    Raises:
        ValueError: If the notifier type is unknown
    """
    from .email_notifier import EmailNotifier
    from .ntfy import NtfyNotifier

    if config.type == "email":
        return EmailNotifier(
            smtp_server=config.smtp_server,
            smtp_port=config.smtp_port,
            username=config.username,
            password=config.password,
            to_addresses=list(config.to_addresses),
            sender_name=config.sender_name,
            from_address=config.from_address,
            use_tls=config.use_tls,
        )
    if config.type == "ntfy":
        return NtfyNotifier(
            topic=config.topic,
            base_url=config.ntfy_url,
            priority=config.priority,
        )

    raise ValueError(f"Unknown notifier type: {config.type}")


__all__ = [
    "Notifier",
    "compose_message",
    "create_notifier",
]
