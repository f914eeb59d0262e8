"""
Email Notifier
Sends detections via SMTP with the frame embedded inline and attached.
"""

import logging
import os
import smtplib
import time
from email.mime.image import MIMEImage
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr, make_msgid
from html import escape
from typing import Sequence

from ..errors import NotificationError
from ..utils.constants import (
    ARTIFACT_PREFIX,
    ARTIFACT_SUFFIX,
    DEFAULT_SENDER_NAME,
    DEFAULT_SMTP_PORT,
    DEFAULT_SMTP_SERVER,
    INLINE_IMAGE_CID,
)
from . import Notifier, compose_message

logger = logging.getLogger(__name__)


class EmailNotifier(Notifier):
    """Handles sending detection emails via SMTP."""

    def __init__(
        self,
        username: str,
        password: str,
        to_addresses: list[str],
        smtp_server: str = DEFAULT_SMTP_SERVER,
        smtp_port: int = DEFAULT_SMTP_PORT,
        sender_name: str = DEFAULT_SENDER_NAME,
        from_address: str | None = None,
        use_tls: bool = True,
        timeout: float = 30,
    ):
        self.smtp_server = smtp_server
        self.smtp_port = smtp_port
        self.username = username
        self.password = password
        self.to_addresses = to_addresses
        self.sender_name = sender_name
        self.from_address = from_address or username
        self.use_tls = use_tls
        self.timeout = timeout

    def build_message(
        self, labels: Sequence[str], image_data: bytes, camera_name: str
    ) -> MIMEMultipart:
        """Build the MIME message: text + HTML alternative, inline image, attachment."""
        text = compose_message(labels, camera_name)

        msg = MIMEMultipart("related")
        msg["From"] = formataddr((self.sender_name, self.from_address))
        msg["To"] = ", ".join(self.to_addresses)
        msg["Subject"] = text
        msg["Message-ID"] = make_msgid(domain=self.from_address.partition("@")[2] or None)

        alternative = MIMEMultipart("alternative")
        alternative.attach(MIMEText(text, "plain"))
        html = (
            f"<p>{escape(text)}</p>\n"
            "<br />\n"
            f'<img src="cid:{INLINE_IMAGE_CID}" />\n'
        )
        alternative.attach(MIMEText(html, "html"))
        msg.attach(alternative)

        filename = f"{ARTIFACT_PREFIX}{int(time.time() * 1000)}{ARTIFACT_SUFFIX}"
        part = MIMEImage(image_data, _subtype="jpeg", name=filename)
        part.add_header("Content-ID", f"<{INLINE_IMAGE_CID}>")
        part.add_header("Content-Disposition", "inline", filename=filename)
        msg.attach(part)

        return msg

    def send(self, labels: Sequence[str], image_path: str, camera_name: str) -> str:
        if not self.to_addresses:
            raise NotificationError("No email recipients configured")

        try:
            with open(image_path, "rb") as f:
                image_data = f.read()
        except OSError as e:
            raise NotificationError(f"Cannot read detection frame {image_path}: {e}") from e

        msg = self.build_message(labels, image_data, camera_name)

        try:
            with smtplib.SMTP(self.smtp_server, self.smtp_port, timeout=self.timeout) as server:
                if self.use_tls:
                    server.starttls()
                if self.username and self.password:
                    server.login(self.username, self.password)
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            raise NotificationError(f"Failed to send email: {e}") from e

        message_id = msg["Message-ID"]
        logger.info(
            f"Email sent to {len(self.to_addresses)} recipient(s): {msg['Subject']} "
            f"({os.path.basename(image_path)})"
        )
        return message_id
