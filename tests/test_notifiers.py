"""
Tests for notification backends
"""

import base64
import os
import smtplib
import tempfile
import unittest
from types import SimpleNamespace
from unittest import mock

import requests

from snapshot_watch.errors import NotificationError
from snapshot_watch.notifiers import compose_message, create_notifier
from snapshot_watch.notifiers.email_notifier import EmailNotifier
from snapshot_watch.notifiers.ntfy import NtfyNotifier, encode_header_value


class TestComposeMessage(unittest.TestCase):
    """Test the detection summary."""

    def test_with_labels(self):
        message = compose_message(["dog", "person"], "Front Door")

        self.assertEqual(
            message, 'We have detected "dog, person" from the "Front Door" camera.'
        )

    def test_without_labels(self):
        self.assertEqual(compose_message([], "Garage"), 'Detected something on "Garage"')


class ImageFileTestCase(unittest.TestCase):
    def setUp(self):
        handle = tempfile.NamedTemporaryFile(suffix=".jpg", delete=False)
        handle.write(b"\xff\xd8fake-jpeg\xff\xd9")
        handle.close()
        self.image_path = handle.name

    def tearDown(self):
        if os.path.exists(self.image_path):
            os.unlink(self.image_path)


class TestEmailNotifier(ImageFileTestCase):
    """Test EmailNotifier with a mocked SMTP server."""

    def notifier(self, **overrides):
        options = dict(
            username="watcher@example.com",
            password="secret",
            to_addresses=["a@example.com", "b@example.com"],
        )
        options.update(overrides)
        return EmailNotifier(**options)

    def test_build_message(self):
        msg = self.notifier().build_message(["dog"], b"jpeg", "Front Door")

        self.assertEqual(
            msg["Subject"], 'We have detected "dog" from the "Front Door" camera.'
        )
        self.assertEqual(msg["To"], "a@example.com, b@example.com")
        self.assertIn("Watson", msg["From"])
        self.assertTrue(msg["Message-ID"])

        image_parts = [p for p in msg.walk() if p.get_content_type() == "image/jpeg"]
        self.assertEqual(len(image_parts), 1)
        self.assertEqual(image_parts[0]["Content-ID"], "<detection>")
        self.assertTrue(image_parts[0].get_filename().startswith("detection-"))

        html_parts = [p for p in msg.walk() if p.get_content_type() == "text/html"]
        self.assertIn("cid:detection", html_parts[0].get_payload(decode=True).decode())

    @mock.patch("snapshot_watch.notifiers.email_notifier.smtplib.SMTP")
    def test_send(self, smtp_cls):
        server = smtp_cls.return_value.__enter__.return_value

        message_id = self.notifier().send([], self.image_path, "Garage")

        smtp_cls.assert_called_once_with("smtp.gmail.com", 587, timeout=30)
        server.starttls.assert_called_once()
        server.login.assert_called_once_with("watcher@example.com", "secret")
        sent = server.send_message.call_args[0][0]
        self.assertEqual(sent["Subject"], 'Detected something on "Garage"')
        self.assertEqual(message_id, sent["Message-ID"])

    @mock.patch("snapshot_watch.notifiers.email_notifier.smtplib.SMTP")
    def test_send_failure(self, smtp_cls):
        server = smtp_cls.return_value.__enter__.return_value
        server.login.side_effect = smtplib.SMTPAuthenticationError(535, b"bad creds")

        with self.assertRaises(NotificationError):
            self.notifier().send(["dog"], self.image_path, "Garage")

    @mock.patch("snapshot_watch.notifiers.email_notifier.smtplib.SMTP")
    def test_connection_refused(self, smtp_cls):
        smtp_cls.side_effect = ConnectionRefusedError()

        with self.assertRaises(NotificationError):
            self.notifier().send(["dog"], self.image_path, "Garage")

    def test_missing_image(self):
        with self.assertRaises(NotificationError):
            self.notifier().send(["dog"], "/nonexistent/detection.jpg", "Garage")

    def test_no_recipients(self):
        with self.assertRaises(NotificationError):
            self.notifier(to_addresses=[]).send(["dog"], self.image_path, "Garage")


class TestNtfyNotifier(ImageFileTestCase):
    """Test NtfyNotifier with mocked requests."""

    @mock.patch("snapshot_watch.notifiers.ntfy.requests.put")
    def test_send(self, put):
        put.return_value = mock.Mock(ok=True, status_code=200)
        put.return_value.json.return_value = {"id": "abc123"}

        message_id = NtfyNotifier("cams", priority="high").send(
            ["dog"], self.image_path, "Front Door"
        )

        self.assertEqual(message_id, "abc123")
        args, kwargs = put.call_args
        self.assertEqual(args[0], "https://ntfy.sh/cams")
        self.assertEqual(
            kwargs["headers"]["Title"],
            'We have detected "dog" from the "Front Door" camera.',
        )
        self.assertEqual(kwargs["headers"]["Priority"], "high")

    @mock.patch("snapshot_watch.notifiers.ntfy.requests.put")
    def test_http_error(self, put):
        put.return_value = mock.Mock(ok=False, status_code=429, text="slow down")

        with self.assertRaises(NotificationError):
            NtfyNotifier("cams").send([], self.image_path, "Front Door")

    @mock.patch("snapshot_watch.notifiers.ntfy.requests.put")
    def test_network_error(self, put):
        put.side_effect = requests.ConnectionError()

        with self.assertRaises(NotificationError):
            NtfyNotifier("cams").send([], self.image_path, "Front Door")

    @mock.patch("snapshot_watch.notifiers.ntfy.requests.put")
    def test_non_latin1_camera_name(self, put):
        put.return_value = mock.Mock(ok=True, status_code=200)
        put.return_value.json.return_value = {"id": "xyz"}

        message_id = NtfyNotifier("cams").send(["dog"], self.image_path, "Garten 庭")

        self.assertEqual(message_id, "xyz")
        title = put.call_args[1]["headers"]["Title"]
        self.assertTrue(title.isascii())
        self.assertTrue(title.startswith("=?UTF-8?B?"))
        self.assertTrue(title.endswith("?="))
        self.assertEqual(
            base64.b64decode(title[len("=?UTF-8?B?") : -2]).decode("utf-8"),
            'We have detected "dog" from the "Garten 庭" camera.',
        )

    @mock.patch("snapshot_watch.notifiers.ntfy.requests.put")
    def test_encoding_error_wrapped(self, put):
        put.side_effect = UnicodeEncodeError("latin-1", "庭", 0, 1, "ordinal not in range")

        with self.assertRaises(NotificationError):
            NtfyNotifier("cams").send(["dog"], self.image_path, "Garage")

    @mock.patch("snapshot_watch.notifiers.ntfy.requests.put")
    def test_non_json_response(self, put):
        put.return_value = mock.Mock(ok=True, status_code=200)
        put.return_value.json.side_effect = ValueError("no json")

        self.assertEqual(NtfyNotifier("cams").send([], self.image_path, "Garage"), "")

    def test_ascii_header_unchanged(self):
        self.assertEqual(encode_header_value("Detected something"), "Detected something")

    def test_self_hosted_url(self):
        notifier = NtfyNotifier("cams", base_url="https://ntfy.example.com/")

        self.assertEqual(notifier.url, "https://ntfy.example.com/cams")


class TestCreateNotifier(unittest.TestCase):
    """Test create_notifier."""

    def test_email(self):
        config = SimpleNamespace(
            type="email",
            smtp_server="smtp.example.com",
            smtp_port=2525,
            username="u@example.com",
            password="p",
            to_addresses=["a@example.com"],
            sender_name="Watson",
            from_address=None,
            use_tls=False,
        )

        notifier = create_notifier(config)

        self.assertIsInstance(notifier, EmailNotifier)
        self.assertEqual(notifier.from_address, "u@example.com")
        self.assertEqual(notifier.smtp_port, 2525)

    def test_ntfy(self):
        config = SimpleNamespace(type="ntfy", topic="cams", ntfy_url=None, priority="default")

        self.assertIsInstance(create_notifier(config), NtfyNotifier)

    def test_unknown(self):
        with self.assertRaises(ValueError):
            create_notifier(SimpleNamespace(type="pigeon"))


if __name__ == "__main__":
    unittest.main()
