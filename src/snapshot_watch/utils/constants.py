"""
Constants used throughout the snapshot watcher
"""

# Polling
DEFAULT_POLL_INTERVAL_MS = 1000
DEFAULT_COOLDOWN_MS = 2000  # Minimum gap between two detections
STATUS_REPORT_INTERVAL = 300  # Log status every N cycles

# Detection thresholds
DEFAULT_DIFF_THRESHOLD = 0.05  # Fraction of changed pixels (0-1)
DEFAULT_PIXEL_TOLERANCE = 0.1  # Per-pixel channel delta ignored below this (0-1)
DEFAULT_CONFIDENCE_THRESHOLD = 80.0  # Label confidence (0-100)

# Snapshot fetching
DEFAULT_SNAPSHOT_TIMEOUT = 10  # Seconds
DEFAULT_CLASSIFIER_TIMEOUT = 30  # Seconds

# Temporary detection artifacts
DEFAULT_TEMP_DIR = "./temp"
ARTIFACT_PREFIX = "detection-"
ARTIFACT_SUFFIX = ".jpg"
JPEG_QUALITY = 90

# Email defaults
DEFAULT_SMTP_SERVER = "smtp.gmail.com"
DEFAULT_SMTP_PORT = 587
DEFAULT_SENDER_NAME = "Watson"
INLINE_IMAGE_CID = "detection"

# Environment variables
ENV_SNAPSHOT_URL = "SNAPSHOT_URL"
ENV_CAMERA_NAME = "CAMERA_NAME"
ENV_RECIPIENT_EMAILS = "RECIPIENT_EMAILS"
ENV_SENDER_USER = "SENDER_USER"
ENV_SENDER_PASSWORD = "SENDER_PASSWORD"
ENV_DIFF_THRESHOLD = "THRESHOLD"
ENV_CONFIDENCE_THRESHOLD = "CONFIDENCE_THRESHOLD"
ENV_POLL_INTERVAL_MS = "POLL_INTERVAL_MS"
ENV_COOLDOWN_MS = "COOLDOWN_MS"
ENV_AWS_REGION = "AWS_REGION"
