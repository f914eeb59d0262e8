"""
Exception types shared across the watcher.

Adapters translate library errors (requests, botocore, smtplib) into these so
the pipeline only ever has to reason about one family of failures.
"""


class WatchError(Exception):
    """Base class for all watcher errors."""

    pass


class ConfigValidationError(WatchError):
    """Raised when config validation fails."""

    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        message = "Configuration validation failed:\n" + "\n".join(
            f"  - {e}" for e in self.errors
        )
        super().__init__(message)


class SnapshotError(WatchError):
    """Snapshot could not be fetched or decoded."""

    pass


class FrameMismatchError(WatchError):
    """Two frames cannot be compared (different dimensions)."""

    pass


class ClassificationError(WatchError):
    """Labeling service call failed."""

    pass


class NotificationError(WatchError):
    """Notification could not be delivered."""

    pass
