"""
Pydantic schemas for configuration validation.

Provides type-safe, declarative validation with clear error messages.
The resulting Config is frozen: it is built once at startup and never changed.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..core.diff import DIFF_METHODS
from ..utils.constants import (
    DEFAULT_CLASSIFIER_TIMEOUT,
    DEFAULT_CONFIDENCE_THRESHOLD,
    DEFAULT_COOLDOWN_MS,
    DEFAULT_DIFF_THRESHOLD,
    DEFAULT_PIXEL_TOLERANCE,
    DEFAULT_POLL_INTERVAL_MS,
    DEFAULT_SENDER_NAME,
    DEFAULT_SMTP_PORT,
    DEFAULT_SMTP_SERVER,
    DEFAULT_SNAPSHOT_TIMEOUT,
    DEFAULT_TEMP_DIR,
    STATUS_REPORT_INTERVAL,
)


class StrictModel(BaseModel):
    """Base model that rejects unknown fields and cannot be modified."""

    model_config = ConfigDict(extra="forbid", frozen=True)


def _check_url(v: str) -> str:
    v = v.strip()
    if not v.startswith(("http://", "https://")):
        raise ValueError("must be an http:// or https:// URL")
    return v


class CameraConfig(StrictModel):
    """Camera settings."""

    name: str = Field(..., min_length=1, description="Name used in messages and logs")
    snapshot_url: str = Field(..., min_length=1, description="Snapshot endpoint URL")
    timeout: float = Field(default=DEFAULT_SNAPSHOT_TIMEOUT, gt=0)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    @field_validator("snapshot_url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        return _check_url(v)


class DetectionConfig(StrictModel):
    """Change detection settings."""

    diff_threshold: float = Field(
        default=DEFAULT_DIFF_THRESHOLD, ge=0.0, le=1.0, description="Diff score that counts as change"
    )
    diff_method: Literal["pixel_ratio", "mean_abs"] = "pixel_ratio"
    pixel_tolerance: float = Field(default=DEFAULT_PIXEL_TOLERANCE, ge=0.0, lt=1.0)
    cooldown_ms: int = Field(default=DEFAULT_COOLDOWN_MS, ge=0)
    confidence_threshold: float = Field(
        default=DEFAULT_CONFIDENCE_THRESHOLD, ge=0.0, le=100.0, description="Minimum label confidence"
    )

    @field_validator("diff_method")
    @classmethod
    def validate_method(cls, v: str) -> str:
        if v not in DIFF_METHODS:
            raise ValueError(f"must be one of {DIFF_METHODS}")
        return v


class ClassifierConfig(StrictModel):
    """Image labeling service settings."""

    type: Literal["rekognition", "http"] = "rekognition"
    region: str | None = None
    max_labels: int | None = Field(default=None, gt=0)
    url: str | None = None
    timeout: float = Field(default=DEFAULT_CLASSIFIER_TIMEOUT, gt=0)

    @model_validator(mode="after")
    def validate_backend(self):
        if self.type == "http":
            if not self.url:
                raise ValueError("classifier.url is required for the http classifier")
            _check_url(self.url)
        return self


class NotifierConfig(StrictModel):
    """Notification transport settings."""

    type: Literal["email", "ntfy"] = "email"

    # email
    smtp_server: str = DEFAULT_SMTP_SERVER
    smtp_port: int = Field(default=DEFAULT_SMTP_PORT, ge=1, le=65535)
    use_tls: bool = True
    username: str | None = None
    password: str | None = None
    from_address: str | None = None
    sender_name: str = DEFAULT_SENDER_NAME
    to_addresses: list[str] = Field(default_factory=list)

    # ntfy
    topic: str | None = None
    ntfy_url: str | None = None
    priority: Literal["min", "low", "default", "high", "urgent"] = "default"

    @field_validator("to_addresses")
    @classmethod
    def validate_addresses(cls, v: list[str]) -> list[str]:
        addresses = [a.strip() for a in v if a and a.strip()]
        for address in addresses:
            if "@" not in address:
                raise ValueError(f"invalid email address: {address!r}")
        return addresses

    @model_validator(mode="after")
    def validate_backend(self):
        if self.type == "email":
            missing = [
                name
                for name in ("username", "password")
                if not (getattr(self, name) or "").strip()
            ]
            if not self.to_addresses:
                missing.append("to_addresses")
            if missing:
                raise ValueError(
                    "email notifier requires: " + ", ".join(f"notifier.{m}" for m in missing)
                )
        elif self.type == "ntfy" and not self.topic:
            raise ValueError("notifier.topic is required for the ntfy notifier")
        return self


class RuntimeConfig(StrictModel):
    """Runtime settings."""

    poll_interval_ms: int = Field(default=DEFAULT_POLL_INTERVAL_MS, gt=0)
    temp_dir: str = Field(default=DEFAULT_TEMP_DIR, min_length=1)
    prime_on_start: bool = True
    status_interval: int = Field(default=STATUS_REPORT_INTERVAL, ge=0)


class Config(StrictModel):
    """Complete configuration schema."""

    camera: CameraConfig
    detection: DetectionConfig = Field(default_factory=DetectionConfig)
    classifier: ClassifierConfig = Field(default_factory=ClassifierConfig)
    notifier: NotifierConfig = Field(default_factory=NotifierConfig)
    runtime: RuntimeConfig = Field(default_factory=RuntimeConfig)


def validate_config_pydantic(config: dict) -> Config:
    """
    Validate configuration using Pydantic.

    Args:
        config: Raw configuration dictionary

    Returns:
        Validated Config object

    Raises:
        pydantic.ValidationError: If validation fails
    """
    return Config(**config)
