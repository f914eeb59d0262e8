"""
Configuration loading.

Settings come from an optional YAML file, then environment variables (and a
.env file) override them. Validation happens once; any problem is fatal.
"""

import copy
import logging
import os
from pathlib import Path
from typing import Any, Mapping

import yaml
from dotenv import load_dotenv
from pydantic import ValidationError

from ..errors import ConfigValidationError
from ..utils.constants import (
    ENV_AWS_REGION,
    ENV_CAMERA_NAME,
    ENV_CONFIDENCE_THRESHOLD,
    ENV_COOLDOWN_MS,
    ENV_DIFF_THRESHOLD,
    ENV_POLL_INTERVAL_MS,
    ENV_RECIPIENT_EMAILS,
    ENV_SENDER_PASSWORD,
    ENV_SENDER_USER,
    ENV_SNAPSHOT_URL,
)
from .schemas import Config, validate_config_pydantic

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_NAME = "watch.yaml"

# (environment variable, section, key)
ENV_OVERRIDES = [
    (ENV_SNAPSHOT_URL, "camera", "snapshot_url"),
    (ENV_CAMERA_NAME, "camera", "name"),
    (ENV_SENDER_USER, "notifier", "username"),
    (ENV_SENDER_PASSWORD, "notifier", "password"),
    (ENV_DIFF_THRESHOLD, "detection", "diff_threshold"),
    (ENV_CONFIDENCE_THRESHOLD, "detection", "confidence_threshold"),
    (ENV_COOLDOWN_MS, "detection", "cooldown_ms"),
    (ENV_POLL_INTERVAL_MS, "runtime", "poll_interval_ms"),
    (ENV_AWS_REGION, "classifier", "region"),
]


def find_config_file(config_path: str | None) -> Path | None:
    """
    Find config file in standard locations.

    Search order:
    1. Specified path (must exist)
    2. Current directory (watch.yaml)
    3. ~/.config/snapshot-watch/watch.yaml

    A missing file is fine when nothing was specified: everything can come
    from the environment.

    Raises:
        ConfigValidationError: If a specified path does not exist
    """
    if config_path:
        specified = Path(config_path)
        if not specified.exists():
            raise ConfigValidationError([f"Config file not found: {config_path}"])
        return specified

    search_paths = [
        Path.cwd() / DEFAULT_CONFIG_NAME,
        Path.home() / ".config" / "snapshot-watch" / DEFAULT_CONFIG_NAME,
    ]
    for path in search_paths:
        if path.exists():
            return path
    return None


def read_config_file(path: Path) -> dict:
    """Read a YAML config file into a dict."""
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigValidationError([f"Invalid YAML in {path}: {e}"]) from e
    except OSError as e:
        raise ConfigValidationError([f"Cannot read {path}: {e}"]) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigValidationError([f"{path} must contain a mapping at the top level"])

    logger.info(f"Configuration loaded from {path}")
    return data


def apply_env_overrides(config: dict, environ: Mapping[str, str] | None = None) -> dict:
    """
    Apply environment variable overrides.

    Args:
        config: Base configuration dictionary (not modified)
        environ: Environment mapping (default: os.environ)

    Returns:
        New configuration with environment variables applied
    """
    env = os.environ if environ is None else environ
    config = copy.deepcopy(config)

    for var, section, key in ENV_OVERRIDES:
        value = env.get(var)
        if value is None or not value.strip():
            continue
        config.setdefault(section, {})
        if not isinstance(config[section], dict):
            continue
        config[section][key] = value.strip()
        logger.debug(f"Using {section}.{key} from environment: {var}")

    recipients = env.get(ENV_RECIPIENT_EMAILS)
    if recipients and recipients.strip():
        config.setdefault("notifier", {})
        if isinstance(config["notifier"], dict):
            config["notifier"]["to_addresses"] = [
                r.strip() for r in recipients.split(",") if r.strip()
            ]

    return config


def _format_error(error: Mapping[str, Any]) -> str:
    location = ".".join(str(part) for part in error.get("loc", ()))
    message = error.get("msg", "invalid value")
    return f"{location}: {message}" if location else message


def validate_config(config: dict) -> Config:
    """
    Validate a raw configuration dictionary.

    Raises:
        ConfigValidationError: Listing every problem found
    """
    try:
        return validate_config_pydantic(config)
    except ValidationError as e:
        raise ConfigValidationError([_format_error(err) for err in e.errors()]) from e


def load_config(
    config_path: str | None = None,
    environ: Mapping[str, str] | None = None,
    load_env_file: bool = True,
) -> Config:
    """
    Load, override and validate the configuration.

    Args:
        config_path: Optional YAML file path
        environ: Environment mapping (default: os.environ)
        load_env_file: Load a .env file into os.environ first

    Returns:
        Validated, immutable Config

    Raises:
        ConfigValidationError: If the configuration is missing or invalid
    """
    if load_env_file and environ is None:
        load_dotenv()

    path = find_config_file(config_path)
    raw = read_config_file(path) if path else {}
    raw = apply_env_overrides(raw, environ)
    return validate_config(raw)


def print_validation_summary(config: Config) -> None:
    """Print a summary of validated configuration."""
    print("\n" + "=" * 70)
    print("CONFIGURATION SUMMARY")
    print("=" * 70)

    print("\nCamera:")
    print(f"  Name: {config.camera.name}")
    print(f"  Snapshot URL: {config.camera.snapshot_url}")

    detection = config.detection
    print("\nDetection:")
    print(f"  Diff: {detection.diff_method} > {detection.diff_threshold}")
    print(f"  Cooldown: {detection.cooldown_ms}ms")
    print(f"  Label confidence: > {detection.confidence_threshold}")

    classifier = config.classifier
    print("\nClassifier:")
    print(f"  Type: {classifier.type}")
    if classifier.type == "http":
        print(f"  URL: {classifier.url}")
    elif classifier.region:
        print(f"  Region: {classifier.region}")

    notifier = config.notifier
    print("\nNotifier:")
    print(f"  Type: {notifier.type}")
    if notifier.type == "email":
        print(f"  SMTP: {notifier.smtp_server}:{notifier.smtp_port}")
        print(f"  Recipients: {', '.join(notifier.to_addresses)}")
    else:
        print(f"  Topic: {notifier.topic}")

    runtime = config.runtime
    print("\nRuntime:")
    print(f"  Interval: {runtime.poll_interval_ms}ms")
    print(f"  Temp dir: {runtime.temp_dir}")

    print("\n" + "=" * 70 + "\n")
