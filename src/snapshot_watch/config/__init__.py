"""
Configuration loading and validation.

- load_config: YAML file + .env + environment overrides, validated once
- apply_env_overrides: Apply the environment variables on top of a dict
- Config: Complete, immutable configuration schema
"""

from ..errors import ConfigValidationError
from .loader import (
    apply_env_overrides,
    find_config_file,
    load_config,
    print_validation_summary,
    validate_config,
)
from .schemas import (
    CameraConfig,
    ClassifierConfig,
    Config,
    DetectionConfig,
    NotifierConfig,
    RuntimeConfig,
    validate_config_pydantic,
)

__all__ = [
    "CameraConfig",
    "ClassifierConfig",
    "Config",
    "ConfigValidationError",
    "DetectionConfig",
    "NotifierConfig",
    "RuntimeConfig",
    "apply_env_overrides",
    "find_config_file",
    "load_config",
    "print_validation_summary",
    "validate_config",
    "validate_config_pydantic",
]
