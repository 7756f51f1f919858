"""Configuration management."""

from cadence.config.loader import build_scheduler, load_config, validate_config
from cadence.config.models import CadenceConfig, ConfigError, TaskConfig

__all__ = [
    "CadenceConfig",
    "ConfigError",
    "TaskConfig",
    "build_scheduler",
    "load_config",
    "validate_config",
]
