"""Configuration loading from TOML files and environment variables."""

import os
import tomllib
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from cadence.config.models import CadenceConfig, ConfigError
from cadence.config.paths import CONFIG_FILENAME, get_config_path
from cadence.scheduling.commands import command_task
from cadence.scheduling.scheduler import TaskScheduler
from cadence.scheduling.types import Sink

# Environment variables that override top-level config keys
ENV_OVERRIDES = {
    "CADENCE_SCHEDULE": "schedule",
    "CADENCE_COOLDOWN_SECONDS": "backup_cooldown_seconds",
    "CADENCE_IMMEDIATE_ENV": "immediate_env_name",
}


def _get_default_config_paths() -> list[Path]:
    """Get ordered list of default config file locations."""
    return [
        Path(CONFIG_FILENAME),  # Current directory
        get_config_path(),  # ~/.cadence/config.toml (or CADENCE_HOME)
    ]


def apply_env_overrides(config: dict[str, Any]) -> dict[str, Any]:
    """Overlay CADENCE_* environment variables onto a raw config dict."""
    for env_var, key in ENV_OVERRIDES.items():
        value = os.environ.get(env_var)
        if value:
            config[key] = value
    return config


def find_config_path(path: Path | None = None) -> Path | None:
    """Locate the config file, or None if no default location exists.

    Raises:
        FileNotFoundError: If an explicit path does not exist.
    """
    if path is not None:
        config_path = Path(path).expanduser()
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        return config_path

    for default_path in _get_default_config_paths():
        expanded = default_path.expanduser()
        if expanded.exists():
            return expanded
    return None


def load_config(path: Path | None = None) -> CadenceConfig:
    """Load configuration from TOML file.

    Args:
        path: Explicit path to config file. If None, searches default locations.

    Returns:
        Validated CadenceConfig instance.

    Raises:
        FileNotFoundError: If no config file is found.
        ConfigError: If the file is not valid TOML or fails validation.
    """
    config_path = find_config_path(path)
    if config_path is None:
        searched = ", ".join(str(p) for p in _get_default_config_paths())
        raise FileNotFoundError(f"No config file found. Searched: {searched}")

    try:
        with config_path.open("rb") as f:
            raw_config = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {config_path}: {e}") from e

    return validate_config(apply_env_overrides(raw_config))


def validate_config(raw_config: dict[str, Any]) -> CadenceConfig:
    try:
        return CadenceConfig.model_validate(raw_config)
    except ValidationError as e:
        raise ConfigError(str(e)) from e


def build_scheduler(
    config: CadenceConfig, *, logger: Sink | None = None
) -> TaskScheduler:
    """Create a TaskScheduler with one command task per configured task.

    Raises:
        InvalidSpecification: If the schedule string is unusable.
    """
    scheduler = TaskScheduler(
        config.schedule,
        backup_cooldown_seconds=config.backup_cooldown_seconds,
        immediate_env_name=config.immediate_env_name,
        logger=logger,
        timezone=config.timezone,
    )
    for task in config.tasks:
        scheduler.register(
            command_task(task.command, cwd=task.cwd, env=task.env, name=task.name)
        )
    return scheduler
