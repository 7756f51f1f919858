"""Centralized path management for Cadence.

The base directory can be overridden with the CADENCE_HOME environment
variable.

Default locations:
- Linux/macOS: ~/.cadence
- Windows: %USERPROFILE%\\.cadence
"""

import os
from pathlib import Path

ENV_VAR = "CADENCE_HOME"
CONFIG_FILENAME = "cadence.toml"


def get_cadence_home() -> Path:
    """Get the base directory for Cadence configuration.

    Resolution order:
    1. CADENCE_HOME environment variable (if set)
    2. ~/.cadence
    """
    if env_home := os.environ.get(ENV_VAR):
        return Path(env_home).expanduser()
    return Path.home() / ".cadence"


def get_config_path() -> Path:
    return get_cadence_home() / "config.toml"
