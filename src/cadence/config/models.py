"""Configuration models using Pydantic."""

from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from cadence.scheduling.types import DEFAULT_SCHEDULE


class ConfigError(Exception):
    """Configuration error."""

    pass


class TaskConfig(BaseModel):
    """A shell command run as one work unit."""

    command: str
    name: str | None = None
    cwd: Path | None = None
    env: dict[str, str] = {}

    @field_validator("command")
    @classmethod
    def _command_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("command cannot be empty")
        return v


class CadenceConfig(BaseModel):
    """Root configuration model.

    Example cadence.toml:

        schedule = "0 */15 * * * * @ 600"
        immediate_env_name = "RUN_NOW"

        [[tasks]]
        name = "sync"
        command = "./bin/sync-inventory"
    """

    # "<pattern> [@ <cooldown seconds>]"
    schedule: str = DEFAULT_SCHEDULE
    # Used when the schedule string carries no "@ <seconds>" suffix
    backup_cooldown_seconds: int = Field(default=0, ge=0)
    # Presence of this environment variable selects a single immediate pass
    immediate_env_name: str | None = None
    # IANA name used to evaluate cron patterns
    timezone: str = "UTC"
    tasks: list[TaskConfig] = []

    @field_validator("schedule")
    @classmethod
    def _schedule_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("schedule cannot be empty")
        return v
