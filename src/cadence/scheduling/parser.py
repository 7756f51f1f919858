"""Schedule string parsing.

A schedule string is a trigger pattern optionally followed by a cooldown
annotation in whole seconds:

    "*/5 * * * * *"        -> every 5 seconds, fallback cooldown
    "*/5 * * * * * @ 30"   -> every 5 seconds, at least 30s between passes

The pattern itself is not validated here; the trigger rejects bad patterns
when it is started.
"""

import math
import re
from datetime import timedelta

from cadence.scheduling.types import InvalidSpecification, ScheduleSpec

_SCHEDULE_RE = re.compile(r"^(?P<pattern>.*?)(?:\s*@\s*(?P<cooldown>\d+))?$", re.DOTALL)


def parse_schedule(raw: str, backup_cooldown_seconds: float = 0) -> ScheduleSpec:
    """Parse a schedule string into a ScheduleSpec.

    Args:
        raw: Pattern with an optional trailing ``@ <seconds>`` cooldown.
        backup_cooldown_seconds: Cooldown used when the string has no
            annotation. Fractions are rounded up to whole seconds.

    Raises:
        InvalidSpecification: If ``raw`` is blank or the fallback is negative.
    """
    if not raw or not raw.strip():
        raise InvalidSpecification("Schedule string cannot be empty")
    if backup_cooldown_seconds < 0:
        raise InvalidSpecification(
            f"Cooldown cannot be negative: {backup_cooldown_seconds}"
        )

    match = _SCHEDULE_RE.match(raw.strip())
    # The pattern group is lazy and optional, so this always matches
    assert match is not None

    cooldown = match.group("cooldown")
    if cooldown is not None:
        seconds = int(cooldown)
    else:
        seconds = math.ceil(backup_cooldown_seconds)

    return ScheduleSpec(
        pattern=match.group("pattern").strip(),
        cooldown=timedelta(seconds=seconds),
    )
