"""Scheduling types.

Public types:
- ScheduleSpec: Parsed pattern + cooldown
- WorkUnit: A registered unit of work (sync or async callable)
- Sink: Destination for status messages (a logging.Logger qualifies)
- Trigger: Recurring timer that calls back into the scheduler
- PassResult: Outcome of one full pass over the registered units
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Protocol

# Second 0 of minute 5 of every hour
DEFAULT_SCHEDULE = "0 5 * * * *"


class SchedulerError(Exception):
    """Base class for scheduler errors."""


class InvalidSpecification(SchedulerError, ValueError):
    """The schedule string (or fallback cooldown) cannot be used."""


class TriggerStartFailure(SchedulerError):
    """The trigger engine rejected the pattern or could not be started."""


class WorkUnitFailure(SchedulerError):
    """A single work unit raised during a pass.

    Only ever collected into a PassResult and logged, never raised.
    """

    def __init__(self, position: int, error: BaseException):
        super().__init__(f"Task {position} failed: {error}")
        self.position = position
        self.error = error
        self.__cause__ = error


@dataclass(frozen=True)
class ScheduleSpec:
    """A trigger pattern plus the minimum gap between passes."""

    pattern: str
    cooldown: timedelta = timedelta(0)

    @property
    def cooldown_seconds(self) -> int:
        return int(self.cooldown.total_seconds())


WorkUnit = Callable[[], Any]
TickCallback = Callable[[], Awaitable[Any]]


class Sink(Protocol):
    def info(self, msg: str, /) -> None: ...

    def error(self, msg: str, /) -> None: ...


class Trigger(Protocol):
    @property
    def is_running(self) -> bool: ...

    def start(self) -> None: ...

    def stop(self) -> None: ...


TriggerFactory = Callable[[str, TickCallback], Trigger]


@dataclass
class PassResult:
    """Outcome of one pass over all registered work units."""

    started_at: datetime
    finished_at: datetime
    total: int
    failures: list[WorkUnitFailure] = field(default_factory=list)

    @property
    def duration_seconds(self) -> float:
        return (self.finished_at - self.started_at).total_seconds()

    @property
    def ok(self) -> bool:
        return not self.failures
