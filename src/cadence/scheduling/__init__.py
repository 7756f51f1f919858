"""Scheduling subsystem - recurring execution of registered work units.

Public API:
- TaskScheduler: Execution guard, task pipeline and run/stop lifecycle
- CronTrigger: Cron-pattern trigger engine driving the scheduler
- parse_schedule: Parses "<pattern> [@ <seconds>]" into a ScheduleSpec
- command_task: Work unit that runs a shell command

Types:
- ScheduleSpec, PassResult, Sink, Trigger, WorkUnit
- InvalidSpecification, TriggerStartFailure, WorkUnitFailure
"""

from cadence.scheduling.commands import command_task
from cadence.scheduling.parser import parse_schedule
from cadence.scheduling.scheduler import TaskScheduler
from cadence.scheduling.trigger import CronTrigger, next_fire_times, validate_pattern
from cadence.scheduling.types import (
    DEFAULT_SCHEDULE,
    InvalidSpecification,
    PassResult,
    ScheduleSpec,
    SchedulerError,
    Sink,
    Trigger,
    TriggerFactory,
    TriggerStartFailure,
    WorkUnit,
    WorkUnitFailure,
)

__all__ = [
    "DEFAULT_SCHEDULE",
    "CronTrigger",
    "InvalidSpecification",
    "PassResult",
    "ScheduleSpec",
    "SchedulerError",
    "Sink",
    "TaskScheduler",
    "Trigger",
    "TriggerFactory",
    "TriggerStartFailure",
    "WorkUnit",
    "WorkUnitFailure",
    "command_task",
    "next_fire_times",
    "parse_schedule",
    "validate_pattern",
]
