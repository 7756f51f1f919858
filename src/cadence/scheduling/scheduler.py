"""Task scheduler - runs registered work units on a recurring trigger.

The scheduler owns the execution guard: a pass is skipped while a previous
pass is still running, or while the cooldown since the last completed pass
has not elapsed. Within a pass, units run strictly in registration order and
a failing unit never stops the units after it.
"""

import inspect
import logging
import math
import os
from collections.abc import Callable, Mapping
from datetime import UTC, datetime

from cadence.scheduling.parser import parse_schedule
from cadence.scheduling.trigger import CronTrigger
from cadence.scheduling.types import (
    DEFAULT_SCHEDULE,
    PassResult,
    ScheduleSpec,
    Sink,
    TickCallback,
    Trigger,
    TriggerFactory,
    TriggerStartFailure,
    WorkUnit,
    WorkUnitFailure,
)

BANNER = "-" * 40


def _utcnow() -> datetime:
    return datetime.now(UTC)


class TaskScheduler:
    """Runs registered work units on a cron pattern with a cooldown.

    Example:
        scheduler = TaskScheduler("*/5 * * * * * @ 30", immediate_env_name="RUN_NOW")

        scheduler.register(sync_inventory)
        scheduler.register(send_report)  # async functions are awaited

        await scheduler.run()
        ...
        scheduler.stop()

    When the variable named by ``immediate_env_name`` is present in the
    environment, ``run()`` executes a single pass and returns instead of
    starting the trigger.
    """

    def __init__(
        self,
        schedule: str = DEFAULT_SCHEDULE,
        *,
        backup_cooldown_seconds: float = 0,
        immediate_env_name: str | None = None,
        logger: Sink | None = None,
        timezone: str = "UTC",
        trigger_factory: TriggerFactory | None = None,
        environ: Mapping[str, str] | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self._spec = parse_schedule(schedule, backup_cooldown_seconds)
        self._immediate_env_name = immediate_env_name
        self._logger: Sink = logger or logging.getLogger(__name__)
        self._timezone = timezone
        self._trigger_factory = trigger_factory or self._cron_trigger
        self._environ = environ
        self._clock = clock or _utcnow

        self._tasks: list[WorkUnit] = []
        self._running = False
        self._last_finish_time: datetime | None = None
        self._trigger: Trigger | None = None

    @property
    def spec(self) -> ScheduleSpec:
        return self._spec

    @property
    def tasks(self) -> tuple[WorkUnit, ...]:
        return tuple(self._tasks)

    @property
    def is_running(self) -> bool:
        """True while a pass is in flight."""
        return self._running

    @property
    def is_scheduled(self) -> bool:
        """True while a trigger is active."""
        return self._trigger is not None

    @property
    def last_finish_time(self) -> datetime | None:
        return self._last_finish_time

    def register(self, task: WorkUnit) -> None:
        """Append a work unit. Units run in registration order."""
        self._tasks.append(task)

    async def run(self) -> None:
        """Run once now, or start the trigger.

        Raises:
            TriggerStartFailure: If the trigger cannot be created or started.
        """
        if self._should_run_immediately():
            name = self._immediate_env_name
            value = self._env()[name]
            self._logger.info(f"Running immediately ({name}={value})")
            await self.execute()
            return

        self._logger.info(
            f"Scheduling tasks. Pattern: {self._spec.pattern}, "
            f"Cooldown: {self._spec.cooldown_seconds} seconds"
        )

        # Never leave two triggers ticking
        self.stop()

        try:
            trigger = self._trigger_factory(self._spec.pattern, self.execute)
            trigger.start()
        except Exception as e:
            self._error(f"Failed to start trigger: {e}", e)
            if isinstance(e, TriggerStartFailure):
                raise
            raise TriggerStartFailure(str(e)) from e

        self._trigger = trigger

    def stop(self) -> None:
        """Stop future ticks. A pass already in flight completes normally."""
        if self._trigger is None:
            return
        self._trigger.stop()
        self._trigger = None
        self._logger.info("Stopped scheduling future runs.")

    async def execute(self) -> PassResult | None:
        """Run one pass over all units unless the guard says to skip.

        Returns:
            The pass result, or None if the pass was skipped.
        """
        now = self._clock()

        if self._running:
            self._logger.info("Previous execution still running. Skipping this run.")
            return None

        if self._last_finish_time is not None and self._spec.cooldown:
            elapsed = now - self._last_finish_time
            if elapsed < self._spec.cooldown:
                remaining = math.ceil((self._spec.cooldown - elapsed).total_seconds())
                self._logger.info(
                    "Cooldown period not elapsed. Skipping this run. "
                    f"{remaining} seconds remaining."
                )
                return None

        self._running = True
        started_at = self._clock()
        failures: list[WorkUnitFailure] = []

        self._logger.info(BANNER)
        self._logger.info("Starting execution")

        try:
            # Snapshot so a unit registered mid-pass waits for the next pass
            tasks = list(self._tasks)
            for position, task in enumerate(tasks, start=1):
                failure = await self._execute_task(task, position, len(tasks))
                if failure:
                    failures.append(failure)
        finally:
            self._running = False

        self._last_finish_time = self._clock()
        result = PassResult(
            started_at=started_at,
            finished_at=self._last_finish_time,
            total=len(tasks),
            failures=failures,
        )

        self._logger.info(
            f"Execution completed. Time taken: {result.duration_seconds:.1f} seconds"
        )
        if self._spec.cooldown:
            next_run = (self._last_finish_time + self._spec.cooldown).astimezone()
            self._logger.info(
                "Next earliest execution will be after "
                f"{next_run.strftime('%Y-%m-%d %H:%M:%S %Z')}"
            )
        self._logger.info(BANNER)

        return result

    async def _execute_task(
        self, task: WorkUnit, position: int, total: int
    ) -> WorkUnitFailure | None:
        try:
            self._logger.info(f"Executing task {position}/{total}")
            result = task()
            if inspect.isawaitable(result):
                await result
            self._logger.info(f"Task {position} completed successfully")
        except Exception as e:
            self._error(f"Task {position} failed: {e}", e)
            return WorkUnitFailure(position, e)
        return None

    def _error(self, msg: str, exc: BaseException) -> None:
        # Only logging loggers accept exc_info; plain sinks get the message
        if isinstance(self._logger, logging.Logger | logging.LoggerAdapter):
            self._logger.error(msg, exc_info=exc)
        else:
            self._logger.error(msg)

    def _env(self) -> Mapping[str, str]:
        return self._environ if self._environ is not None else os.environ

    def _should_run_immediately(self) -> bool:
        if not self._immediate_env_name:
            return False
        return self._immediate_env_name in self._env()

    def _cron_trigger(self, pattern: str, callback: TickCallback) -> Trigger:
        return CronTrigger(pattern, callback, timezone=self._timezone)
