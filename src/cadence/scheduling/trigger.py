"""Cron trigger - ticks an async callback on a calendar pattern.

Patterns use six fields with seconds first (second, minute, hour,
day-of-month, month, day-of-week). Classic five-field patterns are accepted
and fire at second 0.
"""

import asyncio
import logging
from datetime import UTC, datetime, tzinfo
from zoneinfo import ZoneInfo

from croniter import croniter

from cadence.scheduling.types import TickCallback, TriggerStartFailure

logger = logging.getLogger(__name__)


def _resolve_timezone(timezone: str) -> tzinfo:
    try:
        return ZoneInfo(timezone)
    except Exception:
        logger.warning("invalid_timezone", extra={"schedule.timezone": timezone})
        return UTC


def _iter_pattern(pattern: str, base: datetime) -> croniter:
    try:
        return croniter(pattern, base, second_at_beginning=True)
    except Exception as e:
        raise TriggerStartFailure(f"Invalid cron pattern {pattern!r}: {e}") from e


def validate_pattern(pattern: str) -> None:
    """Raise TriggerStartFailure if the pattern cannot be evaluated."""
    if not pattern.strip():
        raise TriggerStartFailure("Cron pattern cannot be empty")
    _iter_pattern(pattern, datetime.now(UTC)).get_next(datetime)


def next_fire_times(
    pattern: str,
    count: int,
    *,
    base: datetime | None = None,
    timezone: str = "UTC",
) -> list[datetime]:
    """Compute the next ``count`` fire times after ``base`` (default: now).

    Returned datetimes are aware and expressed in ``timezone``.
    """
    validate_pattern(pattern)
    tz = _resolve_timezone(timezone)
    start = base.astimezone(tz) if base else datetime.now(tz)
    it = _iter_pattern(pattern, start)
    return [it.get_next(datetime) for _ in range(count)]


class CronTrigger:
    """Fires ``callback`` on every occurrence of a cron pattern.

    Each tick spawns the callback as its own task, so a slow callback never
    delays the next tick. Stopping the trigger only cancels the tick loop;
    callbacks already in flight run to completion.

    Example:
        trigger = CronTrigger("*/5 * * * * *", scheduler.execute)
        trigger.start()  # inside a running event loop
        ...
        trigger.stop()
    """

    def __init__(
        self,
        pattern: str,
        callback: TickCallback,
        *,
        timezone: str = "UTC",
    ):
        self._pattern = pattern
        self._callback = callback
        self._timezone = timezone
        self._tz = _resolve_timezone(timezone)
        self._task: asyncio.Task | None = None
        self._inflight: set[asyncio.Task] = set()
        self._tick_count = 0

    @property
    def pattern(self) -> str:
        return self._pattern

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def tick_count(self) -> int:
        return self._tick_count

    def start(self) -> None:
        """Start ticking.

        Raises:
            TriggerStartFailure: If the pattern is malformed or there is no
                running event loop.
        """
        if self.is_running:
            return
        validate_pattern(self._pattern)
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError as e:
            raise TriggerStartFailure("Cron trigger requires a running event loop") from e

        self._task = loop.create_task(self._tick_loop())
        logger.debug(
            "cron_trigger_started",
            extra={"schedule.cron": self._pattern, "schedule.timezone": self._timezone},
        )

    def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        self._task = None
        logger.debug("cron_trigger_stopped", extra={"schedule.cron": self._pattern})

    def next_fire_time(self) -> datetime:
        return _iter_pattern(self._pattern, datetime.now(self._tz)).get_next(datetime)

    async def _tick_loop(self) -> None:
        last_fire: datetime | None = None
        while True:
            now = datetime.now(self._tz)
            # sleep() can wake a hair early; never fire the same slot twice
            base = max(now, last_fire) if last_fire else now
            fire_at = _iter_pattern(self._pattern, base).get_next(datetime)
            delay = (fire_at - datetime.now(self._tz)).total_seconds()
            if delay > 0:
                await asyncio.sleep(delay)

            last_fire = fire_at
            self._tick_count += 1
            task = asyncio.create_task(self._fire())
            self._inflight.add(task)
            task.add_done_callback(self._inflight.discard)

    async def _fire(self) -> None:
        try:
            await self._callback()
        except Exception as e:
            logger.error(
                "trigger_callback_failed",
                extra={"schedule.cron": self._pattern, "error.message": str(e)},
            )
