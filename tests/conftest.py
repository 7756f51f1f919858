"""Shared test fixtures and factories."""

from datetime import UTC, datetime, timedelta

import pytest

from cadence.scheduling.types import TickCallback

# =============================================================================
# Sink Fixtures
# =============================================================================


class RecordingSink:
    """Sink with only the two required methods; keeps every message."""

    def __init__(self) -> None:
        self.infos: list[str] = []
        self.errors: list[str] = []

    def info(self, msg: str) -> None:
        self.infos.append(msg)

    def error(self, msg: str) -> None:
        self.errors.append(msg)

    @property
    def messages(self) -> list[str]:
        return self.infos + self.errors


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


# =============================================================================
# Trigger Fixtures
# =============================================================================


class FakeTrigger:
    """Trigger driven by hand via fire()."""

    def __init__(self, pattern: str, callback: TickCallback) -> None:
        self.pattern = pattern
        self.callback = callback
        self.started = False
        self.stopped = False

    @property
    def is_running(self) -> bool:
        return self.started and not self.stopped

    def start(self) -> None:
        self.started = True

    def stop(self) -> None:
        self.stopped = True

    async def fire(self) -> None:
        if self.is_running:
            await self.callback()


class FakeTriggerFactory:
    """Trigger factory that remembers every trigger it built."""

    def __init__(self) -> None:
        self.triggers: list[FakeTrigger] = []

    def __call__(self, pattern: str, callback: TickCallback) -> FakeTrigger:
        trigger = FakeTrigger(pattern, callback)
        self.triggers.append(trigger)
        return trigger

    @property
    def active(self) -> list[FakeTrigger]:
        return [t for t in self.triggers if t.is_running]


@pytest.fixture
def trigger_factory() -> FakeTriggerFactory:
    return FakeTriggerFactory()


# =============================================================================
# Clock Fixtures
# =============================================================================


class FakeClock:
    """Clock that only moves when told to."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2026, 1, 12, 9, 0, 0, tzinfo=UTC))


# =============================================================================
# CLI Fixtures
# =============================================================================


@pytest.fixture
def cli_runner():
    """Create a Typer CLI test runner with colors disabled."""
    from typer.testing import CliRunner

    return CliRunner(env={"NO_COLOR": "1"})


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Keep config discovery away from the developer's real files."""
    home = tmp_path / "cadence-home"
    monkeypatch.setenv("CADENCE_HOME", str(home))
    for var in ("CADENCE_SCHEDULE", "CADENCE_COOLDOWN_SECONDS", "CADENCE_IMMEDIATE_ENV"):
        monkeypatch.delenv(var, raising=False)
    return home
