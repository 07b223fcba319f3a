from datetime import datetime, timedelta, timezone

import pytest

from core.commands import SnapshotStore
from core.registry import TimerRegistry

T0 = datetime(2026, 10, 19, 8, 0, 0, tzinfo=timezone.utc)


class MemoryStore(SnapshotStore):
    """Serialises through JSON like the file store and counts saves."""

    def __init__(self) -> None:
        self._snapshot = TimerRegistry().model_dump_json()
        self.saves = 0

    def load(self) -> TimerRegistry:
        return TimerRegistry.model_validate_json(self._snapshot)

    def save(self, registry: TimerRegistry) -> None:
        self._snapshot = registry.model_dump_json()
        self.saves += 1


class FakeClock:
    def __init__(self, now: datetime = T0) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def clock():
    return FakeClock()
