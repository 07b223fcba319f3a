"""Timer commands.

Each mutating command is one load -> single mutation -> save cycle against
the store.  Lookups happen before anything is changed, so a failed command
never writes the snapshot.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import List, Optional

from core.registry import TimerRegistry
from core.timing.clock import now_utc
from core.timing.timer import Timer

logger = logging.getLogger(__name__)


class SnapshotStore:
    """Internal protocol for the persistence gateway."""

    def load(self) -> TimerRegistry:
        """Return the current snapshot, or an empty registry if none exists."""
        raise NotImplementedError

    def save(self, registry: TimerRegistry) -> None:
        """Persist the whole registry, replacing the previous snapshot."""
        raise NotImplementedError


@dataclass(frozen=True)
class TimerStatus:
    """Read-only view of one timer at a given instant."""

    name: str
    running: bool
    elapsed: timedelta


class TimerCommands:
    def __init__(self, store: SnapshotStore) -> None:
        self.store = store

    def _commit(self, registry: TimerRegistry, action: str, name: str) -> None:
        self.store.save(registry)
        logger.debug("%s '%s' (%d timer(s) saved)", action, name, len(registry))

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def create(self, name: str, now: Optional[datetime] = None) -> Timer:
        """Create a running timer, overwriting any existing one of that name."""

        registry = self.store.load()
        timer = registry.create(name, now)
        self._commit(registry, "created", name)
        return timer

    def start(self, name: str, now: Optional[datetime] = None) -> Timer:
        registry = self.store.load()
        timer = registry.get(name)
        timer.start(now)
        self._commit(registry, "started", name)
        return timer

    def stop(self, name: str, now: Optional[datetime] = None) -> Timer:
        registry = self.store.load()
        timer = registry.get(name)
        timer.stop(now)
        self._commit(registry, "stopped", name)
        return timer

    def toggle(self, name: str, now: Optional[datetime] = None) -> Timer:
        registry = self.store.load()
        timer = registry.get(name)
        timer.toggle(now)
        self._commit(registry, "toggled", name)
        return timer

    def remove(self, name: str) -> Timer:
        registry = self.store.load()
        timer = registry.remove(name)
        self._commit(registry, "removed", name)
        return timer

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def list(self) -> List[str]:
        return self.store.load().names()

    def statuses(self, now: Optional[datetime] = None) -> List[TimerStatus]:
        now = now or now_utc()
        registry = self.store.load()
        return [_status(name, registry.get(name), now) for name in registry.names()]

    def show(self, name: str, now: Optional[datetime] = None) -> TimerStatus:
        timer = self.store.load().get(name)
        return _status(name, timer, now or now_utc())


def _status(name: str, timer: Timer, now: datetime) -> TimerStatus:
    return TimerStatus(name=name, running=timer.is_running, elapsed=timer.elapsed(now))


__all__ = ["SnapshotStore", "TimerCommands", "TimerStatus"]
