"""The named collection of timers that is loaded and saved as one snapshot."""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from core.errors import TimerNotFound
from core.timing.timer import Timer

SNAPSHOT_VERSION = 1


class TimerRegistry(BaseModel):
    version: int = SNAPSHOT_VERSION
    timers: Dict[str, Timer] = Field(default_factory=dict)

    @field_validator("timers")
    @classmethod
    def _names_non_empty(cls, v: Dict[str, Timer]) -> Dict[str, Timer]:
        for name in v:
            if not name:
                raise ValueError("timer names must not be empty")
        return v

    def __contains__(self, name: object) -> bool:
        return name in self.timers

    def __len__(self) -> int:
        return len(self.timers)

    def find(self, name: str) -> Optional[Timer]:
        return self.timers.get(name)

    def get(self, name: str) -> Timer:
        """Return the timer called ``name`` or raise :class:`TimerNotFound`."""

        try:
            return self.timers[name]
        except KeyError:
            raise TimerNotFound(name) from None

    def create(self, name: str, now: Optional[datetime] = None) -> Timer:
        """Insert a new running timer, replacing any timer of the same name."""

        if not name:
            raise ValueError("timer name must not be empty")
        timer = Timer.started(now)
        self.timers[name] = timer
        return timer

    def remove(self, name: str) -> Timer:
        timer = self.get(name)
        del self.timers[name]
        return timer

    def names(self) -> List[str]:
        return sorted(self.timers)


__all__ = ["SNAPSHOT_VERSION", "TimerRegistry"]
