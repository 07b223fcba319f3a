from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from .clock import ZERO, now_utc


class Timer(BaseModel):
    """A named duration counter that can be started and stopped repeatedly.

    Two states:
      - stopped: ``running_since`` is ``None``; elapsed time is ``accumulated``
      - running: ``running_since`` is the start of the current interval;
        elapsed time is ``accumulated`` plus the current interval

    Only the banked total is kept, individual intervals are not recorded.
    Every transition accepts an explicit ``now`` so callers can pin the
    instant; it defaults to the current UTC time.
    """

    running_since: Optional[datetime] = None
    accumulated: timedelta = Field(default_factory=timedelta)

    @field_validator("running_since")
    @classmethod
    def _aware_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        if v is None:
            return None
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)

    @field_validator("accumulated")
    @classmethod
    def _non_negative(cls, v: timedelta) -> timedelta:
        if v < ZERO:
            raise ValueError("accumulated duration must not be negative")
        return v

    # ----- factories -----

    @classmethod
    def started(cls, now: Optional[datetime] = None) -> "Timer":
        """Return a fresh timer that is already running."""

        return cls(running_since=now or now_utc())

    # ----- state -----

    @property
    def is_running(self) -> bool:
        return self.running_since is not None

    def _current_interval(self, now: datetime) -> timedelta:
        if self.running_since is None:
            return ZERO
        # A start in the future (clock stepped back) counts as nothing yet.
        return max(now - self.running_since, ZERO)

    def elapsed(self, now: Optional[datetime] = None) -> timedelta:
        return self.accumulated + self._current_interval(now or now_utc())

    # ----- transitions -----

    def start(self, now: Optional[datetime] = None) -> None:
        """Start the timer, or re-base the current interval if already running."""

        now = now or now_utc()
        self.accumulated += self._current_interval(now)
        self.running_since = now

    def stop(self, now: Optional[datetime] = None) -> None:
        if self.running_since is None:
            return
        now = now or now_utc()
        self.accumulated += self._current_interval(now)
        self.running_since = None

    def toggle(self, now: Optional[datetime] = None) -> None:
        if self.is_running:
            self.stop(now)
        else:
            self.start(now)


__all__ = ["Timer"]
