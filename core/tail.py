"""Live display of one timer's elapsed time.

The loop prints the elapsed time, then sleeps until whichever comes first:

  - the instant the displayed second would change (only while running)
  - a change notification for the snapshot file

On a notification it coalesces the burst, reloads the registry and looks the
timer up again, so starts/stops/removals done by other processes show up
immediately.  Everything runs on the caller's thread; the only blocking call
is :meth:`ChangeSource.wait`.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Callable, Optional

from core.errors import TimerNotFound
from core.registry import TimerRegistry
from core.timing.clock import ZERO, format_elapsed, now_utc, until_next_second
from core.timing.timer import Timer

logger = logging.getLogger(__name__)


class ChangeSource:
    """Internal protocol for snapshot change notifications."""

    def wait(self, timeout: Optional[float]) -> bool:
        """Block up to ``timeout`` seconds (forever if ``None``).

        Return ``True`` when a change notification arrived, ``False`` on
        timeout.
        """
        raise NotImplementedError

    def coalesce(self) -> int:
        """Discard notifications belonging to the burst just observed."""
        raise NotImplementedError


class TailLoop:
    def __init__(
        self,
        name: str,
        load: Callable[[], TimerRegistry],
        changes: ChangeSource,
        *,
        keep_going: bool = False,
        display: Callable[[str], None] = print,
        clock: Callable[[], datetime] = now_utc,
    ) -> None:
        self.name = name
        self.keep_going = keep_going
        self._load = load
        self._changes = changes
        self._display = display
        self._clock = clock
        self.timer: Optional[Timer] = None

    def _refresh(self) -> None:
        self.timer = self._load().find(self.name)

    def _next_wait(self, elapsed: timedelta) -> Optional[float]:
        if self.timer is None or not self.timer.is_running:
            return None
        return until_next_second(elapsed).total_seconds()

    def run(self) -> None:
        """Tail the timer until it disappears (unless ``keep_going``).

        Raises :class:`TimerNotFound` up front when the timer does not exist
        and ``keep_going`` is false.  Disappearing later is a normal exit.
        """

        self._refresh()
        if self.timer is None and not self.keep_going:
            raise TimerNotFound(self.name)

        while True:
            elapsed = self.timer.elapsed(self._clock()) if self.timer is not None else ZERO
            self._display(format_elapsed(elapsed))

            timeout = self._next_wait(elapsed)
            if not self._changes.wait(timeout):
                continue

            skipped = self._changes.coalesce()
            logger.debug("snapshot changed (%d extra notification(s)), reloading", skipped)
            self._refresh()
            if self.timer is None and not self.keep_going:
                logger.debug("timer '%s' is gone, stopping tail", self.name)
                return


__all__ = ["ChangeSource", "TailLoop"]
