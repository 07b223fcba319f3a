from __future__ import annotations

from datetime import datetime, timedelta, timezone

ONE_SECOND = timedelta(seconds=1)
ZERO = timedelta(0)


def now_utc() -> datetime:
    """Return the current wall-clock time as an aware UTC datetime.

    Timers are shared between processes through the snapshot file, so a
    monotonic clock (which is per-boot and per-process comparable only) is not
    usable here.
    """

    return datetime.now(timezone.utc)


def whole_seconds(duration: timedelta) -> int:
    """Return ``duration`` in whole seconds, truncated toward zero."""

    if duration <= ZERO:
        return 0
    return duration // ONE_SECOND


def until_next_second(duration: timedelta) -> timedelta:
    """Time left until the whole-second counter of ``duration`` increments."""

    if duration <= ZERO:
        return ONE_SECOND
    return ONE_SECOND - (duration % ONE_SECOND)


def format_elapsed(duration: timedelta) -> str:
    """Render ``duration`` as ``H:MM:SS`` (hours > 0) or ``M:SS``.

    Examples:
      0:00, 0:59, 1:01, 59:59, 1:00:00, 123:04:05
    """

    total = whole_seconds(duration)
    hours = total // 3600
    minutes = (total // 60) % 60
    seconds = total % 60
    if hours > 0:
        return f"{hours}:{minutes:02d}:{seconds:02d}"
    return f"{minutes}:{seconds:02d}"


__all__ = [
    "ONE_SECOND",
    "ZERO",
    "format_elapsed",
    "now_utc",
    "until_next_second",
    "whole_seconds",
]
