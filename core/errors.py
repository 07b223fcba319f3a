"""Error kinds surfaced by timer commands and the tail loop."""

from __future__ import annotations

from pathlib import Path


class PeperoneError(Exception):
    """Base class for all errors raised by the timer core."""


class TimerNotFound(PeperoneError):
    """A command addressed a timer name that is not in the registry."""

    def __init__(self, name: str) -> None:
        super().__init__(f"timer '{name}' does not exist")
        self.name = name


class PersistenceError(PeperoneError):
    """Loading or saving the timer snapshot failed."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class WatchSetupError(PeperoneError):
    """The change notification source for the snapshot could not be started."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"cannot watch {path}: {reason}")
        self.path = path
        self.reason = reason


__all__ = ["PeperoneError", "TimerNotFound", "PersistenceError", "WatchSetupError"]
