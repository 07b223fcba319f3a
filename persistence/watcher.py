"""Change notifications for the timer snapshot.

A :mod:`watchdog` observer watches the directory holding the snapshot (the file
itself is replaced on every save, so watching its inode would go stale) and
pushes one token per relevant file system event onto a queue.  The tail loop
consumes that queue from its own thread; the observer thread never touches
timer state.

Relevance is loose: anything that might have changed the
snapshot counts (created, modified, deleted, moved to or from, closed after
writing), as does the watched directory itself being deleted or moved.
Open and close-without-write events are filtered out.  An extra reload is
harmless, a missed one is not.
"""

from __future__ import annotations

import logging
import os
import queue
import time
from pathlib import Path
from typing import Optional

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from core.errors import WatchSetupError
from core.tail import ChangeSource

logger = logging.getLogger(__name__)

IGNORED_EVENT_TYPES = frozenset({"opened", "closed_no_write"})
DIRECTORY_EVENT_TYPES = frozenset({"deleted", "moved"})

# How often an indefinite wait checks that the observer thread is still alive.
LIVENESS_INTERVAL = 5.0

# Upper bound on how long a burst of notifications may postpone a reload.
MAX_SETTLE = 1.0


def _norm(p: str) -> str:
    return os.path.normcase(os.path.abspath(p))


class _SnapshotEventHandler(FileSystemEventHandler):
    def __init__(self, target: str, directory: str, sink: "queue.Queue[str]") -> None:
        super().__init__()
        self._target = _norm(target)
        self._directory = _norm(directory)
        self._sink = sink

    def _touches_snapshot(self, event: FileSystemEvent) -> bool:
        for raw in (event.src_path, getattr(event, "dest_path", "") or ""):
            if not raw:
                continue
            if isinstance(raw, bytes):
                raw = os.fsdecode(raw)
            p = _norm(raw)
            if p == self._target:
                return True
            # The directory itself going away takes the snapshot with it.
            if p == self._directory and event.event_type in DIRECTORY_EVENT_TYPES:
                return True
        return False

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.event_type in IGNORED_EVENT_TYPES:
            return
        if not self._touches_snapshot(event):
            return
        logger.debug("snapshot event: %s %s", event.event_type, event.src_path)
        self._sink.put(event.event_type)


class ChangeFeed(ChangeSource):
    """Queue of change notifications for one snapshot file.

    Usable as a context manager; the observer is stopped on exit.
    """

    def __init__(self, path: Path, *, settle: float = 0.05) -> None:
        self.path = Path(path)
        self.settle = max(0.0, settle)
        self._queue: "queue.Queue[str]" = queue.Queue()
        self._observer: Optional[Observer] = None
        self._observer_lost = False

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def start(self) -> None:
        if self._observer is not None:
            return
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            directory = os.path.realpath(self.path.parent)
            target = os.path.join(directory, self.path.name)
            handler = _SnapshotEventHandler(target, directory, self._queue)
            observer = Observer()
            observer.schedule(handler, directory, recursive=False)
            observer.start()
        except (OSError, RuntimeError) as exc:
            raise WatchSetupError(self.path, str(exc)) from exc
        self._observer = observer
        logger.debug("watching %s for changes", directory)

    def stop(self) -> None:
        observer, self._observer = self._observer, None
        if observer is None:
            return
        observer.stop()
        observer.join(timeout=2.0)

    def __enter__(self) -> "ChangeFeed":
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()

    # ------------------------------------------------------------------
    # ChangeSource
    # ------------------------------------------------------------------
    def wait(self, timeout: Optional[float]) -> bool:
        if self._observer is None:
            raise WatchSetupError(self.path, "change feed is not started")
        if self._observer_lost:
            raise WatchSetupError(self.path, "file system observer stopped")

        deadline = None if timeout is None else time.monotonic() + max(0.0, timeout)
        while True:
            if deadline is None:
                chunk = LIVENESS_INTERVAL
            else:
                chunk = min(LIVENESS_INTERVAL, max(0.0, deadline - time.monotonic()))
            try:
                self._queue.get(timeout=chunk)
                return True
            except queue.Empty:
                pass
            if not self._observer.is_alive():
                # Report once so the caller rechecks, then fail on the next wait.
                logger.warning("file system observer for %s stopped", self.path)
                self._observer_lost = True
                return True
            if deadline is not None and time.monotonic() >= deadline:
                return False

    def coalesce(self) -> int:
        """Swallow queued notifications plus any arriving within the settle window."""

        drained = 0
        while True:
            try:
                self._queue.get_nowait()
                drained += 1
            except queue.Empty:
                break

        if self.settle <= 0:
            return drained
        give_up = time.monotonic() + MAX_SETTLE
        while time.monotonic() < give_up:
            try:
                self._queue.get(timeout=self.settle)
                drained += 1
            except queue.Empty:
                break
        return drained


__all__ = ["ChangeFeed"]
