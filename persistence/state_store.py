from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path

from pydantic import ValidationError

from core.commands import SnapshotStore
from core.errors import PersistenceError
from core.registry import TimerRegistry

from .watcher import ChangeFeed

logger = logging.getLogger(__name__)


class StateStore(SnapshotStore):
    """
    JSON snapshot of the whole timer registry.
    Saves are atomic (temp file + rename) so a concurrent reader sees either
    the previous or the new snapshot, never a partial one. There is no
    locking: concurrent writers race and the last one wins.
    """

    def __init__(self, path: Path, *, settle: float = 0.05):
        self.path = Path(path)
        self.settle = settle

    def load(self) -> TimerRegistry:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.debug("no snapshot at %s, starting empty", self.path)
            return TimerRegistry()
        except OSError as exc:
            raise PersistenceError(self.path, f"cannot read snapshot ({exc})") from exc

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise PersistenceError(self.path, f"snapshot is not valid JSON ({exc})") from exc
        try:
            registry = TimerRegistry.model_validate(data)
        except ValidationError as exc:
            raise PersistenceError(self.path, f"snapshot is malformed ({exc})") from exc

        logger.debug("loaded %d timer(s) from %s", len(registry), self.path)
        return registry

    def save(self, registry: TimerRegistry) -> None:
        payload = registry.model_dump_json(indent=2)
        tmp_name = None
        try:
            ensure_dir(self.path.parent)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                delete=False,
            ) as fh:
                tmp_name = fh.name
                fh.write(payload)
                fh.write("\n")
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, self.path)
            tmp_name = None
        except OSError as exc:
            raise PersistenceError(self.path, f"cannot write snapshot ({exc})") from exc
        finally:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)

        logger.debug("saved %d timer(s) to %s", len(registry), self.path)

    def watch(self) -> ChangeFeed:
        """Start and return a change feed for this snapshot's location."""

        feed = ChangeFeed(self.path, settle=self.settle)
        feed.start()
        return feed


def ensure_dir(p: Path) -> None:
    p.mkdir(parents=True, exist_ok=True)


__all__ = ["StateStore", "ensure_dir"]
