from .state_store import StateStore, ensure_dir
from .watcher import ChangeFeed

__all__ = ["ChangeFeed", "StateStore", "ensure_dir"]
