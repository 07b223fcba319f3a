# config/paths.py
"""
Cross-platform location of the timer snapshot.

- Honors PEPERONE_DATA_ROOT (directory) and PEPERONE_STATE_FILE (exact file)
- Sensible OS defaults when env vars are not provided
- The directory is created lazily on first save, not here
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

STATE_FILE_NAME = "timers.json"


# ---------- OS defaults (used only if env vars not set) ----------

def _platform_default_base() -> Path:
    """
    Returns an OS-specific base directory for user data, following conventions:
    - Windows: %LOCALAPPDATA%/Peperone
    - macOS:   ~/Library/Application Support/Peperone
    - Linux:   ~/.local/share/peperone
    """
    if sys.platform.startswith("win"):
        base = os.getenv("LOCALAPPDATA") or os.getenv("APPDATA") or str(Path.home() / "AppData" / "Local")
        return Path(base) / "Peperone"
    elif sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "Peperone"
    else:
        # Linux / other POSIX
        return Path(os.getenv("XDG_DATA_HOME") or Path.home() / ".local" / "share") / "peperone"


def _env_or_default_data_root() -> Path:
    return Path(os.getenv("PEPERONE_DATA_ROOT") or _platform_default_base())


# ---------- Core dataclass ----------

@dataclass(frozen=True)
class Paths:
    data_root: Path
    state_file: Path

    @staticmethod
    def from_env(state_file: Optional[Path] = None) -> "Paths":
        """
        Resolve locations. Precedence for the snapshot file:
        explicit argument > PEPERONE_STATE_FILE > <data root>/timers.json
        """
        data = _env_or_default_data_root().expanduser()
        explicit = state_file or os.getenv("PEPERONE_STATE_FILE")
        state = Path(explicit).expanduser() if explicit else data / STATE_FILE_NAME
        return Paths(data, state)


# ---------- Singleton access ----------

_paths_singleton: Optional[Paths] = None

def get_paths(force_refresh: bool = False) -> Paths:
    """
    Return a cached Paths instance built from the environment.
    """
    global _paths_singleton
    if force_refresh or _paths_singleton is None:
        _paths_singleton = Paths.from_env()
    return _paths_singleton


__all__ = ["Paths", "STATE_FILE_NAME", "get_paths"]
