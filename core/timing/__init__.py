from .clock import format_elapsed, now_utc
from .timer import Timer

__all__ = ["Timer", "format_elapsed", "now_utc"]
