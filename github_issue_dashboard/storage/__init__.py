"""Result caching and time tracking persistence."""

from .cache import ResultCache, make_key
from .manager import TimeTrackingStorage

__all__ = ["ResultCache", "TimeTrackingStorage", "make_key"]
