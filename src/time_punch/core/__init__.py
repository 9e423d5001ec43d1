"""Core functionality for punch-clock tracking."""

from time_punch.core.clock import PunchClock
from time_punch.core.config import ClockConfig, load_config
from time_punch.core.models import Command, EntryKind, TimeEntry
from time_punch.core.timeclock import TimeclockFile

__all__ = [
    "ClockConfig",
    "Command",
    "EntryKind",
    "PunchClock",
    "TimeEntry",
    "TimeclockFile",
    "load_config",
]
