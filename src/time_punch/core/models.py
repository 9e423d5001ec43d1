"""Core data models for punch-clock tracking."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


class EntryKind(Enum):
    """Kinds of timeclock lines."""

    CLOCK_IN = "i"
    CLOCK_OUT = "o"


@dataclass(frozen=True)
class TimeEntry:
    """A single timeclock line.

    Attributes:
        kind: Clock-in or clock-out
        timestamp: When the event happened (second precision)
        activity: Account and optional description (clock-in only)
    """

    kind: EntryKind
    timestamp: datetime
    activity: str = ""

    @property
    def is_clock_in(self) -> bool:
        """Check if this entry starts a task."""
        return self.kind is EntryKind.CLOCK_IN

    def to_line(self) -> str:
        """Format as a timeclock line (without trailing newline)."""
        line = f"{self.kind.value} {self.timestamp.strftime(TIMESTAMP_FORMAT)}"
        if self.is_clock_in and self.activity:
            line += f" {self.activity}"
        return line


class Command(Enum):
    """Dispatcher commands, keyed by canonical keyword."""

    IN = "in"
    OUT = "out"
    SWITCH = "switch"
    TAIL = "tail"
    EDIT = "edit"
    BAL = "bal"
    WBAL = "wbal"
    WREG = "wreg"
    MBAL = "mbal"
    MREG = "mreg"
    DAILY = "daily"
    WEEKLY = "weekly"
    QUARTERLY = "quarterly"
    CONFIG = "config"
    UNKNOWN = ""

    @property
    def aliases(self) -> tuple[str, ...]:
        """Short keywords accepted for this command."""
        return COMMAND_ALIASES.get(self, ())

    @property
    def keywords(self) -> tuple[str, ...]:
        """All keywords (aliases first, canonical last)."""
        if self is Command.UNKNOWN:
            return ()
        return self.aliases + (self.value,)

    @classmethod
    def parse(cls, keyword: str) -> "Command":
        """Resolve a keyword or alias; unrecognized input gives UNKNOWN."""
        for command in cls:
            if keyword in command.keywords:
                return command
        return cls.UNKNOWN


COMMAND_ALIASES: dict[Command, tuple[str, ...]] = {
    Command.IN: ("i",),
    Command.OUT: ("o",),
    Command.SWITCH: ("n", "sw", "next"),
    Command.TAIL: ("s", "stat", "t"),
    Command.EDIT: ("e",),
    Command.BAL: ("b",),
    Command.WBAL: ("wb",),
    Command.WREG: ("wr",),
    Command.MBAL: ("mb",),
    Command.MREG: ("mr",),
    Command.DAILY: ("d",),
    Command.WEEKLY: ("w",),
    Command.QUARTERLY: ("q",),
    Command.CONFIG: ("c",),
}
