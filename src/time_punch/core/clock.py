"""Punch clock: clock in, clock out, switch tasks."""

import logging
import re
from datetime import datetime
from typing import Callable, Optional, Sequence

from time_punch.core.models import EntryKind, TimeEntry
from time_punch.core.timeclock import TimeclockFile

logger = logging.getLogger(__name__)

TIME_TOKEN = re.compile(r"^\d{2}:\d{2}$")


def resolve_timestamp(
    args: Sequence[str], now: datetime
) -> tuple[datetime, list[str]]:
    """Split an optional leading HH:MM token off the arguments.

    Args:
        args: Command arguments
        now: Current time

    Returns:
        Tuple of (timestamp, remaining arguments). The timestamp is today at
        HH:MM:00 when a token was given, otherwise ``now`` to the second.

    Raises:
        ValueError: If the token looks like HH:MM but is not a valid time
    """
    if args and TIME_TOKEN.match(args[0]):
        time_part = datetime.strptime(args[0], "%H:%M").time()
        return datetime.combine(now.date(), time_part), list(args[1:])
    return now.replace(microsecond=0), list(args)


class PunchClock:
    """Writes clock-in and clock-out entries to a timeclock file."""

    def __init__(
        self,
        timeclock: TimeclockFile,
        now: Optional[Callable[[], datetime]] = None,
    ):
        """Initialize punch clock.

        Args:
            timeclock: Storage for entries
            now: Clock source. Defaults to datetime.now
        """
        self.timeclock = timeclock
        self._now = now or datetime.now

    def clock_in(self, args: Sequence[str]) -> TimeEntry:
        """Begin a task.

        Args:
            args: [HH:MM] account [description...]

        Returns:
            Appended entry
        """
        timestamp, rest = resolve_timestamp(args, self._now())
        activity = " ".join(rest)
        if not activity:
            logger.warning("Clock-in without an account; hledger will reject it")

        entry = TimeEntry(EntryKind.CLOCK_IN, timestamp, activity)
        self.timeclock.append(entry)
        return entry

    def clock_out(self, args: Sequence[str] = ()) -> TimeEntry:
        """End the current task.

        Args:
            args: [HH:MM]; anything after the time token is ignored

        Returns:
            Appended entry
        """
        timestamp, _ = resolve_timestamp(args, self._now())
        entry = TimeEntry(EntryKind.CLOCK_OUT, timestamp)
        self.timeclock.append(entry)
        return entry

    def switch(self, args: Sequence[str]) -> tuple[TimeEntry, TimeEntry]:
        """End the current task and begin the next one.

        Both entries receive the same arguments, so a leading HH:MM token
        applies to the clock-out and the clock-in alike.

        Returns:
            Tuple of (clock-out entry, clock-in entry)
        """
        stopped = self.clock_out(args)
        started = self.clock_in(args)
        return stopped, started
