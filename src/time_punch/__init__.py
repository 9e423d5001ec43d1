"""Time Punch - punch-clock time tracking on top of hledger."""

__version__ = "0.1.0"
