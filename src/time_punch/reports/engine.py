"""Report engine interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Sequence


class ReportEngineError(Exception):
    """The report engine could not be run at all."""


@dataclass(frozen=True)
class ReportResult:
    """Outcome of one report invocation.

    Attributes:
        returncode: Exit status of the engine
        output: Report text for standard output
        errors: Diagnostics for standard error
    """

    returncode: int
    output: str = ""
    errors: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class ReportEngine(ABC):
    """Produces time reports. One method per report kind.

    Every method takes extra arguments that are passed to the engine
    unchanged.
    """

    @abstractmethod
    def balance(self, args: Sequence[str] = ()) -> ReportResult:
        """Balance of the current timeclock file."""

    @abstractmethod
    def weekly_balance(self, args: Sequence[str] = ()) -> ReportResult:
        """Budget balance over the last week."""

    @abstractmethod
    def weekly_register(self, args: Sequence[str] = ()) -> ReportResult:
        """Register over the last week."""

    @abstractmethod
    def monthly_balance(self, args: Sequence[str] = ()) -> ReportResult:
        """Budget balance since the start of last month."""

    @abstractmethod
    def monthly_register(self, args: Sequence[str] = ()) -> ReportResult:
        """Register since the start of last month."""

    @abstractmethod
    def daily_tree(self, args: Sequence[str] = ()) -> ReportResult:
        """Tree balance by day for this week."""

    @abstractmethod
    def weekly_tree(self, args: Sequence[str] = ()) -> ReportResult:
        """Tree balance by week for this month."""

    @abstractmethod
    def quarterly_tree(self, args: Sequence[str] = ()) -> ReportResult:
        """Tree balance by quarter for this year."""
