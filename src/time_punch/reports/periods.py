"""Report periods passed to hledger with -p."""

from dataclasses import dataclass
from datetime import date, timedelta

DATE_FORMAT = "%Y-%m-%d"

# Relative period expressions understood by hledger
DAILY_THIS_WEEK = "daily this week"
WEEKLY_THIS_MONTH = "weekly this month"
QUARTERLY_THIS_YEAR = "quarterly this year"


@dataclass(frozen=True)
class DateRange:
    """Closed-open date range, rendered as an hledger period expression."""

    start: date
    end: date

    def to_period(self) -> str:
        """Format as ``YYYY-MM-DD to YYYY-MM-DD``."""
        return f"{self.start.strftime(DATE_FORMAT)} to {self.end.strftime(DATE_FORMAT)}"


def last_week(today: date) -> DateRange:
    """Six days ago through tomorrow."""
    return DateRange(today - timedelta(days=6), today + timedelta(days=1))


def since_last_month(today: date) -> DateRange:
    """First day of the previous month through tomorrow."""
    end_of_last_month = today.replace(day=1) - timedelta(days=1)
    return DateRange(end_of_last_month.replace(day=1), today + timedelta(days=1))
