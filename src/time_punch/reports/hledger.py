"""hledger-backed report engine."""

import logging
import re
import subprocess
from datetime import date
from pathlib import Path
from typing import Callable, Optional, Sequence

from time_punch.core.config import ClockConfig
from time_punch.reports import periods
from time_punch.reports.engine import ReportEngine, ReportEngineError, ReportResult

logger = logging.getLogger(__name__)

ZERO_ROW = re.compile(r" 0 +$")


def read_fragment(path: Optional[Path]) -> str:
    """Read an optional journal fragment; a missing file contributes nothing."""
    if path is None or not path.is_file():
        if path is not None:
            logger.debug(f"Skipping missing journal fragment {path}")
        return ""
    return path.read_text(encoding="utf-8", errors="replace")


def compose_journal(include_pattern: str, *fragments: str) -> str:
    """Build a journal for stdin: fragments verbatim, then an include directive.

    Args:
        include_pattern: Glob of timeclock files
        fragments: Journal text placed before the include, in order

    Returns:
        Journal text
    """
    parts = []
    for fragment in fragments:
        if not fragment:
            continue
        parts.append(fragment if fragment.endswith("\n") else fragment + "\n")
    parts.append(f"!include {include_pattern}\n")
    return "".join(parts)


def drop_zero_rows(output: str) -> str:
    """Remove report rows whose trailing column is zero."""
    lines = output.splitlines(keepends=True)
    return "".join(line for line in lines if not ZERO_ROW.search(line.rstrip("\n")))


class HledgerEngine(ReportEngine):
    """Runs reports through the hledger executable."""

    def __init__(
        self,
        config: ClockConfig,
        today: Optional[Callable[[], date]] = None,
    ):
        """Initialize hledger engine.

        Args:
            config: Invocation configuration
            today: Date source for computed periods. Defaults to date.today
        """
        self.config = config
        self._today = today or date.today

    def _run(self, argv: list[str], journal: Optional[str] = None) -> ReportResult:
        """Run hledger and capture its output.

        Args:
            argv: Arguments after the executable name
            journal: Text piped to stdin, if any

        Raises:
            ReportEngineError: If the executable cannot be started
        """
        command = [self.config.hledger] + argv
        logger.debug(f"Running: {' '.join(command)}")
        if journal is not None:
            logger.debug(f"Journal on stdin:\n{journal}")

        try:
            result = subprocess.run(
                command,
                input=journal,
                capture_output=True,
                text=True,
            )
        except FileNotFoundError:
            raise ReportEngineError(f"hledger executable not found: {self.config.hledger}")
        except PermissionError as e:
            raise ReportEngineError(f"Cannot run {self.config.hledger}: {e}")

        if result.returncode != 0:
            logger.info(f"hledger exited with status {result.returncode}")
        return ReportResult(result.returncode, result.stdout, result.stderr)

    def _full_journal(self) -> str:
        return compose_journal(
            self.config.include_pattern,
            read_fragment(self.config.budgets_file),
            read_fragment(self.config.aliases_file),
        )

    def _timeclock_journal(self) -> str:
        """Include directive only; registers run without budgets or aliases."""
        return compose_journal(self.config.include_pattern)

    def _budget_balance(self, period: str, args: Sequence[str]) -> ReportResult:
        argv = [
            "-f", "-",
            "-p", period,
            "bal", "--budget", f"not:{self.config.ignore_accounts}",
            *args,
        ]
        result = self._run(argv, self._full_journal())
        return ReportResult(result.returncode, drop_zero_rows(result.output), result.errors)

    def _register(self, period: str, args: Sequence[str]) -> ReportResult:
        return self._run(["-f", "-", "-p", period, "reg", *args], self._timeclock_journal())

    def _tree(self, period: str, args: Sequence[str]) -> ReportResult:
        return self._run(["-f", "-", "-p", period, "bal", "--tree", *args], self._full_journal())

    def balance(self, args: Sequence[str] = ()) -> ReportResult:
        return self._run(["-f", str(self.config.time_file), "bal", *args])

    def weekly_balance(self, args: Sequence[str] = ()) -> ReportResult:
        return self._budget_balance(periods.last_week(self._today()).to_period(), args)

    def weekly_register(self, args: Sequence[str] = ()) -> ReportResult:
        return self._register(periods.last_week(self._today()).to_period(), args)

    def monthly_balance(self, args: Sequence[str] = ()) -> ReportResult:
        return self._budget_balance(periods.since_last_month(self._today()).to_period(), args)

    def monthly_register(self, args: Sequence[str] = ()) -> ReportResult:
        return self._register(periods.since_last_month(self._today()).to_period(), args)

    def daily_tree(self, args: Sequence[str] = ()) -> ReportResult:
        return self._tree(periods.DAILY_THIS_WEEK, args)

    def weekly_tree(self, args: Sequence[str] = ()) -> ReportResult:
        return self._tree(periods.WEEKLY_THIS_MONTH, args)

    def quarterly_tree(self, args: Sequence[str] = ()) -> ReportResult:
        return self._tree(periods.QUARTERLY_THIS_YEAR, args)
