"""Main CLI application."""

import logging
import shlex
import shutil
import subprocess
import sys
from datetime import datetime
from typing import Any, NoReturn, Optional

import click
from rich.console import Console
from rich.markup import escape

from time_punch import __version__
from time_punch.cli.config_commands import config_command
from time_punch.core.clock import PunchClock
from time_punch.core.config import ClockConfig, load_config
from time_punch.core.models import TIMESTAMP_FORMAT, Command
from time_punch.core.timeclock import TimeclockBoundaryError, TimeclockFile, check_boundaries
from time_punch.reports.engine import ReportEngine, ReportEngineError, ReportResult
from time_punch.reports.hledger import HledgerEngine

logger = logging.getLogger(__name__)

console = Console()
error_console = Console(stderr=True)

FALLBACK_EDITORS = ["nano", "vim", "vi"]


class PassthroughCommand(click.Command):
    """Command that receives its arguments verbatim as ``args``.

    Nothing is parsed: option-like words and "--" reach the callback as typed.
    """

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        kwargs["add_help_option"] = False
        kwargs.setdefault("options_metavar", "[ARGS]...")
        super().__init__(*args, **kwargs)

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        ctx.params["args"] = tuple(args)
        ctx.args = []
        return []


class PunchGroup(click.Group):
    """Command group resolving keywords and aliases through Command.

    Usage errors exit with status 1, like unknown commands.
    """

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        try:
            return super().parse_args(ctx, args)
        except click.UsageError as e:
            e.exit_code = 1
            raise

    def invoke(self, ctx: click.Context) -> Any:
        try:
            return super().invoke(ctx)
        except click.UsageError as e:
            e.exit_code = 1
            raise

    def get_command(self, ctx: click.Context, cmd_name: str) -> Optional[click.Command]:
        command = Command.parse(cmd_name)
        if command is Command.UNKNOWN:
            return None
        return super().get_command(ctx, command.value)

    def list_commands(self, ctx: click.Context) -> list[str]:
        return [command.value for command in Command if command.value in self.commands]

    def resolve_command(
        self, ctx: click.Context, args: list[str]
    ) -> tuple[Optional[str], Optional[click.Command], list[str]]:
        cmd_name = args[0]
        cmd = self.get_command(ctx, cmd_name)
        if cmd is None:
            error_console.print(f"Unknown command {escape(cmd_name)}")
            click.echo(ctx.get_help())
            ctx.exit(1)
        return cmd.name, cmd, args[1:]  # type: ignore[union-attr]

    def format_commands(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        rows = []
        for name in self.list_commands(ctx):
            keywords = "|".join(Command(name).keywords)
            rows.append((keywords, self.commands[name].get_short_help_str(limit=60)))

        if rows:
            with formatter.section("Commands"):
                formatter.write_dl(rows)


def setup_logging(level_name: str) -> None:
    """Send package logs to stderr at the given level."""
    level = getattr(logging, level_name.upper())

    package_logger = logging.getLogger("time_punch")
    package_logger.setLevel(level)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
    package_logger.addHandler(handler)


def fail(message: Any) -> NoReturn:
    """Report an error and exit with status 1."""
    error_console.print(f"[red]Error:[/red] {escape(str(message))}")
    sys.exit(1)


def format_timestamp(dt: datetime) -> str:
    return dt.strftime(TIMESTAMP_FORMAT)


def get_config(ctx: click.Context) -> ClockConfig:
    return ctx.obj["config"]  # type: ignore[no-any-return]


def get_timeclock(ctx: click.Context) -> TimeclockFile:
    return TimeclockFile(get_config(ctx).time_file)


def get_engine(ctx: click.Context) -> ReportEngine:
    """Get the report engine, creating the hledger one on first use."""
    engine = ctx.obj.get("engine")
    if engine is None:
        engine = HledgerEngine(get_config(ctx))
        ctx.obj["engine"] = engine
    return engine  # type: ignore[no-any-return]


def emit_report(result: ReportResult) -> None:
    """Print a report and exit with the engine's status if it failed."""
    if result.output:
        click.echo(result.output, nl=False)
    if result.errors:
        click.echo(result.errors, nl=False, err=True)
    if not result.ok:
        sys.exit(result.returncode)


def run_report(ctx: click.Context, report: str, args: tuple[str, ...]) -> None:
    engine = get_engine(ctx)
    try:
        result = getattr(engine, report)(list(args))
    except ReportEngineError as e:
        fail(e)
    emit_report(result)


@click.group(
    cls=PunchGroup,
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.version_option(version=__version__)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Logging level (overrides TIME_LOG_LEVEL)",
)
@click.pass_context
def cli(ctx: click.Context, log_level: Optional[str]) -> None:
    """Track time with an hledger timeclock file.

    \b
    Environment:
      TIME_FILE          Timeclock path, strftime placeholders allowed
                         (default ~/.hours.timeclock)
      TIME_BUDGETS_FILE  Budget journal included in balance reports
      TIME_ALIASES_FILE  Account alias rules included in balance reports
      EDITOR             Editor for the edit command
    """
    ctx.ensure_object(dict)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        ctx.exit(0)

    if "config" not in ctx.obj:
        try:
            ctx.obj["config"] = load_config()
        except ValueError as e:
            fail(e)

    setup_logging(log_level or get_config(ctx).log_level)
    logger.debug(f"Timeclock file: {get_config(ctx).time_file}")


@cli.command("in", cls=PassthroughCommand)
@click.pass_context
def time_in(ctx: click.Context, args: tuple[str, ...]) -> None:
    """Time in: begin a task. Args: [HH:MM] ACCOUNT [DESCRIPTION]

    Example:
        tt in 09:00 wrk:project-a doing setup
    """
    clock = PunchClock(get_timeclock(ctx))

    try:
        entry = clock.clock_in(args)
    except (ValueError, OSError) as e:
        fail(e)

    console.print(
        f"[green]▶[/green] Begin {escape(entry.activity)} at {format_timestamp(entry.timestamp)}",
        soft_wrap=True,
        emoji=False,
    )


@cli.command("out", cls=PassthroughCommand)
@click.pass_context
def time_out(ctx: click.Context, args: tuple[str, ...]) -> None:
    """Time out: end the current task. Args: [HH:MM]"""
    clock = PunchClock(get_timeclock(ctx))

    try:
        entry = clock.clock_out(args)
    except (ValueError, OSError) as e:
        fail(e)

    console.print(f"[yellow]■[/yellow] End at {format_timestamp(entry.timestamp)}")


@cli.command("switch", cls=PassthroughCommand)
@click.pass_context
def switch(ctx: click.Context, args: tuple[str, ...]) -> None:
    """End the current task and begin the next. Args: as for in

    Example:
        tt switch 13:30 wrk:project-b code review
    """
    clock = PunchClock(get_timeclock(ctx))

    try:
        stopped, started = clock.switch(args)
    except (ValueError, OSError) as e:
        fail(e)

    console.print(f"[yellow]■[/yellow] End at {format_timestamp(stopped.timestamp)}")
    console.print(
        f"[green]▶[/green] Begin {escape(started.activity)} at {format_timestamp(started.timestamp)}",
        soft_wrap=True,
        emoji=False,
    )


@cli.command("tail", cls=PassthroughCommand)
@click.pass_context
def tail(ctx: click.Context, args: tuple[str, ...]) -> None:
    """Show the end of the timeclock file. Args: [N lines, default 10]"""
    count = 10
    if args and args[0].isdecimal():
        count = int(args[0])

    try:
        lines = get_timeclock(ctx).tail(count)
    except OSError as e:
        fail(e)

    for line in lines:
        click.echo(line)


@cli.command("edit")
@click.pass_context
def edit(ctx: click.Context) -> None:
    """Edit the timeclock file with $EDITOR."""
    path = get_config(ctx).time_file

    editor = get_config(ctx).editor
    if not editor:
        editor = next((name for name in FALLBACK_EDITORS if shutil.which(name)), None)
    if not editor:
        fail("No editor found. Set $EDITOR environment variable.")

    logger.info(f"Opening {path} in {editor}")
    try:
        result = subprocess.run(shlex.split(editor) + [str(path)])
    except OSError as e:
        fail(f"Cannot run editor {editor}: {e}")

    if result.returncode != 0:
        sys.exit(result.returncode)


@cli.command("bal", cls=PassthroughCommand)
@click.pass_context
def bal(ctx: click.Context, args: tuple[str, ...]) -> None:
    """Show balances of the current timeclock file."""
    run_report(ctx, "balance", args)


@cli.command("wbal", cls=PassthroughCommand)
@click.pass_context
def wbal(ctx: click.Context, args: tuple[str, ...]) -> None:
    """Show weekly balances against budgets."""
    run_report(ctx, "weekly_balance", args)


@cli.command("wreg", cls=PassthroughCommand)
@click.pass_context
def wreg(ctx: click.Context, args: tuple[str, ...]) -> None:
    """Show weekly register."""
    try:
        check_boundaries(get_config(ctx).include_pattern)
    except (TimeclockBoundaryError, OSError) as e:
        fail(e)

    run_report(ctx, "weekly_register", args)


@cli.command("mbal", cls=PassthroughCommand)
@click.pass_context
def mbal(ctx: click.Context, args: tuple[str, ...]) -> None:
    """Show monthly balances against budgets."""
    run_report(ctx, "monthly_balance", args)


@cli.command("mreg", cls=PassthroughCommand)
@click.pass_context
def mreg(ctx: click.Context, args: tuple[str, ...]) -> None:
    """Show monthly register."""
    run_report(ctx, "monthly_register", args)


@cli.command("daily", cls=PassthroughCommand)
@click.pass_context
def daily(ctx: click.Context, args: tuple[str, ...]) -> None:
    """Show daily balances for this week."""
    run_report(ctx, "daily_tree", args)


@cli.command("weekly", cls=PassthroughCommand)
@click.pass_context
def weekly(ctx: click.Context, args: tuple[str, ...]) -> None:
    """Show weekly balances for this month."""
    run_report(ctx, "weekly_tree", args)


@cli.command("quarterly", cls=PassthroughCommand)
@click.pass_context
def quarterly(ctx: click.Context, args: tuple[str, ...]) -> None:
    """Show quarterly balances for this year."""
    run_report(ctx, "quarterly_tree", args)


cli.add_command(config_command)


if __name__ == "__main__":
    cli(obj={})
