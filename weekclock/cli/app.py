"""
Main CLI application using Typer.
"""

import logging
from pathlib import Path
from typing import Annotated, Any, Dict, List, NoReturn, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from ..adapters.settings_store import YamlSettingsStore
from ..config import get_default_config_path
from ..domain.exceptions import WeekclockError
from ..services.actions import WeekClockActions
from ..services.timezone_setting import TimezoneSetting
from ..services.week_navigation import WeekNavigationService

app = typer.Typer(
    name="weekclock",
    help="Canonical week boundaries and date ranges for the weekly time tracker",
    add_completion=False
)
timezone_app = typer.Typer(help="Show or change the application timezone")
app.add_typer(timezone_app, name="timezone")

console = Console()
err_console = Console(stderr=True)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _build(ctx: typer.Context) -> tuple[WeekClockActions, TimezoneSetting]:
    """Wire the settings store, accessor, service and actions together."""
    settings_file = ctx.obj.get("settings_file") or get_default_config_path()
    timezone_setting = TimezoneSetting(YamlSettingsStore(settings_file))
    navigation = WeekNavigationService(timezone_setting)
    return WeekClockActions(navigation, timezone_setting), timezone_setting


def _parse_params(raw: Optional[List[str]]) -> Dict[str, Any]:
    """
    Turn repeated ``key=value`` options into an operation parameter mapping.
    """
    params: Dict[str, Any] = {}
    for item in raw or []:
        key, sep, value = item.partition("=")
        if not sep or not key.strip():
            raise typer.BadParameter(f"Expected key=value, got '{item}'", param_hint="--param")
        params[key.strip()] = value.strip()
    return params


def _show(ctx: typer.Context, payload: Dict[str, Any], title: str) -> None:
    """Print a payload as JSON or as a two-column table."""
    if ctx.obj.get("json"):
        console.print_json(data=payload)
        return

    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Field", style="bold yellow")
    table.add_column("Value")
    for key, value in payload.items():
        table.add_row(key, str(value))

    console.print()
    console.print(table)
    console.print()


def _fail(exc: Exception) -> NoReturn:
    err_console.print(f"[bold red]Error:[/bold red] {exc}")
    raise typer.Exit(1)


@app.callback()
def main(
    ctx: typer.Context,
    settings_file: Annotated[Optional[Path], typer.Option("--settings", "-s", help="Path to settings file. Defaults to ./settings.yaml")] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print the raw action payload as JSON.")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
):
    """
    Week navigation and date range resolution in the configured timezone.
    """
    _configure_logging(verbose)
    ctx.obj = {"settings_file": settings_file, "json": as_json}


@app.command("current-week")
def current_week(
    ctx: typer.Context,
    at: Annotated[Optional[str], typer.Option("--at", help="ISO-8601 instant to use instead of now")] = None,
):
    """
    Show the week containing now (or --at).
    """
    actions, _ = _build(ctx)
    try:
        payload = actions.get_current_week(at)
    except WeekclockError as e:
        _fail(e)
    _show(ctx, payload, "Current week")


@app.command()
def jump(
    ctx: typer.Context,
    target: Annotated[str, typer.Argument(help="ISO-8601 instant or YYYY-MM-DD date")],
):
    """
    Show the week containing a given instant or date.
    """
    actions, _ = _build(ctx)
    try:
        payload = actions.shift_or_jump_week(target)
    except WeekclockError as e:
        _fail(e)
    _show(ctx, payload, "Week")


@app.command()
def shift(
    ctx: typer.Context,
    week_key: Annotated[str, typer.Argument(help="Week start (YYYY-MM-DD) to move from")],
    previous: Annotated[bool, typer.Option("--previous", "-p", help="Move back instead of forward.")] = False,
):
    """
    Move one week forward (or back with --previous).

    Examples:

        weekclock shift 2025-08-11

        weekclock shift 2025-08-11 --previous
    """
    actions, _ = _build(ctx)
    try:
        payload = actions.shift_week(week_key, -1 if previous else 1)
    except WeekclockError as e:
        _fail(e)
    _show(ctx, payload, "Week")


@app.command("default-week")
def default_week(ctx: typer.Context):
    """
    Show the week the tracker opens on.
    """
    actions, _ = _build(ctx)
    try:
        payload = actions.get_default_week()
    except WeekclockError as e:
        _fail(e)
    _show(ctx, payload, "Default week")


@app.command("date-op")
def date_op(
    ctx: typer.Context,
    operation: Annotated[str, typer.Argument(help="getToday, addDays, addWeeks, formatWeekDisplay, calculateDateRange or validateDateRange")],
    param: Annotated[Optional[List[str]], typer.Option("--param", "-p", help="Operation parameter as key=value (repeatable)")] = None,
):
    """
    Run a named date operation.

    Examples:

        weekclock date-op addDays -p startDate=2025-08-13 -p days=7

        weekclock date-op formatWeekDisplay -p weekStartDate=2025-08-11

        weekclock date-op calculateDateRange -p preset=week
    """
    actions, _ = _build(ctx)
    try:
        payload = actions.date_operation(operation, _parse_params(param))
    except WeekclockError as e:
        _fail(e)
    _show(ctx, payload, operation)


@app.command("range")
def resolve_range(
    ctx: typer.Context,
    preset: Annotated[str, typer.Argument(help="week, month, 90days or custom")],
    start: Annotated[Optional[str], typer.Option("--start", help="Start date (YYYY-MM-DD) for custom ranges")] = None,
    end: Annotated[Optional[str], typer.Option("--end", help="End date (YYYY-MM-DD) for custom ranges")] = None,
):
    """
    Resolve an analytics date range preset.
    """
    actions, _ = _build(ctx)
    params = {"preset": preset, "startDate": start, "endDate": end}
    try:
        payload = actions.date_operation("calculateDateRange", params)
    except WeekclockError as e:
        _fail(e)
    _show(ctx, payload, "Date range")


@app.command("week-offset")
def week_offset(
    ctx: typer.Context,
    offset: Annotated[Optional[int], typer.Option("--set", help="New offset in weeks, e.g. -1 to open on last week")] = None,
):
    """
    Show or set the default week offset.
    """
    _, timezone_setting = _build(ctx)
    try:
        if offset is not None:
            timezone_setting.set_default_week_offset(offset)
        value = timezone_setting.get_default_week_offset()
    except WeekclockError as e:
        _fail(e)
    _show(ctx, {"defaultWeekOffset": value}, "Default week offset")


@timezone_app.command("show")
def timezone_show(ctx: typer.Context):
    """
    Show the configured timezone.
    """
    actions, _ = _build(ctx)
    try:
        payload = actions.get_timezone_setting()
    except WeekclockError as e:
        _fail(e)
    _show(ctx, payload, "Timezone")


@timezone_app.command("set")
def timezone_set(
    ctx: typer.Context,
    identifier: Annotated[str, typer.Argument(help="IANA timezone identifier, e.g. Europe/Berlin")],
):
    """
    Change the timezone used by every week calculation.
    """
    actions, _ = _build(ctx)
    try:
        payload = actions.set_timezone_setting(identifier)
    except WeekclockError as e:
        _fail(e)

    if ctx.obj.get("json"):
        console.print_json(data=payload)
        return

    console.print(Panel.fit(
        f"[bold green]✓ Timezone saved[/bold green]\n\n"
        f"[bold]Timezone:[/bold] {payload['timezone']}\n"
        f"All week calculations now use this timezone.",
        title="Timezone"
    ))


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]weekclock[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
