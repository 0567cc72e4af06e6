"""
Main CLI application using Typer.
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Annotated, List, Optional

import pendulum
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ..adapters.file_source import JsonFileDataSource
from ..config import AppConfig
from ..domain.availability import AvailabilityCalculator
from ..domain.exceptions import BookingSlotsError
from ..domain.hours import hours_for_date
from ..domain.models import Slot
from ..services.availability import AvailabilityService

app = typer.Typer(
    name="bookingslots",
    help="Compute bookable appointment slots from business hours, bookings and closures",
    add_completion=False
)

console = Console()
err_console = Console(stderr=True)

logger = logging.getLogger("bookingslots")

ConfigOption = Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")]
DataOption = Annotated[Optional[Path], typer.Option("--data", help="JSON file with business, services, appointments and closures")]
BusinessOption = Annotated[Optional[str], typer.Option("--business", "-b", help="Business id to look up in the data file")]
VerboseOption = Annotated[bool, typer.Option("--verbose", "-v", help="Show diagnostic log output")]


def _configure_logging(config: AppConfig, verbose: bool) -> None:
    """Route package log records through rich on stderr."""
    level = logging.DEBUG if verbose else config.get_log_level()
    logger.handlers.clear()
    logger.addHandler(RichHandler(console=err_console, show_path=False, markup=False))
    logger.setLevel(level)


def _load(config_file: Optional[Path], data_file: Optional[Path], verbose: bool) -> tuple:
    """Load configuration and open the data source."""
    config = AppConfig.load_or_default(config_file)
    _configure_logging(config, verbose)

    path = data_file or config.data_file
    if path is None:
        raise BookingSlotsError(
            "No data file given. Use --data or set data_file in config.yaml."
        )

    source = JsonFileDataSource(path, default_time_zone=config.default_time_zone)
    return config, source


def _fail(error: Exception) -> None:
    console.print(f"[bold red]Error:[/bold red] {error}")
    raise typer.Exit(1)


def _render_slots(slots: List[Slot], date: str, duration: int) -> None:
    if not slots:
        console.print(
            f"[yellow]⚠ No slots on {date} for a {duration} min service.[/yellow]\n"
            "The business is closed or the service does not fit its opening hours."
        )
        return

    available = sum(1 for slot in slots if slot.available)
    table = Table(
        title=f"Slots on {date} ({duration} min)",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Time", style="bold")
    table.add_column("Status")
    table.add_column("Reason", style="dim")

    for slot in slots:
        status = "[green]available[/green]" if slot.available else "[red]blocked[/red]"
        reason = slot.conflict_reason.value if slot.conflict_reason else ""
        table.add_row(slot.time, status, reason)

    console.print()
    console.print(table)
    console.print(f"[bold green]✓ {available} of {len(slots)} slot(s) available[/bold green]\n")


@app.command()
def slots(
    date: Annotated[str, typer.Argument(help="Date to check (YYYY-MM-DD), in the business's time zone")],
    duration: Annotated[Optional[int], typer.Option("--duration", "-d", help="Service duration in minutes")] = None,
    service: Annotated[Optional[str], typer.Option("--service", "-s", help="Service id or name from the data file")] = None,
    business: BusinessOption = None,
    data_file: DataOption = None,
    config_file: ConfigOption = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print slots as JSON")] = False,
    verbose: VerboseOption = False,
):
    """
    List candidate start times for a service on one date.

    Examples:

        bookingslots slots 2024-06-03 --duration 30 --data business.json

        bookingslots slots 2024-06-03 --service haircut --json
    """
    try:
        config, source = _load(config_file, data_file, verbose)

        if service is not None:
            found = asyncio.run(source.get_service(service))
            if found is None:
                raise BookingSlotsError(f"Unknown service: {service!r}")
            min_duration = found.duration_minutes
        else:
            min_duration = duration if duration is not None else config.defaults.duration_minutes

        availability = AvailabilityService(
            data_source=source,
            calculator=AvailabilityCalculator(logger),
        )
        result = asyncio.run(
            availability.find_slots(
                business_id=business,
                date=date,
                duration_minutes=min_duration,
            )
        )
    except (BookingSlotsError, FileNotFoundError, ValueError) as e:
        _fail(e)

    if as_json:
        typer.echo(json.dumps([slot.to_dict() for slot in result]))
    else:
        _render_slots(result, date, min_duration)


@app.command()
def closed_days(
    start: Annotated[Optional[str], typer.Option("--start", help="First date (YYYY-MM-DD). Defaults to today in the business's zone.")] = None,
    days: Annotated[Optional[int], typer.Option("--days", help="Number of days to check")] = None,
    business: BusinessOption = None,
    data_file: DataOption = None,
    config_file: ConfigOption = None,
    verbose: VerboseOption = False,
):
    """
    List the dates on which nothing can be booked.
    """
    try:
        config, source = _load(config_file, data_file, verbose)
        days_ahead = days if days is not None else config.defaults.days_ahead

        availability = AvailabilityService(
            data_source=source,
            calculator=AvailabilityCalculator(logger),
        )
        disabled = asyncio.run(
            availability.disabled_dates(
                business_id=business,
                start=start or pendulum.now("UTC"),
                days_ahead=days_ahead,
            )
        )
    except (BookingSlotsError, FileNotFoundError, ValueError) as e:
        _fail(e)

    if not disabled:
        console.print(f"[green]✓ Open on every day of the next {days_ahead} day(s).[/green]")
        return

    console.print(f"[bold]Closed on {len(disabled)} of {days_ahead} day(s):[/bold]")
    for day in disabled:
        weekday = pendulum.parse(day).format("dddd", locale="en")
        console.print(f"  {day} ({weekday})")


@app.command()
def hours(
    date: Annotated[str, typer.Argument(help="Date to check (YYYY-MM-DD)")],
    business: BusinessOption = None,
    data_file: DataOption = None,
    config_file: ConfigOption = None,
    verbose: VerboseOption = False,
):
    """
    Show the business's opening hours for a date.
    """
    try:
        _, source = _load(config_file, data_file, verbose)
        profile = asyncio.run(source.get_business(business))
        info = hours_for_date(profile, date, logger)
    except (BookingSlotsError, FileNotFoundError, ValueError) as e:
        _fail(e)

    if not info["isOpen"]:
        day = f" ({info['dayName']})" if info["dayName"] else ""
        console.print(f"[yellow]Closed on {date}{day}.[/yellow]")
        return

    console.print(f"[bold]{date} ({info['dayName']})[/bold]: {info['openTime']} - {info['closeTime']}")
    for period in info["breaks"]:
        description = f" {period['description']}" if period["description"] else ""
        console.print(f"  break {period['startTime']} - {period['endTime']}{description}")


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]bookingslots[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
