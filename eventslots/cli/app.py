"""
Main CLI application using Typer.
"""

import asyncio
import logging
from pathlib import Path
from typing import List, Optional, Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ..adapters.file_booking_source import FileBookingSource
from ..config import AppConfig
from ..domain.exceptions import SchedulingError
from ..domain.models import AvailabilityQuery
from ..domain.time_format import format_time, parse_time
from ..services.availability import AvailabilityService

app = typer.Typer(
    name="eventslots",
    help="Check event booking availability with setup, breakdown and buffer padding",
    add_completion=False
)

console = Console()

ConfigOption = Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./eventslots.yaml")]
VerboseOption = Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging.")]
ServicesOption = Annotated[Optional[List[str]], typer.Option("--service", "-s", help="Requested service (repeatable).")]
SetupOption = Annotated[bool, typer.Option("--setup", help="Include setup time before existing bookings.")]
BreakdownOption = Annotated[bool, typer.Option("--breakdown", help="Include breakdown time after existing bookings.")]


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _build_service(config: AppConfig, bookings: Optional[Path]) -> AvailabilityService:
    return AvailabilityService(
        booking_source=FileBookingSource(bookings),
        catalog=config.build_catalog(),
        slot_generator=config.build_slot_generator(),
        conflict_checker=config.build_conflict_checker(),
    )


def _fail(error: Exception) -> None:
    console.print(f"[bold red]Error:[/bold red] {error}")
    raise typer.Exit(1)


@app.command()
def slots(
    date: Annotated[str, typer.Argument(help="Event date (YYYY-MM-DD)")],
    services: ServicesOption = None,
    duration: Annotated[Optional[int], typer.Option("--duration", "-d", help="Override engagement length in minutes")] = None,
    bookings: Annotated[Optional[Path], typer.Option("--bookings", "-b", help="YAML/JSON file with existing bookings")] = None,
    setup: SetupOption = False,
    breakdown: BreakdownOption = False,
    merged: Annotated[bool, typer.Option("--merged", help="Collapse adjacent slots with the same availability")] = False,
    config_file: ConfigOption = None,
    verbose: VerboseOption = False,
):
    """
    Show the slot grid for a date and which slots can start the engagement.

    Examples:

        eventslots slots 2025-09-15 -s DJ -b bookings.yaml

        eventslots slots 2025-09-15 -s DJ -s Photography --setup --breakdown --merged
    """
    _configure_logging(verbose)

    try:
        config = AppConfig.load(config_file)
        requested = services or [service.name for service in config.services[:1]]
        service = _build_service(config, bookings)

        result = asyncio.run(
            service.available_slots(
                date=date,
                services=requested,
                override_minutes=duration,
                include_setup=setup,
                include_breakdown=breakdown,
                merged=merged,
            )
        )
    except (SchedulingError, FileNotFoundError, ValueError) as e:
        _fail(e)

    table = Table(
        title=f"Slots for {date} ({', '.join(requested)})",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("#", style="dim", justify="right")
    table.add_column("Start")
    table.add_column("End")
    table.add_column("Status")

    for slot in result:
        status = "[green]available[/green]" if slot.available else "[red]unavailable[/red]"
        table.add_row(
            str(slot.index),
            format_time(slot.start_time, "12h"),
            format_time(slot.end_time, "12h") if slot.end < 24 * 60 else "12:00 AM",
            status,
        )

    console.print()
    console.print(table)
    console.print()


@app.command()
def check(
    date: Annotated[str, typer.Argument(help="Event date (YYYY-MM-DD)")],
    start: Annotated[str, typer.Argument(help="Candidate start (HH:MM or H:MM AM/PM)")],
    end: Annotated[str, typer.Argument(help="Candidate end (HH:MM or H:MM AM/PM)")],
    bookings: Annotated[Path, typer.Option("--bookings", "-b", help="YAML/JSON file with existing bookings")],
    setup: SetupOption = False,
    breakdown: BreakdownOption = False,
    config_file: ConfigOption = None,
    verbose: VerboseOption = False,
):
    """
    Check whether a candidate window can be booked.

    Exits with code 2 when the window conflicts with an existing booking.
    """
    _configure_logging(verbose)

    try:
        config = AppConfig.load(config_file)
        service = _build_service(config, bookings)
        query = AvailabilityQuery(
            date=date,
            candidate_start=parse_time(start),
            candidate_end=parse_time(end),
            include_setup=setup,
            include_breakdown=breakdown,
        )
        existing = asyncio.run(service.fetch_bookings(query.date))
        report = service.calculate_report(query=query, bookings=existing)
        alternatives = [] if report.available else service.calculate_alternatives(query=query, bookings=existing)
    except (SchedulingError, FileNotFoundError, ValueError) as e:
        _fail(e)

    window = f"{query.candidate_start} - {query.candidate_end} on {date}"

    if report.available:
        console.print(f"\n[bold green]✓ Available:[/bold green] {window}\n")
        return

    console.print(f"\n[bold red]✗ Not available:[/bold red] {window}\n")

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Booking", style="bold yellow")
    table.add_column("Conflict")
    table.add_column("Booked")
    table.add_column("Occupied (padded)", style="dim")

    for conflict in report.conflicts + report.buffer_violations:
        table.add_row(
            str(conflict.booking_id),
            conflict.type.value,
            str(conflict.booking),
            str(conflict.effective),
        )

    console.print(table)

    if alternatives:
        console.print("\n[bold]Suggested alternatives:[/bold]")
        for alternative in alternatives:
            console.print(f"  {alternative.start} - {alternative.end}  (score {alternative.score:.2f})")

    console.print()
    raise typer.Exit(2)


@app.command()
def duration(
    services: Annotated[List[str], typer.Argument(help="Requested services")],
    override: Annotated[Optional[int], typer.Option("--override", help="Explicit duration in minutes")] = None,
    config_file: ConfigOption = None,
    verbose: VerboseOption = False,
):
    """
    Resolve the engagement length for a set of services.
    """
    _configure_logging(verbose)

    try:
        config = AppConfig.load(config_file)
        catalog = config.build_catalog()
        minutes = catalog.resolve_duration(services, override)
    except (SchedulingError, FileNotFoundError, ValueError) as e:
        _fail(e)

    hours, mins = divmod(minutes, 60)
    console.print(f"\n[bold]{minutes}[/bold] minutes ({hours}h {mins:02d}m)")

    if override is not None:
        for service in catalog.out_of_bounds(services, override):
            console.print(
                f"[yellow]⚠ {service.name} normally runs "
                f"{service.min_hours:g}-{service.max_hours:g} hours[/yellow]"
            )

    console.print()


@app.command()
def services(
    config_file: ConfigOption = None,
):
    """
    List the configured service catalog.
    """
    try:
        config = AppConfig.load(config_file)
    except (FileNotFoundError, ValueError) as e:
        _fail(e)

    table = Table(
        title="Service catalog",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Service", style="bold yellow")
    table.add_column("Default (h)", justify="right")
    table.add_column("Min (h)", justify="right")
    table.add_column("Max (h)", justify="right")

    for service in config.build_catalog():
        table.add_row(
            service.name,
            f"{service.default_hours:g}",
            f"{service.min_hours:g}",
            f"{service.max_hours:g}",
        )

    console.print()
    console.print(table)
    console.print()


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]eventslots[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
