"""
Main CLI application using Typer.
"""

import asyncio
import json
from pathlib import Path
from typing import Optional, Annotated
from uuid import UUID

import pendulum
import typer
from rich.console import Console
from rich.table import Table

from ..adapters.booking_api_client import BookingApiClient
from ..adapters.json_repository import JsonRepository
from ..config import AppConfig, get_default_config_path
from ..domain.exceptions import AvailabilityError, InvalidRangeError, TenantNotFoundError
from ..domain.models import AvailabilityResult
from ..logging_setup import configure_logging
from ..services.availability_service import AvailabilityService
from ..services.range_validation import validate_date_range

app = typer.Typer(
    name="bookingavailability",
    help="Compute free booking time from working hours, time blocks and bookings",
    add_completion=False
)

console = Console()

EXIT_ERROR = 1
EXIT_NOT_FOUND = 2

ConfigOption = Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./availability.yaml")]
DataOption = Annotated[Optional[Path], typer.Option("--data", "-d", help="JSON data file, overrides the config")]


def _load_config(config_file: Optional[Path]) -> AppConfig:
    """Load the given config file, or the default one when it exists."""
    if config_file is not None:
        return AppConfig.load_from_yaml(config_file)

    default_path = get_default_config_path()
    if default_path.exists():
        return AppConfig.load_from_yaml(default_path)
    return AppConfig()


def _open_repository(config: AppConfig, data_file: Optional[Path]) -> JsonRepository:
    return JsonRepository.load_from_file(data_file or config.data_file)


def _build_service(config: AppConfig, repository: JsonRepository) -> AvailabilityService:
    """Wire the data sources; bookings come from the booking service when configured."""
    if config.booking_api is not None:
        bookings = BookingApiClient(
            base_url=config.booking_api.base_url,
            access_token=config.booking_api.access_token,
            timeout=config.booking_api.timeout_seconds,
        )
    else:
        bookings = repository

    return AvailabilityService(
        tenants=repository,
        working_hours=repository,
        time_blocks=repository,
        bookings=bookings,
    )


def _parse_day(value: str, field: str) -> pendulum.DateTime:
    try:
        return pendulum.from_format(value, "YYYY-MM-DD", tz="UTC").start_of("day")
    except ValueError as e:
        raise InvalidRangeError(f"Could not parse {field} '{value}': {e}", field=field) from e


def _fail(message: object, code: int = EXIT_ERROR) -> None:
    console.print(f"[bold red]Error:[/bold red] {message}")
    raise typer.Exit(code)


def _render_table(result: AvailabilityResult, timezone: str) -> None:
    if not result.available_ranges:
        console.print(
            "[yellow]⚠ No available time found.[/yellow]\n"
            "Check the working hours or try a longer range."
        )
        return

    table = Table(
        title=f"Available time (shown in {timezone})",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Day", style="bold yellow")
    table.add_column("Start")
    table.add_column("End")
    table.add_column("Minutes", justify="right", style="dim")

    for day, ranges in result.by_day().items():
        label = pendulum.datetime(day.year, day.month, day.day, tz="UTC").format("ddd DD.MM.YYYY")
        for time_range in ranges:
            table.add_row(
                label,
                time_range.start.in_timezone(timezone).format("HH:mm"),
                time_range.end.in_timezone(timezone).format("HH:mm"),
                str(time_range.duration_minutes()),
            )
            label = ""

    console.print(table)
    console.print(
        f"[bold green]✓ {len(result.available_ranges)} range(s), "
        f"{result.total_minutes()} minutes in total[/bold green]"
    )


@app.command()
def slots(
    tenant_id: Annotated[UUID, typer.Argument(help="Tenant to compute availability for")],
    start: Annotated[Optional[str], typer.Option("--start", help="First day (YYYY-MM-DD), defaults to today")] = None,
    end: Annotated[Optional[str], typer.Option("--end", help="Last day (YYYY-MM-DD), defaults to start + 6 days")] = None,
    config_file: ConfigOption = None,
    data_file: DataOption = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print the result as JSON")] = False,
    allow_past: Annotated[bool, typer.Option("--allow-past", help="Accept a start date in the past")] = False,
):
    """
    Show the free time ranges of a tenant.

    Examples:

        bookingavailability slots 3f2c... --start 2025-01-06 --end 2025-01-10

        bookingavailability slots 3f2c... --json --data ./data.json
    """
    try:
        config = _load_config(config_file)
        configure_logging(config.log_level)

        start_date = _parse_day(start, "startDate") if start else pendulum.now("UTC").start_of("day")
        end_date = _parse_day(end, "endDate") if end else start_date.add(days=6)

        start_date, end_date = validate_date_range(
            start_date,
            end_date,
            max_days=config.max_range_days,
            allow_past=allow_past or config.allow_past_start,
        )

        repository = _open_repository(config, data_file)
        service = _build_service(config, repository)

        result = asyncio.run(
            service.compute_available_ranges(tenant_id, start_date, end_date)
        )

    except TenantNotFoundError as e:
        _fail(e, EXIT_NOT_FOUND)

    except (AvailabilityError, FileNotFoundError, ValueError) as e:
        _fail(e)

    if as_json:
        typer.echo(json.dumps(result.to_dict(), indent=2))
        return

    console.print(
        f"\n[bold cyan]Tenant {tenant_id}[/bold cyan]: "
        f"{start_date.format('DD.MM.YYYY')} - {end_date.format('DD.MM.YYYY')}\n"
    )
    _render_table(result, config.display_timezone)
    console.print()


@app.command()
def tenants(
    config_file: ConfigOption = None,
    data_file: DataOption = None,
):
    """
    List all tenants with their buffer settings.
    """
    try:
        config = _load_config(config_file)
        repository = _open_repository(config, data_file)
    except (AvailabilityError, FileNotFoundError, ValueError) as e:
        _fail(e)

    tenant_list = repository.list_tenants()
    if not tenant_list:
        console.print("[yellow]No tenants defined in the data file.[/yellow]")
        return

    table = Table(
        title="Tenants",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("ID", style="dim")
    table.add_column("Business", style="bold yellow")
    table.add_column("Buffer before", justify="right")
    table.add_column("Buffer after", justify="right")

    for tenant in tenant_list:
        table.add_row(
            str(tenant.id),
            tenant.business_name,
            f"{tenant.buffer_before_minutes} min",
            f"{tenant.buffer_after_minutes} min",
        )

    console.print()
    console.print(table)
    console.print()


@app.command()
def buffers(
    tenant_id: Annotated[UUID, typer.Argument(help="Tenant to inspect")],
    config_file: ConfigOption = None,
    data_file: DataOption = None,
):
    """
    Show the buffer applied around bookings of a tenant.
    """
    try:
        config = _load_config(config_file)
        repository = _open_repository(config, data_file)
        service = _build_service(config, repository)
        settings = asyncio.run(service.get_buffer_settings(tenant_id))
    except TenantNotFoundError as e:
        _fail(e, EXIT_NOT_FOUND)
    except (AvailabilityError, FileNotFoundError, ValueError) as e:
        _fail(e)

    console.print(
        f"\n[bold]Applied to every booking:[/bold] "
        f"{settings.before_minutes} min before, {settings.after_minutes} min after"
    )

    category_buffers = [bt for bt in repository.get_buffer_times(tenant_id) if not bt.is_global]
    if category_buffers:
        console.print("\n[dim]Category-specific buffers (stored, not applied):[/dim]")
        for buffer_time in category_buffers:
            console.print(
                f"  {buffer_time.category_id}: "
                f"{buffer_time.before_minutes} min before, {buffer_time.after_minutes} min after"
            )
    console.print()


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]bookingavailability[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
