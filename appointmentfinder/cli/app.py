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

from ..adapters.json_slot_store import JsonSlotStore
from ..adapters.slot_records import parse_timestamp
from ..boundary import BoundaryResponse, handle_query
from ..config import AppConfig, get_default_config_path
from ..domain.exceptions import SlotStoreError
from ..services.availability_finder import AvailabilityFinderService

app = typer.Typer(
    name="appointmentfinder",
    help="Find available sales manager appointment slots for a day",
    add_completion=False
)

console = Console()
err_console = Console(stderr=True)

EXIT_CLIENT_ERROR = 1
EXIT_SERVER_ERROR = 2


def _configure_logging(level: int) -> None:
    logging.basicConfig(
        level=level,
        format="%(name)s: %(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _load_config(config_file: Optional[Path]) -> AppConfig:
    config_path = config_file or get_default_config_path()
    try:
        return AppConfig.load_from_yaml(config_path)
    except (FileNotFoundError, ValueError) as e:
        err_console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(EXIT_CLIENT_ERROR)


def _display_zone(name: str):
    try:
        return pendulum.timezone(name)
    except ValueError:
        # pendulum's InvalidTimezone is a ValueError
        err_console.print(f"[yellow]Unknown display timezone {name!r}, using UTC[/yellow]")
        return pendulum.UTC


def _print_table(response: BoundaryResponse, date: str, display_timezone: str) -> None:
    entries = response.body

    if not entries:
        console.print(f"[yellow]⚠ No available slots found for {date}.[/yellow]")
        return

    zone = _display_zone(display_timezone)
    table = Table(
        title=f"Available slots on {date}",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Start (UTC)", style="bold yellow")
    table.add_column(f"Local ({display_timezone})", style="dim")
    table.add_column("Available", justify="right")

    for entry in entries:
        local_start = parse_timestamp(entry["start_date"]).in_timezone(zone)
        table.add_row(
            entry["start_date"],
            local_start.format("HH:mm"),
            str(entry["available_count"])
        )

    console.print()
    console.print(table)
    console.print()


@app.command()
def query(
    date: Annotated[str, typer.Argument(help="Day to search (YYYY-MM-DD, UTC)")],
    language: Annotated[str, typer.Option("--language", "-l", help="Language the sales manager must speak")],
    products: Annotated[List[str], typer.Option("--product", "-p", help="Required product (repeat for several)")],
    rating: Annotated[str, typer.Option("--rating", "-r", help="Customer rating tier")],
    config_file: Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print the raw JSON response body.")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
):
    """
    Query available appointment slots for one day.

    Examples:

        appointmentfinder query 2024-05-03 -l German -p SolarPanels -p Heatpumps -r Gold

        appointmentfinder query 2024-05-03 -l English -p SolarPanels -r Silver --json
    """
    config = _load_config(config_file)
    _configure_logging(logging.DEBUG if verbose else config.get_log_level())

    service = AvailabilityFinderService(
        slot_loader=config.build_loader(),
        fetch_timeout=config.slot_store.timeout_seconds,
    )

    payload = {
        "date": date,
        "language": language,
        "products": list(products),
        "rating": rating,
    }
    response = asyncio.run(handle_query(payload, service))

    if as_json:
        console.print_json(json.dumps(response.body))
    elif response.status_code == 200:
        _print_table(response, date, config.display_timezone)
    else:
        err_console.print(f"[bold red]Error:[/bold red] {response.body['message']}")
        for error in response.body.get("errors", []):
            err_console.print(f"  {error['field']}: {error['message']}")

    if response.is_server_error:
        raise typer.Exit(EXIT_SERVER_ERROR)
    if response.is_client_error:
        raise typer.Exit(EXIT_CLIENT_ERROR)


@app.command()
def list_managers(
    config_file: Optional[Path] = typer.Option(
        None,
        "--config", "-c",
        help="Path to config file"
    )
):
    """
    List all sales managers in the configured JSON slot store.
    """
    config = _load_config(config_file)
    _configure_logging(config.get_log_level())

    store = config.build_loader()
    if not isinstance(store, JsonSlotStore):
        err_console.print("[yellow]Listing sales managers requires the json slot store backend.[/yellow]")
        raise typer.Exit(EXIT_CLIENT_ERROR)

    try:
        managers = store.list_sales_managers()
    except SlotStoreError as e:
        err_console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(EXIT_SERVER_ERROR)

    if not managers:
        console.print("[yellow]No sales managers found in the slot store.[/yellow]")
        return

    table = Table(
        title="Sales managers",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("ID", justify="right")
    table.add_column("Name", style="bold yellow")
    table.add_column("Languages")
    table.add_column("Products")
    table.add_column("Ratings", style="dim")

    for manager in managers:
        table.add_row(
            str(manager.id),
            manager.name,
            ", ".join(sorted(manager.languages)),
            ", ".join(sorted(manager.products)),
            ", ".join(sorted(manager.rating_tiers))
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
    console.print(f"\n[bold cyan]appointmentfinder[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
