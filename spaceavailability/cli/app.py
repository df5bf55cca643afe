"""
Main CLI application using Typer.
"""

import json
import logging
import sys
from datetime import date
from pathlib import Path
from typing import Annotated, List, Optional

import pendulum
import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..adapters.json_space_source import CompositeSpaceSource, ConfigSpaceSource, JsonSpaceSource
from ..config import AppConfig, get_default_config_path
from ..domain.exceptions import SpaceAvailabilityError
from ..domain.models import Weekday, calendar_to_dict
from ..services.availability_service import AvailabilityService

app = typer.Typer(
    name="spaceavailability",
    help="Show when bookable spaces are open, honoring notice and time zones",
    add_completion=False
)

console = Console()

logger = logging.getLogger(__name__)

DEFAULT_FIXTURES_DIR = Path(__file__).resolve().parent.parent.parent / "fixtures"


def setup_logging(verbose: bool) -> None:
    """Configure logging to stderr."""
    level = logging.DEBUG if verbose else logging.WARNING
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(
        fmt="%(asctime)s [%(levelname)s]: %(name)s:%(lineno)d | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    ))
    logging.basicConfig(level=level, handlers=[handler])


def _load_config(config_file: Optional[Path]) -> Optional[AppConfig]:
    """
    Load the app config. An explicitly given file must exist; the default
    location is optional.
    """
    if config_file is not None:
        return AppConfig.load_from_yaml(config_file)

    default_path = get_default_config_path()
    if not default_path.exists():
        logger.debug("No config file at %s, using fixtures only", default_path)
        return None
    return AppConfig.load_from_yaml(default_path)


def _build_service(config: Optional[AppConfig], fixtures_dir: Optional[Path]) -> AvailabilityService:
    """Combine the configured spaces and JSON records into one source."""
    sources: List = []
    if fixtures_dir is not None:
        sources.append(JsonSpaceSource(fixtures_dir))
    if config is not None:
        sources.append(ConfigSpaceSource(config))
        if config.fixtures_dir is not None:
            sources.append(JsonSpaceSource(config.fixtures_dir))
    if not sources:
        sources.append(JsonSpaceSource(DEFAULT_FIXTURES_DIR))
    return AvailabilityService(space_source=CompositeSpaceSource(*sources))


def _parse_now(now_option: Optional[str]):
    """Parse --now, defaulting to the current instant."""
    if not now_option:
        return pendulum.now("UTC")
    try:
        return pendulum.parse(now_option, tz="UTC")
    except ValueError as e:
        console.print(f"[red]Could not parse --now value '{escape(now_option)}': {escape(str(e))}[/red]")
        raise typer.Exit(1)


@app.command()
def show(
    space: Annotated[str, typer.Argument(help="Name of the space to show availability for")],
    days: Annotated[Optional[int], typer.Option("--days", "-n", help="Number of days starting today")] = None,
    now: Annotated[Optional[str], typer.Option("--now", help="Reference instant (ISO 8601). Defaults to the current time.")] = None,
    config_file: Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")] = None,
    fixtures: Annotated[Optional[Path], typer.Option("--fixtures", "-f", help="Directory of JSON space records")] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print the calendar as JSON")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging")] = False,
):
    """
    Show the availability calendar for a space.

    Examples:

        spaceavailability show space-with-no-advance-notice

        spaceavailability show meeting-room --days 14 --json

        spaceavailability show meeting-room --now 2022-05-10T10:22:00Z
    """
    setup_logging(verbose)

    try:
        config = _load_config(config_file)
        service = _build_service(config, fixtures)
        number_of_days = days if days is not None else (
            config.defaults.number_of_days if config else 7
        )
        reference = _parse_now(now)

        calendar = service.fetch_availability(
            space_name=space,
            number_of_days=number_of_days,
            now=reference,
        )
    except (FileNotFoundError, ValueError, SpaceAvailabilityError) as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)

    if as_json:
        typer.echo(json.dumps(calendar_to_dict(calendar), indent=2))
        return

    table = Table(
        title=f"Availability for {space}",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Date", style="bold")
    table.add_column("Weekday")
    table.add_column("Open")
    table.add_column("Close")

    for day_key, opening_times in calendar.items():
        weekday = Weekday.from_date(date.fromisoformat(day_key)).name.title()
        if opening_times.is_available:
            table.add_row(day_key, weekday, str(opening_times.open), str(opening_times.close))
        else:
            table.add_row(day_key, weekday, "[dim]closed[/dim]", "")

    console.print()
    console.print(table)
    console.print()


@app.command()
def list_spaces(
    config_file: Optional[Path] = typer.Option(
        None,
        "--config", "-c",
        help="Path to config file"
    ),
    fixtures: Optional[Path] = typer.Option(
        None,
        "--fixtures", "-f",
        help="Directory of JSON space records"
    )
):
    """
    List all known spaces.
    """
    try:
        config = _load_config(config_file)
        service = _build_service(config, fixtures)

        names = service.list_spaces()
        if not names:
            console.print("[yellow]No spaces found.[/yellow]")
            return

        table = Table(
            title="Known spaces",
            show_header=True,
            header_style="bold cyan"
        )
        table.add_column("Name", style="bold yellow")
        table.add_column("Time zone")
        table.add_column("Notice (min)", justify="right")

        for name in names:
            space = service.get_space(name)
            table.add_row(name, space.time_zone, str(space.minimum_notice))

        console.print()
        console.print(table)
        console.print()

    except (FileNotFoundError, ValueError, SpaceAvailabilityError) as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]spaceavailability[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
