"""
Main CLI application using Typer.
"""

import asyncio
import logging
from pathlib import Path
from typing import Optional, Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ..config import AppConfig
from ..adapters.json_store import JsonMeetingStore
from ..domain.catalog import load_catalog
from ..domain.exceptions import MeetpointError
from ..domain.geo import haversine_distance
from ..domain.models import GeoPoint, MeetingSchedule
from ..services.recommendation import MeetingRecommendation, RecommendationService

app = typer.Typer(
    name="meetpoint",
    help="Recommend meeting times and places from participant availability",
    add_completion=False
)

console = Console()


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _load_config(config_file: Optional[Path]) -> AppConfig:
    config = AppConfig.load_or_default(config_file)
    _configure_logging(config.log_level)
    return config


def _print_time(recommendation: MeetingRecommendation, schedule: MeetingSchedule) -> None:
    console.print("[bold cyan]🕒 Time[/bold cyan]")

    time = recommendation.time
    if time is None:
        console.print("[yellow]⚠ No time recommendation available yet.[/yellow]\n")
        return

    style = "green" if time.universal else "yellow"
    console.print(f"[bold {style}]{time.summary}[/bold {style}]")
    for time_range in time.ranges:
        console.print(f"  {schedule.format_range(time_range)}")
    console.print()


def _print_locations(recommendation: MeetingRecommendation) -> None:
    console.print("[bold cyan]📍 Location[/bold cyan]")

    if not recommendation.locations:
        console.print("[yellow]⚠ No participant locations submitted yet.[/yellow]\n")
        return

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("#", justify="right")
    table.add_column("Building", style="bold yellow")
    table.add_column("Abbr", style="dim")
    table.add_column("Avg (m)", justify="right")
    table.add_column("Max (m)", justify="right")
    table.add_column("Fairness (m)", justify="right")

    for rank, score in enumerate(recommendation.locations, 1):
        table.add_row(
            str(rank),
            score.candidate.display_name,
            score.candidate.abbreviation,
            f"{score.mean_distance_meters:.0f}",
            f"{score.max_distance_meters:.0f}",
            f"{score.fairness_score:.0f}",
        )

    console.print(table)
    console.print("[dim]Sorted by average distance; lower fairness means a more even walk for everyone.[/dim]")

    if recommendation.center is not None:
        center = recommendation.center
        console.print(f"[dim]Geographic center: {center.latitude:.5f}, {center.longitude:.5f}[/dim]")
    console.print()


@app.command()
def recommend(
    snapshot_file: Annotated[Path, typer.Argument(help="JSON export with one or more meetings")],
    meeting_id: Annotated[Optional[str], typer.Argument(help="Meeting id. Defaults to the first meeting in the file.")] = None,
    config_file: Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./meetpoint.yaml")] = None,
    top_k: Annotated[Optional[int], typer.Option("--top-k", "-k", help="Number of locations to recommend")] = None,
):
    """
    Recommend a meeting time and place.

    Examples:

        meetpoint recommend meetings.json

        meetpoint recommend meetings.json abc123 --top-k 3
    """
    try:
        config = _load_config(config_file)
        catalog = load_catalog(config.catalog_path)
        store = JsonMeetingStore(snapshot_file, default_timezone=config.timezone)

        ids = store.meeting_ids()
        if meeting_id is None:
            if not ids:
                console.print("[yellow]⚠ The file contains no meetings.[/yellow]")
                raise typer.Exit(1)
            meeting_id = ids[0]

        service = RecommendationService(
            source=store,
            catalog=catalog,
            top_k=top_k if top_k is not None else config.ranking.top_k,
        )

        recommendation = asyncio.run(service.recommend(meeting_id))
        snapshot = recommendation.meeting

        console.print()
        console.print(f"[bold cyan]🗓️  {snapshot.name}[/bold cyan] ({len(snapshot.participants)} participant(s))")
        console.print(f"[dim]Times shown in {snapshot.schedule.timezone}[/dim]")
        if snapshot.schedule.is_expired():
            console.print("[dim]This meeting has expired.[/dim]")
        console.print()

        _print_time(recommendation, snapshot.schedule)
        _print_locations(recommendation)

    except (MeetpointError, FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def locations(
    config_file: Optional[Path] = typer.Option(
        None,
        "--config", "-c",
        help="Path to config file"
    )
):
    """
    List the candidate meeting locations.
    """
    try:
        config = _load_config(config_file)
        catalog = load_catalog(config.catalog_path)
    except (MeetpointError, FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    if not catalog:
        console.print("[yellow]The catalog is empty.[/yellow]")
        return

    table = Table(
        title="Candidate locations",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("ID", justify="right")
    table.add_column("Name", style="bold yellow")
    table.add_column("Abbr", style="dim")
    table.add_column("Lat", justify="right")
    table.add_column("Lng", justify="right")

    for candidate in catalog:
        table.add_row(
            candidate.identifier,
            candidate.display_name,
            candidate.abbreviation,
            f"{candidate.coordinates.latitude:.5f}",
            f"{candidate.coordinates.longitude:.5f}",
        )

    console.print()
    console.print(table)
    console.print()


@app.command()
def distance(
    lat1: Annotated[float, typer.Argument(help="Latitude of the first point")],
    lng1: Annotated[float, typer.Argument(help="Longitude of the first point")],
    lat2: Annotated[float, typer.Argument(help="Latitude of the second point")],
    lng2: Annotated[float, typer.Argument(help="Longitude of the second point")],
):
    """
    Print the great-circle distance between two points.
    """
    try:
        meters = haversine_distance(
            GeoPoint(latitude=lat1, longitude=lng1),
            GeoPoint(latitude=lat2, longitude=lng2),
        )
    except MeetpointError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    console.print(f"{meters:.1f} m")


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]meetpoint[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
