"""
Main CLI application using Typer.
"""

import asyncio
from pathlib import Path
from typing import Annotated, List, Optional, Tuple

import pendulum
import typer
from pendulum import DateTime
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..adapters.config_schedule_source import ConfigScheduleSource
from ..config import AppConfig, get_default_config_path
from ..domain.exceptions import DateRangesError
from ..domain.models import Interval
from ..logging_config import setup_logging
from ..services.availability import AvailabilityService

app = typer.Typer(
    name="dateranges",
    help="Compute timezone-correct availability ranges from weekly rules and date overrides",
    add_completion=False
)

console = Console()

ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml"),
]
StartOption = Annotated[Optional[str], typer.Option("--start", help="Start date (YYYY-MM-DD), defaults to today")]
EndOption = Annotated[Optional[str], typer.Option("--end", help="End date (YYYY-MM-DD), defaults to start + 7 days")]


def _load_config(config_file: Optional[Path]) -> AppConfig:
    config_path = config_file or get_default_config_path()
    config = AppConfig.load_from_yaml(config_path)
    setup_logging(config.log_level)
    return config


def _determine_time_range(
    *,
    tz: str,
    start_option: Optional[str],
    end_option: Optional[str]
) -> Tuple[DateTime, DateTime]:
    """
    Resolve the window from explicit dates, falling back to the coming week.
    Raises ValueError for dates that cannot be parsed.
    """
    if start_option:
        start_date = pendulum.from_format(start_option, "YYYY-MM-DD", tz=tz).start_of("day")
    else:
        start_date = pendulum.now(tz).start_of("day")

    if end_option:
        end_date = pendulum.from_format(end_option, "YYYY-MM-DD", tz=tz).end_of("day")
    else:
        end_date = start_date.add(days=7).end_of("day")

    return start_date, end_date


def _render_intervals(title: str, intervals: List[Interval], tz: str) -> None:
    if not intervals:
        console.print(f"[yellow]⚠ {title}: no intervals found.[/yellow]")
        return

    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Day", style="bold yellow")
    table.add_column("Start")
    table.add_column("End")
    table.add_column("Minutes", justify="right", style="dim")

    for interval in intervals:
        local = interval.in_timezone(tz)
        end_format = "HH:mm" if local.start.date() == local.end.date() else "DD.MM. HH:mm"
        table.add_row(
            local.start.format("ddd DD.MM.YYYY"),
            local.start.format("HH:mm"),
            local.end.format(end_format),
            str(local.duration_minutes()),
        )

    console.print()
    console.print(table)
    console.print()


@app.command()
def ranges(
    resource: Annotated[str, typer.Argument(help="Configured resource name")],
    config_file: ConfigOption = None,
    start: StartOption = None,
    end: EndOption = None,
):
    """
    Show the availability ranges of a resource.

    Examples:

        dateranges ranges alice --start 2023-06-12 --end 2023-06-16
    """
    try:
        config = _load_config(config_file)
        tz = config.resource_timezone(resource)
        start_date, end_date = _determine_time_range(tz=tz, start_option=start, end_option=end)

        service = AvailabilityService(
            ConfigScheduleSource(config),
            strict_local_times=config.strict_local_times,
        )
        intervals = asyncio.run(
            service.date_ranges(resource, start_date=start_date, end_date=end_date)
        )

        _render_intervals(f"Availability of {resource} ({tz})", intervals, tz)

    except (FileNotFoundError, ValueError, DateRangesError) as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)


@app.command()
def free(
    resources: Annotated[List[str], typer.Argument(help="One or more configured resource names")],
    config_file: ConfigOption = None,
    start: StartOption = None,
    end: EndOption = None,
    duration: Annotated[Optional[int], typer.Option("--duration", "-d", help="Minimum free duration in minutes")] = None,
):
    """
    Show the time when all given resources are free.

    Examples:

        dateranges free alice

        dateranges free alice room-1 --duration 60 --start 2023-06-12
    """
    try:
        config = _load_config(config_file)
        tz = config.resource_timezone(resources[0])
        start_date, end_date = _determine_time_range(tz=tz, start_option=start, end_option=end)
        min_duration = duration if duration is not None else config.defaults.duration_minutes

        service = AvailabilityService(
            ConfigScheduleSource(config),
            strict_local_times=config.strict_local_times,
        )
        intervals = asyncio.run(
            service.common_free_ranges(
                resources,
                start_date=start_date,
                end_date=end_date,
                min_duration_minutes=min_duration,
            )
        )

        _render_intervals(f"Free time of {', '.join(resources)} ({tz})", intervals, tz)

    except (FileNotFoundError, ValueError, DateRangesError) as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)


@app.command()
def list_resources(config_file: ConfigOption = None):
    """
    List all configured resources.
    """
    try:
        config = _load_config(config_file)

        if not config.resources:
            console.print("[yellow]No resources defined in the config file.[/yellow]")
            return

        table = Table(
            title="Configured resources",
            show_header=True,
            header_style="bold cyan"
        )
        table.add_column("Name", style="bold yellow")
        table.add_column("Timezone")
        table.add_column("Weekly rules", style="dim")
        table.add_column("Overrides", justify="right")

        for resource in config.resources:
            schedule = resource.to_schedule(config.timezone)
            table.add_row(
                resource.name,
                schedule.time_zone,
                "; ".join(rule.describe() for rule in schedule.rules) or "-",
                str(len(schedule.overrides)),
            )

        console.print()
        console.print(table)
        console.print()

    except (FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]dateranges[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
