"""Command-line interface for Fleet Report"""

import json
from datetime import datetime, timedelta
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from .config import ReportConfig, load_config
from .exceptions import FleetReportError
from .history.models import LicenseType, OperatingSystem, to_utc
from .ingest import load_annotations, load_history
from .logging_config import get_logger, setup_logging
from .report import DateSelection, FilterState, ReportArchive, ReportView

app = typer.Typer(
    name="fleet-report",
    help="Fleet Report - instance placement history and licensing report",
    add_completion=False,
    rich_markup_mode="rich",
)

console = Console()
logger = get_logger("cli")

_DATE_FORMATS = ["%Y-%m-%d", "%Y-%m-%dT%H:%M:%S"]
_BAR_WIDTH = 40


@app.command()
def report(
    report_file: Path = typer.Argument(
        ...,
        help="Observation document (JSON) produced by the ingestion step",
        exists=True,
        dir_okay=False,
        readable=True,
    ),
    annotations: Optional[Path] = typer.Option(
        None,
        "--annotations",
        "-a",
        help="License annotations (JSON list of image/os/license objects)",
        exists=True,
        dir_okay=False,
    ),
    fleet: Optional[bool] = typer.Option(
        None, "--fleet/--no-fleet", help="Include instances on shared hosts"
    ),
    sole_tenant: Optional[bool] = typer.Option(
        None, "--sole-tenant/--no-sole-tenant", help="Include instances on sole-tenant nodes"
    ),
    os_filter: Optional[str] = typer.Option(
        None,
        "--os",
        help="Comma-separated operating systems to include (windows, linux, unknown)",
    ),
    license_filter: Optional[str] = typer.Option(
        None,
        "--license",
        help="Comma-separated license types to include (spla, byol, unknown)",
    ),
    date_from: Optional[datetime] = typer.Option(
        None, "--from", formats=_DATE_FORMATS, help="Only list instances first seen at or after"
    ),
    date_to: Optional[str] = typer.Option(
        None,
        "--to",
        metavar="DATE",
        help="Only list instances first seen at or before; a bare date covers that whole day",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in machine-readable JSON format",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Configuration file (TOML)",
        dir_okay=False,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only log errors"),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        help="Also append log records to this file",
        dir_okay=False,
    ),
):
    """
    Show which instances ran during the analysis window and how many ran per day.

    [bold cyan]Examples:[/bold cyan]

      fleet-report events.json

      fleet-report events.json -a licenses.json --os windows --license spla

      fleet-report events.json --no-fleet --from 2020-01-01 --to 2020-01-03 --json
    """
    selection_end = _parse_selection_end(date_to) if date_to is not None else None

    try:
        settings = load_config(
            config_file=config,
            verbose=verbose,
            quiet=quiet,
            include_fleet_instances=fleet,
            include_sole_tenant_instances=sole_tenant,
        )
    except FleetReportError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    setup_logging(settings.verbosity, log_file=str(log_file) if log_file else None)

    try:
        filters = FilterState.from_config(settings)
        if os_filter is not None:
            _apply_os_filter(filters, _parse_choices(os_filter, OperatingSystem, "--os"))
        if license_filter is not None:
            _apply_license_filter(
                filters, _parse_choices(license_filter, LicenseType, "--license")
            )

        archive = ReportArchive(load_history(report_file))
        if annotations is not None:
            load_annotations(annotations, archive.annotations)

        view = ReportView(archive, filters)
        view.repopulate()
        if date_from is not None or selection_end is not None:
            view.selection = DateSelection(
                to_utc(date_from or archive.history.window_start),
                to_utc(selection_end or archive.history.window_end),
            )
    except FleetReportError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    if json_output:
        _output_json(view)
    else:
        _output_rich(view, settings)


def _parse_selection_end(value: str) -> datetime:
    """Parse ``--to``; a bare date extends to the last instant of that day."""
    try:
        day = datetime.strptime(value, _DATE_FORMATS[0])
    except ValueError:
        pass
    else:
        return day + timedelta(days=1, microseconds=-1)

    try:
        return datetime.strptime(value, _DATE_FORMATS[1])
    except ValueError:
        raise typer.BadParameter(
            f"'{value}' does not match {' or '.join(_DATE_FORMATS)}", param_hint="--to"
        )


def _parse_choices(value: str, enum_type, option: str) -> set:
    choices = set()
    for token in filter(None, (t.strip().lower() for t in value.split(","))):
        try:
            choices.add(enum_type(token))
        except ValueError:
            valid = ", ".join(m.value for m in enum_type)
            raise typer.BadParameter(f"'{token}' is not one of {valid}", param_hint=option)
    return choices


def _apply_os_filter(filters: FilterState, included: set) -> None:
    filters.include_windows_instances = OperatingSystem.WINDOWS in included
    filters.include_linux_instances = OperatingSystem.LINUX in included
    filters.include_unknown_os_instances = OperatingSystem.UNKNOWN in included


def _apply_license_filter(filters: FilterState, included: set) -> None:
    filters.include_spla_instances = LicenseType.SPLA in included
    filters.include_byol_instances = LicenseType.BYOL in included
    filters.include_unknown_licensed_instances = LicenseType.UNKNOWN in included


def _output_json(view: ReportView) -> None:
    """Machine-readable JSON output."""
    history = view.archive.history
    instances = []
    for instance in view.instances:
        annotation = view.archive.resolve(instance)
        instances.append(
            {
                "id": instance.instance_id,
                "instance": str(instance.locator),
                "image": str(instance.image) if instance.image else None,
                "state": instance.state.value,
                "tenancy": instance.tenancy.value,
                "os": annotation.operating_system.value,
                "license": annotation.license_type.value,
                "observed_at": instance.observed_at.isoformat(),
            }
        )
    data = {
        "window": {
            "start": history.window_start.isoformat(),
            "end": history.window_end.isoformat(),
        },
        "instances": instances,
        "histogram": [
            {"day": entry.timestamp.date().isoformat(), "count": entry.value}
            for entry in view.histogram
        ],
    }
    print(json.dumps(data, indent=2))


def _output_rich(view: ReportView, settings: ReportConfig) -> None:
    """Rich terminal output: instance table followed by a per-day histogram."""
    history = view.archive.history
    console.print()
    console.print(
        f"[bold]Instances[/bold] {history.window_start:%Y-%m-%d} .. "
        f"{history.window_end:%Y-%m-%d}: "
        f"[cyan]{len(view.instances)}[/cyan] of {len(history)} match"
    )

    table = Table(show_header=True, header_style="bold", box=None, padding=(0, 1))
    table.add_column("ID", justify="right")
    table.add_column("Instance", no_wrap=True)
    table.add_column("Image", no_wrap=True)
    table.add_column("Tenancy")
    table.add_column("OS")
    table.add_column("License")
    table.add_column("First seen")
    for instance in view.instances:
        annotation = view.archive.resolve(instance)
        table.add_row(
            str(instance.instance_id),
            instance.locator.name,
            instance.image.name if instance.image else "[dim]-[/dim]",
            instance.tenancy.value,
            annotation.operating_system.value,
            annotation.license_type.value,
            f"{instance.observed_at:%Y-%m-%d %H:%M}",
        )
    console.print(table)

    histogram = view.histogram
    console.print()
    if not histogram:
        console.print("[yellow]No instances match the current filters.[/yellow]")
        return

    peak = max(entry.value for entry in histogram)
    console.print("[bold]Instances per day[/bold]")
    for entry in histogram[: settings.histogram_max_rows]:
        bar = "█" * max(1, round(entry.value / peak * _BAR_WIDTH))
        console.print(f"  {entry.timestamp:%Y-%m-%d}  [green]{bar}[/green] {entry.value}")
    if len(histogram) > settings.histogram_max_rows:
        console.print(f"  [dim]... {len(histogram) - settings.histogram_max_rows} more days[/dim]")
    logger.debug("Rendered %d histogram rows", min(len(histogram), settings.histogram_max_rows))


def main():
    app()


if __name__ == "__main__":
    main()
