"""
foodinflation CLI - food-inflation reports in the terminal.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .analytics import REPORTS, AnalyticsEngine, InflationReports
from .common.exceptions import FoodInflationError, format_exception_chain
from .common.formatting import format_value
from .config import DEFAULT_SETTINGS_FILE
from .core.config_manager import ConfigManager
from .core.loader import load_records
from .core.reporting import report_columns, write_csv
from .logging_cfg import configure_logging, get_logger, set_correlation_id

app = typer.Typer(
    help="📈 foodinflation: descriptive analytics over monthly food-inflation data.",
    rich_markup_mode="rich",
    add_completion=False
)
console = Console()
logger = get_logger("cli")

HELP_DATA = "CSV file or SQLite database with the food_inflation table."


@app.callback()
def global_options(
    ctx: typer.Context,
    config_file: Path = typer.Option(Path(DEFAULT_SETTINGS_FILE), "--config", help="JSON settings file."),
    log_format: Optional[str] = typer.Option(None, "--log-format", help="auto | json | human"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging."),
):
    settings = ConfigManager(config_file)
    configure_logging(
        log_format or settings.get("log_format", "auto"),
        logging.DEBUG if verbose else logging.WARNING,
    )
    set_correlation_id()
    ctx.obj = settings


def _reports(settings: ConfigManager, data: Optional[Path]) -> InflationReports:
    path = data or Path(settings.get("data_file"))
    records = load_records(path, settings.get("table"))
    return InflationReports(AnalyticsEngine(records), settings)


def _print_rows(title: str, rows: list[dict[str, Any]]) -> None:
    if not rows:
        console.print(f"[bold]{title}[/bold]: [dim]no rows[/dim]")
        return
    table = Table(title=title, show_header=True, header_style="bold cyan")
    columns = report_columns(rows)
    for column in columns:
        table.add_column(column, justify="left" if column in ("country", "month_name") else "right")
    for row in rows:
        table.add_row(*(format_value(row.get(c)) for c in columns))
    console.print(table)


def _fail(exc: FoodInflationError) -> None:
    logger.debug("Command failed", exc_info=True)
    console.print(f"[bold red]✘[/bold red] {format_exception_chain(exc)}", soft_wrap=True)
    sys.exit(1)


@app.command("overview")
def cmd_overview(
    ctx: typer.Context,
    data: Optional[Path] = typer.Option(None, "--data", "-d", help=HELP_DATA),
):
    """
    [bold green]🔍 Data Overview[/bold green]

    Record count, countries, time coverage, summary statistics and missing
    values of the dataset.
    """
    try:
        reports = _reports(ctx.obj, data)
        console.print(Panel.fit(
            f"[bold cyan]{reports.engine.count_all()}[/bold cyan] records, "
            f"[bold cyan]{len(reports.engine.distinct_countries())}[/bold cyan] countries",
            border_style="blue"
        ))
        for name in ("time-coverage", "summary", "nulls"):
            _print_rows(REPORTS[name].description, reports.run(name))
    except FoodInflationError as e:
        _fail(e)


@app.command("list")
def cmd_list():
    """
    [bold blue]📋 Available Reports[/bold blue]
    """
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Report")
    table.add_column("Section", style="dim")
    table.add_column("Description")
    table.add_column("Options", style="dim")
    for spec in REPORTS.values():
        table.add_row(spec.name, spec.section, spec.description, ", ".join(spec.params))
    console.print(table)


def _params(top: Optional[int], country: Optional[list[str]], threshold: Optional[float],
            run_length: Optional[int]) -> dict[str, Any]:
    return {
        "top_n": top,
        "country": country[0] if country else None,
        "countries": country or None,
        "threshold": threshold,
        "run_length": run_length,
    }


@app.command("report")
def cmd_report(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Report name (see `list`)."),
    data: Optional[Path] = typer.Option(None, "--data", "-d", help=HELP_DATA),
    top: Optional[int] = typer.Option(None, "--top", help="Number of groups for top-N reports."),
    country: Optional[list[str]] = typer.Option(None, "--country", "-c", help="Country filter; repeat to compare."),
    threshold: Optional[float] = typer.Option(None, "--threshold", help="Inflation change threshold."),
    run_length: Optional[int] = typer.Option(None, "--run-length", help="Consecutive increases to detect."),
):
    """
    [bold magenta]📊 Run One Report[/bold magenta]
    """
    try:
        reports = _reports(ctx.obj, data)
        rows = reports.run(name, **_params(top, country, threshold, run_length))
    except FoodInflationError as e:
        _fail(e)
    _print_rows(REPORTS[name].description, rows)


@app.command("export")
def cmd_export(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Report name (see `list`)."),
    data: Optional[Path] = typer.Option(None, "--data", "-d", help=HELP_DATA),
    out: Path = typer.Option(Path("report.csv"), "--out", "-o", help="CSV output path."),
    top: Optional[int] = typer.Option(None, "--top"),
    country: Optional[list[str]] = typer.Option(None, "--country", "-c"),
    threshold: Optional[float] = typer.Option(None, "--threshold"),
    run_length: Optional[int] = typer.Option(None, "--run-length"),
):
    """
    [bold white]💾 Export Report to CSV[/bold white]
    """
    try:
        reports = _reports(ctx.obj, data)
        rows = reports.run(name, **_params(top, country, threshold, run_length))
    except FoodInflationError as e:
        _fail(e)
    if write_csv(rows, out):
        console.print(f"[bold green]✔[/bold green] {len(rows)} rows exported: [underline]{out}[/underline]")
    else:
        console.print("[bold red]✘[/bold red] Could not export report.")
        sys.exit(1)


def _setting_value(raw: str) -> Any:
    # numbers, lists and booleans as JSON, anything else as plain text
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


@app.command("config")
def cmd_config(
    ctx: typer.Context,
    key: Optional[str] = typer.Argument(None, help="Setting to show or change."),
    value: Optional[str] = typer.Argument(None, help="New value; JSON or plain text."),
):
    """
    [bold yellow]⚙️ Show or Change Settings[/bold yellow]

    Without arguments lists every setting. With KEY and VALUE stores the new
    value in the settings file.
    """
    settings: ConfigManager = ctx.obj
    if key is None:
        table = Table(show_header=True, header_style="bold cyan")
        table.add_column("Setting")
        table.add_column("Value")
        for name, current in settings.values.items():
            table.add_row(name, json.dumps(current, ensure_ascii=False))
        console.print(table)
        return
    if value is None:
        console.print(json.dumps(settings.get(key), ensure_ascii=False))
        return
    try:
        settings.set(key, _setting_value(value))
    except FoodInflationError as e:
        _fail(e)
    if not settings.save():
        console.print(f"[bold red]✘[/bold red] Could not write {settings.config_path}")
        sys.exit(1)
    console.print(f"[bold green]✔[/bold green] {key} = {json.dumps(settings.get(key), ensure_ascii=False)}")


def main():
    app()


if __name__ == "__main__":
    main()
