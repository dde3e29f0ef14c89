# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Main CLI application for carbon-esg."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from carbon_esg import __version__
from carbon_esg.compliance.scorer import compute_compliance
from carbon_esg.config import EngineConfig, load_config
from carbon_esg.data.factors import DEFAULT_EMISSION_FACTORS
from carbon_esg.data.models import ActivityEntry, CarbonReport, ESGCategory
from carbon_esg.data.repository import DEFAULT_BASE_DIR, JsonActivityRepository
from carbon_esg.emissions.aggregation import aggregate_by_category, aggregate_by_scope
from carbon_esg.errors import ConfigError
from carbon_esg.importers.file_import import FileImporter
from carbon_esg.reporting.export import export_report_json
from carbon_esg.reporting.terminal import TerminalRenderer
from carbon_esg.scoring.engine import ScoringEngine
from carbon_esg.scoring.indicators import apply_indicator_values, default_esg_schema
from carbon_esg.scoring.sector import score_sector, score_sector_emissions
from carbon_esg.scoring.thresholds import SECTOR_BENCHMARKS
from carbon_esg.uncertainty.gum import MissingUncertaintyPolicy, propagate

SECTOR_CHOICES = list(SECTOR_BENCHMARKS.keys())


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _setup_logging(verbose: bool, console: Console) -> None:
    from rich.logging import RichHandler

    root = logging.getLogger("carbon_esg")
    root.handlers.clear()
    if verbose:
        root.addHandler(RichHandler(console=console, show_path=False))
        root.setLevel(logging.DEBUG)
    else:
        root.setLevel(logging.WARNING)


def _data_dir(cfg: EngineConfig) -> Path:
    return Path(cfg.data_dir).expanduser() if cfg.data_dir else DEFAULT_BASE_DIR


def _load_entries(ctx: click.Context, inputs: tuple[str, ...]) -> list[ActivityEntry]:
    """Entries from --input files, or from the local store when none given."""
    console: Console = ctx.obj["console"]
    cfg: EngineConfig = ctx.obj["config"]

    if not inputs:
        return JsonActivityRepository(_data_dir(cfg)).list_entries()

    result = FileImporter().import_files(inputs)
    for err in result.errors:
        console.print(f"  [red]✗[/] {escape(err)}")
    for warning in result.warnings:
        console.print(f"  [yellow]![/] {escape(warning)}")
    return result.entries


def _load_esg(path: str, console: Console) -> list[ESGCategory]:
    """Indicator values from a YAML/JSON mapping such as ``{E1: 120000, G3: true}``."""
    import yaml

    with open(path) as f:
        raw: Any = yaml.safe_load(f) or {}
    if not isinstance(raw, dict):
        raise click.BadParameter("expected a mapping of indicator id to value", param_hint="--esg")

    categories = default_esg_schema()
    for message in apply_indicator_values(categories, raw):
        console.print(f"  [yellow]![/] {escape(message)}")
    return categories


def _export_json(report: CarbonReport, path: str, console: Console) -> None:
    """Export to JSON."""
    out = export_report_json(report, path)
    console.print(f"  [green]JSON report exported to:[/green] {out}")


def _policy(value: str | None, cfg: EngineConfig) -> MissingUncertaintyPolicy:
    return MissingUncertaintyPolicy(value) if value else cfg.missing_uncertainty_policy


def _coverage(value: str | None, cfg: EngineConfig) -> float | str:
    if value is None:
        return cfg.coverage_factor
    if value == "auto":
        return value
    try:
        k = float(value)
    except ValueError:
        raise click.BadParameter(f"expected a number or 'auto', got {value!r}", param_hint="-k")
    if k <= 0:
        raise click.BadParameter("must be > 0", param_hint="-k")
    return k


input_option = click.option(
    "--input", "-i", "inputs", multiple=True, type=click.Path(exists=True),
    help="CSV/JSON file of activity entries (repeatable). Defaults to the local store.",
)


# ---------------------------------------------------------------------------
# Group
# ---------------------------------------------------------------------------

@click.group()
@click.version_option(version=__version__)
@click.option("--no-color", is_flag=True, help="Disable colored output")
@click.option("--config", "-c", "config_path", type=click.Path(), default=None,
              help="Engine config YAML file")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
@click.pass_context
def cli(ctx: click.Context, no_color: bool, config_path: str | None, verbose: bool) -> None:
    """carbon-esg: carbon accounting and ESG scoring

    \b
      emissions    Scope 1/2/3 totals and category breakdown
      compliance   Completeness against the mandatory categories
      sector       Intensity grade against the sector benchmark
      esg          Composite ESG score from indicator values
      uncertainty  GUM uncertainty bands per scope
      report       Everything above in one report
    """
    ctx.ensure_object(dict)
    console = Console(no_color=no_color)
    ctx.obj["console"] = console
    _setup_logging(verbose, console)

    if config_path:
        try:
            ctx.obj["config"] = load_config(config_path)
        except (FileNotFoundError, ConfigError) as exc:
            console.print(f"[red]{escape(str(exc))}[/]")
            raise SystemExit(1)
    else:
        ctx.obj["config"] = EngineConfig()


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

@cli.command()
@input_option
@click.option("--revenue", "-r", type=float, default=None, help="Annual revenue, in thousands")
@click.option("--sector", "-s", type=str, default=None, help="Sector key")
@click.option("--esg-sector", type=str, default=None,
              help="ESG peer sector for multipliers and peer scores")
@click.option("--esg", "esg_path", type=click.Path(exists=True), default=None,
              help="YAML/JSON file of ESG indicator values")
@click.option("--organisation", "-o", type=str, default=None, help="Organisation name")
@click.option("--period", "-p", type=str, default="", help="Reporting period")
@click.option("--export-json", type=click.Path(), default=None,
              help="Export the report as JSON at this path")
@click.pass_context
def report(
    ctx: click.Context,
    inputs: tuple[str, ...],
    revenue: float | None,
    sector: str | None,
    esg_sector: str | None,
    esg_path: str | None,
    organisation: str | None,
    period: str,
    export_json: str | None,
) -> None:
    """Run every calculation and render the full report."""
    console: Console = ctx.obj["console"]
    entries = _load_entries(ctx, inputs)
    esg = _load_esg(esg_path, console) if esg_path else None

    with console.status("[bold cyan]Running calculations..."):
        engine = ScoringEngine(ctx.obj["config"])
        result = engine.score(
            entries, revenue=revenue, sector=sector, esg=esg,
            organisation=organisation, period=period, esg_sector=esg_sector,
        )

    TerminalRenderer(console).render(result)
    if export_json:
        _export_json(result, export_json, console)


@cli.command()
@input_option
@click.option("--by-category", is_flag=True, help="Also break totals down by category")
@click.pass_context
def emissions(ctx: click.Context, inputs: tuple[str, ...], by_category: bool) -> None:
    """Aggregate CO2e emissions per scope."""
    console: Console = ctx.obj["console"]
    gwp = ctx.obj["config"].gwp or None
    entries = _load_entries(ctx, inputs)

    renderer = TerminalRenderer(console)
    renderer.render_emissions(aggregate_by_scope(entries, gwp))

    if by_category:
        table = Table(show_header=True, header_style="bold", padding=(0, 1))
        table.add_column("Category", min_width=24)
        table.add_column("kg CO2e", justify="right", min_width=14)
        for key, value in aggregate_by_category(entries, gwp).items():
            table.add_row(key, f"{value:,.1f}")
        console.print(table)


@cli.command()
@input_option
@click.pass_context
def compliance(ctx: click.Context, inputs: tuple[str, ...]) -> None:
    """Check completeness against the mandatory reporting categories."""
    entries = _load_entries(ctx, inputs)
    TerminalRenderer(ctx.obj["console"]).render_compliance(compute_compliance(entries))


@cli.command()
@input_option
@click.option("--sector", "-s", type=str, default=None,
              help=f"Sector key ({', '.join(SECTOR_CHOICES)})")
@click.option("--revenue", "-r", type=float, default=None, help="Annual revenue, in thousands")
@click.option("--intensity", type=float, default=None,
              help="Grade this intensity (tCO2e/k-revenue) instead of computing it")
@click.pass_context
def sector(
    ctx: click.Context,
    inputs: tuple[str, ...],
    sector: str | None,
    revenue: float | None,
    intensity: float | None,
) -> None:
    """Grade emissions intensity against the sector benchmark."""
    cfg: EngineConfig = ctx.obj["config"]
    sector = sector or cfg.sector

    if intensity is not None:
        result = score_sector(intensity, sector, cfg.ladder, cfg.extra_sectors)
    else:
        totals = aggregate_by_scope(_load_entries(ctx, inputs), cfg.gwp or None)
        result = score_sector_emissions(
            totals.total,
            revenue if revenue is not None else cfg.revenue_thousands,
            sector,
            cfg.ladder,
            cfg.extra_sectors,
        )

    TerminalRenderer(ctx.obj["console"]).render_sector(result)
    if not result.ok:
        raise SystemExit(1)


@cli.command()
@click.argument("values", type=click.Path(exists=True))
@click.option("--sector", "-s", type=str, default=None,
              help="ESG peer sector for multipliers and peer scores")
@click.option("--revenue", "-r", type=float, default=None,
              help="Annual revenue, in thousands (drives E2 and E8)")
@click.pass_context
def esg(ctx: click.Context, values: str, sector: str | None, revenue: float | None) -> None:
    """Score ESG indicators read from VALUES (YAML or JSON)."""
    console: Console = ctx.obj["console"]
    categories = _load_esg(values, console)

    result = ScoringEngine(ctx.obj["config"]).score(
        [], revenue=revenue, esg=categories, esg_sector=sector
    )
    renderer = TerminalRenderer(console)
    renderer.render_esg(result.esg)
    renderer.render_esg_insights(result)
    if not result.esg.ok:
        raise SystemExit(1)


@cli.command()
@input_option
@click.option("--policy", type=click.Choice([p.value for p in MissingUncertaintyPolicy]),
              default=None, help="How to treat entries without an uncertainty")
@click.option("-k", "--coverage-factor", "coverage", type=str, default=None,
              help="Coverage factor k, or 'auto' for Student-t")
@click.pass_context
def uncertainty(
    ctx: click.Context,
    inputs: tuple[str, ...],
    policy: str | None,
    coverage: str | None,
) -> None:
    """Propagate per-source uncertainties into scope bands."""
    cfg: EngineConfig = ctx.obj["config"]
    by_scope, total = propagate(
        _load_entries(ctx, inputs),
        _policy(policy, cfg),
        _coverage(coverage, cfg),
        cfg.gwp or None,
    )
    TerminalRenderer(ctx.obj["console"]).render_uncertainty(by_scope, total)


@cli.command("import")
@click.argument("files", nargs=-1, required=True, type=click.Path(exists=True))
@click.option("--replace", is_flag=True, help="Purge the store before importing")
@click.pass_context
def import_(ctx: click.Context, files: tuple[str, ...], replace: bool) -> None:
    """Import CSV/JSON activity entries into the local store."""
    console: Console = ctx.obj["console"]
    repo = JsonActivityRepository(_data_dir(ctx.obj["config"]))
    if replace:
        removed = repo.purge()
        console.print(f"  [dim]Removed {removed} existing entries[/dim]")

    result = FileImporter().import_files(files)
    added = 0
    for entry in result.entries:
        try:
            repo.add(entry)
            added += 1
        except ValueError as exc:
            result.errors.append(str(exc))

    for err in result.errors:
        console.print(f"  [red]✗[/] {escape(err)}")
    for warning in result.warnings:
        console.print(f"  [yellow]![/] {escape(warning)}")
    console.print(
        f"  [green]Imported {added} entries[/green] "
        f"({result.draft_count} drafts) into {repo.path}"
    )


@cli.command()
@click.pass_context
def factors(ctx: click.Context) -> None:
    """List the default emission factors."""
    console: Console = ctx.obj["console"]
    table = Table(show_header=True, header_style="bold", padding=(0, 1))
    table.add_column("Key", style="bold")
    table.add_column("Scope", justify="center")
    table.add_column("Factor", justify="right")
    table.add_column("Unit")
    table.add_column("u (%)", justify="right")
    table.add_column("Source", style="dim")
    for f in DEFAULT_EMISSION_FACTORS.values():
        table.add_row(
            f.key, f.scope.value, f"{f.value:g}", f"kg CO2e/{f.unit}",
            f"{f.uncertainty_percent:g}", f.source,
        )
    console.print(table)


@cli.command()
@click.option("--host", default="127.0.0.1", help="Bind host")
@click.option("--port", default=8000, type=int, help="Bind port")
@click.pass_context
def serve(ctx: click.Context, host: str, port: int) -> None:
    """Start the REST API server."""
    from carbon_esg.api import check_dependency
    check_dependency("fastapi", "pip install -e '.[api]'")
    check_dependency("uvicorn", "pip install -e '.[api]'", feature="carbon-esg serve")

    console: Console = ctx.obj["console"]
    console.print(f"[bold cyan]Starting API server on {host}:{port}...[/]")

    from carbon_esg.api.server import create_app
    import uvicorn

    app = create_app(ctx.obj["config"])
    uvicorn.run(app, host=host, port=port)
