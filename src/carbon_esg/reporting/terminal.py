# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Rich terminal report renderer.

Composes Rich tables, panels, and gauges into the user-facing terminal
output for a :class:`CarbonReport`.  Sections whose calculation failed are
shown with their error message instead of a number.
"""

from __future__ import annotations

from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.rule import Rule
from rich.table import Table
from rich.text import Text

from carbon_esg import __version__
from carbon_esg.data.models import (
    CarbonReport,
    ComplianceResult,
    ESGScore,
    Scope,
    ScopeTotals,
    SectorScore,
    UncertaintyBand,
)
from carbon_esg.errors import CalcError, CalcResult
from carbon_esg.reporting.gauges import score_bar, share_bar


def _kg(value: float) -> str:
    if value >= 1000:
        return f"{value / 1000:,.2f} t"
    return f"{value:,.1f} kg"


class TerminalRenderer:
    """Renders calculation results to the terminal using Rich."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def render(self, report: CarbonReport) -> None:
        """Render the full report."""
        self._render_header(report)
        self.render_emissions(report.totals)
        self.render_compliance(report.compliance)
        self.render_sector(report.sector)
        if report.esg is not None:
            self.render_esg(report.esg)
            self.render_esg_insights(report)
        self.render_uncertainty(report.uncertainty, report.total_uncertainty)
        self._render_footer(report)

    # ------------------------------------------------------------------
    # Sections
    # ------------------------------------------------------------------

    def render_emissions(self, totals: ScopeTotals) -> None:
        self.console.print()
        self.console.print(Rule("[bold]EMISSIONS BY SCOPE[/bold]"))

        table = Table(show_header=True, header_style="bold", padding=(0, 1))
        table.add_column("Scope", style="bold", min_width=26)
        table.add_column("kg CO2e", justify="right", min_width=14)
        table.add_column("Share", min_width=28)

        for scope in Scope:
            value = totals.for_scope(scope)
            table.add_row(scope.label, f"{value:,.1f}", share_bar(value, totals.total))
        table.add_row("[bold]Total[/bold]", f"[bold]{totals.total:,.1f}[/bold]", "")

        self.console.print(table)
        self.console.print(
            f"  [dim]{totals.entry_count} entries counted | {_kg(totals.total)} CO2e[/dim]"
        )

    def render_compliance(self, result: ComplianceResult) -> None:
        self.console.print()
        self.console.print(Rule("[bold]REGULATORY COMPLETENESS[/bold]"))
        self.console.print(
            f"  [bold]Score[/bold]: {score_bar(result.score)}  "
            f"({result.filled_count}/{result.total_count} categories)"
        )
        if not result.has_data:
            self.console.print("  [yellow]No validated entries yet.[/yellow]")

        table = Table(show_header=True, header_style="bold", padding=(0, 1))
        table.add_column("Category", min_width=28)
        table.add_column("Scope", justify="center", width=8)
        table.add_column("Status", justify="center", width=10)
        table.add_column("Entries", justify="right", width=8)

        for status in result.categories:
            mark = "[green]filled[/green]" if status.is_filled else "[red]missing[/red]"
            table.add_row(
                status.category.name,
                status.category.scope.value,
                mark,
                str(len(status.matching_entry_ids)),
            )
        self.console.print(table)

    def render_sector(self, result: CalcResult[SectorScore]) -> None:
        self.console.print()
        self.console.print(Rule("[bold]SECTOR POSITIONING[/bold]"))
        if not result.ok:
            self._render_error(result.error)
            return

        score = result.value
        bench = score.benchmark
        color = score.grade.color
        table = Table(show_header=False, padding=(0, 2), box=None)
        table.add_column("Metric", style="bold")
        table.add_column("Value", justify="right")
        table.add_row("Sector", bench.name)
        table.add_row("Intensity", f"{score.intensity:.3f} {bench.unit}")
        table.add_row("Top performers", f"{bench.top_performers:.2f}")
        table.add_row("Sector average", f"{bench.average:.2f}")
        table.add_row("Critical threshold", f"{bench.threshold:.2f}")
        table.add_row("Level", score.level.value)
        table.add_row("Regulations", ", ".join(bench.regulations) or "-")

        self.console.print(Panel(
            table,
            title=f"[bold]Grade [{color}]{score.grade.value}[/{color}] | {score.score}/100[/bold]",
            border_style=color,
        ))

    def render_esg(self, result: CalcResult[ESGScore]) -> None:
        self.console.print()
        self.console.print(Rule("[bold]ESG SCORE[/bold]"))
        if not result.ok:
            self._render_error(result.error)
            return

        esg = result.value
        color = esg.grade.color
        self.console.print(
            f"  [bold]Composite[/bold]: {score_bar(esg.total, color=color)} "
            f"[{color}]{esg.grade.value}[/{color}] ({esg.label})"
        )

        table = Table(show_header=True, header_style="bold", padding=(0, 1))
        table.add_column("Pillar", style="bold", min_width=14)
        table.add_column("Score", min_width=30)
        table.add_column("Weight", justify="right", width=8)
        table.add_column("Weighted", justify="right", width=10)
        for p in esg.pillars:
            table.add_row(
                p.pillar.display_name,
                score_bar(p.score, width=15),
                f"{p.weight:.0%}",
                f"{p.weighted_score:.1f}",
            )
        self.console.print(table)

    def render_esg_insights(self, report: CarbonReport) -> None:
        """Peer positioning, regulatory alerts, and the materiality matrix."""
        if report.esg_peers is not None:
            self.console.print()
            self.console.print(Rule("[bold]ESG PEER POSITIONING[/bold]"))
            if report.esg_peers.ok:
                pos = report.esg_peers.value
                bench = pos.benchmark
                color = "green" if pos.above_average else "yellow"
                self.console.print(
                    f"  {bench.name}: [{color}]{pos.gap_to_average:+.1f}[/{color}] vs average "
                    f"({bench.average:.0f}), {pos.gap_to_top:+.1f} vs top ({bench.top:.0f})"
                )
                gaps = ", ".join(f"{p.value} {g:+.1f}" for p, g in pos.pillar_gaps.items())
                if gaps:
                    self.console.print(f"  [dim]Pillar gaps to sector average: {gaps}[/dim]")
            else:
                self._render_error(report.esg_peers.error)

        if report.esg_alerts:
            self.console.print()
            self.console.print(Rule("[bold]REGULATORY ALERTS[/bold]"))
            for alert in report.esg_alerts:
                color = alert.level.color
                self.console.print(
                    f"  [{color}]{alert.level.value.upper()}[/{color}] "
                    f"[bold]{escape(alert.title)}[/bold] [dim]({escape(alert.regulation)})[/dim]"
                )
                self.console.print(f"    {escape(alert.description)}")
                if alert.action:
                    self.console.print(f"    [dim]-> {escape(alert.action)}[/dim]")

        if report.materiality:
            self.console.print()
            self.console.print(Rule("[bold]DOUBLE MATERIALITY[/bold]"))
            table = Table(show_header=True, header_style="bold", padding=(0, 1))
            table.add_column("Indicator", min_width=32)
            table.add_column("Impact", justify="right", width=8)
            table.add_column("Financial", justify="right", width=10)
            table.add_column("Double", justify="center", width=8)
            ranked = sorted(
                report.materiality,
                key=lambda p: p.environmental_impact + p.financial_risk,
                reverse=True,
            )
            for point in ranked:
                table.add_row(
                    f"{point.id} {point.label}",
                    f"{point.environmental_impact:.0f}",
                    f"{point.financial_risk:.0f}",
                    "[green]yes[/green]" if point.is_double_material else "-",
                )
            self.console.print(table)

    def render_uncertainty(
        self,
        by_scope: dict[Scope, CalcResult[UncertaintyBand]],
        total: Optional[CalcResult[UncertaintyBand]] = None,
    ) -> None:
        self.console.print()
        self.console.print(Rule("[bold]UNCERTAINTY (GUM)[/bold]"))

        table = Table(show_header=True, header_style="bold", padding=(0, 1))
        table.add_column("Scope", style="bold", min_width=26)
        table.add_column("u_c", justify="right", width=12)
        table.add_column("k", justify="right", width=6)
        table.add_column("U", justify="right", width=12)
        table.add_column("Rel.", justify="right", width=8)
        table.add_column("Interval (kg)", justify="right", min_width=24)

        rows = [(scope.label, by_scope.get(scope)) for scope in Scope]
        if total is not None:
            rows.append(("[bold]Total[/bold]", total))

        for label, band in rows:
            if band is None:
                continue
            if not band.ok:
                table.add_row(label, "", "", "", "", f"[red]{band.error.code.value}[/red]")
                continue
            b = band.value
            table.add_row(
                label,
                f"{b.standard:,.1f}",
                f"{b.coverage_factor:.2f}",
                f"{b.expanded:,.1f}",
                f"{b.relative_percent:.1f}%",
                f"{b.lower:,.1f} - {b.upper:,.1f}",
            )
        self.console.print(table)

        if total is not None and total.ok and total.value.missing_sources:
            self.console.print(
                f"  [yellow]{len(total.value.missing_sources)} source(s) without "
                f"uncertainty counted as zero[/yellow]"
            )

    # ------------------------------------------------------------------
    # Private rendering methods
    # ------------------------------------------------------------------

    def _render_header(self, report: CarbonReport) -> None:
        header = Text()
        header.append("CARBON REPORT", style="bold cyan")
        if report.organisation:
            header.append(" | ", style="dim")
            header.append(report.organisation, style="bold")
        if report.period:
            header.append(f" ({report.period})", style="dim")
        header.append(" | ", style="dim")
        header.append(_kg(report.totals.total) + " CO2e")

        self.console.print()
        self.console.print(Panel(header, title="Carbon & ESG Assessment"))

    def _render_error(self, error: Optional[CalcError]) -> None:
        if error is None:
            return
        self.console.print(f"  [red]Not available[/red] [dim]({error.code.value})[/dim]: {escape(error.message)}")

    def _render_footer(self, report: CarbonReport) -> None:
        self.console.print()
        self.console.print(Rule(style="dim"))
        self.console.print(
            f"  [dim]Generated: {report.generated_at.strftime('%Y-%m-%d %H:%M UTC')} | "
            f"carbon-esg v{__version__}[/dim]"
        )
        self.console.print()
