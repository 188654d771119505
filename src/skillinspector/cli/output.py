"""Rich output formatting helpers for the Skill Inspector CLI.

Provides consistent, severity-colored terminal output for inspection
reports, discovered-skill listings and compliance summaries.

Severity Color Mapping:
    CRITICAL = bold red, HIGH = red, MEDIUM = yellow, LOW = blue
Score bands:
    > 80 green, > 50 yellow, otherwise red
"""

from __future__ import annotations

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from skillinspector.core.engine import InspectionReport
from skillinspector.core.models import Severity, Skill

_SEVERITY_STYLES: dict[Severity, str] = {
    Severity.CRITICAL: "bold red",
    Severity.HIGH: "red",
    Severity.MEDIUM: "yellow",
    Severity.LOW: "blue",
}

console = Console()


def severity_style(severity: Severity) -> str:
    """Return the Rich style string for a given severity level."""
    return _SEVERITY_STYLES.get(severity, "white")


def score_style(score: int) -> str:
    """Return the Rich style string for a headline score."""
    if score > 80:
        return "bold green"
    if score > 50:
        return "bold yellow"
    return "bold red"


def print_report(report: InspectionReport, show_compliance: bool = False) -> None:
    """Print a full inspection report for one skill.

    Args:
        report: The report to render.
        show_compliance: Also print the affected-frameworks summary.
    """
    score_text = Text(f"{report.score}/100", style=score_style(report.score))
    header = Text.assemble(
        ("Skill: ", "bold"), (report.skill_name, ""),
        ("  Score: ", "bold"), score_text,
    )
    if report.incomplete and report.score_range is not None:
        header.append("  INCOMPLETE", style="bold magenta")
        header.append(
            f" (range {report.score_range.min}-{report.score_range.max})",
            style="magenta",
        )
    console.print(Panel(header, title="Inspection Result"))
    console.print(f"[bold]Summary:[/bold] {report.summary}")

    if report.incomplete:
        _print_failures(report)

    _print_breakdown(report)

    if report.findings:
        _print_findings(report)
    else:
        console.print("[green]No findings. Skill passed all checks.[/green]")

    if show_compliance:
        print_frameworks(report.affected_frameworks)


def _print_failures(report: InspectionReport) -> None:
    console.print(
        "[magenta]Not every check completed; the score above is the "
        "lower bound of what could be verified.[/magenta]"
    )
    for error in report.errors:
        console.print(f"  [magenta]- {error}[/magenta]")


def _print_breakdown(report: InspectionReport) -> None:
    table = Table(title="Score Breakdown", show_header=True, header_style="bold")
    table.add_column("Category", style="bold")
    table.add_column("Deducted", justify="right")
    for category, points in sorted(report.score_breakdown.items()):
        style = "green" if points == 0 else "red"
        table.add_row(category, Text(f"-{points}", style=style))
    console.print(table)


def _print_findings(report: InspectionReport) -> None:
    table = Table(title="Findings", show_header=True, header_style="bold")
    table.add_column("Severity", justify="center", no_wrap=True)
    table.add_column("Source", style="dim")
    table.add_column("Message")
    table.add_column("Fix", style="dim")
    table.add_column("Refs", style="cyan")
    ordered = sorted(report.findings, key=lambda f: f.severity, reverse=True)
    for finding in ordered:
        refs = ", ".join(r.id for r in finding.compliance_refs or ())
        table.add_row(
            Text(finding.severity.label.upper(), style=severity_style(finding.severity)),
            finding.source_name,
            finding.message,
            finding.fix or "",
            refs,
        )
    console.print(table)


def print_frameworks(labels: list[str]) -> None:
    """Print the affected compliance frameworks, one per line."""
    if not labels:
        console.print("[dim]No compliance frameworks affected.[/dim]")
        return
    console.print("[bold]Affected frameworks:[/bold]")
    for label in labels:
        console.print(f"  - {label}")


def print_skill_list(skills: list[Skill]) -> None:
    """Print discovered skills without inspecting them."""
    console.print(f"[green]Found {len(skills)} skill(s):[/green]")
    for skill in skills:
        console.print(f"- [bold]{skill.name}[/bold]: {skill.description}")


def print_run_summary(reports: list[InspectionReport], fail_under: int) -> None:
    """Print a one-line summary after all reports."""
    below = sum(1 for r in reports if r.score < fail_under)
    incomplete = sum(1 for r in reports if r.incomplete)
    parts = [f"[bold]{len(reports)}[/bold] skill(s) inspected"]
    if below:
        parts.append(f"[red]{below} below {fail_under}[/red]")
    else:
        parts.append(f"[green]all at or above {fail_under}[/green]")
    if incomplete:
        parts.append(f"[magenta]{incomplete} incomplete[/magenta]")
    console.print(" | ".join(parts))
