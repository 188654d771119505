"""``skill-inspector inspect [SOURCE]``: discover and score agent skills.

SOURCE may be a ``SKILL.md`` file or a directory; it defaults to the
current directory. Configuration is taken from ``--config``, else from a
``.skill-inspector.yaml`` beside SOURCE, else built-in defaults, with
command-line flags applied last.

Exit Codes:
    0 Every inspected skill scored at or above ``--fail-under``.
    1 One or more skills scored below ``--fail-under``.
    2 No skills found, or invalid configuration or source.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from skillinspector.checkers import default_checkers
from skillinspector.config import InspectorConfig, resolve_config
from skillinspector.core.compliance import affected_frameworks
from skillinspector.core.engine import InspectionEngine, InspectionReport
from skillinspector.core.models import Skill
from skillinspector.discovery import discover_skills
from skillinspector.exceptions import SkillInspectorError


def _select(skills: list[Skill], names: tuple[str, ...]) -> list[Skill]:
    """Keep only skills whose name is in ``names`` (all when empty)."""
    if not names:
        return skills
    wanted = set(names)
    return [s for s in skills if s.name in wanted]


def _fail(message: str, output_format: str) -> None:
    """Report a setup error in the requested format and exit with 2."""
    if output_format == "json":
        click.echo(json.dumps({"error": message}))
    else:
        click.echo(f"Error: {message}", err=True)
    sys.exit(2)


def _build_engine(config: InspectorConfig, no_checkers: bool) -> InspectionEngine:
    checkers = [] if no_checkers else default_checkers(set(config.disabled_checkers))
    return InspectionEngine(
        checkers,
        per_check_timeout=config.per_check_timeout,
        categories=config.categories(),
    )


def _output_reports(
    reports: list[InspectionReport],
    output_format: str,
    show_compliance: bool,
    fail_under: int,
) -> None:
    if output_format == "json":
        payload: dict = {"reports": [r.to_dict() for r in reports]}
        if show_compliance:
            payload["affected_frameworks"] = affected_frameworks(
                f for r in reports for f in r.findings
            )
        click.echo(json.dumps(payload, indent=2))
        return

    from skillinspector.cli.output import print_report, print_run_summary

    for report in reports:
        print_report(report, show_compliance=show_compliance)
    print_run_summary(reports, fail_under)


def _output_skill_list(skills: list[Skill], output_format: str) -> None:
    if output_format == "json":
        click.echo(json.dumps({
            "skills": [
                {"name": s.name, "description": s.description, "path": str(s.path)}
                for s in skills
            ],
        }, indent=2))
        return

    from skillinspector.cli.output import print_skill_list

    print_skill_list(skills)


@click.command("inspect")
@click.argument("source", type=click.Path(), default=".", required=False)
@click.option("--list", "list_only", is_flag=True, help="List discovered skills without inspecting them.")
@click.option("-s", "--skill", "skill_names", multiple=True, help="Inspect only the named skill (repeatable).")
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format.",
)
@click.option("--timeout", type=float, default=None, help="Seconds each checker may run (default 60).")
@click.option(
    "--config", "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Path to a .skill-inspector.yaml configuration file.",
)
@click.option(
    "--fail-under",
    type=click.IntRange(0, 100),
    default=None,
    help="Exit with 1 if any score is below this value (default 70).",
)
@click.option("--compliance", is_flag=True, help="Print the affected compliance frameworks.")
@click.option("--no-checkers", is_flag=True, help="Run only the pattern scanner and validator.")
def inspect_command(
    source: str,
    list_only: bool,
    skill_names: tuple[str, ...],
    output_format: str,
    timeout: float | None,
    config_path: str | None,
    fail_under: int | None,
    compliance: bool,
    no_checkers: bool,
) -> None:
    """Inspect agent skills and report a 0-100 score for each.

    SOURCE is a SKILL.md file or a directory to search (default: .).
    """
    target = Path(source)
    try:
        config = resolve_config(
            Path(config_path) if config_path else None, target,
        ).merged(per_check_timeout=timeout, fail_under=fail_under)
        skills = _select(discover_skills(target), skill_names)
        engine = None if list_only else _build_engine(config, no_checkers)
    except SkillInspectorError as exc:
        _fail(str(exc), output_format)
        return

    if not skills:
        if output_format == "json":
            click.echo(json.dumps({"skills": [], "summary": "No skills found"}))
        else:
            click.echo("No skills found at the target path.")
        sys.exit(2)

    if list_only:
        _output_skill_list(skills, output_format)
        sys.exit(0)

    reports = [engine.inspect(skill) for skill in skills]
    _output_reports(reports, output_format, compliance, config.fail_under)

    below = any(r.score < config.fail_under for r in reports)
    sys.exit(1 if below else 0)
