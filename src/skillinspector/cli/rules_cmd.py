"""``skill-inspector rules`` -- List the built-in pattern rules.

Displays every rule the pattern scanner and the portability checker apply,
with its severity and message, so authors can see what a skill is judged
against.
"""

from __future__ import annotations

import click

from skillinspector.checkers.portability import PORTABILITY_RULES
from skillinspector.core.patterns import PATTERN_RULES, PatternRule


def _print_group(title: str, rules: tuple[PatternRule, ...]) -> None:
    click.echo("")
    click.echo(f"{title} ({len(rules)} rules)")
    click.echo("=" * 72)
    click.echo(f"{'Rule':<22s} {'Severity':<10s} Message")
    click.echo("-" * 72)
    for rule in rules:
        click.echo(f"{rule.id:<22s} {rule.severity.label:<10s} {rule.message}")


@click.command("rules")
@click.option("--fixes", is_flag=True, help="Also show the suggested fix for each rule.")
def rules_command(fixes: bool) -> None:
    """List the pattern rules used to inspect skills."""
    _print_group("Security patterns", PATTERN_RULES)
    _print_group("Portability patterns", PORTABILITY_RULES)
    if fixes:
        click.echo("")
        click.echo("Suggested fixes")
        click.echo("-" * 72)
        for rule in (*PATTERN_RULES, *PORTABILITY_RULES):
            click.echo(f"{rule.id:<22s} {rule.fix}")
    click.echo("")
