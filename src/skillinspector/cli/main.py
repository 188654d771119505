"""Skill Inspector CLI: quality and security scoring for agent skills.

Entry point for the ``skill-inspector`` command-line tool. Registers all
subcommands under a single Click group.

Commands:
    inspect  Discover skills and print a scored inspection report.
    rules    List the built-in pattern rules.

Usage::

    skill-inspector inspect                       # Inspect skills under .
    skill-inspector inspect ./my-skills --format json
    skill-inspector inspect . --list
    skill-inspector -v inspect ./pdf-tools --timeout 10 --compliance
    skill-inspector rules
"""

from __future__ import annotations

import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from skillinspector import __version__
from skillinspector.cli.inspect_cmd import inspect_command
from skillinspector.cli.rules_cmd import rules_command


def _configure_logging(verbosity: int) -> None:
    """Send log records to stderr through Rich. -v is INFO, -vv is DEBUG."""
    if verbosity <= 0:
        return
    root = logging.getLogger()
    for existing in [h for h in root.handlers if isinstance(h, RichHandler)]:
        root.removeHandler(existing)

    handler = RichHandler(console=Console(stderr=True), show_path=False)
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    root.addHandler(handler)
    root.setLevel(logging.INFO if verbosity == 1 else logging.DEBUG)


@click.group()
@click.version_option(version=__version__)
@click.option(
    "-v", "--verbose",
    count=True,
    help="Increase log output (-v info, -vv debug).",
)
def cli(verbose: int) -> None:
    """Skill Inspector: quality and security scoring for agent skills.

    Scans SKILL.md files for secrets, dangerous commands and obfuscation,
    validates their frontmatter, runs portability checks concurrently and
    reports a 0-100 score with compliance references.
    """
    _configure_logging(verbose)


# Register all subcommands
cli.add_command(inspect_command)
cli.add_command(rules_command)
