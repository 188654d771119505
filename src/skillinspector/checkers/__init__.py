"""Checkers: independent analysis units run concurrently by the engine.

- ``base``: the ``Checker`` capability and ``BlockingChecker`` helper.
- ``bundle``: ``BundleScanner`` (security) over files shipped with a skill.
- ``portability``: ``PortabilityChecker`` for agent/platform lock-in.
"""

from __future__ import annotations

from skillinspector.checkers.base import BlockingChecker, Checker
from skillinspector.checkers.bundle import BundleScanner
from skillinspector.checkers.portability import PortabilityChecker


def default_checkers(disabled: frozenset[str] | set[str] = frozenset()) -> list[Checker]:
    """Instantiate the built-in checkers, minus any named in ``disabled``."""
    checkers: list[Checker] = [BundleScanner(), PortabilityChecker()]
    return [c for c in checkers if c.name not in disabled]


__all__ = [
    "BlockingChecker",
    "BundleScanner",
    "Checker",
    "PortabilityChecker",
    "default_checkers",
]
