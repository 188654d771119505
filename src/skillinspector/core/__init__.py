"""Core inspection engine: models, deterministic leaves, mapping and scoring.

The deterministic leaves (``patterns``, ``validator``, ``compliance``,
``scoring``) are pure functions with no I/O. ``engine`` composes them with
concurrently executed checkers.
"""

from skillinspector.core.models import ComplianceRef, Finding, Severity, Skill

__all__ = [
    "ComplianceRef",
    "Finding",
    "Severity",
    "Skill",
]
