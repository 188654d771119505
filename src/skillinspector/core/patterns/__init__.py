"""Deterministic pattern scanning for skill content.

Submodules
----------
- ``catalog``: The ordered, immutable ``PATTERN_RULES`` catalog.
- ``scanner``: The ``scan`` function applying the catalog line by line.

All public names are re-exported here::

    from skillinspector.core.patterns import PATTERN_RULES, PatternRule, scan
"""

from skillinspector.core.patterns.catalog import (
    BASE64_MIN_LENGTH,
    PATTERN_RULES,
    PatternRule,
)
from skillinspector.core.patterns.scanner import SOURCE_NAME, scan

__all__ = [
    "BASE64_MIN_LENGTH",
    "PATTERN_RULES",
    "PatternRule",
    "SOURCE_NAME",
    "scan",
]
