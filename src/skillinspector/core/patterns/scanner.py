"""Line-oriented pattern scanner.

``scan`` is a pure function from text to findings. For each rule in
catalog order it walks the lines in order and records only the first
matching line, so a pattern repeated throughout a file (a long blob
pasted many times, a recurring token) yields a single finding.
"""

from __future__ import annotations

from skillinspector.core.models import Finding
from skillinspector.core.patterns.catalog import PATTERN_RULES, PatternRule

SOURCE_NAME = "PatternScanner"


def scan(
    content: str,
    label: str = "SKILL.md",
    *,
    rules: tuple[PatternRule, ...] = PATTERN_RULES,
    source_name: str = SOURCE_NAME,
) -> list[Finding]:
    """Scan text for known-dangerous patterns.

    Args:
        content: Text to scan (skill body, a bundled script, ...).
        label: Name interpolated into each message, typically a file path.
        rules: Rule catalog to apply. Defaults to the built-in catalog.
        source_name: Provenance tag written on every finding.

    Returns:
        At most one finding per rule, in catalog order. Each message ends
        with ``(<label>:<line>)`` where line is 1-based. Empty when nothing
        matches or when ``content`` is not a string.
    """
    if not isinstance(content, str) or not content:
        return []

    lines = content.split("\n")
    findings: list[Finding] = []
    for rule in rules:
        line_no = _first_match(rule, lines)
        if line_no is None:
            continue
        findings.append(Finding(
            severity=rule.severity,
            message=f"{rule.message} ({label}:{line_no})",
            source_name=source_name,
            fix=rule.fix,
            rule_id=rule.id,
        ))
    return findings


def _first_match(rule: PatternRule, lines: list[str]) -> int | None:
    """Return the 1-based number of the earliest line matching ``rule``."""
    for index, line in enumerate(lines, start=1):
        if rule.pattern.search(line):
            return index
    return None
