"""Attach compliance framework references to findings.

``map_compliance`` is a pure transform: findings only ever gain a
``compliance_refs`` tuple, de-duplicated by reference id. Findings that
no rule matches come back unchanged, with ``compliance_refs`` still None.
Applying the mapper twice yields the same references as applying it once.
"""

from __future__ import annotations

from collections.abc import Iterable

from skillinspector.core.compliance.catalog import COMPLIANCE_RULES, ComplianceRule
from skillinspector.core.models import ComplianceRef, Finding


def map_compliance(
    findings: Iterable[Finding],
    rules: tuple[ComplianceRule, ...] = COMPLIANCE_RULES,
) -> list[Finding]:
    """Enrich findings with references from every firing rule.

    Args:
        findings: Findings to enrich, in any order. Order is preserved.
        rules: Mapping rules to evaluate. Defaults to the built-in catalog.

    Returns:
        A new list, one entry per input finding.
    """
    return [_map_one(finding, rules) for finding in findings]


def _map_one(finding: Finding, rules: tuple[ComplianceRule, ...]) -> Finding:
    refs: list[ComplianceRef] = list(finding.compliance_refs or ())
    seen = {ref.id for ref in refs}
    added = False

    for rule in rules:
        if not rule.matches(finding):
            continue
        for ref in rule.refs:
            if ref.id not in seen:
                seen.add(ref.id)
                refs.append(ref)
                added = True

    if not added:
        return finding
    return finding.with_compliance(tuple(refs))


def affected_frameworks(findings: Iterable[Finding]) -> list[str]:
    """Collect the unique ``"<framework>: <id> — <name>"`` labels touched.

    Returns:
        Labels de-duplicated and sorted lexicographically.
    """
    labels = {
        ref.label
        for finding in findings
        for ref in finding.compliance_refs or ()
    }
    return sorted(labels)
