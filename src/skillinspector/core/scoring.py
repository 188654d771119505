"""Capped, category-based risk scoring.

Scoring is a pure fold over a completed list of findings plus the set of
categories whose checkers did not finish. No state is shared with the
orchestration layer, so every property below can be tested without
running a single checker.

Score model::

    deduction(c)  = min(cap(c), sum(SEVERITY_DEDUCTIONS[f.severity] for f in c))
    optimistic    = max(0, 100 - sum(deduction(c) for c in categories))
    extra         = sum(cap(c) - deduction(c) for c in failed categories)
    pessimistic   = max(0, optimistic - extra)

A complete run reports ``optimistic``. An incomplete run reports
``pessimistic`` as the headline score together with the range
``[pessimistic, optimistic]``: the lower bound assumes every failed
checker would have driven its category to the cap.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from skillinspector.core.categories import (
    DEFAULT_CATEGORIES,
    FALLBACK_CATEGORY,
    Category,
    classify,
)
from skillinspector.core.models import Finding, Severity

MAX_SCORE = 100

SEVERITY_DEDUCTIONS: dict[Severity, int] = {
    Severity.CRITICAL: 50,
    Severity.HIGH: 25,
    Severity.MEDIUM: 10,
    Severity.LOW: 2,
}


@dataclass(frozen=True)
class ScoreResult:
    """Outcome of scoring one inspection.

    Attributes:
        optimistic: Score assuming unfinished checkers found nothing.
        pessimistic: Score assuming unfinished checkers maxed their category.
            Equal to ``optimistic`` when nothing failed.
        breakdown: Capped points deducted per category id. Every category
            appears, including those with zero deduction.
        failed_categories: Categories with at least one unfinished checker.
    """

    optimistic: int
    pessimistic: int
    breakdown: dict[str, int] = field(default_factory=dict)
    failed_categories: frozenset[str] = frozenset()

    @property
    def incomplete(self) -> bool:
        return bool(self.failed_categories)

    @property
    def score(self) -> int:
        """Headline score: the pessimistic bound when incomplete."""
        return self.pessimistic if self.incomplete else self.optimistic


def raw_deductions(
    findings: Iterable[Finding],
    categories: tuple[Category, ...] = DEFAULT_CATEGORIES,
) -> dict[str, int]:
    """Sum uncapped severity deductions per category id."""
    totals = {c.id: 0 for c in categories}
    for finding in findings:
        category_id = classify(finding.source_name, categories)
        totals[category_id] += SEVERITY_DEDUCTIONS[finding.severity]
    return totals


def compute_score(
    findings: Iterable[Finding],
    failed_categories: Iterable[str] = (),
    categories: tuple[Category, ...] = DEFAULT_CATEGORIES,
) -> ScoreResult:
    """Score a merged finding list.

    Args:
        findings: Every finding from successful sources.
        failed_categories: Category ids of checkers that failed or timed
            out. Duplicates collapse: a category never loses more than
            its cap, however many of its checkers failed.
        categories: Category definitions with caps.

    Returns:
        The ``ScoreResult``; both bounds lie in ``[0, 100]``.

    Raises:
        ValueError: If ``categories`` lacks the fallback category or a
            failed category id is unknown.
    """
    caps = {c.id: c.cap for c in categories}
    if FALLBACK_CATEGORY not in caps:
        raise ValueError(f"Categories must include fallback category '{FALLBACK_CATEGORY}'")

    failed = frozenset(failed_categories)
    unknown = sorted(failed - caps.keys())
    if unknown:
        raise ValueError(f"Unknown failed categories: {', '.join(unknown)}")

    raw = raw_deductions(findings, categories)
    breakdown = {cid: min(caps[cid], total) for cid, total in raw.items()}

    optimistic = max(0, MAX_SCORE - sum(breakdown.values()))
    extra = sum(caps[cid] - breakdown[cid] for cid in failed)
    pessimistic = max(0, optimistic - extra)

    return ScoreResult(
        optimistic=optimistic,
        pessimistic=pessimistic,
        breakdown=breakdown,
        failed_categories=failed,
    )
