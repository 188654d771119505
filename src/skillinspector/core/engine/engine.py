"""Inspection orchestration: deterministic leaves plus concurrent checkers.

``InspectionEngine.run`` performs one inspection:

1. **Deterministic leaves** -- the pattern scanner and the spec validator
   run synchronously on the calling thread.
2. **Checkers** -- every registered checker is launched as its own task
   inside a ``TaskGroup`` bound to the run, each under its own
   ``asyncio.timeout``. A slow checker never delays or cancels a sibling;
   an expired checker is abandoned (its late result discarded) and
   recorded as TIMED_OUT. Exceptions become FAILED outcomes. Nothing is
   retried.
3. **Merge** -- findings from the leaves and from OK outcomes only are
   merged and passed through the compliance mapper.
4. **Score** -- ``compute_score`` folds the merged findings and the
   categories of unfinished checkers into an exact score, or into a
   pessimistic headline score plus a range.

Each checker writes only to its own task result; results are folded
after every task settles, so no shared mutable state or locking exists.
The only way ``run`` itself fails is a misconfiguration, which the
constructor rejects before any checker is launched.
"""

from __future__ import annotations

import asyncio
import logging
import math
import time
from collections.abc import Iterable, Sequence
from datetime import datetime, timezone

from skillinspector.checkers.base import Checker
from skillinspector.core.categories import (
    DEFAULT_CATEGORIES,
    FALLBACK_CATEGORY,
    Category,
    classify,
    is_recognized,
)
from skillinspector.core.compliance import COMPLIANCE_RULES, ComplianceRule, map_compliance
from skillinspector.core.engine.models import (
    CheckOutcome,
    InspectionReport,
    ScoreRange,
)
from skillinspector.core.models import Finding, Skill
from skillinspector.core.patterns import scan
from skillinspector.core.scoring import compute_score
from skillinspector.core.validator import validate
from skillinspector.exceptions import CheckerError, ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CHECK_TIMEOUT: float = 60.0


class InspectionEngine:
    """Runs the deterministic leaves and all checkers, then scores.

    The engine holds only immutable configuration; each ``run`` call is
    independent, so one engine may inspect many skills.

    Usage::

        engine = InspectionEngine([BundleScanner(), PortabilityChecker()])
        report = engine.inspect(skill)
        print(report.score, report.incomplete)

    Args:
        checkers: Checkers to run concurrently. Names must be unique.
        per_check_timeout: Seconds each checker may run. Must be a finite
            number greater than zero.
        categories: Category definitions; must include the fallback
            category.
        compliance_rules: Compliance mapping rules.

    Raises:
        ConfigError: On any invalid argument.
    """

    def __init__(
        self,
        checkers: Iterable[Checker] = (),
        per_check_timeout: float = DEFAULT_CHECK_TIMEOUT,
        categories: tuple[Category, ...] = DEFAULT_CATEGORIES,
        compliance_rules: tuple[ComplianceRule, ...] = COMPLIANCE_RULES,
    ) -> None:
        self._timeout = _validate_timeout(per_check_timeout)
        self._checkers = _validate_checkers(checkers)
        self._categories = _validate_categories(categories)
        self._compliance_rules = compliance_rules

    @property
    def checkers(self) -> tuple[Checker, ...]:
        return self._checkers

    @property
    def per_check_timeout(self) -> float:
        return self._timeout

    @property
    def categories(self) -> tuple[Category, ...]:
        return self._categories

    # -- Public API ----------------------------------------------------------

    async def run(self, skill: Skill) -> InspectionReport:
        """Inspect one skill. Always returns a well-formed report."""
        deterministic = [
            *scan(skill.body, skill.path.name or "SKILL.md"),
            *validate(skill),
        ]
        outcomes = await self._collect_outcomes(skill)
        return build_report(
            skill.name,
            deterministic,
            outcomes,
            categories=self._categories,
            compliance_rules=self._compliance_rules,
        )

    def inspect(self, skill: Skill) -> InspectionReport:
        """Synchronous wrapper around ``run`` for non-async callers."""
        return asyncio.run(self.run(skill))

    # -- Checker execution ---------------------------------------------------

    async def _collect_outcomes(self, skill: Skill) -> list[CheckOutcome]:
        if not self._checkers:
            return []
        async with asyncio.TaskGroup() as group:
            tasks = [
                group.create_task(self._run_checker(checker, skill), name=checker.name)
                for checker in self._checkers
            ]
        return [task.result() for task in tasks]

    async def _run_checker(self, checker: Checker, skill: Skill) -> CheckOutcome:
        """Run one checker to a terminal outcome. Never raises ``Exception``."""
        name = checker.name
        category = classify(name, self._categories)
        if not is_recognized(name, self._categories):
            logger.warning(
                "Checker '%s' matches no category; counting it as '%s'",
                name, FALLBACK_CATEGORY,
            )

        started = time.monotonic()
        scope = asyncio.timeout(self._timeout)
        try:
            async with scope:
                result = await checker.execute(skill)
        except TimeoutError as exc:
            elapsed = time.monotonic() - started
            if scope.expired():
                logger.warning("Checker '%s' timed out after %.1fs", name, self._timeout)
                return CheckOutcome.timed_out(name, category, self._timeout, elapsed)
            return self._failure(name, category, exc, elapsed)
        except asyncio.CancelledError as exc:
            # Only a cancellation aimed at this run propagates.
            if asyncio.current_task().cancelling():
                raise
            return self._failure(name, category, exc, time.monotonic() - started)
        except Exception as exc:
            return self._failure(name, category, exc, time.monotonic() - started)

        elapsed = time.monotonic() - started
        findings = _coerce_findings(result)
        if findings is None:
            return self._failure(
                name, category,
                CheckerError(f"returned {type(result).__name__}, expected a list of findings"),
                elapsed,
            )
        logger.debug("Checker '%s' finished with %d finding(s) in %.2fs",
                      name, len(findings), elapsed)
        return CheckOutcome.ok(name, category, findings, elapsed)

    @staticmethod
    def _failure(name: str, category: str, exc: BaseException, elapsed: float) -> CheckOutcome:
        message = str(exc) or type(exc).__name__
        logger.warning("Checker '%s' failed: %s", name, message, exc_info=exc)
        return CheckOutcome.failed(name, category, message, elapsed)


# ---------------------------------------------------------------------------
# Report construction (pure)
# ---------------------------------------------------------------------------


def build_report(
    skill_name: str,
    deterministic: Sequence[Finding],
    outcomes: Sequence[CheckOutcome],
    *,
    categories: tuple[Category, ...] = DEFAULT_CATEGORIES,
    compliance_rules: tuple[ComplianceRule, ...] = COMPLIANCE_RULES,
    timestamp: datetime | None = None,
) -> InspectionReport:
    """Fold deterministic findings and settled outcomes into a report.

    Args:
        skill_name: Name recorded on the report.
        deterministic: Findings from the scanner and validator.
        outcomes: One settled outcome per checker, in any order.
        categories: Category definitions with caps.
        compliance_rules: Rules used to enrich merged findings.
        timestamp: Report time; defaults to now (UTC).

    Returns:
        The ``InspectionReport``.
    """
    merged: list[Finding] = list(deterministic)
    for outcome in outcomes:
        if outcome.succeeded:
            merged.extend(outcome.findings)
    enriched = map_compliance(merged, compliance_rules)

    _warn_unrecognized_sources(enriched, categories)

    failed = [o for o in outcomes if not o.succeeded]
    result = compute_score(
        enriched,
        failed_categories=(o.category for o in failed),
        categories=categories,
    )

    score_range = (
        ScoreRange(min=result.pessimistic, max=result.optimistic)
        if result.incomplete else None
    )
    return InspectionReport(
        skill_name=skill_name,
        score=result.score,
        score_range=score_range,
        score_breakdown=result.breakdown,
        findings=tuple(enriched),
        incomplete=result.incomplete,
        failed_checks=tuple(o.checker_name for o in failed),
        errors=tuple(f"{o.checker_name}: {o.error}" for o in failed),
        timestamp=(timestamp or datetime.now(timezone.utc)).isoformat(),
        summary=_summarize(enriched, failed),
        outcomes=tuple(o.to_dict() for o in outcomes),
    )


async def run_inspection(
    skill: Skill,
    checkers: Iterable[Checker] = (),
    per_check_timeout: float = DEFAULT_CHECK_TIMEOUT,
) -> InspectionReport:
    """Inspect ``skill`` with a throwaway engine.

    Raises:
        ConfigError: If the timeout or checker set is invalid.
    """
    engine = InspectionEngine(checkers, per_check_timeout=per_check_timeout)
    return await engine.run(skill)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _coerce_findings(result: object) -> tuple[Finding, ...] | None:
    """Return ``result`` as a tuple of findings, or None if malformed."""
    if not isinstance(result, (list, tuple)):
        return None
    if not all(isinstance(f, Finding) for f in result):
        return None
    return tuple(result)


def _summarize(findings: Sequence[Finding], failed: Sequence[CheckOutcome]) -> str:
    if findings:
        sources = len({f.source_name for f in findings})
        text = f"Found {len(findings)} issue(s) across {sources} source(s)."
    else:
        text = "No issues found."
    if failed:
        text += f" {len(failed)} check(s) did not complete; score is a lower bound."
    return text


def _warn_unrecognized_sources(
    findings: Iterable[Finding], categories: tuple[Category, ...],
) -> None:
    unknown = sorted({
        f.source_name for f in findings if not is_recognized(f.source_name, categories)
    })
    for source in unknown:
        logger.warning(
            "Findings from unrecognized source '%s' counted as '%s'",
            source, FALLBACK_CATEGORY,
        )


def _validate_timeout(value: object) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"per_check_timeout must be a number, got {value!r}")
    if not math.isfinite(value) or value <= 0:
        raise ConfigError(f"per_check_timeout must be a finite number > 0, got {value!r}")
    return float(value)


def _validate_checkers(checkers: Iterable[Checker]) -> tuple[Checker, ...]:
    result = tuple(checkers)
    seen: set[str] = set()
    for checker in result:
        name = getattr(checker, "name", None)
        if not isinstance(name, str) or not name:
            raise ConfigError(f"Checker {checker!r} has no usable name")
        if not callable(getattr(checker, "execute", None)):
            raise ConfigError(f"Checker '{name}' has no execute() method")
        if name in seen:
            raise ConfigError(f"Duplicate checker name: '{name}'")
        seen.add(name)
    return result


def _validate_categories(categories: tuple[Category, ...]) -> tuple[Category, ...]:
    ids = [c.id for c in categories]
    if len(ids) != len(set(ids)):
        raise ConfigError("Category ids must be unique")
    if FALLBACK_CATEGORY not in ids:
        raise ConfigError(f"Categories must include fallback category '{FALLBACK_CATEGORY}'")
    for category in categories:
        if category.cap < 0:
            raise ConfigError(f"Category '{category.id}' has a negative cap")
    return tuple(categories)
