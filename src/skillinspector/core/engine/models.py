"""Engine data models: CheckOutcome, ScoreRange, InspectionReport.

``CheckOutcome`` records the terminal state of one checker run.
``InspectionReport`` is the terminal artifact of an inspection; it
serializes to a plain dict (and JSON) and restores from one without loss.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from skillinspector.core.compliance import affected_frameworks
from skillinspector.core.models import Finding


# ---------------------------------------------------------------------------
# CheckOutcome: Terminal state of a single checker run
# ---------------------------------------------------------------------------


class OutcomeStatus(Enum):
    """Terminal checker states. ``Pending`` is never materialized."""

    OK = "ok"
    FAILED = "failed"
    TIMED_OUT = "timed_out"


@dataclass(frozen=True)
class CheckOutcome:
    """Result of running one checker.

    Never carries both findings and an error: a checker that fails or
    times out contributes zero findings from that run.

    Attributes:
        checker_name: The checker's stable name.
        category: Category id inferred from ``checker_name``.
        status: OK, FAILED or TIMED_OUT.
        findings: Findings produced (OK only).
        error: Error message (FAILED and TIMED_OUT only).
        elapsed: Wall-clock seconds spent waiting on the checker.
    """

    checker_name: str
    category: str
    status: OutcomeStatus
    findings: tuple[Finding, ...] = ()
    error: str | None = None
    elapsed: float = 0.0

    def __post_init__(self) -> None:
        if self.status is OutcomeStatus.OK:
            if self.error is not None:
                raise ValueError("A successful outcome cannot carry an error")
        elif self.findings:
            raise ValueError("A failed outcome cannot carry findings")

    @classmethod
    def ok(
        cls, checker_name: str, category: str,
        findings: tuple[Finding, ...], elapsed: float = 0.0,
    ) -> CheckOutcome:
        return cls(checker_name, category, OutcomeStatus.OK, findings, None, elapsed)

    @classmethod
    def failed(
        cls, checker_name: str, category: str, error: str, elapsed: float = 0.0,
    ) -> CheckOutcome:
        return cls(checker_name, category, OutcomeStatus.FAILED, (), error, elapsed)

    @classmethod
    def timed_out(
        cls, checker_name: str, category: str, timeout: float, elapsed: float = 0.0,
    ) -> CheckOutcome:
        return cls(
            checker_name, category, OutcomeStatus.TIMED_OUT, (),
            f"Timed out after {timeout:g}s", elapsed,
        )

    @property
    def succeeded(self) -> bool:
        return self.status is OutcomeStatus.OK

    def to_dict(self) -> dict[str, Any]:
        return {
            "checker_name": self.checker_name,
            "category": self.category,
            "status": self.status.value,
            "findings_count": len(self.findings),
            "error": self.error,
            "elapsed": round(self.elapsed, 3),
        }


# ---------------------------------------------------------------------------
# InspectionReport: Terminal artifact of an inspection run
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ScoreRange:
    """Bounds on the score of an incomplete run."""

    min: int
    max: int

    def to_dict(self) -> dict[str, int]:
        return {"min": self.min, "max": self.max}


@dataclass(frozen=True)
class InspectionReport:
    """Final report for one inspected skill.

    Invariants (enforced at construction):

    - ``0 <= score <= 100``.
    - ``score_range`` is present iff ``incomplete``.
    - When incomplete, ``score == score_range.min <= score_range.max``.

    Attributes:
        skill_name: Declared name of the inspected skill.
        score: Headline score; the pessimistic bound when incomplete.
        score_breakdown: Capped points deducted per category id.
        findings: All merged, compliance-enriched findings.
        incomplete: True when at least one checker failed or timed out.
        score_range: ``[pessimistic, optimistic]`` bounds, incomplete only.
        failed_checks: Names of checkers that failed or timed out.
        errors: Error messages, ``"<checker>: <message>"``.
        timestamp: ISO-8601 UTC time the report was built.
        summary: One-line human summary.
        outcomes: Per-checker diagnostics.
    """

    skill_name: str
    score: int
    score_breakdown: dict[str, int]
    findings: tuple[Finding, ...]
    incomplete: bool
    timestamp: str
    score_range: ScoreRange | None = None
    failed_checks: tuple[str, ...] = ()
    errors: tuple[str, ...] = ()
    summary: str = ""
    outcomes: tuple[dict[str, Any], ...] = field(default=())

    def __post_init__(self) -> None:
        if not 0 <= self.score <= 100:
            raise ValueError(f"Score must be in [0, 100], got {self.score}")
        if self.incomplete != (self.score_range is not None):
            raise ValueError("score_range must be present exactly when incomplete")
        if self.score_range is not None:
            lo, hi = self.score_range.min, self.score_range.max
            if not (lo == self.score and lo <= hi <= 100):
                raise ValueError(
                    f"Incomplete score {self.score} must equal range min "
                    f"and lie within [{lo}, {hi}]"
                )

    @property
    def affected_frameworks(self) -> list[str]:
        return affected_frameworks(self.findings)

    # -- Serialization -------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dict. Inverse of ``from_dict``."""
        return {
            "skill_name": self.skill_name,
            "score": self.score,
            "score_range": self.score_range.to_dict() if self.score_range else None,
            "score_breakdown": dict(self.score_breakdown),
            "incomplete": self.incomplete,
            "failed_checks": list(self.failed_checks),
            "errors": list(self.errors),
            "findings": [f.to_dict() for f in self.findings],
            "summary": self.summary,
            "timestamp": self.timestamp,
            "outcomes": [dict(o) for o in self.outcomes],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> InspectionReport:
        """Rebuild a report from ``to_dict`` output."""
        rng = data.get("score_range")
        return cls(
            skill_name=data["skill_name"],
            score=int(data["score"]),
            score_range=ScoreRange(int(rng["min"]), int(rng["max"])) if rng else None,
            score_breakdown={k: int(v) for k, v in data["score_breakdown"].items()},
            findings=tuple(Finding.from_dict(f) for f in data["findings"]),
            incomplete=bool(data["incomplete"]),
            failed_checks=tuple(data.get("failed_checks", ())),
            errors=tuple(data.get("errors", ())),
            timestamp=data["timestamp"],
            summary=data.get("summary", ""),
            outcomes=tuple(dict(o) for o in data.get("outcomes", ())),
        )

    def to_json(self, indent: int | None = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_json(cls, text: str) -> InspectionReport:
        return cls.from_dict(json.loads(text))
