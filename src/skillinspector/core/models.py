"""Shared data models: Severity, ComplianceRef, Finding, Skill.

These are the value types produced and consumed by every stage of an
inspection. They are intentionally decoupled from the scanner, validator
and engine so that downstream modules (CLI formatters, checkers) can
import them without pulling in pattern catalogs or orchestration logic.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import IntEnum
from pathlib import Path
from typing import Any


# ---------------------------------------------------------------------------
# Severity: Ordered finding severity levels
# ---------------------------------------------------------------------------


class Severity(IntEnum):
    """Four-level severity scale for findings.

    The integer encoding enables direct comparison: LOW < MEDIUM < HIGH < CRITICAL.
    Serialized forms use the lowercase label (``"critical"``).
    """

    LOW = 1
    MEDIUM = 2
    HIGH = 3
    CRITICAL = 4

    @property
    def label(self) -> str:
        """Lowercase label used in reports and JSON output."""
        return self.name.lower()

    @classmethod
    def from_label(cls, label: str) -> Severity:
        """Parse a severity label, case-insensitively.

        Raises:
            ValueError: If the label is not one of low/medium/high/critical.
        """
        try:
            return cls[label.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown severity: {label!r}") from None


# ---------------------------------------------------------------------------
# ComplianceRef: Pointer into an external risk taxonomy
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ComplianceRef:
    """A reference tying a finding to an external framework identifier.

    Attributes:
        framework: Framework name (e.g., "OWASP LLM Top 10").
        id: Stable identifier within the framework (e.g., "LLM01"). Used
            for de-duplication when several rules reference the same entry.
        name: Human-readable title of the framework entry.
        url: Link to the framework entry.
    """

    framework: str
    id: str
    name: str
    url: str

    @property
    def label(self) -> str:
        """Summary label: ``"<framework>: <id> — <name>"``."""
        return f"{self.framework}: {self.id} — {self.name}"

    def to_dict(self) -> dict[str, str]:
        return {
            "framework": self.framework,
            "id": self.id,
            "name": self.name,
            "url": self.url,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ComplianceRef:
        return cls(
            framework=str(data["framework"]),
            id=str(data["id"]),
            name=str(data["name"]),
            url=str(data["url"]),
        )


# ---------------------------------------------------------------------------
# Finding: A single reported issue
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Finding:
    """A single issue reported by the scanner, validator or a checker.

    Findings are value objects: they are never mutated after creation.
    Attaching compliance references produces a copy via ``with_compliance``.

    Attributes:
        severity: Issue severity (LOW through CRITICAL).
        message: Human-readable description of the issue.
        source_name: Which scanner, validator or checker produced it. Drives
            category inference and compliance matching.
        fix: Optional remediation text.
        rule_id: Identifier of the detection rule, when one applies.
        compliance_refs: Framework references, or None when the finding
            has never been matched by a compliance rule. An absent value
            is distinct from an empty tuple.
    """

    severity: Severity
    message: str
    source_name: str
    fix: str | None = None
    rule_id: str | None = None
    compliance_refs: tuple[ComplianceRef, ...] | None = None

    def with_compliance(self, refs: tuple[ComplianceRef, ...]) -> Finding:
        """Return a copy of this finding carrying the given references."""
        return replace(self, compliance_refs=refs)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "severity": self.severity.label,
            "message": self.message,
            "source_name": self.source_name,
            "fix": self.fix,
            "rule_id": self.rule_id,
        }
        if self.compliance_refs is not None:
            data["compliance_refs"] = [ref.to_dict() for ref in self.compliance_refs]
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Finding:
        refs = data.get("compliance_refs")
        return cls(
            severity=Severity.from_label(data["severity"]),
            message=str(data["message"]),
            source_name=str(data["source_name"]),
            fix=data.get("fix"),
            rule_id=data.get("rule_id"),
            compliance_refs=(
                tuple(ComplianceRef.from_dict(r) for r in refs)
                if refs is not None else None
            ),
        )


# ---------------------------------------------------------------------------
# Skill: The artifact under inspection
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Skill:
    """An agent skill: a SKILL.md document plus its optional bundle.

    Produced by the discovery collaborator and handed read-only to the
    scanner, validator and every checker.

    Attributes:
        name: Declared identifier (frontmatter ``name``).
        description: Declared description (frontmatter ``description``).
        frontmatter: The full structured metadata mapping, unvalidated.
        body: Markdown body following the frontmatter block.
        path: Path of the skill's entry file (canonically ``SKILL.md``).
        search_root: Directory discovery started from, if any. The
            validator never compares the declared name against it.
    """

    name: str
    description: str
    frontmatter: dict[str, Any] = field(default_factory=dict)
    body: str = ""
    path: Path = Path("SKILL.md")
    search_root: Path | None = None

    @property
    def directory(self) -> Path:
        """Directory holding the entry file and any bundled resources."""
        return self.path.parent
