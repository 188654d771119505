"""Compliance mapping rules: finding characteristics -> framework references.

Each ``ComplianceRule`` fires for a finding when:

- ``source_pattern`` is unset, or matches the finding's ``source_name``; AND
- ``message_patterns`` is empty, or at least one matches the message.

Frameworks referenced:

- OWASP Top 10 for LLM Applications (2025).
- MITRE ATLAS adversarial ML techniques.
- The Agent Skills specification (agentskills.io) for spec and
  portability findings.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from skillinspector.core.categories import SPEC_SOURCE_PATTERN
from skillinspector.core.models import ComplianceRef, Finding

OWASP_FRAMEWORK = "OWASP LLM Top 10"
ATLAS_FRAMEWORK = "MITRE ATLAS"
SPEC_FRAMEWORK = "Agent Skills Spec"

_OWASP_BASE = "https://genai.owasp.org/llmrisk/"
_ATLAS_BASE = "https://atlas.mitre.org/techniques/"
_SPEC_URL = "https://agentskills.io/specification"


@dataclass(frozen=True)
class ComplianceRule:
    """A predicate over a finding plus the references it attaches.

    Attributes:
        refs: References attached when the rule fires. Never empty.
        source_pattern: Optional restriction on ``Finding.source_name``.
        message_patterns: Optional restriction on ``Finding.message``;
            any single match satisfies it.
    """

    refs: tuple[ComplianceRef, ...]
    source_pattern: re.Pattern[str] | None = None
    message_patterns: tuple[re.Pattern[str], ...] = ()

    def matches(self, finding: Finding) -> bool:
        """Return True if this rule fires for ``finding``."""
        if self.source_pattern is not None and not self.source_pattern.search(
            finding.source_name or ""
        ):
            return False
        if self.message_patterns and not any(
            p.search(finding.message) for p in self.message_patterns
        ):
            return False
        return True


def _owasp(ref_id: str, name: str, slug: str) -> ComplianceRef:
    return ComplianceRef(OWASP_FRAMEWORK, ref_id, name, f"{_OWASP_BASE}{slug}/")


def _atlas(ref_id: str, name: str) -> ComplianceRef:
    return ComplianceRef(ATLAS_FRAMEWORK, ref_id, name, f"{_ATLAS_BASE}{ref_id}/")


LLM01_PROMPT_INJECTION = _owasp("LLM01", "Prompt Injection", "llm01-prompt-injection")
LLM02_DISCLOSURE = _owasp(
    "LLM02", "Sensitive Information Disclosure", "llm022025-sensitive-information-disclosure",
)
LLM03_SUPPLY_CHAIN = _owasp("LLM03", "Supply Chain", "llm032025-supply-chain")
LLM04_POISONING = _owasp("LLM04", "Data and Model Poisoning", "llm042025-data-and-model-poisoning")
LLM06_EXCESSIVE_AGENCY = _owasp("LLM06", "Excessive Agency", "llm062025-excessive-agency")

ATLAS_PROMPT_INJECTION = _atlas("AML.T0051", "LLM Prompt Injection")
ATLAS_SUPPLY_CHAIN = _atlas("AML.T0010", "ML Supply Chain Compromise")
ATLAS_POISONING = _atlas("AML.T0020", "Poison Training Data")
ATLAS_EXFILTRATION = _atlas("AML.T0025", "Exfiltration via Cyber Means")

SPEC_COMPLIANCE = ComplianceRef(SPEC_FRAMEWORK, "SPEC-001", "agentskills.io Compliance", _SPEC_URL)
SPEC_PORTABILITY = ComplianceRef(
    SPEC_FRAMEWORK, "SPEC-002", "Cross-Agent Portability", _SPEC_URL,
)


COMPLIANCE_RULES: tuple[ComplianceRule, ...] = (
    # Hidden instructions via unicode tricks are the static-detectable
    # form of prompt injection.
    ComplianceRule(
        message_patterns=(
            re.compile(r"zero-width|invisible unicode|hidden instruction|prompt injection", re.I),
        ),
        refs=(LLM01_PROMPT_INJECTION, ATLAS_PROMPT_INJECTION),
    ),
    ComplianceRule(
        message_patterns=(
            re.compile(
                r"aws access key|github token|private key|jwt token|bearer token"
                r"|api key|hardcoded.*secret|hardcoded.*password|potential hardcoded"
                r"|credential",
                re.I,
            ),
        ),
        refs=(LLM02_DISCLOSURE,),
    ),
    ComplianceRule(
        message_patterns=(
            re.compile(r"curl-pipe-to-shell|wget-pipe-to-shell|remote code execution", re.I),
        ),
        refs=(LLM03_SUPPLY_CHAIN, ATLAS_SUPPLY_CHAIN),
    ),
    ComplianceRule(
        message_patterns=(re.compile(r"base64.*blob|obfuscat|encoded blob", re.I),),
        refs=(LLM04_POISONING, ATLAS_POISONING),
    ),
    ComplianceRule(
        message_patterns=(
            re.compile(
                r"rm -rf|file deletion|eval\(\)|command injection|exec.*interpreter"
                r"|path traversal|data exfiltration",
                re.I,
            ),
        ),
        refs=(LLM06_EXCESSIVE_AGENCY,),
    ),
    ComplianceRule(
        message_patterns=(re.compile(r"exfiltrat", re.I),),
        refs=(LLM02_DISCLOSURE, ATLAS_EXFILTRATION),
    ),
    # Every spec-validation finding maps to the specification itself.
    ComplianceRule(
        source_pattern=SPEC_SOURCE_PATTERN,
        refs=(SPEC_COMPLIANCE,),
    ),
    ComplianceRule(
        source_pattern=re.compile(r"portab|compat", re.I),
        refs=(SPEC_PORTABILITY,),
    ),
)
