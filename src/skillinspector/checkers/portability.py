"""Cross-agent and cross-platform portability checks.

A skill written for one agent or one operating system often relies on
constructs other hosts do not understand: vendor-specific prompt tags,
pinned vendor model identifiers, absolute paths from the author's machine,
or OS-only tooling. These are not security issues, but they make the skill
silently misbehave elsewhere.

The checks reuse the pattern scanner with a dedicated rule catalog, so the
same first-match-only discipline applies.
"""

from __future__ import annotations

import re

from skillinspector.checkers.base import BlockingChecker
from skillinspector.core.models import Finding, Severity, Skill
from skillinspector.core.patterns import PatternRule, scan

# Tool names that only one agent host understands.
VENDOR_TOOL_NAMES: frozenset[str] = frozenset({
    "Bash", "Read", "Write", "Edit", "MultiEdit", "Glob", "Grep",
    "WebFetch", "WebSearch", "NotebookEdit", "TodoWrite", "Task",
})

PORTABILITY_RULES: tuple[PatternRule, ...] = (
    PatternRule(
        id="vendor-prompt-tags",
        pattern=re.compile(
            r"</?(?:thinking|antThinking|antArtifact|search_quality_reflection"
            r"|scratchpad|reflection)\b",
        ),
        severity=Severity.MEDIUM,
        message="Vendor-specific prompt tags detected; other agents will not interpret them",
        fix="Describe the intended behavior in plain Markdown instead of vendor tags.",
    ),
    PatternRule(
        id="vendor-model-id",
        pattern=re.compile(
            r"\b(?:claude-(?:\d|opus|sonnet|haiku|instant)[\w.-]*"
            r"|gpt-(?:3\.5|4|5)[\w.-]*|gemini-\d[\w.-]*|o[134]-(?:preview|mini)\b)",
            re.IGNORECASE,
        ),
        severity=Severity.LOW,
        message="Hard-coded vendor model identifier detected",
        fix="Avoid pinning a model; let the host agent choose.",
    ),
    PatternRule(
        id="absolute-home-path",
        pattern=re.compile(r"(?:/Users/[\w.-]+/|/home/[a-z_][\w-]*/|\b[A-Za-z]:\\Users\\)"),
        severity=Severity.MEDIUM,
        message="Absolute user home path detected; the skill will not resolve it on other machines",
        fix="Use paths relative to the skill directory.",
    ),
    PatternRule(
        id="windows-only-shell",
        pattern=re.compile(r"\b(?:powershell(?:\.exe)?|pwsh|cmd(?:\.exe)?\s+/c)\b", re.IGNORECASE),
        severity=Severity.LOW,
        message="Windows-only shell invocation detected",
        fix="Provide a POSIX alternative or a cross-platform script.",
    ),
    PatternRule(
        id="macos-only-tool",
        pattern=re.compile(r"\b(?:osascript|pbcopy|pbpaste|defaults\s+write|open\s+-a)\b"),
        severity=Severity.LOW,
        message="macOS-only tooling detected",
        fix="Guard platform-specific commands or provide alternatives.",
    ),
)


class PortabilityChecker(BlockingChecker):
    """Flag agent-specific and platform-specific constructs."""

    name = "PortabilityChecker"

    def check(self, skill: Skill) -> list[Finding]:
        findings = scan(
            skill.body,
            skill.path.name or "SKILL.md",
            rules=PORTABILITY_RULES,
            source_name=self.name,
        )
        frontmatter = skill.frontmatter if isinstance(skill.frontmatter, dict) else {}
        vendor_tools = _vendor_tools(frontmatter.get("allowed-tools"))
        if vendor_tools:
            findings.append(Finding(
                severity=Severity.LOW,
                message=(
                    "allowed-tools names agent-specific tools: "
                    + ", ".join(vendor_tools)
                ),
                source_name=self.name,
                fix="Document equivalent capabilities for other agents.",
                rule_id="vendor-tool-names",
            ))
        return findings


def _vendor_tools(value: object) -> list[str]:
    """Return sorted vendor tool names referenced by ``allowed-tools``."""
    if isinstance(value, str):
        tokens = value.split()
    elif isinstance(value, list):
        tokens = [t for t in value if isinstance(t, str)]
    else:
        return []
    # Entries may carry argument filters, e.g. "Bash(git:*)".
    names = {token.split("(", 1)[0].strip() for token in tokens}
    return sorted(names & VENDOR_TOOL_NAMES)
