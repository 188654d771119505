"""Deterministic SKILL.md frontmatter validation.

Checks a discovered ``Skill`` against the Agent Skills frontmatter schema:

1. **Schema conformance** -- required fields, types, length bounds and the
   naming pattern for ``name``. Every violation is CRITICAL.
2. **Name / directory agreement** -- when the entry file is ``SKILL.md``
   and its directory is not the discovery root, the declared name must
   equal the directory name. CRITICAL.
3. **Unauthorized fields** -- every frontmatter key outside the allow-list
   is reported once, at MEDIUM.

The validator never raises: unexpected input shapes degrade to findings.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from skillinspector.core.models import Finding, Severity, Skill

SOURCE_NAME = "SpecValidator"

CANONICAL_ENTRY_FILE = "SKILL.md"

NAME_MAX_LENGTH = 64
DESCRIPTION_MAX_LENGTH = 1024
COMPATIBILITY_MAX_LENGTH = 500

_NAME_PATTERN = re.compile(r"^[a-z0-9-]+$")

ALLOWED_FIELDS: frozenset[str] = frozenset({
    "name",
    "description",
    "license",
    "compatibility",
    "metadata",
    "allowed-tools",
})


def validate(skill: Skill) -> list[Finding]:
    """Validate a skill's frontmatter and layout.

    Args:
        skill: The discovered skill.

    Returns:
        Findings for every violation, schema errors first, then the
        directory check, then unauthorized fields in frontmatter order.
    """
    frontmatter = skill.frontmatter
    if not isinstance(frontmatter, Mapping):
        return [_critical("Frontmatter error: frontmatter must be a mapping of fields")]

    findings: list[Finding] = []
    for field_name, problem in _schema_issues(frontmatter):
        findings.append(_critical(f"Frontmatter error in '{field_name}': {problem}"))

    mismatch = _directory_mismatch(skill)
    if mismatch is not None:
        findings.append(_critical(mismatch))

    for key in frontmatter:
        if key not in ALLOWED_FIELDS:
            findings.append(Finding(
                severity=Severity.MEDIUM,
                message=f"Unauthorized frontmatter field: '{key}'",
                source_name=SOURCE_NAME,
                fix=f"Remove '{key}' or move it under 'metadata'.",
            ))
    return findings


# -- Schema --------------------------------------------------------------------


def _schema_issues(fm: Mapping[str, Any]) -> list[tuple[str, str]]:
    """Return ``(field, problem)`` pairs for every schema violation."""
    issues: list[tuple[str, str]] = []

    name = fm.get("name")
    if name is None:
        issues.append(("name", "Required"))
    elif not isinstance(name, str):
        issues.append(("name", "Expected string"))
    else:
        issues.extend(("name", p) for p in _name_problems(name))

    description = fm.get("description")
    if description is None:
        issues.append(("description", "Required"))
    elif not isinstance(description, str):
        issues.append(("description", "Expected string"))
    elif not description.strip():
        issues.append(("description", "Must not be empty"))
    elif len(description) > DESCRIPTION_MAX_LENGTH:
        issues.append((
            "description",
            f"Must be at most {DESCRIPTION_MAX_LENGTH} characters",
        ))

    if "license" in fm and not isinstance(fm["license"], str):
        issues.append(("license", "Expected string"))

    if "compatibility" in fm:
        compat = fm["compatibility"]
        if not isinstance(compat, str):
            issues.append(("compatibility", "Expected string"))
        elif len(compat) > COMPATIBILITY_MAX_LENGTH:
            issues.append((
                "compatibility",
                f"Must be at most {COMPATIBILITY_MAX_LENGTH} characters",
            ))

    if "metadata" in fm and not isinstance(fm["metadata"], Mapping):
        issues.append(("metadata", "Expected mapping"))

    if "allowed-tools" in fm and not _is_tool_list(fm["allowed-tools"]):
        issues.append((
            "allowed-tools",
            "Expected a space-delimited string or a list of strings",
        ))

    return issues


def _name_problems(name: str) -> list[str]:
    problems: list[str] = []
    if not name:
        problems.append("Must not be empty")
        return problems
    if len(name) > NAME_MAX_LENGTH:
        problems.append(f"Must be at most {NAME_MAX_LENGTH} characters")
    if not _NAME_PATTERN.match(name):
        problems.append("Name must be lowercase letters, numbers, and hyphens only")
    if name.startswith("-") or name.endswith("-"):
        problems.append("Name must not start or end with a hyphen")
    if "--" in name:
        problems.append("Name must not contain consecutive hyphens")
    return problems


def _is_tool_list(value: Any) -> bool:
    if isinstance(value, str):
        return True
    return isinstance(value, list) and all(isinstance(v, str) for v in value)


# -- Layout --------------------------------------------------------------------


def _directory_mismatch(skill: Skill) -> str | None:
    """Compare the declared name with the containing directory.

    Skipped entirely unless the path is a canonical ``SKILL.md`` entry
    whose directory is a real, non-root skill directory.
    """
    path = skill.path
    if path.name != CANONICAL_ENTRY_FILE:
        return None

    directory = path.parent
    dir_name = directory.name
    if dir_name in ("", ".", ".."):
        return None
    if skill.search_root is not None and _same_path(directory, skill.search_root):
        return None

    declared = skill.frontmatter.get("name", skill.name)
    if not isinstance(declared, str) or declared == dir_name:
        return None
    return f"Skill name '{declared}' does not match directory name '{dir_name}'"


def _same_path(a: Path, b: Path) -> bool:
    try:
        return a.resolve() == b.resolve()
    except (OSError, RuntimeError):
        return a == b


def _critical(message: str) -> Finding:
    return Finding(
        severity=Severity.CRITICAL,
        message=message,
        source_name=SOURCE_NAME,
    )
