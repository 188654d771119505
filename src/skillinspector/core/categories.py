"""Finding categories and source-name classification.

Every finding belongs to exactly one ``Category``, inferred from its
``source_name``. Each category caps the number of points its findings can
deduct from the score, so a flood of low-value findings in one area
cannot drown out every other signal.

Default categories:

============  ===  ===================================================
Category      Cap  Sources
============  ===  ===================================================
security       60  PatternScanner, BundleScanner, Security* checkers
spec           30  SpecValidator, Spec* checkers
portability    20  PortabilityChecker, Compat* checkers
============  ===  ===================================================

Unrecognized source names fall back to ``security``.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, replace

SECURITY = "security"
SPEC = "spec"
PORTABILITY = "portability"

FALLBACK_CATEGORY = SECURITY

# "spec" as a name segment only: SpecValidator, LLMSpecAgent, spec-lint, SPEC_LINT.
# Never the inside of a word such as "Inspector".
SPEC_SOURCE_PATTERN = re.compile(r"Spec|(?:^|[^A-Za-z])(?:spec|SPEC)")


@dataclass(frozen=True)
class Category:
    """A named bucket of sources sharing one maximum deduction.

    Attributes:
        id: Stable identifier used in score breakdowns.
        label: Human-readable title.
        cap: Maximum points this category may deduct. Non-negative.
        source_pattern: Regex matched (searched) against source names.
    """

    id: str
    label: str
    cap: int
    source_pattern: re.Pattern[str]

    def claims(self, source_name: str) -> bool:
        """Return True if ``source_name`` belongs to this category."""
        return bool(self.source_pattern.search(source_name))


DEFAULT_CATEGORIES: tuple[Category, ...] = (
    Category(
        id=SPEC,
        label="Specification",
        cap=30,
        source_pattern=SPEC_SOURCE_PATTERN,
    ),
    Category(
        id=PORTABILITY,
        label="Portability",
        cap=20,
        source_pattern=re.compile(r"portab|compat", re.I),
    ),
    Category(
        id=SECURITY,
        label="Security",
        cap=60,
        source_pattern=re.compile(r"security|pattern|bundle|secret", re.I),
    ),
)


def classify(
    source_name: str,
    categories: tuple[Category, ...] = DEFAULT_CATEGORIES,
) -> str:
    """Map a source name to a category id.

    The first category (in tuple order) whose pattern matches wins. Never
    raises: anything unmatched, including empty or non-string names, maps
    to ``FALLBACK_CATEGORY``.
    """
    if isinstance(source_name, str):
        for category in categories:
            if category.claims(source_name):
                return category.id
    return FALLBACK_CATEGORY


def is_recognized(
    source_name: str,
    categories: tuple[Category, ...] = DEFAULT_CATEGORIES,
) -> bool:
    """Return True if some category explicitly claims ``source_name``."""
    return isinstance(source_name, str) and any(
        c.claims(source_name) for c in categories
    )


def with_caps(
    overrides: Mapping[str, int],
    categories: tuple[Category, ...] = DEFAULT_CATEGORIES,
) -> tuple[Category, ...]:
    """Return a copy of ``categories`` with caps replaced per ``overrides``.

    Raises:
        ValueError: If an override names an unknown category or is negative.
    """
    known = {c.id for c in categories}
    unknown = sorted(set(overrides) - known)
    if unknown:
        raise ValueError(f"Unknown categories in cap overrides: {', '.join(unknown)}")

    result: list[Category] = []
    for category in categories:
        cap = overrides.get(category.id, category.cap)
        if isinstance(cap, bool) or not isinstance(cap, int) or cap < 0:
            raise ValueError(
                f"Cap for '{category.id}' must be a non-negative integer, got {cap!r}"
            )
        result.append(replace(category, cap=cap))
    return tuple(result)
