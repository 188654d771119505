"""Local discovery and parsing of SKILL.md files.

A skill is a directory whose entry file ``SKILL.md`` starts with YAML
frontmatter delimited by ``---`` lines, followed by a Markdown body::

    ---
    name: pdf-tools
    description: Extract text and tables from PDF files.
    ---
    # PDF Tools
    ...

Discovery Algorithm:
    1. A path naming a ``SKILL.md`` file is parsed directly.
    2. For a directory, each of ``STANDARD_SKILL_PATHS`` is probed.
    3. If none exists, the tree is searched recursively for ``SKILL.md``,
       skipping hidden directories and ``node_modules``.

During directory discovery a malformed skill is logged and skipped so
one broken file cannot hide the rest. Parsing a single file directly
raises ``DiscoveryError`` instead.
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path

import yaml

from skillinspector.core.models import Skill
from skillinspector.exceptions import DiscoveryError

logger = logging.getLogger(__name__)

SKILL_FILENAME = "SKILL.md"

STANDARD_SKILL_PATHS: tuple[str, ...] = (
    "SKILL.md",
    "skills/SKILL.md",
    "skills/.curated/SKILL.md",
    "skills/.experimental/SKILL.md",
    "skills/.system/SKILL.md",
    ".agents/skills/SKILL.md",
    ".agent/skills/SKILL.md",
    ".claude/skills/SKILL.md",
    ".cline/skills/SKILL.md",
    ".codex/skills/SKILL.md",
    ".cursor/skills/SKILL.md",
    ".gemini/skills/SKILL.md",
    ".github/skills/SKILL.md",
    ".goose/skills/SKILL.md",
)

_SKIPPED_DIRS = frozenset({"node_modules"})

# Match YAML frontmatter: ---\n...\n---
_FRONTMATTER_PATTERN = re.compile(r"\A---[ \t]*\r?\n(.*?)\r?\n---[ \t]*(?:\r?\n|\Z)", re.DOTALL)


def parse_skill_file(path: Path, search_root: Path | None = None) -> Skill:
    """Parse one SKILL.md file.

    Args:
        path: Path to the entry file.
        search_root: Directory discovery started from, recorded on the skill.

    Returns:
        The parsed ``Skill``.

    Raises:
        DiscoveryError: If the file is unreadable, the frontmatter is not a
            YAML mapping, or ``name``/``description`` is missing.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise DiscoveryError(f"Cannot read {path}: {exc}") from exc

    frontmatter, body = split_frontmatter(raw, source=path)
    name = frontmatter.get("name")
    description = frontmatter.get("description")
    if not name or not description:
        raise DiscoveryError(
            f"Invalid frontmatter in {path}: name and description are required"
        )

    return Skill(
        name=str(name),
        description=str(description),
        frontmatter=frontmatter,
        body=body,
        path=path,
        search_root=search_root,
    )


def split_frontmatter(raw: str, source: Path | str = "<string>") -> tuple[dict, str]:
    """Split raw SKILL.md text into ``(frontmatter, body)``.

    A document without frontmatter yields an empty mapping and the whole
    text as body.

    Raises:
        DiscoveryError: If the frontmatter is not valid YAML or not a mapping.
    """
    match = _FRONTMATTER_PATTERN.match(raw)
    if not match:
        return {}, raw
    try:
        data = yaml.safe_load(match.group(1))
    except yaml.YAMLError as exc:
        raise DiscoveryError(f"Malformed YAML frontmatter in {source}: {exc}") from exc
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise DiscoveryError(f"Frontmatter in {source} must be a mapping")
    return data, raw[match.end():]


def discover_skills(path: Path | str) -> list[Skill]:
    """Find and parse every skill at or beneath ``path``.

    Args:
        path: A ``SKILL.md`` file or a directory to search.

    Returns:
        Parsed skills, standard locations first. Empty if none found.

    Raises:
        DiscoveryError: If ``path`` does not exist, or names a single file
            that cannot be parsed.
    """
    target = Path(path)
    if not target.exists():
        raise DiscoveryError(f"Path does not exist: {target}")

    if target.is_file():
        if target.name != SKILL_FILENAME:
            raise DiscoveryError(f"Not a {SKILL_FILENAME} file: {target}")
        return [parse_skill_file(target)]

    skills = _parse_all(
        [target / rel for rel in STANDARD_SKILL_PATHS if (target / rel).is_file()],
        target,
    )
    if not skills:
        skills = _parse_all(find_skill_files(target), target)
    return skills


def find_skill_files(root: Path) -> list[Path]:
    """Recursively list SKILL.md files, skipping hidden dirs and node_modules."""
    found: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(
            d for d in dirnames if not d.startswith(".") and d not in _SKIPPED_DIRS
        )
        if SKILL_FILENAME in filenames:
            found.append(Path(dirpath) / SKILL_FILENAME)
    return found


def _parse_all(paths: list[Path], root: Path) -> list[Skill]:
    skills: list[Skill] = []
    for skill_path in paths:
        try:
            skills.append(parse_skill_file(skill_path, search_root=root))
        except DiscoveryError as exc:
            logger.warning("Skipping skill: %s", exc)
    return skills
