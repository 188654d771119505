"""Local skill discovery: locate SKILL.md files and parse their frontmatter."""

from skillinspector.discovery.loader import (
    SKILL_FILENAME,
    STANDARD_SKILL_PATHS,
    discover_skills,
    find_skill_files,
    parse_skill_file,
    split_frontmatter,
)

__all__ = [
    "SKILL_FILENAME",
    "STANDARD_SKILL_PATHS",
    "discover_skills",
    "find_skill_files",
    "parse_skill_file",
    "split_frontmatter",
]
