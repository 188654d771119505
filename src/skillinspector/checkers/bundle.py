"""Pattern scanning of the files bundled alongside SKILL.md.

Skills may ship scripts, references and assets next to their entry file.
Those files execute (or are read by the agent) with the same authority as
the skill itself, so they get the same pattern catalog as the body. Each
rule still reports only its first match, now across the whole bundle, so
a secret copied into ten scripts yields one finding.
"""

from __future__ import annotations

import logging
from pathlib import Path

from skillinspector.checkers.base import BlockingChecker
from skillinspector.core.models import Finding, Skill
from skillinspector.core.patterns import scan

logger = logging.getLogger(__name__)

MAX_FILE_BYTES = 1024 * 1024

_SKIPPED_DIRS = frozenset({"node_modules", "__pycache__"})


class BundleScanner(BlockingChecker):
    """Scan every bundled text file with the pattern catalog.

    Hidden files and directories, ``node_modules``, files over
    ``MAX_FILE_BYTES`` and files that are not UTF-8 text are skipped.
    The entry file itself is skipped (the engine scans its body).
    """

    name = "BundleScanner"

    def __init__(self, max_file_bytes: int = MAX_FILE_BYTES) -> None:
        self._max_file_bytes = max_file_bytes

    def check(self, skill: Skill) -> list[Finding]:
        root = skill.directory
        if not root.is_dir():
            return []

        findings: list[Finding] = []
        reported: set[str] = set()
        for path in self._bundle_files(root, skill.path):
            content = self._read(path)
            if content is None:
                continue
            label = path.relative_to(root).as_posix()
            for finding in scan(content, label, source_name=self.name):
                if finding.rule_id in reported:
                    continue
                reported.add(finding.rule_id)
                findings.append(finding)
        return findings

    def _bundle_files(self, root: Path, entry: Path) -> list[Path]:
        files: list[Path] = []
        for path in sorted(root.rglob("*")):
            rel_parts = path.relative_to(root).parts
            if any(p.startswith(".") or p in _SKIPPED_DIRS for p in rel_parts):
                continue
            if not path.is_file() or path == entry:
                continue
            files.append(path)
        return files

    def _read(self, path: Path) -> str | None:
        try:
            if path.stat().st_size > self._max_file_bytes:
                logger.debug("Skipping oversized bundle file: %s", path)
                return None
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            logger.debug("Skipping unreadable bundle file: %s", path)
            return None
