"""Shared fixtures for skill-inspector tests."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from tests.helpers import CLEAN_BODY, skill_markdown


@pytest.fixture
def make_skill_dir(tmp_path: Path) -> Callable[..., Path]:
    """Return a factory creating ``tmp_path/<dirname>/SKILL.md``.

    The directory name defaults to the skill name, so the validator's
    name/directory check passes unless a test overrides it.
    """

    def _make(
        name: str = "pdf-tools",
        body: str = CLEAN_BODY,
        extra: str = "",
        dirname: str | None = None,
        files: dict[str, str | bytes] | None = None,
    ) -> Path:
        skill_dir = tmp_path / (dirname or name)
        skill_dir.mkdir(parents=True, exist_ok=True)
        (skill_dir / "SKILL.md").write_text(
            skill_markdown(name=name, body=body, extra=extra), encoding="utf-8",
        )
        for rel, content in (files or {}).items():
            target = skill_dir / rel
            target.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                target.write_bytes(content)
            else:
                target.write_text(content, encoding="utf-8")
        return skill_dir

    return _make
