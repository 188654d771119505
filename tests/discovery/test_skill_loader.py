"""Tests for local SKILL.md discovery and parsing."""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

import pytest

from skillinspector.discovery import (
    STANDARD_SKILL_PATHS,
    discover_skills,
    find_skill_files,
    parse_skill_file,
    split_frontmatter,
)
from skillinspector.exceptions import DiscoveryError

from tests.helpers import skill_markdown


class TestSplitFrontmatter:
    def test_splits_mapping_and_body(self) -> None:
        fm, body = split_frontmatter("---\nname: a\ndescription: b\n---\n# Title\n")
        assert fm == {"name": "a", "description": "b"}
        assert body == "# Title\n"

    def test_crlf_line_endings(self) -> None:
        fm, body = split_frontmatter("---\r\nname: a\r\n---\r\nbody")
        assert fm == {"name": "a"}
        assert body == "body"

    def test_no_frontmatter(self) -> None:
        assert split_frontmatter("# Just markdown\n") == ({}, "# Just markdown\n")

    def test_empty_frontmatter(self) -> None:
        assert split_frontmatter("---\n\n---\nbody") == ({}, "body")

    def test_malformed_yaml(self) -> None:
        with pytest.raises(DiscoveryError, match="Malformed YAML"):
            split_frontmatter("---\nname: [unclosed\n---\nbody")

    def test_non_mapping_yaml(self) -> None:
        with pytest.raises(DiscoveryError, match="must be a mapping"):
            split_frontmatter("---\n- a\n- b\n---\nbody")


class TestParseSkillFile:
    def test_parses_fields(self, make_skill_dir: Callable[..., Path]) -> None:
        skill_dir = make_skill_dir(extra="license: MIT\n")
        skill = parse_skill_file(skill_dir / "SKILL.md")
        assert skill.name == "pdf-tools"
        assert skill.description == "Extract text and tables from PDF files."
        assert skill.frontmatter["license"] == "MIT"
        assert skill.body.startswith("# PDF Tools")
        assert skill.path == skill_dir / "SKILL.md"
        assert skill.directory == skill_dir

    def test_missing_description(self, tmp_path: Path) -> None:
        path = tmp_path / "SKILL.md"
        path.write_text("---\nname: a\n---\nbody\n", encoding="utf-8")
        with pytest.raises(DiscoveryError, match="name and description are required"):
            parse_skill_file(path)

    def test_unreadable_file(self, tmp_path: Path) -> None:
        with pytest.raises(DiscoveryError, match="Cannot read"):
            parse_skill_file(tmp_path / "missing" / "SKILL.md")


class TestDiscoverSkills:
    def test_root_skill_file(self, tmp_path: Path) -> None:
        (tmp_path / "SKILL.md").write_text(skill_markdown(), encoding="utf-8")
        [skill] = discover_skills(tmp_path)
        assert skill.name == "pdf-tools"
        assert skill.search_root == tmp_path

    def test_standard_agent_path(self, tmp_path: Path) -> None:
        target = tmp_path / ".claude" / "skills"
        target.mkdir(parents=True)
        (target / "SKILL.md").write_text(skill_markdown(name="helper"), encoding="utf-8")
        assert [s.name for s in discover_skills(tmp_path)] == ["helper"]

    def test_standard_paths_include_common_agents(self) -> None:
        assert STANDARD_SKILL_PATHS[0] == "SKILL.md"
        assert ".claude/skills/SKILL.md" in STANDARD_SKILL_PATHS
        assert ".codex/skills/SKILL.md" in STANDARD_SKILL_PATHS

    def test_recursive_fallback(self, make_skill_dir: Callable[..., Path], tmp_path: Path) -> None:
        make_skill_dir(name="pdf-tools")
        make_skill_dir(name="csv-tools", dirname="nested/csv-tools")
        make_skill_dir(name="hidden", dirname=".cache/hidden")
        make_skill_dir(name="vendored", dirname="node_modules/vendored")
        names = sorted(s.name for s in discover_skills(tmp_path))
        assert names == ["csv-tools", "pdf-tools"]

    def test_single_file_source(self, make_skill_dir: Callable[..., Path]) -> None:
        skill_dir = make_skill_dir()
        [skill] = discover_skills(skill_dir / "SKILL.md")
        assert skill.search_root is None

    def test_malformed_skill_skipped_with_warning(
        self,
        make_skill_dir: Callable[..., Path],
        tmp_path: Path,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        make_skill_dir(name="good")
        broken = tmp_path / "broken"
        broken.mkdir()
        (broken / "SKILL.md").write_text("---\nname: [oops\n---\n", encoding="utf-8")
        with caplog.at_level(logging.WARNING, logger="skillinspector"):
            skills = discover_skills(tmp_path)
        assert [s.name for s in skills] == ["good"]
        assert any("Skipping skill" in r.getMessage() for r in caplog.records)

    def test_empty_directory(self, tmp_path: Path) -> None:
        assert discover_skills(tmp_path) == []

    def test_missing_path(self, tmp_path: Path) -> None:
        with pytest.raises(DiscoveryError, match="does not exist"):
            discover_skills(tmp_path / "nope")

    def test_non_skill_file(self, tmp_path: Path) -> None:
        readme = tmp_path / "README.md"
        readme.write_text("# hi\n", encoding="utf-8")
        with pytest.raises(DiscoveryError, match="Not a SKILL.md"):
            discover_skills(readme)

    def test_find_skill_files_sorted(self, make_skill_dir: Callable[..., Path], tmp_path: Path) -> None:
        make_skill_dir(name="b-skill")
        make_skill_dir(name="a-skill")
        found = find_skill_files(tmp_path)
        assert [p.parent.name for p in found] == ["a-skill", "b-skill"]
