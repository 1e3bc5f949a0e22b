"""Tests for collection discovery and on-disk pattern detection."""

from __future__ import annotations

from pathlib import Path

from tests.conftest import write_file
from writenex.infrastructure.discovery import detect_file_pattern, discover_collections


class TestDetectFilePattern:
    def test_date_prefixed(self, tmp_path: Path) -> None:
        write_file(tmp_path / "2024-01-15-hello.md")
        write_file(tmp_path / "2024-02-01-world.md")
        result = detect_file_pattern(tmp_path)
        assert result.pattern == "{date}-{slug}.md"
        assert result.confidence == 1.0
        assert result.match_count == 2
        assert result.samples[0].extracted["date"] == "2024-01-15"

    def test_empty_directory(self, tmp_path: Path) -> None:
        result = detect_file_pattern(tmp_path)
        assert result.pattern == "{slug}.md"
        assert result.confidence == 0
        assert result.total_files == 0

    def test_missing_directory(self, tmp_path: Path) -> None:
        assert detect_file_pattern(tmp_path / "nope").total_files == 0

    def test_ignores_non_content_files(self, tmp_path: Path) -> None:
        write_file(tmp_path / "a" / "index.md")
        write_file(tmp_path / "a" / "cover.png")
        write_file(tmp_path / "b" / "index.md")
        result = detect_file_pattern(tmp_path)
        assert result.pattern == "{slug}/index.md"
        assert result.total_files == 2


class TestDiscoverCollections:
    def test_lists_subdirectories_sorted(self, project_root: Path) -> None:
        collections = discover_collections(project_root)
        assert [c.name for c in collections] == ["blog", "docs"]
        blog, docs = collections
        assert blog.path == "src/content/blog"
        assert blog.file_pattern == "{date}-{slug}.md"
        assert blog.count == 2
        assert docs.file_pattern == "{slug}/index.md"
        assert docs.count == 2

    def test_skips_hidden_underscore_and_files(self, project_root: Path) -> None:
        content = project_root / "src" / "content"
        (content / ".cache").mkdir()
        (content / "_partials").mkdir()
        write_file(content / "config.ts")
        assert [c.name for c in discover_collections(project_root)] == ["blog", "docs"]

    def test_ignore_globs(self, project_root: Path) -> None:
        names = [c.name for c in discover_collections(project_root, ignore=["do*"])]
        assert names == ["blog"]
        names = [c.name for c in discover_collections(project_root, ignore=["src/content/blog"])]
        assert names == ["docs"]

    def test_custom_content_dir(self, tmp_path: Path) -> None:
        write_file(tmp_path / "content" / "notes" / "a.md")
        [notes] = discover_collections(tmp_path, "content")
        assert notes.path == "content/notes"

    def test_no_content_dir(self, tmp_path: Path) -> None:
        assert discover_collections(tmp_path) == []
