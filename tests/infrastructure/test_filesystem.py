"""Tests for content filesystem operations."""

from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest

from tests.conftest import post, write_file
from writenex.domain.content import parse_frontmatter
from writenex.infrastructure import filesystem
from writenex.infrastructure.filesystem import (
    content_exists,
    count_content_files,
    create_content,
    delete_content,
    ensure_within,
    extract_slug,
    find_content_file,
    generate_unique_slug,
    list_content_files,
    read_collection,
    read_content_file,
    relative_content_paths,
    update_content,
)


@pytest.fixture
def blog(tmp_path: Path) -> Path:
    root = tmp_path / "blog"
    root.mkdir()
    return root


class TestListing:
    def test_lists_md_and_mdx_recursively(self, blog: Path) -> None:
        write_file(blog / "a.md")
        write_file(blog / "b.mdx")
        write_file(blog / "2024" / "c.md")
        write_file(blog / "notes.txt")
        assert relative_content_paths(blog) == ["2024/c.md", "a.md", "b.mdx"]

    def test_skips_hidden_and_underscore_dirs(self, blog: Path) -> None:
        write_file(blog / "a.md")
        write_file(blog / ".obsidian" / "x.md")
        write_file(blog / "_drafts" / "y.md")
        assert relative_content_paths(blog) == ["a.md"]

    def test_missing_directory(self, tmp_path: Path) -> None:
        assert list_content_files(tmp_path / "nope") == []
        assert count_content_files(tmp_path / "nope") == 0


class TestExtractSlug:
    @pytest.mark.parametrize(
        ("relative", "expected"),
        [
            ("my-post.md", "my-post"),
            ("2024-01-15-my-post.md", "2024-01-15-my-post"),
            ("my-post/index.md", "my-post"),
            ("en/my-post/index.mdx", "my-post"),
            ("2024/06/my-post.md", "my-post"),
        ],
    )
    def test_examples(self, blog: Path, relative: str, expected: str) -> None:
        assert extract_slug(blog / relative, blog) == expected


class TestFindContentFile:
    def test_flat(self, blog: Path) -> None:
        path = write_file(blog / "hello.md")
        assert find_content_file(blog, "hello") == path

    def test_folder_index(self, blog: Path) -> None:
        path = write_file(blog / "hello" / "index.mdx")
        assert find_content_file(blog, "hello") == path

    def test_nested_fallback(self, blog: Path) -> None:
        path = write_file(blog / "2024" / "06" / "hello.md")
        assert find_content_file(blog, "hello") == path

    def test_missing(self, blog: Path) -> None:
        assert find_content_file(blog, "nope") is None

    def test_traversal_rejected(self, tmp_path: Path, blog: Path) -> None:
        write_file(tmp_path / "secret.md")
        assert find_content_file(blog, "../secret") is None

    def test_ensure_within(self, blog: Path) -> None:
        assert ensure_within(blog, blog / "a.md") == blog / "a.md"
        with pytest.raises(ValueError):
            ensure_within(blog, blog / ".." / "a.md")


class TestReading:
    def test_read_content_file(self, blog: Path) -> None:
        path = write_file(blog / "hello.md", post("Hello", body="Hi there."))
        item = read_content_file(path, blog)
        assert item.id == "hello"
        assert item.path == str(path)
        assert item.frontmatter == {"title": "Hello"}
        assert item.body == "Hi there."
        assert item.raw == path.read_text()

    def test_read_collection_skips_broken_files(self, blog: Path) -> None:
        write_file(blog / "good.md", post("Good"))
        write_file(blog / "bad.md", "---\ntitle: [oops\n---\n")
        assert [i.id for i in read_collection(blog)] == ["good"]

    def test_read_collection_filters_drafts(self, blog: Path) -> None:
        write_file(blog / "a.md", post("A", draft="true"))
        write_file(blog / "b.md", post("B"))
        assert [i.id for i in read_collection(blog, include_drafts=False)] == ["b"]

    def test_sorting_puts_missing_values_last_when_descending(self, blog: Path) -> None:
        write_file(blog / "old.md", post("Old", pubDate="2023-01-01"))
        write_file(blog / "new.md", post("New", pubDate="2024-01-01"))
        write_file(blog / "undated.md", post("Undated"))
        desc = read_collection(blog, sort_by="pubDate", order="desc")
        assert [i.id for i in desc] == ["new", "old", "undated"]
        asc = read_collection(blog, sort_by="pubDate", order="asc")
        assert [i.id for i in asc] == ["undated", "old", "new"]


class TestUniqueSlug:
    def test_free_slug_returned_unchanged(self, blog: Path) -> None:
        assert generate_unique_slug("hello", blog) == "hello"

    def test_suffix_starts_at_two(self, blog: Path) -> None:
        write_file(blog / "hello.md")
        write_file(blog / "hello-2.md")
        assert generate_unique_slug("hello", blog) == "hello-3"

    def test_folder_pattern_checks_directory(self, blog: Path) -> None:
        (blog / "hello").mkdir()
        assert content_exists("hello", blog, "{slug}/index.md")
        assert generate_unique_slug("hello", blog, "{slug}/index.md") == "hello-2"

    def test_uses_resolved_tokens(self, blog: Path) -> None:
        write_file(blog / "2024" / "hello.md")
        assert generate_unique_slug("hello", blog, "{year}/{slug}.md", tokens={"year": "2024"}) == (
            "hello-2"
        )
        assert generate_unique_slug("hello", blog, "{year}/{slug}.md", tokens={"year": "2025"}) == (
            "hello"
        )

    def test_empty_token_checks_inside_collection(self, blog: Path) -> None:
        tokens = {"collection": ""}
        assert not content_exists("elsewhere", blog, "{collection}/{slug}/index.md", tokens=tokens)
        (blog / "elsewhere").mkdir()
        assert content_exists("elsewhere", blog, "{collection}/{slug}/index.md", tokens=tokens)


class TestCreateContent:
    def test_collision_gets_suffix(self, blog: Path) -> None:
        write_file(blog / "my-first-post.md", post("Existing"))
        created = create_content(blog, frontmatter={"title": "My First Post!"}, body="Hi")
        assert created.id == "my-first-post-2"
        assert created.path == blog / "my-first-post-2.md"
        fm, body = parse_frontmatter(created.path.read_text())
        assert fm == {"title": "My First Post!"}
        assert body == "Hi"

    def test_nested_pattern_creates_directories(self, blog: Path) -> None:
        created = create_content(
            blog,
            frontmatter={"title": "Hi", "pubDate": date(2024, 6, 5)},
            file_pattern="{year}/{month}/{slug}.md",
        )
        assert created.path == blog / "2024" / "06" / "hi.md"

    def test_empty_leading_token_stays_in_collection(self, blog: Path) -> None:
        created = create_content(
            blog, frontmatter={"title": "Hello"}, file_pattern="{series}/{slug}.md"
        )
        assert created.path == blog / "hello.md"
        assert created.path.is_file()

    def test_empty_middle_token_collapses(self, blog: Path) -> None:
        created = create_content(
            blog,
            frontmatter={"title": "Hello", "pubDate": date(2024, 6, 5)},
            file_pattern="{year}/{series}/{slug}.md",
        )
        assert created.path == blog / "2024" / "hello.md"

    def test_folder_pattern(self, blog: Path) -> None:
        created = create_content(blog, frontmatter={"title": "Hi"}, file_pattern="{slug}/index.md")
        assert created.path == blog / "hi" / "index.md"
        assert created.id == "hi"

    def test_untitled_default(self, blog: Path) -> None:
        assert create_content(blog, frontmatter={}).id == "untitled"

    def test_explicit_slug(self, blog: Path) -> None:
        created = create_content(blog, frontmatter={"title": "Ignored"}, slug="chosen")
        assert created.path == blog / "chosen.md"

    def test_invalid_pattern(self, blog: Path) -> None:
        with pytest.raises(ValueError, match="Invalid file pattern"):
            create_content(blog, frontmatter={"title": "x"}, file_pattern="{title}.md")

    def test_escape_rejected(self, blog: Path) -> None:
        with pytest.raises(ValueError, match="escapes"):
            create_content(blog, frontmatter={}, slug="../outside")

    def test_lost_race_retries(self, blog: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """A file appearing between the uniqueness check and the write is not overwritten."""
        real_create = filesystem.create_content_file
        calls: list[Path] = []

        def racing_create(path: Path, frontmatter: object, body: str) -> None:
            calls.append(path)
            if len(calls) == 1:
                write_file(path, "someone else")
            real_create(path, frontmatter, body)  # type: ignore[arg-type]

        monkeypatch.setattr(filesystem, "create_content_file", racing_create)
        created = create_content(blog, frontmatter={"title": "Race"})
        assert created.id == "race-2"
        assert (blog / "race.md").read_text() == "someone else"


class TestUpdateAndDelete:
    def test_update_preserves_other_fields(self, blog: Path) -> None:
        path = write_file(
            blog / "p.md", post("P", draft="true", pubDate="2024-01-01", body="Keep me.")
        )
        item = update_content(path, blog, frontmatter={"draft": False})
        assert item.frontmatter == {"title": "P", "draft": False, "pubDate": date(2024, 1, 1)}
        assert item.body == "Keep me."

    def test_update_body_and_add_key(self, blog: Path) -> None:
        path = write_file(blog / "p.md", post("P"))
        item = update_content(path, blog, frontmatter={"tags": ["x"]}, body="New body")
        assert item.frontmatter == {"title": "P", "tags": ["x"]}
        assert item.body == "New body"
        assert path.exists()

    def test_delete(self, blog: Path) -> None:
        path = write_file(blog / "p.md")
        delete_content(path)
        assert not path.exists()

    def test_delete_missing(self, blog: Path) -> None:
        with pytest.raises(FileNotFoundError):
            delete_content(blog / "nope.md")
