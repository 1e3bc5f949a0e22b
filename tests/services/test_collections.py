"""Tests for CollectionService: listing, lookup and pattern detection."""

from __future__ import annotations

from pathlib import Path

from tests.conftest import FakeClock, post, write_file
from writenex.config.models import CollectionConfig, DiscoveryConfig
from writenex.config.settings import WritenexSettings
from writenex.infrastructure.cache import ServerCache
from writenex.infrastructure.workspace import Workspace
from writenex.services.collections import CollectionService


def _service(project_root: Path, clock: FakeClock, **overrides: object) -> CollectionService:
    settings = WritenexSettings(project_root=project_root, **overrides)
    return CollectionService(Workspace(settings, cache=ServerCache(clock=clock)))


class TestListCollections:
    def test_discovers_both(self, workspace: Workspace) -> None:
        result = CollectionService(workspace).list_collections()
        assert result.ok
        assert result.op == "list_collections"
        assert result.data["count"] == 2

        by_name = {c["name"]: c for c in result.data["collections"]}
        assert by_name["blog"]["file_pattern"] == "{date}-{slug}.md"
        assert by_name["blog"]["count"] == 2
        assert by_name["docs"]["file_pattern"] == "{slug}/index.md"
        assert by_name["docs"]["path"] == "src/content/docs"

    def test_second_call_is_cached(self, workspace: Workspace) -> None:
        service = CollectionService(workspace)
        assert service.list_collections().meta == {"cached": False}
        assert service.list_collections().meta == {"cached": True}

    def test_expires_after_ttl(self, workspace: Workspace, clock: FakeClock) -> None:
        service = CollectionService(workspace)
        service.list_collections()
        clock.advance(31)
        assert service.list_collections().meta == {"cached": False}

    def test_configured_overrides_discovered(self, project_root: Path, clock: FakeClock) -> None:
        service = _service(
            project_root,
            clock,
            collections=[
                CollectionConfig(
                    name="blog",
                    path="src/content/blog",
                    file_pattern="{year}/{slug}.md",
                    preview_url="https://example.com/blog/{slug}",
                )
            ],
        )
        collections = service.list_collections().data["collections"]
        blog = next(c for c in collections if c["name"] == "blog")
        assert blog["file_pattern"] == "{year}/{slug}.md"
        assert blog["preview_url"] == "https://example.com/blog/{slug}"
        assert blog["count"] == 2

    def test_configured_only_collection_appended(
        self, project_root: Path, clock: FakeClock
    ) -> None:
        service = _service(
            project_root,
            clock,
            collections=[CollectionConfig(name="notes", path="src/content/notes")],
        )
        names = [c["name"] for c in service.list_collections().data["collections"]]
        assert names == ["blog", "docs", "notes"]

    def test_schema_serialized_under_alias(self, project_root: Path, clock: FakeClock) -> None:
        config = CollectionConfig.model_validate(
            {
                "name": "blog",
                "path": "src/content/blog",
                "schema": {"title": {"type": "string", "required": True}},
            }
        )
        service = _service(project_root, clock, collections=[config])
        blog = service.list_collections().data["collections"][0]
        assert blog["schema"]["title"]["required"] is True

    def test_discovery_disabled_scans_configured_only(
        self, project_root: Path, clock: FakeClock
    ) -> None:
        service = _service(
            project_root,
            clock,
            discovery=DiscoveryConfig(enabled=False),
            collections=[CollectionConfig(name="blog", path="src/content/blog")],
        )
        collections = service.list_collections().data["collections"]
        assert [c["name"] for c in collections] == ["blog"]
        assert collections[0]["count"] == 2
        assert collections[0]["file_pattern"] == "{date}-{slug}.md"

    def test_ignore_list(self, project_root: Path, clock: FakeClock) -> None:
        service = _service(project_root, clock, discovery=DiscoveryConfig(ignore=["docs"]))
        names = [c["name"] for c in service.list_collections().data["collections"]]
        assert names == ["blog"]

    def test_no_content_dir(self, tmp_path: Path, clock: FakeClock) -> None:
        result = _service(tmp_path, clock).list_collections()
        assert result.ok
        assert result.data == {"collections": [], "count": 0}


class TestGetCollection:
    def test_found(self, workspace: Workspace) -> None:
        result = CollectionService(workspace).get_collection("docs")
        assert result.ok
        assert result.data["collection"]["name"] == "docs"

    def test_not_found(self, workspace: Workspace) -> None:
        result = CollectionService(workspace).get_collection("nope")
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"
        assert result.error.detail == {"collection": "nope"}


class TestDetectPattern:
    def test_reports_samples(self, workspace: Workspace) -> None:
        result = CollectionService(workspace).detect_pattern("blog")
        assert result.ok
        assert result.data["collection"] == "blog"
        assert result.data["pattern"] == "{date}-{slug}.md"
        assert result.data["confidence"] == 1.0
        assert result.data["total_files"] == 2
        assert result.data["samples"]
        assert result.warnings == []

    def test_rescans_despite_cache(self, workspace: Workspace, project_root: Path) -> None:
        service = CollectionService(workspace)
        service.list_collections()
        write_file(project_root / "src" / "content" / "blog" / "plain.md", post("Plain"))
        assert service.detect_pattern("blog").data["total_files"] == 3

    def test_warns_on_configured_mismatch(self, project_root: Path, clock: FakeClock) -> None:
        service = _service(
            project_root,
            clock,
            collections=[
                CollectionConfig(name="blog", path="src/content/blog", file_pattern="{slug}.md")
            ],
        )
        result = service.detect_pattern("blog")
        assert result.ok
        assert len(result.warnings) == 1
        assert "{date}-{slug}.md" in result.warnings[0]

    def test_ignored_directory_still_detectable(self, project_root: Path, clock: FakeClock) -> None:
        service = _service(project_root, clock, discovery=DiscoveryConfig(ignore=["docs"]))
        result = service.detect_pattern("docs")
        assert result.ok
        assert result.data["pattern"] == "{slug}/index.md"

    def test_not_found(self, workspace: Workspace) -> None:
        result = CollectionService(workspace).detect_pattern("nope")
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"
