"""Shared pytest fixtures and test helpers for writenex tests."""

from __future__ import annotations

from collections.abc import Generator
from pathlib import Path

import pytest
from click.testing import CliRunner

from writenex.config.settings import WritenexSettings
from writenex.infrastructure.cache import ServerCache
from writenex.infrastructure.workspace import Workspace
from writenex.services.telemetry import disable_telemetry


def write_file(path: Path, text: str = "") -> Path:
    """Write *text* to *path*, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def post(title: str, *, body: str = "Body text.", **fields: str) -> str:
    """Markdown source with a minimal frontmatter block."""
    lines = [f"title: {title}", *(f"{k}: {v}" for k, v in fields.items())]
    return "---\n" + "\n".join(lines) + "\n---\n\n" + body


class FakeClock:
    """Manually advanced monotonic clock for TTL tests."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's WRITENEX_* environment out of tests."""
    import os

    for key in list(os.environ):
        if key.startswith("WRITENEX_"):
            monkeypatch.delenv(key)


@pytest.fixture(autouse=True)
def _telemetry_off() -> Generator[None]:
    """`-v` CLI runs switch telemetry on for the whole process."""
    yield
    disable_telemetry()


@pytest.fixture
def cli_runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """A project with two collections under ``src/content``.

    - ``blog``: date-prefixed files (``{date}-{slug}.md``), one draft.
    - ``docs``: folder-based items (``{slug}/index.md``) with an image.
    """
    content = tmp_path / "src" / "content"
    write_file(
        content / "blog" / "2024-01-15-hello.md",
        post("Hello", pubDate="2024-01-15", body="First post."),
    )
    write_file(
        content / "blog" / "2024-02-01-world.md",
        post("World", pubDate="2024-02-01", draft="true", body="Second post."),
    )
    write_file(content / "docs" / "getting-started" / "index.md", post("Getting Started"))
    write_file(content / "docs" / "getting-started" / "diagram.png", "png")
    write_file(content / "docs" / "install" / "index.md", post("Install"))
    return tmp_path


@pytest.fixture
def settings(project_root: Path) -> WritenexSettings:
    return WritenexSettings.from_cli(project_root=project_root)


@pytest.fixture
def workspace(settings: WritenexSettings, clock: FakeClock) -> Workspace:
    """Workspace whose cache runs on the fake clock."""
    return Workspace(settings, cache=ServerCache(clock=clock))


@pytest.fixture
def _in_project(project_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to the project root so the CLI finds it."""
    monkeypatch.chdir(project_root)
