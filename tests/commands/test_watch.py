"""Tests for the watch and cache-stats commands."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from writenex.cli import cli


@pytest.mark.usefixtures("_in_project")
class TestCacheStatsCommand:
    def test_cold(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "cache-stats"])
        assert result.exit_code == 0
        stats = json.loads(result.output)["data"]
        assert stats["collections_valid"] is False
        assert stats["ttl"] == 30
        assert stats["has_watcher"] is False

    def test_warm(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "cache-stats", "--warm"])
        assert result.exit_code == 0
        assert json.loads(result.output)["data"]["collections_valid"] is True

    def test_configured_ttl(self, cli_runner: CliRunner, project_root: Path) -> None:
        (project_root / "writenex.toml").write_text("[cache]\nttl_seconds = 12\n")
        result = cli_runner.invoke(cli, ["--json", "cache-stats"])
        assert json.loads(result.output)["data"]["ttl"] == 12


class TestWatchCommand:
    def test_runs_until_timeout(self, cli_runner: CliRunner, project_root: Path) -> None:
        result = cli_runner.invoke(
            cli, ["--root", str(project_root), "watch", "--timeout", "0.3"]
        )
        assert result.exit_code == 0
        assert "Watching" in result.output

    def test_missing_content_dir(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        result = cli_runner.invoke(cli, ["--root", str(tmp_path), "watch", "--timeout", "0"])
        assert result.exit_code == 1
        assert "Content directory not found" in result.output
