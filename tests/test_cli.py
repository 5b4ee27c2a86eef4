"""Tests for the Typer CLI."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from sca.cli import app

runner = CliRunner()


def _page(url: str, words: int, heading: str) -> dict:
    return {
        "url": url,
        "title": "A descriptive page title of forty characters",
        "metaDescription": None,
        "wordCount": words,
        "headings": [{"level": 1, "text": heading}],
        "images": [{"src": "a.png", "alt": "diagram"}],
        "loadTime": 1.5,
        "mobileOptimized": True,
    }


@pytest.fixture
def snapshot_files(tmp_path: Path) -> tuple[Path, Path]:
    main = tmp_path / "main.json"
    main.write_text(json.dumps({
        "domain": "main.com",
        "pages": [_page("https://main.com/", 600, "Welcome to main")],
    }))
    competitor = tmp_path / "rival.com.json"
    competitor.write_text(json.dumps({
        "pages": [
            _page("https://rival.com/", 900, "Welcome to rival"),
            _page("https://rival.com/blog/link-building", 1200, "Link building guide"),
        ],
    }))
    return main, competitor


class TestCompare:
    def test_writes_result(self, snapshot_files, tmp_path: Path) -> None:
        main, competitor = snapshot_files
        out = tmp_path / "out" / "result.json"

        result = runner.invoke(app, ["compare", "-m", str(main), "-k", str(competitor), "-o", str(out)])

        assert result.exit_code == 0, result.output
        data = json.loads(out.read_text())
        assert set(data) == {"metrics", "gaps", "strategies", "insights", "summary", "processing_stats"}
        assert data["processing_stats"]["ai_calls_made"] == 0

    def test_dry_run_ai(self, snapshot_files, tmp_path: Path) -> None:
        main, competitor = snapshot_files
        out = tmp_path / "result.json"

        result = runner.invoke(
            app, ["compare", "-m", str(main), "-k", str(competitor), "--ai", "--dry-run", "-o", str(out)],
        )

        assert result.exit_code == 0, result.output
        data = json.loads(out.read_text())
        assert data["processing_stats"]["ai_calls_made"] == 1
        assert len(data["insights"]) == 2

    def test_missing_snapshot(self, tmp_path: Path) -> None:
        result = runner.invoke(
            app, ["compare", "-m", str(tmp_path / "nope.json"), "-k", str(tmp_path / "nope2.json")],
        )
        assert result.exit_code == 1
        assert "Failed to load input" in result.output


class TestValidate:
    def test_valid_config(self, tmp_path: Path) -> None:
        cfg = tmp_path / "opts.yml"
        cfg.write_text("include_ai: true\nmodel: gpt-4o-mini\n")

        result = runner.invoke(app, ["validate", "--config", str(cfg)])

        assert result.exit_code == 0
        assert "Config is valid" in result.output
        assert "gpt-4o-mini" in result.output

    def test_invalid_config(self, tmp_path: Path) -> None:
        cfg = tmp_path / "opts.yml"
        cfg.write_text("max_tokens: -1\n")

        result = runner.invoke(app, ["validate", "--config", str(cfg)])

        assert result.exit_code == 1
        assert "Config validation failed" in result.output
