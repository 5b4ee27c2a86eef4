"""Shared test fixtures."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any
from unittest.mock import AsyncMock

import pytest

from sca.schemas.snapshot import AnalysisSnapshot, PageRecord
from sca.shared.llm_client import LLMClient

REFERENCE_TIME = datetime(2024, 6, 1, tzinfo=timezone.utc)


def make_page(url: str = "https://example.com/page", **fields: Any) -> PageRecord:
    """Build a page record from snake_case fields, with an empty default page."""
    return PageRecord.model_validate({"url": url, **fields})


def make_snapshot(domain: str, pages: list[PageRecord] | None = None, **fields: Any) -> AnalysisSnapshot:
    return AnalysisSnapshot(domain=domain, pages=pages or [], **fields)


def rich_page(url: str, *, words: int = 800, topic: str = "Search Engine Optimization") -> PageRecord:
    """A well-optimized page: good title, description, headings, images and keywords."""
    return make_page(
        url,
        title="A descriptive page title of forty characters",
        meta_description="d" * 140,
        word_count=words,
        headings=[
            {"level": 1, "text": topic},
            {"level": 2, "text": f"{topic} basics"},
            {"level": 3, "text": "Details"},
        ],
        images=[{"src": "a.png", "alt": "diagram"}, {"src": "b.png", "alt": "chart"}],
        internal_links=[{"href": f"/l{i}", "text": "link"} for i in range(6)],
        keywords=[{"keyword": "seo audit checklist", "count": 8, "density": 1.5}],
        schema_markup=[{"@type": "Article"}],
        load_time=1.2,
        mobile_optimized=True,
        paragraphs=["p1", "p2", "p3"],
        lists=["<ul>", "<ol>"],
        content="Get started with our guide. Contact us to learn more.",
    )


def thin_page(url: str) -> PageRecord:
    return make_page(url, title="Hi", word_count=80, load_time=4.5)


@pytest.fixture
def reference_time() -> datetime:
    return REFERENCE_TIME


@pytest.fixture
def main_snapshot() -> AnalysisSnapshot:
    return make_snapshot("main.com", [
        rich_page("https://main.com/"),
        rich_page("https://main.com/blog/seo-tips"),
        thin_page("https://main.com/about"),
    ])


@pytest.fixture
def competitor_snapshot() -> AnalysisSnapshot:
    return make_snapshot("rival.com", [
        rich_page("https://rival.com/"),
        rich_page("https://rival.com/guides/link-building", topic="Link Building Strategy"),
        rich_page("https://rival.com/blog/content-marketing", topic="Content Marketing Plans"),
        rich_page("https://rival.com/products/rank-tracker", topic="Rank Tracking Software"),
    ])


@pytest.fixture
def mock_llm_client() -> LLMClient:
    """Return an LLMClient with a mocked OpenAI SDK underneath."""
    client = LLMClient.__new__(LLMClient)
    client._client = AsyncMock()
    client.temperature = 0.3
    return client
