"""Input models — one crawled site snapshot and its page records.

Upstream crawler output is camelCase JSON with plenty of nulls and missing
keys.  Every model here accepts both camelCase and snake_case names, and the
shared ``_drop_nulls`` validator is the single normalization step: a null or
absent field always falls back to its default, so the profilers can treat a
``PageRecord`` as fully populated.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any
from urllib.parse import urlsplit

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class _SnapshotModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class Heading(_SnapshotModel):
    level: int = 1
    text: str = ""


class Image(_SnapshotModel):
    src: str = ""
    alt: str = ""

    @property
    def has_alt(self) -> bool:
        return bool(self.alt.strip())


class InternalLink(_SnapshotModel):
    href: str = ""
    text: str = ""


class KeywordEntry(_SnapshotModel):
    """One keyword-density row produced by the page analyzer."""

    keyword: str = ""
    count: int = 0
    density: float = 0.0  # percent of page words


class SeoIssue(_SnapshotModel):
    severity: str = "info"  # "critical", "warning", "info"
    message: str = ""


class PageRecord(_SnapshotModel):
    """Per-page facts from the crawler. Never mutated by the engine."""

    url: str = ""
    title: str = ""
    meta_description: str = ""
    word_count: int = 0
    headings: list[Heading] = []
    images: list[Image] = []
    videos: list[str] = []
    internal_links: list[InternalLink] = []
    # The page analyzer emits keyword rows as ``keywordDensity``.
    keywords: list[KeywordEntry] = Field(default=[], validation_alias=AliasChoices("keywords", "keywordDensity"))
    schema_markup: list[Any] = []
    load_time: float = 0.0  # seconds; 0 means not measured
    mobile_optimized: bool = False
    paragraphs: list[str] = []
    sentences: list[str] = []
    lists: list[Any] = []
    forms: list[Any] = []
    content: str = Field(default="", validation_alias=AliasChoices("content", "allTextContent"))
    last_modified: datetime | None = None
    issues: list[SeoIssue] = []

    @property
    def is_https(self) -> bool:
        return self.url.lower().startswith("https://")

    @property
    def path(self) -> str:
        try:
            return urlsplit(self.url).path
        except ValueError:
            return ""


class SiteMetrics(_SnapshotModel):
    """Aggregate counters the upstream results aggregator attaches to a crawl."""

    title_optimization: float = 0
    description_optimization: float = 0
    headings_optimization: float = 0
    images_optimization: float = 0
    critical_issues: float = 0


class AnalysisSnapshot(_SnapshotModel):
    """One site's crawl result — domain plus an ordered list of pages."""

    domain: str = ""
    pages: list[PageRecord] = []
    metrics: SiteMetrics | None = None

    @property
    def page_count(self) -> int:
        return len(self.pages)
