"""Profilers — turn a page collection into typed strategy profiles.

All functions here are pure: they read ``PageRecord``s (already normalized
by the snapshot schema) and return frozen profile models.  Per-page averages
divide by ``max(len(pages), 1)`` so an empty snapshot profiles to zeros.
"""

from __future__ import annotations

import re
from collections import Counter
from collections.abc import Sequence
from datetime import datetime, timedelta, timezone
from urllib.parse import urlsplit

from sca.schemas.profiles import (
    ContentDepth,
    ContentProfile,
    KeywordStrategyProfile,
    TechnicalProfile,
    UXProfile,
)
from sca.schemas.snapshot import PageRecord

MAX_TOPICS = 50

DEPTH_RANK: dict[str, int] = {
    "comprehensive": 4,
    "substantial": 3,
    "moderate": 2,
    "shallow": 1,
}

# Ordered: the first bucket whose keywords match wins.
CONTENT_TYPE_KEYWORDS: dict[str, tuple[str, ...]] = {
    "product": ("product", "item"),
    "service": ("service",),
    "blog": ("blog", "article", "post"),
    "resource": ("resource", "download", "guide"),
    "support": ("support", "help", "faq"),
    "about": ("about", "team", "company"),
}
TITLE_KEYWORDS: dict[str, tuple[str, ...]] = {
    "product": ("product",),
    "service": ("service",),
}
CONTENT_TYPES = ("homepage", *CONTENT_TYPE_KEYWORDS, "landing")

CTA_PHRASES = ("contact", "learn more", "get started", "sign up", "download")

_NON_WORD = re.compile(r"[^\w\s]")
_WHITESPACE = re.compile(r"\s+")


def _page_divisor(pages: Sequence[PageRecord]) -> int:
    return max(len(pages), 1)


# ----------------------------------------------------------------------
# Content
# ----------------------------------------------------------------------


def depth_bucket(avg_word_count: float) -> ContentDepth:
    """Bucket an average word count into a content-depth label."""
    if avg_word_count >= 1000:
        return "comprehensive"
    if avg_word_count >= 500:
        return "substantial"
    if avg_word_count >= 200:
        return "moderate"
    return "shallow"


def classify_content_type(page: PageRecord) -> str:
    """Assign a page to exactly one content-type bucket."""
    if page.url and page.path in ("", "/"):
        return "homepage"
    # Match the path only so the host name cannot pick the bucket.
    path = page.path.lower()
    title = page.title.lower()
    for content_type, words in CONTENT_TYPE_KEYWORDS.items():
        title_words = TITLE_KEYWORDS.get(content_type, ())
        if any(w in path for w in words) or any(w in title for w in title_words):
            return content_type
    return "landing"


def categorize_content_types(pages: Sequence[PageRecord]) -> dict[str, int]:
    counts = dict.fromkeys(CONTENT_TYPES, 0)
    for page in pages:
        counts[classify_content_type(page)] += 1
    return counts


def _normalize_heading(text: str) -> str:
    return _WHITESPACE.sub(" ", _NON_WORD.sub(" ", text.lower())).strip()


def page_topics(page: PageRecord) -> list[str]:
    """Normalized topics for one page: H1/H2 text, then URL path segments."""
    topics: list[str] = []
    for heading in page.headings:
        if heading.level <= 2:
            topic = _normalize_heading(heading.text)
            if len(topic) >= 5:
                topics.append(topic)
    for segment in page.path.split("/"):
        topic = _WHITESPACE.sub(" ", re.sub(r"[-_]", " ", segment.lower())).strip()
        if len(topic) >= 3:
            topics.append(topic)
    return list(dict.fromkeys(topics))


def extract_unique_topics(pages: Sequence[PageRecord]) -> list[str]:
    """Unique topics across all pages, in first-seen order, capped at 50."""
    seen: dict[str, None] = {}
    for page in pages:
        for topic in page_topics(page):
            seen.setdefault(topic, None)
            if len(seen) >= MAX_TOPICS:
                return list(seen)
    return list(seen)


def profile_content(pages: Sequence[PageRecord]) -> ContentProfile:
    if not pages:
        return ContentProfile(content_types=dict.fromkeys(CONTENT_TYPES, 0))

    avg_words = round(sum(p.word_count for p in pages) / len(pages))
    media = sum(len(p.images) + len(p.videos) for p in pages)
    return ContentProfile(
        avg_word_count=avg_words,
        content_types=categorize_content_types(pages),
        content_depth=depth_bucket(avg_words),
        topical_diversity=len(extract_unique_topics(pages)),
        media_richness=media / len(pages),
    )


# ----------------------------------------------------------------------
# Keywords
# ----------------------------------------------------------------------


def profile_keywords(pages: Sequence[PageRecord]) -> KeywordStrategyProfile:
    total = 0
    long_tail = 0
    densities: list[float] = []
    pages_per_keyword: Counter[str] = Counter()
    page_keyword_sets: list[set[str]] = []

    for page in pages:
        on_page: set[str] = set()
        for entry in page.keywords:
            if not entry.keyword or not entry.density:
                continue
            total += 1
            densities.append(entry.density)
            if len(entry.keyword.split()) >= 3:
                long_tail += 1
            on_page.add(entry.keyword.lower().strip())
        pages_per_keyword.update(on_page)
        page_keyword_sets.append(on_page)

    recurring = {kw for kw, n in pages_per_keyword.items() if n >= 2}
    consistent_pages = sum(1 for kws in page_keyword_sets if kws & recurring)

    return KeywordStrategyProfile(
        total_keywords=total,
        long_tail_percentage=(long_tail / total) * 100 if total else 0.0,
        brand_keyword_percentage=0.0,
        average_density=sum(densities) / len(densities) if densities else 0.0,
        consistency_score=(consistent_pages / _page_divisor(pages)) * 100,
        keyword_diversity=len(pages_per_keyword),
    )


# ----------------------------------------------------------------------
# Technical
# ----------------------------------------------------------------------


def is_clean_url(url: str) -> bool:
    """No query string, no percent-encoding, every path segment ≤50 chars."""
    if "?" in url or "%" in url:
        return False
    try:
        path = urlsplit(url).path
    except ValueError:
        return False
    return all(len(segment) <= 50 for segment in path.split("/"))


def image_alt_coverage(page: PageRecord) -> float:
    """Percentage of a page's images that carry alt text (0 when it has none)."""
    if not page.images:
        return 0.0
    return sum(1 for img in page.images if img.has_alt) / len(page.images) * 100


def profile_technical(pages: Sequence[PageRecord]) -> TechnicalProfile:
    n = _page_divisor(pages)
    return TechnicalProfile(
        https_percentage=sum(1 for p in pages if p.is_https) / n * 100,
        mobile_optimization_rate=sum(1 for p in pages if p.mobile_optimized) / n * 100,
        average_load_time=sum(p.load_time for p in pages) / n,
        structured_data_usage=sum(1 for p in pages if p.schema_markup) / n * 100,
        clean_url_percentage=sum(1 for p in pages if p.url and is_clean_url(p.url)) / n * 100,
        image_optimization_rate=sum(image_alt_coverage(p) for p in pages) / n,
    )


# ----------------------------------------------------------------------
# User experience
# ----------------------------------------------------------------------


def readability_score(page: PageRecord) -> int:
    """Bucket the average sentence length into 100 / 70 / 30."""
    sentences = len(page.sentences) or page.word_count / 15
    avg_len = page.word_count / sentences if sentences else 0
    if 10 <= avg_len <= 20:
        return 100
    if 8 <= avg_len <= 25:
        return 70
    return 30


def structure_score(page: PageRecord) -> int:
    score = 0
    if len(page.headings) >= 2:
        score += 40
    if len(page.paragraphs) >= 3:
        score += 30
    if page.lists:
        score += 20
    if page.images:
        score += 10
    return score


def engagement_score(page: PageRecord, reference_time: datetime) -> int:
    score = 0
    content = page.content.lower()
    if any(phrase in content for phrase in CTA_PHRASES):
        score += 30
    if page.forms:
        score += 20
    if page.videos:
        score += 25
    if page.images:
        score += 15
    if page.last_modified is not None:
        modified = page.last_modified
        if modified.tzinfo is None:
            modified = modified.replace(tzinfo=timezone.utc)
        if reference_time - modified <= timedelta(days=30):
            score += 10
    return score


def profile_ux(
    pages: Sequence[PageRecord],
    *,
    reference_time: datetime | None = None,
) -> UXProfile:
    """Profile readability, linking, structure and engagement.

    ``reference_time`` anchors the content-freshness bonus; it defaults to
    the current UTC time.
    """
    now = reference_time or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    n = _page_divisor(pages)
    return UXProfile(
        readability_score=sum(readability_score(p) for p in pages) / n,
        average_internal_links=sum(len(p.internal_links) for p in pages) / n,
        content_structure_score=sum(structure_score(p) for p in pages) / n,
        engagement_indicators=sum(engagement_score(p, now) for p in pages) / n,
    )
