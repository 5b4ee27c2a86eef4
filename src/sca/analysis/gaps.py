"""Content and keyword gap analysis between the main site and a competitor."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from sca.analysis.profilers import CONTENT_TYPES, categorize_content_types, page_topics
from sca.schemas.comparison import (
    ContentGapAnalysis,
    ContentVolumeGap,
    KeywordGapAnalysis,
    KeywordOpportunity,
    TopicalCoverage,
    TopicCluster,
)
from sca.schemas.snapshot import AnalysisSnapshot, PageRecord

logger = logging.getLogger(__name__)

MIN_MISSING_TOPIC_STRENGTH = 30
MAX_MISSING_TOPICS = 10
MAX_OPPORTUNITY_KEYWORDS = 10
TOPIC_SIMILARITY_THRESHOLD = 0.7


def analyze_gaps(main: AnalysisSnapshot, competitor: AnalysisSnapshot) -> ContentGapAnalysis:
    """Diff topic, keyword and content-volume coverage of two snapshots."""
    logger.debug("Gap analysis: %s vs %s", main.domain, competitor.domain)

    coverage = analyze_topical_coverage(main.pages, competitor.pages)
    keyword_gaps = analyze_keyword_gaps(main.pages, competitor.pages)

    opportunity_keywords = [
        kw.keyword
        for kw in keyword_gaps.competitor_keywords
        if kw.opportunity >= 6 and kw.difficulty != "high"
    ][:MAX_OPPORTUNITY_KEYWORDS]

    return ContentGapAnalysis(
        missing_topics=identify_missing_topics(coverage),
        under_optimized_areas=identify_under_optimized_areas(main.pages, competitor.pages),
        opportunity_keywords=opportunity_keywords,
        content_volume_gaps=analyze_content_volume_gaps(main.pages, competitor.pages),
        topical_coverage=coverage,
        keyword_gaps=keyword_gaps,
    )


# ----------------------------------------------------------------------
# Topics
# ----------------------------------------------------------------------


@dataclass
class _ClusterData:
    pages: list[PageRecord] = field(default_factory=list)
    keywords: dict[str, None] = field(default_factory=dict)
    total_words: int = 0


def topic_strength(pages: Sequence[PageRecord], total_words: int) -> int:
    """Score 0-100: page count, average depth and on-page SEO completeness."""
    if not pages:
        return 0
    strength = min(len(pages) * 10, 50)

    avg_words = total_words / len(pages)
    if avg_words >= 500:
        strength += 30
    elif avg_words >= 300:
        strength += 20
    elif avg_words >= 100:
        strength += 10

    optimized = sum(1 for p in pages if p.title and p.meta_description and p.headings)
    strength += optimized / len(pages) * 20
    return round(strength)


def extract_topic_clusters(pages: Sequence[PageRecord]) -> list[TopicCluster]:
    clusters: dict[str, _ClusterData] = {}
    for page in pages:
        for topic in page_topics(page):
            data = clusters.setdefault(topic, _ClusterData())
            data.pages.append(page)
            data.total_words += page.word_count
            for entry in page.keywords:
                if entry.keyword:
                    data.keywords.setdefault(entry.keyword, None)

    result = [
        TopicCluster(
            topic=topic,
            page_count=len(data.pages),
            avg_word_count=round(data.total_words / len(data.pages)),
            keywords=list(data.keywords)[:10],
            strength=topic_strength(data.pages, data.total_words),
        )
        for topic, data in clusters.items()
    ]
    return sorted(result, key=lambda c: (-c.strength, c.topic))


def analyze_topical_coverage(
    main_pages: Sequence[PageRecord],
    competitor_pages: Sequence[PageRecord],
) -> TopicalCoverage:
    main_topics = extract_topic_clusters(main_pages)
    competitor_topics = extract_topic_clusters(competitor_pages)

    main_names = [t.topic for t in main_topics]
    competitor_names = [t.topic for t in competitor_topics]
    main_set, competitor_set = set(main_names), set(competitor_names)

    union = len(main_set | competitor_set)
    return TopicalCoverage(
        main_topics=main_topics,
        competitor_topics=competitor_topics,
        shared_topics=[t for t in main_names if t in competitor_set],
        unique_to_main=[t for t in main_names if t not in competitor_set],
        unique_to_competitor=[t for t in competitor_names if t not in main_set],
        coverage_score=round(len(main_set) / union * 100) if union else 0,
    )


def topic_similarity(a: str, b: str) -> float:
    """Jaccard overlap of the words longer than two characters."""
    words_a = {w for w in a.split() if len(w) > 2}
    words_b = {w for w in b.split() if len(w) > 2}
    if not words_a or not words_b:
        return 0.0
    return len(words_a & words_b) / len(words_a | words_b)


def deduplicate_topics(topics: Sequence[str]) -> list[str]:
    """Drop topics that contain, are contained in, or closely match a kept one."""
    kept: list[str] = []
    for topic in topics:
        normalized = topic.lower().strip()
        duplicate = any(
            normalized in existing
            or existing in normalized
            or topic_similarity(normalized, existing) > TOPIC_SIMILARITY_THRESHOLD
            for existing in (k.lower().strip() for k in kept)
        )
        if not duplicate:
            kept.append(topic)
    return kept


def identify_missing_topics(coverage: TopicalCoverage) -> list[str]:
    """Well-developed competitor-only topics, strongest first."""
    strength = {c.topic: c.strength for c in coverage.competitor_topics}
    candidates = [
        topic
        for topic in coverage.unique_to_competitor
        if strength.get(topic, 0) >= MIN_MISSING_TOPIC_STRENGTH
    ]
    candidates.sort(key=lambda t: (-strength[t], t))
    return deduplicate_topics(candidates)[:MAX_MISSING_TOPICS]


# ----------------------------------------------------------------------
# Keywords
# ----------------------------------------------------------------------


@dataclass
class _KeywordUsage:
    page_count: int = 0
    total_density: float = 0.0

    @property
    def avg_density(self) -> float:
        return self.total_density / self.page_count if self.page_count else 0.0


def extract_keyword_usage(pages: Sequence[PageRecord]) -> dict[str, _KeywordUsage]:
    usage: dict[str, _KeywordUsage] = {}
    for page in pages:
        for entry in page.keywords:
            if not entry.keyword or not entry.density:
                continue
            data = usage.setdefault(entry.keyword.lower().strip(), _KeywordUsage())
            data.page_count += 1
            data.total_density += entry.density
    return usage


def estimate_keyword_difficulty(keyword: str, avg_density: float) -> str:
    word_count = len(keyword.split())
    # Long-tail phrases are easier to rank for.
    if word_count >= 4:
        return "low"
    if word_count == 3:
        return "medium"
    if avg_density > 2:
        return "high"
    if avg_density > 1:
        return "medium"
    return "low"


def keyword_opportunity(page_count: int, avg_density: float) -> int:
    score = min(page_count * 2, 6)
    if 0.5 <= avg_density <= 2:
        score += 3
    elif avg_density > 0:
        score += 1
    if page_count >= 2 and avg_density >= 1:
        score += 1
    return min(score, 10)


def overall_opportunity_score(opportunities: Sequence[KeywordOpportunity]) -> int:
    if not opportunities:
        return 0
    high = sum(1 for o in opportunities if o.opportunity >= 7)
    medium = sum(1 for o in opportunities if 4 <= o.opportunity < 7)
    return round((high * 10 + medium * 5) / max(len(opportunities) * 0.1, 1))


def analyze_keyword_gaps(
    main_pages: Sequence[PageRecord],
    competitor_pages: Sequence[PageRecord],
) -> KeywordGapAnalysis:
    main_usage = extract_keyword_usage(main_pages)
    competitor_usage = extract_keyword_usage(competitor_pages)

    competitor_only = [kw for kw in competitor_usage if kw not in main_usage]
    weak = [
        kw
        for kw, data in main_usage.items()
        if kw in competitor_usage and competitor_usage[kw].page_count > data.page_count
    ]

    opportunities = [
        KeywordOpportunity(
            keyword=kw,
            competitor_pages=competitor_usage[kw].page_count,
            main_pages=0,
            difficulty=estimate_keyword_difficulty(kw, competitor_usage[kw].avg_density),
            opportunity=keyword_opportunity(
                competitor_usage[kw].page_count, competitor_usage[kw].avg_density
            ),
        )
        for kw in competitor_only
    ]
    opportunities.sort(key=lambda o: -o.opportunity)

    return KeywordGapAnalysis(
        competitor_keywords=opportunities,
        missing_keywords=competitor_only[:20],
        weak_keywords=weak[:15],
        opportunity_score=overall_opportunity_score(opportunities),
    )


# ----------------------------------------------------------------------
# Volume and under-optimized areas
# ----------------------------------------------------------------------


def analyze_content_volume_gaps(
    main_pages: Sequence[PageRecord],
    competitor_pages: Sequence[PageRecord],
) -> list[ContentVolumeGap]:
    """Content-type buckets where the competitor has more pages."""
    main_counts = categorize_content_types(main_pages)
    competitor_counts = categorize_content_types(competitor_pages)

    gaps: list[ContentVolumeGap] = []
    for area in CONTENT_TYPES:
        if area == "homepage":
            continue
        gap = competitor_counts[area] - main_counts[area]
        if gap > 0:
            gaps.append(ContentVolumeGap(
                area=area,
                main_count=main_counts[area],
                competitor_count=competitor_counts[area],
                gap=gap,
                opportunity="high" if gap >= 5 else "medium" if gap >= 2 else "low",
            ))
    return sorted(gaps, key=lambda g: -g.gap)


def _average(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def _site_alt_coverage(pages: Sequence[PageRecord]) -> float:
    images = [img for p in pages for img in p.images]
    if not images:
        return 0.0
    return sum(1 for img in images if img.has_alt) / len(images) * 100


def identify_under_optimized_areas(
    main_pages: Sequence[PageRecord],
    competitor_pages: Sequence[PageRecord],
) -> list[str]:
    areas: list[str] = []

    main_words = _average([p.word_count for p in main_pages])
    competitor_words = _average([p.word_count for p in competitor_pages])
    if competitor_words > main_words * 1.5:
        areas.append("content depth and comprehensive coverage")

    if _site_alt_coverage(competitor_pages) > _site_alt_coverage(main_pages) + 20:
        areas.append("image optimization and alt text usage")

    main_links = _average([len(p.internal_links) for p in main_pages])
    competitor_links = _average([len(p.internal_links) for p in competitor_pages])
    if competitor_links > main_links * 1.5:
        areas.append("internal linking strategy")

    main_headings = _average([100.0 if p.headings else 0.0 for p in main_pages])
    competitor_headings = _average([100.0 if p.headings else 0.0 for p in competitor_pages])
    if competitor_headings > main_headings + 15:
        areas.append("heading structure and hierarchy")

    return areas
