"""Pydantic models for the metric, gap and strategy stages."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Literal

from pydantic import BaseModel, ConfigDict

Advantage = Literal["main", "competitor", "neutral"]
Significance = Literal["critical", "important", "minor"]
Effectiveness = Literal["superior", "comparable", "inferior"]
Opportunity = Literal["high", "medium", "low"]


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


# ----------------------------------------------------------------------
# Metrics
# ----------------------------------------------------------------------


class MetricComparison(_Frozen):
    """A typed delta between one metric on the two snapshots."""

    main: float
    competitor: float
    difference: float  # always main - competitor
    percentage_diff: float  # unsigned, relative to the competitor value
    advantage: Advantage
    significance: Significance


class MetricsComparison(_Frozen):
    title_optimization: MetricComparison
    description_optimization: MetricComparison
    headings_optimization: MetricComparison
    images_optimization: MetricComparison
    critical_issues: MetricComparison
    technical_seo: MetricComparison
    content_quality: MetricComparison

    def items(self) -> Iterator[tuple[str, MetricComparison]]:
        """Yield ``(metric_key, comparison)`` in declaration order."""
        for key in type(self).model_fields:
            yield key, getattr(self, key)


# ----------------------------------------------------------------------
# Content gaps
# ----------------------------------------------------------------------


class ContentVolumeGap(_Frozen):
    area: str
    main_count: int
    competitor_count: int
    gap: int
    opportunity: Opportunity = "low"


class TopicCluster(_Frozen):
    topic: str
    page_count: int = 0
    avg_word_count: int = 0
    keywords: list[str] = []
    strength: int = 0


class TopicalCoverage(_Frozen):
    main_topics: list[TopicCluster] = []
    competitor_topics: list[TopicCluster] = []
    shared_topics: list[str] = []
    unique_to_main: list[str] = []
    unique_to_competitor: list[str] = []
    coverage_score: int = 0


class KeywordOpportunity(_Frozen):
    keyword: str
    competitor_pages: int = 0
    main_pages: int = 0
    difficulty: Literal["low", "medium", "high"] = "low"
    opportunity: int = 0  # 1-10


class KeywordGapAnalysis(_Frozen):
    competitor_keywords: list[KeywordOpportunity] = []
    missing_keywords: list[str] = []
    weak_keywords: list[str] = []
    opportunity_score: int = 0


class ContentGapAnalysis(_Frozen):
    missing_topics: list[str] = []
    under_optimized_areas: list[str] = []
    opportunity_keywords: list[str] = []
    content_volume_gaps: list[ContentVolumeGap] = []
    topical_coverage: TopicalCoverage = TopicalCoverage()
    keyword_gaps: KeywordGapAnalysis = KeywordGapAnalysis()


# ----------------------------------------------------------------------
# Strategies
# ----------------------------------------------------------------------


class StrategyAnalysis(_Frozen):
    main_approach: str
    competitor_approach: str
    effectiveness: Effectiveness
    recommendations: list[str] = []  # at most 5


class StrategyComparison(_Frozen):
    content_strategy: StrategyAnalysis
    keyword_strategy: StrategyAnalysis
    technical_strategy: StrategyAnalysis
    user_experience: StrategyAnalysis

    def items(self) -> Iterator[tuple[str, StrategyAnalysis]]:
        for key in type(self).model_fields:
            yield key, getattr(self, key)
