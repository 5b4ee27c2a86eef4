"""Executive summary and the terminal result model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from sca.schemas.comparison import (
    Advantage,
    ContentGapAnalysis,
    MetricsComparison,
    StrategyComparison,
)
from sca.schemas.insights import CompetitorInsight


class CompetitiveSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    overall_advantage: Advantage = "neutral"
    strength_areas: list[str] = []
    weakness_areas: list[str] = []
    quick_wins: list[str] = []  # at most 3
    long_term_opportunities: list[str] = []  # at most 5


class ProcessingStats(BaseModel):
    model_config = ConfigDict(frozen=True)

    analysis_time: int = 0  # milliseconds
    tokens_used: int = 0
    ai_calls_made: int = 0
    confidence: int = 0  # 0-100


class CompetitiveAnalysisResult(BaseModel):
    """The complete output of one comparison. Owned by the caller."""

    model_config = ConfigDict(frozen=True)

    metrics: MetricsComparison
    gaps: ContentGapAnalysis
    strategies: StrategyComparison
    insights: list[CompetitorInsight] = []
    summary: CompetitiveSummary
    processing_stats: ProcessingStats = ProcessingStats()
