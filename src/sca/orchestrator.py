"""Competitive analyzer — runs the comparison stages in order."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from datetime import datetime
from typing import Any, TypeVar

from sca.analysis.gaps import analyze_gaps
from sca.analysis.metrics import compare_site_metrics
from sca.analysis.strategy import detect_strategies
from sca.analysis.summary import build_summary
from sca.insights.base import InsightStrategy, select_insight_strategy
from sca.schemas.comparison import ContentGapAnalysis, MetricsComparison, StrategyComparison
from sca.schemas.config import AnalysisOptions
from sca.schemas.insights import CompetitorInsight
from sca.schemas.result import CompetitiveAnalysisResult, ProcessingStats
from sca.schemas.snapshot import AnalysisSnapshot
from sca.shared.llm_client import CompletionClient

logger = logging.getLogger(__name__)

T = TypeVar("T")

MetricsStage = Callable[[AnalysisSnapshot, AnalysisSnapshot], MetricsComparison]
GapsStage = Callable[[AnalysisSnapshot, AnalysisSnapshot], ContentGapAnalysis]
StrategiesStage = Callable[[AnalysisSnapshot, AnalysisSnapshot], StrategyComparison]
StageCallback = Callable[[str], None]

STAGES = (
    "Comparing metrics",
    "Analyzing content gaps",
    "Detecting strategies",
    "Generating insights",
    "Building summary",
)

# Rough per-item cost used to report token usage for model-backed runs.
_TOKENS_PER_INSIGHT = 50
_TOKENS_PER_METRIC = 20
_TOKENS_PER_MISSING_TOPIC = 10


def estimate_tokens(
    metrics: MetricsComparison,
    gaps: ContentGapAnalysis,
    insights: list[CompetitorInsight],
) -> int:
    metric_count = sum(1 for _ in metrics.items())
    return (
        len(insights) * _TOKENS_PER_INSIGHT
        + metric_count * _TOKENS_PER_METRIC
        + len(gaps.missing_topics) * _TOKENS_PER_MISSING_TOPIC
    )


def confidence_score(total_pages: int, insight_count: int) -> int:
    """Confidence 0-100: up to 60 from data volume, up to 40 from insight volume."""
    data_part = min(total_pages / 20, 1) * 60
    insight_part = min(insight_count / 10, 1) * 40
    return round(data_part + insight_part)


class CompetitiveAnalyzer:
    """Compares a main site snapshot against one competitor snapshot.

    Stage flow:
        metrics → gaps → strategies → insights → summary

    Any stage failure is logged with the stage name and re-raised; no
    partial result is returned.
    """

    def __init__(
        self,
        insight_strategy: InsightStrategy,
        *,
        options: AnalysisOptions | None = None,
        metrics_stage: MetricsStage = compare_site_metrics,
        gaps_stage: GapsStage = analyze_gaps,
        strategies_stage: StrategiesStage | None = None,
        reference_time: datetime | None = None,
        on_stage: StageCallback | None = None,
    ) -> None:
        self.insight_strategy = insight_strategy
        self.options = options or AnalysisOptions()
        self._compare_metrics = metrics_stage
        self._analyze_gaps = gaps_stage
        self._detect_strategies = strategies_stage or (
            lambda main, competitor: detect_strategies(main, competitor, reference_time=reference_time)
        )
        self.on_stage = on_stage

    def _stage(self, name: str, fn: Callable[..., T], *args: Any) -> T:
        if self.on_stage:
            self.on_stage(name)
        logger.info("Stage: %s", name)
        try:
            return fn(*args)
        except Exception:
            logger.exception("Stage '%s' failed", name)
            raise

    async def run(self, main: AnalysisSnapshot, competitor: AnalysisSnapshot) -> CompetitiveAnalysisResult:
        """Run every stage and assemble the result."""
        logger.info(
            "Competitive analysis: %s (%d pages) vs %s (%d pages), depth=%s, focus=%s",
            main.domain, main.page_count, competitor.domain, competitor.page_count,
            self.options.analysis_depth, ", ".join(self.options.focus_areas) or "(none)",
        )
        started = time.perf_counter()

        metrics = self._stage(STAGES[0], self._compare_metrics, main, competitor)
        gaps = self._stage(STAGES[1], self._analyze_gaps, main, competitor)
        strategies = self._stage(STAGES[2], self._detect_strategies, main, competitor)

        stage = STAGES[3]
        if self.on_stage:
            self.on_stage(stage)
        logger.info("Stage: %s (%s)", stage, self.insight_strategy.name)
        try:
            insights = await self.insight_strategy.generate(metrics, gaps, strategies)
        except Exception:
            logger.exception("Stage '%s' failed", stage)
            raise

        summary = self._stage(STAGES[4], build_summary, metrics, gaps, insights)

        calls_model = self.insight_strategy.calls_model
        stats = ProcessingStats(
            analysis_time=round((time.perf_counter() - started) * 1000),
            tokens_used=estimate_tokens(metrics, gaps, insights) if calls_model else 0,
            ai_calls_made=1 if calls_model else 0,
            confidence=confidence_score(main.page_count + competitor.page_count, len(insights)),
        )
        logger.info(
            "Analysis complete in %dms: %d insights, confidence %d",
            stats.analysis_time, len(insights), stats.confidence,
        )

        return CompetitiveAnalysisResult(
            metrics=metrics,
            gaps=gaps,
            strategies=strategies,
            insights=insights,
            summary=summary,
            processing_stats=stats,
        )


def build_analyzer(
    options: AnalysisOptions,
    client: CompletionClient | None = None,
    *,
    on_stage: StageCallback | None = None,
    reference_time: datetime | None = None,
) -> CompetitiveAnalyzer:
    """Configure an analyzer from options, selecting the insight strategy once."""
    return CompetitiveAnalyzer(
        select_insight_strategy(options, client),
        options=options,
        on_stage=on_stage,
        reference_time=reference_time,
    )
