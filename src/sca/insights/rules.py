"""Deterministic insights derived from critical metric gaps and missing topics."""

from __future__ import annotations

import logging

from sca.analysis.summary import format_area_name
from sca.insights.base import InsightStrategy, is_quick_win_category
from sca.schemas.comparison import ContentGapAnalysis, MetricsComparison, StrategyComparison
from sca.schemas.insights import CompetitorInsight

logger = logging.getLogger(__name__)

ACTION_ITEMS: dict[str, str] = {
    "title_optimization": "Review and optimize page titles for length and keyword inclusion",
    "description_optimization": "Rewrite meta descriptions to be more compelling and keyword-rich",
    "headings_optimization": "Improve heading structure and hierarchy",
    "images_optimization": "Add descriptive alt text to all images",
    "critical_issues": "Fix critical SEO issues identified in the analysis",
    "technical_seo": "Improve site speed, mobile optimization, and technical elements",
    "content_quality": "Enhance content depth, readability, and value proposition",
}
DEFAULT_ACTION_ITEM = "Review and improve this area based on competitor analysis"


def format_number(value: float) -> str:
    """Integral values without a decimal point, others to one decimal."""
    return str(int(value)) if float(value).is_integer() else f"{value:.1f}"


class RuleBasedInsightStrategy(InsightStrategy):
    """Insights that need no model call: one per critical losing metric,
    plus one for missing topics."""

    @property
    def name(self) -> str:
        return "Rule-based insights"

    async def generate(
        self,
        metrics: MetricsComparison,
        gaps: ContentGapAnalysis,
        strategies: StrategyComparison,
    ) -> list[CompetitorInsight]:
        insights: list[CompetitorInsight] = []

        for key, metric in metrics.items():
            if metric.significance != "critical" or metric.advantage != "competitor":
                continue
            insights.append(CompetitorInsight(
                category=key,
                priority="high",
                impact=8,
                recommendation=(
                    f"Improve {format_area_name(key).lower()} - competitor is "
                    f"{format_number(metric.percentage_diff)}% ahead"
                ),
                evidence=[
                    f"Competitor scores {format_number(metric.competitor)} "
                    f"vs your {format_number(metric.main)}"
                ],
                action_items=[ACTION_ITEMS.get(key, DEFAULT_ACTION_ITEM)],
                quick_win_eligible=is_quick_win_category(key),
            ))

        if gaps.missing_topics:
            insights.append(CompetitorInsight(
                category="content-gaps",
                priority="high",
                impact=7,
                recommendation="Create content for missing topics to capture additional search traffic",
                evidence=[f"Competitor covers {len(gaps.missing_topics)} topics you don't address"],
                action_items=[f"Create content for: {', '.join(gaps.missing_topics[:3])}"],
                quick_win_eligible=is_quick_win_category("content-gaps"),
            ))

        logger.info("Generated %d rule-based insights", len(insights))
        return insights
