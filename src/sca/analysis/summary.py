"""Executive summary built from the metric comparison and the insights."""

from __future__ import annotations

from collections.abc import Sequence

from sca.schemas.comparison import ContentGapAnalysis, MetricsComparison
from sca.schemas.insights import CompetitorInsight
from sca.schemas.result import CompetitiveSummary

MAX_QUICK_WINS = 3
MAX_LONG_TERM = 5
QUICK_WIN_MIN_IMPACT = 7


def format_area_name(key: str) -> str:
    """``title_optimization`` -> ``Title optimization``."""
    name = key.replace("_", " ").strip().capitalize()
    return name.replace(" seo", " SEO")


def build_summary(
    metrics: MetricsComparison,
    gaps: ContentGapAnalysis,
    insights: Sequence[CompetitorInsight],
) -> CompetitiveSummary:
    strengths = [key for key, m in metrics.items() if m.advantage == "main"]
    weaknesses = [key for key, m in metrics.items() if m.advantage == "competitor"]

    if len(strengths) > len(weaknesses):
        overall = "main"
    elif len(weaknesses) > len(strengths):
        overall = "competitor"
    else:
        overall = "neutral"

    quick_wins = [
        i.recommendation
        for i in insights
        if i.impact >= QUICK_WIN_MIN_IMPACT and i.quick_win_eligible
    ]

    return CompetitiveSummary(
        overall_advantage=overall,
        strength_areas=[format_area_name(k) for k in strengths],
        weakness_areas=[format_area_name(k) for k in weaknesses],
        quick_wins=quick_wins[:MAX_QUICK_WINS],
        long_term_opportunities=list(gaps.missing_topics[:MAX_LONG_TERM]),
    )
