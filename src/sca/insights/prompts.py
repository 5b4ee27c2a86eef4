"""Prompts and the competitive-intelligence digest for model-backed insights."""

from __future__ import annotations

from sca.analysis.summary import format_area_name
from sca.schemas.comparison import ContentGapAnalysis, MetricsComparison, StrategyComparison

SYSTEM_PROMPT = """\
You are an expert competitive SEO strategist. Analyze competitive data and \
provide specific, actionable insights that will drive real business results.

## Focus
1. High-impact opportunities with clear ROI
2. Specific tactics the competitor is using successfully
3. Concrete action steps with realistic timelines
4. Strategic advantages that can be captured
5. Risk mitigation for competitive threats

Always be specific with numbers, examples, and measurable outcomes.

## Output
Respond with a single JSON object and nothing else:
{
  "insights": [
    {
      "category": "content-gaps | technical-seo | keyword-strategy | user-experience",
      "priority": "high | medium | low",
      "impact": 1-10,
      "recommendation": "Specific action to take",
      "evidence": ["Supporting data points"],
      "actionItems": ["Concrete steps to implement"]
    }
  ]
}
"""

# Metrics that are usually cheap to fix, and ones that take real engineering work.
_EASY_METRICS = {"images_optimization", "description_optimization"}
_HARD_METRICS = {"technical_seo", "content_quality"}

_TRAFFIC_PER_TOPIC = 150


def estimate_difficulty(metric: str, gap: float) -> str:
    if metric in _EASY_METRICS:
        return "easy" if gap < 10 else "medium"
    if metric in _HARD_METRICS:
        return "medium" if gap < 5 else "hard"
    if gap < 5:
        return "easy"
    if gap < 15:
        return "medium"
    return "hard"


def estimate_topic_traffic(topic_count: int) -> int:
    return round(topic_count * _TRAFFIC_PER_TOPIC * 0.7)


def _performance_gaps(metrics: MetricsComparison) -> list[str]:
    rows = []
    for key, m in metrics.items():
        if m.advantage != "competitor" or m.significance == "minor":
            continue
        gap = abs(m.difference)
        impact = "high" if m.significance == "critical" else "medium"
        rows.append((impact, key, gap))
    # High impact first, then easier fixes.
    ease = {"easy": 0, "medium": 1, "hard": 2}
    rows.sort(key=lambda r: (r[0] != "high", ease[estimate_difficulty(r[1], r[2])]))
    return [
        f"- {format_area_name(key)}: {gap:.0f} point gap "
        f"({impact} impact, {estimate_difficulty(key, gap)} difficulty)"
        for impact, key, gap in rows
    ]


def _content_opportunities(gaps: ContentGapAnalysis) -> list[str]:
    lines = []
    if gaps.missing_topics:
        n = len(gaps.missing_topics)
        lines.append(
            f"- Missing topics: {n} gap ({', '.join(gaps.missing_topics[:5])}), "
            f"{estimate_topic_traffic(n)} potential monthly visitors"
        )
    if gaps.opportunity_keywords:
        lines.append(f"- Opportunity keywords: {', '.join(gaps.opportunity_keywords)}")
    for gap in gaps.content_volume_gaps:
        lines.append(
            f"- {gap.area} pages: competitor has {gap.competitor_count} vs your "
            f"{gap.main_count} ({gap.opportunity} opportunity)"
        )
    return lines


def _strategic_insights(strategies: StrategyComparison) -> list[str]:
    return [
        f"- {format_area_name(area)}: Competitor uses {s.competitor_approach} "
        f"(ours: {s.main_approach})"
        for area, s in strategies.items()
        if s.effectiveness == "inferior"
    ]


def _threats(metrics: MetricsComparison) -> list[str]:
    return [
        f"- Competitor significantly outperforms in {format_area_name(key).lower()} "
        "(high severity, immediate)"
        for key, m in metrics.items()
        if m.advantage == "competitor" and m.significance == "critical"
    ]


def _quick_wins(metrics: MetricsComparison) -> list[str]:
    return [
        f"- Optimize {format_area_name(key).lower()}: "
        f"{min(abs(m.difference) * 10, 100):.0f}% impact, 2-4 weeks"
        for key, m in metrics.items()
        if m.advantage == "competitor" and key in _EASY_METRICS
    ]


def _long_term(gaps: ContentGapAnalysis) -> list[str]:
    if len(gaps.missing_topics) < 5:
        return []
    return [
        f"- Market expansion into competitor topic areas: enter "
        f"{len(gaps.missing_topics)} new content verticals over 6-18 months"
    ]


def _section(title: str, lines: list[str], empty: str) -> str:
    return f"{title}:\n" + ("\n".join(lines) if lines else empty)


def build_intelligence_digest(
    metrics: MetricsComparison,
    gaps: ContentGapAnalysis,
    strategies: StrategyComparison,
) -> str:
    """Render the comparison stages as the user message for the model."""
    sections = [
        _section("PERFORMANCE GAPS", _performance_gaps(metrics),
                 "No significant performance gaps identified"),
        _section("CONTENT OPPORTUNITIES", _content_opportunities(gaps),
                 "No major content opportunities identified"),
        _section("STRATEGIC INSIGHTS", _strategic_insights(strategies),
                 "No major strategic differences identified"),
        _section("QUICK WINS IDENTIFIED", _quick_wins(metrics), "No quick wins identified"),
        _section("COMPETITIVE THREATS", _threats(metrics), "No immediate competitive threats"),
        _section("LONG-TERM STRATEGIES", _long_term(gaps), "No long-term strategies identified"),
    ]
    return (
        "Analyze this competitive intelligence data and provide 8-12 specific, "
        "actionable insights for improving SEO performance against the competitor:\n\n"
        + "\n\n".join(sections)
        + "\n\nPrioritize the highest ROI opportunities first."
    )
