"""Tests for the executive summary builder."""

from __future__ import annotations

import pytest

from sca.analysis.metrics import compare_metric, compare_site_metrics
from sca.analysis.summary import build_summary, format_area_name
from sca.schemas.comparison import ContentGapAnalysis, MetricsComparison
from sca.schemas.insights import CompetitorInsight

from conftest import make_snapshot


def _metrics(**overrides) -> MetricsComparison:
    fields = {key: compare_metric(5, 5) for key in MetricsComparison.model_fields}
    fields.update(overrides)
    return MetricsComparison(**fields)


def _insight(impact: int, eligible: bool, text: str = "Do it") -> CompetitorInsight:
    return CompetitorInsight(category="x", recommendation=text, impact=impact, quick_win_eligible=eligible)


@pytest.mark.parametrize(
    ("key", "expected"),
    [
        ("title_optimization", "Title optimization"),
        ("technical_seo", "Technical SEO"),
        ("critical_issues", "Critical issues"),
    ],
)
def test_format_area_name(key: str, expected: str) -> None:
    assert format_area_name(key) == expected


class TestOverallAdvantage:
    def test_identical_snapshots_are_neutral(self, main_snapshot) -> None:
        metrics = compare_site_metrics(main_snapshot, main_snapshot)
        summary = build_summary(metrics, ContentGapAnalysis(), [])
        assert summary.overall_advantage == "neutral"
        assert summary.strength_areas == []
        assert summary.weakness_areas == []

    def test_more_wins_take_the_advantage(self) -> None:
        metrics = _metrics(
            title_optimization=compare_metric(10, 5),
            critical_issues=compare_metric(2, 10, "issues"),
            content_quality=compare_metric(40, 80),
        )
        summary = build_summary(metrics, ContentGapAnalysis(), [])
        assert summary.overall_advantage == "main"
        assert summary.strength_areas == ["Title optimization", "Critical issues"]
        assert summary.weakness_areas == ["Content quality"]

    def test_tie_is_neutral(self) -> None:
        metrics = _metrics(
            title_optimization=compare_metric(10, 5),
            technical_seo=compare_metric(40, 80),
        )
        summary = build_summary(metrics, ContentGapAnalysis(), [])
        assert summary.overall_advantage == "neutral"
        assert summary.weakness_areas == ["Technical SEO"]

    def test_empty_competitor_favours_main(self, main_snapshot) -> None:
        metrics = compare_site_metrics(main_snapshot, make_snapshot("empty.com"))
        assert build_summary(metrics, ContentGapAnalysis(), []).overall_advantage == "main"


class TestQuickWinsAndLongTerm:
    def test_quick_wins_need_impact_and_eligibility(self) -> None:
        insights = [
            _insight(9, False, "not eligible"),
            _insight(6, True, "too small"),
            _insight(7, True, "first"),
            _insight(8, True, "second"),
        ]
        summary = build_summary(_metrics(), ContentGapAnalysis(), insights)
        assert summary.quick_wins == ["first", "second"]

    def test_quick_wins_capped_at_three(self) -> None:
        insights = [_insight(8, True, f"win {i}") for i in range(5)]
        summary = build_summary(_metrics(), ContentGapAnalysis(), insights)
        assert summary.quick_wins == ["win 0", "win 1", "win 2"]

    def test_long_term_capped_at_five(self) -> None:
        gaps = ContentGapAnalysis(missing_topics=[f"topic {i}" for i in range(8)])
        summary = build_summary(_metrics(), gaps, [])
        assert summary.long_term_opportunities == [f"topic {i}" for i in range(5)]
