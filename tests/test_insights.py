"""Tests for the rule-based and model-backed insight strategies."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock

import pytest

from sca.analysis.gaps import analyze_gaps
from sca.analysis.metrics import compare_metric, compare_site_metrics
from sca.analysis.strategy import detect_strategies
from sca.errors import InsightGenerationError
from sca.insights.base import extract_json, select_insight_strategy
from sca.insights.llm import LLMInsightStrategy, parse_insight, parse_insights
from sca.insights.prompts import SYSTEM_PROMPT, build_intelligence_digest, estimate_difficulty
from sca.insights.rules import RuleBasedInsightStrategy, format_number
from sca.schemas.comparison import ContentGapAnalysis, MetricsComparison
from sca.schemas.config import AnalysisOptions

from conftest import REFERENCE_TIME


def _metrics(**overrides) -> MetricsComparison:
    fields = {key: compare_metric(5, 5) for key in MetricsComparison.model_fields}
    fields.update(overrides)
    return MetricsComparison(**fields)


@pytest.fixture
def stages(main_snapshot, competitor_snapshot):
    return (
        compare_site_metrics(main_snapshot, competitor_snapshot),
        analyze_gaps(main_snapshot, competitor_snapshot),
        detect_strategies(main_snapshot, competitor_snapshot, reference_time=REFERENCE_TIME),
    )


# ---------------------------------------------------------------------------
# Rule-based
# ---------------------------------------------------------------------------


class TestRuleBased:
    @pytest.mark.asyncio
    async def test_critical_losing_metric(self, stages) -> None:
        _, _, strategies = stages
        metrics = _metrics(title_optimization=compare_metric(2, 4))

        insights = await RuleBasedInsightStrategy().generate(metrics, ContentGapAnalysis(), strategies)

        assert len(insights) == 1
        insight = insights[0]
        assert insight.category == "title_optimization"
        assert insight.priority == "high"
        assert insight.impact == 8
        assert insight.recommendation == "Improve title optimization - competitor is 50% ahead"
        assert insight.evidence == ["Competitor scores 4 vs your 2"]
        assert insight.action_items == ["Review and optimize page titles for length and keyword inclusion"]
        assert insight.quick_win_eligible

    @pytest.mark.asyncio
    async def test_skips_minor_and_winning_metrics(self, stages) -> None:
        _, _, strategies = stages
        metrics = _metrics(
            title_optimization=compare_metric(10, 5),  # main wins
            technical_seo=compare_metric(98, 100),  # minor
        )
        assert await RuleBasedInsightStrategy().generate(metrics, ContentGapAnalysis(), strategies) == []

    @pytest.mark.asyncio
    async def test_technical_metric_is_not_a_quick_win(self, stages) -> None:
        _, _, strategies = stages
        metrics = _metrics(technical_seo=compare_metric(40.5, 90.5))

        [insight] = await RuleBasedInsightStrategy().generate(metrics, ContentGapAnalysis(), strategies)

        assert insight.recommendation == "Improve technical seo - competitor is 55% ahead"
        assert insight.evidence == ["Competitor scores 90.5 vs your 40.5"]
        assert not insight.quick_win_eligible

    @pytest.mark.asyncio
    async def test_missing_topics_insight(self, stages) -> None:
        _, _, strategies = stages
        gaps = ContentGapAnalysis(missing_topics=["link building", "rank tracking", "content plans", "extra"])

        [insight] = await RuleBasedInsightStrategy().generate(_metrics(), gaps, strategies)

        assert insight.category == "content-gaps"
        assert insight.impact == 7
        assert insight.evidence == ["Competitor covers 4 topics you don't address"]
        assert insight.action_items == ["Create content for: link building, rank tracking, content plans"]
        assert insight.quick_win_eligible

    def test_does_not_call_model(self) -> None:
        assert RuleBasedInsightStrategy().calls_model is False

    @pytest.mark.parametrize(("value", "expected"), [(50, "50"), (50.0, "50"), (33.333, "33.3")])
    def test_format_number(self, value: float, expected: str) -> None:
        assert format_number(value) == expected


# ---------------------------------------------------------------------------
# Parsing model output
# ---------------------------------------------------------------------------


class TestParseInsight:
    def test_normalizes_fields(self) -> None:
        insight = parse_insight({
            "category": "technical-seo",
            "priority": "HIGH",
            "impact": 15,
            "recommendation": "  Speed up pages  ",
            "evidence": ["LCP 4s", None, ""],
            "actionItems": ["Compress images"],
        })
        assert insight.priority == "high"
        assert insight.impact == 10
        assert insight.recommendation == "Speed up pages"
        assert insight.evidence == ["LCP 4s"]
        assert insight.action_items == ["Compress images"]
        assert not insight.quick_win_eligible

    def test_defaults(self) -> None:
        insight = parse_insight({"recommendation": "Write more", "priority": "urgent", "impact": "lots"})
        assert insight.category == "general"
        assert insight.priority == "medium"
        assert insight.impact == 5
        assert insight.evidence == []

    def test_snake_case_action_items(self) -> None:
        insight = parse_insight({"recommendation": "r", "action_items": ["a"], "impact": 0})
        assert insight.action_items == ["a"]
        assert insight.impact == 5

    def test_negative_impact_clamped(self) -> None:
        assert parse_insight({"recommendation": "r", "impact": -3}).impact == 1

    def test_content_gaps_are_quick_win_eligible(self) -> None:
        assert parse_insight({"recommendation": "r", "category": "content-gaps"}).quick_win_eligible

    @pytest.mark.parametrize("raw", [{}, {"recommendation": ""}, {"recommendation": "   "}])
    def test_missing_recommendation(self, raw) -> None:
        assert parse_insight(raw) is None


class TestParseInsights:
    def test_parses_fenced_json(self) -> None:
        text = 'Here you go:\n```json\n{"insights": [{"recommendation": "a"}, {"recommendation": ""}, 3]}\n```'
        insights = parse_insights(text)
        assert [i.recommendation for i in insights] == ["a"]

    def test_empty_list_is_valid(self) -> None:
        assert parse_insights('{"insights": []}') == []

    @pytest.mark.parametrize(
        "text",
        ["", "   ", "not json at all", '{"results": []}', '{"insights": "none"}', "[1, 2]"],
    )
    def test_invalid_output_raises(self, text: str) -> None:
        with pytest.raises(InsightGenerationError):
            parse_insights(text)

    def test_extract_json_trailing_text(self) -> None:
        assert extract_json('{"a": 1} and more') == {"a": 1}


# ---------------------------------------------------------------------------
# Model-backed strategy
# ---------------------------------------------------------------------------


class TestLLMInsightStrategy:
    @pytest.mark.asyncio
    async def test_generate_sends_digest(self, stages) -> None:
        client = AsyncMock()
        client.simple_completion.return_value = json.dumps({
            "insights": [
                {
                    "category": "content-gaps",
                    "priority": "high",
                    "impact": 9,
                    "recommendation": "Publish a link building guide",
                    "evidence": ["Competitor ranks for it"],
                    "actionItems": ["Outline the guide"],
                },
            ],
        })
        strategy = LLMInsightStrategy(client, model="gpt-4o-mini", max_tokens=1000)

        insights = await strategy.generate(*stages)

        assert [i.recommendation for i in insights] == ["Publish a link building guide"]
        assert insights[0].quick_win_eligible
        kwargs = client.simple_completion.await_args.kwargs
        assert kwargs["system"] == SYSTEM_PROMPT
        assert kwargs["model"] == "gpt-4o-mini"
        assert kwargs["max_tokens"] == 1000
        assert "PERFORMANCE GAPS:" in kwargs["user_message"]
        assert callable(kwargs["on_tokens"])
        assert strategy.calls_model

    @pytest.mark.asyncio
    async def test_client_errors_propagate(self, stages) -> None:
        client = AsyncMock()
        client.simple_completion.side_effect = RuntimeError("rate limited")

        with pytest.raises(RuntimeError, match="rate limited"):
            await LLMInsightStrategy(client).generate(*stages)
        assert client.simple_completion.await_count == 1

    @pytest.mark.asyncio
    async def test_unparseable_output_raises(self, stages) -> None:
        client = AsyncMock()
        client.simple_completion.return_value = "I cannot help with that."

        with pytest.raises(InsightGenerationError):
            await LLMInsightStrategy(client).generate(*stages)


class TestSelectStrategy:
    def test_rules_by_default(self) -> None:
        assert isinstance(select_insight_strategy(AnalysisOptions()), RuleBasedInsightStrategy)

    def test_llm_when_enabled(self) -> None:
        client = AsyncMock()
        options = AnalysisOptions(include_ai=True, model="gpt-4o-mini", max_tokens=2000)

        strategy = select_insight_strategy(options, client)

        assert isinstance(strategy, LLMInsightStrategy)
        assert strategy.client is client
        assert strategy.model == "gpt-4o-mini"
        assert strategy.max_tokens == 2000

    def test_llm_without_client_raises(self) -> None:
        with pytest.raises(ValueError, match="no model client"):
            select_insight_strategy(AnalysisOptions(include_ai=True))


# ---------------------------------------------------------------------------
# Digest
# ---------------------------------------------------------------------------


class TestDigest:
    def test_sections_present(self, stages) -> None:
        digest = build_intelligence_digest(*stages)
        for header in (
            "PERFORMANCE GAPS:",
            "CONTENT OPPORTUNITIES:",
            "STRATEGIC INSIGHTS:",
            "QUICK WINS IDENTIFIED:",
            "COMPETITIVE THREATS:",
            "LONG-TERM STRATEGIES:",
        ):
            assert header in digest
        assert "- Title optimization: 2 point gap (high impact" in digest

    def test_empty_sections_have_placeholders(self, stages) -> None:
        _, _, strategies = stages
        digest = build_intelligence_digest(_metrics(), ContentGapAnalysis(), strategies)
        assert "No significant performance gaps identified" in digest
        assert "No major content opportunities identified" in digest
        assert "No immediate competitive threats" in digest

    @pytest.mark.parametrize(
        ("metric", "gap", "expected"),
        [
            ("images_optimization", 3, "easy"),
            ("images_optimization", 12, "medium"),
            ("technical_seo", 4, "medium"),
            ("technical_seo", 22, "hard"),
            ("title_optimization", 2, "easy"),
            ("title_optimization", 10, "medium"),
            ("title_optimization", 20, "hard"),
        ],
    )
    def test_difficulty(self, metric: str, gap: float, expected: str) -> None:
        assert estimate_difficulty(metric, gap) == expected
