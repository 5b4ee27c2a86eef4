"""Model-backed insights — one JSON-mode completion per comparison."""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from sca.errors import InsightGenerationError
from sca.insights.base import InsightStrategy, extract_json, is_quick_win_category
from sca.insights.prompts import SYSTEM_PROMPT, build_intelligence_digest
from sca.schemas.comparison import ContentGapAnalysis, MetricsComparison, StrategyComparison
from sca.schemas.insights import CompetitorInsight
from sca.shared.llm_client import CompletionClient

logger = logging.getLogger(__name__)

_PRIORITIES = {"high", "medium", "low"}


def _string_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if item]


def parse_insight(raw: dict[str, Any]) -> CompetitorInsight | None:
    """Normalize one model insight; ``None`` when it has no recommendation."""
    recommendation = str(raw.get("recommendation") or "").strip()
    if not recommendation:
        return None

    priority = str(raw.get("priority") or "").lower()
    if priority not in _PRIORITIES:
        priority = "medium"

    try:
        impact = int(raw.get("impact") or 5)
    except (TypeError, ValueError):
        impact = 5

    category = str(raw.get("category") or "general")
    return CompetitorInsight(
        category=category,
        priority=priority,
        impact=min(max(impact, 1), 10),
        recommendation=recommendation,
        evidence=_string_list(raw.get("evidence")),
        action_items=_string_list(raw.get("actionItems", raw.get("action_items"))),
        quick_win_eligible=is_quick_win_category(category),
    )


def parse_insights(text: str) -> list[CompetitorInsight]:
    """Parse a ``{"insights": [...]}`` response.

    Raises ``InsightGenerationError`` when the text is empty, is not JSON,
    or has no ``insights`` list.
    """
    if not text.strip():
        raise InsightGenerationError("Model returned an empty response")
    try:
        data = extract_json(text)
    except (ValueError, TypeError) as exc:
        raise InsightGenerationError(f"Model response is not valid JSON: {exc}") from exc

    raw_insights = data.get("insights") if isinstance(data, dict) else None
    if not isinstance(raw_insights, list):
        raise InsightGenerationError("Model response has no 'insights' list")

    insights: list[CompetitorInsight] = []
    for raw in raw_insights:
        if not isinstance(raw, dict):
            continue
        try:
            insight = parse_insight(raw)
        except ValidationError as exc:
            raise InsightGenerationError(f"Invalid insight in model response: {exc}") from exc
        if insight is not None:
            insights.append(insight)
    return insights


class LLMInsightStrategy(InsightStrategy):
    """Sends a competitive-intelligence digest to the model and parses its insights.

    Makes a single attempt; client errors propagate to the caller.
    """

    def __init__(self, client: CompletionClient, *, model: str = "gpt-4o", max_tokens: int = 4000) -> None:
        self.client = client
        self.model = model
        self.max_tokens = max_tokens

    @property
    def name(self) -> str:
        return "AI insights"

    @property
    def calls_model(self) -> bool:
        return True

    def _log_tokens(self, input_tokens: int, output_tokens: int) -> None:
        logger.debug("Insight call used %d input + %d output tokens", input_tokens, output_tokens)

    async def generate(
        self,
        metrics: MetricsComparison,
        gaps: ContentGapAnalysis,
        strategies: StrategyComparison,
    ) -> list[CompetitorInsight]:
        digest = build_intelligence_digest(metrics, gaps, strategies)
        logger.debug("Insight digest:\n%s", digest)

        raw = await self.client.simple_completion(
            system=SYSTEM_PROMPT,
            user_message=digest,
            model=self.model,
            max_tokens=self.max_tokens,
            on_tokens=self._log_tokens,
        )
        logger.debug("Insight model raw output:\n%s", raw[:500])

        insights = parse_insights(raw)
        logger.info("Generated %d AI insights", len(insights))
        return insights
