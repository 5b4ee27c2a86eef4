"""Insight strategy ABC — the pattern every insight generator follows."""

from __future__ import annotations

import json
import re
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from sca.schemas.comparison import ContentGapAnalysis, MetricsComparison, StrategyComparison
from sca.schemas.config import AnalysisOptions
from sca.schemas.insights import CompetitorInsight

if TYPE_CHECKING:
    from sca.shared.llm_client import CompletionClient

# Categories whose insights may be surfaced as summary quick wins.
QUICK_WIN_CATEGORIES = frozenset({
    "content-gaps",
    "title_optimization",
    "description_optimization",
    "headings_optimization",
    "images_optimization",
})


def is_quick_win_category(category: str) -> bool:
    return category in QUICK_WIN_CATEGORIES


class InsightStrategy(ABC):
    """Turns the three comparison stages into a list of insights.

    Subclasses implement:
    - ``name`` — human-readable strategy name for logs and progress
    - ``calls_model`` — whether ``generate`` makes a model call
    - ``generate(metrics, gaps, strategies)`` — produce the insights
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name for progress display."""

    @property
    def calls_model(self) -> bool:
        return False

    @abstractmethod
    async def generate(
        self,
        metrics: MetricsComparison,
        gaps: ContentGapAnalysis,
        strategies: StrategyComparison,
    ) -> list[CompetitorInsight]:
        """Return insights for one comparison. Must not mutate its inputs."""


def select_insight_strategy(
    options: AnalysisOptions,
    client: CompletionClient | None = None,
) -> InsightStrategy:
    """Pick the insight strategy once, at configuration time."""
    from sca.insights.llm import LLMInsightStrategy
    from sca.insights.rules import RuleBasedInsightStrategy

    if not options.include_ai:
        return RuleBasedInsightStrategy()
    if client is None:
        raise ValueError("include_ai is enabled but no model client was configured")
    return LLMInsightStrategy(client, model=options.model, max_tokens=options.max_tokens)


def extract_json(text: str) -> dict[str, Any]:
    """Extract a JSON object from text that may contain markdown fences."""
    text = text.strip()

    # 1. Try direct parse (clean JSON response)
    if text.startswith("{"):
        try:
            return json.loads(text)
        except json.JSONDecodeError:
            # Might have trailing text — try raw_decode
            try:
                obj, _ = json.JSONDecoder().raw_decode(text)
                return obj
            except json.JSONDecodeError:
                pass

    # 2. Look for ```json ... ``` or ``` ... ``` fenced blocks
    match = re.search(r"```(?:json)?\s*\n?(.*?)\n?```", text, re.DOTALL)
    if match:
        return json.loads(match.group(1).strip())

    # 3. Find the first { and try to parse a JSON object starting there
    try:
        start = text.index("{")
        obj, _ = json.JSONDecoder().raw_decode(text, idx=start)
        return obj
    except (ValueError, json.JSONDecodeError):
        pass

    raise ValueError(
        f"Could not extract JSON from model response (length={len(text)}). "
        f"First 300 chars: {text[:300]!r}"
    )
