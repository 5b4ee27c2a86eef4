"""Async OpenAI API wrapper for insight generation.

The analysis engine makes at most one model call per comparison, so this
wrapper makes one attempt with SDK retries disabled, and any
``openai`` exception propagates to the caller unchanged.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Protocol

from openai import AsyncOpenAI

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4o"
DEFAULT_MAX_TOKENS = 4000

TokensCallback = Callable[[int, int], None]
"""Called with (input_tokens, output_tokens) when a completion finishes."""


class CompletionClient(Protocol):
    async def simple_completion(
        self,
        *,
        system: str,
        user_message: str,
        model: str = DEFAULT_MODEL,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        json_mode: bool = True,
        on_tokens: TokensCallback | None = None,
    ) -> str: ...


class LLMClient:
    """Thin async wrapper around the OpenAI SDK.

    ``simple_completion`` is a single request/response with no tools.
    """

    def __init__(self, api_key: str | None = None, *, temperature: float = 0.3) -> None:
        self._client = AsyncOpenAI(api_key=api_key, max_retries=0)
        self.temperature = temperature

    async def simple_completion(
        self,
        *,
        system: str,
        user_message: str,
        model: str = DEFAULT_MODEL,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        json_mode: bool = True,
        on_tokens: TokensCallback | None = None,
    ) -> str:
        """Single request/response with no tools.

        When ``json_mode`` is True (default), the OpenAI API guarantees
        the response is valid JSON.
        """
        kwargs: dict[str, Any] = {
            "model": model,
            "max_tokens": max_tokens,
            "temperature": self.temperature,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": user_message},
            ],
        }
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        logger.info("Requesting completion from %s (max_tokens=%d)", model, max_tokens)
        response = await self._client.chat.completions.create(**kwargs)
        usage = getattr(response, "usage", None)
        if on_tokens and usage:
            on_tokens(getattr(usage, "prompt_tokens", 0), getattr(usage, "completion_tokens", 0))
        return response.choices[0].message.content or ""


# ----------------------------------------------------------------------
# Dry-run client (no API calls)
# ----------------------------------------------------------------------

_DRY_RUN_INSIGHTS = json.dumps({
    "insights": [
        {
            "category": "content-gaps",
            "priority": "high",
            "impact": 8,
            "recommendation": "[dry-run] Publish in-depth guides for the competitor's strongest topics",
            "evidence": ["[dry-run] Competitor covers topics you don't address"],
            "actionItems": ["Draft an outline for the top missing topic"],
        },
        {
            "category": "technical-seo",
            "priority": "medium",
            "impact": 6,
            "recommendation": "[dry-run] Add structured data to product and article pages",
            "evidence": ["[dry-run] Competitor uses schema markup more widely"],
            "actionItems": ["Add JSON-LD Product and Article markup"],
        },
    ]
})


class DryRunClient:
    """Drop-in replacement for LLMClient that makes zero API calls."""

    async def simple_completion(
        self,
        *,
        system: str,
        user_message: str,
        model: str = DEFAULT_MODEL,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        json_mode: bool = True,
        on_tokens: TokensCallback | None = None,
    ) -> str:
        logger.info("[dry-run] Skipping completion request (%d chars)", len(user_message))
        return _DRY_RUN_INSIGHTS
