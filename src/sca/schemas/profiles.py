"""Derived per-site profiles used by the strategy detector.

Profiles only live for the duration of one comparison and are never
persisted on their own.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict

ContentDepth = Literal["shallow", "moderate", "substantial", "comprehensive"]


class ContentProfile(BaseModel):
    model_config = ConfigDict(frozen=True)

    avg_word_count: int = 0
    content_types: dict[str, int] = {}
    content_depth: ContentDepth = "shallow"
    topical_diversity: int = 0  # capped at 50
    media_richness: float = 0.0  # images + videos per page

    @property
    def total_content(self) -> int:
        return sum(self.content_types.values())


class KeywordStrategyProfile(BaseModel):
    model_config = ConfigDict(frozen=True)

    total_keywords: int = 0
    long_tail_percentage: float = 0.0
    brand_keyword_percentage: float = 0.0  # never populated; kept for output compatibility
    average_density: float = 0.0
    consistency_score: float = 0.0
    keyword_diversity: int = 0


class TechnicalProfile(BaseModel):
    model_config = ConfigDict(frozen=True)

    https_percentage: float = 0.0
    mobile_optimization_rate: float = 0.0
    average_load_time: float = 0.0
    structured_data_usage: float = 0.0
    clean_url_percentage: float = 0.0
    image_optimization_rate: float = 0.0


class UXProfile(BaseModel):
    model_config = ConfigDict(frozen=True)

    readability_score: float = 0.0
    average_internal_links: float = 0.0
    content_structure_score: float = 0.0
    engagement_indicators: float = 0.0
