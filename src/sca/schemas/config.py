"""Configuration schema — validates analysis-options.yml."""

from typing import Literal

from pydantic import BaseModel, field_validator, model_validator


class AnalysisOptions(BaseModel):
    """Options for one competitive comparison.

    ``analysis_depth`` and ``focus_areas`` are accepted and carried through,
    but no stage changes its behaviour based on them yet.
    """

    # Insight generation
    include_ai: bool = False
    max_tokens: int = 4000
    model: str = "gpt-4o"

    # Reserved tuning
    analysis_depth: Literal["basic", "standard", "comprehensive"] = "standard"
    focus_areas: list[str] = ["content", "technical", "keywords", "user-experience"]

    @field_validator("focus_areas", mode="before")
    @classmethod
    def coerce_none_to_empty(cls, v: object) -> object:
        # YAML loads a key with only commented-out items as None.
        return [] if v is None else v

    @model_validator(mode="after")
    def check_token_budget(self) -> "AnalysisOptions":
        if self.max_tokens <= 0:
            raise ValueError("max_tokens must be a positive integer")
        return self
