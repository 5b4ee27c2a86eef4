"""Pydantic model for a single competitive insight."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

Priority = Literal["high", "medium", "low"]


class CompetitorInsight(BaseModel):
    """An actionable finding produced by an insight strategy."""

    model_config = ConfigDict(frozen=True)

    category: str
    priority: Priority = "medium"
    impact: int = Field(default=5, ge=1, le=10)
    recommendation: str
    evidence: list[str] = []
    action_items: list[str] = []
    # Set by the strategy that creates the insight; read by the summary builder.
    quick_win_eligible: bool = False

    @field_validator("evidence", "action_items", mode="before")
    @classmethod
    def coerce_none_to_list(cls, v: object) -> object:
        return [] if v is None else v
