"""
Settlement records: final scores and graded picks.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from pick_engine.taxonomy.market_taxonomy import (
    MarketType,
    OutcomeResult,
    PredictionCategory,
)


class FinalScore(BaseModel):
    """Full-time score of a finished event."""

    model_config = ConfigDict(frozen=True)

    home: int = Field(ge=0)
    away: int = Field(ge=0)

    @property
    def total_goals(self) -> int:
        return self.home + self.away


class SettledPick(BaseModel):
    """The primary pick of a prediction, graded against the final score."""

    model_config = ConfigDict(frozen=True)

    event_id: int
    category: PredictionCategory
    market_type: MarketType
    selection: str
    confidence: int
    final_score: FinalScore
    result: OutcomeResult
