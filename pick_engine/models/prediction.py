"""
Engine output models.

``Prediction`` is the composed result for one event: category, primary
selection, optional uncorrelated secondary, up to four other ranked tips,
the forecast's narrative passed through, and the disclaimer list.  It is
frozen: a new engine call produces a new ``Prediction``, never a patch.

``DailyCandidate`` couples an event with its prediction and the primary's
final score so that a whole day of predictions can be ranked together.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from pick_engine.models.event import Event
from pick_engine.taxonomy.market_taxonomy import MarketType, PredictionCategory


class MarketSelection(BaseModel):
    """A recommended (market, selection) pair.

    Attributes:
        market_type: One of the four catalogue markets.
        selection: Canonical selection text, e.g. ``"Home Win"`` or ``"1X"``.
        confidence: Final score clamped to 0–100.
        reasoning: Human-readable one-liner.
    """

    model_config = ConfigDict(frozen=True)

    market_type: MarketType
    selection: str
    confidence: int = Field(ge=0, le=100)
    reasoning: str

    @field_validator("selection")
    @classmethod
    def validate_selection_not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("selection must not be empty.")
        return v


class Prediction(BaseModel):
    """Engine output for one event."""

    model_config = ConfigDict(frozen=True)

    event_id: int
    generated_at: datetime
    category: PredictionCategory
    primary: MarketSelection
    secondary: Optional[MarketSelection] = None
    other_markets: tuple[MarketSelection, ...] = ()
    top_score: int
    narrative: str = ""
    key_factors: tuple[str, ...] = ()
    disclaimers: tuple[str, ...] = ()

    @field_validator("other_markets")
    @classmethod
    def validate_other_markets(
        cls, v: tuple[MarketSelection, ...]
    ) -> tuple[MarketSelection, ...]:
        if len(v) > 4:
            raise ValueError(f"At most 4 other markets allowed, got {len(v)}.")
        return v


class DailyCandidate(BaseModel):
    """One event's prediction, ranked against the rest of its day."""

    model_config = ConfigDict(frozen=True)

    event: Event
    prediction: Prediction
    top_score: int

    @classmethod
    def from_prediction(cls, event: Event, prediction: Prediction) -> "DailyCandidate":
        return cls(event=event, prediction=prediction, top_score=prediction.top_score)
