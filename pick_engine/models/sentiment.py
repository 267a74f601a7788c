"""
Market sentiment snapshot: externally observed odds and traded volume.

A snapshot may be entirely absent for an event (``None`` at the engine
boundary) or present but flagged ``available=False``; both are treated the
same way: every sentiment-derived signal becomes neutral.

Outcome names are free text from the provider ("Yes", "Arsenal", "Over 2.5",
"Draw (Arsenal vs Chelsea)") and are matched to canonical selections by
``pick_engine.engine.normalize``.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from pick_engine.taxonomy.market_taxonomy import MarketType


class MarketOutcome(BaseModel):
    """One named outcome with its implied probability."""

    model_config = ConfigDict(frozen=True)

    name: str
    probability: float = Field(ge=0.0, le=1.0)
    token_id: Optional[str] = None


class SentimentMarket(BaseModel):
    """One sentiment market mapped onto a canonical market type."""

    model_config = ConfigDict(frozen=True)

    market_type: MarketType
    question: str = ""
    volume: float = Field(default=0.0, ge=0.0)
    outcomes: tuple[MarketOutcome, ...] = ()


class SentimentSnapshot(BaseModel):
    """All sentiment markets observed for one event."""

    model_config = ConfigDict(frozen=True)

    event_id: int
    available: bool = True
    markets: tuple[SentimentMarket, ...] = ()

    @property
    def total_volume(self) -> float:
        """Traded volume summed over every market; 0 when unavailable."""
        if not self.available:
            return 0.0
        return sum(m.volume for m in self.markets)

    def market(self, market_type: MarketType) -> Optional[SentimentMarket]:
        """First market of ``market_type``, or ``None`` (also when unavailable)."""
        if not self.available:
            return None
        for m in self.markets:
            if m.market_type == market_type:
                return m
        return None
