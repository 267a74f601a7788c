"""
Settlement statistics: running totals of graded picks.

``SettlementStats`` is built by folding ``SettledPick`` records with
``record()``; each call returns a new instance.  Totals are kept overall,
per prediction category, and per market type.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from pick_engine.models.settlement import SettledPick
from pick_engine.taxonomy.market_taxonomy import (
    MarketType,
    OutcomeResult,
    PredictionCategory,
)


class ResultCounts(BaseModel):
    """WIN/LOSS/PUSH/VOID counters."""

    model_config = ConfigDict(frozen=True)

    total: int = 0
    wins: int = 0
    losses: int = 0
    pushes: int = 0
    voids: int = 0

    def add(self, result: OutcomeResult) -> "ResultCounts":
        return ResultCounts(
            total=self.total + 1,
            wins=self.wins + (result == OutcomeResult.WIN),
            losses=self.losses + (result == OutcomeResult.LOSS),
            pushes=self.pushes + (result == OutcomeResult.PUSH),
            voids=self.voids + (result == OutcomeResult.VOID),
        )

    @property
    def win_rate(self) -> float:
        """Wins over decided picks (wins + losses); 0.0 when none are decided."""
        decided = self.wins + self.losses
        return self.wins / decided if decided else 0.0


class SettlementStats(BaseModel):
    """Aggregate of every settled pick."""

    model_config = ConfigDict(frozen=True)

    overall: ResultCounts = ResultCounts()
    by_category: dict[PredictionCategory, ResultCounts] = {
        c: ResultCounts() for c in PredictionCategory
    }
    by_market: dict[MarketType, ResultCounts] = {
        m: ResultCounts() for m in MarketType
    }

    def record(self, pick: SettledPick) -> "SettlementStats":
        by_category = dict(self.by_category)
        by_category[pick.category] = by_category.get(
            pick.category, ResultCounts()
        ).add(pick.result)
        by_market = dict(self.by_market)
        by_market[pick.market_type] = by_market.get(
            pick.market_type, ResultCounts()
        ).add(pick.result)
        return SettlementStats(
            overall=self.overall.add(pick.result),
            by_category=by_category,
            by_market=by_market,
        )


def aggregate(picks: list[SettledPick]) -> SettlementStats:
    stats = SettlementStats()
    for pick in picks:
        stats = stats.record(pick)
    return stats
