"""
Signal accessors: extract probabilities and volume for any (market, selection)
pair from the forecast and the sentiment snapshot.

forecast_probability()
    Forecast's probability for the pair.  Double Chance values are sums of
    the relevant match-result probabilities (no renormalization).  A forecast
    without a probability block yields a neutral 0.5.

market_probability_and_volume()
    Sentiment probability and market volume for the pair.  The probability is
    ``None``, not 0.0, when the snapshot is absent, the market is missing, or
    no outcome label matches; ``None`` disables divergence/alignment signals
    downstream instead of penalizing them.

MatchResultView
    Blended (forecast + market average, else forecast alone) home/draw/away
    probabilities with favorite and underdog, read by the constraint
    evaluator and the dominance adjuster.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple, Optional

from pick_engine.engine.normalize import match_outcome, normalize_label
from pick_engine.models.forecast import Forecast
from pick_engine.models.sentiment import SentimentSnapshot
from pick_engine.taxonomy.market_taxonomy import (
    AWAY_WIN,
    DRAW,
    HOME_WIN,
    MarketType,
)

NEUTRAL_PROBABILITY = 0.5


class MarketSignal(NamedTuple):
    probability: Optional[float]
    volume: float


def forecast_probability(
    forecast: Forecast,
    market_type: MarketType,
    selection: str,
) -> float:
    """Return the forecast's probability for ``(market_type, selection)``."""
    probs = forecast.probabilities
    if probs is None:
        return NEUTRAL_PROBABILITY

    sel = normalize_label(selection)

    if market_type == MarketType.MATCH_RESULT:
        if "home" in sel:
            return probs.home_win
        if "away" in sel:
            return probs.away_win
        if "draw" in sel:
            return probs.draw

    elif market_type == MarketType.DOUBLE_CHANCE:
        if sel == "1x":
            return probs.home_win + probs.draw
        if sel == "x2":
            return probs.away_win + probs.draw
        if sel == "12":
            return probs.home_win + probs.away_win

    elif market_type == MarketType.OVER_1_5:
        return 1.0 - probs.over_1_5 if "under" in sel else probs.over_1_5

    elif market_type == MarketType.OVER_2_5:
        return 1.0 - probs.over_2_5 if "under" in sel else probs.over_2_5

    return NEUTRAL_PROBABILITY


def market_probability_and_volume(
    snapshot: Optional[SentimentSnapshot],
    market_type: MarketType,
    selection: str,
) -> MarketSignal:
    """Return ``(probability | None, volume)`` for ``(market_type, selection)``.

    Volume is the matched market's traded volume even when no outcome label
    matches; it is 0 when the market itself is missing.
    """
    if snapshot is None:
        return MarketSignal(None, 0.0)

    market = snapshot.market(market_type)
    if market is None:
        return MarketSignal(None, 0.0)

    outcome = match_outcome(market.outcomes, market_type, selection)
    return MarketSignal(
        outcome.probability if outcome is not None else None,
        market.volume,
    )


def blend(forecast_prob: float, market_prob: Optional[float]) -> float:
    """Average of forecast and market probability; forecast alone if no market."""
    if market_prob is None:
        return forecast_prob
    return (forecast_prob + market_prob) / 2.0


@dataclass(frozen=True)
class MatchResultView:
    """Blended match-result probabilities for one event."""

    home: float
    draw: float
    away: float

    @property
    def favorite(self) -> float:
        return max(self.home, self.away)

    @property
    def underdog(self) -> float:
        return min(self.home, self.away)


def match_result_view(
    forecast: Forecast,
    snapshot: Optional[SentimentSnapshot],
) -> MatchResultView:
    """Blend forecast and sentiment for Home Win, Draw and Away Win."""

    def _blended(selection: str) -> float:
        fp = forecast_probability(forecast, MarketType.MATCH_RESULT, selection)
        mp = market_probability_and_volume(
            snapshot, MarketType.MATCH_RESULT, selection
        ).probability
        return blend(fp, mp)

    return MatchResultView(
        home=_blended(HOME_WIN),
        draw=_blended(DRAW),
        away=_blended(AWAY_WIN),
    )
