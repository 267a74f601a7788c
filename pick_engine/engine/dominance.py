"""
Dominance adjuster: in lopsided fixtures, favor expressive markets.

Trigger (all must hold)
    caution level is not "strong"
    blended favorite  >= 60%
    blended underdog  <= 25%
    sentiment available and total volume across all markets >= 500

Adjustment
    +8 to every non-Draw Match Result candidate and to Over 2.5.
    Double Chance and Over 1.5 are left unchanged; Draw is never boosted.
"""

from __future__ import annotations

import dataclasses
from typing import Optional

from pick_engine.config import EngineConfig
from pick_engine.engine.scorer import MarketScore
from pick_engine.engine.signals import MatchResultView
from pick_engine.models.forecast import Forecast
from pick_engine.models.sentiment import SentimentSnapshot
from pick_engine.taxonomy.market_taxonomy import CautionLevel, is_expressive


def is_dominant(
    forecast: Forecast,
    snapshot: Optional[SentimentSnapshot],
    view: MatchResultView,
    config: EngineConfig,
) -> bool:
    """True when the dominance override applies to this event."""
    if forecast.risk.caution_level == CautionLevel.STRONG:
        return False
    if forecast.probabilities is None:
        return False

    dc = config.dominance
    if view.favorite < dc.favorite_min_probability:
        return False
    if view.underdog > dc.underdog_max_probability:
        return False

    if snapshot is None or not snapshot.available:
        return False
    return snapshot.total_volume >= dc.min_total_volume


def apply_dominance(
    scores: list[MarketScore],
    dominant: bool,
    config: EngineConfig,
) -> list[MarketScore]:
    """Return a new list with the expressive boost applied when ``dominant``."""
    if not dominant:
        return list(scores)
    boost = config.dominance.expressive_boost
    return [
        dataclasses.replace(s, dominance_boost=s.dominance_boost + boost)
        if is_expressive(s.market_type, s.selection)
        else s
        for s in scores
    ]
