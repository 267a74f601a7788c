"""
Scoring and selection engine: turns {forecast, sentiment, risk verdict}
into a ranked, constrained, classified pick for one event, and ranks a
whole day of picks against each other.

Modules (in pipeline order)
---------------------------
normalize   : outcome-name matching (exact → containment → Yes/No → none)
signals     : forecast_probability() + market_probability_and_volume()
              + MatchResultView (blended favorite/underdog/draw)
scorer      : MarketScore + score_candidate(): additive score terms
constraints : evaluate_constraints(): usefulness ceiling, draw safeguard
dominance   : is_dominant() + apply_dominance(): lopsided-favorite boost
selector    : select(): primary/secondary with safe-block boost pass
classifier  : classify(): BANKER / VALUE / RISKY
disclaimers : build_disclaimers()
pipeline    : score_all_markets() + generate_prediction(): entry points
daily_cap   : filter_below_threshold() + apply_daily_cap()
              + apply_daily_cap_by_day()

Every function here is pure: no I/O, no clock (unless the caller omits
``generated_at``), no randomness.
"""

from pick_engine.engine.daily_cap import (
    apply_daily_cap,
    apply_daily_cap_by_day,
    filter_below_threshold,
)
from pick_engine.engine.pipeline import generate_prediction, score_all_markets

__all__ = [
    "apply_daily_cap",
    "apply_daily_cap_by_day",
    "filter_below_threshold",
    "generate_prediction",
    "score_all_markets",
]
