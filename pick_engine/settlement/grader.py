"""
Settlement grader: WIN / LOSS / VOID for a selection given the final score.

Match Result   : Home / Draw / Away by keyword in the selection text.
Double Chance  : 1X (home >= away), X2 (away >= home), 12 (not a draw).
Over 1.5 / 2.5 : total goals above the line; Under selections are inverted.

A selection the grader cannot interpret is VOID rather than an error.
"""

from __future__ import annotations

from typing import Optional

from pick_engine.models.prediction import Prediction
from pick_engine.models.settlement import FinalScore, SettledPick
from pick_engine.taxonomy.market_taxonomy import MarketType, OutcomeResult

_GOAL_LINES: dict[MarketType, float] = {
    MarketType.OVER_1_5: 1.5,
    MarketType.OVER_2_5: 2.5,
}


def _win_if(condition: bool) -> OutcomeResult:
    return OutcomeResult.WIN if condition else OutcomeResult.LOSS


def evaluate_selection(
    market_type: MarketType,
    selection: str,
    final_score: FinalScore,
) -> OutcomeResult:
    """Grade a single (market, selection) against ``final_score``."""
    home, away = final_score.home, final_score.away
    sel = selection.strip().lower()

    if market_type == MarketType.MATCH_RESULT:
        if "home" in sel:
            return _win_if(home > away)
        if "away" in sel:
            return _win_if(away > home)
        if "draw" in sel:
            return _win_if(home == away)
        return OutcomeResult.VOID

    if market_type == MarketType.DOUBLE_CHANCE:
        if sel == "1x":
            return _win_if(home >= away)
        if sel == "x2":
            return _win_if(away >= home)
        if sel == "12":
            return _win_if(home != away)
        return OutcomeResult.VOID

    line = _GOAL_LINES.get(market_type)
    if line is None:
        return OutcomeResult.VOID
    over = final_score.total_goals > line
    if "under" in sel:
        return _win_if(not over)
    if "over" in sel:
        return _win_if(over)
    return OutcomeResult.VOID


def evaluate_prediction(
    prediction: Optional[Prediction],
    final_score: FinalScore,
) -> OutcomeResult:
    """Grade the primary pick of ``prediction``; VOID when there is none."""
    if prediction is None:
        return OutcomeResult.VOID
    return evaluate_selection(
        prediction.primary.market_type, prediction.primary.selection, final_score
    )


def settle_prediction(prediction: Prediction, final_score: FinalScore) -> SettledPick:
    """Build the ``SettledPick`` record for ``prediction``."""
    return SettledPick(
        event_id=prediction.event_id,
        category=prediction.category,
        market_type=prediction.primary.market_type,
        selection=prediction.primary.selection,
        confidence=prediction.primary.confidence,
        final_score=final_score,
        result=evaluate_prediction(prediction, final_score),
    )
