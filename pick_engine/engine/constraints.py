"""
Constraint evaluator: flags candidates that may not be the primary pick.

Blocked candidates stay in the ranking and may still be reported as
secondary or "other market" tips; only the primary slot is forbidden.

Usefulness ceiling (active only when the blended favorite >= 68%)
    Over 1.5 blocked if its forecast probability > 78%.
    Double Chance blocked if its forecast probability > 75%.

Draw safeguard (Match-Result Draw only)
    Blocked if the blended Draw probability < 15%,
    or if the blended favorite probability > 65%.
"""

from __future__ import annotations

import dataclasses
from typing import NamedTuple, Optional

from pick_engine.config import EngineConfig
from pick_engine.engine.scorer import MarketScore
from pick_engine.engine.signals import MatchResultView
from pick_engine.taxonomy.market_taxonomy import MarketType, is_match_result_draw


class BlockCheck(NamedTuple):
    blocked: bool
    reason: Optional[str]


_CLEAR = BlockCheck(False, None)


def usefulness_ceiling(
    market_type: MarketType,
    forecast_prob: float,
    favorite_prob: float,
    config: EngineConfig,
) -> BlockCheck:
    """Block an overwhelmingly safe pick when a clear favorite already exists."""
    cc = config.constraints
    if favorite_prob < cc.ceiling_favorite_threshold:
        return _CLEAR

    ceiling: Optional[float] = None
    if market_type == MarketType.OVER_1_5:
        ceiling = cc.over_1_5_ceiling
    elif market_type == MarketType.DOUBLE_CHANCE:
        ceiling = cc.double_chance_ceiling

    if ceiling is not None and forecast_prob > ceiling:
        return BlockCheck(
            True,
            f"{market_type.display_name} at {_pct(forecast_prob)} is too safe "
            f"for a primary pick (favorite at {_pct(favorite_prob)})",
        )
    return _CLEAR


def draw_safeguard(
    market_type: MarketType,
    selection: str,
    view: MatchResultView,
    config: EngineConfig,
) -> BlockCheck:
    """Block a Match-Result Draw that is too unlikely or faces a strong favorite."""
    if not is_match_result_draw(market_type, selection):
        return _CLEAR

    cc = config.constraints
    if view.draw < cc.draw_min_probability:
        return BlockCheck(
            True, f"Draw at {_pct(view.draw)} is too unlikely for a primary pick"
        )
    if view.favorite > cc.draw_max_favorite_probability:
        return BlockCheck(
            True,
            f"Strong favorite ({_pct(view.favorite)}) makes Draw unsuitable "
            f"as a primary pick",
        )
    return _CLEAR


def evaluate_constraints(
    score: MarketScore,
    view: MatchResultView,
    config: EngineConfig,
) -> MarketScore:
    """Return ``score`` with ``blocked_as_primary``/``block_reason`` set.

    The usefulness ceiling's reason wins when both checks fire.
    """
    ceiling = usefulness_ceiling(
        score.market_type, score.forecast_probability, view.favorite, config
    )
    draw = draw_safeguard(score.market_type, score.selection, view, config)
    blocked = ceiling.blocked or draw.blocked
    return dataclasses.replace(
        score,
        blocked_as_primary=blocked,
        block_reason=ceiling.reason or draw.reason,
    )


def _pct(prob: float) -> str:
    return f"{prob:.0%}"
