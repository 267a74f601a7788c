"""
Selector: choose the primary and the optional secondary pick.

Steps
-----
1. If any Double Chance / Over 1.5 candidate is blocked, add +4 to every
   expressive candidate (non-Draw Match Result, Over 2.5) and re-rank.  This
   keeps the remaining unblocked field from being weak only because the safe
   options were disqualified.
2. Ranking is by final score descending; a Match-Result Draw never wins a tie.
3. Primary = first unblocked candidate.  If all are blocked, the top
   candidate is returned anyway and the fallback is flagged.
4. Secondary = first candidate of the unboosted ranking (primary skipped)
   within 15 points of the primary's score, of a different market type, and
   not in a forbidden-correlation pair with the primary.  May be ``None``.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from typing import Optional

from pick_engine.config import EngineConfig
from pick_engine.engine.scorer import MarketScore, rank_scores
from pick_engine.taxonomy.market_taxonomy import is_expressive

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SelectionResult:
    """Outcome of the selection stage.

    Attributes:
        ranked:            Unboosted ranking (as produced by scoring + dominance).
        adjusted:          Ranking after the safe-block boost pass (same as
                           ``ranked`` when the pass did not run).
        primary:           Chosen primary candidate (carries any boost).
        secondary:         Chosen secondary candidate, or ``None``.
        safe_block_boost:  True when the safe-block boost pass ran.
        used_fallback:     True when every candidate was blocked.
    """

    ranked:           tuple[MarketScore, ...]
    adjusted:         tuple[MarketScore, ...]
    primary:          MarketScore
    secondary:        Optional[MarketScore]
    safe_block_boost: bool
    used_fallback:    bool


def safe_markets_blocked(scores: list[MarketScore]) -> bool:
    return any(s.blocked_as_primary and s.market_type.is_safety_net for s in scores)


def apply_safe_block_boost(
    scores: list[MarketScore],
    config: EngineConfig,
) -> list[MarketScore]:
    """Boost expressive candidates and re-rank."""
    boost = config.selection.safe_block_boost
    boosted = [
        dataclasses.replace(s, selection_boost=s.selection_boost + boost)
        if is_expressive(s.market_type, s.selection)
        else s
        for s in scores
    ]
    return rank_scores(boosted)


def select_primary(adjusted: list[MarketScore]) -> tuple[MarketScore, bool]:
    """Return ``(primary, used_fallback)``.  ``adjusted`` must be non-empty."""
    for score in adjusted:
        if not score.blocked_as_primary:
            return score, False
    logger.warning(
        "All %d candidates blocked as primary; falling back to %s %s",
        len(adjusted), adjusted[0].market_type, adjusted[0].selection,
    )
    return adjusted[0], True


def select_secondary(
    ranked: list[MarketScore],
    primary: MarketScore,
    config: EngineConfig,
) -> Optional[MarketScore]:
    sc = config.selection
    for candidate in ranked:
        if candidate.key == primary.key:
            continue
        if primary.final_score - candidate.final_score > sc.secondary_margin:
            continue
        if candidate.market_type == primary.market_type:
            continue
        if sc.are_correlated(primary.market_type, candidate.market_type):
            continue
        return candidate
    return None


def select(ranked: list[MarketScore], config: EngineConfig) -> SelectionResult:
    """Run the full selection stage over a non-empty, already-ranked list."""
    if not ranked:
        raise ValueError("select() requires at least one candidate.")

    for s in ranked[:5]:
        logger.debug("Candidate %s", s.describe())

    boosted = safe_markets_blocked(ranked)
    if boosted:
        logger.debug("Safe markets blocked; boosting expressive candidates")
        adjusted = apply_safe_block_boost(ranked, config)
    else:
        adjusted = list(ranked)

    primary, used_fallback = select_primary(adjusted)
    secondary = select_secondary(ranked, primary, config)

    logger.info(
        "Selected primary %s %s (score=%d)",
        primary.market_type, primary.selection, primary.final_score,
    )
    return SelectionResult(
        ranked=tuple(ranked),
        adjusted=tuple(adjusted),
        primary=primary,
        secondary=secondary,
        safe_block_boost=boosted,
        used_fallback=used_fallback,
    )
