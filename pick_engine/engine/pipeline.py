"""
Engine entry points: score_all_markets() and generate_prediction().

Stage order (fixed: later stages read flags set by earlier ones)
-----------------------------------------------------------------
1. signals      : forecast/market probabilities, blended MatchResultView
2. scoring      : score_candidate() for the seven catalogue candidates
3. constraints  : evaluate_constraints() sets blocked_as_primary
4. dominance    : apply_dominance() adds the expressive boost
5. ranking      : rank_scores() (Draw loses ties)
6. selection    : select(): primary / secondary
7. classification + disclaimers → Prediction

Each stage returns a new ``ScoringStage`` record; nothing is mutated in place.

A forecast without a probability block produces no candidates;
generate_prediction() then returns a fixed RISKY fallback (Home Win at 30%).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from pick_engine.config import EngineConfig
from pick_engine.engine.classifier import classify
from pick_engine.engine.constraints import evaluate_constraints
from pick_engine.engine.disclaimers import INSUFFICIENT_DATA_NOTE, build_disclaimers
from pick_engine.engine.dominance import apply_dominance, is_dominant
from pick_engine.engine.scorer import MarketScore, rank_scores, score_candidate
from pick_engine.engine.selector import select
from pick_engine.engine.signals import (
    MatchResultView,
    forecast_probability,
    market_probability_and_volume,
    match_result_view,
)
from pick_engine.models.event import Event
from pick_engine.models.forecast import Forecast
from pick_engine.models.prediction import MarketSelection, Prediction
from pick_engine.models.sentiment import SentimentSnapshot
from pick_engine.taxonomy.market_taxonomy import (
    AWAY_OR_DRAW,
    AWAY_WIN,
    DRAW,
    HOME_OR_DRAW,
    HOME_WIN,
    OVER_1_5,
    OVER_2_5,
    SCORED_CANDIDATES,
    MarketType,
    PredictionCategory,
)
from pick_engine.utils.time_utils import utcnow

logger = logging.getLogger(__name__)

FALLBACK_CONFIDENCE = 30
FALLBACK_REASONING = "Insufficient data for analysis."
FALLBACK_NARRATIVE = "Analysis unavailable."


@dataclass(frozen=True)
class ScoringStage:
    """Immutable intermediate record passed between pipeline stages."""

    view:     MatchResultView
    scores:   tuple[MarketScore, ...]
    dominant: bool = False


# ── Stages ────────────────────────────────────────────────────────────────────

def _reasoning(event: Event, market_type: MarketType, selection: str) -> str:
    home = event.home_team.label
    away = event.away_team.label
    return {
        (MarketType.MATCH_RESULT, HOME_WIN): f"{home} to win at home",
        (MarketType.MATCH_RESULT, AWAY_WIN): f"{away} to win away",
        (MarketType.MATCH_RESULT, DRAW): "Match to end in a draw",
        (MarketType.DOUBLE_CHANCE, HOME_OR_DRAW): f"{home} win or draw",
        (MarketType.DOUBLE_CHANCE, AWAY_OR_DRAW): f"{away} win or draw",
        (MarketType.OVER_1_5, OVER_1_5): "At least 2 goals in the match",
        (MarketType.OVER_2_5, OVER_2_5): "At least 3 goals in the match",
    }.get((market_type, selection), f"{market_type.display_name}: {selection}")


def _score_stage(
    event: Event,
    snapshot: Optional[SentimentSnapshot],
    forecast: Forecast,
    config: EngineConfig,
) -> ScoringStage:
    """Signals → per-candidate score terms → constraint flags."""
    view = match_result_view(forecast, snapshot)
    scores: list[MarketScore] = []
    for market_type, selection in SCORED_CANDIDATES:
        forecast_prob = forecast_probability(forecast, market_type, selection)
        market_prob, volume = market_probability_and_volume(
            snapshot, market_type, selection
        )
        score = score_candidate(
            market_type=market_type,
            selection=selection,
            forecast_prob=forecast_prob,
            market_prob=market_prob,
            volume=volume,
            confidence=forecast.confidence,
            verdict=forecast.risk,
            reasoning=_reasoning(event, market_type, selection),
            config=config,
        )
        scores.append(evaluate_constraints(score, view, config))
    return ScoringStage(view=view, scores=tuple(scores))


def _dominance_stage(
    stage: ScoringStage,
    snapshot: Optional[SentimentSnapshot],
    forecast: Forecast,
    config: EngineConfig,
) -> ScoringStage:
    dominant = is_dominant(forecast, snapshot, stage.view, config)
    if dominant:
        logger.debug("Dominance override active | favorite=%.2f", stage.view.favorite)
    adjusted = apply_dominance(list(stage.scores), dominant, config)
    return ScoringStage(
        view=stage.view,
        scores=tuple(rank_scores(adjusted)),
        dominant=dominant,
    )


# ── Entry points ──────────────────────────────────────────────────────────────

def score_all_markets(
    event: Event,
    sentiment: Optional[SentimentSnapshot],
    forecast: Forecast,
    config: Optional[EngineConfig] = None,
) -> list[MarketScore]:
    """Score all seven catalogue candidates for ``event``.

    Args:
        event:     Fixture being scored (read-only).
        sentiment: Sentiment snapshot, or ``None`` when absent.
        forecast:  Forecast with its attached risk verdict.
        config:    Engine tunables; defaults to ``EngineConfig()``.

    Returns:
        Candidates ranked by final score (dominance adjustment included),
        or an empty list when the forecast has no probability block.
    """
    cfg = config or EngineConfig()
    if forecast.probabilities is None:
        return []
    stage = _score_stage(event, sentiment, forecast, cfg)
    stage = _dominance_stage(stage, sentiment, forecast, cfg)
    return list(stage.scores)


def to_selection(score: MarketScore) -> MarketSelection:
    return MarketSelection(
        market_type=score.market_type,
        selection=score.selection,
        confidence=max(0, min(100, score.final_score)),
        reasoning=score.reasoning,
    )


def generate_prediction(
    event: Event,
    sentiment: Optional[SentimentSnapshot],
    forecast: Forecast,
    config: Optional[EngineConfig] = None,
    generated_at: Optional[datetime] = None,
) -> Prediction:
    """Run the full pipeline and return a new ``Prediction`` for ``event``.

    Args:
        event:        Fixture being predicted.
        sentiment:    Sentiment snapshot, or ``None``.
        forecast:     Forecast with its attached risk verdict.
        config:       Engine tunables; defaults to ``EngineConfig()``.
        generated_at: Timestamp to stamp on the prediction; current UTC time
                      when omitted.  Not part of the determinism contract.

    Returns:
        A frozen ``Prediction``.  Never raises for absent optional input.
    """
    cfg = config or EngineConfig()
    stamp = generated_at or utcnow()
    ranked = score_all_markets(event, sentiment, forecast, cfg)

    if not ranked:
        logger.info("No forecast probabilities; using fallback", extra={"event_id": event.event_id})
        return Prediction(
            event_id=event.event_id,
            generated_at=stamp,
            category=PredictionCategory.RISKY,
            primary=MarketSelection(
                market_type=MarketType.MATCH_RESULT,
                selection=HOME_WIN,
                confidence=FALLBACK_CONFIDENCE,
                reasoning=FALLBACK_REASONING,
            ),
            top_score=FALLBACK_CONFIDENCE,
            narrative=forecast.narrative or FALLBACK_NARRATIVE,
            key_factors=forecast.key_factors,
            disclaimers=(INSUFFICIENT_DATA_NOTE,),
        )

    result = select(ranked, cfg)
    primary = result.primary
    category = classify(primary, forecast.risk, cfg)
    disclaimers = build_disclaimers(forecast, category, primary, cfg)
    logger.debug(
        "Classified %s (top_score=%d)", category, primary.final_score,
        extra={"event_id": event.event_id},
    )

    others = [s for s in result.ranked if s.key != primary.key]
    others = others[: cfg.selection.other_markets_limit]

    return Prediction(
        event_id=event.event_id,
        generated_at=stamp,
        category=category,
        primary=to_selection(primary),
        secondary=to_selection(result.secondary) if result.secondary else None,
        other_markets=tuple(to_selection(s) for s in others),
        top_score=primary.final_score,
        narrative=forecast.narrative,
        key_factors=forecast.key_factors,
        disclaimers=tuple(disclaimers),
    )
