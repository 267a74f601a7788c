"""
Market scorer: computes the additive score of one candidate (market, selection).

Score formula (integer points)
------------------------------
    final = base
          + sentiment_signal          # volume bonus + alignment bonus
          + low_payout_penalty        # near-certain safety-net pick
          + confidence_bonus          # forecast confidence level
          + risk_penalty              # caution x confidence table (+ both flags)
          + probability_tiebreak      # 0 at 40% → +8 at 70%
          + divergence_signal         # forecast vs market gap
          + low_probability_penalty   # coin-flip match winner
          + dominance_boost           # set by the dominance adjuster
          + selection_boost           # set by the selector's safe-block pass

Term details
------------
base:
    Match Result 50, Over 2.5 50, Double Chance 48, Over 1.5 46.

sentiment_signal (0 when the snapshot is absent):
    +10 if market volume >= 1000.
    +10 if |forecast − market| <= 0.15 AND either probability >= 0.35
    (two low Draw estimates agreeing earn nothing).

low_payout_penalty:
    −10 for Double Chance / Over 1.5 when forecast probability >= 0.96.
    Kept out of ``sentiment_signal`` because it depends on the forecast only.

confidence_bonus:
    HIGH 20, MEDIUM 10, LOW 0.

risk_penalty:
    Caution penalty from the (confidence x caution) table, plus the
    combined-flags penalty when overconfidence AND missing_context are set.
    Both shrink as forecast confidence decreases.

probability_tiebreak:
    Uses the market probability when present, else the forecast's.
    0 below 40%; round((p − 0.40) × 8 / 0.30), capped at 8.

divergence_signal (0 without a market probability):
    +5 if forecast exceeds market by > 10 points and confidence is HIGH.
    −5 if forecast is > 15 points below market.

low_probability_penalty:
    −8 for non-Draw Match Result picks with forecast probability < 55%.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from pick_engine.config import EngineConfig
from pick_engine.models.forecast import RiskVerdict
from pick_engine.taxonomy.market_taxonomy import (
    ConfidenceLevel,
    MarketType,
    is_match_result_draw,
)


@dataclass(frozen=True)
class MarketScore:
    """Full score breakdown for one candidate.

    Attributes:
        market_type:             Catalogue market.
        selection:               Canonical selection text.
        base_score:              Fixed per-market base.
        sentiment_signal:        Volume + alignment bonus.
        low_payout_penalty:      Near-certain safety-net penalty.
        confidence_bonus:        Forecast confidence bonus.
        risk_penalty:            Risk-review penalty.
        probability_tiebreak:    Probability-scaled tiebreak bonus.
        divergence_signal:       Forecast/market divergence signal.
        low_probability_penalty: Coin-flip match-winner penalty.
        forecast_probability:    Forecast probability used.
        market_probability:      Sentiment probability used, or ``None``.
        volume:                  Sentiment market volume (0 when absent).
        reasoning:               Human-readable one-liner.
        blocked_as_primary:      Constraint forbids this as the primary pick.
        block_reason:            Why it is blocked, or ``None``.
        dominance_boost:         Added by the dominance adjuster.
        selection_boost:         Added by the selector's safe-block pass.
    """

    market_type:             MarketType
    selection:               str
    base_score:              int
    sentiment_signal:        int
    low_payout_penalty:      int
    confidence_bonus:        int
    risk_penalty:            int
    probability_tiebreak:    int
    divergence_signal:       int
    low_probability_penalty: int
    forecast_probability:    float
    market_probability:      Optional[float]
    volume:                  float
    reasoning:               str
    blocked_as_primary:      bool = False
    block_reason:            Optional[str] = None
    dominance_boost:         int = 0
    selection_boost:         int = 0

    @property
    def final_score(self) -> int:
        return (
            self.base_score
            + self.sentiment_signal
            + self.low_payout_penalty
            + self.confidence_bonus
            + self.risk_penalty
            + self.probability_tiebreak
            + self.divergence_signal
            + self.low_probability_penalty
            + self.dominance_boost
            + self.selection_boost
        )

    @property
    def key(self) -> tuple[MarketType, str]:
        return (self.market_type, self.selection)

    @property
    def is_draw(self) -> bool:
        return is_match_result_draw(self.market_type, self.selection)

    def describe(self) -> str:
        """Compact breakdown for log lines."""
        return (
            f"{self.market_type} {self.selection}: {self.final_score} "
            f"(base={self.base_score}, sent={self.sentiment_signal}, "
            f"payout={self.low_payout_penalty}, conf={self.confidence_bonus}, "
            f"risk={self.risk_penalty}, tie={self.probability_tiebreak}, "
            f"div={self.divergence_signal}, lowp={self.low_probability_penalty}, "
            f"dom={self.dominance_boost}, boost={self.selection_boost}, "
            f"blocked={self.blocked_as_primary})"
        )


# ── Term functions ────────────────────────────────────────────────────────────

def sentiment_signal(
    volume: float,
    forecast_prob: float,
    market_prob: Optional[float],
    config: EngineConfig,
) -> int:
    """Volume bonus + alignment bonus.  Zero when there is no sentiment market."""
    sc = config.scoring
    signal = 0
    if volume >= sc.volume_threshold:
        signal += sc.volume_bonus
    if market_prob is not None:
        gap = abs(forecast_prob - market_prob)
        meaningful = (
            forecast_prob >= sc.alignment_min_probability
            or market_prob >= sc.alignment_min_probability
        )
        if gap <= sc.alignment_max_gap and meaningful:
            signal += sc.alignment_bonus
    return signal


def low_payout_penalty(
    market_type: MarketType,
    forecast_prob: float,
    config: EngineConfig,
) -> int:
    sc = config.scoring
    if market_type.is_safety_net and forecast_prob >= sc.low_payout_threshold:
        return sc.low_payout_penalty
    return 0


def confidence_bonus(confidence: ConfidenceLevel, config: EngineConfig) -> int:
    return config.scoring.confidence_bonus.get(confidence, 0)


def risk_penalty(
    verdict: RiskVerdict,
    confidence: ConfidenceLevel,
    config: EngineConfig,
) -> int:
    """Caution penalty scaled by forecast confidence, plus combined-flags penalty."""
    penalty = config.risk.caution_penalty(confidence, verdict.caution_level)
    if verdict.both_flags:
        penalty += config.risk.row(confidence).combined_flags
    return penalty


def probability_tiebreak(
    forecast_prob: float,
    market_prob: Optional[float],
    config: EngineConfig,
) -> int:
    sc = config.scoring
    prob = market_prob if market_prob is not None else forecast_prob
    if prob < sc.tiebreak_floor:
        return 0
    span = sc.tiebreak_ceiling - sc.tiebreak_floor
    scaled = (prob - sc.tiebreak_floor) * sc.tiebreak_max_points / span
    return min(sc.tiebreak_max_points, _round_half_up(scaled))


def divergence_signal(
    forecast_prob: float,
    market_prob: Optional[float],
    confidence: ConfidenceLevel,
    config: EngineConfig,
) -> int:
    if market_prob is None:
        return 0
    sc = config.scoring
    divergence = forecast_prob - market_prob
    if divergence > sc.divergence_value_gap and confidence == ConfidenceLevel.HIGH:
        return sc.divergence_value_bonus
    if divergence < -sc.divergence_contra_gap:
        return sc.divergence_contra_penalty
    return 0


def low_probability_penalty(
    market_type: MarketType,
    selection: str,
    forecast_prob: float,
    config: EngineConfig,
) -> int:
    sc = config.scoring
    if (
        market_type == MarketType.MATCH_RESULT
        and not is_match_result_draw(market_type, selection)
        and forecast_prob < sc.low_probability_threshold
    ):
        return sc.low_probability_penalty
    return 0


# ── Candidate scoring ─────────────────────────────────────────────────────────

def score_candidate(
    market_type:   MarketType,
    selection:     str,
    forecast_prob: float,
    market_prob:   Optional[float],
    volume:        float,
    confidence:    ConfidenceLevel,
    verdict:       RiskVerdict,
    reasoning:     str,
    config:        EngineConfig,
) -> MarketScore:
    """Compute every score term for one candidate.  Constraint flags are unset."""
    return MarketScore(
        market_type=market_type,
        selection=selection,
        base_score=config.scoring.base_scores[market_type],
        sentiment_signal=sentiment_signal(volume, forecast_prob, market_prob, config),
        low_payout_penalty=low_payout_penalty(market_type, forecast_prob, config),
        confidence_bonus=confidence_bonus(confidence, config),
        risk_penalty=risk_penalty(verdict, confidence, config),
        probability_tiebreak=probability_tiebreak(forecast_prob, market_prob, config),
        divergence_signal=divergence_signal(
            forecast_prob, market_prob, confidence, config
        ),
        low_probability_penalty=low_probability_penalty(
            market_type, selection, forecast_prob, config
        ),
        forecast_probability=forecast_prob,
        market_probability=market_prob,
        volume=volume,
        reasoning=reasoning,
    )


def rank_scores(scores: list[MarketScore]) -> list[MarketScore]:
    """Sort by final score descending; a Match-Result Draw loses every exact tie.

    The sort is stable, so remaining ties keep scoring order.
    """
    return sorted(scores, key=lambda s: (-s.final_score, s.is_draw))


# ── Helper ────────────────────────────────────────────────────────────────────

def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))
