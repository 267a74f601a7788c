"""
Classifier: map the primary pick to BANKER / VALUE / RISKY.

Rules (evaluated in order, first match wins):
    1. Match-Result Draw : VALUE if score >= 55 else RISKY (never BANKER).
    2. Sanity block      : market probability present AND
                           |forecast − market| > 25 points AND caution != none.
    3. BANKER            : score >= 70 AND caution != strong AND no sanity block.
    4. VALUE             : score >= 55.
    5. RISKY             : everything else, including scores under the
                           minimum threshold; the daily cap turns those into
                           an actual no-bet.
"""

from __future__ import annotations

from pick_engine.config import EngineConfig
from pick_engine.engine.scorer import MarketScore
from pick_engine.models.forecast import RiskVerdict
from pick_engine.taxonomy.market_taxonomy import CautionLevel, PredictionCategory


def sanity_block(
    score: MarketScore,
    verdict: RiskVerdict,
    config: EngineConfig,
) -> bool:
    """True when a large forecast/market divergence meets any reviewer concern."""
    if score.market_probability is None:
        return False
    divergence = abs(score.forecast_probability - score.market_probability)
    return (
        divergence > config.classification.sanity_max_divergence
        and verdict.caution_level != CautionLevel.NONE
    )


def classify(
    score: MarketScore,
    verdict: RiskVerdict,
    config: EngineConfig,
) -> PredictionCategory:
    """Determine the category of the primary pick."""
    cc = config.classification
    final = score.final_score

    if score.is_draw:
        return PredictionCategory.VALUE if final >= cc.value_min_score else PredictionCategory.RISKY

    if (
        final >= cc.banker_min_score
        and verdict.caution_level != CautionLevel.STRONG
        and not sanity_block(score, verdict, config)
    ):
        return PredictionCategory.BANKER

    if final >= cc.value_min_score:
        return PredictionCategory.VALUE

    return PredictionCategory.RISKY
