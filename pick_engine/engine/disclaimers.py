"""
Disclaimer builder: assemble the caveat list shown with a prediction.

Order
-----
1. Up to two of the forecast's own concerns.
2. Overconfidence flag (reviewer's reason text if given).
3. Missing-context flag (reviewer's reason text if given).
4. Caution level note for mild / strong.
5. VALUE: potential mispricing note.
6. RISKY: below-threshold note and low-confidence note where applicable.
7. The block reason when the primary was only chosen via fallback.
8. RISKY with nothing else: a generic "conflicting signals" note.
"""

from __future__ import annotations

from pick_engine.config import EngineConfig
from pick_engine.engine.scorer import MarketScore
from pick_engine.models.forecast import Forecast
from pick_engine.taxonomy.market_taxonomy import (
    CautionLevel,
    ConfidenceLevel,
    PredictionCategory,
)

OVERCONFIDENCE_NOTE = "Analysis may overstate confidence."
MISSING_CONTEXT_NOTE = "Some context may be missing from analysis."
STRONG_CAUTION_NOTE = "Strong caution advised - significant risk factors."
MILD_CAUTION_NOTE = "Some concerns noted in risk review."
VALUE_NOTE = "Value play - potential mispricing identified."
LOW_CONFIDENCE_NOTE = "Forecast confidence is low."
CONFLICTING_SIGNALS_NOTE = "Conflicting signals in analysis."
INSUFFICIENT_DATA_NOTE = "Insufficient data - proceed with caution."

_MAX_CONCERNS = 2


def build_disclaimers(
    forecast: Forecast,
    category: PredictionCategory,
    primary: MarketScore,
    config: EngineConfig,
) -> list[str]:
    """Return the ordered disclaimer list for a prediction."""
    disclaimers: list[str] = []
    verdict = forecast.risk

    disclaimers.extend(c for c in forecast.concerns[:_MAX_CONCERNS] if c.strip())

    if verdict.overconfidence:
        disclaimers.append(verdict.overconfidence_reason or OVERCONFIDENCE_NOTE)
    if verdict.missing_context:
        disclaimers.append(verdict.missing_context_reason or MISSING_CONTEXT_NOTE)

    if verdict.caution_level == CautionLevel.STRONG:
        disclaimers.append(STRONG_CAUTION_NOTE)
    elif verdict.caution_level == CautionLevel.MILD:
        disclaimers.append(MILD_CAUTION_NOTE)

    if category == PredictionCategory.VALUE:
        disclaimers.append(VALUE_NOTE)

    if category == PredictionCategory.RISKY:
        if primary.final_score < config.daily_cap.min_score:
            disclaimers.append(f"Score {primary.final_score} below threshold.")
        if forecast.confidence == ConfidenceLevel.LOW:
            disclaimers.append(LOW_CONFIDENCE_NOTE)

    if primary.blocked_as_primary and primary.block_reason:
        disclaimers.append(primary.block_reason)

    if category == PredictionCategory.RISKY and not disclaimers:
        disclaimers.append(CONFLICTING_SIGNALS_NOTE)

    return disclaimers
