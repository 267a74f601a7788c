"""
Forecast and risk-review input models.

``Forecast`` is the probabilistic estimate for one event produced by an
external prediction source.  ``RiskVerdict`` is an independent reviewer's
pass over that forecast; it travels inside the forecast it reviewed so the
engine entry points take a single ``forecast`` argument.

The three match-result probabilities are expected to sum to ~1.0 but are
deliberately NOT validated as a distribution: upstream sources drift, and
the engine tolerates that.  Each individual probability must lie in [0, 1].
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from pick_engine.taxonomy.market_taxonomy import (
    CautionLevel,
    ConfidenceLevel,
    LeanDirection,
    MarketType,
)


class ForecastProbabilities(BaseModel):
    """Probability block for the five forecast outcomes."""

    model_config = ConfigDict(frozen=True)

    home_win: float = Field(ge=0.0, le=1.0)
    draw: float = Field(ge=0.0, le=1.0)
    away_win: float = Field(ge=0.0, le=1.0)
    over_1_5: float = Field(ge=0.0, le=1.0)
    over_2_5: float = Field(ge=0.0, le=1.0)


class RiskVerdict(BaseModel):
    """Reviewer flags.  Only the two booleans and the caution level drive scoring.

    Attributes:
        overconfidence: Reviewer believes the forecast overstates its certainty.
        missing_context: Reviewer believes relevant context was ignored.
        caution_level: Overall caution: none / mild / strong.
        overconfidence_reason: Optional free text shown as a disclaimer.
        missing_context_reason: Optional free text shown as a disclaimer.
    """

    model_config = ConfigDict(frozen=True)

    overconfidence: bool = False
    missing_context: bool = False
    caution_level: CautionLevel = CautionLevel.NONE
    overconfidence_reason: Optional[str] = None
    missing_context_reason: Optional[str] = None

    @property
    def both_flags(self) -> bool:
        return self.overconfidence and self.missing_context


class Forecast(BaseModel):
    """Per-event forecast plus the risk review attached to it.

    Attributes:
        probabilities: Probability block, or ``None`` when the source produced
            none (the engine then returns its fixed fallback prediction).
        confidence: Categorical confidence level.
        lean: Qualitative direction.
        narrative: Free-text analysis, passed through to the prediction.
        key_factors: Bullet points, passed through to the prediction.
        concerns: Source's own caveats; up to two become disclaimers.
        suggested_market: Source's own suggestion (informational only).
        suggested_selection: Source's own suggestion (informational only).
        risk: Reviewer verdict for this forecast.
    """

    model_config = ConfigDict(frozen=True)

    probabilities: Optional[ForecastProbabilities] = None
    confidence: ConfidenceLevel = ConfidenceLevel.LOW
    lean: LeanDirection = LeanDirection.NEUTRAL
    narrative: str = ""
    key_factors: tuple[str, ...] = ()
    concerns: tuple[str, ...] = ()
    suggested_market: Optional[MarketType] = None
    suggested_selection: Optional[str] = None
    risk: RiskVerdict = RiskVerdict()
