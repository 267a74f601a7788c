"""
Market taxonomy: the closed catalogue of wager markets and their selections.

Four market types are supported, no more:
  - ``MarketType.MATCH_RESULT``  : Home Win / Draw / Away Win
  - ``MarketType.DOUBLE_CHANCE`` : 1X / X2 / 12
  - ``MarketType.OVER_1_5``      : Over 1.5 / Under 1.5
  - ``MarketType.OVER_2_5``      : Over 2.5 / Under 2.5

``SCORED_CANDIDATES`` lists the seven (market, selection) pairs the engine
scores for every event, in scoring order.

Signal vocabularies used by forecasts and risk reviews (``ConfidenceLevel``,
``CautionLevel``, ``LeanDirection``) and the engine's output vocabulary
(``PredictionCategory``, ``OutcomeResult``) also live here.

This module has NO imports from any other ``pick_engine`` package.
"""

from enum import StrEnum


class MarketType(StrEnum):
    """Supported wager market types."""

    MATCH_RESULT = "MATCH_RESULT"
    DOUBLE_CHANCE = "DOUBLE_CHANCE"
    OVER_1_5 = "OVER_1_5"
    OVER_2_5 = "OVER_2_5"

    @property
    def display_name(self) -> str:
        return MARKET_DISPLAY_NAMES[self]

    @property
    def is_safety_net(self) -> bool:
        """True for the low-payout markets (Double Chance, Over 1.5)."""
        return self in SAFETY_NET_MARKETS

    @property
    def is_goal_line(self) -> bool:
        return self in (MarketType.OVER_1_5, MarketType.OVER_2_5)


class ConfidenceLevel(StrEnum):
    """Categorical confidence attached to a forecast."""

    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class CautionLevel(StrEnum):
    """Risk reviewer's overall caution verdict."""

    NONE = "none"
    MILD = "mild"
    STRONG = "strong"


class LeanDirection(StrEnum):
    """Qualitative direction a forecast leans towards."""

    HOME = "HOME"
    DRAW = "DRAW"
    AWAY = "AWAY"
    NEUTRAL = "NEUTRAL"


class PredictionCategory(StrEnum):
    """Qualitative risk bucket of a prediction.

    There is no separate NO_BET value: a RISKY prediction whose top score is
    under the minimum threshold is dropped by the daily cap instead.
    """

    BANKER = "BANKER"
    VALUE = "VALUE"
    RISKY = "RISKY"


class OutcomeResult(StrEnum):
    """Settled result of a graded selection."""

    WIN = "WIN"
    LOSS = "LOSS"
    PUSH = "PUSH"
    VOID = "VOID"


class EventStatus(StrEnum):
    """Lifecycle status reported by the schedule provider."""

    SCHEDULED = "SCHEDULED"
    TIMED = "TIMED"
    LIVE = "LIVE"
    IN_PLAY = "IN_PLAY"
    PAUSED = "PAUSED"
    FINISHED = "FINISHED"
    POSTPONED = "POSTPONED"
    CANCELLED = "CANCELLED"
    SUSPENDED = "SUSPENDED"


# ── Canonical selections ──────────────────────────────────────────────────────

HOME_WIN = "Home Win"
DRAW = "Draw"
AWAY_WIN = "Away Win"
HOME_OR_DRAW = "1X"
AWAY_OR_DRAW = "X2"
HOME_OR_AWAY = "12"
OVER_1_5 = "Over 1.5"
UNDER_1_5 = "Under 1.5"
OVER_2_5 = "Over 2.5"
UNDER_2_5 = "Under 2.5"

MARKET_DISPLAY_NAMES: dict[MarketType, str] = {
    MarketType.MATCH_RESULT: "Match Result",
    MarketType.DOUBLE_CHANCE: "Double Chance",
    MarketType.OVER_1_5: "Over 1.5 Goals",
    MarketType.OVER_2_5: "Over 2.5 Goals",
}

MARKET_SELECTIONS: dict[MarketType, tuple[str, ...]] = {
    MarketType.MATCH_RESULT: (HOME_WIN, DRAW, AWAY_WIN),
    MarketType.DOUBLE_CHANCE: (HOME_OR_DRAW, AWAY_OR_DRAW, HOME_OR_AWAY),
    MarketType.OVER_1_5: (OVER_1_5, UNDER_1_5),
    MarketType.OVER_2_5: (OVER_2_5, UNDER_2_5),
}

SAFETY_NET_MARKETS: frozenset[MarketType] = frozenset(
    {MarketType.DOUBLE_CHANCE, MarketType.OVER_1_5}
)

SCORED_CANDIDATES: tuple[tuple[MarketType, str], ...] = (
    (MarketType.MATCH_RESULT, HOME_WIN),
    (MarketType.MATCH_RESULT, AWAY_WIN),
    (MarketType.MATCH_RESULT, DRAW),
    (MarketType.DOUBLE_CHANCE, HOME_OR_DRAW),
    (MarketType.DOUBLE_CHANCE, AWAY_OR_DRAW),
    (MarketType.OVER_1_5, OVER_1_5),
    (MarketType.OVER_2_5, OVER_2_5),
)


def is_match_result_draw(market_type: MarketType | str, selection: str) -> bool:
    """True only for the Draw selection of the Match Result market."""
    return market_type == MarketType.MATCH_RESULT and "draw" in selection.lower()


def is_expressive(market_type: MarketType | str, selection: str) -> bool:
    """True for clear-position candidates: non-Draw Match Result and Over 2.5."""
    if market_type == MarketType.OVER_2_5:
        return True
    return market_type == MarketType.MATCH_RESULT and not is_match_result_draw(
        market_type, selection
    )
