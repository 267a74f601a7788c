"""
Shared pytest fixtures for the pick-engine test suite.

Provides:
  - ``engine_config``: default ``EngineConfig``.
  - Builder fixtures (``make_event``, ``make_forecast``, ``make_sentiment``)
    returning factories, so each test states only the values it cares about.
  - Sample domain objects and a raw JSON bundle for ingestion / CLI tests.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable, Optional

import pytest

from pick_engine.config import EngineConfig
from pick_engine.models.event import Event, Team
from pick_engine.models.forecast import Forecast, ForecastProbabilities, RiskVerdict
from pick_engine.models.sentiment import MarketOutcome, SentimentMarket, SentimentSnapshot
from pick_engine.taxonomy.market_taxonomy import CautionLevel, ConfidenceLevel, MarketType

KICKOFF = datetime(2026, 10, 18, 15, 0, tzinfo=timezone.utc)


# ── Config ────────────────────────────────────────────────────────────────────

@pytest.fixture
def engine_config() -> EngineConfig:
    return EngineConfig()


# ── Builders ──────────────────────────────────────────────────────────────────

@pytest.fixture
def make_event() -> Callable[..., Event]:
    def _make(
        event_id: int = 1001,
        home: str = "Arsenal FC",
        away: str = "Chelsea FC",
        league_code: str = "EPL",
        kickoff: datetime = KICKOFF,
    ) -> Event:
        return Event(
            event_id=event_id,
            league_code=league_code,
            home_team=Team(team_id=event_id * 10 + 1, name=home, short_name=home.replace(" FC", "")),
            away_team=Team(team_id=event_id * 10 + 2, name=away, short_name=away.replace(" FC", "")),
            kickoff=kickoff,
        )

    return _make


@pytest.fixture
def make_forecast() -> Callable[..., Forecast]:
    def _make(
        home: float = 0.50,
        draw: float = 0.25,
        away: float = 0.25,
        over_1_5: float = 0.70,
        over_2_5: float = 0.50,
        confidence: ConfidenceLevel = ConfidenceLevel.MEDIUM,
        caution: CautionLevel = CautionLevel.NONE,
        overconfidence: bool = False,
        missing_context: bool = False,
        concerns: tuple[str, ...] = (),
        with_probabilities: bool = True,
    ) -> Forecast:
        probs = (
            ForecastProbabilities(
                home_win=home, draw=draw, away_win=away,
                over_1_5=over_1_5, over_2_5=over_2_5,
            )
            if with_probabilities
            else None
        )
        return Forecast(
            probabilities=probs,
            confidence=confidence,
            narrative="Test narrative.",
            key_factors=("Home form",),
            concerns=concerns,
            risk=RiskVerdict(
                overconfidence=overconfidence,
                missing_context=missing_context,
                caution_level=caution,
            ),
        )

    return _make


@pytest.fixture
def make_sentiment() -> Callable[..., SentimentSnapshot]:
    """Factory: ``make_sentiment({MarketType: (volume, {name: prob})})``."""

    def _make(
        markets: Optional[dict[MarketType, tuple[float, dict[str, float]]]] = None,
        event_id: int = 1001,
        available: bool = True,
    ) -> SentimentSnapshot:
        built = tuple(
            SentimentMarket(
                market_type=mt,
                question=f"{mt.display_name}?",
                volume=volume,
                outcomes=tuple(
                    MarketOutcome(name=name, probability=p) for name, p in outcomes.items()
                ),
            )
            for mt, (volume, outcomes) in (markets or {}).items()
        )
        return SentimentSnapshot(event_id=event_id, available=available, markets=built)

    return _make


# ── Sample objects ────────────────────────────────────────────────────────────

@pytest.fixture
def sample_event(make_event) -> Event:
    return make_event()


@pytest.fixture
def sample_forecast(make_forecast) -> Forecast:
    return make_forecast(home=0.62, draw=0.22, away=0.16, over_1_5=0.74, over_2_5=0.52)


@pytest.fixture
def sample_sentiment(make_sentiment) -> SentimentSnapshot:
    return make_sentiment(
        {
            MarketType.MATCH_RESULT: (4000.0, {"Home": 0.60, "Draw": 0.24, "Away": 0.16}),
            MarketType.OVER_2_5: (1500.0, {"Yes": 0.55, "No": 0.45}),
        }
    )


@pytest.fixture
def sample_bundle_dict() -> dict:
    """A raw JSON-ready bundle as read by ``ingestion.payload``."""
    return {
        "event": {
            "event_id": 1001,
            "league_code": "EPL",
            "home_team": {"team_id": 57, "name": "Arsenal FC", "short_name": "Arsenal"},
            "away_team": {"team_id": 61, "name": "Chelsea FC", "short_name": "Chelsea"},
            "kickoff": "2026-10-18T15:00:00Z",
        },
        "sentiment": {
            "event_id": 1001,
            "markets": [
                {
                    "market_type": "MATCH_RESULT",
                    "volume": 4000,
                    "outcomes": [
                        {"name": "Home", "probability": 0.60},
                        {"name": "Draw", "probability": 0.24},
                        {"name": "Away", "probability": 0.16},
                    ],
                }
            ],
        },
        "forecast": {
            "probabilities": {
                "home_win": 0.62, "draw": 0.22, "away_win": 0.16,
                "over_1_5": 0.74, "over_2_5": 0.52,
            },
            "confidence": "MEDIUM",
            "narrative": "Arsenal strong at home.",
            "risk": {"caution_level": "none"},
        },
    }
