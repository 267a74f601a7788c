"""
Tests for pick_engine/engine/pipeline.py: the engine entry points.

What we test
------------
score_all_markets():
  - Closed catalogue: exactly the seven candidates of the four market types.
  - No probability block -> empty list.
  - No sentiment -> every sentiment and divergence term is 0.

generate_prediction():
  - Determinism: repeated calls give identical predictions.
  - Dominant favorite -> dominance boost, Home Win BANKER.
  - Over 1.5 blocked by the usefulness ceiling even though it
    scores highest; primary falls to an unblocked candidate after the
    expressive boost pass.
  - Strong caution -> VALUE even above the BANKER score, no dominance boost.
  - Draw primary is never BANKER.
  - Secondary never shares the primary's market type or a correlated pair.
  - other_markets excludes the primary and holds at most four picks.
  - Fallback prediction without probabilities.
"""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from pick_engine.engine.disclaimers import INSUFFICIENT_DATA_NOTE
from pick_engine.engine.pipeline import generate_prediction, score_all_markets
from pick_engine.engine.selector import select
from pick_engine.taxonomy.market_taxonomy import (
    CautionLevel,
    ConfidenceLevel,
    MarketType,
    PredictionCategory,
)

STAMP = datetime(2026, 10, 18, 9, 0, tzinfo=timezone.utc)


def _by_key(scores):
    return {s.key: s for s in scores}


# ── Fixtures ──────────────────────────────────────────────────────────────────

@pytest.fixture
def dominant_favorite(make_event, make_forecast, make_sentiment):
    forecast = make_forecast(
        home=0.75, draw=0.15, away=0.10, over_1_5=0.80, over_2_5=0.55,
        confidence=ConfidenceLevel.HIGH,
    )
    sentiment = make_sentiment(
        {MarketType.MATCH_RESULT: (5000.0, {"Home": 0.75, "Draw": 0.15, "Away": 0.10})}
    )
    return make_event(), sentiment, forecast


@pytest.fixture
def safe_market_blocked(make_event, make_forecast, make_sentiment):
    forecast = make_forecast(
        home=0.72, draw=0.18, away=0.10, over_1_5=0.85, over_2_5=0.60,
        confidence=ConfidenceLevel.MEDIUM,
    )
    sentiment = make_sentiment(
        {MarketType.OVER_1_5: (5000.0, {"Over 1.5": 0.85, "Under 1.5": 0.15})}
    )
    return make_event(), sentiment, forecast


@pytest.fixture
def draw_heavy(make_event, make_forecast, make_sentiment):
    forecast = make_forecast(
        home=0.30, draw=0.40, away=0.30, over_1_5=0.60, over_2_5=0.35,
        confidence=ConfidenceLevel.HIGH,
    )
    sentiment = make_sentiment(
        {MarketType.MATCH_RESULT: (5000.0, {"Home": 0.30, "Draw": 0.40, "Away": 0.30})}
    )
    return make_event(), sentiment, forecast


def _varied_inputs(make_forecast, make_sentiment):
    """A spread of fixtures for property-style checks."""
    forecasts = [
        make_forecast(home=h, draw=d, away=round(1 - h - d, 2), over_1_5=o15, over_2_5=o25,
                      confidence=conf, caution=caution)
        for h, d, o15, o25 in [
            (0.75, 0.15, 0.80, 0.55),
            (0.30, 0.40, 0.60, 0.35),
            (0.45, 0.30, 0.72, 0.48),
            (0.20, 0.25, 0.82, 0.64),
            (0.62, 0.22, 0.70, 0.52),
        ]
        for conf in (ConfidenceLevel.HIGH, ConfidenceLevel.LOW)
        for caution in (CautionLevel.NONE, CautionLevel.STRONG)
    ]
    sentiments = [
        None,
        make_sentiment({
            MarketType.MATCH_RESULT: (3000.0, {"Home": 0.50, "Draw": 0.28, "Away": 0.22}),
            MarketType.OVER_2_5: (1200.0, {"Yes": 0.55, "No": 0.45}),
        }),
    ]
    return [(f, s) for f in forecasts for s in sentiments]


# ── score_all_markets ─────────────────────────────────────────────────────────

class TestScoreAllMarkets:
    def test_closed_catalogue(self, sample_event, sample_sentiment, sample_forecast):
        scores = score_all_markets(sample_event, sample_sentiment, sample_forecast)
        assert len(scores) == 7
        assert {s.market_type for s in scores} <= set(MarketType)
        assert len({s.key for s in scores}) == 7

    def test_empty_without_probabilities(self, sample_event, make_forecast):
        assert score_all_markets(sample_event, None, make_forecast(with_probabilities=False)) == []

    def test_ranked_descending(self, sample_event, sample_sentiment, sample_forecast):
        scores = score_all_markets(sample_event, sample_sentiment, sample_forecast)
        finals = [s.final_score for s in scores]
        assert finals == sorted(finals, reverse=True)

    def test_no_sentiment_neutral_signals(self, sample_event, sample_forecast):
        scores = score_all_markets(sample_event, None, sample_forecast)
        assert len(scores) == 7
        assert all(s.sentiment_signal == 0 for s in scores)
        assert all(s.divergence_signal == 0 for s in scores)
        assert all(s.market_probability is None for s in scores)

    def test_unavailable_sentiment_same_as_absent(self, sample_event, sample_forecast, make_sentiment):
        absent = score_all_markets(sample_event, None, sample_forecast)
        unavailable = score_all_markets(sample_event, make_sentiment(available=False), sample_forecast)
        assert [s.final_score for s in absent] == [s.final_score for s in unavailable]

    def test_reasoning_uses_team_names(self, sample_event, sample_forecast):
        scores = _by_key(score_all_markets(sample_event, None, sample_forecast))
        assert scores[(MarketType.MATCH_RESULT, "Home Win")].reasoning == "Arsenal to win at home"

    def test_inputs_not_mutated(self, sample_event, sample_sentiment, sample_forecast):
        before = (sample_event.model_dump(), sample_sentiment.model_dump(), sample_forecast.model_dump())
        score_all_markets(sample_event, sample_sentiment, sample_forecast)
        after = (sample_event.model_dump(), sample_sentiment.model_dump(), sample_forecast.model_dump())
        assert before == after


# ── Primary selection ─────────────────────────────────────────────────────────

class TestPrimarySelection:
    def test_dominant_favorite_is_home_banker(self, dominant_favorite):
        event, sentiment, forecast = dominant_favorite
        scores = _by_key(score_all_markets(event, sentiment, forecast))
        assert scores[(MarketType.MATCH_RESULT, "Home Win")].dominance_boost == 8
        assert scores[(MarketType.OVER_2_5, "Over 2.5")].dominance_boost == 8
        assert scores[(MarketType.DOUBLE_CHANCE, "1X")].dominance_boost == 0

        prediction = generate_prediction(event, sentiment, forecast, generated_at=STAMP)
        assert prediction.primary.market_type == MarketType.MATCH_RESULT
        assert prediction.primary.selection == "Home Win"
        assert prediction.category == PredictionCategory.BANKER
        assert prediction.primary.confidence == 100

    def test_blocked_safe_market_yields_home_win(self, safe_market_blocked, engine_config):
        event, sentiment, forecast = safe_market_blocked
        ranked = score_all_markets(event, sentiment, forecast)
        top = ranked[0]
        assert top.key == (MarketType.OVER_1_5, "Over 1.5")
        assert top.blocked_as_primary

        result = select(ranked, engine_config)
        assert result.safe_block_boost
        assert not result.primary.blocked_as_primary

        prediction = generate_prediction(event, sentiment, forecast, generated_at=STAMP)
        assert prediction.primary.market_type != MarketType.OVER_1_5
        assert (prediction.primary.market_type, prediction.primary.selection) == (
            MarketType.MATCH_RESULT, "Home Win"
        )
        assert prediction.primary.confidence == 80
        assert prediction.top_score == 80

    def test_strong_caution_caps_value(self, make_event, make_forecast, make_sentiment):
        forecast = make_forecast(
            home=0.78, draw=0.14, away=0.08, over_1_5=0.75, over_2_5=0.60,
            confidence=ConfidenceLevel.HIGH, caution=CautionLevel.STRONG,
        )
        sentiment = make_sentiment(
            {MarketType.MATCH_RESULT: (9000.0, {"Home": 0.78, "Draw": 0.14, "Away": 0.08})}
        )
        event = make_event()
        scores = score_all_markets(event, sentiment, forecast)
        assert all(s.dominance_boost == 0 for s in scores)

        prediction = generate_prediction(event, sentiment, forecast, generated_at=STAMP)
        assert prediction.category == PredictionCategory.VALUE
        assert prediction.top_score >= 70


# ── Properties ────────────────────────────────────────────────────────────────

class TestProperties:
    def test_determinism(self, sample_event, sample_sentiment, sample_forecast):
        runs = [
            generate_prediction(sample_event, sample_sentiment, sample_forecast, generated_at=STAMP)
            for _ in range(3)
        ]
        assert runs[0] == runs[1] == runs[2]

    def test_determinism_without_stamp(self, sample_event, sample_sentiment, sample_forecast):
        runs = [generate_prediction(sample_event, sample_sentiment, sample_forecast) for _ in range(3)]
        keys = {
            (p.category, p.primary.market_type, p.primary.selection, p.primary.confidence)
            for p in runs
        }
        assert len(keys) == 1

    def test_draw_primary_is_value(self, draw_heavy):
        prediction = generate_prediction(*draw_heavy, generated_at=STAMP)
        assert prediction.primary.selection == "Draw"
        assert prediction.category == PredictionCategory.VALUE

    def test_draw_never_banker(self, sample_event, make_forecast, make_sentiment):
        for forecast, sentiment in _varied_inputs(make_forecast, make_sentiment):
            p = generate_prediction(sample_event, sentiment, forecast, generated_at=STAMP)
            if p.primary.market_type == MarketType.MATCH_RESULT and p.primary.selection == "Draw":
                assert p.category != PredictionCategory.BANKER

    def test_correlation_exclusion(self, sample_event, make_forecast, make_sentiment, engine_config):
        for forecast, sentiment in _varied_inputs(make_forecast, make_sentiment):
            p = generate_prediction(sample_event, sentiment, forecast, generated_at=STAMP)
            if p.secondary is None:
                continue
            assert p.secondary.market_type != p.primary.market_type
            assert not engine_config.selection.are_correlated(
                p.primary.market_type, p.secondary.market_type
            )

    def test_other_markets(self, dominant_favorite):
        prediction = generate_prediction(*dominant_favorite, generated_at=STAMP)
        keys = [(m.market_type, m.selection) for m in prediction.other_markets]
        assert len(keys) == 4
        assert (prediction.primary.market_type, prediction.primary.selection) not in keys

    def test_confidence_clamped(self, sample_event, make_forecast, make_sentiment):
        for forecast, sentiment in _varied_inputs(make_forecast, make_sentiment):
            p = generate_prediction(sample_event, sentiment, forecast, generated_at=STAMP)
            for pick in (p.primary, *p.other_markets):
                assert 0 <= pick.confidence <= 100


# ── Fallback ──────────────────────────────────────────────────────────────────

class TestFallback:
    def test_no_probabilities(self, sample_event, sample_sentiment, make_forecast):
        forecast = make_forecast(with_probabilities=False)
        prediction = generate_prediction(sample_event, sample_sentiment, forecast, generated_at=STAMP)
        assert prediction.category == PredictionCategory.RISKY
        assert prediction.primary.market_type == MarketType.MATCH_RESULT
        assert prediction.primary.selection == "Home Win"
        assert prediction.primary.confidence == 30
        assert prediction.top_score == 30
        assert prediction.secondary is None
        assert prediction.disclaimers == (INSUFFICIENT_DATA_NOTE,)

    def test_generated_at_defaults_to_now(self, sample_event, make_forecast):
        prediction = generate_prediction(sample_event, None, make_forecast(with_probabilities=False))
        assert prediction.generated_at.tzinfo is not None
