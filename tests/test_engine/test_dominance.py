"""
Tests for pick_engine/engine/dominance.py.

What we test
------------
is_dominant():
  - True for a lopsided, well-traded fixture without strong caution.
  - False under strong caution, a weak favorite, a live underdog, low
    volume, or missing / unavailable sentiment.

apply_dominance():
  - +8 to non-Draw Match Result and Over 2.5 only.
  - No change when not dominant.
"""

from __future__ import annotations

from pick_engine.engine.dominance import apply_dominance, is_dominant
from pick_engine.engine.scorer import MarketScore
from pick_engine.engine.signals import MatchResultView
from pick_engine.taxonomy.market_taxonomy import SCORED_CANDIDATES, CautionLevel, MarketType

LOPSIDED = MatchResultView(home=0.72, draw=0.18, away=0.10)


def _ms(market_type: MarketType, selection: str) -> MarketScore:
    return MarketScore(
        market_type=market_type,
        selection=selection,
        base_score=50,
        sentiment_signal=0,
        low_payout_penalty=0,
        confidence_bonus=0,
        risk_penalty=0,
        probability_tiebreak=0,
        divergence_signal=0,
        low_probability_penalty=0,
        forecast_probability=0.5,
        market_probability=None,
        volume=0.0,
        reasoning="",
    )


class TestIsDominant:
    def test_triggers(self, make_forecast, make_sentiment, engine_config):
        snap = make_sentiment({MarketType.MATCH_RESULT: (600.0, {"Home": 0.72})})
        assert is_dominant(make_forecast(home=0.72, draw=0.18, away=0.10), snap, LOPSIDED, engine_config)

    def test_strong_caution_disables(self, make_forecast, make_sentiment, engine_config):
        snap = make_sentiment({MarketType.MATCH_RESULT: (9000.0, {"Home": 0.72})})
        fc = make_forecast(home=0.72, draw=0.18, away=0.10, caution=CautionLevel.STRONG)
        assert not is_dominant(fc, snap, LOPSIDED, engine_config)

    def test_mild_caution_allowed(self, make_forecast, make_sentiment, engine_config):
        snap = make_sentiment({MarketType.MATCH_RESULT: (9000.0, {"Home": 0.72})})
        fc = make_forecast(home=0.72, draw=0.18, away=0.10, caution=CautionLevel.MILD)
        assert is_dominant(fc, snap, LOPSIDED, engine_config)

    def test_weak_favorite(self, make_forecast, make_sentiment, engine_config):
        snap = make_sentiment({MarketType.MATCH_RESULT: (9000.0, {"Home": 0.55})})
        view = MatchResultView(home=0.55, draw=0.25, away=0.20)
        assert not is_dominant(make_forecast(), snap, view, engine_config)

    def test_live_underdog(self, make_forecast, make_sentiment, engine_config):
        snap = make_sentiment({MarketType.MATCH_RESULT: (9000.0, {"Home": 0.62})})
        view = MatchResultView(home=0.62, draw=0.08, away=0.30)
        assert not is_dominant(make_forecast(), snap, view, engine_config)

    def test_low_volume(self, make_forecast, make_sentiment, engine_config):
        snap = make_sentiment({MarketType.MATCH_RESULT: (499.0, {"Home": 0.72})})
        assert not is_dominant(make_forecast(), snap, LOPSIDED, engine_config)

    def test_volume_summed_across_markets(self, make_forecast, make_sentiment, engine_config):
        snap = make_sentiment({
            MarketType.MATCH_RESULT: (300.0, {"Home": 0.72}),
            MarketType.OVER_2_5: (300.0, {"Yes": 0.5}),
        })
        assert is_dominant(make_forecast(), snap, LOPSIDED, engine_config)

    def test_no_sentiment(self, make_forecast, engine_config):
        assert not is_dominant(make_forecast(), None, LOPSIDED, engine_config)


class TestApplyDominance:
    def test_boosts_expressive_only(self, engine_config):
        scores = [_ms(mt, sel) for mt, sel in SCORED_CANDIDATES]
        boosted = {s.key: s.dominance_boost for s in apply_dominance(scores, True, engine_config)}
        assert boosted[(MarketType.MATCH_RESULT, "Home Win")] == 8
        assert boosted[(MarketType.MATCH_RESULT, "Away Win")] == 8
        assert boosted[(MarketType.OVER_2_5, "Over 2.5")] == 8
        assert boosted[(MarketType.MATCH_RESULT, "Draw")] == 0
        assert boosted[(MarketType.DOUBLE_CHANCE, "1X")] == 0
        assert boosted[(MarketType.OVER_1_5, "Over 1.5")] == 0

    def test_not_dominant_is_noop(self, engine_config):
        scores = [_ms(mt, sel) for mt, sel in SCORED_CANDIDATES]
        assert apply_dominance(scores, False, engine_config) == scores
