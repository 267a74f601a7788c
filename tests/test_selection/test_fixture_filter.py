"""
Tests for pick_engine/selection/fixture_filter.py.

What we test
------------
should_select_fixture():
  - BIG_TEAM when a configured big team of the league plays (home or away),
    matched by case-insensitive containment in either direction.
  - Big teams are per league: a big name in another league does not count.
  - HIGH_MARKET_CONFIDENCE when a Match-Result outcome is priced >= 65%.
  - None when neither rule fires, or sentiment is unavailable.

filter_selected_fixtures() / selection_stats():
  - Keeps input order; counts by reason.
"""

from __future__ import annotations

from pick_engine.selection.fixture_filter import (
    SelectionReason,
    filter_selected_fixtures,
    is_big_team,
    selection_stats,
    should_select_fixture,
)
from pick_engine.config import FixtureSelectionConfig
from pick_engine.taxonomy.market_taxonomy import MarketType


class TestIsBigTeam:
    def test_exact(self):
        assert is_big_team("EPL", "Arsenal FC", FixtureSelectionConfig())

    def test_containment_both_ways(self):
        cfg = FixtureSelectionConfig()
        assert is_big_team("EPL", "arsenal", cfg)
        assert is_big_team("SA", "AC Milan Primavera", cfg)

    def test_other_league(self):
        assert not is_big_team("BL1", "Arsenal FC", FixtureSelectionConfig())

    def test_unknown_league(self):
        assert not is_big_team("XYZ", "Arsenal FC", FixtureSelectionConfig())

    def test_empty_name(self):
        assert not is_big_team("EPL", "  ", FixtureSelectionConfig())


class TestShouldSelectFixture:
    def test_big_team_home(self, make_event):
        event = make_event(home="Liverpool FC", away="Brentford FC")
        assert should_select_fixture(event, None) == SelectionReason.BIG_TEAM

    def test_big_team_away(self, make_event):
        event = make_event(home="Brentford FC", away="Chelsea FC")
        assert should_select_fixture(event, None) == SelectionReason.BIG_TEAM

    def test_high_market_confidence(self, make_event, make_sentiment):
        event = make_event(home="Brentford FC", away="Fulham FC")
        snap = make_sentiment({MarketType.MATCH_RESULT: (800.0, {"Home": 0.66, "Draw": 0.2, "Away": 0.14})})
        assert should_select_fixture(event, snap) == SelectionReason.HIGH_MARKET_CONFIDENCE

    def test_skipped(self, make_event, make_sentiment):
        event = make_event(home="Brentford FC", away="Fulham FC")
        snap = make_sentiment({MarketType.MATCH_RESULT: (800.0, {"Home": 0.45, "Draw": 0.3, "Away": 0.25})})
        assert should_select_fixture(event, snap) is None

    def test_unavailable_sentiment(self, make_event, make_sentiment):
        event = make_event(home="Brentford FC", away="Fulham FC")
        snap = make_sentiment(
            {MarketType.MATCH_RESULT: (800.0, {"Home": 0.80})}, available=False
        )
        assert should_select_fixture(event, snap) is None

    def test_other_markets_ignored(self, make_event, make_sentiment):
        event = make_event(home="Brentford FC", away="Fulham FC")
        snap = make_sentiment({MarketType.OVER_1_5: (800.0, {"Over 1.5": 0.85})})
        assert should_select_fixture(event, snap) is None


class TestFilterSelectedFixtures:
    def test_order_and_stats(self, make_event, make_sentiment):
        events = [
            make_event(event_id=1, home="Brentford FC", away="Fulham FC"),
            make_event(event_id=2, home="Arsenal FC", away="Everton FC"),
            make_event(event_id=3, home="Brighton FC", away="Wolves FC"),
        ]
        sentiments = {
            3: make_sentiment(
                {MarketType.MATCH_RESULT: (800.0, {"Home": 0.70})}, event_id=3
            ),
        }
        selected = filter_selected_fixtures(events, sentiments)
        assert [s.event.event_id for s in selected] == [2, 3]
        assert [s.reason for s in selected] == [
            SelectionReason.BIG_TEAM,
            SelectionReason.HIGH_MARKET_CONFIDENCE,
        ]

        stats = selection_stats(len(events), selected)
        assert stats["selected"] == 2
        assert stats["skipped"] == 1
        assert stats["by_reason"] == {"BIG_TEAM": 1, "HIGH_MARKET_CONFIDENCE": 1}
