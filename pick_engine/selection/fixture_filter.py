"""
Fixture selection filter.

An event is selected for analysis when either rule fires (checked in order):
  1. BIG_TEAM              : a configured big team of the event's league plays.
                              Names match by case-insensitive containment in
                              either direction ("Arsenal" ~ "Arsenal FC").
  2. HIGH_MARKET_CONFIDENCE: the Match-Result sentiment market has an outcome
                              priced at or above the threshold (default 65%).
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from enum import StrEnum
from typing import Optional

from pick_engine.config import FixtureSelectionConfig
from pick_engine.models.event import Event
from pick_engine.models.sentiment import SentimentSnapshot
from pick_engine.taxonomy.market_taxonomy import MarketType


class SelectionReason(StrEnum):
    BIG_TEAM = "BIG_TEAM"
    HIGH_MARKET_CONFIDENCE = "HIGH_MARKET_CONFIDENCE"


@dataclass(frozen=True)
class SelectedFixture:
    event:  Event
    reason: SelectionReason


def is_big_team(league_code: str, team_name: str, config: FixtureSelectionConfig) -> bool:
    name = team_name.lower().strip()
    if not name:
        return False
    for big in config.big_teams.get(league_code, []):
        big_lower = big.lower()
        if big_lower in name or name in big_lower:
            return True
    return False


def has_big_team(event: Event, config: FixtureSelectionConfig) -> bool:
    return is_big_team(event.league_code, event.home_team.name, config) or is_big_team(
        event.league_code, event.away_team.name, config
    )


def has_high_market_confidence(
    sentiment: Optional[SentimentSnapshot],
    config: FixtureSelectionConfig,
) -> bool:
    if sentiment is None:
        return False
    market = sentiment.market(MarketType.MATCH_RESULT)
    if market is None:
        return False
    return any(
        o.probability >= config.market_confidence_threshold for o in market.outcomes
    )


def should_select_fixture(
    event: Event,
    sentiment: Optional[SentimentSnapshot],
    config: Optional[FixtureSelectionConfig] = None,
) -> Optional[SelectionReason]:
    """Return why ``event`` is selected, or ``None`` if it is skipped."""
    cfg = config or FixtureSelectionConfig()
    if has_big_team(event, cfg):
        return SelectionReason.BIG_TEAM
    if has_high_market_confidence(sentiment, cfg):
        return SelectionReason.HIGH_MARKET_CONFIDENCE
    return None


def filter_selected_fixtures(
    events: list[Event],
    sentiments: dict[int, SentimentSnapshot],
    config: Optional[FixtureSelectionConfig] = None,
) -> list[SelectedFixture]:
    """Keep the selected events, in input order, tagged with their reason."""
    selected: list[SelectedFixture] = []
    for event in events:
        reason = should_select_fixture(event, sentiments.get(event.event_id), config)
        if reason is not None:
            selected.append(SelectedFixture(event=event, reason=reason))
    return selected


def selection_stats(total: int, selected: list[SelectedFixture]) -> dict:
    """Counts for display: total / selected / skipped / by_reason."""
    by_reason = Counter(s.reason for s in selected)
    return {
        "total": total,
        "selected": len(selected),
        "skipped": total - len(selected),
        "by_reason": {r.value: by_reason.get(r, 0) for r in SelectionReason},
    }
