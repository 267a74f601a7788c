"""
Daily cap ranker: rank one calendar day of predictions against each other.

Usage flow
----------
1. filter_below_threshold(candidates)
   -> candidates with top_score >= min_score (40)

2. apply_daily_cap(candidates)
   -> filter, sort by top_score descending (stable), keep at most 5

3. apply_daily_cap_by_day(candidates)
   -> group by kickoff calendar day in the configured timezone, then
      apply_daily_cap() per day

Stateless: no memory of previous days, no smoothing.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import date
from typing import Optional

from pick_engine.config import EngineConfig
from pick_engine.models.prediction import DailyCandidate
from pick_engine.utils.time_utils import local_date


def filter_below_threshold(
    candidates: list[DailyCandidate],
    config: Optional[EngineConfig] = None,
) -> list[DailyCandidate]:
    """Drop candidates whose top score is below the minimum threshold."""
    cfg = config or EngineConfig()
    return [c for c in candidates if c.top_score >= cfg.daily_cap.min_score]


def apply_daily_cap(
    candidates: list[DailyCandidate],
    config: Optional[EngineConfig] = None,
) -> list[DailyCandidate]:
    """Filter, rank, and truncate one day's candidates.

    Ties keep input order (stable sort).

    Args:
        candidates: One entry per event for a single calendar day.
        config:     Engine tunables; defaults to ``EngineConfig()``.

    Returns:
        At most ``max_picks`` candidates, top score descending.
    """
    cfg = config or EngineConfig()
    kept = filter_below_threshold(candidates, cfg)
    ranked = sorted(kept, key=lambda c: -c.top_score)
    return ranked[: cfg.daily_cap.max_picks]


def calendar_day(candidate: DailyCandidate, tz_name: str) -> date:
    return local_date(candidate.event.kickoff, tz_name)


def apply_daily_cap_by_day(
    candidates: list[DailyCandidate],
    config: Optional[EngineConfig] = None,
) -> dict[date, list[DailyCandidate]]:
    """Apply the daily cap separately to every kickoff calendar day.

    Days whose candidates are all filtered out map to an empty list.

    Returns:
        Dict mapping day -> capped candidates, days in ascending order.
    """
    cfg = config or EngineConfig()
    by_day: dict[date, list[DailyCandidate]] = defaultdict(list)
    for c in candidates:
        by_day[calendar_day(c, cfg.daily_cap.timezone)].append(c)
    return {day: apply_daily_cap(by_day[day], cfg) for day in sorted(by_day)}
