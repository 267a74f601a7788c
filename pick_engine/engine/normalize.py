"""
Outcome-name normalization: map a provider's free-text outcome label onto a
canonical selection.

Fallback order (first hit wins)
-------------------------------
1. Exact match       : label equals the selection (case/whitespace-insensitive).
2. Containment       : label contains the selection or vice versa, or the label
                       contains the selection's keyword ("home", "away",
                       "draw", "over", "under").  Labels shorter than three
                       characters only ever match exactly.
3. Yes/No mapping    : goal-line markets only; "Yes" stands for Over and
                       "No" for Under when no literal label matched.
4. Unmatched         : ``None``.  Callers treat this as "no market
                       probability", never as 0%.
"""

from __future__ import annotations

from typing import Iterable, Optional

from pick_engine.models.sentiment import MarketOutcome
from pick_engine.taxonomy.market_taxonomy import MarketType

_KEYWORDS: tuple[str, ...] = ("home", "away", "draw", "over", "under")
_MIN_CONTAINMENT_LEN = 3


def normalize_label(text: str) -> str:
    """Lower-case and collapse internal whitespace."""
    return " ".join(text.lower().split())


def selection_keyword(selection: str) -> Optional[str]:
    """The directional keyword carried by a canonical selection, if any."""
    norm = normalize_label(selection)
    for kw in _KEYWORDS:
        if kw in norm:
            return kw
    return None


def match_outcome(
    outcomes: Iterable[MarketOutcome],
    market_type: MarketType,
    selection: str,
) -> Optional[MarketOutcome]:
    """Find the outcome that represents ``selection``.

    Args:
        outcomes:    Outcomes of the sentiment market of ``market_type``.
        market_type: Market the outcomes belong to.
        selection:   Canonical selection text, e.g. ``"Away Win"``.

    Returns:
        The matching ``MarketOutcome``, or ``None`` if nothing matches.
    """
    candidates = list(outcomes)
    target = normalize_label(selection)
    if not target:
        return None

    # 1. Exact
    for outcome in candidates:
        if normalize_label(outcome.name) == target:
            return outcome

    # 2. Containment
    keyword = selection_keyword(selection)
    for outcome in candidates:
        name = normalize_label(outcome.name)
        if len(name) < _MIN_CONTAINMENT_LEN:
            continue
        if target in name or name in target:
            return outcome
        if keyword is not None and keyword in name:
            return outcome

    # 3. Yes/No → Over/Under
    if market_type.is_goal_line and keyword in ("over", "under"):
        wanted = "yes" if keyword == "over" else "no"
        for outcome in candidates:
            if normalize_label(outcome.name) == wanted:
                return outcome

    return None
