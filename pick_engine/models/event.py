"""
Event model: the fixture record owned by the schedule provider.

The engine only reads ``Event``; it never mutates or persists it.  Team
``short_name`` is used in human-readable reasoning strings, ``league_code``
by the fixture selection filter, and ``kickoff`` by the daily cap to group
events into calendar days.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from pick_engine.taxonomy.market_taxonomy import EventStatus


class Team(BaseModel):
    """One side of a fixture.

    Attributes:
        team_id: Provider identifier.
        name: Full club name, e.g. ``"Arsenal FC"``.
        short_name: Display name used in reasoning, e.g. ``"Arsenal"``.
            Defaults to ``name`` when omitted.
    """

    model_config = ConfigDict(frozen=True)

    team_id: int
    name: str
    short_name: str = ""

    @field_validator("name")
    @classmethod
    def validate_name_not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Team name must not be empty.")
        return v.strip()

    @property
    def label(self) -> str:
        return self.short_name or self.name


class Event(BaseModel):
    """A scheduled fixture.

    Attributes:
        event_id: Provider identifier for the fixture.
        league_code: Competition code, e.g. ``"EPL"``.
        home_team: Home side.
        away_team: Away side.
        kickoff: Kickoff time; must be timezone-aware.
        status: Lifecycle status from the schedule provider.
        venue: Stadium name, or ``None`` when unknown.
        matchday: Round number within the competition, or ``None``.
    """

    model_config = ConfigDict(frozen=True)

    event_id: int
    league_code: str = ""
    home_team: Team
    away_team: Team
    kickoff: datetime
    status: EventStatus = EventStatus.SCHEDULED
    venue: Optional[str] = None
    matchday: Optional[int] = None

    @field_validator("kickoff")
    @classmethod
    def validate_kickoff_aware(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            raise ValueError("kickoff must be timezone-aware.")
        return v

    @property
    def title(self) -> str:
        return f"{self.home_team.label} vs {self.away_team.label}"
