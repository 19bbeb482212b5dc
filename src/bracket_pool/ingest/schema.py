"""Pydantic v2 schema models for tournament data and bracket records.

Defines the input layer consumed by the bracket engine: seeded teams
grouped into four positioned regions (:class:`TournamentData`) and the
persisted shape of one pool entry (:class:`BracketRecord`).  Malformed
tournament data is rejected here, at construction time, so the engine
itself only ever sees well-typed input.
"""

from __future__ import annotations

import datetime
import enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

#: Number of seeded teams per region (First Four play-in games excluded).
TEAMS_PER_REGION: int = 16

#: Bracket ids double as record file names, so path separators are excluded.
BRACKET_ID_PATTERN: str = r"^[A-Za-z0-9][A-Za-z0-9_.-]*$"


class RegionPosition(str, enum.Enum):
    """Fixed visual position of a region; also its bracket order."""

    TOP_LEFT = "TopLeft"
    BOTTOM_LEFT = "BottomLeft"
    TOP_RIGHT = "TopRight"
    BOTTOM_RIGHT = "BottomRight"


class Team(BaseModel):
    """A seeded tournament team.  Immutable."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    seed: int = Field(..., ge=1, le=TEAMS_PER_REGION)
    region: str = Field(default="")
    logo: str = Field(default="", alias="logoUrl")
    mascot: str | None = None


class TournamentRegion(BaseModel):
    """One region: a label (e.g. ``"East"``), a position, and 16 seeded teams."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=1)
    position: RegionPosition
    teams: list[Team]

    @field_validator("position", mode="before")
    @classmethod
    def _normalize_position(cls, value: object) -> object:
        # Accept "Top Left" / "top-left" as well as "TopLeft".
        if isinstance(value, str):
            compact = value.replace(" ", "").replace("-", "").replace("_", "").lower()
            for position in RegionPosition:
                if position.value.lower() == compact:
                    return position
        return value

    @model_validator(mode="after")
    def _check_region_integrity(self) -> TournamentRegion:
        seeds = sorted(t.seed for t in self.teams)
        if seeds != list(range(1, TEAMS_PER_REGION + 1)):
            msg = f"Region {self.name!r} must have exactly one team per seed 1-{TEAMS_PER_REGION}, got seeds {seeds}"
            raise ValueError(msg)
        # Teams are stamped with their region label and kept in seed order.
        self.teams = sorted(
            (t if t.region == self.name else t.model_copy(update={"region": self.name}) for t in self.teams),
            key=lambda t: t.seed,
        )
        return self

    def team_by_seed(self, seed: int) -> Team:
        """Return the team holding *seed* in this region."""
        return self.teams[seed - 1]


class TournamentData(BaseModel):
    """Seeded field for one tournament year, as supplied by the data provider."""

    model_config = ConfigDict(populate_by_name=True)

    year: int = Field(..., ge=1939)
    name: str = Field(default="")
    regions: list[TournamentRegion]

    @model_validator(mode="after")
    def _check_tournament_integrity(self) -> TournamentData:
        positions = {r.position for r in self.regions}
        if len(self.regions) != len(RegionPosition) or positions != set(RegionPosition):
            found = sorted(p.value for p in positions)
            msg = f"Tournament must have exactly one region per position {[p.value for p in RegionPosition]}, got {found}"
            raise ValueError(msg)
        labels = [r.name for r in self.regions]
        if len(set(labels)) != len(labels):
            msg = f"Region labels must be unique, got {labels}"
            raise ValueError(msg)
        team_ids = [t.id for r in self.regions for t in r.teams]
        duplicates = sorted({tid for tid in team_ids if team_ids.count(tid) > 1})
        if duplicates:
            msg = f"Team ids must be unique across regions, duplicated: {duplicates}"
            raise ValueError(msg)
        return self

    def region_at(self, position: RegionPosition) -> TournamentRegion:
        """Return the region occupying *position*."""
        for region in self.regions:
            if region.position is position:
                return region
        msg = f"No region at position {position.value}"
        raise KeyError(msg)


BracketStatus = Literal["in_progress", "submitted"]


class BracketRecord(BaseModel):
    """A persisted pool entry.  ``picks`` is the only engine-relevant state."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., pattern=BRACKET_ID_PATTERN)
    entry_name: str = Field(default="", alias="entryName")
    picks: dict[str, str] = Field(default_factory=dict)
    tie_breaker: int | None = Field(default=None, alias="tieBreaker")
    status: BracketStatus = "in_progress"
    year: int | None = None
    submitted_at: datetime.datetime | None = Field(default=None, alias="submittedAt")
    last_saved: datetime.datetime | None = Field(default=None, alias="lastSaved")
