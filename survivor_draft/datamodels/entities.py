"""
Survivor entities stored in the graph.

Season, Tribe, Player, Alliance and FantasyTeam mirror the node
properties one-to-one. The *Create models validate admin input before it
is written; the *Update models only carry the fields that may change.
Fields that every node must keep (names, colors, counters) reject an
explicit null; free-text fields and dissolved_episode may be cleared.
"""

import re
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .draft import DraftType

HEX_COLOR = re.compile(r"^#[0-9A-Fa-f]{6}$")
PERSON_NAME = re.compile(r"^[a-zA-Z\s'-]+$")


def _clean_text(v: Optional[str], label: str, max_length: int, min_length: int = 2) -> Optional[str]:
    if v is None:
        return v
    v = v.strip()
    if len(v) < min_length:
        raise ValueError(f"{label} must be at least {min_length} characters")
    if len(v) > max_length:
        raise ValueError(f"{label} cannot exceed {max_length} characters")
    return v


def _check_year(v: Optional[int]) -> Optional[int]:
    if v is None:
        return v
    if v < 2000:
        raise ValueError("Year must be 2000 or later")
    if v > datetime.now().year + 1:
        raise ValueError("Year cannot be in the future")
    return v


def _not_null(v, field_name: str):
    # update fields may be omitted but not set to null
    if v is None:
        raise ValueError(f"{field_name} cannot be null")
    return v


class Season(BaseModel):
    model_config = ConfigDict(extra="ignore")

    season_number: int
    year: Optional[int] = None
    draft_type: Optional[DraftType] = None
    draft_order: Optional[List[str]] = None


class SeasonCreate(BaseModel):
    season_number: int = Field(..., ge=1, le=100)
    year: int

    @field_validator("year")
    @classmethod
    def year_in_range(cls, v):
        return _check_year(v)


class SeasonUpdate(BaseModel):
    year: Optional[int] = None

    @field_validator("year")
    @classmethod
    def year_in_range(cls, v):
        return _check_year(_not_null(v, "year"))


class Tribe(BaseModel):
    model_config = ConfigDict(extra="ignore")

    tribe_name: str
    tribe_color: Optional[str] = None


class TribeCreate(BaseModel):
    tribe_name: str
    tribe_color: str

    @field_validator("tribe_name")
    @classmethod
    def tribe_name_length(cls, v):
        return _clean_text(v, "Tribe name", 50)

    @field_validator("tribe_color")
    @classmethod
    def tribe_color_is_hex(cls, v):
        if not HEX_COLOR.match(v):
            raise ValueError("Please provide a valid hex color (e.g., #FF5733)")
        return v


class TribeUpdate(BaseModel):
    tribe_name: Optional[str] = None
    tribe_color: Optional[str] = None

    @field_validator("tribe_name", "tribe_color", mode="before")
    @classmethod
    def not_cleared(cls, v, info):
        return _not_null(v, info.field_name)

    @field_validator("tribe_name")
    @classmethod
    def tribe_name_length(cls, v):
        return _clean_text(v, "Tribe name", 50)

    @field_validator("tribe_color")
    @classmethod
    def tribe_color_is_hex(cls, v):
        if v is not None and not HEX_COLOR.match(v):
            raise ValueError("Please provide a valid hex color (e.g., #FF5733)")
        return v


class Player(BaseModel):
    """
    A contestant. Identified by first + last name throughout the graph.
    """

    model_config = ConfigDict(extra="ignore")

    first_name: str
    last_name: str
    occupation: Optional[str] = None
    hometown: Optional[str] = None
    archetype: Optional[str] = None
    notes: Optional[str] = None

    challenges_won: int = 0
    has_idol: bool = False
    idols_played: int = 0
    votes_received: int = 0

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def __str__(self) -> str:
        return self.full_name


class PlayerCreate(BaseModel):
    tribe_name: str
    first_name: str
    last_name: str
    occupation: str
    hometown: Optional[str] = None
    archetype: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("first_name", "last_name")
    @classmethod
    def person_name(cls, v, info):
        label = "First name" if info.field_name == "first_name" else "Last name"
        v = _clean_text(v, label, 50)
        if not PERSON_NAME.match(v):
            raise ValueError(f"{label} can only contain letters, spaces, hyphens, and apostrophes")
        return v

    @field_validator("occupation")
    @classmethod
    def occupation_length(cls, v):
        return _clean_text(v, "Occupation", 100)


class PlayerUpdate(BaseModel):
    occupation: Optional[str] = None
    hometown: Optional[str] = None
    archetype: Optional[str] = None
    notes: Optional[str] = None
    challenges_won: Optional[int] = Field(None, ge=0)
    has_idol: Optional[bool] = None
    idols_played: Optional[int] = Field(None, ge=0)
    votes_received: Optional[int] = Field(None, ge=0)

    @field_validator("challenges_won", "has_idol", "idols_played", "votes_received", mode="before")
    @classmethod
    def counters_not_cleared(cls, v, info):
        return _not_null(v, info.field_name)


class PlayerStats(BaseModel):
    challenges_won: int = Field(..., ge=0)
    has_idol: bool
    idols_played: int = Field(..., ge=0)
    votes_received: int = Field(..., ge=0)


class Alliance(BaseModel):
    model_config = ConfigDict(extra="ignore")

    alliance_name: str
    formation_episode: Optional[int] = None
    dissolved_episode: Optional[int] = None
    size: Optional[int] = None
    notes: Optional[str] = None
    members: List[Player] = Field(default_factory=list)

    @property
    def is_active(self) -> bool:
        return self.dissolved_episode is None


class AllianceCreate(BaseModel):
    alliance_name: str
    formation_episode: int = Field(..., ge=1, le=20)
    dissolved_episode: Optional[int] = Field(None, ge=1)
    size: int = Field(..., ge=1, le=20)
    notes: Optional[str] = None

    @field_validator("alliance_name")
    @classmethod
    def alliance_name_length(cls, v):
        return _clean_text(v, "Alliance name", 100)


class AllianceUpdate(BaseModel):
    dissolved_episode: Optional[int] = Field(None, ge=1)
    size: Optional[int] = Field(None, ge=1, le=20)
    notes: Optional[str] = None

    @field_validator("size", mode="before")
    @classmethod
    def size_not_cleared(cls, v):
        return _not_null(v, "size")


class FantasyTeam(BaseModel):
    model_config = ConfigDict(extra="ignore")

    team_name: str
    owners: List[str] = Field(default_factory=list)
    roster: List[Player] = Field(default_factory=list)


class FantasyTeamCreate(BaseModel):
    team_name: str
    owners: List[str] = Field(..., min_length=1)

    @field_validator("team_name")
    @classmethod
    def team_name_length(cls, v):
        return _clean_text(v, "Team name", 100)

    @field_validator("owners")
    @classmethod
    def owner_names(cls, v):
        return [_clean_text(owner, "Owner name", 100) for owner in v]


class FantasyTeamUpdate(BaseModel):
    owners: Optional[List[str]] = None

    @field_validator("owners")
    @classmethod
    def owner_names(cls, v):
        _not_null(v, "owners")
        return [_clean_text(owner, "Owner name", 100) for owner in v]


class LeaderboardEntry(BaseModel):
    team_name: str
    total_challenge_wins: int = 0
    roster_size: int = 0
