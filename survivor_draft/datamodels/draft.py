"""
Draft state models.

Represents the fixed draft order of a season, positions in the draft
sequence and the picks recorded against them.
"""

from enum import Enum
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


class DraftType(str, Enum):
    NORMAL = "normal"
    SNAKE = "snake"


class DraftStatus(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"


class DraftPosition(BaseModel):
    """
    A single turn in the draft sequence.

    Pick numbers run across the whole draft (round 2 of a 4-team draft
    starts at pick 5), they are not reset per round.
    """

    model_config = ConfigDict(frozen=True)

    round: int = Field(1, ge=1, description="Draft round (1-based)")
    pick: int = Field(1, ge=1, description="Overall pick number (1-based)")

    def pick_in_round(self, team_count: int) -> int:
        return self.pick - (self.round - 1) * team_count

    def __str__(self) -> str:
        return f"round {self.round}, pick {self.pick}"


class DraftRoster(BaseModel):
    """
    The confirmed draft order of a season.

    Immutable once built; every participant (fantasy team name) appears
    exactly once.
    """

    model_config = ConfigDict(frozen=True)

    participants: Tuple[str, ...] = Field(..., min_length=1)

    @field_validator("participants", mode="before")
    @classmethod
    def convert_to_tuple(cls, v):
        if isinstance(v, list):
            return tuple(v)
        return v

    @field_validator("participants")
    @classmethod
    def participants_distinct(cls, v):
        if len(set(v)) != len(v):
            raise ValueError("Draft order cannot contain the same team twice")
        return v

    def __len__(self) -> int:
        return len(self.participants)

    def __getitem__(self, index: int) -> str:
        return self.participants[index]

    def __iter__(self):
        return iter(self.participants)

    def __contains__(self, participant: object) -> bool:
        return participant in self.participants

    @property
    def team_count(self) -> int:
        return len(self.participants)


class DraftPick(BaseModel):
    round: int = Field(..., ge=1)
    pick_number: int = Field(..., ge=1)
    player_name: str
    team_name: Optional[str] = None

    @property
    def position(self) -> DraftPosition:
        return DraftPosition(round=self.round, pick=self.pick_number)


class DraftOrderRequest(BaseModel):
    """
    Request to fix a season's draft order.

    With `positions` set the order is assigned manually, otherwise the
    season's fantasy teams are shuffled.
    """

    draft_type: DraftType = DraftType.SNAKE
    positions: Optional[Dict[str, int]] = Field(None, description="Team name -> draft slot (1..N)")


class DraftPickRequest(BaseModel):
    team_name: Optional[str] = None
    player_name: Optional[str] = None


class DraftBoard(BaseModel):
    season_number: int
    draft_type: Optional[DraftType] = None
    draft_order: List[str] = Field(default_factory=list)
    status: DraftStatus = DraftStatus.NOT_STARTED

    current_round: int = 1
    current_pick: int = 1
    current_team: Optional[str] = None

    picks: List[DraftPick] = Field(default_factory=list)

    model_config = ConfigDict(use_enum_values=True)

    @property
    def total_picks(self) -> int:
        return len(self.picks)
