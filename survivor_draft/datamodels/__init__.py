"""
Data models for the Survivor fantasy draft backend.

This module exports all the core data structures used throughout the application.
Keeping exports centralized here allows for easy imports and future refactoring.
"""

from .draft import (
    DraftType, DraftStatus, DraftPosition, DraftRoster, DraftPick,
    DraftOrderRequest, DraftPickRequest, DraftBoard
)
from .entities import (
    Season, SeasonCreate, SeasonUpdate,
    Tribe, TribeCreate, TribeUpdate,
    Player, PlayerCreate, PlayerUpdate, PlayerStats,
    Alliance, AllianceCreate, AllianceUpdate,
    FantasyTeam, FantasyTeamCreate, FantasyTeamUpdate,
    LeaderboardEntry
)

__all__ = [
    "DraftType",
    "DraftStatus",
    "DraftPosition",
    "DraftRoster",
    "DraftPick",
    "DraftOrderRequest",
    "DraftPickRequest",
    "DraftBoard",

    "Season",
    "SeasonCreate",
    "SeasonUpdate",
    "Tribe",
    "TribeCreate",
    "TribeUpdate",
    "Player",
    "PlayerCreate",
    "PlayerUpdate",
    "PlayerStats",
    "Alliance",
    "AllianceCreate",
    "AllianceUpdate",
    "FantasyTeam",
    "FantasyTeamCreate",
    "FantasyTeamUpdate",
    "LeaderboardEntry"
]
