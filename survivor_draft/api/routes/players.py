"""
Player and alliance endpoints.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from ...database.service import SurvivorService
from ...datamodels.entities import (
    Alliance, AllianceCreate, AllianceUpdate, FantasyTeam, Player, PlayerCreate,
    PlayerStats, PlayerUpdate, Season, Tribe
)
from ..dependencies import get_service


router = APIRouter()


class PlayerEvent(str, Enum):
    CHALLENGE_WIN = "challenge_win"
    VOTE_RECEIVED = "vote_received"
    TOGGLE_IDOL = "toggle_idol"


class PlayerDetails(BaseModel):
    player: Player
    tribe: Optional[Tribe] = None
    season: Optional[Season] = None
    alliances: List[Alliance] = []
    fantasy_team: Optional[FantasyTeam] = None


class PlayerStatsSummary(BaseModel):
    player_name: str
    challenges_won: int
    idols_played: int
    votes_received: int
    has_idol: bool


class MoveRequest(BaseModel):
    tribe_name: str


class MemberRequest(BaseModel):
    first_name: str
    last_name: str


@router.get("/seasons/{season_number}/players", response_model=List[Player])
async def list_players(season_number: int, service: SurvivorService = Depends(get_service)):
    return await service.get_players_in_season(season_number)


@router.post("/seasons/{season_number}/players", response_model=Player, status_code=201)
async def create_player(season_number: int,
                        player: PlayerCreate,
                        service: SurvivorService = Depends(get_service)):
    if await service.player_exists(player.first_name, player.last_name):
        raise HTTPException(
            status_code=409,
            detail=f"Player {player.first_name} {player.last_name} already exists"
        )
    return await service.create_player(season_number, player)


@router.get("/seasons/{season_number}/players/available", response_model=List[Player])
async def list_available_players(season_number: int, service: SurvivorService = Depends(get_service)):
    """Players not yet drafted to a fantasy team."""
    return await service.get_available_players_in_season(season_number)


@router.get("/seasons/{season_number}/players/stats", response_model=List[PlayerStatsSummary])
async def player_stats(season_number: int, service: SurvivorService = Depends(get_service)):
    return await service.get_player_stats_summary(season_number)


@router.get("/seasons/{season_number}/tribes/{tribe_name}/players", response_model=List[Player])
async def list_tribe_players(season_number: int,
                             tribe_name: str,
                             service: SurvivorService = Depends(get_service)):
    return await service.get_players_on_tribe(season_number, tribe_name)


@router.get("/players/{first_name}/{last_name}", response_model=PlayerDetails)
async def get_player(first_name: str, last_name: str, service: SurvivorService = Depends(get_service)):
    details = await service.get_player_details(first_name, last_name)
    if details is None:
        raise HTTPException(status_code=404, detail=f"Player {first_name} {last_name} not found")
    return details


@router.patch("/players/{first_name}/{last_name}", response_model=Player)
async def update_player(first_name: str,
                        last_name: str,
                        updates: PlayerUpdate,
                        service: SurvivorService = Depends(get_service)):
    return await service.update_player(first_name, last_name, updates.model_dump(exclude_unset=True))


@router.put("/players/{first_name}/{last_name}/stats", response_model=Player)
async def replace_player_stats(first_name: str,
                               last_name: str,
                               stats: PlayerStats,
                               service: SurvivorService = Depends(get_service)):
    return await service.update_player_stats(first_name, last_name, stats)


@router.delete("/players/{first_name}/{last_name}", status_code=204)
async def delete_player(first_name: str, last_name: str, service: SurvivorService = Depends(get_service)):
    await service.delete_player(first_name, last_name)


@router.post("/players/{first_name}/{last_name}/move", response_model=Dict[str, Any])
async def move_player(first_name: str,
                      last_name: str,
                      move: MoveRequest,
                      service: SurvivorService = Depends(get_service)):
    """Move a player to another tribe (tribe swap)."""
    return await service.move_player_to_tribe(first_name, last_name, move.tribe_name)


@router.post("/players/{first_name}/{last_name}/events/{event}", response_model=Player)
async def record_player_event(first_name: str,
                              last_name: str,
                              event: PlayerEvent,
                              service: SurvivorService = Depends(get_service)):
    """
    Record an episode event for a player.

    challenge_win and vote_received increment the counters, toggle_idol
    flips whether the player holds an idol.
    """
    if event == PlayerEvent.CHALLENGE_WIN:
        return await service.increment_player_challenge_wins(first_name, last_name)
    if event == PlayerEvent.VOTE_RECEIVED:
        return await service.increment_player_votes_received(first_name, last_name)
    return await service.toggle_player_idol_status(first_name, last_name)


# Alliances

@router.get("/seasons/{season_number}/alliances", response_model=List[Alliance])
async def list_alliances(season_number: int, service: SurvivorService = Depends(get_service)):
    return await service.get_alliances_in_season(season_number)


@router.post("/seasons/{season_number}/alliances", response_model=Alliance, status_code=201)
async def create_alliance(season_number: int,
                          alliance: AllianceCreate,
                          service: SurvivorService = Depends(get_service)):
    return await service.create_alliance(season_number, alliance)


@router.patch("/alliances/{alliance_name}", response_model=Alliance)
async def update_alliance(alliance_name: str,
                          updates: AllianceUpdate,
                          service: SurvivorService = Depends(get_service)):
    return await service.update_alliance(alliance_name, updates.model_dump(exclude_unset=True))


@router.delete("/alliances/{alliance_name}", status_code=204)
async def delete_alliance(alliance_name: str, service: SurvivorService = Depends(get_service)):
    await service.delete_alliance(alliance_name)


@router.get("/alliances/{alliance_name}/members", response_model=List[Player])
async def list_alliance_members(alliance_name: str, service: SurvivorService = Depends(get_service)):
    return await service.get_players_in_alliance(alliance_name)


@router.post("/alliances/{alliance_name}/members", response_model=Dict[str, Any], status_code=201)
async def add_alliance_member(alliance_name: str,
                              member: MemberRequest,
                              service: SurvivorService = Depends(get_service)):
    return await service.add_player_to_alliance(member.first_name, member.last_name, alliance_name)


@router.delete("/alliances/{alliance_name}/members/{first_name}/{last_name}", response_model=Player)
async def remove_alliance_member(alliance_name: str,
                                 first_name: str,
                                 last_name: str,
                                 service: SurvivorService = Depends(get_service)):
    return await service.remove_player_from_alliance(first_name, last_name, alliance_name)
