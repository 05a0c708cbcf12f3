"""
Fantasy team endpoints.
"""

from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from ...database.service import SurvivorService
from ...datamodels.entities import FantasyTeam, FantasyTeamCreate, FantasyTeamUpdate, LeaderboardEntry, Player
from ..dependencies import get_service


router = APIRouter()


class RosterRequest(BaseModel):
    first_name: str
    last_name: str


@router.get("/seasons/{season_number}/teams", response_model=List[FantasyTeam])
async def list_season_teams(season_number: int, service: SurvivorService = Depends(get_service)):
    return await service.get_fantasy_teams_in_season(season_number)


@router.post("/seasons/{season_number}/teams", response_model=FantasyTeam, status_code=201)
async def create_team(season_number: int,
                      team: FantasyTeamCreate,
                      service: SurvivorService = Depends(get_service)):
    return await service.create_fantasy_team(season_number, team)


@router.get("/teams", response_model=List[FantasyTeam])
async def list_teams(service: SurvivorService = Depends(get_service)):
    return await service.get_all_fantasy_teams()


@router.get("/teams/{team_name}", response_model=FantasyTeam)
async def get_team(team_name: str, service: SurvivorService = Depends(get_service)):
    team = await service.get_fantasy_team_with_players(team_name)
    if team is None:
        raise HTTPException(status_code=404, detail=f"Fantasy team {team_name} not found")
    return team


@router.patch("/teams/{team_name}", response_model=FantasyTeam)
async def update_team(team_name: str,
                      updates: FantasyTeamUpdate,
                      service: SurvivorService = Depends(get_service)):
    return await service.update_fantasy_team(team_name, updates.model_dump(exclude_unset=True))


@router.delete("/teams/{team_name}", status_code=204)
async def delete_team(team_name: str, service: SurvivorService = Depends(get_service)):
    await service.delete_fantasy_team(team_name)


@router.post("/teams/{team_name}/roster", response_model=Dict[str, Any], status_code=201)
async def add_to_roster(team_name: str,
                        player: RosterRequest,
                        service: SurvivorService = Depends(get_service)):
    """Put a player on a team outside the draft flow (commissioner fix-ups)."""
    return await service.draft_player_to_team(player.first_name, player.last_name, team_name)


@router.delete("/teams/{team_name}/roster/{first_name}/{last_name}", response_model=Player)
async def remove_from_roster(team_name: str,
                             first_name: str,
                             last_name: str,
                             service: SurvivorService = Depends(get_service)):
    return await service.remove_player_from_fantasy_team(first_name, last_name, team_name)


@router.get("/leaderboard", response_model=List[LeaderboardEntry])
async def leaderboard(service: SurvivorService = Depends(get_service)):
    """Teams ranked by their roster's total challenge wins."""
    return await service.get_fantasy_team_leaderboard()
