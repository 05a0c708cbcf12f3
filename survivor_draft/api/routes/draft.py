"""
Draft endpoints.

The order is fixed once per season (random draw or manual slots) and
picks are validated against the current turn before they are recorded.
"""

import logging

from fastapi import APIRouter, Depends

from ...database.service import NotFoundError, SurvivorService
from ...datamodels.draft import DraftBoard, DraftOrderRequest, DraftPickRequest
from ...utils.draft_order import DraftOrderError, manual_draft_order, random_draft_order
from ..dependencies import get_service


logger = logging.getLogger(__name__)

router = APIRouter()


@router.put("/seasons/{season_number}/draft/order", response_model=DraftBoard)
async def set_draft_order(season_number: int,
                          request: DraftOrderRequest,
                          service: SurvivorService = Depends(get_service)):
    """
    Fix the draft order for a season.

    Without `positions` the season's fantasy teams are shuffled. With
    `positions` every team must be given a distinct slot in 1..N.
    """
    if await service.get_season(season_number) is None:
        raise NotFoundError(f"Season {season_number} not found")

    teams = [team.team_name for team in await service.get_fantasy_teams_in_season(season_number)]

    if request.positions is None:
        roster = random_draft_order(teams)
    else:
        unknown = sorted(set(request.positions) - set(teams))
        if unknown:
            raise DraftOrderError(f"Unknown teams in draft order: {', '.join(unknown)}")
        roster = manual_draft_order({team: request.positions.get(team) for team in teams})

    await service.set_draft_order(season_number, roster, request.draft_type)
    return await service.get_draft_board(season_number)


@router.get("/seasons/{season_number}/draft", response_model=DraftBoard)
async def get_draft_board(season_number: int, service: SurvivorService = Depends(get_service)):
    return await service.get_draft_board(season_number)


@router.post("/seasons/{season_number}/draft/picks", response_model=DraftBoard, status_code=201)
async def submit_pick(season_number: int,
                      pick: DraftPickRequest,
                      service: SurvivorService = Depends(get_service)):
    """Record a pick for the team on the clock and advance to the next turn."""
    return await service.submit_draft_pick(season_number, pick.team_name, pick.player_name)


@router.delete("/seasons/{season_number}/draft/picks/{round_number}/{pick_number}", response_model=DraftBoard)
async def undo_pick(season_number: int,
                    round_number: int,
                    pick_number: int,
                    service: SurvivorService = Depends(get_service)):
    await service.delete_draft_pick(season_number, round_number, pick_number)
    logger.info(f"Season {season_number}: removed pick {pick_number} (round {round_number})")
    return await service.get_draft_board(season_number)
