"""
Season and tribe endpoints.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from ...database.service import SurvivorService
from ...datamodels.entities import Season, SeasonCreate, SeasonUpdate, Tribe, TribeCreate, TribeUpdate
from ..dependencies import get_service


router = APIRouter()


class TribeOverview(BaseModel):
    tribe: Tribe
    player_count: int


@router.get("/seasons", response_model=List[Season])
async def list_seasons(service: SurvivorService = Depends(get_service)):
    return await service.get_all_seasons()


@router.post("/seasons", response_model=Season, status_code=201)
async def create_season(season: SeasonCreate, service: SurvivorService = Depends(get_service)):
    return await service.create_season(season)


@router.get("/seasons/{season_number}", response_model=Season)
async def get_season(season_number: int, service: SurvivorService = Depends(get_service)):
    season = await service.get_season(season_number)
    if season is None:
        raise HTTPException(status_code=404, detail=f"Season {season_number} not found")
    return season


@router.patch("/seasons/{season_number}", response_model=Season)
async def update_season(season_number: int,
                        updates: SeasonUpdate,
                        service: SurvivorService = Depends(get_service)):
    return await service.update_season(season_number, updates.model_dump(exclude_unset=True))


@router.delete("/seasons/{season_number}", status_code=204)
async def delete_season(season_number: int, service: SurvivorService = Depends(get_service)):
    """Delete a season. Cascades to every relationship of the season node."""
    await service.delete_season(season_number)


@router.get("/seasons/{season_number}/overview", response_model=List[TribeOverview])
async def season_overview(season_number: int, service: SurvivorService = Depends(get_service)):
    """Tribes in the season with their player counts."""
    return await service.get_season_overview(season_number)


@router.get("/seasons/{season_number}/tribes", response_model=List[Tribe])
async def list_tribes(season_number: int, service: SurvivorService = Depends(get_service)):
    return await service.get_tribes_in_season(season_number)


@router.post("/seasons/{season_number}/tribes", response_model=Tribe, status_code=201)
async def create_tribe(season_number: int,
                       tribe: TribeCreate,
                       service: SurvivorService = Depends(get_service)):
    return await service.create_tribe(season_number, tribe)


@router.patch("/seasons/{season_number}/tribes/{tribe_name}", response_model=Tribe)
async def update_tribe(season_number: int,
                       tribe_name: str,
                       updates: TribeUpdate,
                       service: SurvivorService = Depends(get_service)):
    return await service.update_tribe(season_number, tribe_name, updates.model_dump(exclude_unset=True))


@router.delete("/seasons/{season_number}/tribes/{tribe_name}", status_code=204)
async def delete_tribe(season_number: int, tribe_name: str, service: SurvivorService = Depends(get_service)):
    await service.delete_tribe(season_number, tribe_name)
