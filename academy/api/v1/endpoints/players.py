"""
Player performance endpoints.
"""

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from academy.db.session import get_db
from academy.schemas.performance import PlayerPerformanceResponse
from academy.schemas.player import PlayerCreate
from academy.services.performance_service import PerformanceService

router = APIRouter()


@router.post("", summary="Register a player's performance record.", response_model=PlayerPerformanceResponse,
             status_code=status.HTTP_201_CREATED, )
def register_player(data: PlayerCreate, db: Session = Depends(get_db)):
    service = PerformanceService(db)
    return service.register_player(data)


@router.get("/{player_id}/performance", summary="Player ratings, history and recent sessions.",
            response_model=PlayerPerformanceResponse, )
def get_player_performance(player_id: str, db: Session = Depends(get_db)):
    service = PerformanceService(db)
    return service.get_player_performance(player_id)
