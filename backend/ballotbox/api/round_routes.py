"""
Round management API routes
"""

from fastapi import APIRouter, Depends, Query
from typing import List, Optional
from ballotbox.api.deps import SQL_INT_MAX, get_caller, get_voting_service, rejection
from ballotbox.core.errors import VotingError
from ballotbox.schemas.voting_schemas import (
    PhaseView,
    RoundCreate,
    RoundResults,
    RoundView,
    WinnerView,
)
from ballotbox.services.voting_service import VotingService

router = APIRouter()

@router.get("/current", response_model=RoundView)
async def get_current_round(service: VotingService = Depends(get_voting_service)):
    """Active round"""
    return service.current_round_view()

@router.get("/current/phase", response_model=PhaseView)
async def get_current_phase(service: VotingService = Depends(get_voting_service)):
    """Phase of the active round"""
    return service.current_phase()

@router.get("/current/winner", response_model=WinnerView)
async def get_winner(service: VotingService = Depends(get_voting_service)):
    """Winning proposal index of the active round"""
    return service.winning_proposal_index()

@router.get("/current/results", response_model=RoundResults)
async def get_current_results(service: VotingService = Depends(get_voting_service)):
    """Vote counts of the active round"""
    return service.results()

@router.post("/", response_model=RoundView, status_code=201)
async def create_round(
    round_data: RoundCreate,
    caller: Optional[str] = Depends(get_caller),
    service: VotingService = Depends(get_voting_service)
):
    """Start the next round"""
    try:
        return await service.create_next_round(caller, round_data.name)
    except VotingError as e:
        raise rejection(e)

@router.get("/", response_model=List[RoundView])
async def list_rounds(
    skip: int = Query(0, ge=0, le=SQL_INT_MAX),
    limit: int = Query(50, ge=1, le=1000),
    service: VotingService = Depends(get_voting_service)
):
    """All rounds, oldest first"""
    return service.list_rounds(skip=skip, limit=limit)

@router.get("/{round_id}", response_model=RoundView)
async def get_round(
    round_id: int,
    service: VotingService = Depends(get_voting_service)
):
    """Any round by id"""
    try:
        return service.round_view(round_id)
    except VotingError as e:
        raise rejection(e)

@router.get("/{round_id}/results", response_model=RoundResults)
async def get_round_results(
    round_id: int,
    service: VotingService = Depends(get_voting_service)
):
    """Vote counts of any round"""
    try:
        return service.results(round_id)
    except VotingError as e:
        raise rejection(e)
