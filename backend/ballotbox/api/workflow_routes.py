"""
Workflow transition API routes
"""

from fastapi import APIRouter, Depends
from typing import Optional
from ballotbox.api.deps import get_caller, get_voting_service, rejection
from ballotbox.core.errors import VotingError
from ballotbox.schemas.voting_schemas import PhaseChange
from ballotbox.services.voting_service import VotingService

router = APIRouter()

@router.post("/open-proposals", response_model=PhaseChange)
async def open_proposal_submission(
    caller: Optional[str] = Depends(get_caller),
    service: VotingService = Depends(get_voting_service)
):
    """Close admission and open proposal submission"""
    try:
        return await service.open_proposal_submission(caller)
    except VotingError as e:
        raise rejection(e)

@router.post("/close-proposals", response_model=PhaseChange)
async def close_proposal_submission(
    caller: Optional[str] = Depends(get_caller),
    service: VotingService = Depends(get_voting_service)
):
    """Close proposal submission"""
    try:
        return await service.close_proposal_submission(caller)
    except VotingError as e:
        raise rejection(e)

@router.post("/open-voting", response_model=PhaseChange)
async def open_voting(
    caller: Optional[str] = Depends(get_caller),
    service: VotingService = Depends(get_voting_service)
):
    """Open voting"""
    try:
        return await service.open_voting(caller)
    except VotingError as e:
        raise rejection(e)

@router.post("/close-voting", response_model=PhaseChange)
async def close_voting(
    caller: Optional[str] = Depends(get_caller),
    service: VotingService = Depends(get_voting_service)
):
    """Close voting"""
    try:
        return await service.close_voting(caller)
    except VotingError as e:
        raise rejection(e)

@router.post("/tally", response_model=PhaseChange)
async def tally(
    caller: Optional[str] = Depends(get_caller),
    service: VotingService = Depends(get_voting_service)
):
    """Tally the votes and record the winner"""
    try:
        return await service.tally(caller)
    except VotingError as e:
        raise rejection(e)
