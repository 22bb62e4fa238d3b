"""
Authority and notification log API routes
"""

from fastapi import APIRouter, Depends, Query
from typing import List, Optional
from ballotbox.api.deps import SQL_INT_MAX, get_caller, get_voting_service, rejection
from ballotbox.core.errors import VotingError
from ballotbox.schemas.voting_schemas import AuthorityTransfer, AuthorityView, EventView
from ballotbox.services.voting_service import VotingService

router = APIRouter()

@router.get("/authority", response_model=AuthorityView)
async def get_authority(service: VotingService = Depends(get_voting_service)):
    """Current authority and ledger counters"""
    return service.authority_view()

@router.post("/authority/transfer", response_model=AuthorityView)
async def transfer_authority(
    transfer_data: AuthorityTransfer,
    caller: Optional[str] = Depends(get_caller),
    service: VotingService = Depends(get_voting_service)
):
    """Hand the authority role to another identity"""
    try:
        return await service.transfer_authority(caller, transfer_data.new_authority)
    except VotingError as e:
        raise rejection(e)

@router.get("/events", response_model=List[EventView])
async def list_events(
    since: int = Query(0, ge=0, le=SQL_INT_MAX),
    round_id: Optional[int] = Query(None, ge=0, le=SQL_INT_MAX),
    limit: int = Query(100, ge=1, le=1000),
    service: VotingService = Depends(get_voting_service)
):
    """Notification log, oldest first"""
    return service.list_events(since=since, round_id=round_id, limit=limit)
