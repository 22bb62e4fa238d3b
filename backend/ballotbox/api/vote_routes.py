"""
Vote API routes
"""

from fastapi import APIRouter, Depends
from typing import Optional
from ballotbox.api.deps import get_caller, get_voting_service, rejection
from ballotbox.core.errors import VotingError
from ballotbox.schemas.voting_schemas import ParticipantView, VoteCreate
from ballotbox.services.voting_service import VotingService

router = APIRouter()

@router.post("/", response_model=ParticipantView, status_code=201)
async def cast_vote(
    vote_data: VoteCreate,
    caller: Optional[str] = Depends(get_caller),
    service: VotingService = Depends(get_voting_service)
):
    """Cast the caller's vote"""
    try:
        return await service.vote(caller, vote_data.proposal_index)
    except VotingError as e:
        raise rejection(e)
