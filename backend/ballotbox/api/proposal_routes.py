"""
Proposal API routes
"""

from fastapi import APIRouter, Depends
from typing import List, Optional
from ballotbox.api.deps import get_caller, get_voting_service, rejection
from ballotbox.core.errors import VotingError
from ballotbox.schemas.voting_schemas import ProposalCreate, ProposalView
from ballotbox.services.voting_service import VotingService

router = APIRouter()

@router.post("/", response_model=ProposalView, status_code=201)
async def submit_proposal(
    proposal_data: ProposalCreate,
    caller: Optional[str] = Depends(get_caller),
    service: VotingService = Depends(get_voting_service)
):
    """Submit a proposal to the active round"""
    try:
        return await service.submit(caller, proposal_data.text)
    except VotingError as e:
        raise rejection(e)

@router.get("/", response_model=List[ProposalView])
async def list_proposals(service: VotingService = Depends(get_voting_service)):
    """Proposals of the active round, sentinel first"""
    return service.list_proposals()

@router.get("/{index}", response_model=ProposalView)
async def get_proposal(
    index: int,
    service: VotingService = Depends(get_voting_service)
):
    """Proposal of the active round by index"""
    try:
        return service.get(index)
    except VotingError as e:
        raise rejection(e)
