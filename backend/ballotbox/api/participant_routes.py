"""
Participant API routes
"""

from fastapi import APIRouter, Depends
from typing import List, Optional
from ballotbox.api.deps import get_caller, get_voting_service, rejection
from ballotbox.core.errors import VotingError
from ballotbox.schemas.voting_schemas import AdmitRequest, ParticipantView
from ballotbox.services.voting_service import VotingService

router = APIRouter()

@router.post("/", response_model=ParticipantView, status_code=201)
async def admit_participant(
    admit_data: AdmitRequest,
    caller: Optional[str] = Depends(get_caller),
    service: VotingService = Depends(get_voting_service)
):
    """Admit an identity into the active round"""
    try:
        return await service.admit(caller, admit_data.identity)
    except VotingError as e:
        raise rejection(e)

@router.get("/", response_model=List[ParticipantView])
async def list_participants(service: VotingService = Depends(get_voting_service)):
    """Participants of the active round"""
    return service.list_participants()

@router.get("/{identity}", response_model=ParticipantView)
async def lookup_participant(
    identity: str,
    service: VotingService = Depends(get_voting_service)
):
    """Participant record in the active round"""
    return service.lookup(identity)
