"""
Voting request and response schemas
"""

from pydantic import BaseModel, Field, field_serializer, field_validator
from typing import Optional, List, Dict, Any
from datetime import datetime
from ballotbox.core.utils import format_timestamp_with_timezone
from ballotbox.models.round_model import WorkflowPhase

class RoundCreate(BaseModel):
    """Request body for starting the next round"""
    name: str = Field(default="", max_length=200, description="Round name; generated when empty")

class AdmitRequest(BaseModel):
    """Request body for admitting a participant"""
    identity: str = Field(..., min_length=1, max_length=200, description="Identity to admit")

    @field_validator('identity')
    @classmethod
    def identity_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("identity must not be blank")
        return value

class ProposalCreate(BaseModel):
    """Request body for submitting a proposal; length limits are enforced by the ledger"""
    text: str = Field(..., description="Proposal text")

class VoteCreate(BaseModel):
    """Request body for casting a vote"""
    proposal_index: int = Field(..., description="Index of the chosen proposal")

class AuthorityTransfer(BaseModel):
    """Request body for handing over the authority role"""
    new_authority: str = Field(..., min_length=1, max_length=200)

class RoundView(BaseModel):
    """Projection of one round"""
    id: int
    name: str
    phase: WorkflowPhase
    phase_ordinal: int
    proposal_count: int
    winning_proposal_index: int
    is_active: bool = False
    created_at: Optional[datetime] = None

    @field_serializer('created_at')
    def serialize_dt(self, dt: Optional[datetime]) -> Optional[str]:
        return format_timestamp_with_timezone(dt)

class PhaseView(BaseModel):
    """Phase of the active round"""
    round_id: int
    phase: WorkflowPhase
    phase_ordinal: int

class PhaseChange(BaseModel):
    """Result of a workflow transition"""
    round_id: int
    from_phase: WorkflowPhase
    to_phase: WorkflowPhase
    winning_proposal_index: Optional[int] = None

class WinnerView(BaseModel):
    """Winning proposal of the active round"""
    round_id: int
    phase: WorkflowPhase
    winning_proposal_index: int
    tallied: bool

class ParticipantView(BaseModel):
    """Participant record; defaults when the identity was never admitted"""
    round_id: int
    identity: str
    admitted: bool = False
    has_voted: bool = False
    voted_proposal_index: int = 0

    class Config:
        from_attributes = True

class ProposalView(BaseModel):
    """Proposal record"""
    round_id: int
    index: int
    text: str
    vote_count: int
    is_sentinel: bool = False

class ProposalResult(BaseModel):
    """Per-proposal count in a results table"""
    index: int
    text: str
    vote_count: int

class RoundResults(BaseModel):
    """Vote counts of a round"""
    round_id: int
    phase: WorkflowPhase
    total_votes: int
    voters: int
    winning_proposal_index: Optional[int] = None
    proposals: List[ProposalResult]

class AuthorityView(BaseModel):
    """Current authority and ledger counters"""
    authority: str
    active_round_id: int
    total_rounds: int

class EventView(BaseModel):
    """Entry of the notification log"""
    id: int
    round_id: int
    kind: str
    payload: Dict[str, Any]
    created_at: Optional[datetime] = None

    @field_serializer('created_at')
    def serialize_dt(self, dt: Optional[datetime]) -> Optional[str]:
        return format_timestamp_with_timezone(dt)

    class Config:
        from_attributes = True
