"""
Round data model
"""

import enum
from sqlalchemy import Column, Integer, String, DateTime, Enum
from sqlalchemy.orm import relationship
from ballotbox.core.database import Base
from ballotbox.core.utils import utc_now

class WorkflowPhase(str, enum.Enum):
    """Workflow phases of a round, in traversal order"""
    ADMITTING_PARTICIPANTS = "AdmittingParticipants"
    PROPOSAL_SUBMISSION_OPEN = "ProposalSubmissionOpen"
    PROPOSAL_SUBMISSION_CLOSED = "ProposalSubmissionClosed"
    VOTING_OPEN = "VotingOpen"
    VOTING_CLOSED = "VotingClosed"
    TALLIED = "Tallied"

    @property
    def ordinal(self) -> int:
        return list(WorkflowPhase).index(self)

class Round(Base):
    """Voting round table"""
    __tablename__ = "rounds"

    id = Column(Integer, primary_key=True, autoincrement=False)  # 0, 1, 2 ...
    name = Column(String(200), nullable=False)
    phase = Column(Enum(WorkflowPhase), nullable=False, default=WorkflowPhase.ADMITTING_PARTICIPANTS)
    winning_proposal_index = Column(Integer, nullable=False, default=0)  # valid once tallied
    created_at = Column(DateTime, default=utc_now)

    # Relationships
    proposals = relationship(
        "Proposal",
        back_populates="round",
        order_by="Proposal.position",
    )
    participants = relationship("Participant", back_populates="round")
