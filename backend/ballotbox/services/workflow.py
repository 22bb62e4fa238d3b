"""
Round workflow state machine

A round walks the six phases strictly forward, one step at a time.
Every public transition names the phase it requires and the rejection
raised when the round is anywhere else.
"""

from dataclasses import dataclass
from typing import Dict, Optional, Type
from ballotbox.core.errors import (
    AdmissionNotOpen,
    InvalidPhaseTransition,
    PhaseError,
    ProposalSubmissionNotClosed,
    ProposalSubmissionNotOpen,
    VotingNotClosed,
    VotingNotOpen,
)
from ballotbox.models.round_model import Round, WorkflowPhase

NEXT_PHASE: Dict[WorkflowPhase, Optional[WorkflowPhase]] = {
    WorkflowPhase.ADMITTING_PARTICIPANTS: WorkflowPhase.PROPOSAL_SUBMISSION_OPEN,
    WorkflowPhase.PROPOSAL_SUBMISSION_OPEN: WorkflowPhase.PROPOSAL_SUBMISSION_CLOSED,
    WorkflowPhase.PROPOSAL_SUBMISSION_CLOSED: WorkflowPhase.VOTING_OPEN,
    WorkflowPhase.VOTING_OPEN: WorkflowPhase.VOTING_CLOSED,
    WorkflowPhase.VOTING_CLOSED: WorkflowPhase.TALLIED,
    WorkflowPhase.TALLIED: None,
}


@dataclass(frozen=True)
class Transition:
    name: str
    source: WorkflowPhase
    error: Type[PhaseError]

    @property
    def target(self) -> WorkflowPhase:
        return NEXT_PHASE[self.source]


OPEN_PROPOSAL_SUBMISSION = Transition(
    "open_proposal_submission", WorkflowPhase.ADMITTING_PARTICIPANTS, AdmissionNotOpen
)
CLOSE_PROPOSAL_SUBMISSION = Transition(
    "close_proposal_submission", WorkflowPhase.PROPOSAL_SUBMISSION_OPEN, ProposalSubmissionNotOpen
)
OPEN_VOTING = Transition(
    "open_voting", WorkflowPhase.PROPOSAL_SUBMISSION_CLOSED, ProposalSubmissionNotClosed
)
CLOSE_VOTING = Transition(
    "close_voting", WorkflowPhase.VOTING_OPEN, VotingNotOpen
)
TALLY = Transition(
    "tally", WorkflowPhase.VOTING_CLOSED, VotingNotClosed
)

TRANSITIONS = {
    t.name: t
    for t in (OPEN_PROPOSAL_SUBMISSION, CLOSE_PROPOSAL_SUBMISSION, OPEN_VOTING, CLOSE_VOTING, TALLY)
}


def require_phase(round_obj: Round, phase: WorkflowPhase, error: Type[PhaseError]) -> None:
    """Reject unless the round is exactly in `phase`"""
    if round_obj.phase != phase:
        raise error()


def advance(round_obj: Round, target: WorkflowPhase) -> WorkflowPhase:
    """Move the round one step forward; returns the phase it left"""
    current = WorkflowPhase(round_obj.phase)
    if NEXT_PHASE[current] != target:
        raise InvalidPhaseTransition(
            f"Cannot move round {round_obj.id} from {current.value} to {target.value}"
        )
    round_obj.phase = target
    return current
