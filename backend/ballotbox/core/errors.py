"""
Typed rejections raised by the voting ledger
"""

from typing import Optional


class VotingError(Exception):
    """Base class for every rejected ledger call"""

    status_code: int = 400
    message: str = "Request rejected"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)

    @property
    def code(self) -> str:
        return type(self).__name__

    def to_dict(self) -> dict:
        return {"code": self.code, "message": str(self)}


# Authorization

class Unauthorized(VotingError):
    status_code = 403

    def __init__(self, caller: Optional[str]):
        self.caller = caller
        super().__init__(f"Caller {caller!r} is not the authority")

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["caller"] = self.caller
        return data


# Phase sequencing

class PhaseError(VotingError):
    status_code = 409


class AdmissionNotOpen(PhaseError):
    message = "Participant admission is not open"


class ProposalSubmissionNotOpen(PhaseError):
    message = "Proposal submission is not open"


class ProposalSubmissionNotClosed(PhaseError):
    message = "Proposal submission has not been closed"


class VotingNotOpen(PhaseError):
    message = "Voting is not open"


class VotingNotClosed(PhaseError):
    message = "Voting has not been closed"


class RoundNotFinished(PhaseError):
    message = "The active round has not been tallied"


class InvalidPhaseTransition(PhaseError):
    message = "Phase can only advance one step forward"


# Identity and state conflicts

class AlreadyAdmitted(VotingError):
    status_code = 409
    message = "Identity is already admitted in this round"


class AlreadyVoted(VotingError):
    status_code = 409
    message = "Participant has already voted in this round"


class NotAParticipant(VotingError):
    status_code = 403
    message = "Caller is not an admitted participant of the active round"


# Input validation

class EmptyProposalText(VotingError):
    status_code = 422
    message = "Proposal text must not be empty"


class ProposalTextTooLong(VotingError):
    status_code = 422
    message = "Proposal text is too long"


class TooManyProposals(VotingError):
    status_code = 422
    message = "The round already holds the maximum number of proposals"


# Lookups

class ProposalNotFound(VotingError):
    status_code = 422
    message = "No proposal at that index"


class ProposalIndexOutOfRange(VotingError):
    status_code = 404
    message = "Proposal index out of range"


class RoundNotFound(VotingError):
    status_code = 404
    message = "Round does not exist"
