"""
Authorization gate
"""

from typing import Optional
from ballotbox.core.errors import NotAParticipant, Unauthorized
from ballotbox.models.ledger import Ledger
from ballotbox.models.participant import Participant


def is_authority(ledger: Ledger, caller: Optional[str]) -> bool:
    return bool(caller) and caller == ledger.authority


def require_authority(ledger: Ledger, caller: Optional[str]) -> None:
    """Reject any caller other than the ledger authority"""
    if not is_authority(ledger, caller):
        raise Unauthorized(caller)


def require_participant(participant: Optional[Participant]) -> Participant:
    """Reject callers not admitted into the active round"""
    if participant is None or not participant.admitted:
        raise NotAParticipant()
    return participant
