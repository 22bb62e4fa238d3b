"""
Database models
"""

from .ledger import Ledger
from .round_model import Round, WorkflowPhase
from .participant import Participant
from .proposal import Proposal
from .event import Event

__all__ = ["Ledger", "Round", "WorkflowPhase", "Participant", "Proposal", "Event"]
