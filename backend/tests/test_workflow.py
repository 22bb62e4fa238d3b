"""
Tests for ballotbox/services/workflow.py
"""

import pytest

from ballotbox.core.errors import (
    AdmissionNotOpen,
    InvalidPhaseTransition,
    ProposalSubmissionNotClosed,
    ProposalSubmissionNotOpen,
    VotingNotClosed,
    VotingNotOpen,
)
from ballotbox.models.round_model import Round, WorkflowPhase
from ballotbox.services.workflow import (
    NEXT_PHASE,
    TRANSITIONS,
    advance,
    require_phase,
)


class TestWorkflowPhase:

    def test_six_phases_in_order(self):
        assert [p.value for p in WorkflowPhase] == [
            "AdmittingParticipants",
            "ProposalSubmissionOpen",
            "ProposalSubmissionClosed",
            "VotingOpen",
            "VotingClosed",
            "Tallied",
        ]

    def test_ordinals(self):
        assert WorkflowPhase.ADMITTING_PARTICIPANTS.ordinal == 0
        assert WorkflowPhase.TALLIED.ordinal == 5

    def test_each_phase_has_next_ordinal_as_successor(self):
        for phase, successor in NEXT_PHASE.items():
            if successor is None:
                assert phase == WorkflowPhase.TALLIED
            else:
                assert successor.ordinal == phase.ordinal + 1


class TestTransitions:

    def test_transition_errors(self):
        assert TRANSITIONS["open_proposal_submission"].error is AdmissionNotOpen
        assert TRANSITIONS["close_proposal_submission"].error is ProposalSubmissionNotOpen
        assert TRANSITIONS["open_voting"].error is ProposalSubmissionNotClosed
        assert TRANSITIONS["close_voting"].error is VotingNotOpen
        assert TRANSITIONS["tally"].error is VotingNotClosed

    def test_transition_targets(self):
        assert TRANSITIONS["open_proposal_submission"].target == WorkflowPhase.PROPOSAL_SUBMISSION_OPEN
        assert TRANSITIONS["tally"].target == WorkflowPhase.TALLIED

    def test_require_phase_rejects_other_phases(self):
        round_obj = Round(id=0, name="Session 1", phase=WorkflowPhase.VOTING_OPEN)
        require_phase(round_obj, WorkflowPhase.VOTING_OPEN, VotingNotOpen)
        with pytest.raises(VotingNotClosed):
            require_phase(round_obj, WorkflowPhase.VOTING_CLOSED, VotingNotClosed)

    def test_advance_one_step(self):
        round_obj = Round(id=0, name="Session 1", phase=WorkflowPhase.ADMITTING_PARTICIPANTS)
        left = advance(round_obj, WorkflowPhase.PROPOSAL_SUBMISSION_OPEN)
        assert left == WorkflowPhase.ADMITTING_PARTICIPANTS
        assert round_obj.phase == WorkflowPhase.PROPOSAL_SUBMISSION_OPEN

    def test_advance_cannot_skip(self):
        round_obj = Round(id=0, name="Session 1", phase=WorkflowPhase.ADMITTING_PARTICIPANTS)
        with pytest.raises(InvalidPhaseTransition):
            advance(round_obj, WorkflowPhase.VOTING_OPEN)
        assert round_obj.phase == WorkflowPhase.ADMITTING_PARTICIPANTS

    def test_advance_cannot_go_back(self):
        round_obj = Round(id=0, name="Session 1", phase=WorkflowPhase.VOTING_CLOSED)
        with pytest.raises(InvalidPhaseTransition):
            advance(round_obj, WorkflowPhase.VOTING_OPEN)

    def test_tallied_is_terminal(self):
        round_obj = Round(id=0, name="Session 1", phase=WorkflowPhase.TALLIED)
        for phase in WorkflowPhase:
            with pytest.raises(InvalidPhaseTransition):
                advance(round_obj, phase)
