"""
Voting ledger service

Every mutating operation takes the caller identity, runs under the
ledger lock inside a single session transaction and either commits its
whole effect or rolls back and raises a `VotingError`. Notifications
are published only after a successful commit.
"""

import logging
import threading
from contextlib import contextmanager
from typing import List, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session
from ballotbox.core.config import settings
from ballotbox.core.errors import (
    AdmissionNotOpen,
    AlreadyAdmitted,
    AlreadyVoted,
    EmptyProposalText,
    ProposalIndexOutOfRange,
    ProposalNotFound,
    ProposalSubmissionNotOpen,
    ProposalTextTooLong,
    RoundNotFinished,
    RoundNotFound,
    TooManyProposals,
    VotingError,
    VotingNotOpen,
)
from ballotbox.core.utils import utc_now
from ballotbox.models.event import Event
from ballotbox.models.ledger import Ledger, LEDGER_ID
from ballotbox.models.participant import Participant
from ballotbox.models.proposal import Proposal
from ballotbox.models.round_model import Round, WorkflowPhase
from ballotbox.schemas.voting_schemas import (
    AuthorityView,
    EventView,
    ParticipantView,
    PhaseChange,
    PhaseView,
    ProposalResult,
    ProposalView,
    RoundResults,
    RoundView,
    WinnerView,
)
from ballotbox.services import notifications
from ballotbox.services.authority import require_authority, require_participant
from ballotbox.services.notifications import Notification, NotificationBus
from ballotbox.services.tally import compute_winner
from ballotbox.services.workflow import (
    CLOSE_PROPOSAL_SUBMISSION,
    CLOSE_VOTING,
    OPEN_PROPOSAL_SUBMISSION,
    OPEN_VOTING,
    TALLY,
    Transition,
    advance,
    require_phase,
)

logger = logging.getLogger(__name__)

# serializes every mutation across sessions and threads
_ledger_lock = threading.RLock()


class LedgerNotInitialized(RuntimeError):
    pass


class VotingService:
    """Round, participant, proposal and vote management"""

    def __init__(self, db: Session, bus: Optional[NotificationBus] = None):
        self.db = db
        self.bus = bus
        self._pending: List[Event] = []

    # ------------------------------------------------------------------
    # transaction plumbing
    # ------------------------------------------------------------------

    @contextmanager
    def _mutation(self, operation: str, caller: Optional[str]):
        with _ledger_lock:
            self._pending = []
            try:
                yield
                self.db.flush()
                published = [self._to_notification(event) for event in self._pending]
                self.db.commit()
            except VotingError as e:
                self.db.rollback()
                logger.info("%s by %r rejected: %s", operation, caller, e.code)
                raise
            except Exception:
                self.db.rollback()
                logger.exception("%s by %r failed", operation, caller)
                raise
            finally:
                self._pending = []

            if self.bus is not None:
                for notification in published:
                    self.bus.publish(notification)

    def _emit(self, kind: str, event_round_id: int, **payload) -> None:
        event = Event(round_id=event_round_id, kind=kind, payload=payload, created_at=utc_now())
        self.db.add(event)
        self._pending.append(event)

    @staticmethod
    def _to_notification(event: Event) -> Notification:
        return Notification(
            kind=event.kind,
            round_id=event.round_id,
            payload=dict(event.payload),
            event_id=event.id,
            created_at=event.created_at,
        )

    # ------------------------------------------------------------------
    # lookups
    # ------------------------------------------------------------------

    def _ledger(self) -> Ledger:
        ledger = self.db.get(Ledger, LEDGER_ID)
        if ledger is None:
            raise LedgerNotInitialized("Ledger has not been initialized")
        return ledger

    def _active_round(self, ledger: Optional[Ledger] = None) -> Round:
        ledger = ledger or self._ledger()
        return self.db.get(Round, ledger.active_round_id)

    def _proposal_count(self, round_id: int) -> int:
        return self.db.query(func.count(Proposal.position)).filter(
            Proposal.round_id == round_id
        ).scalar() or 0

    def _round(self, round_id: int) -> Round:
        if not 0 <= round_id < self._ledger().total_rounds:
            raise RoundNotFound(f"Round {round_id} does not exist")
        return self.db.get(Round, round_id)

    def _participant(self, round_id: int, identity: Optional[str]) -> Optional[Participant]:
        if not identity:
            return None
        return self.db.get(Participant, (round_id, identity))

    def _round_view(self, round_obj: Round, ledger: Ledger) -> RoundView:
        phase = WorkflowPhase(round_obj.phase)
        return RoundView(
            id=round_obj.id,
            name=round_obj.name,
            phase=phase,
            phase_ordinal=phase.ordinal,
            proposal_count=self._proposal_count(round_obj.id),
            winning_proposal_index=round_obj.winning_proposal_index,
            is_active=round_obj.id == ledger.active_round_id,
            created_at=round_obj.created_at,
        )

    @staticmethod
    def _proposal_view(proposal: Proposal) -> ProposalView:
        return ProposalView(
            round_id=proposal.round_id,
            index=proposal.position,
            text=proposal.text,
            vote_count=proposal.vote_count,
            is_sentinel=proposal.position == 0,
        )

    # ------------------------------------------------------------------
    # round registry
    # ------------------------------------------------------------------

    async def init_ledger(self, authority: str, first_round_name: str = "") -> AuthorityView:
        """Seed the authority and round 0; a no-op when already initialized"""
        existing = self.db.get(Ledger, LEDGER_ID)
        if existing is not None:
            return self.authority_view()

        with self._mutation("init_ledger", authority):
            ledger = Ledger(id=LEDGER_ID, authority=authority, active_round_id=0, total_rounds=0)
            self.db.add(ledger)
            self._create_round(ledger, first_round_name or settings.FIRST_ROUND_NAME)

        logger.info("Ledger initialized, authority=%r", authority)
        return self.authority_view()

    def _create_round(self, ledger: Ledger, name: str) -> Round:
        round_id = ledger.total_rounds
        name = name or f"{settings.ROUND_NAME_PREFIX} {round_id + 1}"

        round_obj = Round(
            id=round_id,
            name=name,
            phase=WorkflowPhase.ADMITTING_PARTICIPANTS,
            winning_proposal_index=0,
            created_at=utc_now(),
        )
        self.db.add(round_obj)
        ledger.active_round_id = round_id
        ledger.total_rounds = round_id + 1

        self._emit(notifications.ROUND_CREATED, round_id, id=round_id, name=name)
        logger.info("Round %d created: %s", round_id, name)
        return round_obj

    async def create_next_round(self, caller: Optional[str], name: str = "") -> RoundView:
        """Start a new round once the active one has been tallied"""
        with self._mutation("create_next_round", caller):
            ledger = self._ledger()
            require_authority(ledger, caller)
            if self._active_round(ledger).phase != WorkflowPhase.TALLIED:
                raise RoundNotFinished()
            round_obj = self._create_round(ledger, name)

        return self._round_view(round_obj, ledger)

    def current_round_view(self) -> RoundView:
        ledger = self._ledger()
        return self._round_view(self._active_round(ledger), ledger)

    def round_view(self, round_id: int) -> RoundView:
        round_obj = self._round(round_id)
        return self._round_view(round_obj, self._ledger())

    def list_rounds(self, skip: int = 0, limit: int = 50) -> List[RoundView]:
        ledger = self._ledger()
        rounds = self.db.query(Round).order_by(Round.id).offset(skip).limit(limit).all()
        return [self._round_view(r, ledger) for r in rounds]

    def current_round_id(self) -> int:
        return self._ledger().active_round_id

    def total_rounds(self) -> int:
        return self._ledger().total_rounds

    def current_phase(self) -> PhaseView:
        round_obj = self._active_round()
        phase = WorkflowPhase(round_obj.phase)
        return PhaseView(round_id=round_obj.id, phase=phase, phase_ordinal=phase.ordinal)

    def winning_proposal_index(self) -> WinnerView:
        round_obj = self._active_round()
        phase = WorkflowPhase(round_obj.phase)
        return WinnerView(
            round_id=round_obj.id,
            phase=phase,
            winning_proposal_index=round_obj.winning_proposal_index,
            tallied=phase == WorkflowPhase.TALLIED,
        )

    # ------------------------------------------------------------------
    # authority
    # ------------------------------------------------------------------

    def authority_view(self) -> AuthorityView:
        ledger = self._ledger()
        return AuthorityView(
            authority=ledger.authority,
            active_round_id=ledger.active_round_id,
            total_rounds=ledger.total_rounds,
        )

    async def transfer_authority(self, caller: Optional[str], new_authority: str) -> AuthorityView:
        """Hand the authority role to another identity"""
        with self._mutation("transfer_authority", caller):
            ledger = self._ledger()
            require_authority(ledger, caller)
            previous = ledger.authority
            ledger.authority = new_authority
            self._emit(
                notifications.AUTHORITY_TRANSFERRED,
                ledger.active_round_id,
                previous=previous,
                new=new_authority,
            )

        logger.info("Authority transferred from %r to %r", previous, new_authority)
        return self.authority_view()

    # ------------------------------------------------------------------
    # workflow transitions
    # ------------------------------------------------------------------

    async def _transition(self, transition: Transition, caller: Optional[str]) -> PhaseChange:
        with self._mutation(transition.name, caller):
            ledger = self._ledger()
            require_authority(ledger, caller)
            round_obj = self._active_round(ledger)
            require_phase(round_obj, transition.source, transition.error)

            if transition is OPEN_PROPOSAL_SUBMISSION:
                self.db.add(Proposal(
                    round_id=round_obj.id,
                    position=0,
                    text=settings.SENTINEL_PROPOSAL,
                    vote_count=0,
                    submitted_by=None,
                ))
            elif transition is TALLY:
                round_obj.winning_proposal_index = self._compute_winner(round_obj.id)

            from_phase = advance(round_obj, transition.target)
            self._emit(
                notifications.PHASE_CHANGED,
                round_obj.id,
                round_id=round_obj.id,
                from_phase=from_phase.value,
                to_phase=transition.target.value,
            )

        logger.info("Round %d: %s -> %s", round_obj.id, from_phase.value, transition.target.value)
        return PhaseChange(
            round_id=round_obj.id,
            from_phase=from_phase,
            to_phase=transition.target,
            winning_proposal_index=round_obj.winning_proposal_index if transition is TALLY else None,
        )

    async def open_proposal_submission(self, caller: Optional[str]) -> PhaseChange:
        return await self._transition(OPEN_PROPOSAL_SUBMISSION, caller)

    async def close_proposal_submission(self, caller: Optional[str]) -> PhaseChange:
        return await self._transition(CLOSE_PROPOSAL_SUBMISSION, caller)

    async def open_voting(self, caller: Optional[str]) -> PhaseChange:
        return await self._transition(OPEN_VOTING, caller)

    async def close_voting(self, caller: Optional[str]) -> PhaseChange:
        return await self._transition(CLOSE_VOTING, caller)

    async def tally(self, caller: Optional[str]) -> PhaseChange:
        return await self._transition(TALLY, caller)

    def _compute_winner(self, round_id: int) -> int:
        counts = [
            count for (count,) in self.db.query(Proposal.vote_count).filter(
                Proposal.round_id == round_id
            ).order_by(Proposal.position).all()
        ]
        return compute_winner(counts)

    # ------------------------------------------------------------------
    # participant registry
    # ------------------------------------------------------------------

    async def admit(self, caller: Optional[str], identity: str) -> ParticipantView:
        """Admit an identity into the active round"""
        with self._mutation("admit", caller):
            ledger = self._ledger()
            require_authority(ledger, caller)
            round_obj = self._active_round(ledger)
            require_phase(round_obj, WorkflowPhase.ADMITTING_PARTICIPANTS, AdmissionNotOpen)

            participant = self._participant(round_obj.id, identity)
            if participant is not None and participant.admitted:
                raise AlreadyAdmitted(f"{identity!r} is already admitted in round {round_obj.id}")

            participant = Participant(
                round_id=round_obj.id,
                identity=identity,
                admitted=True,
                has_voted=False,
                voted_proposal_index=0,
                admitted_at=utc_now(),
            )
            self.db.add(participant)
            self._emit(
                notifications.PARTICIPANT_ADMITTED,
                round_obj.id,
                round_id=round_obj.id,
                identity=identity,
            )

        logger.info("Round %d: admitted %r", round_obj.id, identity)
        return ParticipantView.model_validate(participant)

    def lookup(self, identity: str) -> ParticipantView:
        """Participant record in the active round; defaults when unknown"""
        round_id = self.current_round_id()
        participant = self._participant(round_id, identity)
        if participant is None:
            return ParticipantView(round_id=round_id, identity=identity)
        return ParticipantView.model_validate(participant)

    def list_participants(self) -> List[ParticipantView]:
        round_id = self.current_round_id()
        participants = self.db.query(Participant).filter(
            Participant.round_id == round_id
        ).order_by(Participant.admitted_at, Participant.identity).all()
        return [ParticipantView.model_validate(p) for p in participants]

    # ------------------------------------------------------------------
    # proposal registry
    # ------------------------------------------------------------------

    async def submit(self, caller: Optional[str], text: str) -> ProposalView:
        """Append a proposal to the active round"""
        with self._mutation("submit", caller):
            round_obj = self._active_round()
            require_participant(self._participant(round_obj.id, caller))
            require_phase(round_obj, WorkflowPhase.PROPOSAL_SUBMISSION_OPEN, ProposalSubmissionNotOpen)

            if text == "":
                raise EmptyProposalText()
            if len(text) > settings.MAX_PROPOSAL_LENGTH:
                raise ProposalTextTooLong(
                    f"Proposal text is {len(text)} characters, at most {settings.MAX_PROPOSAL_LENGTH} allowed"
                )
            index = self._proposal_count(round_obj.id)
            if index >= settings.MAX_PROPOSALS:
                raise TooManyProposals(f"Round {round_obj.id} already holds {index} proposals")

            proposal = Proposal(
                round_id=round_obj.id,
                position=index,
                text=text,
                vote_count=0,
                submitted_by=caller,
                submitted_at=utc_now(),
            )
            self.db.add(proposal)
            self._emit(
                notifications.PROPOSAL_SUBMITTED,
                round_obj.id,
                round_id=round_obj.id,
                index=index,
            )

        logger.info("Round %d: proposal %d submitted by %r", round_obj.id, index, caller)
        return self._proposal_view(proposal)

    def get(self, index: int) -> ProposalView:
        """Proposal of the active round at `index`"""
        round_id = self.current_round_id()
        if not 0 <= index < self._proposal_count(round_id):
            raise ProposalIndexOutOfRange(f"No proposal {index} in round {round_id}")
        proposal = self.db.get(Proposal, (round_id, index))
        return self._proposal_view(proposal)

    def list_proposals(self) -> List[ProposalView]:
        round_id = self.current_round_id()
        proposals = self.db.query(Proposal).filter(
            Proposal.round_id == round_id
        ).order_by(Proposal.position).all()
        return [self._proposal_view(p) for p in proposals]

    # ------------------------------------------------------------------
    # voting
    # ------------------------------------------------------------------

    async def vote(self, caller: Optional[str], proposal_index: int) -> ParticipantView:
        """Record the caller's single vote in the active round"""
        with self._mutation("vote", caller):
            round_obj = self._active_round()
            participant = require_participant(self._participant(round_obj.id, caller))
            require_phase(round_obj, WorkflowPhase.VOTING_OPEN, VotingNotOpen)

            if participant.has_voted:
                raise AlreadyVoted()

            if not 0 <= proposal_index < self._proposal_count(round_obj.id):
                raise ProposalNotFound(f"No proposal {proposal_index} in round {round_obj.id}")
            proposal = self.db.get(Proposal, (round_obj.id, proposal_index))

            participant.has_voted = True
            participant.voted_proposal_index = proposal_index
            participant.voted_at = utc_now()
            proposal.vote_count += 1
            self._emit(
                notifications.VOTE_CAST,
                round_obj.id,
                round_id=round_obj.id,
                identity=caller,
                index=proposal_index,
            )

        logger.info("Round %d: %r voted for %d", round_obj.id, caller, proposal_index)
        return ParticipantView.model_validate(participant)

    def results(self, round_id: Optional[int] = None) -> RoundResults:
        """Vote counts per proposal"""
        if round_id is None:
            round_id = self.current_round_id()
        round_obj = self._round(round_id)

        proposals = self.db.query(Proposal).filter(
            Proposal.round_id == round_id
        ).order_by(Proposal.position).all()
        voters = self.db.query(func.count(Participant.identity)).filter(
            Participant.round_id == round_id,
            Participant.has_voted.is_(True),
        ).scalar() or 0

        phase = WorkflowPhase(round_obj.phase)
        return RoundResults(
            round_id=round_id,
            phase=phase,
            total_votes=sum(p.vote_count for p in proposals),
            voters=voters,
            winning_proposal_index=round_obj.winning_proposal_index if phase == WorkflowPhase.TALLIED else None,
            proposals=[
                ProposalResult(index=p.position, text=p.text, vote_count=p.vote_count)
                for p in proposals
            ],
        )

    # ------------------------------------------------------------------
    # notification log
    # ------------------------------------------------------------------

    def list_events(self, since: int = 0, round_id: Optional[int] = None, limit: int = 100) -> List[EventView]:
        """Logged notifications with id greater than `since`"""
        query = self.db.query(Event).filter(Event.id > since)
        if round_id is not None:
            query = query.filter(Event.round_id == round_id)
        events = query.order_by(Event.id).limit(limit).all()
        return [EventView.model_validate(e) for e in events]
