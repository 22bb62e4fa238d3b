"""
Shared route dependencies
"""

from contextlib import contextmanager
from typing import Optional
from fastapi import Depends, FastAPI, Header, HTTPException
from sqlalchemy.orm import Session
from ballotbox.core.database import get_db
from ballotbox.core.errors import VotingError
from ballotbox.services.notifications import get_notification_bus
from ballotbox.services.voting_service import VotingService

# largest value an integer column or bound parameter can hold
SQL_INT_MAX = 2**63 - 1


def get_caller(x_caller: Optional[str] = Header(default=None)) -> Optional[str]:
    """Identity of the caller, taken from the X-Caller header"""
    if x_caller is not None:
        x_caller = x_caller.strip() or None
    return x_caller


@contextmanager
def short_session(app: FastAPI):
    """Session closed as soon as the block ends; honours get_db overrides"""
    sessions = app.dependency_overrides.get(get_db, get_db)()
    try:
        yield next(sessions)
    finally:
        sessions.close()


def get_voting_service(db: Session = Depends(get_db)) -> VotingService:
    return VotingService(db, get_notification_bus())


def rejection(error: VotingError) -> HTTPException:
    """Convert a ledger rejection into an HTTP error"""
    return HTTPException(status_code=error.status_code, detail=error.to_dict())
