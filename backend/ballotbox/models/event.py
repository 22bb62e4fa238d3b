"""
Notification log data model
"""

from sqlalchemy import Column, Integer, String, DateTime, JSON
from ballotbox.core.database import Base
from ballotbox.core.utils import utc_now

class Event(Base):
    """Notification emitted by a successful mutation"""
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, autoincrement=True)  # total order of mutations
    round_id = Column(Integer, nullable=False, index=True)
    kind = Column(String(40), nullable=False)  # round_created, participant_admitted, phase_changed, ...
    payload = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime, default=utc_now)
