"""
Ledger data model
"""

from sqlalchemy import Column, Integer, String, DateTime
from ballotbox.core.database import Base
from ballotbox.core.utils import utc_now

LEDGER_ID = 1

class Ledger(Base):
    """Singleton row: authority, active round pointer and round counter"""
    __tablename__ = "ledger"

    id = Column(Integer, primary_key=True, default=LEDGER_ID)
    authority = Column(String(200), nullable=False)
    active_round_id = Column(Integer, nullable=False, default=0)
    total_rounds = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=utc_now)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now)
