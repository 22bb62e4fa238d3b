"""
Participant data model
"""

from sqlalchemy import Column, Integer, String, ForeignKey, Boolean, DateTime
from sqlalchemy.orm import relationship
from ballotbox.core.database import Base
from ballotbox.core.utils import utc_now

class Participant(Base):
    """Participant admitted into one round"""
    __tablename__ = "participants"

    round_id = Column(Integer, ForeignKey("rounds.id"), primary_key=True)
    identity = Column(String(200), primary_key=True)
    admitted = Column(Boolean, nullable=False, default=False)
    has_voted = Column(Boolean, nullable=False, default=False)
    voted_proposal_index = Column(Integer, nullable=False, default=0)
    admitted_at = Column(DateTime, default=utc_now)
    voted_at = Column(DateTime, nullable=True)

    # Relationships
    round = relationship("Round", back_populates="participants")
