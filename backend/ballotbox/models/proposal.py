"""
Proposal data model
"""

from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Text
from sqlalchemy.orm import relationship
from ballotbox.core.database import Base
from ballotbox.core.utils import utc_now

class Proposal(Base):
    """Votable option of a round; position 0 is the sentinel"""
    __tablename__ = "proposals"

    round_id = Column(Integer, ForeignKey("rounds.id"), primary_key=True)
    position = Column(Integer, primary_key=True, autoincrement=False)
    text = Column(Text, nullable=False)
    vote_count = Column(Integer, nullable=False, default=0)
    submitted_by = Column(String(200), nullable=True)  # None for the sentinel
    submitted_at = Column(DateTime, default=utc_now)

    # Relationships
    round = relationship("Round", back_populates="proposals")
