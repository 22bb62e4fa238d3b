"""
Database configuration
"""
import logging
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from ballotbox.core.config import settings

logger = logging.getLogger(__name__)


def build_engine(database_url: str, **kwargs):
    """Create an engine, applying the SQLite threading flag when needed"""
    if database_url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
    return create_engine(
        database_url,
        echo=False,  # set to True to log SQL statements
        **kwargs
    )


engine = build_engine(settings.DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

def get_db():
    """Yield a database session"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def create_tables(bind=None):
    """Create all tables on the given engine"""
    # register every model on Base.metadata
    from ballotbox.models.ledger import Ledger
    from ballotbox.models.round_model import Round
    from ballotbox.models.participant import Participant
    from ballotbox.models.proposal import Proposal
    from ballotbox.models.event import Event

    Base.metadata.create_all(bind=bind or engine)

async def init_db():
    """Initialize the database and seed the ledger"""
    create_tables()

    from ballotbox.services.voting_service import VotingService
    from ballotbox.services.notifications import get_notification_bus

    db = SessionLocal()
    try:
        service = VotingService(db, get_notification_bus())
        await service.init_ledger(settings.AUTHORITY)
    finally:
        db.close()

    logger.info("Database initialized at %s", settings.DATABASE_URL)
