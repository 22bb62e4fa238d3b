"""
Ballot Box test configuration

Every test gets a fresh in-memory SQLite ledger seeded with the
authority "owner" and round 0.
"""

import asyncio
import pytest
import pytest_asyncio
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from ballotbox.core.database import build_engine, create_tables, get_db
from ballotbox.services.notifications import NotificationBus, NotificationRecorder
from ballotbox.services.voting_service import VotingService

OWNER = "owner"
VOTERS = ["alice", "bob", "carol"]


@pytest.fixture
def engine():
    engine = build_engine("sqlite://", poolclass=StaticPool)
    create_tables(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def recorder():
    return NotificationRecorder()


@pytest.fixture
def bus(recorder):
    bus = NotificationBus()
    bus.subscribe(recorder)
    return bus


@pytest_asyncio.fixture
async def service(db, bus):
    service = VotingService(db, bus)
    await service.init_ledger(OWNER)
    return service


@pytest_asyncio.fixture
async def with_voters(service):
    for voter in VOTERS:
        await service.admit(OWNER, voter)
    return service


@pytest_asyncio.fixture
async def submission_open(with_voters):
    await with_voters.open_proposal_submission(OWNER)
    return with_voters


@pytest_asyncio.fixture
async def voting_open(submission_open):
    service = submission_open
    await service.submit("alice", "Proposal 1")
    await service.submit("bob", "Proposal 2")
    await service.submit("carol", "Proposal 3")
    await service.close_proposal_submission(OWNER)
    await service.open_voting(OWNER)
    return service


@pytest_asyncio.fixture
async def tallied(voting_open):
    service = voting_open
    await service.vote("alice", 1)
    await service.close_voting(OWNER)
    await service.tally(OWNER)
    return service


# Test client for FastAPI
@pytest.fixture
def client(session_factory):
    from fastapi.testclient import TestClient
    from ballotbox.main import create_app

    seed = session_factory()
    try:
        asyncio.run(VotingService(seed).init_ledger(OWNER))
    finally:
        seed.close()

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app = create_app(initialize_db=False)
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
