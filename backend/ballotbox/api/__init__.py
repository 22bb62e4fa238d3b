"""
API routers
"""

from fastapi import APIRouter
from .round_routes import router as round_router
from .workflow_routes import router as workflow_router
from .participant_routes import router as participant_router
from .proposal_routes import router as proposal_router
from .vote_routes import router as vote_router
from .authority_routes import router as authority_router
from .websocket_routes import router as ws_router

# main router
api_router = APIRouter()

# register feature routers
api_router.include_router(round_router, prefix="/rounds", tags=["Rounds"])
api_router.include_router(workflow_router, prefix="/workflow", tags=["Workflow"])
api_router.include_router(participant_router, prefix="/participants", tags=["Participants"])
api_router.include_router(proposal_router, prefix="/proposals", tags=["Proposals"])
api_router.include_router(vote_router, prefix="/votes", tags=["Votes"])
api_router.include_router(authority_router, tags=["Authority"])
api_router.include_router(ws_router, prefix="/ws", tags=["WebSocket"])
