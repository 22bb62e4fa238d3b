#!/usr/bin/env python3
"""
Ballot Box - backend entry point
"""

import logging
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from ballotbox.core.config import settings
from ballotbox.api import api_router
from ballotbox.api.websocket_routes import get_websocket_manager
from ballotbox.core.database import init_db

logger = logging.getLogger(__name__)


def configure_logging():
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )


def create_app(initialize_db: bool = True) -> FastAPI:
    """Build the FastAPI application"""
    app = FastAPI(
        title=settings.APP_NAME,
        description="Multi-round proposal and voting ledger API",
        version=settings.VERSION
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # API routes
    app.include_router(api_router, prefix="/api")

    @app.on_event("startup")
    async def startup_event():
        """Initialize storage and notification fan-out"""
        logger.info("Starting %s...", settings.APP_NAME)
        if initialize_db:
            await init_db()
        get_websocket_manager()
        logger.info("Startup complete")

    @app.get("/")
    async def root():
        """Root health check"""
        return {"message": f"{settings.APP_NAME} is running", "status": "healthy"}

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {"status": "healthy", "service": "ballotbox", "version": settings.VERSION}

    return app


configure_logging()
app = create_app()

def run():
    """Serve the API with uvicorn"""
    uvicorn.run(
        "ballotbox.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower()
    )


if __name__ == "__main__":
    run()
