"""
Application configuration
"""

from typing import List
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    """Application settings"""

    # Basic settings
    APP_NAME: str = "Ballot Box"
    VERSION: str = "1.0.0"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # Server settings
    HOST: str = "0.0.0.0"
    PORT: int = 8001
    CORS_ORIGINS: List[str] = ["http://localhost:3000"]

    # Database settings
    DATABASE_URL: str = "sqlite:///./ballotbox.db"

    # Ledger settings
    AUTHORITY: str = "owner"  # identity seeded as authority on first startup
    FIRST_ROUND_NAME: str = "Session 1"
    ROUND_NAME_PREFIX: str = "Session"

    # Proposal limits
    MAX_PROPOSALS: int = 1000  # includes the sentinel at index 0
    MAX_PROPOSAL_LENGTH: int = 999
    SENTINEL_PROPOSAL: str = "GENESIS"

    class Config:
        env_file = ".env"
        case_sensitive = True

# Global settings instance
settings = Settings()
