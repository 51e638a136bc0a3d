from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Application
    PROJECT_NAME: str = "Member Onboarding"
    VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENVIRONMENT: str = "production"
    LOG_LEVEL: str = "INFO"
    LOG_FILE: Optional[str] = "onboarding.log"

    # Database
    DATABASE_URL: str = "sqlite:///./members.db"
    DEFAULT_COLLECTION: str = "members"

    # SendGrid
    SENDGRID_API_KEY: str = ""
    SENDGRID_TEMPLATE_ID: str = ""
    SENDGRID_FROM_EMAIL: str = ""
    SENDGRID_FROM_NAME: str = ""
    SENDGRID_BASE_URL: str = "https://api.sendgrid.com"

    # Minecraft whitelist server (optional)
    WHITELIST_URL: Optional[str] = None

    # Shared secret for privileged endpoints
    API_SECRET: str = ""
    API_SECRET_HEADER: str = "X-Api-Key"

    UNSW_EMAIL_DOMAIN: str = "ad.unsw.edu.au"

    # Outbound HTTP / background work
    HTTP_TIMEOUT_SECONDS: float = 10.0
    BACKGROUND_WORKERS: int = 4

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    return Settings()
