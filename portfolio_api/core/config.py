# portfolio_api/core/config.py
import logging
from typing import List, Optional
from pydantic import AliasChoices, Field, SecretStr
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings, read from the environment or a .env file"""
    APP_NAME: str = "Portfolio CMS API"
    ENVIRONMENT: str = "development"

    # Admin credentials (compared, never persisted or logged)
    ADMIN_EMAIL: Optional[str] = Field(default=None)
    ADMIN_PASSWORD: Optional[SecretStr] = Field(default=None)

    # Key-value store: auto | memory | redis
    STORE_BACKEND: str = "auto"
    # Upstash exposes the same rediss:// URL under its own name
    REDIS_URL: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("REDIS_URL", "UPSTASH_REDIS_URL")
    )

    # HTTP
    CORS_ORIGINS: List[str] = Field(default_factory=list)
    RATE_LIMIT_ENABLED: bool = True

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore"
    }

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    @property
    def admin_password(self) -> Optional[str]:
        if self.ADMIN_PASSWORD is None:
            return None
        return self.ADMIN_PASSWORD.get_secret_value()


settings = Settings()


def validate_required_settings(config: Optional[Settings] = None) -> bool:
    """Check that every setting needed at runtime is present"""
    config = config or settings
    missing = []

    if not config.ADMIN_EMAIL:
        missing.append("ADMIN_EMAIL")

    if not config.admin_password:
        missing.append("ADMIN_PASSWORD")

    if config.STORE_BACKEND.lower() == "redis" and not config.REDIS_URL:
        missing.append("REDIS_URL")

    if missing:
        logger.warning(f"Missing environment variables: {', '.join(missing)}")
        logger.warning("Admin login and storage may not be available.")
        return False

    return True
