"""
Application configuration.

All configuration is loaded from environment variables.
Never hardcode secrets or connection strings in code.
"""

import logging
import os
import secrets
from dataclasses import dataclass
from datetime import timedelta
from functools import lru_cache

from dotenv import load_dotenv

from finance_tracker.errors import ConfigurationError

# Load .env file into environment variables
load_dotenv()

MIN_SECRET_KEY_LENGTH = 32

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TokenConfig:
    """
    Everything the token issuer needs, fixed at startup.

    Construction fails if the signing secret is too short, so a
    misconfigured deployment never gets as far as issuing a token.
    """

    secret_key: str
    issuer: str
    audience: str
    access_token_ttl: timedelta = timedelta(hours=1)
    refresh_token_ttl: timedelta = timedelta(days=7)

    def __post_init__(self):
        if len(self.secret_key or "") < MIN_SECRET_KEY_LENGTH:
            raise ConfigurationError(
                f"JWT secret key must be at least "
                f"{MIN_SECRET_KEY_LENGTH} characters"
            )
        if not self.issuer or not self.audience:
            raise ConfigurationError("JWT issuer and audience are required")


class Settings:
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "Finance Tracker"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Server
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "8000"))

    # Database
    DATABASE_URL: str = os.getenv(
        "DATABASE_URL",
        "sqlite:///./finance_tracker.db"
    )

    # Environment
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")

    # Tokens
    JWT_SECRET_KEY: str = os.getenv("JWT_SECRET_KEY", "")
    JWT_ISSUER: str = os.getenv("JWT_ISSUER", "FinanceTracker")
    JWT_AUDIENCE: str = os.getenv("JWT_AUDIENCE", "FinanceTrackerUsers")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(
        os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60")
    )
    REFRESH_TOKEN_EXPIRE_DAYS: int = int(
        os.getenv("REFRESH_TOKEN_EXPIRE_DAYS", "7")
    )

    # Password hashing work factor
    BCRYPT_ROUNDS: int = int(os.getenv("BCRYPT_ROUNDS", "12"))

    def token_config(self) -> TokenConfig:
        """
        Build the token configuration.

        Without JWT_SECRET_KEY, development gets a random key for the
        life of the process; every other environment refuses to start.
        """
        secret_key = self.JWT_SECRET_KEY
        if not secret_key:
            if self.ENVIRONMENT != "development":
                raise ConfigurationError(
                    f"JWT_SECRET_KEY must be set when ENVIRONMENT is "
                    f"'{self.ENVIRONMENT}'"
                )
            logger.warning(
                "JWT_SECRET_KEY not set; using a per-process random key, "
                "issued tokens will not survive a restart"
            )
            secret_key = secrets.token_urlsafe(48)

        return TokenConfig(
            secret_key=secret_key,
            issuer=self.JWT_ISSUER,
            audience=self.JWT_AUDIENCE,
            access_token_ttl=timedelta(minutes=self.ACCESS_TOKEN_EXPIRE_MINUTES),
            refresh_token_ttl=timedelta(days=self.REFRESH_TOKEN_EXPIRE_DAYS),
        )


@lru_cache()
def get_settings() -> Settings:
    """
    Return cached settings instance.

    Using lru_cache means the Settings object is created once
    and reused for all subsequent calls. This avoids reading
    environment variables repeatedly.
    """
    return Settings()
