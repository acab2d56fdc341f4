"""
Core settings and environment variables for PawTriage.
Uses pydantic-settings for type-safe environment variable loading.
"""

from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Create a .env file in the root directory to configure these.
    """

    # Application
    APP_NAME: str = "PawTriage"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # CORS - Frontend URLs allowed to access this API
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:5173"

    # Firebase/Firestore
    FIREBASE_PROJECT_ID: Optional[str] = None
    FIREBASE_CREDENTIALS_PATH: Optional[str] = None  # Path to service account JSON

    # In-memory record store for local development and tests
    USE_MOCK_DB: bool = False

    # Triage engine
    ESCALATION_THRESHOLD_HOURS: float = 24.0
    SCAN_PAGE_SIZE: int = 200
    RESOURCE_QUERY_LIMIT: int = 5
    MAX_ALLOCATED_RESOURCES: int = 3
    MAX_RESPONDERS_PER_DISPATCH: int = 5

    # Notification channels (either may be left unconfigured)
    CHANNEL_TIMEOUT_SECONDS: float = 10.0
    TWILIO_ACCOUNT_SID: Optional[str] = None
    TWILIO_AUTH_TOKEN: Optional[str] = None
    TWILIO_PHONE_NUMBER: Optional[str] = None
    EMAIL_HOST: str = "smtp.gmail.com"
    EMAIL_PORT: int = 587
    EMAIL_USER: Optional[str] = None
    EMAIL_PASSWORD: Optional[str] = None
    PORTAL_BASE_URL: str = "https://safepaw.app"

    # Advisory suggestions
    SUGGESTION_CACHE_TTL_SECONDS: float = 300.0
    RECENT_INCIDENT_RADIUS_KM: float = 0.5
    RECENT_INCIDENT_HOURS: float = 48.0

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "allow"  # Allow extra env vars to prevent crashes

    @property
    def cors_origins_list(self):
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


# Global settings instance
settings = Settings()
