"""Application configuration"""
from pathlib import Path
from typing import List, Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_RATE_LIMIT_MAX_REQUESTS = 100

# Local, emulator and staging origins the mobile and web clients use
DEFAULT_CORS_ORIGINS = ",".join([
    "http://localhost:3000",
    "http://localhost:3001",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:3001",
    "http://10.0.2.2:3001",
    "http://10.0.2.2:3000",
    "http://192.168.1.4:8081",
    "http://192.168.1.4:3001",
    "https://apiwellness.shrawantravels.com",
    "http://apiwellness.shrawantravels.com",
    "exp://localhost:8081",
    "exp://10.0.2.2:8081",
    "exp://192.168.1.4:8081",
])


class Settings(BaseSettings):
    """Application settings"""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    # Environment
    NODE_ENV: str = "production"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 5000
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"  # json or text
    TRUST_PROXY_HEADERS: bool = True
    SHUTDOWN_TIMEOUT: Optional[int] = None  # seconds; None waits for every connection

    # Database
    MONGODB_URI: str = "mongodb://localhost:27017/zenovia"
    MONGODB_DB_NAME: str = "zenovia"  # used when the URI names no database
    MONGODB_TIMEOUT_MS: int = 5000

    # CORS
    FRONTEND_URL: str = ""
    CORS_ALLOWED_ORIGINS: str = DEFAULT_CORS_ORIGINS

    # Rate Limiting
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_MAX_REQUESTS: int = DEFAULT_RATE_LIMIT_MAX_REQUESTS
    RATE_LIMIT_WINDOW_MINUTES: int = 15
    RATE_LIMIT_STORAGE_URI: str = "memory://"  # Use redis:// for production

    # Initial superadmin
    INIT_ADMIN_EMAIL: Optional[str] = Field(
        None, validation_alias=AliasChoices("INIT_ADMIN_EMAIL", "ADMIN_EMAIL")
    )
    INIT_ADMIN_NAME: str = Field(
        "Super Admin", validation_alias=AliasChoices("INIT_ADMIN_NAME", "ADMIN_NAME")
    )
    INIT_ADMIN_PASSWORD: Optional[str] = Field(
        None, validation_alias=AliasChoices("INIT_ADMIN_PASSWORD", "ADMIN_PASSWORD")
    )

    # Permissions
    PERMISSIONS_CATALOG_PATH: Optional[Path] = None  # None = bundled catalog

    # Static files
    UPLOADS_DIR: Path = Path("uploads")

    # Monitoring
    METRICS_ENABLED: bool = True
    METRICS_PATH: str = "/metrics"

    # Performance
    MAX_REQUEST_SIZE: int = 10 * 1024 * 1024  # 10MB

    # JWT Authentication
    JWT_PRIVATE_KEY: Optional[str] = None   # RSA-2048 PEM string; auto-generated on startup if absent
    JWT_ALGORITHM: str = "RS256"
    JWT_EXPIRE_SECONDS: int = 28800         # 8 hours for admin tokens
    JWT_KEY_ID: Optional[str] = None

    @field_validator("RATE_LIMIT_MAX_REQUESTS", mode="before")
    @classmethod
    def _fallback_rate_limit(cls, value):
        """Unparseable or non-positive limits fall back to the default"""
        try:
            parsed = int(value)
        except (TypeError, ValueError):
            return DEFAULT_RATE_LIMIT_MAX_REQUESTS
        return parsed if parsed > 0 else DEFAULT_RATE_LIMIT_MAX_REQUESTS

    @field_validator("INIT_ADMIN_NAME", mode="before")
    @classmethod
    def _default_admin_name(cls, value):
        return value or "Super Admin"

    @property
    def is_development(self) -> bool:
        return self.NODE_ENV == "development"

    @property
    def cors_origins_list(self) -> List[str]:
        """FRONTEND_URL entries followed by CORS_ALLOWED_ORIGINS, without blanks or repeats"""
        origins: List[str] = []
        for raw in (self.FRONTEND_URL, self.CORS_ALLOWED_ORIGINS):
            for origin in raw.split(","):
                origin = origin.strip()
                if origin and origin not in origins:
                    origins.append(origin)
        return origins

    @property
    def rate_limit(self) -> str:
        """Default limit string in slowapi notation"""
        return f"{self.RATE_LIMIT_MAX_REQUESTS}/{self.RATE_LIMIT_WINDOW_MINUTES} minutes"


def get_settings() -> Settings:
    """Load settings from the environment"""
    return Settings()
