"""
Application configuration using Pydantic settings.

Settings are read once by the process entry point and handed to every
component that needs them:

    from core.config import get_settings
    settings = get_settings()
    app = create_app(settings)
"""

from typing import List, Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

PROFILE_WRITE_UNLOCKED = "unlocked"
PROFILE_WRITE_SERIALIZED = "serialized"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables and .env file.

    Required for production:
        - JWT_SECRET_KEY (min 32 chars), shared with the service issuing tokens
        - GITHUB_CLIENT_ID / GITHUB_CLIENT_SECRET (for the repository proxy)
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # App settings
    app_name: str = "DevConnector API"
    api_prefix: str = "/api"
    debug: bool = Field(default=False, validation_alias="DEBUG")
    env: str = Field(default="development", validation_alias="ENV")
    port: int = Field(default=5000, validation_alias="PORT")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    # Database
    database_url: str = Field(default="sqlite:///devconnector.db", validation_alias="DATABASE_URL")
    db_pool_size: int = Field(default=10, validation_alias="DB_POOL_SIZE")
    db_max_overflow: int = Field(default=20, validation_alias="DB_MAX_OVERFLOW")
    db_pool_pre_ping: bool = Field(default=True, validation_alias="DB_POOL_PRE_PING")

    # GitHub repository proxy
    github_client_id: str = Field(default="", validation_alias="GITHUB_CLIENT_ID")
    github_client_secret: str = Field(default="", validation_alias="GITHUB_CLIENT_SECRET")
    github_api_base: str = Field(default="https://api.github.com", validation_alias="GITHUB_API_BASE")
    # None means the outbound call waits indefinitely
    github_timeout: Optional[float] = Field(default=None, validation_alias="GITHUB_TIMEOUT")

    # JWT / Authentication
    jwt_secret_key: str = Field(default="CHANGE_ME", validation_alias="JWT_SECRET_KEY")
    jwt_algorithm: str = Field(default="HS256", validation_alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(default=60, validation_alias="ACCESS_TOKEN_EXPIRE_MINUTES")

    # CORS
    cors_allowed_origins: str = Field(default="http://localhost:3000", validation_alias="CORS_ALLOWED_ORIGINS")

    # Profile aggregate behaviour
    profile_write_mode: Literal["unlocked", "serialized"] = Field(
        default=PROFILE_WRITE_UNLOCKED, validation_alias="PROFILE_WRITE_MODE"
    )
    legacy_sentinel_removal: bool = Field(default=False, validation_alias="LEGACY_SENTINEL_REMOVAL")

    @field_validator("jwt_secret_key")
    @classmethod
    def validate_jwt_secret(cls, v: str) -> str:
        """Reject weak secrets in production, warn elsewhere."""
        import os
        import warnings

        env = os.getenv("ENV", "development")
        is_production = env.lower() in ("production", "prod")

        forbidden_values = ["CHANGE_ME", "changeme", "secret", "jwtsecret", "test"]
        is_forbidden = v.lower() in [fv.lower() for fv in forbidden_values]

        if is_production and (is_forbidden or len(v) < 32):
            raise ValueError(
                "JWT_SECRET_KEY must be a non-default value of at least 32 characters in production"
            )
        if is_forbidden:
            warnings.warn(
                f"JWT_SECRET_KEY is set to a default value ('{v}'). "
                "This is insecure - set a proper key for production.",
                UserWarning,
                stacklevel=2,
            )
        return v

    @property
    def is_production(self) -> bool:
        return self.env.lower() in ("production", "prod")

    @property
    def json_logs(self) -> bool:
        """Console rendering in debug/development, JSON lines otherwise."""
        return not (self.debug or self.env.lower() == "development")

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_allowed_origins.split(",") if origin.strip()]

    def validate_production_config(self) -> tuple[List[str], List[str]]:
        """
        Validate configuration for production deployment.

        Returns:
            Tuple of (errors, warnings) - errors are fatal, warnings are advisory
        """
        errors = []
        warnings = []

        if self.jwt_secret_key == "CHANGE_ME":
            errors.append("JWT_SECRET_KEY must be set for production")
        elif len(self.jwt_secret_key) < 32:
            errors.append("JWT_SECRET_KEY must be at least 32 characters")

        if not self.github_client_id or not self.github_client_secret:
            warnings.append(
                "GITHUB_CLIENT_ID/GITHUB_CLIENT_SECRET not set - the repository proxy "
                "will use unauthenticated GitHub requests"
            )
        if self.profile_write_mode == PROFILE_WRITE_UNLOCKED:
            warnings.append("PROFILE_WRITE_MODE=unlocked - concurrent profile writes may lose updates")

        return errors, warnings


def get_settings() -> Settings:
    """Read settings from the environment. Call once at process start."""
    return Settings()


__all__ = [
    "PROFILE_WRITE_SERIALIZED",
    "PROFILE_WRITE_UNLOCKED",
    "Settings",
    "get_settings",
]
