"""
Centralized Configuration Management using Pydantic Settings.
"""

from functools import lru_cache
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_REDIRECT_URI = "http://localhost:3000/api/auth/callback"


class DocumentStoreSettings(BaseSettings):
    """Tenant configuration store (Appwrite databases API)."""

    model_config = SettingsConfigDict(env_prefix="APPWRITE_")

    endpoint: str = ""
    project_id: str = ""
    api_key: str = ""
    database_id: str = "mcp_hub"
    collection_id: str = "auth0_projects"


class IdentityProviderSettings(BaseSettings):
    """Identity provider options that are not part of a tenant record."""

    model_config = SettingsConfigDict(env_prefix="IDP_")

    user_connection: str = "Username-Password-Authentication"
    password_reset_connection_id: str = ""
    password_reset_ttl_sec: int = Field(default=86400, ge=60)


class CORSSettings(BaseSettings):
    """CORS configuration."""

    model_config = SettingsConfigDict(env_prefix="CORS_")

    allow_origins: List[str] = ["*"]
    allow_credentials: bool = False
    allow_methods: List[str] = ["GET", "POST", "PATCH"]
    allow_headers: List[str] = ["*"]


class AppSettings(BaseSettings):
    """
    Main application settings aggregating all configuration.

    Usage:
        settings = get_settings()
        print(settings.store.endpoint)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Application metadata
    app_name: str = "Identity Gateway API"
    app_version: str = "1.0.0"
    debug: bool = False
    environment: str = Field(default="development", alias="APP_ENV")
    log_level: str = "INFO"

    # OAuth flow
    redirect_uri: str = Field(default=DEFAULT_REDIRECT_URI, alias="REDIRECT_URI")
    tenant_key: str = Field(default="printHub", alias="TENANT_KEY")
    http_timeout_seconds: float = Field(default=10.0, gt=0, le=120)

    # Nested settings
    store: DocumentStoreSettings = Field(default_factory=DocumentStoreSettings)
    idp: IdentityProviderSettings = Field(default_factory=IdentityProviderSettings)
    cors: CORSSettings = Field(default_factory=CORSSettings)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        return self.environment == "development" and self.debug


@lru_cache
def get_settings() -> AppSettings:
    """
    Cached settings factory.

    The @lru_cache ensures settings are loaded only once.
    For testing, use dependency injection override.
    """
    return AppSettings()
