"""Application settings using pydantic-settings.

Settings are loaded from environment variables with sensible defaults
for development. Production deployments should set all values explicitly.
"""

from functools import lru_cache

from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Database connection settings.

    Environment variables:
        TENANTAPI_DB_HOST: Database host (default: localhost)
        TENANTAPI_DB_PORT: Database port (default: 5432)
        TENANTAPI_DB_DATABASE: Database name (default: tenantapi)
        TENANTAPI_DB_USERNAME: Database user (default: tenantapi)
        TENANTAPI_DB_PASSWORD: Database password (required in production)
        TENANTAPI_DB_POOL_MIN_CONNECTIONS: Minimum connections in pool (default: 2)
        TENANTAPI_DB_POOL_MAX_CONNECTIONS: Maximum connections in pool (default: 10)
        TENANTAPI_DB_POOL_ENABLED: Enable connection pooling (default: true)
    """

    model_config = SettingsConfigDict(
        env_prefix="TENANTAPI_DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port")
    database: str = Field(default="tenantapi", description="Database name")
    username: str = Field(default="tenantapi", description="Database username")
    password: SecretStr = Field(
        default=SecretStr(""),
        description="Database password",
    )
    pool_min_connections: int = Field(
        default=2,
        description="Minimum connections in pool",
        ge=1,
        le=100,
    )
    pool_max_connections: int = Field(
        default=10,
        description="Maximum connections in pool",
        ge=1,
        le=100,
    )
    pool_enabled: bool = Field(
        default=True,
        description="Use a connection pool (disable for tests and one-shot scripts)",
    )

    @model_validator(mode="after")
    def validate_pool_settings(self) -> "DatabaseSettings":
        """Validate pool max >= min."""
        if self.pool_max_connections < self.pool_min_connections:
            raise ValueError(
                f"pool_max_connections ({self.pool_max_connections}) must be >= "
                f"pool_min_connections ({self.pool_min_connections})"
            )
        return self

    @property
    def connection_string(self) -> str:
        """Generate a connection string (without password for logging)."""
        return f"postgresql://{self.username}@{self.host}:{self.port}/{self.database}"


class EventsSettings(BaseSettings):
    """Change notification settings.

    Environment variables:
        TENANTAPI_EVENTS_SUBJECT_PREFIX: Subject prefix for change messages
            (default: com.infratographer.events)
        TENANTAPI_EVENTS_SOURCE: Source recorded on every change message
            (default: tenant-api)
        TENANTAPI_EVENTS_OUTBOX_POLL_INTERVAL_SECONDS: Worker poll interval (default: 5)
        TENANTAPI_EVENTS_OUTBOX_BATCH_SIZE: Entries delivered per poll (default: 100)
        TENANTAPI_EVENTS_OUTBOX_MAX_RETRIES: Attempts before an entry is
            dead-lettered (default: 5)
    """

    model_config = SettingsConfigDict(
        env_prefix="TENANTAPI_EVENTS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    subject_prefix: str = Field(
        default="com.infratographer.events",
        description="Prefix of the subject change messages are routed to",
    )
    source: str = Field(
        default="tenant-api",
        description="Source name carried by change messages",
    )
    outbox_poll_interval_seconds: int = Field(default=5, ge=1)
    outbox_batch_size: int = Field(default=100, ge=1, le=1000)
    outbox_max_retries: int = Field(default=5, ge=1)

    @field_validator("subject_prefix")
    @classmethod
    def validate_subject_prefix(cls, value: str) -> str:
        """Reject prefixes that would produce empty subject tokens."""
        value = value.strip()
        if not value or value.startswith(".") or value.endswith("."):
            raise ValueError(
                "subject_prefix must be a non-empty dotted subject without "
                "leading or trailing dots"
            )
        return value


class HierarchySettings(BaseSettings):
    """Tenant hierarchy settings.

    Environment variables:
        TENANTAPI_TENANT_ID_PREFIX: Seven character id prefix (default: tnntten)
        TENANTAPI_MAX_NAME_LENGTH: Maximum tenant name length (default: 255)
    """

    model_config = SettingsConfigDict(
        env_prefix="TENANTAPI_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    tenant_id_prefix: str = Field(
        default="tnntten",
        description="Prefix identifying tenant ids",
        pattern=r"^[a-z0-9]{7}$",
    )
    max_name_length: int = Field(default=255, ge=1, le=255)


class Settings(BaseSettings):
    """Main application settings aggregating all configuration sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application metadata
    app_name: str = Field(default="Tenant API", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")

    @property
    def database(self) -> DatabaseSettings:
        """Get database settings."""
        return get_database_settings()

    @property
    def events(self) -> EventsSettings:
        """Get change notification settings."""
        return get_events_settings()

    @property
    def hierarchy(self) -> HierarchySettings:
        """Get tenant hierarchy settings."""
        return get_hierarchy_settings()


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


@lru_cache
def get_database_settings() -> DatabaseSettings:
    """Get cached database settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return DatabaseSettings()


@lru_cache
def get_events_settings() -> EventsSettings:
    """Get cached change notification settings."""
    return EventsSettings()


@lru_cache
def get_hierarchy_settings() -> HierarchySettings:
    """Get cached tenant hierarchy settings."""
    return HierarchySettings()
