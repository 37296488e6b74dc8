"""
Showroom Dashboard
Centralized Configuration Management

Configuration is loaded with Pydantic settings from environment variables
(and an optional ``.env`` file), validated and cached for the process.
"""

from enum import Enum
from functools import lru_cache
from typing import Optional, List
from pydantic import Field, field_validator, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class FailurePolicy(str, Enum):
    """What a fetch cycle does when one of its sources fails"""
    ABORT = "abort"  # Keep showing the last good snapshot
    DEGRADE = "degrade"  # Aggregate with the failed sources treated as empty


class SourceKind(str, Enum):
    """Backing store for the dashboard record sets"""
    DATABASE = "database"
    CSV = "csv"


class DatabaseSettings(BaseSettings):
    """PostgreSQL Database Configuration"""

    model_config = SettingsConfigDict(env_prefix="POSTGRES_")

    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port")
    db: str = Field(default="showroom", alias="database", description="Database name")
    user: str = Field(default="showroom", description="Database user")
    password: SecretStr = Field(default="secure_password", description="Database password")
    echo: bool = Field(default=False, description="Echo SQL queries")
    url: Optional[str] = Field(default=None, alias="DATABASE_URL", description="Database URL (overrides host/port)")

    @property
    def async_url(self) -> str:
        """Async database URL - uses DATABASE_URL if set, otherwise builds an asyncpg URL"""
        if self.url:
            return self.url
        return f"postgresql+asyncpg://{self.user}:{self.password.get_secret_value()}@{self.host}:{self.port}/{self.db}"


class DashboardSettings(BaseSettings):
    """Dashboard fetch cycle configuration"""

    model_config = SettingsConfigDict(env_prefix="DASHBOARD_")

    source: SourceKind = Field(default=SourceKind.DATABASE, description="Where record sets are fetched from")
    csv_dir: str = Field(default="./data/generated", description="Directory read by the CSV source")

    sales_limit: int = Field(default=100, ge=1, description="Most recent sales fetched per cycle")
    purchases_limit: int = Field(default=100, ge=1, description="Most recent purchases fetched per cycle")
    payment_category: str = Field(default="paiement", description="Worker transaction type counted as team cost")

    fetch_timeout_seconds: float = Field(default=30.0, gt=0, description="Timeout applied to each fetch")
    failure_policy: FailurePolicy = Field(default=FailurePolicy.ABORT, description="Policy when a fetch fails")
    refresh_interval_seconds: int = Field(default=300, ge=1, description="Interval of the scheduled refresh flow")


class SecuritySettings(BaseSettings):
    """Security Configuration"""

    model_config = SettingsConfigDict(env_prefix="")

    cors_origins: List[str] = Field(
        default=["http://localhost:3000", "http://localhost:5173"],
        description="Allowed CORS origins"
    )


class MonitoringSettings(BaseSettings):
    """Monitoring and Observability Configuration"""

    model_config = SettingsConfigDict(env_prefix="")

    # Logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL", description="Logging level")
    log_format: str = Field(default="json", description="Log format: json or text")


class Settings(BaseSettings):
    """
    Main Application Settings

    Aggregates all configuration sections and provides a single entry point
    for accessing application configuration.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Application
    app_name: str = Field(default="showroom-dashboard", alias="APP_NAME", description="Application name")
    app_env: str = Field(default="development", alias="APP_ENV", description="Environment")
    debug: bool = Field(default=False, alias="DEBUG", description="Debug mode")

    # API Server
    api_host: str = Field(default="0.0.0.0", alias="API_HOST", description="API host")
    api_port: int = Field(default=8000, alias="API_PORT", description="API port")
    api_workers: int = Field(default=1, alias="API_WORKERS", description="API workers")

    # Version
    version: str = Field(default="1.0.0", description="Application version")

    # Subsystem configurations
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    dashboard: DashboardSettings = Field(default_factory=DashboardSettings)
    security: SecuritySettings = Field(default_factory=SecuritySettings)
    monitoring: MonitoringSettings = Field(default_factory=MonitoringSettings)

    @field_validator("app_env")
    @classmethod
    def validate_env(cls, v: str) -> str:
        """Validate environment value"""
        allowed = ["development", "staging", "production", "testing"]
        if v.lower() not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v.lower()

    @property
    def is_production(self) -> bool:
        """Check if running in production"""
        return self.app_env == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development"""
        return self.app_env == "development"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses LRU cache to ensure settings are only loaded once.

    Returns:
        Settings: Application settings instance
    """
    return Settings()
