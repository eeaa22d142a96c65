"""Application configuration with validation."""

from enum import Enum
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator
from typing import List


class Environment(str, Enum):
    """Application environment."""
    DEVELOPMENT = "development"
    PRODUCTION = "production"


class Settings(BaseSettings):
    """
    Application settings with validation.

    Values are read from environment variables (case-insensitive) and
    an optional ``.env`` file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment (development/production)"
    )

    # Server
    api_host: str = Field(default="127.0.0.1", description="Bind address for the API server")
    api_port: int = Field(default=8000, ge=1, le=65535, description="Port for the API server")

    # CORS Configuration
    cors_allowed_origins: str = Field(
        default="http://localhost:3000",
        description="Allowed CORS origins (comma-separated)"
    )

    # Database Configuration
    database_url: str = Field(
        default="sqlite:///./memory_bank.db",
        description="Database connection URL"
    )
    # Connection pool tuning (PostgreSQL only; ignored for SQLite).
    db_pool_size: int = Field(default=5, description="Number of persistent database connections")
    db_max_overflow: int = Field(default=10, description="Extra connections allowed during traffic bursts")
    db_pool_timeout: int = Field(default=30, description="Seconds to wait for a pooled connection")
    db_pool_recycle: int = Field(default=1800, description="Seconds before a connection is recycled")

    # File limits
    max_file_size: int = Field(
        default=1024 * 1024,
        ge=1,
        description="Maximum file content size in bytes"
    )
    allowed_extensions: str = Field(
        default=".md,.txt",
        description="Allowed file extensions (comma-separated)"
    )

    # Rate Limiting (token bucket per client)
    rate_limit_enabled: bool = Field(default=True)
    rate_limit_per_minute: int = Field(
        default=100,
        ge=0,
        description="Maximum requests per client per minute (0 = unlimited)"
    )

    # Version retention defaults used by cleanup
    max_versions_per_file: int = Field(
        default=10,
        ge=0,
        description="Keep this many most recent versions per file"
    )
    auto_cleanup_old_versions: bool = Field(
        default=True,
        description="Also delete versions older than preserve_versions_for_days"
    )
    preserve_versions_for_days: int = Field(
        default=30,
        ge=0,
        description="Age threshold in days for the age rule (0 = disabled)"
    )
    auto_cleanup_on_write: bool = Field(
        default=False,
        description="Run retention for a file every time a version is appended"
    )

    # Logging Configuration
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    log_format: str = Field(
        default="json",
        description="Log output format: 'json' for structured, 'text' for human-readable"
    )

    def get_cors_origins(self) -> List[str]:
        """Parse comma-separated CORS origins. Wildcards are rejected."""
        origins = [origin.strip() for origin in self.cors_allowed_origins.split(',') if origin.strip()]
        if "*" in origins:
            raise ValueError(
                "Wildcard CORS (*) not allowed. "
                "Specify explicit origins in CORS_ALLOWED_ORIGINS"
            )
        return origins

    def get_allowed_extensions(self) -> List[str]:
        """Normalized extension list, e.g. ['.md', '.txt']."""
        extensions = []
        for ext in self.allowed_extensions.split(','):
            ext = ext.strip().lower()
            if not ext:
                continue
            extensions.append(ext if ext.startswith('.') else f".{ext}")
        return extensions

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is one of the standard Python logging levels."""
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level. Must be one of: {valid_levels}")
        return v_upper

    @field_validator('log_format')
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        v_lower = v.lower()
        if v_lower not in ('json', 'text'):
            raise ValueError("Invalid log format. Must be 'json' or 'text'")
        return v_lower


# Global settings instance
settings = Settings()
