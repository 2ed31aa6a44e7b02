"""Application configuration with validation."""

from enum import Enum
from pydantic_settings import BaseSettings
from pydantic import Field, field_validator
from typing import List

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Environment(str, Enum):
    """Application environment."""
    DEVELOPMENT = "development"
    PRODUCTION = "production"


class ConfigurationError(Exception):
    """Raised when application configuration is invalid for the environment."""
    pass


class Settings(BaseSettings):
    """
    Application settings with validation.

    Every value can be overridden by the environment variable of the same
    name (case-insensitive) or by a ``.env`` file.
    """

    # Environment
    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment (development/production)"
    )

    # CORS Configuration
    cors_allowed_origins: str = Field(
        default="http://localhost:5173,http://localhost:3000",
        description="Allowed CORS origins (comma-separated)"
    )

    # Database Configuration
    database_url: str = Field(
        default="sqlite:///./deskspace.db",
        description="Database connection URL"
    )
    # Connection pool tuning (PostgreSQL only; ignored for SQLite).
    db_pool_size: int = Field(default=5, description="Number of persistent database connections")
    db_max_overflow: int = Field(default=10, description="Extra connections allowed during traffic bursts")
    db_pool_timeout: int = Field(default=30, description="Seconds to wait for a pooled connection")
    db_pool_recycle: int = Field(default=1800, description="Seconds before a connection is recycled")

    # Rate Limiting
    rate_limit_per_minute: int = Field(
        default=120,
        description="Maximum requests per client per minute (0 = unlimited)"
    )

    # Completion service (LiteLLM model strings, e.g. "openai/gpt-4o-mini").
    # Empty chat_model = assistant and document chat disabled.
    chat_model: str = Field(
        default="",
        description="LiteLLM model for text completions (empty = disabled)"
    )
    chat_vision_model: str = Field(
        default="",
        description="LiteLLM model used when documents are attached (falls back to chat_model)"
    )
    chat_api_key: str = Field(default="", description="API key for the completion provider")
    chat_api_base: str = Field(default="", description="Base URL for the completion provider (optional)")
    chat_max_tokens: int = Field(default=1024, description="Max tokens per completion")
    chat_temperature: float = Field(default=0.3, description="Sampling temperature")
    chat_timeout: int = Field(default=60, description="Seconds before a completion call times out")

    # Document chat / assistant bounds
    chat_history_window: int = Field(
        default=5,
        description="Prior messages replayed into each document chat turn"
    )
    context_doc_preview_chars: int = Field(
        default=1000,
        description="Characters of each document included in the context snapshot"
    )
    context_message_window: int = Field(
        default=50,
        description="Most recent chat messages included in the context snapshot"
    )
    document_fetch_timeout: float = Field(
        default=20.0,
        description="Seconds allowed to download one referenced document"
    )

    # Object storage (S3-compatible, accessed through MinIO's client)
    storage_endpoint: str = Field(default="", description="host:port of the object store (empty = disabled)")
    storage_access_key: str = Field(default="")
    storage_secret_key: str = Field(default="")
    storage_bucket: str = Field(default="deskspace")
    storage_secure: bool = Field(default=True, description="Use HTTPS to reach the object store")
    storage_public_url: str = Field(
        default="",
        description="Public base URL for stored objects (empty = presigned URLs)"
    )

    # Uploads
    max_upload_bytes: int = Field(
        default=50 * 1024 * 1024,
        description="Largest accepted upload in bytes"
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
        """Comma-separated ``cors_allowed_origins`` as a list; ``*`` is refused."""
        origins = [o.strip() for o in self.cors_allowed_origins.split(",")]
        origins = [o for o in origins if o]
        if "*" in origins:
            raise ValueError("CORS_ALLOWED_ORIGINS must list explicit origins, not '*'")
        return origins

    @property
    def completion_configured(self) -> bool:
        return bool(self.chat_model)

    @property
    def storage_configured(self) -> bool:
        return bool(self.storage_endpoint and self.storage_access_key and self.storage_secret_key)

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level

    @field_validator('log_format')
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        fmt = v.lower()
        if fmt not in ("json", "text"):
            raise ValueError("log_format must be 'json' or 'text'")
        return fmt

    @field_validator('chat_history_window', 'context_doc_preview_chars', 'context_message_window')
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v < 0:
            raise ValueError("Must be zero or positive")
        return v

    def validate_production_config(self) -> List[str]:
        """Validate configuration for the production environment.

        Returns the list of problems found. In production, any problem is
        fatal; in development the caller only logs them.

        Raises:
            ConfigurationError: If production config is unusable.
        """
        errors: list[str] = []

        origins = self.get_cors_origins()
        localhost_origins = [o for o in origins if "localhost" in o or "127.0.0.1" in o]
        if localhost_origins:
            errors.append(
                f"CORS allows localhost origins: {localhost_origins}. "
                "Remove localhost origins for production."
            )

        if not self.chat_model:
            errors.append("CHAT_MODEL is empty; the assistant and document chat are disabled.")

        if not self.storage_configured:
            errors.append(
                "Object storage is not configured (STORAGE_ENDPOINT, STORAGE_ACCESS_KEY, "
                "STORAGE_SECRET_KEY); file items cannot be uploaded."
            )

        if errors and self.environment == Environment.PRODUCTION:
            raise ConfigurationError(
                "Production configuration is incomplete:\n  - " + "\n  - ".join(errors)
            )
        return errors

    class Config:
        """Pydantic configuration."""
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"


# Global settings instance
settings = Settings()
