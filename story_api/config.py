"""Application configuration with Pydantic Settings.

Settings are loaded from environment variables and .env files.

Examples:
    >>> from story_api.config import get_settings
    >>> settings = get_settings()
    >>> settings.STORY_ROOT
    'fortelling'

    >>> settings.get_storage_config()
    StorageConfig(backend=<BackendType.LOCAL: 'local'>, bucket=None, ...)

Tests:
    - tests/unit/test_config.py::TestSettings
    - tests/unit/test_config.py::TestStorageConfig
"""

import logging
from enum import Enum
from functools import lru_cache

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from story_api.storage.config import BackendType, StorageConfig


class Environment(str, Enum):
    """Application environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class Settings(BaseSettings):
    """Application settings.

    The token-to-team mapping comes either from TEAM_TOKENS or from the
    NADA backend; loading it is deferred to application startup.

    Attributes:
        STORAGE_BACKEND: Object store backend (gcs or local)
        STORY_BUCKET: GCS bucket holding story content
        LOCAL_STORAGE_ROOT: Directory used by the local backend
        STORY_ROOT: Object-name root under which stories live
        NADA_BACKEND_URL: Endpoint serving the token-to-team mapping
        NADA_BACKEND_TOKEN: Bearer token for NADA_BACKEND_URL
        TEAM_TOKENS: Static token-to-team mapping (JSON object)
        STORY_LOCKS_ENABLED: Serialize writes to one story within the process
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Storage
    STORAGE_BACKEND: BackendType = Field(
        default=BackendType.LOCAL,
        description="Object store backend",
    )
    STORY_BUCKET: str | None = Field(
        default=None,
        description="The storage bucket for the story content",
    )
    LOCAL_STORAGE_ROOT: str = Field(
        default="./output/stories",
        description="Root directory for the local backend",
    )
    STORY_ROOT: str = Field(
        default="fortelling",
        description="Object-name root for stories",
    )
    EXTENDED_CONTENT_TYPES: bool = Field(
        default=True,
        description="Recognize image, xml, json and spreadsheet content types",
    )

    # Token to team mapping
    NADA_BACKEND_URL: str | None = Field(
        default=None,
        description="NADA backend URL serving the token/team mapping",
    )
    NADA_BACKEND_TOKEN: str | None = Field(
        default=None,
        description="Token for fetching team/token mapping from nada-backend",
    )
    TEAM_TOKENS: dict[str, str] | None = Field(
        default=None,
        description="Static token to team mapping, used instead of NADA_BACKEND_URL",
    )
    TOKEN_FETCH_TIMEOUT: float = Field(
        default=10.0,
        description="Timeout in seconds for the token mapping fetch",
        gt=0,
    )

    # Workflow
    STORY_LOCKS_ENABLED: bool = Field(
        default=True,
        description="Serialize create/update of the same story within this process",
    )

    # Application Settings
    ENVIRONMENT: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment",
    )
    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode (API docs)",
    )
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level",
    )

    @field_validator("STORY_ROOT")
    @classmethod
    def validate_story_root(cls, v: str) -> str:
        """Strip surrounding slashes so paths join cleanly."""
        root = v.strip("/")
        if not root:
            raise ValueError("STORY_ROOT must not be empty")
        return root

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate the logging level name."""
        level = v.upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown LOG_LEVEL: {v}")
        return level

    @model_validator(mode="after")
    def validate_sources(self) -> "Settings":
        """Ensure the selected backend and token source are complete."""
        if self.STORAGE_BACKEND == BackendType.GCS and not self.STORY_BUCKET:
            raise ValueError("STORY_BUCKET is required when STORAGE_BACKEND=gcs")
        if self.NADA_BACKEND_URL and not self.NADA_BACKEND_TOKEN:
            raise ValueError("NADA_BACKEND_TOKEN is required when NADA_BACKEND_URL is set")
        return self

    def get_storage_config(self) -> StorageConfig:
        """Build the storage configuration.

        Returns:
            StorageConfig for the configured backend.
        """
        return StorageConfig(
            backend=self.STORAGE_BACKEND,
            bucket=self.STORY_BUCKET,
            local_root=self.LOCAL_STORAGE_ROOT,
            extended_content_types=self.EXTENDED_CONTENT_TYPES,
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings: The application settings.
    """
    return Settings()
