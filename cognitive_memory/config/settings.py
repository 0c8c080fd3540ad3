"""Centralized configuration for the cognitive memory server.

Settings are read once at startup from the environment (prefix
``COGNITIVE_MEMORY_``) and an optional ``.env`` file, then handed to the
components that need them. Nothing below the server entry point reads the
environment directly.
"""

from __future__ import annotations

from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field
from pydantic import ValidationError as PydanticValidationError
from pydantic import field_validator
from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict

from ..exceptions import ConfigurationError

ROOT_ENV_VAR = "COGNITIVE_MEMORY_PATH"


class Settings(BaseSettings):
    """Centralized settings for the cognitive memory server."""

    # === Memory Storage Configuration ===
    path: str = Field(description="Root directory every entity lives under")
    rotation_threshold_bytes: int = Field(
        default=1024 * 1024, gt=0, description="Journal size that triggers rotation"
    )
    session_archive_min_chars: int = Field(
        default=200, ge=0, description="Session content must be longer than this to be archived"
    )

    # === HTTP SSE Server Configuration ===
    sse_host: str = Field(default="localhost", description="SSE server host")
    sse_port: int = Field(default=3001, description="SSE server port")

    # === Logging Configuration ===
    log_level: str = Field(default="INFO", description="Logging level")
    log_dir: str | None = Field(default=None, description="Directory for call and error logs")
    structured_logging: bool = Field(default=True, description="Enable structured JSON call logging")

    # === Metrics Configuration ===
    enable_metrics: bool = Field(default=True, description="Enable metrics collection")

    model_config = SettingsConfigDict(
        env_prefix="COGNITIVE_MEMORY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("path")
    @classmethod
    def validate_path(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError(f"{ROOT_ENV_VAR} must not be empty")
        return value.strip()

    @property
    def root_path(self) -> Path:
        """Absolute, symlink-resolved memory root."""
        return Path(self.path).expanduser().resolve()


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the process-wide settings, failing fast when the root is not configured."""
    global _settings
    if _settings is None:
        load_dotenv()
        try:
            _settings = Settings()
        except PydanticValidationError as e:
            errors = e.errors()
            fields = [f"COGNITIVE_MEMORY_{'.'.join(map(str, err['loc'])).upper()}" for err in errors]
            if ROOT_ENV_VAR in fields and any(err["type"] == "missing" for err in errors):
                reason = f"{ROOT_ENV_VAR} environment variable is required but not set"
            else:
                reason = "; ".join(f"{field}: {err['msg']}" for field, err in zip(fields, errors))
            raise ConfigurationError(", ".join(fields), reason) from e
    return _settings


def reset_settings() -> None:
    """Reset the global settings instance (primarily for testing)."""
    global _settings
    _settings = None
