"""
Application settings with Pydantic v2 validation.

Loads configuration from environment variables with sensible defaults.
"""

from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LLMSettings(BaseSettings):
    """LLM provider configuration (stock level suggestions)."""

    model_config = SettingsConfigDict(env_prefix="LLM_")

    provider: Literal["ollama"] = "ollama"
    model_name: str = "llama3.1:8b"
    host: str = "http://localhost:11434"
    timeout: int = 120
    max_tokens: int = 1024
    temperature: float = 0.1

    # Circuit breaker settings
    failure_threshold: int = 3
    cooldown_seconds: int = 60

    # Retry settings
    max_retries: int = 3
    retry_delay: float = 1.0
    retry_multiplier: float = 2.0

    warmup_on_start: bool = False


class StorageSettings(BaseSettings):
    """Storage configuration."""

    model_config = SettingsConfigDict(env_prefix="STORAGE_")

    backend: Literal["sqlite", "json"] = "sqlite"
    data_dir: Path = Path("data")
    db_name: str = "stockpilot.db"
    json_name: str = "stockpilot.json"

    # SQLite settings
    pool_size: int = 5
    busy_timeout: int = 30000  # ms

    @property
    def db_path(self) -> Path:
        return self.data_dir / self.db_name

    @property
    def json_path(self) -> Path:
        return self.data_dir / self.json_name


class APISettings(BaseSettings):
    """API server configuration."""

    model_config = SettingsConfigDict(env_prefix="API_")

    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    cors_origins: list[str] = ["*"]


class PdfSettings(BaseSettings):
    """Printed report layout."""

    model_config = SettingsConfigDict(env_prefix="PDF_")

    system_name: str = "Stock Pilot"
    footer_text: str = "This report was generated by the Stock Pilot Inventory Management System."
    max_comment_chars: int = 40


class ReportSettings(BaseSettings):
    """Reporting and acting-user defaults."""

    model_config = SettingsConfigDict(env_prefix="REPORTS_")

    default_username: str = "Admin"
    timezone: str = "UTC"  # day boundaries for date filters


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "Stock Pilot"
    app_version: str = "1.0.0"
    environment: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Sub-settings
    llm: LLMSettings = Field(default_factory=LLMSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    api: APISettings = Field(default_factory=APISettings)
    pdf: PdfSettings = Field(default_factory=PdfSettings)
    reports: ReportSettings = Field(default_factory=ReportSettings)

    @field_validator("storage", mode="before")
    @classmethod
    def ensure_data_dir(cls, v: Any) -> StorageSettings:
        if isinstance(v, dict):
            settings = StorageSettings(**v)
        else:
            settings = v or StorageSettings()
        settings.data_dir.mkdir(parents=True, exist_ok=True)
        return settings


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset settings (for testing)."""
    global _settings
    _settings = None
