"""
Configuration Management for Personal Finance Manager

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The ledger core never reads configuration itself; only the factories in
the orchestrator do, and they hand plain values down.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Flat-file storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="FINMANAGER_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    directory_file: str = Field(
        default="finance.data",
        description="Data file for the multi-user directory"
    )
    ledger_file: str = Field(
        default="ledger.data",
        description="Data file for the single-ledger variant"
    )
    encoding: str = Field(
        default="utf-8",
        description="Text encoding of the data files"
    )

    # Retry policy for writes
    save_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="How many times a failing save is attempted"
    )
    save_retry_wait_seconds: float = Field(
        default=0.5,
        ge=0.0,
        le=30.0,
        description="Base wait between save attempts (exponential backoff)"
    )

    @field_validator('directory_file', 'ledger_file')
    @classmethod
    def validate_data_file(cls, v: str) -> str:
        """Warn if the parent folder doesn't exist (saves will fail until it does)."""
        parent = Path(v).parent
        if not parent.exists():
            import warnings
            warnings.warn(
                f"Folder for data file {v} does not exist. "
                "Saves will fail until it is created."
            )
        return v

    @property
    def directory_path(self) -> Path:
        return Path(self.directory_file)

    @property
    def ledger_path(self) -> Path:
        return Path(self.ledger_file)


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Minimum level for local logging"
    )

    # Advisory checks on new entries
    warn_on_suspicious_entries: bool = Field(
        default=True,
        description="Log a warning for negative amounts or empty categories"
    )

    @field_validator('log_level', mode='before')
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v

    @property
    def effective_log_level(self) -> str:
        """Debug mode always wins over the configured level."""
        return "DEBUG" if self.debug_mode else self.log_level


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    try:
        _ = settings.storage
        results["storage"] = True
    except Exception as e:
        results["storage"] = False
        results["storage_error"] = str(e)

    try:
        _ = settings.app
        results["app"] = True
    except Exception as e:
        results["app"] = False
        results["app_error"] = str(e)

    return results
