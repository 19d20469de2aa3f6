"""Application settings using pydantic-settings.

Settings are loaded from environment variables with sensible defaults
for development. A run against a real organization only needs the `op`
binary on PATH; setting a fake storage path switches every repository
call to the file-backed fake store.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class OnePasswordSettings(BaseSettings):
    """Storage backend settings.

    Environment variables:
        OP_CLI_PATH: Path or name of the op CLI binary (default: op)
        OP_FAKE_STORAGE_PATH: JSON file for the fake store; when set the
            fake store is used instead of the op CLI (default: unset)
    """

    model_config = SettingsConfigDict(
        env_prefix="OP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    cli_path: str = Field(default="op", description="op CLI binary", min_length=1)
    fake_storage_path: str | None = Field(
        default=None,
        description="Fake storage JSON file path",
    )

    @field_validator("fake_storage_path", mode="before")
    @classmethod
    def empty_path_is_unset(cls, value: str | None) -> str | None:
        """Treat an empty path the same as an unset one."""
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def use_fake_storage(self) -> bool:
        """Whether repository calls should go to the fake store."""
        return self.fake_storage_path is not None


class Settings(BaseSettings):
    """Main application settings aggregating all configuration sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = Field(default="orgvault", description="Application name")
    log_level: str = Field(default="INFO", description="Minimum log level")

    @property
    def onepassword(self) -> OnePasswordSettings:
        """Get storage backend settings."""
        return get_onepassword_settings()


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


@lru_cache
def get_onepassword_settings() -> OnePasswordSettings:
    """Get cached storage backend settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return OnePasswordSettings()
