"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Values are validated at load time.
"""

from functools import lru_cache

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_SUPPORTED_DATABASE_SCHEMES = ("sqlite+aiosqlite", "postgresql+asyncpg")


class Settings(BaseSettings):
    """Application settings loaded from environment and .env.

    All settings have defaults suitable for a single-operator desktop run:
    a SQLite file next to the working directory and an ./output folder for
    generated documents.
    """

    # App
    app_name: str = "docfill"
    app_version: str = "1.0.0"
    debug: bool = False

    # Database: SQLite (aiosqlite) by default; Postgres via asyncpg is optional.
    database_url: str = "sqlite+aiosqlite:///./docfill.db"
    database_echo: bool = False

    # Generated documents are written under output_root/<document type>/.
    output_root: str = "./output"

    # Bulk generation
    batch_concurrency: int = 5
    # Optional pause before each bulk job starts (keeps progress output readable).
    batch_dispatch_delay_seconds: float = 0.0
    # Open the output folder in the desktop file manager after a bulk run.
    open_output_folder: bool = False

    # Attribute keys whose values must be unique per entity type schema.
    unique_attribute_keys: list[str] = [
        "pan",
        "pan_number",
        "tan",
        "tan_number",
        "gst",
        "aadhaar",
    ]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_database_and_batch(self) -> "Settings":
        """Validate database URL scheme and bulk generation limits."""
        scheme = self.database_url.split("://", 1)[0]
        if scheme not in _SUPPORTED_DATABASE_SCHEMES:
            raise ValueError(
                f"database_url must use one of {', '.join(_SUPPORTED_DATABASE_SCHEMES)}, "
                f"got: {scheme!r}"
            )
        if self.batch_concurrency < 1:
            raise ValueError(
                f"batch_concurrency must be at least 1, got: {self.batch_concurrency}"
            )
        if self.batch_dispatch_delay_seconds < 0:
            raise ValueError("batch_dispatch_delay_seconds must not be negative")
        return self

    @property
    def is_sqlite(self) -> bool:
        """True when the configured datastore is SQLite (single writer)."""
        return self.database_url.startswith("sqlite")


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
