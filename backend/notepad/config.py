"""
Notepad Backend: Application Configuration
============================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads from environment variables (or a .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by the app factory, the stores, Alembic and the client sync layer.
When:  Loaded once at module import time.

Environment names are case-insensitive, so `PORT`, `DB_FILE` and
`STORE_BACKEND` map straight onto the fields below.
"""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have defaults suitable for running on a laptop:
    a JSON file next to the process and the API under `/api` on port 4000.
    """

    # ── Persistence ───────────────────────────────────────────────────────
    # What: Which NoteStore implementation backs the API
    # Values: "json" (flat file, read-modify-write) or "sql" (single table)
    store_backend: Literal["json", "sql"] = Field(default="json")

    # What: Location of the JSON array file used by the file-backed store
    notes_file: str = Field(default="./notes.json")

    # What: SQLite file used by the table-backed store
    # Ignored when database_url is set
    db_file: str = Field(default="./data.sqlite")

    # What: Full async SQLAlchemy URL, e.g. postgresql+asyncpg://user:pw@host/db
    database_url: str = Field(default="")

    @property
    def resolved_database_url(self) -> str:
        """The URL the table-backed store connects to."""
        if self.database_url:
            return self.database_url
        return f"sqlite+aiosqlite:///{self.db_file}"

    # ── HTTP Surface ──────────────────────────────────────────────────────
    # What: Path prefix for the notes routes ("/api" by default, "" for none)
    api_prefix: str = Field(default="/api")

    @field_validator("api_prefix")
    @classmethod
    def normalize_api_prefix(cls, v: str) -> str:
        """Strips trailing slashes and ensures a leading one ("" stays "")."""
        v = v.strip().rstrip("/")
        if v and not v.startswith("/"):
            v = "/" + v
        return v

    # ── Server ────────────────────────────────────────────────────────────
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=4000, ge=1, le=65535)

    # What: Verbosity of application logging
    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    # ── Client Sync Layer ─────────────────────────────────────────────────
    # What: Base URL the remote sync layer talks to (includes the API prefix)
    api_base_url: str = Field(default="http://localhost:4000/api")

    # What: Key/value file used by the local-only sync layer
    local_storage_file: str = Field(default="./local_storage.json")

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


# Singleton instance, imported throughout the application
settings = Settings()
