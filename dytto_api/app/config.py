"""Application configuration with environment variable support.

All settings can be overridden via environment variables prefixed with ``DYTTO_``,
or via a ``.env`` file in the project root.

Examples::

    DYTTO_PORT=9000 dytto start
    DYTTO_DATABASE_URL=postgresql+asyncpg://user:pass@db:5432/dytto dytto start
    DYTTO_LOG_LEVEL=DEBUG dytto start
"""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Project root: two levels up from this file (dytto_api/app/config.py -> repo root)
_BASE_DIR = Path(__file__).resolve().parent.parent.parent


class Settings(BaseSettings):
    """Site API configuration — all values overridable via env vars."""

    model_config = SettingsConfigDict(
        env_prefix="DYTTO_",
        env_file=str(_BASE_DIR / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Paths
    data_dir: Path = _BASE_DIR / "data"

    # Logging
    log_level: str = "INFO"

    # Store. Empty means a local SQLite file under data_dir.
    database_url: str = ""

    # Feedback
    voter_salt: str = "dytto-feedback-salt"
    submit_rate_limit: int = 3
    submit_rate_window: float = 300.0
    vote_rate_limit: int = 10
    vote_rate_window: float = 60.0
    rate_limit_max_keys: int = 100_000
    feedback_default_limit: int = 20
    feedback_max_limit: int = 100

    # Blog
    blog_default_limit: int = 20
    blog_max_limit: int = 100

    # CORS
    cors_allow_origin: str = "*"

    @property
    def db_path(self) -> Path:
        return self.data_dir / "dytto.db"

    @property
    def resolved_database_url(self) -> str:
        return self.database_url or f"sqlite+aiosqlite:///{self.db_path}"


# Singleton instance — import this everywhere
settings = Settings()
