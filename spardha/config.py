"""
Central configuration via pydantic-settings.
All secrets are read from environment variables / .env file.
"""
from __future__ import annotations

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Telegram ──────────────────────────────────────────────────────────────
    BOT_TOKEN: str

    # Raw comma-separated admin IDs, e.g. "123,456"
    ADMIN_IDS: str = ""

    # Telegram Web App hosting the registration form
    WEBAPP_URL: Optional[str] = None

    # ── Database ──────────────────────────────────────────────────────────────
    DATABASE_URL: str = "sqlite+aiosqlite:///./spardha.db"

    @property
    def async_database_url(self) -> str:
        """
        Hosting providers inject DATABASE_URL as 'postgresql://...'
        SQLAlchemy async requires 'postgresql+asyncpg://...'
        This property fixes the prefix automatically.
        """
        url = self.DATABASE_URL
        if url.startswith("postgresql://") or url.startswith("postgres://"):
            return "postgresql+asyncpg://" + url.split("://", 1)[1]
        return url

    # ── Event ─────────────────────────────────────────────────────────────────
    EVENT_TITLE: str = "Sports Event Registrations"
    REGISTRATION_OPEN: bool = True

    # ─────────────────────────────────────────────────────────────────────────

    @property
    def admin_ids_list(self) -> list[int]:
        """Parse ADMIN_IDS env var to a list of integers."""
        if not self.ADMIN_IDS:
            return []
        return [int(x.strip()) for x in self.ADMIN_IDS.split(",") if x.strip().isdigit()]

    @property
    def webapp_enabled(self) -> bool:
        return bool(self.WEBAPP_URL)


settings = Settings()
