"""
Shared pytest fixtures for SPARDHA tests.

Sets required environment variables BEFORE any spardha module is imported so
that pydantic-settings and SQLAlchemy engine initialisation use safe test values.
"""
from __future__ import annotations

import os
from typing import Any, AsyncGenerator

# ── Set env vars before any spardha import ────────────────────────────────────
os.environ.setdefault("BOT_TOKEN", "test-token-for-pytest")
os.environ.setdefault("ADMIN_IDS", "123456789")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

# ── Third-party ───────────────────────────────────────────────────────────────
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

# ── spardha imports (safe after env vars are set) ─────────────────────────────
from spardha.models.base import Base


# ── DB fixtures ───────────────────────────────────────────────────────────────

@pytest.fixture
async def async_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Yield a fresh AsyncSession backed by an isolated in-memory SQLite database.
    Schema is created fresh for every test function; engine is always disposed
    on teardown, even if the test raises an exception.
    """
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    try:
        async with factory() as session:
            yield session
    finally:
        await engine.dispose()


@pytest.fixture
async def session_factory(tmp_path) -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """
    Session factory over a file-backed SQLite database, so that several
    independent sessions (connections) see the same tables.
    """
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'spardha.db'}", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    try:
        yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    finally:
        await engine.dispose()


# ── Payload helpers ───────────────────────────────────────────────────────────

def _payload(**overrides: Any) -> dict[str, Any]:
    """A valid raw submission; keyword arguments replace or add fields."""
    data: dict[str, Any] = {
        "name":     "Asha Verma",
        "email":    "asha@example.com",
        "course":   "BSc Physics",
        "year":     "2",
        "gender":   "girl",
        "sports":   ["cricket", "badminton-doubles"],
        "partners": [{"sport": "badminton-doubles", "name": "Meera"}],
    }
    data.update(overrides)
    return data


@pytest.fixture
def make_payload():
    """Factory fixture — returns a callable that builds a raw submission dict."""
    return _payload
