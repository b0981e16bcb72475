"""Pytest configuration and fixtures."""

import os

import pytest

# Set test environment before any app code runs
os.environ["APP_ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test_split.db"
os.environ["REDIS_URL"] = "redis://localhost:6379/15"

from app.config import Settings, get_settings  # noqa: E402


@pytest.fixture
def settings() -> Settings:
    get_settings.cache_clear()
    return get_settings()


@pytest.fixture
def sqlite_url(tmp_path) -> str:
    """File-backed SQLite so concurrent reads get their own connections"""
    return f"sqlite+aiosqlite:///{tmp_path / 'visibility.db'}"
