"""Shared test fixtures for Life Cockpit tests.

- Record store on a temporary SQLite file per test
- Service manager over that store
- FastAPI TestClient with its own temporary database
"""

from datetime import date, datetime
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from dashboard.app import create_app
from dashboard.config import DashboardSettings
from database.store import SqlRecordStore
from services import ServiceManager
from utils.datetime_utils import UTC


USER_ID = "user-1"
OTHER_USER_ID = "user-2"

TODAY = date(2026, 10, 17)
NOW = datetime(2026, 10, 17, 12, 0, tzinfo=UTC)


def sqlite_url(path: Path) -> str:
    return f"sqlite+aiosqlite:///{path}"


@pytest.fixture
async def store(tmp_path):
    """Record store with a fresh schema; closed after the test."""
    store = SqlRecordStore(sqlite_url(tmp_path / "cockpit.db"))
    await store.create_schema()
    yield store
    await store.close()


@pytest.fixture
def services(store) -> ServiceManager:
    return ServiceManager(store)


@pytest.fixture
def client(tmp_path):
    """API client; the app creates and owns its store inside lifespan."""
    settings = DashboardSettings(
        ENVIRONMENT="testing",
        DATABASE_URL=sqlite_url(tmp_path / "api" / "cockpit.db"),
    )
    with TestClient(create_app(app_settings=settings)) as client:
        yield client


@pytest.fixture
def headers():
    return {"X-User-Id": USER_ID}
