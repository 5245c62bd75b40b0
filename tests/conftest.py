"""
Pytest conftest.py - Shared fixtures and configuration

Tests run against an in-memory SQLite database (aiosqlite driver with
a StaticPool) so the full store and HTTP stack is exercised without a
PostgreSQL server. The PostGIS-only spatial index is skipped on SQLite.
"""

import json
from typing import Any, Dict, Generator, List

import pytest
from fastapi import UploadFile
from fastapi.testclient import TestClient

from noisewatch.core.config import Settings
from noisewatch.main import create_application
from noisewatch.services.database import Database
from noisewatch.services.report_store import ReportStore

SQLITE_URL = "sqlite+aiosqlite:///:memory:"


# =============================================================================
# PYTEST HOOKS
# =============================================================================

def pytest_collection_modifyitems(config, items):
    """Auto-mark tests based on file name."""
    for item in items:
        if "test_api" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)


# =============================================================================
# SETTINGS & DATABASE FIXTURES
# =============================================================================

@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings pointing at a fresh in-memory database and a temp media dir."""
    return Settings(
        _env_file=None,
        DATABASE_URL=SQLITE_URL,
        CREATE_TABLES=True,
        MEDIA_DIR=str(tmp_path / "media"),
    )


@pytest.fixture
async def database(settings):
    """Database with the schema created; disposed after the test."""
    database = Database.from_settings(settings)
    await database.create_all()
    yield database
    await database.dispose()


@pytest.fixture
async def store(database) -> ReportStore:
    return ReportStore(database)


@pytest.fixture
async def broken_store(settings):
    """Store whose database has no tables, so every query fails."""
    database = Database.from_settings(settings)
    yield ReportStore(database)
    await database.dispose()


# =============================================================================
# MEDIA FIXTURES
# =============================================================================

class RecordingMediaStore:
    """Media store double that remembers what it was asked to save and delete."""

    def __init__(self) -> None:
        self.saved: List[str] = []
        self.deleted: List[str] = []

    async def save(self, upload: UploadFile) -> str:
        self.saved.append(upload.filename)
        return f"https://media.example.test/{upload.filename}"

    async def delete(self, url: str) -> None:
        self.deleted.append(url)


@pytest.fixture
def media_store() -> RecordingMediaStore:
    return RecordingMediaStore()


@pytest.fixture
def sample_media_bytes() -> bytes:
    """A few bytes standing in for an audio clip."""
    return b"ID3\x03\x00\x00\x00\x00\x00\x0fnoise-sample"


# =============================================================================
# API FIXTURES
# =============================================================================

@pytest.fixture
def client(settings) -> Generator[TestClient, None, None]:
    """TestClient for an application backed by the in-memory database."""
    app = create_application(settings)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def broken_client(settings) -> Generator[TestClient, None, None]:
    """TestClient whose database schema was never created."""
    app = create_application(settings.model_copy(update={"CREATE_TABLES": False}))
    with TestClient(app) as test_client:
        yield test_client


# =============================================================================
# DATA FIXTURES
# =============================================================================

@pytest.fixture
def report_form() -> Dict[str, Any]:
    """Form fields of a valid report submission."""
    return {
        "userId": "u1",
        "reason": "loud music",
        "comment": "party next door",
        "mediaType": "audio",
        "location": json.dumps(
            {
                "latitude": 12.9,
                "longitude": 77.6,
                "address": {"city": "Bengaluru", "road": "MG Road"},
            }
        ),
    }


@pytest.fixture
def media_files(sample_media_bytes) -> Dict[str, Any]:
    return {"media": ("clip.mp3", sample_media_bytes, "audio/mpeg")}
