"""
Shared pytest fixtures for the visitor training test suite.
The record store is an in-memory mongomock database; no MongoDB server needed.
"""
import os

# Credentials must be present before the settings object is created.
os.environ.setdefault("STORE_URL", "mongodb://localhost:27017")
os.environ.setdefault("STORE_ACCESS_KEY", "test-access-key")

from datetime import datetime, timezone

import httpx
import pytest
from mongomock_motor import AsyncMongoMockClient

from main import app
from visitor_training.core.db.mongodb import init_store, reset_store
from visitor_training.core.models.attempt import TrainingAttempt


@pytest.fixture
async def store():
    client = AsyncMongoMockClient()
    database = client["safety_training_test"]
    await init_store(database)
    yield database
    reset_store()


@pytest.fixture
async def http_client():
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client


@pytest.fixture
def make_attempt():
    """Insert an attempt with sensible defaults; override any field by keyword."""
    async def _make(**overrides) -> TrainingAttempt:
        fields = {
            "name": "Jane Doe",
            "company": "Acme Logistics",
            "phone": "5551234567",
            "host_name": "Sam Patel",
            "score": 6,
            "passed": True,
            "completed_at": datetime.now(timezone.utc),
        }
        fields.update(overrides)
        attempt = TrainingAttempt(**fields)
        await attempt.insert()
        return attempt
    return _make
