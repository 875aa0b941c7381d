"""Pytest configuration and fixtures."""

import sys
from pathlib import Path

import pytest

# Project root on the path so ``app``, ``core`` and ``database`` import without install
sys.path.insert(0, str(Path(__file__).parent.parent))

from tests.helpers import FakeEmbeddingProvider, make_data_uri  # noqa: E402


@pytest.fixture
def provider():
    return FakeEmbeddingProvider()


@pytest.fixture
def db(tmp_path):
    from database import DatabaseManager
    return DatabaseManager(tmp_path / "test.db")


@pytest.fixture
def app(tmp_path, provider):
    from app import create_app
    from app.context import EXTENSION_KEY

    flask_app = create_app(
        {
            "TESTING": True,
            "DATABASE_PATH": str(tmp_path / "smartattend.db"),
            "FACE_DATA_DIR": str(tmp_path / "faces"),
            "LOG_DIR": str(tmp_path / "logs"),
            "LOG_LEVEL": "WARNING",
            "EMBEDDING_TIMEOUT_SECONDS": 5,
        },
        embedding_provider=provider,
    )
    yield flask_app
    flask_app.extensions[EXTENSION_KEY].close()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def enroll_payload():
    def _build(student_id="S1", name="Alice", color=(10, 20, 30), **extra):
        payload = {
            "id": student_id,
            "name": name,
            "email": f"{student_id.lower()}@example.edu",
            "class": "CS-101",
            "photoData": make_data_uri(color),
        }
        payload.update(extra)
        return payload
    return _build
