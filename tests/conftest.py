"""
tests/conftest.py

Shared pytest fixtures available to all test modules.

Fixtures defined here are auto-discovered by pytest - no import needed.
"""

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from mediagate.main import app
from mediagate.models.upload_models import MediaFile
from mediagate.providers.base import MediaProvider

MB = 1024 * 1024


# ── Core client fixture ────────────────────────────────────────────────────────

@pytest.fixture(scope="session")
def client() -> TestClient:
    """
    A synchronous TestClient wrapping the FastAPI app.

    session-scoped so the app is instantiated once per test run.
    """
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c


# ── Provider & file fixtures ───────────────────────────────────────────────────

@pytest.fixture
def provider() -> MagicMock:
    """
    A MediaProvider double whose uploads succeed with a fixed image response.
    Tests override ``side_effect`` to simulate provider failures.
    """
    mock = MagicMock(spec=MediaProvider)
    response = {
        "secure_url": "https://res.cloudinary.com/demo/image/upload/v1/avatars/abc.jpg",
        "public_id": "avatars/abc",
        "resource_type": "image",
    }
    mock.upload.return_value = response
    mock.upload_large.return_value = response
    mock.destroy.return_value = None
    return mock


def _make_file(size: int = 2 * MB, content_type: str = "image/jpeg", filename: str = "photo.jpg") -> MediaFile:
    """Build an in-memory MediaFile of exactly ``size`` bytes."""
    return MediaFile.from_bytes(b"\xff" * size, content_type=content_type, filename=filename)


@pytest.fixture
def make_file():
    """Factory fixture: ``make_file(size=..., content_type=...)``."""
    return _make_file


@pytest.fixture
def jpeg_2mb() -> MediaFile:
    return _make_file()
