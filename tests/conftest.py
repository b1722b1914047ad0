"""Shared fixtures for the test-suite."""

from __future__ import annotations

from typing import Any
from unittest.mock import patch

import pytest

from sweepstake import create_app
from tests.mock_utils import (
    MockFirestoreBuilder,
    fake_transactional,
    seed_competition,
)

ADMIN_KEY = "test-admin-key"


@pytest.fixture
def db() -> Any:
    """A seeded in-memory Firestore with commit-on-demand batches."""
    mock_db = MockFirestoreBuilder.build()
    seed_competition(mock_db)
    return mock_db


@pytest.fixture
def transactional() -> Any:
    with patch(
        "sweepstake.predictions.services.firestore.transactional",
        side_effect=fake_transactional,
    ) as mock_transactional:
        yield mock_transactional


@pytest.fixture
def app(db: Any, transactional: Any) -> Any:
    with patch("firebase_admin.firestore.client", return_value=db):
        app = create_app(
            {"TESTING": True, "WTF_CSRF_ENABLED": False, "ADMIN_KEY": ADMIN_KEY}
        )
        yield app


@pytest.fixture
def client(app: Any) -> Any:
    return app.test_client()
