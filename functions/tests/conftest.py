"""Pytest configuration and shared fixtures for RenoQuote tests."""

import os
import sys
import pytest
from unittest.mock import AsyncMock, MagicMock
from typing import Dict, Any


# ============================================================================
# Ensure local imports work (models/, services/, config/, utils/)
# ============================================================================
#
# Our codebase uses absolute imports like `from models...` / `from services...`.
# This guarantees that `functions/` is importable as the top-level module root.
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import numpy as np  # noqa: E402

from tests.fixtures.mock_form_data import (  # noqa: E402
    DECK_REFRESH_FORM,
    FIREPIT_FORM,
)


# ============================================================================
# Firebase Mocks
# ============================================================================

@pytest.fixture
def mock_firestore_client():
    """Mock Firestore client."""
    client = MagicMock()

    # Mock collection and document methods
    collection_mock = MagicMock()
    document_mock = MagicMock()

    # Set up chain: client.collection().document()
    client.collection.return_value = collection_mock
    collection_mock.document.return_value = document_mock
    document_mock.id = "proj-123"

    # Mock async methods
    document_mock.get = AsyncMock(return_value=MagicMock(
        exists=True,
        id="proj-123",
        to_dict=lambda: {"templateId": "deck-refresh", "status": "pending", "userId": "user-1"}
    ))
    document_mock.set = AsyncMock()
    document_mock.update = AsyncMock()

    # Mock query: client.collection().where().stream()
    query_mock = MagicMock()
    collection_mock.where.return_value = query_mock
    query_mock.stream.return_value = iter([])

    return client


@pytest.fixture
def mock_firestore_service(mock_firestore_client):
    """FirestoreService with mocked client and no retry backoff."""
    from services.firestore_service import FirestoreService

    return FirestoreService(db=mock_firestore_client, max_attempts=3, retry_wait_seconds=0)


# ============================================================================
# Activity / randomness
# ============================================================================

@pytest.fixture
def activity_sink():
    """In-memory activity sink."""
    from services.activity_sink import InMemoryActivitySink

    return InMemoryActivitySink(max_entries=100)


@pytest.fixture
def seeded_rng():
    """Deterministic random source for quote perturbation."""
    return np.random.default_rng(42)


@pytest.fixture
def calculator(activity_sink):
    """EstimateCalculator wired to the in-memory sink."""
    from services.estimate_calculator import EstimateCalculator

    return EstimateCalculator(activity_sink=activity_sink)


# ============================================================================
# Sample Data
# ============================================================================

@pytest.fixture
def deck_form() -> Dict[str, Any]:
    """Scenario A deck refresh form."""
    return dict(DECK_REFRESH_FORM)


@pytest.fixture
def firepit_form() -> Dict[str, Any]:
    """Scenario B firepit form."""
    return dict(FIREPIT_FORM)


@pytest.fixture
def deck_estimate(calculator, deck_form):
    """Scenario A estimate: material 1150, transport 50, disposal 75, 51.2 h."""
    return calculator.calculate("deck-refresh", deck_form)
