"""Shared BDD fixtures for the Ordering domain."""

import pytest


@pytest.fixture()
def owner_id():
    return "user-001"


@pytest.fixture()
def error():
    """Container for captured domain errors."""
    return {"exc": None}
