"""
Pytest Configuration and Shared Fixtures
=========================================

Common fixtures used across all test modules.

For Developers:
    - Import fixtures by name in test files (pytest auto-discovers conftest.py)
    - Proxy events are built with tests.fixtures.events.make_event
    - Sessions are plain dicts wrapped in MappingSession, so tests can
      inspect exactly what was written
"""

import os

import pytest

from src.boundary.session import MappingSession

# Set default test environment variables at module load time.
# setdefault() only sets if NOT already present.
os.environ.setdefault("ENVIRONMENT", "test")


@pytest.fixture(autouse=True)
def reset_env_vars():
    """
    Reset environment variables after each test.

    Config is read from os.environ at call time, so a test that sets
    CORS_ORIGINS must not leak it into the next one.
    """
    original_env = os.environ.copy()

    yield

    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def session_data() -> dict:
    """Backing dict of the per-test session."""
    return {}


@pytest.fixture
def session(session_data: dict) -> MappingSession:
    """Host session stand-in backed by session_data."""
    return MappingSession(session_data)

