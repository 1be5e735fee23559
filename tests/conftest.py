"""
Pytest configuration for LightShuttle tests.
"""

import os
import sys

import pytest

# Add the src directory to the Python path
src_path = os.path.join(os.path.dirname(__file__), '..', 'src')
sys.path.insert(0, os.path.abspath(src_path))

# Import test fixtures
from tests.fixtures.runtime_fixtures import *  # noqa: E402,F401,F403


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep host configuration from leaking into app factories under test."""
    for var in ("JWT_SECRET", "API_KEYS_FILE", "ALLOWED_ORIGINS", "LIGHTSHUTTLE_RUNTIME", "BIND_ADDRESS"):
        monkeypatch.delenv(var, raising=False)
    yield


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "requires_docker: marks tests that require Docker to be running"
    )
