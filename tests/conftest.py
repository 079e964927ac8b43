"""Test configuration."""

import os
from pathlib import Path
from typing import List

# Settings are read at import time; switch to test mode before anything loads.
os.environ["TESTING"] = "true"

import pytest  # noqa: E402
from pytest import Config  # noqa: E402

from mapsbridge.core.logging import configure_logging  # noqa: E402

fixture = pytest.fixture


@fixture(scope="session")
def project_root() -> Path:
    """Get the project root directory."""
    return Path(__file__).parent.parent


pytest_plugins: List[str] = [
    "tests.fixtures.geocoding",
    "tests.fixtures.api",
]


def pytest_configure(config: Config) -> None:
    """Configure pytest.

    Args:
        config: Pytest configuration object
    """
    # Configure logging for test environment
    configure_logging(testing=True)
    config.addinivalue_line("markers", "integration: mark test as an integration test")
