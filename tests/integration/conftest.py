"""Pytest configuration for live catalog tests.

These tests call the real recipe catalog over the network. They only run
when RUN_LIVE_TESTS is set to true (in the environment or .env).
"""

import os
from pathlib import Path

import pytest
from dotenv import load_dotenv


def pytest_configure(config):
    """Load .env from the project root before collection."""
    env_path = Path(__file__).parent.parent.parent / ".env"
    load_dotenv(env_path)


@pytest.fixture(scope="session", autouse=True)
def require_live_flag():
    """Skip the live suite unless explicitly enabled."""
    if os.getenv("RUN_LIVE_TESTS", "false").lower() not in ("true", "1", "yes"):
        pytest.skip(
            "Live catalog tests skipped. Set RUN_LIVE_TESTS=true to run them.",
            allow_module_level=True,
        )
