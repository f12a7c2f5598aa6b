"""
pytest configuration for authtransport tests.

Adds src directory to Python path for imports.
"""

import sys
from pathlib import Path

import pytest

# Add src directory to Python path
src_dir = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_dir))


@pytest.fixture(autouse=True)
def _clear_token_env(monkeypatch):
    """Keep token file settings from the developer's shell out of tests."""
    monkeypatch.delenv("AUTH_TRANSPORT_TOKEN_FILE", raising=False)
    monkeypatch.delenv("AUTH_TRANSPORT_TOKEN_KEY", raising=False)
