"""
Pytest configuration and shared fixtures for the financial calculators tests.
"""

import os
from unittest.mock import patch

import pytest

from fincalc import create_app
from fincalc.config import reset_global_settings


@pytest.fixture(autouse=True)
def clean_settings():
    """Reset cached settings and keep tests offline."""
    reset_global_settings()
    with patch.dict(
        os.environ,
        {"APP_ENV": "testing", "SECRET_KEY": "test-secret-key", "EXCHANGE_RATE_API_KEY": ""},
    ):
        yield
    reset_global_settings()


@pytest.fixture
def app():
    """Create the application for API tests."""
    return create_app("testing")


@pytest.fixture
def client(app):
    """Flask test client."""
    return app.test_client()
