"""
Pytest configuration and fixtures for the Pandorabots client tests.

This file provides test isolation and shared fixtures.
"""
import os

import pytest

BASE_URL = "https://aiaas.example.com"
APP_ID = "app-1"
USER_KEY = "key-1"


@pytest.fixture(autouse=True)
def reset_singleton_state(monkeypatch):
    """
    Reset global state between tests.

    Keeps the developer's PANDORABOTS_* variables out of the tests and
    drops the cached settings and logging context afterwards.
    """
    for key in list(os.environ):
        if key.startswith("PANDORABOTS_"):
            monkeypatch.delenv(key, raising=False)

    yield

    import config as cfg
    cfg._config = None

    from utils.logging import clear_context
    clear_context()


@pytest.fixture
def client_options():
    """Options for a client pointed at the mocked service."""
    from api import set_credentials, set_url
    return [set_credentials(APP_ID, USER_KEY), set_url(BASE_URL)]
