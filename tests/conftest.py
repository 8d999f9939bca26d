"""
tests/conftest.py -- Shared fixtures for the Synapse client tests.

This module provides:
  - settings: a Settings built from explicit values (no .env, no real host)
  - fake_synapse: an in-memory FakeSynapse (see tests/fakes.py)
  - transport / client: the real Transport and SynapseClient wired to the fake

Credentials are set in the environment before any core import so that code
paths that fall back to get_settings() never see an empty username.
"""

from __future__ import annotations

import os

os.environ.setdefault("SYNAPSE_USERNAME", "testuser")
os.environ.setdefault("SYNAPSE_PASSWORD", "secret")
os.environ.setdefault("SYNAPSE_API_KEY", "dGVzdC1hcGkta2V5")

import pytest
from fakes import FakeSynapse

from core.client import SynapseClient
from core.config import Settings, get_settings
from core.transport import Transport

TEST_API_URL = "https://synapse.test"


@pytest.fixture(autouse=True)
def _fresh_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        username="testuser",
        password="secret",
        api_key="dGVzdC1hcGkta2V5",
        api_url=TEST_API_URL,
    )


@pytest.fixture
def fake_synapse() -> FakeSynapse:
    return FakeSynapse(username="testuser", password="secret")


@pytest.fixture
def transport(settings: Settings, fake_synapse: FakeSynapse) -> Transport:
    return Transport(settings=settings, http=fake_synapse)


@pytest.fixture
def client(transport: Transport) -> SynapseClient:
    return SynapseClient(transport)
