"""Global test fixtures and configuration."""

import os

import httpx
import pytest
import respx

from keyenv import KeyEnv

BASE_URL = "https://api.keyenv.dev"
TEST_TOKEN = "test_token"
TEST_PROJECT = "proj_123"
TEST_ENV = "production"

EXPORT_PATH = f"/api/v1/projects/{TEST_PROJECT}/environments/{TEST_ENV}/secrets/export"


class FakeClock:
    """Manually advanced wall clock for cache expiry tests."""

    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def secret_payload(key: str, value: str, **extra):
    """Build one exported secret as the API returns it."""
    payload = {
        "id": f"sec_{key.lower()}",
        "environment_id": "env_1",
        "key": key,
        "value": value,
        "version": 1,
    }
    payload.update(extra)
    return payload


@pytest.fixture(autouse=True)
def clean_keyenv_env(monkeypatch):
    """Keep KEYENV_* variables from the developer's shell out of the tests."""
    for name in list(os.environ):
        if name.startswith("KEYENV_"):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture
def api():
    """Mock the KeyEnv API at the HTTPX transport layer."""
    with respx.mock(base_url=BASE_URL, assert_all_called=False) as respx_mock:
        yield respx_mock


@pytest.fixture
def client():
    """Create a KeyEnv client with caching disabled."""
    with KeyEnv(TEST_TOKEN) as client:
        yield client


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def export_route(api):
    """Export endpoint for proj_123/production returning one secret."""
    return api.get(EXPORT_PATH).mock(
        return_value=httpx.Response(
            200,
            json={"secrets": [secret_payload("DATABASE_URL", "postgres://localhost/db")]},
        )
    )
