"""Tests for the secrets export cache."""
import pytest
from prometheus_client import REGISTRY

from keyenv.cache import SecretsCache
from keyenv.models import SecretWithValue
from tests.conftest import FakeClock

SECRETS = [SecretWithValue(id="sec_1", key="API_KEY", value="sk_test_123")]


@pytest.fixture
def cache(clock):
    return SecretsCache(ttl=300, clock=clock)


def test_hit_within_ttl(cache, clock):
    cache.set("proj_123", "production", SECRETS)
    clock.advance(299)
    assert cache.get("proj_123", "production") is SECRETS


def test_miss_at_and_after_expiry(cache, clock):
    """An entry is never served once its expiry is reached."""
    cache.set("proj_123", "production", SECRETS)
    clock.advance(300)
    assert cache.get("proj_123", "production") is None


def test_expired_entry_is_kept_until_overwritten(cache, clock):
    cache.set("proj_123", "production", SECRETS)
    clock.advance(600)
    assert cache.get("proj_123", "production") is None
    assert ("proj_123", "production") in cache

    fresh = [SecretWithValue(id="sec_1", key="API_KEY", value="rotated")]
    cache.set("proj_123", "production", fresh)
    assert cache.get("proj_123", "production") is fresh
    assert len(cache) == 1


def test_key_is_exact_and_case_sensitive(cache):
    cache.set("proj_123", "production", SECRETS)
    assert cache.get("proj_123", "Production") is None
    assert cache.get("PROJ_123", "production") is None
    assert cache.get("proj_123", "production ") is None


def test_disabled_cache_stores_nothing():
    cache = SecretsCache(ttl=0, clock=FakeClock())
    cache.set("proj_123", "production", SECRETS)
    assert not cache.enabled
    assert cache.get("proj_123", "production") is None
    assert len(cache) == 0


def test_invalidate_single_entry(cache):
    cache.set("proj_123", "production", SECRETS)
    cache.set("proj_123", "staging", SECRETS)

    cache.invalidate(project_id="proj_123", environment="production")

    assert cache.get("proj_123", "production") is None
    assert cache.get("proj_123", "staging") is SECRETS


def test_invalidate_project(cache):
    """Clearing a project removes all of its environments and nothing else."""
    cache.set("proj_123", "production", SECRETS)
    cache.set("proj_123", "staging", SECRETS)
    cache.set("proj_1234", "production", SECRETS)
    cache.set("proj_456", "production", SECRETS)

    cache.invalidate(project_id="proj_123")

    assert ("proj_123", "production") not in cache
    assert ("proj_123", "staging") not in cache
    assert cache.get("proj_1234", "production") is SECRETS
    assert cache.get("proj_456", "production") is SECRETS


def test_invalidate_all(cache):
    cache.set("proj_123", "production", SECRETS)
    cache.set("proj_456", "staging", SECRETS)

    cache.invalidate()

    assert len(cache) == 0


def test_invalidate_environment_requires_project(cache):
    cache.set("proj_123", "production", SECRETS)
    with pytest.raises(ValueError, match="requires project_id"):
        cache.invalidate(environment="production")
    assert len(cache) == 1


def test_invalidate_missing_entry_is_noop(cache):
    cache.invalidate(project_id="proj_999", environment="production")
    assert len(cache) == 0


def test_cache_event_metrics(cache):
    def sample(event):
        return REGISTRY.get_sample_value("keyenv_cache_events_total", {"event": event}) or 0

    hits, misses = sample("hit"), sample("miss")
    cache.get("proj_123", "production")
    cache.set("proj_123", "production", SECRETS)
    cache.get("proj_123", "production")

    assert sample("miss") == misses + 1
    assert sample("hit") == hits + 1
