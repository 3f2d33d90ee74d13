"""
In-memory TTL cache for secret exports.

Entries are keyed by the exact ``(project_id, environment)`` pair and hold the
exported secret list together with an absolute wall-clock expiry. An entry is
never served once its expiry has passed, but it is not evicted either: it stays
until it is overwritten by a fresh export or removed by :meth:`invalidate`.

The cache belongs to a single :class:`keyenv.client.KeyEnv` instance and is not
synchronized; share a client across threads only with external locking.
"""
from __future__ import annotations

import logging
import time
from typing import Callable, Dict, List, Optional, Tuple

from keyenv.metrics import keyenv_cache_events_total
from keyenv.models.secrets import SecretWithValue

logger = logging.getLogger(__name__)

CacheKey = Tuple[str, str]


class SecretsCache:
    """TTL cache of exported secrets per project environment.

    A TTL of zero (or less) disables the cache: :meth:`get` always misses and
    :meth:`set` stores nothing.
    """

    def __init__(self, ttl: float = 0, clock: Optional[Callable[[], float]] = None) -> None:
        self.ttl = ttl
        self._clock = clock or time.time
        self._entries: Dict[CacheKey, Tuple[List[SecretWithValue], float]] = {}

    @property
    def enabled(self) -> bool:
        return self.ttl > 0

    def get(self, project_id: str, environment: str) -> Optional[List[SecretWithValue]]:
        """Return the cached export for the pair, or None on a miss or expired entry."""
        if not self.enabled:
            return None
        entry = self._entries.get((project_id, environment))
        if entry is not None:
            secrets, expires_at = entry
            if self._clock() < expires_at:
                keyenv_cache_events_total.labels(event="hit").inc()
                logger.debug(
                    "Secrets cache hit",
                    extra={"log_type": "cache_hit", "project_id": project_id, "environment": environment}
                )
                return secrets
        keyenv_cache_events_total.labels(event="miss").inc()
        return None

    def set(self, project_id: str, environment: str, secrets: List[SecretWithValue]) -> None:
        """Store an export, replacing any previous entry for the pair."""
        if not self.enabled:
            return
        self._entries[(project_id, environment)] = (secrets, self._clock() + self.ttl)

    def invalidate(self, project_id: Optional[str] = None, environment: Optional[str] = None) -> None:
        """
        Remove cached exports.

        :param project_id: Only remove entries for this project
        :param environment: Only remove this environment's entry (requires project_id)
        :raises ValueError: If environment is given without project_id
        """
        if environment is not None and project_id is None:
            raise ValueError("environment requires project_id")

        if project_id is None:
            removed = len(self._entries)
            self._entries.clear()
        elif environment is None:
            keys = [key for key in self._entries if key[0] == project_id]
            for key in keys:
                del self._entries[key]
            removed = len(keys)
        else:
            removed = 1 if self._entries.pop((project_id, environment), None) is not None else 0

        if removed:
            keyenv_cache_events_total.labels(event="invalidate").inc(removed)
            logger.debug(
                "Secrets cache invalidated",
                extra={
                    "log_type": "cache_invalidate",
                    "project_id": project_id,
                    "environment": environment,
                    "removed": removed
                }
            )

    def __contains__(self, key: CacheKey) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)
