"""Local record of authorization nonces consumed through this facilitator.

The token contract's nonce bitmap is the authoritative replay guard; a
second submission of the same nonce reverts on-chain regardless of what is
stored here. This store only lets the facilitator reject known replays
without a round trip.
"""

from __future__ import annotations

import logging
import os
import threading
from abc import ABC, abstractmethod
from typing import Any

logger = logging.getLogger(__name__)


def nonce_key(payer: str, nonce: str) -> str:
    """Case-insensitive key for a ``(payer, nonce)`` pair."""
    return f"{payer.lower()}:{nonce.lower()}"


class NonceStore(ABC):
    """Abstract interface for consumed-nonce storage."""

    @abstractmethod
    async def has(self, payer: str, nonce: str) -> bool:
        """Return whether ``nonce`` is recorded as consumed for ``payer``."""

    @abstractmethod
    async def add(self, payer: str, nonce: str) -> None:
        """Record ``nonce`` as consumed for ``payer``."""


class InMemoryNonceStore(NonceStore):
    """Process-local nonce store.

    Safe to share between tasks and threads. Not shared across instances;
    use ``RedisNonceStore`` for multi-instance deployments.
    """

    def __init__(self) -> None:
        self._keys: set[str] = set()
        self._lock = threading.Lock()

    async def has(self, payer: str, nonce: str) -> bool:
        with self._lock:
            return nonce_key(payer, nonce) in self._keys

    async def add(self, payer: str, nonce: str) -> None:
        with self._lock:
            self._keys.add(nonce_key(payer, nonce))

    def __len__(self) -> int:
        with self._lock:
            return len(self._keys)


class RedisNonceStore(NonceStore):
    """Nonce store shared across facilitator instances through Redis.

    Usage:
        store = RedisNonceStore("redis://localhost:6379/0")
    """

    KEY_PREFIX = "x402:nonce:"
    # Authorizations are short-lived; keep records for a week
    DEFAULT_TTL = 7 * 24 * 3600

    def __init__(
        self,
        redis_url: str | None = None,
        ttl: int = DEFAULT_TTL,
        client: Any = None,
    ):
        self._redis_url = redis_url or os.getenv("REDIS_URL", "")
        self._ttl = ttl
        self._client = client

        if self._client is None and not self._redis_url:
            raise ValueError("RedisNonceStore requires a redis_url or REDIS_URL")

    async def _get_client(self) -> Any:
        if self._client is None:
            import redis.asyncio as redis

            self._client = redis.from_url(
                self._redis_url,
                decode_responses=True,
                socket_timeout=5,
                socket_connect_timeout=5,
            )
        return self._client

    def _key(self, payer: str, nonce: str) -> str:
        return f"{self.KEY_PREFIX}{nonce_key(payer, nonce)}"

    async def has(self, payer: str, nonce: str) -> bool:
        client = await self._get_client()
        return bool(await client.exists(self._key(payer, nonce)))

    async def add(self, payer: str, nonce: str) -> None:
        client = await self._get_client()
        await client.set(self._key(payer, nonce), "1", ex=self._ttl)

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None


def create_nonce_store(redis_url: str | None = None) -> NonceStore:
    """Return a Redis-backed store when ``redis_url`` is set, else an in-memory one."""
    if redis_url:
        logger.info("Using Redis nonce store")
        return RedisNonceStore(redis_url)
    logger.info("Using in-memory nonce store")
    return InMemoryNonceStore()
