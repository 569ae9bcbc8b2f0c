from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Optional, Protocol

from redis import Redis

from quotewatch.config.settings import Settings
from quotewatch.schemas.quote import Quote

logger = logging.getLogger(__name__)


class QuoteCache(Protocol):
    def get(self, symbol: str) -> Optional[Quote]:
        ...

    def put(self, symbol: str, quote: Quote, ttl_seconds: float) -> None:
        ...


class MemoryQuoteCache:
    """In-process store; expired entries read as absent and are dropped lazily."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._entries: dict[str, tuple[Quote, float]] = {}
        self._lock = threading.Lock()

    def get(self, symbol: str) -> Optional[Quote]:
        with self._lock:
            entry = self._entries.get(symbol)
            if entry is None:
                return None
            quote, expires_at = entry
            if self._clock() >= expires_at:
                del self._entries[symbol]
                return None
            return quote

    def put(self, symbol: str, quote: Quote, ttl_seconds: float) -> None:
        expires_at = self._clock() + ttl_seconds
        with self._lock:
            self._entries[symbol] = (quote, expires_at)


class RedisQuoteCache:
    """Redis-backed store; expiry is delegated to the key TTL."""

    def __init__(self, client: Redis, prefix: str = "quotewatch:quote:"):
        self._client = client
        self._prefix = prefix

    @classmethod
    def from_url(cls, redis_url: str) -> "RedisQuoteCache":
        return cls(Redis.from_url(redis_url))

    def _key(self, symbol: str) -> str:
        return f"{self._prefix}{symbol}"

    def get(self, symbol: str) -> Optional[Quote]:
        try:
            raw = self._client.get(self._key(symbol))
        except Exception as exc:
            logger.warning("Redis read failed for %s: %s", symbol, exc)
            return None

        if not raw:
            return None

        try:
            return Quote.model_validate_json(raw)
        except ValueError:
            return None

    def put(self, symbol: str, quote: Quote, ttl_seconds: float) -> None:
        ttl_ms = max(1, int(ttl_seconds * 1000))
        try:
            self._client.psetex(self._key(symbol), ttl_ms, quote.model_dump_json())
        except Exception as exc:
            logger.warning("Redis write failed for %s: %s", symbol, exc)


def build_cache(config: Settings) -> QuoteCache:
    if config.cache_backend == "redis":
        return RedisQuoteCache.from_url(config.redis_url)
    return MemoryQuoteCache()
