"""
Aggregate report cache.

A single shared slot holds the latest AggregateReport under one well-known
key. Reads serve the slot until it expires or a ledger write invalidates it;
a miss recomputes the report and stores it again (last writer wins).

Known trade-offs:
- Concurrent misses are not coalesced; each one recomputes the report.
- A recompute that read the ledger before a write can store its (stale)
  result after that write's invalidation. The window is one recompute long
  and closes on the next write or TTL expiry.

Backend failures never fail a report request: reads fall back to a miss and
stores are skipped, so the report is computed directly from the ledger.
"""
import logging
import threading
import time
from typing import Callable, Dict, Optional, Tuple

import redis
from pydantic import ValidationError

from sector_stock.schemas.dashboard import AggregateReport

logger = logging.getLogger(__name__)


class CacheBackendError(Exception):
    """The cache store could not be reached or refused the command."""


class MemoryCacheBackend:
    """In-process key/value store with per-key expiry."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: Dict[str, Tuple[str, float]] = {}

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            value, expires_at = entry
            if self._clock() >= expires_at:
                del self._entries[key]
                return None
            return value

    def set(self, key: str, value: str, ttl: int) -> None:
        with self._lock:
            self._entries[key] = (value, self._clock() + ttl)

    def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def ping(self) -> bool:
        return True

    def close(self) -> None:
        with self._lock:
            self._entries.clear()


class RedisCacheBackend:
    """Redis-backed store; redis errors surface as CacheBackendError."""

    def __init__(self, client: redis.Redis):
        self.client = client

    @classmethod
    def from_url(cls, url: str) -> "RedisCacheBackend":
        client = redis.Redis.from_url(
            url,
            decode_responses=True,
            socket_timeout=2,
            socket_connect_timeout=2,
        )
        return cls(client)

    def get(self, key: str) -> Optional[str]:
        try:
            return self.client.get(key)
        except redis.RedisError as e:
            raise CacheBackendError(str(e)) from e

    def set(self, key: str, value: str, ttl: int) -> None:
        try:
            self.client.setex(key, ttl, value)
        except redis.RedisError as e:
            raise CacheBackendError(str(e)) from e

    def delete(self, key: str) -> None:
        try:
            self.client.delete(key)
        except redis.RedisError as e:
            raise CacheBackendError(str(e)) from e

    def ping(self) -> bool:
        try:
            return bool(self.client.ping())
        except redis.RedisError:
            return False

    def close(self) -> None:
        self.client.close()


class ReportCache:
    def __init__(self, backend, key: str = "admin_stats", ttl: int = 3600):
        self.backend = backend
        self.key = key
        self.ttl = ttl

    def get(self) -> Optional[AggregateReport]:
        """Return the cached report, or None on a miss."""
        try:
            raw = self.backend.get(self.key)
        except CacheBackendError as e:
            logger.warning(f"[cache] Unavailable on read, treating as miss: {e}")
            return None

        if raw is None:
            logger.info("[cache] Miss")
            return None

        try:
            report = AggregateReport.model_validate_json(raw)
        except ValidationError:
            logger.warning("[cache] Dropping undecodable report payload")
            self.invalidate()
            return None

        logger.info("[cache] Hit")
        return report

    def set(self, report: AggregateReport, ttl: Optional[int] = None) -> None:
        ttl = self.ttl if ttl is None else ttl
        try:
            self.backend.set(self.key, report.model_dump_json(), ttl)
        except CacheBackendError as e:
            logger.warning(f"[cache] Unavailable on write, report not cached: {e}")

    def invalidate(self) -> None:
        try:
            self.backend.delete(self.key)
            logger.info("[cache] Invalidated")
        except CacheBackendError as e:
            # Readers may see the previous report until TTL expiry.
            logger.error(f"[cache] Invalidation failed: {e}")

    def get_or_compute(self, compute: Callable[[], AggregateReport]) -> AggregateReport:
        """Serve the cached report, or compute, store and return a fresh one."""
        report = self.get()
        if report is not None:
            return report
        report = compute()
        self.set(report)
        return report

    def is_available(self) -> bool:
        return self.backend.ping()

    def close(self) -> None:
        self.backend.close()


def create_report_cache(settings) -> ReportCache:
    """Build the report cache configured by ``settings``."""
    if settings.REDIS_URL:
        logger.info("Report cache backed by Redis")
        backend = RedisCacheBackend.from_url(settings.REDIS_URL)
    else:
        logger.warning("REDIS_URL not set, report cache kept in process memory")
        backend = MemoryCacheBackend()
    return ReportCache(backend, key=settings.REPORT_CACHE_KEY, ttl=settings.REPORT_CACHE_TTL)
