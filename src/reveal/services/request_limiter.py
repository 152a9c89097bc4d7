"""Per-identity burst limiter applied in front of mutating routes.

This sits before the row-counting throttle gate and only smooths bursts.
Buckets live in process memory behind a lock unless ``REDIS_URL`` is set,
in which case a fixed one-minute window counter is kept in Redis so that
several workers share it. While Redis is unreachable the in-process buckets
take over, and Redis is tried again after a cooldown.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from threading import Lock
from typing import Any

import redis

from reveal.core.settings import settings

logger = logging.getLogger(__name__)

_WINDOW_SECONDS = 60
_SWEEP_INTERVAL_SECONDS = 300.0
_REDIS_RETRY_SECONDS = 30.0


@dataclass
class _Bucket:
    tokens: float
    updated_at: float


class RequestLimiter:
    """Token bucket per identity hash: `rate_per_minute` refill, `burst` capacity."""

    def __init__(
        self,
        rate_per_minute: int,
        burst: int,
        *,
        redis_client: Any | None = None,
        clock: Callable[[], float] = time.monotonic,
        redis_retry_seconds: float = _REDIS_RETRY_SECONDS,
        sweep_interval_seconds: float = _SWEEP_INTERVAL_SECONDS,
    ) -> None:
        self.rate_per_second = max(rate_per_minute, 0) / 60.0
        self.rate_per_minute = rate_per_minute
        self.burst = max(burst, 1)
        self._redis = redis_client
        self._redis_retry_seconds = redis_retry_seconds
        self._redis_down_until: float | None = None
        self._clock = clock
        self._buckets: dict[str, _Bucket] = {}
        self._lock = Lock()
        self._sweep_interval = sweep_interval_seconds
        self._last_sweep = clock()

    def allow(self, identity_hash: str) -> bool:
        """Consume one request for the identity; return False when exhausted."""
        if self._redis is not None and self._redis_available():
            try:
                allowed = self._allow_redis(identity_hash)
            except redis.RedisError as err:
                logger.warning(
                    "Redis unavailable for request limiting, retrying in %.0fs: %s",
                    self._redis_retry_seconds,
                    err,
                )
                self._redis_down_until = self._clock() + self._redis_retry_seconds
            else:
                self._redis_down_until = None
                return allowed
        return self._allow_local(identity_hash)

    def _redis_available(self) -> bool:
        return self._redis_down_until is None or self._clock() >= self._redis_down_until

    def _refilled(self, bucket: _Bucket, now: float) -> float:
        elapsed = max(now - bucket.updated_at, 0.0)
        return min(float(self.burst), bucket.tokens + elapsed * self.rate_per_second)

    def _allow_local(self, identity_hash: str) -> bool:
        now = self._clock()
        with self._lock:
            if now - self._last_sweep >= self._sweep_interval:
                self._sweep(now)

            bucket = self._buckets.get(identity_hash)
            if bucket is None:
                bucket = _Bucket(tokens=float(self.burst), updated_at=now)
                self._buckets[identity_hash] = bucket
            else:
                bucket.tokens = self._refilled(bucket, now)
                bucket.updated_at = now

            if bucket.tokens < 1.0:
                return False
            bucket.tokens -= 1.0
            return True

    def _sweep(self, now: float) -> None:
        # A full bucket is indistinguishable from a missing one. Caller holds the lock.
        idle = [
            key
            for key, bucket in self._buckets.items()
            if self._refilled(bucket, now) >= self.burst
        ]
        for key in idle:
            del self._buckets[key]
        self._last_sweep = now
        if idle:
            logger.debug("Evicted %d idle request-limit buckets", len(idle))

    def _allow_redis(self, identity_hash: str) -> bool:
        window = int(time.time()) // _WINDOW_SECONDS
        key = f"reqlimit:{identity_hash}:{window}"
        pipe = self._redis.pipeline()
        pipe.incr(key)
        pipe.expire(key, _WINDOW_SECONDS)
        count, _ = pipe.execute()
        return int(count) <= max(self.rate_per_minute, self.burst)

    def reset(self) -> None:
        """Forget all in-process buckets."""
        with self._lock:
            self._buckets.clear()


_LIMITER: RequestLimiter | None = None
_LIMITER_LOCK = Lock()


def get_request_limiter() -> RequestLimiter:
    """Return the process-wide request limiter."""
    global _LIMITER
    with _LIMITER_LOCK:
        if _LIMITER is None:
            client = redis.from_url(settings.redis_url) if settings.redis_url else None
            _LIMITER = RequestLimiter(
                settings.request_rate_per_minute,
                settings.request_burst,
                redis_client=client,
            )
        return _LIMITER
