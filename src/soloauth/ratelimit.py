# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""In-memory token-bucket rate limiter used to gate login attempts.

Any object with a compatible ``check(key) -> RateLimitInfo`` method can be
handed to ``Authenticator`` instead.
"""

from __future__ import annotations

import math
import threading
import time
from typing import Callable, Dict, Protocol

__all__ = ["RateLimiter", "RateLimitInfo", "AdmissionControl"]


class _Bucket:
    __slots__ = ("tokens", "last_refill")

    def __init__(self, capacity: float, now: float):
        self.tokens: float = capacity
        self.last_refill: float = now


class RateLimitInfo:
    """Outcome of one ``check()``."""

    __slots__ = ("allowed", "limit", "remaining", "reset_after")

    def __init__(self, allowed: bool, limit: int, remaining: int, reset_after: float):
        self.allowed = allowed
        self.limit = limit
        self.remaining = remaining
        self.reset_after = reset_after

    def headers(self) -> Dict[str, str]:
        h: Dict[str, str] = {
            "X-RateLimit-Limit": str(self.limit),
            "X-RateLimit-Remaining": str(self.remaining),
            "X-RateLimit-Reset": str(math.ceil(self.reset_after)),
        }
        if not self.allowed:
            h["Retry-After"] = str(max(1, math.ceil(self.reset_after)))
        return h


class AdmissionControl(Protocol):
    def check(self, key: str) -> RateLimitInfo: ...


class RateLimiter:
    """Token-bucket rate limiter keyed by client identity.

    Parameters
    ----------
    rate : float
        Tokens added per second.
    capacity : int
        Maximum burst size.
    """

    def __init__(self, rate: float, capacity: int = 1, *, clock: Callable[[], float] = time.monotonic):
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.rate = rate
        self.capacity = capacity
        self._clock = clock
        self._lock = threading.Lock()
        self._buckets: Dict[str, _Bucket] = {}

    def allow(self, key: str) -> bool:
        return self.check(key).allowed

    def check(self, key: str) -> RateLimitInfo:
        with self._lock:
            now = self._clock()
            bucket = self._buckets.get(key)
            if bucket is None:
                bucket = self._buckets[key] = _Bucket(self.capacity, now)

            elapsed = now - bucket.last_refill
            bucket.tokens = min(self.capacity, bucket.tokens + elapsed * self.rate)
            bucket.last_refill = now

            if bucket.tokens >= 1.0:
                bucket.tokens -= 1.0
                reset_after = (self.capacity - bucket.tokens) / self.rate if self.rate > 0 else 0
                return RateLimitInfo(True, self.capacity, int(bucket.tokens), reset_after)

            reset_after = (1.0 - bucket.tokens) / self.rate if self.rate > 0 else 1.0
            return RateLimitInfo(False, self.capacity, 0, reset_after)

    def cleanup(self, max_age: float = 3600.0) -> int:
        """Drop buckets idle for more than *max_age* seconds. Returns count removed."""
        with self._lock:
            now = self._clock()
            stale = [k for k, b in self._buckets.items() if now - b.last_refill > max_age]
            for k in stale:
                del self._buckets[k]
        return len(stale)

    def __len__(self) -> int:
        with self._lock:
            return len(self._buckets)
