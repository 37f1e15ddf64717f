"""Sliding-window, per-IP throttle for the credential forms (register, login)."""
from __future__ import annotations

import math
import threading
import time
from collections import defaultdict, deque
from typing import Deque, Dict

from fastapi import HTTPException, Request


class SlidingWindowLimiter:
    def __init__(self, clock=time.monotonic) -> None:
        self._clock = clock
        self._hits: Dict[str, Deque[float]] = defaultdict(deque)
        self._lock = threading.Lock()

    def hit(self, key: str, limit: int, window_seconds: int) -> float:
        """Record one attempt; return 0 when allowed, else seconds until the next slot frees up."""
        now = self._clock()
        with self._lock:
            hits = self._hits[key]
            while hits and now - hits[0] >= window_seconds:
                hits.popleft()
            if len(hits) >= limit:
                return window_seconds - (now - hits[0])
            hits.append(now)
            return 0.0

    def clear(self) -> None:
        with self._lock:
            self._hits.clear()


_limiter = SlidingWindowLimiter()


def client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client and request.client.host else "unknown"


def rate_limit_ip(request: Request, scope: str, *, limit: int, window_seconds: int) -> None:
    wait = _limiter.hit(f"{scope}:{client_ip(request)}", limit, window_seconds)
    if wait > 0:
        raise HTTPException(
            429,
            "Too many attempts. Please try again shortly.",
            headers={"Retry-After": str(max(1, math.ceil(wait)))},
        )


def reset_limits() -> None:
    _limiter.clear()
