# utils/rate_limit.py
import math
import threading
import time
from collections import deque
from typing import Deque, Dict, Optional

from fastapi import HTTPException, Request, status

from config import settings


class TooManyAttempts(HTTPException):
    def __init__(self, seconds: int):
        super().__init__(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail={
                "message": f"Too many login attempts. Please try again in {seconds} seconds.",
                "seconds_remaining": seconds,
            },
            headers={"Retry-After": str(seconds)},
        )


class AttemptLimiter:
    """Sliding-window counter of attempts per key, kept in process memory."""

    def __init__(self, max_attempts: int, window_seconds: int):
        self.max_attempts = max_attempts
        self.window_seconds = window_seconds
        self._hits: Dict[str, Deque[float]] = {}
        self._last_sweep = 0.0
        self._lock = threading.Lock()

    # Caller holds the lock
    def _prune(self, key: str, now: float) -> Deque[float]:
        hits = self._hits.get(key)
        if hits is None:
            return deque()
        while hits and now - hits[0] >= self.window_seconds:
            hits.popleft()
        if not hits:
            del self._hits[key]
        return hits

    def _sweep(self, now: float) -> None:
        if now - self._last_sweep < self.window_seconds:
            return
        self._last_sweep = now
        for key in list(self._hits):
            self._prune(key, now)

    def attempt(self, key: str, now: Optional[float] = None) -> int:
        """Check and record in one step.

        Returns 0 when the attempt was recorded, otherwise the seconds left
        before the key may try again. Refused attempts are not recorded.
        """
        now = time.monotonic() if now is None else now
        with self._lock:
            self._sweep(now)
            hits = self._prune(key, now)
            if len(hits) >= self.max_attempts:
                return max(1, math.ceil(self.window_seconds - (now - hits[0])))
            self._hits.setdefault(key, hits).append(now)
            return 0

    def reset(self) -> None:
        with self._lock:
            self._hits.clear()
            self._last_sweep = 0.0


auth_limiter = AttemptLimiter(
    max_attempts=settings.AUTH_RATE_LIMIT_ATTEMPTS,
    window_seconds=settings.AUTH_RATE_LIMIT_WINDOW_SECONDS,
)


# Dependency guarding the login and register endpoints
def auth_rate_limit(request: Request):
    key = "auth:" + (request.client.host if request.client else "unknown")
    seconds = auth_limiter.attempt(key)
    if seconds:
        raise TooManyAttempts(seconds)
